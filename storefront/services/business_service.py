# STOREFRONT/backend/storefront/services/business_service.py

import logging
from fastapi import HTTPException

from storefront.constants import DEFAULT_PRODUCT_CATEGORY
from storefront.models import models
from storefront.services.ledger_service import LedgerService
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)


def ensure_default_product_category(storage: Storage, business_id: int) -> models.ProductCategory:
    """Catégorie produit "Other" par défaut, créée au besoin"""
    category = storage.get_default_product_category(business_id)
    if category is None:
        category = storage.create_product_category(
            business_id=business_id,
            name=DEFAULT_PRODUCT_CATEGORY,
            is_default=True
        )
    return category


def bootstrap_business(storage: Storage, business: models.Business):
    """Données initiales d'une nouvelle entreprise (plan de comptes, catégorie par défaut)"""
    LedgerService(storage, business.id).seed_system_categories()
    ensure_default_product_category(storage, business.id)
    logger.info(f"Données initiales créées pour le business {business.id}")


def get_owned(entity, business_id: int, label: str):
    """
    Vérifie qu'une entité existe et appartient à l'entreprise connectée.
    404 si absente, 403 si elle appartient à une autre entreprise.
    """
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{label} introuvable")
    if entity.business_id != business_id:
        raise HTTPException(status_code=403, detail=f"Vous n'avez pas accès à cette ressource ({label.lower()})")
    return entity
