# STOREFRONT/backend/storefront/routes/products.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import ensure_default_product_category, get_owned
from storefront.services.catalog import apply_stock_rule, find_duplicate_skus, generate_variant_combinations
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


def _resolve_category(storage: Storage, business_id: int, category_id: Optional[int]) -> db_models.ProductCategory:
    """Catégorie demandée (doit appartenir à l'entreprise) ou catégorie par défaut"""
    if category_id is None:
        return ensure_default_product_category(storage, business_id)
    category = storage.get_product_category(category_id)
    if category is None or category.business_id != business_id:
        raise HTTPException(status_code=400, detail="Catégorie de produit invalide")
    return category


@router.get("", response_model=List[schemas.ProductOut])
def get_products(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_products_by_business(business.id)

@router.post("", response_model=schemas.ProductOut, status_code=201)
def create_product(
    payload: schemas.ProductCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Créer un produit ; inStock est toujours déduit de l'inventaire (0 par défaut)"""
    data = apply_stock_rule(payload.model_dump())

    category = _resolve_category(storage, business.id, data.pop("category_id"))
    product = storage.create_product(
        **data,
        business_id=business.id,
        category_id=category.id,
        category=category.name
    )
    storage.commit()
    logger.info(f"Produit {product.id} créé pour le business {business.id}")
    return storage.refresh(product)

@router.post("/variant-combinations", response_model=schemas.VariantCombinationResponse)
def variant_combinations(
    payload: schemas.VariantCombinationRequest,
    business: db_models.Business = Depends(get_current_business)
):
    """Toutes les combinaisons d'options (ex: Taille x Couleur) dans un ordre déterministe"""
    combinations = generate_variant_combinations(
        [(group.name, group.values) for group in payload.groups],
        existing=[variant.model_dump() for variant in payload.existing]
    )
    return {
        "combinations": combinations,
        "duplicate_skus": find_duplicate_skus(c["sku"] for c in combinations),
    }

@router.get("/{product_id}", response_model=schemas.ProductOut)
def get_product(
    product_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_product(product_id), business.id, "Produit")

@router.patch("/{product_id}", response_model=schemas.ProductOut)
def update_product(
    product_id: int,
    payload: schemas.ProductUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    product = get_owned(storage.get_product(product_id), business.id, "Produit")

    patch = apply_stock_rule(payload.model_dump(exclude_unset=True))
    if "category_id" in patch:
        category = _resolve_category(storage, business.id, patch["category_id"])
        patch["category_id"] = category.id
        patch["category"] = category.name

    storage.update_product(product, patch)
    storage.commit()
    return storage.refresh(product)

@router.delete("/{product_id}", response_model=schemas.Message)
def delete_product(
    product_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    product = get_owned(storage.get_product(product_id), business.id, "Produit")
    storage.delete_product(product)
    storage.commit()
    return {"message": "Produit supprimé avec succès"}
