# STOREFRONT/backend/storefront/routes/account_categories.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/account-categories", tags=["ledger"])


def _editable(category: db_models.AccountCategory) -> db_models.AccountCategory:
    if category.is_system:
        raise HTTPException(status_code=403, detail="Les catégories système ne peuvent pas être modifiées")
    return category


@router.get("", response_model=List[schemas.AccountCategoryOut])
def get_account_categories(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_account_categories_by_business(business.id)

@router.post("", response_model=schemas.AccountCategoryOut, status_code=201)
def create_account_category(
    payload: schemas.AccountCategoryCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    category = storage.create_account_category(
        business_id=business.id,
        is_system=False,
        **payload.model_dump()
    )
    storage.commit()
    return storage.refresh(category)

@router.patch("/{category_id}", response_model=schemas.AccountCategoryOut)
def update_account_category(
    category_id: int,
    payload: schemas.AccountCategoryUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    category = _editable(get_owned(storage.get_account_category(category_id), business.id, "Catégorie"))
    storage.update_account_category(category, payload.model_dump(exclude_unset=True))
    storage.commit()
    return storage.refresh(category)

@router.delete("/{category_id}", response_model=schemas.Message)
def delete_account_category(
    category_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    category = _editable(get_owned(storage.get_account_category(category_id), business.id, "Catégorie"))
    if storage.get_accounts_by_category(category.id):
        raise HTTPException(status_code=400, detail="Impossible de supprimer une catégorie qui contient des comptes")

    storage.delete_account_category(category)
    storage.commit()
    logger.info(f"Catégorie comptable {category_id} supprimée (business {business.id})")
    return {"message": "Catégorie supprimée avec succès"}
