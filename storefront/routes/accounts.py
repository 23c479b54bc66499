# STOREFRONT/backend/storefront/routes/accounts.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.ledger_service import LedgerService
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["ledger"])


def _check_category(storage: Storage, business_id: int, category_id: int):
    category = storage.get_account_category(category_id)
    if category is None or category.business_id != business_id:
        raise HTTPException(status_code=400, detail="Catégorie comptable invalide")
    return category


@router.get("", response_model=List[schemas.AccountOut])
def get_accounts(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_accounts_by_business(business.id)

@router.post("", response_model=schemas.AccountOut, status_code=201)
def create_account(
    payload: schemas.AccountCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Créer un compte ; le solde courant part du solde initial"""
    _check_category(storage, business.id, payload.category_id)
    account = storage.create_account(
        business_id=business.id,
        current_balance=payload.initial_balance,
        **payload.model_dump()
    )
    storage.commit()
    return storage.refresh(account)

@router.post("/sync-balances", response_model=List[schemas.AccountOut])
def sync_balances(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Recalcule le solde de tous les comptes à partir des transactions"""
    accounts = LedgerService(storage, business.id).sync_all_balances()
    storage.commit()
    return accounts

@router.get("/{account_id}", response_model=schemas.AccountOut)
def get_account(
    account_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_account(account_id), business.id, "Compte")

@router.patch("/{account_id}", response_model=schemas.AccountOut)
def update_account(
    account_id: int,
    payload: schemas.AccountUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    account = get_owned(storage.get_account(account_id), business.id, "Compte")
    patch = payload.model_dump(exclude_unset=True)
    if patch.get("category_id") is not None:
        _check_category(storage, business.id, patch["category_id"])

    storage.update_account(account, patch)
    # le solde initial a pu changer
    LedgerService(storage, business.id).refresh_balance(account)
    storage.commit()
    return storage.refresh(account)

@router.delete("/{account_id}", response_model=schemas.Message)
def delete_account(
    account_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    account = get_owned(storage.get_account(account_id), business.id, "Compte")
    if storage.get_transactions_by_account(account.id):
        raise HTTPException(status_code=400, detail="Impossible de supprimer un compte qui a des transactions")
    if any(account.id in (t.from_account_id, t.to_account_id) for t in storage.get_transfers_by_business(business.id)):
        raise HTTPException(status_code=400, detail="Impossible de supprimer un compte utilisé par un virement")

    storage.delete_account(account)
    storage.commit()
    logger.info(f"Compte {account_id} supprimé (business {business.id})")
    return {"message": "Compte supprimé avec succès"}
