# STOREFRONT/backend/storefront/routes/transactions.py

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.ledger_service import LedgerError, LedgerService
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["ledger"])


def _check_account(storage: Storage, business_id: int, account_id: int) -> db_models.Account:
    account = storage.get_account(account_id)
    if account is None or account.business_id != business_id:
        raise HTTPException(status_code=400, detail="Compte invalide")
    return account


def _check_order(storage: Storage, business_id: int, order_id: Optional[int]):
    if order_id is None:
        return
    order = storage.get_order(order_id)
    if order is None or order.business_id != business_id:
        raise HTTPException(status_code=400, detail="Commande invalide")


def _get_version(storage: Storage, business_id: int, transaction_id: int, version_id: int) -> db_models.TransactionVersion:
    version = storage.get_transaction_version(version_id)
    if version is not None and version.transaction_id != transaction_id:
        version = None
    return get_owned(version, business_id, "Version")


@router.get("", response_model=List[schemas.TransactionOut])
def get_transactions(
    account_id: Optional[int] = Query(None, alias="accountId"),
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Transactions de l'entreprise, filtrables par compte"""
    if account_id is not None:
        account = get_owned(storage.get_account(account_id), business.id, "Compte")
        return storage.get_transactions_by_account(account.id)
    return storage.get_transactions_by_business(business.id)

@router.post("", response_model=schemas.TransactionOut, status_code=201)
def create_transaction(
    payload: schemas.TransactionCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Créer une transaction et mettre à jour le solde du compte"""
    account = _check_account(storage, business.id, payload.account_id)
    _check_order(storage, business.id, payload.order_id)

    data = payload.model_dump()
    if data["date"] is None:
        del data["date"]
    transaction = storage.create_transaction(business_id=business.id, **data)
    ledger = LedgerService(storage, business.id)
    ledger.apply_bill_status(transaction)
    ledger.record_version(transaction, "create", "Création de la transaction")
    ledger.refresh_balance(account)
    storage.commit()
    logger.info(f"Transaction {transaction.id} ({transaction.type} {transaction.amount}) sur le compte {account.id}")
    return storage.refresh(transaction)

@router.get("/{transaction_id}", response_model=schemas.TransactionOut)
def get_transaction(
    transaction_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_transaction(transaction_id), business.id, "Transaction")

@router.patch("/{transaction_id}", response_model=schemas.TransactionOut)
def update_transaction(
    transaction_id: int,
    payload: schemas.TransactionUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    transaction = get_owned(storage.get_transaction(transaction_id), business.id, "Transaction")
    patch = payload.model_dump(exclude_unset=True)
    if patch.get("account_id") is not None:
        _check_account(storage, business.id, patch["account_id"])

    previous_account_id = transaction.account_id
    storage.update_transaction(transaction, patch)
    ledger = LedgerService(storage, business.id)
    ledger.apply_bill_status(transaction)
    ledger.record_version(transaction, "update", f"Modification : {', '.join(sorted(patch)) or 'aucun champ'}")
    # ancien et nouveau compte si la transaction a changé de compte
    ledger.refresh_balances(previous_account_id, transaction.account_id)
    storage.commit()
    return storage.refresh(transaction)

@router.delete("/{transaction_id}", response_model=schemas.Message)
def delete_transaction(
    transaction_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    transaction = get_owned(storage.get_transaction(transaction_id), business.id, "Transaction")
    account_id = transaction.account_id
    ledger = LedgerService(storage, business.id)
    # dernier instantané avant suppression, l'historique reste consultable
    ledger.record_version(transaction, "delete", "Suppression de la transaction")
    storage.delete_transaction(transaction)
    ledger.refresh_balances(account_id)
    storage.commit()
    return {"message": "Transaction supprimée avec succès"}


# ---------- HISTORIQUE DES VERSIONS ----------
@router.get("/{transaction_id}/versions", response_model=List[schemas.TransactionVersionOut])
def get_transaction_versions(
    transaction_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Versions de la transaction, la plus récente d'abord (aussi après suppression)"""
    versions = storage.get_transaction_versions(transaction_id)
    transaction = storage.get_transaction(transaction_id)
    # transaction supprimée : la propriété se lit sur ses versions
    get_owned(transaction or (versions[0] if versions else None), business.id, "Transaction")
    return versions

@router.patch("/{transaction_id}/versions/{version_id}/important", response_model=schemas.TransactionVersionOut)
def mark_version_important(
    transaction_id: int,
    version_id: int,
    payload: schemas.VersionImportance,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Marquer (ou démarquer) une version comme importante"""
    version = _get_version(storage, business.id, transaction_id, version_id)
    storage.update_transaction_version(version, {"important": payload.important})
    storage.commit()
    return storage.refresh(version)

@router.post("/{transaction_id}/versions/{version_id}/restore", response_model=schemas.TransactionOut)
def restore_transaction_version(
    transaction_id: int,
    version_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Rétablir la transaction dans l'état d'une version"""
    transaction = get_owned(storage.get_transaction(transaction_id), business.id, "Transaction")
    version = _get_version(storage, business.id, transaction_id, version_id)
    try:
        LedgerService(storage, business.id).restore_version(transaction, version)
    except LedgerError as e:
        storage.rollback()
        logger.error(f"Restauration refusée pour la transaction {transaction_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    storage.commit()
    return storage.refresh(transaction)
