# STOREFRONT/backend/storefront/routes/transfers.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transfers", tags=["ledger"])

@router.get("", response_model=List[schemas.TransferOut])
def get_transfers(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_transfers_by_business(business.id)

@router.post("", response_model=schemas.TransferOut, status_code=201)
def create_transfer(
    payload: schemas.TransferCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """
    Enregistrer un virement entre deux comptes de l'entreprise.
    Le virement est un simple enregistrement : les soldes ne bougent pas.
    """
    for account_id in (payload.from_account_id, payload.to_account_id):
        account = storage.get_account(account_id)
        if account is None or account.business_id != business.id:
            raise HTTPException(status_code=400, detail="Compte invalide")

    data = payload.model_dump()
    if data["date"] is None:
        del data["date"]
    transfer = storage.create_transfer(business_id=business.id, **data)
    storage.commit()
    logger.info(f"Virement {transfer.id}: {transfer.amount} du compte {transfer.from_account_id} vers {transfer.to_account_id}")
    return storage.refresh(transfer)
