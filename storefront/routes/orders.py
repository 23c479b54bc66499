# STOREFRONT/backend/storefront/routes/orders.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.ledger_service import LedgerError, LedgerService
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])

@router.get("", response_model=List[schemas.OrderOut])
def get_orders(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_orders_by_business(business.id)

@router.post("", response_model=schemas.OrderOut, status_code=201)
def create_order(
    payload: schemas.OrderCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """
    Créer une commande et comptabiliser son revenu.

    La commande, la transaction "income" et le nouveau solde du compte
    "Online Sales" sont validés ensemble : si la comptabilisation échoue,
    la commande n'est pas enregistrée.
    """
    data = payload.model_dump()
    data["items"] = [item.model_dump(by_alias=True) for item in payload.items]
    order = storage.create_order(business_id=business.id, **data)
    try:
        LedgerService(storage, business.id).post_order_revenue(order)
    except LedgerError as e:
        storage.rollback()
        logger.error(f"Commande refusée pour le business {business.id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    storage.commit()
    logger.info(f"Commande {order.id} créée ({order.total}) pour le business {business.id}")
    return storage.refresh(order)

@router.get("/{order_id}", response_model=schemas.OrderOut)
def get_order(
    order_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_order(order_id), business.id, "Commande")

@router.patch("/{order_id}/status", response_model=schemas.OrderOut)
def update_order_status(
    order_id: int,
    payload: schemas.OrderStatusUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    order = get_owned(storage.get_order(order_id), business.id, "Commande")
    storage.update_order_status(order, payload.status)
    storage.commit()
    return storage.refresh(order)
