# STOREFRONT/backend/storefront/routes/users.py : contacts (clients, fournisseurs, employés)

import logging
import secrets
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import List, Optional

from storefront.auth import get_current_business, hash_password
from storefront.config import PUBLIC_BASE_URL
from storefront.models import models as db_models
from storefront.models.models import utcnow
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])
vendors_router = APIRouter(prefix="/api/vendors", tags=["users"])
invitations_router = APIRouter(prefix="/api/invitations", tags=["users"])


def invitation_url(token: str) -> str:
    return f"{PUBLIC_BASE_URL}/register/invite/{token}"


def _pending_user(storage: Storage, token: str) -> db_models.User:
    user = storage.get_user_by_invitation_token(token)
    if user is None:
        raise HTTPException(status_code=404, detail="Invitation introuvable ou déjà utilisée")
    return user


# ---------- CRUD des contacts ----------
@router.get("", response_model=List[schemas.UserOut])
def get_users(
    type_: Optional[schemas.UserType] = Query(None, alias="type"),
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Contacts de l'entreprise, filtrables par type"""
    return storage.get_users_by_business(business.id, type_=type_)

@router.post("", response_model=schemas.UserOut, status_code=201)
def create_user(
    payload: schemas.UserCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    user = storage.create_user(business_id=business.id, **payload.model_dump())
    storage.commit()
    logger.info(f"Contact {user.id} ({user.type}) créé pour le business {business.id}")
    return storage.refresh(user)

@router.get("/{user_id}", response_model=schemas.UserOut)
def get_user(
    user_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_user(user_id), business.id, "Contact")

@router.patch("/{user_id}", response_model=schemas.UserOut)
def update_user(
    user_id: int,
    payload: schemas.UserUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    user = get_owned(storage.get_user(user_id), business.id, "Contact")
    storage.update_user(user, payload.model_dump(exclude_unset=True))
    storage.commit()
    return storage.refresh(user)

@router.delete("/{user_id}", response_model=schemas.Message)
def delete_user(
    user_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    user = get_owned(storage.get_user(user_id), business.id, "Contact")
    storage.delete_user(user)
    storage.commit()
    return {"message": "Contact supprimé avec succès"}

@router.post("/{user_id}/invitation", response_model=schemas.InvitationOut)
def create_invitation(
    user_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Nouveau jeton d'invitation ; l'ancien lien cesse de fonctionner"""
    user = get_owned(storage.get_user(user_id), business.id, "Contact")
    token = secrets.token_urlsafe(24)
    storage.update_user(user, {"invitation_token": token})
    storage.commit()
    logger.info(f"Invitation générée pour le contact {user.id}")
    return {"invitation_token": token, "invitation_url": invitation_url(token)}

@router.post("/{user_id}/balance", response_model=schemas.UserOut)
def adjust_balance(
    user_id: int,
    payload: schemas.BalanceAdjustment,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Créditer ou débiter le solde d'un contact, avec historique"""
    user = get_owned(storage.get_user(user_id), business.id, "Contact")
    delta = payload.amount if payload.type == "add" else -payload.amount
    balance = (user.balance or 0) + delta

    history = list(user.balance_history or [])
    history.append({
        "date": utcnow().isoformat(),
        "type": payload.type,
        "amount": payload.amount,
        "note": payload.note,
        "balanceAfter": balance,
    })
    storage.update_user(user, {"balance": balance, "balance_history": history})
    storage.commit()
    return storage.refresh(user)


# ---------- Fournisseurs ----------
@vendors_router.get("", response_model=List[schemas.UserOut])
def get_vendors(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_users_by_business(business.id, type_="vendor")

@vendors_router.post("", response_model=schemas.UserOut, status_code=201)
def create_vendor(
    payload: schemas.VendorCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    # le type est imposé, quel que soit le contenu de la requête
    vendor = storage.create_user(business_id=business.id, type="vendor", **payload.model_dump())
    storage.commit()
    return storage.refresh(vendor)


# ---------- Invitations (publiques) ----------
@invitations_router.get("/{token}", response_model=schemas.PendingInvitationOut)
def get_invitation(token: str, storage: Storage = Depends(get_storage)):
    return _pending_user(storage, token)

@invitations_router.post("/{token}/accept", response_model=schemas.Message)
def accept_invitation(
    token: str,
    payload: schemas.InvitationAccept,
    request: Request,
    storage: Storage = Depends(get_storage)
):
    """Le contact choisit son mot de passe ; le jeton devient inutilisable"""
    user = _pending_user(storage, token)

    logins = list(user.login_history or [])
    logins.append({
        "date": utcnow().isoformat(),
        "ipAddress": request.client.host if request.client else None,
        "userAgent": request.headers.get("user-agent"),
    })
    storage.update_user(user, {
        "password_hash": hash_password(payload.password),
        "invitation_token": None,
        "is_active": True,
        "login_history": logins,
    })
    storage.commit()
    logger.info(f"Invitation acceptée par le contact {user.id}")
    return {"message": "Invitation acceptée"}
