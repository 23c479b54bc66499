# STOREFRONT/backend/storefront/routes/auth.py

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from typing import Optional

from storefront.auth import (
    SessionStore,
    clear_session_cookie,
    get_current_business,
    get_session_id,
    get_session_store,
    hash_password,
    set_session_cookie,
    verify_password,
)
from storefront.models import models as db_models
from storefront.schemas.schemas import BusinessOut, BusinessRegister, LoginRequest, Message
from storefront.services.business_service import bootstrap_business
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=BusinessOut, status_code=201)
def register(
    payload: BusinessRegister,
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store)
):
    """Inscription d'une entreprise, ouvre directement une session"""
    if storage.get_business_by_username(payload.username):
        raise HTTPException(status_code=400, detail="Nom d'utilisateur déjà utilisé")
    if storage.get_business_by_email(payload.email):
        raise HTTPException(status_code=400, detail="Email déjà utilisé")

    business = storage.create_business(
        name=payload.name,
        username=payload.username,
        email=payload.email,
        logo_url=payload.logo_url,
        password_hash=hash_password(payload.password)
    )
    bootstrap_business(storage, business)
    session = sessions.create(business.id, user_agent=request.headers.get("user-agent"))
    storage.commit()
    storage.refresh(business)

    set_session_cookie(response, session.id)
    logger.info(f"Nouveau business inscrit: {business.username} (id={business.id})")
    return business

@router.post("/login", response_model=BusinessOut)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store)
):
    business = storage.get_business_by_username(payload.username)
    if not business or not verify_password(payload.password, business.password_hash):
        logger.warning(f"Échec de connexion pour '{payload.username}'")
        raise HTTPException(status_code=401, detail="Identifiants invalides")

    session = sessions.create(business.id, user_agent=request.headers.get("user-agent"))
    storage.commit()

    set_session_cookie(response, session.id)
    return business

@router.post("/logout", response_model=Message)
def logout(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store)
):
    if session_id:
        sessions.destroy(session_id)
        storage.commit()
    clear_session_cookie(response)
    return {"message": "Déconnexion réussie"}

@router.get("/me", response_model=BusinessOut)
def me(business: db_models.Business = Depends(get_current_business)):
    """Entreprise associée à la session courante"""
    return business
