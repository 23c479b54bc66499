# STOREFRONT/backend/storefront/routes/business.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/business", tags=["business"])

@router.get("", response_model=schemas.BusinessOut)
def get_business(business: db_models.Business = Depends(get_current_business)):
    """Profil de l'entreprise connectée (sans mot de passe)"""
    return business

@router.patch("", response_model=schemas.BusinessOut)
def update_business(
    payload: schemas.BusinessUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Mettre à jour le profil (nom, email, logo, réglages du chatbot)"""
    patch = payload.model_dump(exclude_unset=True)

    if patch.get("email") and patch["email"] != business.email:
        existing = storage.get_business_by_email(patch["email"])
        if existing and existing.id != business.id:
            raise HTTPException(status_code=400, detail="Email déjà utilisé")

    storage.update_business(business, patch)
    storage.commit()
    return storage.refresh(business)
