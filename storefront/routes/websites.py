# STOREFRONT/backend/storefront/routes/websites.py

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.storage import Storage, get_storage

templates_router = APIRouter(prefix="/api/templates", tags=["websites"])
router = APIRouter(prefix="/api/websites", tags=["websites"])


# ---------- Modèles de sites (publics) ----------
@templates_router.get("", response_model=List[schemas.TemplateOut])
def get_templates(storage: Storage = Depends(get_storage)):
    return storage.get_all_templates()

@templates_router.get("/{template_id}", response_model=schemas.TemplateOut)
def get_template(template_id: int, storage: Storage = Depends(get_storage)):
    template = storage.get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Modèle introuvable")
    return template


def _check_template(storage: Storage, template_id: int):
    if storage.get_template(template_id) is None:
        raise HTTPException(status_code=404, detail="Modèle introuvable")


# ---------- Sites de l'entreprise ----------
@router.get("", response_model=List[schemas.WebsiteOut])
def get_websites(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_websites_by_business(business.id)

@router.post("", response_model=schemas.WebsiteOut, status_code=201)
def create_website(
    payload: schemas.WebsiteCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    _check_template(storage, payload.template_id)
    website = storage.create_website(business_id=business.id, **payload.model_dump())
    storage.commit()
    return storage.refresh(website)

@router.get("/{website_id}", response_model=schemas.WebsiteOut)
def get_website(
    website_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_website(website_id), business.id, "Site")

@router.patch("/{website_id}", response_model=schemas.WebsiteOut)
def update_website(
    website_id: int,
    payload: schemas.WebsiteUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    website = get_owned(storage.get_website(website_id), business.id, "Site")
    patch = payload.model_dump(exclude_unset=True)
    if patch.get("template_id") is not None:
        _check_template(storage, patch["template_id"])

    storage.update_website(website, patch)
    storage.commit()
    return storage.refresh(website)
