# STOREFRONT/backend/storefront/routes/product_categories.py

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import ensure_default_product_category, get_owned
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/product-categories", tags=["products"])

@router.get("", response_model=List[schemas.ProductCategoryOut])
def get_product_categories(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    ensure_default_product_category(storage, business.id)
    storage.commit()
    return storage.get_product_categories_by_business(business.id)

@router.post("", response_model=schemas.ProductCategoryOut, status_code=201)
def create_product_category(
    payload: schemas.ProductCategoryCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    category = storage.create_product_category(
        business_id=business.id,
        name=payload.name,
        is_default=False
    )
    storage.commit()
    return storage.refresh(category)

@router.patch("/{category_id}", response_model=schemas.ProductCategoryOut)
def rename_product_category(
    category_id: int,
    payload: schemas.ProductCategoryCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Renommer une catégorie ; le libellé des produits suit"""
    category = get_owned(storage.get_product_category(category_id), business.id, "Catégorie")
    storage.update_product_category(category, {"name": payload.name})
    for product in storage.get_products_by_category(category.id):
        storage.update_product(product, {"category": payload.name})
    storage.commit()
    return storage.refresh(category)

@router.delete("/{category_id}", response_model=schemas.Message)
def delete_product_category(
    category_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """
    Supprimer une catégorie : ses produits passent dans la catégorie par
    défaut, dans la même transaction. La catégorie par défaut est protégée.
    """
    category = get_owned(storage.get_product_category(category_id), business.id, "Catégorie")
    if category.is_default:
        raise HTTPException(status_code=403, detail="La catégorie par défaut ne peut pas être supprimée")

    default = ensure_default_product_category(storage, business.id)
    products = storage.get_products_by_category(category.id)
    for product in products:
        storage.update_product(product, {"category_id": default.id, "category": default.name})

    storage.delete_product_category(category)
    storage.commit()
    logger.info(f"Catégorie {category_id} supprimée, {len(products)} produit(s) réaffecté(s)")
    return {"message": "Catégorie supprimée avec succès"}
