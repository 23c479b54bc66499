# STOREFRONT/backend/storefront/services/storage.py : accès aux données

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from storefront.database import get_db
from storefront.models import models


class Storage:
    """
    Façade d'accès aux données : un CRUD typé par entité.

    Aucune vérification de propriété ici, c'est le rôle des routes.
    Les écritures font un flush() et laissent le commit à l'appelant, ce qui
    permet de regrouper plusieurs écritures dans une seule transaction.
    Les erreurs de base de données remontent telles quelles.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- helpers ----------
    def _add(self, entity):
        self.db.add(entity)
        self.db.flush()
        return entity

    def _apply(self, entity, patch: Dict[str, Any]):
        columns = entity.__table__.columns
        for key, value in patch.items():
            # null explicite ignoré sur les colonnes obligatoires
            if value is None and key in columns and not columns[key].nullable:
                continue
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def _delete(self, entity) -> bool:
        self.db.delete(entity)
        self.db.flush()
        return True

    # ---------- Business ----------
    def get_business(self, business_id: int) -> Optional[models.Business]:
        return self.db.get(models.Business, business_id)

    def get_business_by_username(self, username: str) -> Optional[models.Business]:
        return self.db.query(models.Business).filter(models.Business.username == username).first()

    def get_business_by_email(self, email: str) -> Optional[models.Business]:
        return self.db.query(models.Business).filter(models.Business.email == email).first()

    def create_business(self, **fields) -> models.Business:
        return self._add(models.Business(**fields))

    def update_business(self, business, patch) -> models.Business:
        return self._apply(business, patch)

    # ---------- Product categories ----------
    def get_product_category(self, category_id: int) -> Optional[models.ProductCategory]:
        return self.db.get(models.ProductCategory, category_id)

    def get_product_categories_by_business(self, business_id: int) -> List[models.ProductCategory]:
        return self.db.query(models.ProductCategory).filter(
            models.ProductCategory.business_id == business_id
        ).order_by(models.ProductCategory.id).all()

    def get_default_product_category(self, business_id: int) -> Optional[models.ProductCategory]:
        return self.db.query(models.ProductCategory).filter(
            models.ProductCategory.business_id == business_id,
            models.ProductCategory.is_default.is_(True)
        ).first()

    def create_product_category(self, **fields) -> models.ProductCategory:
        return self._add(models.ProductCategory(**fields))

    def update_product_category(self, category, patch) -> models.ProductCategory:
        return self._apply(category, patch)

    def delete_product_category(self, category) -> bool:
        return self._delete(category)

    # ---------- Products ----------
    def get_product(self, product_id: int) -> Optional[models.Product]:
        return self.db.get(models.Product, product_id)

    def get_products_by_business(self, business_id: int) -> List[models.Product]:
        return self.db.query(models.Product).filter(
            models.Product.business_id == business_id
        ).order_by(models.Product.id).all()

    def get_products_by_category(self, category_id: int) -> List[models.Product]:
        return self.db.query(models.Product).filter(models.Product.category_id == category_id).all()

    def create_product(self, **fields) -> models.Product:
        return self._add(models.Product(**fields))

    def update_product(self, product, patch) -> models.Product:
        return self._apply(product, patch)

    def delete_product(self, product) -> bool:
        return self._delete(product)

    # ---------- Templates & websites ----------
    def get_template(self, template_id: int) -> Optional[models.Template]:
        return self.db.get(models.Template, template_id)

    def get_all_templates(self) -> List[models.Template]:
        return self.db.query(models.Template).order_by(models.Template.id).all()

    def create_template(self, **fields) -> models.Template:
        return self._add(models.Template(**fields))

    def get_website(self, website_id: int) -> Optional[models.Website]:
        return self.db.get(models.Website, website_id)

    def get_websites_by_business(self, business_id: int) -> List[models.Website]:
        return self.db.query(models.Website).filter(
            models.Website.business_id == business_id
        ).order_by(models.Website.id).all()

    def create_website(self, **fields) -> models.Website:
        return self._add(models.Website(**fields))

    def update_website(self, website, patch) -> models.Website:
        return self._apply(website, patch)

    # ---------- Orders ----------
    def get_order(self, order_id: int) -> Optional[models.Order]:
        return self.db.get(models.Order, order_id)

    def get_orders_by_business(self, business_id: int) -> List[models.Order]:
        return self.db.query(models.Order).filter(
            models.Order.business_id == business_id
        ).order_by(models.Order.created_at.desc(), models.Order.id.desc()).all()

    def create_order(self, **fields) -> models.Order:
        return self._add(models.Order(**fields))

    def update_order_status(self, order, status: str) -> models.Order:
        return self._apply(order, {"status": status})

    # ---------- Account categories ----------
    def get_account_category(self, category_id: int) -> Optional[models.AccountCategory]:
        return self.db.get(models.AccountCategory, category_id)

    def get_account_categories_by_business(self, business_id: int) -> List[models.AccountCategory]:
        return self.db.query(models.AccountCategory).filter(
            models.AccountCategory.business_id == business_id
        ).order_by(models.AccountCategory.id).all()

    def get_account_categories_by_type(self, business_id: int, type_: str) -> List[models.AccountCategory]:
        return self.db.query(models.AccountCategory).filter(
            models.AccountCategory.business_id == business_id,
            models.AccountCategory.type == type_
        ).order_by(models.AccountCategory.id).all()

    def create_account_category(self, **fields) -> models.AccountCategory:
        return self._add(models.AccountCategory(**fields))

    def update_account_category(self, category, patch) -> models.AccountCategory:
        return self._apply(category, patch)

    def delete_account_category(self, category) -> bool:
        return self._delete(category)

    # ---------- Accounts ----------
    def get_account(self, account_id: int) -> Optional[models.Account]:
        return self.db.get(models.Account, account_id)

    def get_accounts_by_business(self, business_id: int) -> List[models.Account]:
        return self.db.query(models.Account).filter(
            models.Account.business_id == business_id
        ).order_by(models.Account.id).all()

    def get_accounts_by_category(self, category_id: int) -> List[models.Account]:
        return self.db.query(models.Account).filter(
            models.Account.category_id == category_id
        ).order_by(models.Account.id).all()

    def create_account(self, **fields) -> models.Account:
        return self._add(models.Account(**fields))

    def update_account(self, account, patch) -> models.Account:
        return self._apply(account, patch)

    def delete_account(self, account) -> bool:
        return self._delete(account)

    # ---------- Transactions ----------
    def get_transaction(self, transaction_id: int) -> Optional[models.Transaction]:
        return self.db.get(models.Transaction, transaction_id)

    def get_transactions_by_business(self, business_id: int) -> List[models.Transaction]:
        return self.db.query(models.Transaction).filter(
            models.Transaction.business_id == business_id
        ).order_by(models.Transaction.date.desc(), models.Transaction.id.desc()).all()

    def get_transactions_by_account(self, account_id: int) -> List[models.Transaction]:
        return self.db.query(models.Transaction).filter(
            models.Transaction.account_id == account_id
        ).order_by(models.Transaction.date.desc(), models.Transaction.id.desc()).all()

    def create_transaction(self, **fields) -> models.Transaction:
        return self._add(models.Transaction(**fields))

    def update_transaction(self, transaction, patch) -> models.Transaction:
        return self._apply(transaction, patch)

    def delete_transaction(self, transaction) -> bool:
        return self._delete(transaction)

    # ---------- Versions de transactions ----------
    def get_transaction_version(self, version_id: int) -> Optional[models.TransactionVersion]:
        return self.db.get(models.TransactionVersion, version_id)

    def get_transaction_versions(self, transaction_id: int) -> List[models.TransactionVersion]:
        return self.db.query(models.TransactionVersion).filter(
            models.TransactionVersion.transaction_id == transaction_id
        ).order_by(models.TransactionVersion.version.desc()).all()

    def get_latest_version_number(self, transaction_id: int) -> int:
        latest = self.db.query(func.max(models.TransactionVersion.version)).filter(
            models.TransactionVersion.transaction_id == transaction_id
        ).scalar()
        return latest or 0

    def create_transaction_version(self, **fields) -> models.TransactionVersion:
        return self._add(models.TransactionVersion(**fields))

    def update_transaction_version(self, version, patch) -> models.TransactionVersion:
        return self._apply(version, patch)

    # ---------- Transfers ----------
    def get_transfers_by_business(self, business_id: int) -> List[models.Transfer]:
        return self.db.query(models.Transfer).filter(
            models.Transfer.business_id == business_id
        ).order_by(models.Transfer.date.desc(), models.Transfer.id.desc()).all()

    def create_transfer(self, **fields) -> models.Transfer:
        return self._add(models.Transfer(**fields))

    # ---------- Users (contacts) ----------
    def get_user(self, user_id: int) -> Optional[models.User]:
        return self.db.get(models.User, user_id)

    def get_users_by_business(self, business_id: int, type_: Optional[str] = None) -> List[models.User]:
        query = self.db.query(models.User).filter(models.User.business_id == business_id)
        if type_:
            query = query.filter(models.User.type == type_)
        return query.order_by(models.User.id).all()

    def get_user_by_invitation_token(self, token: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.invitation_token == token).first()

    def create_user(self, **fields) -> models.User:
        return self._add(models.User(**fields))

    def update_user(self, user, patch) -> models.User:
        return self._apply(user, patch)

    def delete_user(self, user) -> bool:
        return self._delete(user)

    # ---------- Conversations ----------
    def get_conversation(self, conversation_id: int) -> Optional[models.Conversation]:
        return self.db.get(models.Conversation, conversation_id)

    def get_conversations_by_business(self, business_id: int) -> List[models.Conversation]:
        return self.db.query(models.Conversation).filter(
            models.Conversation.business_id == business_id
        ).order_by(models.Conversation.updated_at.desc(), models.Conversation.id.desc()).all()

    def create_conversation(self, **fields) -> models.Conversation:
        return self._add(models.Conversation(**fields))

    def update_conversation(self, conversation, patch) -> models.Conversation:
        return self._apply(conversation, patch)

    # ---------- Transaction de base ----------
    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, entity):
        self.db.refresh(entity)
        return entity


def get_storage(db: Session = Depends(get_db)) -> Storage:
    """Dépendance FastAPI : façade liée à la session de la requête"""
    return Storage(db)
