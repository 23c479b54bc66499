# STOREFRONT/backend/storefront/services/ledger_service.py : le service comptable

"""
Écritures comptables : plan de comptes système, soldes, comptabilisation
des commandes, statut des factures et historique des transactions.

Le solde courant d'un compte vaut :
    solde initial + somme des revenus (income) - somme des dépenses (expense)
Les transactions annulées (status "cancelled") ou de type "transfer" ne
modifient pas les soldes, pas plus que les virements (Transfer).
"""

import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import case, func

from storefront.constants import (
    ONLINE_SALES_ACCOUNT,
    ONLINE_SALES_DESCRIPTION,
    SALES_CATEGORY_NAME,
    SYSTEM_ACCOUNT_CATEGORIES,
    VERSION_CHANGE_TYPES,
)
from storefront.models import models
from storefront.models.models import utcnow
from storefront.schemas import schemas
from storefront.services.billing import calculate_bill_status, is_bill
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)


class LedgerError(ValueError):
    """Écriture impossible (catégorie manquante, compte invalide...)"""


class LedgerService:
    """Service comptable centralisé pour une entreprise"""

    def __init__(self, storage: Storage, business_id: int):
        self.storage = storage
        self.db = storage.db
        self.business_id = business_id

    # ---------- Plan de comptes ----------
    def seed_system_categories(self) -> List[models.AccountCategory]:
        """Crée les catégories système manquantes (idempotent)"""
        existing = {
            (c.name, c.type)
            for c in self.storage.get_account_categories_by_business(self.business_id)
            if c.is_system
        }
        created = []
        for category in SYSTEM_ACCOUNT_CATEGORIES:
            if (category["name"], category["type"]) in existing:
                continue
            created.append(self.storage.create_account_category(
                business_id=self.business_id,
                is_system=True,
                **category
            ))
        return created

    # ---------- Soldes ----------
    def calculate_balance(self, account: models.Account) -> int:
        signed_amount = case(
            (models.Transaction.type == "income", models.Transaction.amount),
            (models.Transaction.type == "expense", -models.Transaction.amount),
            else_=0
        )
        movements = self.db.query(
            func.coalesce(func.sum(signed_amount), 0)
        ).filter(
            models.Transaction.business_id == self.business_id,
            models.Transaction.account_id == account.id,
            models.Transaction.status != "cancelled"
        ).scalar()
        return (account.initial_balance or 0) + int(movements or 0)

    def refresh_balance(self, account: models.Account) -> int:
        """Recalcule et enregistre le solde courant du compte"""
        balance = self.calculate_balance(account)
        if balance != account.current_balance:
            logger.info(f"Compte {account.id}: solde {account.current_balance} -> {balance}")
        self.storage.update_account(account, {"current_balance": balance})
        return balance

    def refresh_balances(self, *account_ids: Optional[int]):
        for account_id in {a for a in account_ids if a is not None}:
            account = self.storage.get_account(account_id)
            if account is not None:
                self.refresh_balance(account)

    def sync_all_balances(self) -> List[models.Account]:
        accounts = self.storage.get_accounts_by_business(self.business_id)
        for account in accounts:
            self.refresh_balance(account)
        logger.info(f"Soldes synchronisés pour {len(accounts)} comptes (business {self.business_id})")
        return accounts

    # ---------- Commandes ----------
    def resolve_sales_account(self) -> models.Account:
        """
        Compte "Online Sales" de la catégorie de revenus "Sales Revenue",
        créé s'il n'existe pas encore.
        """
        categories = self.storage.get_account_categories_by_type(self.business_id, "income")
        sales_category = next((c for c in categories if c.name == SALES_CATEGORY_NAME), None)
        if sales_category is None:
            raise LedgerError(f"Catégorie de revenus '{SALES_CATEGORY_NAME}' introuvable")

        accounts = self.storage.get_accounts_by_category(sales_category.id)
        sales_account = next((a for a in accounts if a.name == ONLINE_SALES_ACCOUNT), None)
        if sales_account is None:
            sales_account = self.storage.create_account(
                business_id=self.business_id,
                category_id=sales_category.id,
                name=ONLINE_SALES_ACCOUNT,
                description=ONLINE_SALES_DESCRIPTION,
                initial_balance=0,
                current_balance=0,
                is_active=True
            )
            logger.info(f"Compte '{ONLINE_SALES_ACCOUNT}' créé pour le business {self.business_id}")
        return sales_account

    def post_order_revenue(self, order: models.Order) -> models.Transaction:
        """
        Comptabilise le revenu d'une commande : une transaction "income" du
        montant total, rattachée à la commande. L'appelant valide le tout en
        un seul commit ; toute erreur annule aussi la commande.
        """
        account = self.resolve_sales_account()
        transaction = self.storage.create_transaction(
            business_id=self.business_id,
            account_id=account.id,
            order_id=order.id,
            amount=order.total,
            type="income",
            category=SALES_CATEGORY_NAME,
            description=f"Order #{order.id}",
            date=utcnow(),
            status="final"
        )
        self.record_version(transaction, "create", f"Commande #{order.id} comptabilisée")
        self.refresh_balance(account)
        logger.info(f"Commande {order.id} comptabilisée: {order.total} sur le compte {account.id}")
        return transaction

    # ---------- Factures ----------
    def apply_bill_status(self, transaction: models.Transaction) -> models.Transaction:
        """Pour une facture (bill, invoice), le statut suit le paiement et la réception"""
        if not is_bill(transaction.document_type):
            return transaction
        status = calculate_bill_status(
            transaction.amount,
            transaction.payment_received,
            transaction.items,
            cancelled=transaction.status == "cancelled"
        )
        if status != transaction.status:
            logger.info(f"Facture {transaction.id}: statut {transaction.status} -> {status}")
            self.storage.update_transaction(transaction, {"status": status})
        return transaction

    # ---------- Historique des versions ----------
    def record_version(
        self,
        transaction: models.Transaction,
        change_type: str,
        description: Optional[str] = None
    ) -> models.TransactionVersion:
        """Enregistre l'état courant de la transaction comme nouvelle version"""
        if change_type not in VERSION_CHANGE_TYPES:
            raise LedgerError(f"Type de modification inconnu: {change_type}")
        snapshot = schemas.TransactionOut.model_validate(transaction).model_dump(mode="json", by_alias=True)
        return self.storage.create_transaction_version(
            transaction_id=transaction.id,
            business_id=self.business_id,
            version=self.storage.get_latest_version_number(transaction.id) + 1,
            change_type=change_type,
            change_description=description,
            data=snapshot
        )

    def restore_version(
        self,
        transaction: models.Transaction,
        version: models.TransactionVersion
    ) -> models.Transaction:
        """
        Rétablit la transaction dans l'état d'une version antérieure.

        L'état courant est d'abord sauvegardé (version "pre-restore"), puis
        l'instantané est appliqué et une version "restore" est ajoutée.
        Les soldes de l'ancien et du nouveau compte sont recalculés.
        """
        try:
            restored = schemas.TransactionUpdate.model_validate(version.data).model_dump(exclude_unset=True)
        except ValidationError as e:
            raise LedgerError(f"Version {version.version} illisible: {e.error_count()} erreur(s)")

        account_id = restored.get("account_id")
        account = self.storage.get_account(account_id) if account_id is not None else None
        if account is None or account.business_id != self.business_id:
            raise LedgerError(f"Le compte de la version {version.version} n'existe plus")

        self.record_version(transaction, "pre-restore", f"Sauvegarde avant restauration de la version {version.version}")
        previous_account_id = transaction.account_id
        self.storage.update_transaction(transaction, restored)
        self.apply_bill_status(transaction)
        self.refresh_balances(previous_account_id, transaction.account_id)
        self.record_version(transaction, "restore", f"Restauration de la version {version.version}")
        logger.info(f"Transaction {transaction.id} restaurée à la version {version.version}")
        return transaction
