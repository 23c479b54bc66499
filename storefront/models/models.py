# STOREFRONT/backend/storefront/models/models.py

from sqlalchemy import Column, Integer, String, Float, Boolean, Text, ForeignKey, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from storefront.database import Base


def utcnow():
    """Horodatage UTC naïf (SQLite ne conserve pas le fuseau)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Business(Base):
    __tablename__ = "businesses"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    logo_url = Column(String, nullable=True)
    chatbot_settings = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    sessions = relationship("AuthSession", back_populates="business", cascade="all, delete-orphan")


class AuthSession(Base):
    """Session serveur référencée par le cookie de session"""
    __tablename__ = "auth_sessions"
    id = Column(String(64), primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    expires_at = Column(DateTime, nullable=False, index=True)

    business = relationship("Business", back_populates="sessions")


class ProductCategory(Base):
    __tablename__ = "product_categories"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # en centimes
    sku = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("product_categories.id"), nullable=True, index=True)
    category = Column(String, nullable=True)  # libellé, suit le nom de la catégorie
    image_url = Column(String, nullable=True)
    additional_images = Column(JSON, default=list, nullable=False)
    inventory = Column(Integer, default=0, nullable=False)
    in_stock = Column(Boolean, default=True, nullable=False)
    has_variants = Column(Boolean, default=False, nullable=False)
    variants = Column(JSON, default=list, nullable=False)
    weight = Column(Float, nullable=True)  # en kg
    dimensions = Column(JSON, default=dict, nullable=False)  # { length, width, height } en cm
    tags = Column(JSON, default=list, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_on_sale = Column(Boolean, default=False, nullable=False)
    sale_price = Column(Integer, nullable=True)  # en centimes
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Template(Base):
    __tablename__ = "templates"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    preview_url = Column(String, nullable=True)
    category = Column(String, nullable=False)
    is_popular = Column(Boolean, default=False, nullable=False)


class Website(Base):
    __tablename__ = "websites"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    template_id = Column(Integer, ForeignKey("templates.id"), nullable=False)
    name = Column(String, nullable=False)
    customizations = Column(JSON, nullable=True)  # couleurs, contenu, mise en page
    is_active = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    total = Column(Integer, nullable=False)  # en centimes
    status = Column(String, nullable=False, default="pending")
    items = Column(JSON, nullable=False)  # [{productId, quantity, price}]
    from_chatbot = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class AccountCategory(Base):
    __tablename__ = "account_categories"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # asset, liability, equity, income, expense
    description = Column(Text, nullable=True)
    is_system = Column(Boolean, default=False, nullable=False)  # protégée contre modification/suppression
    created_at = Column(DateTime, default=utcnow)

    accounts = relationship("Account", back_populates="category")


class Account(Base):
    __tablename__ = "accounts"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("account_categories.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    initial_balance = Column(Integer, default=0, nullable=False)  # en centimes
    current_balance = Column(Integer, default=0, nullable=False)  # en centimes
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    category = relationship("AccountCategory", back_populates="accounts")


class Transaction(Base):
    __tablename__ = "transactions"
    # identifiants jamais réutilisés : l'historique des versions y est rattaché
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    amount = Column(Integer, nullable=False)  # en centimes
    type = Column(String, nullable=False)  # income, expense, transfer
    category = Column(String, nullable=False)  # libellé libre ("Rent", "Sales Revenue"...)
    description = Column(Text, nullable=True)
    date = Column(DateTime, default=utcnow, nullable=False)
    reference = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String, default="draft", nullable=False)
    document_type = Column(String, nullable=True)
    document_number = Column(String, nullable=True)
    contact_name = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    items = Column(JSON, default=list, nullable=False)
    payment_received = Column(Integer, default=0, nullable=False)  # en centimes
    created_at = Column(DateTime, default=utcnow)


class TransactionVersion(Base):
    """Instantané d'une transaction à chaque écriture (historique et restauration)"""
    __tablename__ = "transaction_versions"
    __table_args__ = (UniqueConstraint("transaction_id", "version"),)
    id = Column(Integer, primary_key=True)
    # pas de clé étrangère : l'historique survit à la suppression de la transaction
    transaction_id = Column(Integer, nullable=False, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    change_type = Column(String, nullable=False)  # create, update, delete, pre-restore, restore
    change_description = Column(Text, nullable=True)
    data = Column(JSON, nullable=False)  # TransactionOut sérialisée (camelCase)
    important = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class Transfer(Base):
    __tablename__ = "transfers"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    from_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    to_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    amount = Column(Integer, nullable=False)  # en centimes
    description = Column(Text, nullable=True)
    reference = Column(String, nullable=True)
    date = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class User(Base):
    """Contact de l'entreprise (client, fournisseur, employé), distinct de Business"""
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    type = Column(String, nullable=False, default="customer")
    name = Column(String, nullable=False)
    business_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    profile_image_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    balance = Column(Integer, default=0, nullable=False)  # en centimes
    balance_history = Column(JSON, default=list, nullable=False)
    login_history = Column(JSON, default=list, nullable=False)
    invitation_token = Column(String, unique=True, nullable=True, index=True)
    password_hash = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Conversation(Base):
    __tablename__ = "conversations"
    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    messages = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
