# STOREFRONT/backend/storefront/schemas/schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Dict, Any
from datetime import datetime

from storefront.services.catalog import find_duplicate_skus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
IMAGE_URL_PATTERN = r"^(https?://|data:image/)"

AccountType = Literal["asset", "liability", "equity", "income", "expense"]
TransactionType = Literal["income", "expense", "transfer"]
TransactionStatus = Literal[
    "draft", "final", "paid", "cancelled",
    # statuts déduits des factures (bill, invoice)
    "paid_received", "paid_partially_received", "partially_paid_received",
    "partially_paid_partially_received", "partially_paid", "received", "partially_received",
]
VersionChangeType = Literal["create", "update", "delete", "pre-restore", "restore"]
DocumentType = Literal["invoice", "receipt", "bill", "voucher"]
OrderStatus = Literal["pending", "processing", "shipped", "completed", "cancelled"]
UserType = Literal["customer", "vendor", "employee"]


class ApiModel(BaseModel):
    """Base commune : JSON en camelCase, entrée acceptée en camelCase ou snake_case"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Message(ApiModel):
    message: str


# ---------- AUTH / BUSINESS SCHEMAS ----------
class BusinessRegister(ApiModel):
    name: str = Field(min_length=1)
    username: str = Field(min_length=3)
    password: str = Field(min_length=6, max_length=72)
    email: str = Field(pattern=EMAIL_PATTERN)
    logo_url: Optional[str] = None

class LoginRequest(ApiModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6, max_length=72)

class BusinessOut(ApiModel):
    id: int
    name: str
    username: str
    email: str
    logo_url: Optional[str] = None
    chatbot_settings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

class BusinessUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    logo_url: Optional[str] = None
    chatbot_settings: Optional[Dict[str, Any]] = None


# ---------- PRODUCT SCHEMAS ----------
class VariantOption(ApiModel):
    group: str = Field(min_length=1)
    value: str = Field(min_length=1)

class ProductVariant(ApiModel):
    options: List[VariantOption] = []
    sku: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)  # None = prix de base du produit
    inventory: int = Field(0, ge=0)


def _as_list(value):
    # Un tag isolé est accepté et converti en liste
    if isinstance(value, str):
        return [value]
    return value


class ProductCreate(ApiModel):
    name: str = Field(min_length=2)
    description: str = Field(min_length=10)
    price: int = Field(ge=0)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    image_url: Optional[str] = Field(None, pattern=IMAGE_URL_PATTERN)
    additional_images: List[str] = []
    inventory: int = Field(0, ge=0)
    in_stock: bool = True
    has_variants: bool = False
    variants: List[ProductVariant] = []
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Dict[str, Any] = {}
    tags: List[str] = []
    is_featured: bool = False
    is_on_sale: bool = False
    sale_price: Optional[int] = Field(None, ge=0)

    @field_validator("tags", mode="before")
    @classmethod
    def tags_as_list(cls, value):
        return _as_list(value)

    @model_validator(mode="after")
    def check_variant_skus(self):
        duplicates = find_duplicate_skus(v.sku for v in self.variants)
        if duplicates:
            raise ValueError(f"Duplicate variant SKUs: {', '.join(duplicates)}")
        return self

class ProductUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[int] = Field(None, ge=0)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    image_url: Optional[str] = Field(None, pattern=IMAGE_URL_PATTERN)
    additional_images: Optional[List[str]] = None
    inventory: Optional[int] = Field(None, ge=0)
    in_stock: Optional[bool] = None
    has_variants: Optional[bool] = None
    variants: Optional[List[ProductVariant]] = None
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_on_sale: Optional[bool] = None
    sale_price: Optional[int] = Field(None, ge=0)

    @field_validator("tags", mode="before")
    @classmethod
    def tags_as_list(cls, value):
        return _as_list(value)

    @model_validator(mode="after")
    def check_variant_skus(self):
        duplicates = find_duplicate_skus(v.sku for v in (self.variants or []))
        if duplicates:
            raise ValueError(f"Duplicate variant SKUs: {', '.join(duplicates)}")
        return self

class ProductOut(ApiModel):
    id: int
    business_id: int
    name: str
    description: str
    price: int
    sku: Optional[str] = None
    category_id: Optional[int] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    additional_images: List[str] = []
    inventory: int
    in_stock: bool
    has_variants: bool
    variants: List[Dict[str, Any]] = []
    weight: Optional[float] = None
    dimensions: Dict[str, Any] = {}
    tags: List[str] = []
    is_featured: bool
    is_on_sale: bool
    sale_price: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductCategoryCreate(ApiModel):
    name: str = Field(min_length=1)

class ProductCategoryOut(ApiModel):
    id: int
    business_id: int
    name: str
    is_default: bool


class VariantGroup(ApiModel):
    name: str = Field(min_length=1)
    values: List[str] = Field(min_length=1)

class VariantCombinationRequest(ApiModel):
    groups: List[VariantGroup] = Field(min_length=1)
    existing: List[ProductVariant] = []

class VariantCombinationResponse(ApiModel):
    combinations: List[ProductVariant]
    duplicate_skus: List[str] = []


# ---------- WEBSITE SCHEMAS ----------
class TemplateOut(ApiModel):
    id: int
    name: str
    description: str
    preview_url: Optional[str] = None
    category: str
    is_popular: bool

class WebsiteCreate(ApiModel):
    template_id: int
    name: str = Field(min_length=1)
    customizations: Optional[Dict[str, Any]] = None
    is_active: bool = False

class WebsiteUpdate(ApiModel):
    template_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    customizations: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None

class WebsiteOut(ApiModel):
    id: int
    business_id: int
    template_id: int
    name: str
    customizations: Optional[Dict[str, Any]] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- ORDER SCHEMAS ----------
class OrderItem(ApiModel):
    product_id: int
    quantity: int = Field(ge=1)
    price: Optional[int] = Field(None, ge=0)

class OrderCreate(ApiModel):
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(pattern=EMAIL_PATTERN)
    total: int = Field(ge=0)
    status: OrderStatus = "pending"
    items: List[OrderItem] = Field(min_length=1)
    from_chatbot: bool = False

class OrderStatusUpdate(ApiModel):
    status: OrderStatus

class OrderOut(ApiModel):
    id: int
    business_id: int
    customer_name: str
    customer_email: str
    total: int
    status: str
    items: List[Dict[str, Any]]
    from_chatbot: bool
    created_at: Optional[datetime] = None


# ---------- LEDGER SCHEMAS ----------
class AccountCategoryCreate(ApiModel):
    name: str = Field(min_length=1)
    type: AccountType
    description: Optional[str] = None

class AccountCategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[AccountType] = None
    description: Optional[str] = None

class AccountCategoryOut(ApiModel):
    id: int
    business_id: int
    name: str
    type: str
    description: Optional[str] = None
    is_system: bool
    created_at: Optional[datetime] = None

class AccountCreate(ApiModel):
    category_id: int
    name: str = Field(min_length=1)
    description: Optional[str] = None
    initial_balance: int = 0
    is_active: bool = True

class AccountUpdate(ApiModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    initial_balance: Optional[int] = None
    is_active: Optional[bool] = None

class AccountOut(ApiModel):
    id: int
    business_id: int
    category_id: int
    name: str
    description: Optional[str] = None
    initial_balance: int
    current_balance: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

def _check_item_quantities(items):
    # quantités des articles : nombres positifs ou nuls quand elles sont fournies
    for item in items or []:
        for key in ("quantity", "quantityReceived", "quantity_received"):
            value = item.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ValueError(f"Invalid item {key}: {value!r}")
    return items


class TransactionCreate(ApiModel):
    account_id: int
    order_id: Optional[int] = None
    amount: int = Field(gt=0)
    type: TransactionType
    category: str = Field(min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    status: TransactionStatus = "draft"
    document_type: Optional[DocumentType] = None
    document_number: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    items: List[Dict[str, Any]] = []
    payment_received: int = Field(0, ge=0)

    @field_validator("items")
    @classmethod
    def check_items(cls, value):
        return _check_item_quantities(value)

class TransactionUpdate(ApiModel):
    account_id: Optional[int] = None
    amount: Optional[int] = Field(None, gt=0)
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[TransactionStatus] = None
    document_type: Optional[DocumentType] = None
    document_number: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    items: Optional[List[Dict[str, Any]]] = None
    payment_received: Optional[int] = Field(None, ge=0)

    @field_validator("items")
    @classmethod
    def check_items(cls, value):
        return _check_item_quantities(value)

class TransactionOut(ApiModel):
    id: int
    business_id: int
    account_id: int
    order_id: Optional[int] = None
    amount: int
    type: str
    category: str
    description: Optional[str] = None
    date: datetime
    reference: Optional[str] = None
    notes: Optional[str] = None
    status: str
    document_type: Optional[str] = None
    document_number: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    items: List[Dict[str, Any]] = []
    payment_received: int = 0
    created_at: Optional[datetime] = None

class TransactionVersionOut(ApiModel):
    id: int
    transaction_id: int
    business_id: int
    version: int
    change_type: VersionChangeType
    change_description: Optional[str] = None
    data: Dict[str, Any]
    important: bool
    created_at: Optional[datetime] = None

class VersionImportance(ApiModel):
    important: bool

class TransferCreate(ApiModel):
    from_account_id: int
    to_account_id: int
    amount: int = Field(gt=0)
    description: Optional[str] = None
    reference: Optional[str] = None
    date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_distinct_accounts(self):
        if self.from_account_id == self.to_account_id:
            raise ValueError("Source and destination accounts must differ")
        return self

class TransferOut(ApiModel):
    id: int
    business_id: int
    from_account_id: int
    to_account_id: int
    amount: int
    description: Optional[str] = None
    reference: Optional[str] = None
    date: datetime
    created_at: Optional[datetime] = None


# ---------- CONTACT (USER) SCHEMAS ----------
class VendorCreate(ApiModel):
    name: str = Field(min_length=1)
    business_name: Optional[str] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_image_url: Optional[str] = Field(None, pattern=IMAGE_URL_PATTERN)
    is_active: bool = True

class UserCreate(VendorCreate):
    type: UserType = "customer"

class UserUpdate(ApiModel):
    type: Optional[UserType] = None
    name: Optional[str] = Field(None, min_length=1)
    business_name: Optional[str] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_image_url: Optional[str] = Field(None, pattern=IMAGE_URL_PATTERN)
    is_active: Optional[bool] = None

class UserOut(ApiModel):
    id: int
    business_id: int
    type: str
    name: str
    business_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_active: bool
    balance: int
    balance_history: List[Dict[str, Any]] = []
    login_history: List[Dict[str, Any]] = []
    invitation_token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class BalanceAdjustment(ApiModel):
    amount: int = Field(gt=0)
    type: Literal["add", "deduct"]
    note: Optional[str] = None

class InvitationOut(ApiModel):
    invitation_token: str
    invitation_url: str

class PendingInvitationOut(ApiModel):
    id: int
    type: str
    name: str
    email: Optional[str] = None
    business_name: Optional[str] = None

class InvitationAccept(ApiModel):
    password: str = Field(min_length=6, max_length=72)


# ---------- CHATBOT SCHEMAS ----------
class ConversationMessage(ApiModel):
    role: Literal["user", "assistant", "system"]
    content: str = Field(min_length=1)
    timestamp: Optional[datetime] = None

class ConversationCreate(ApiModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    messages: List[ConversationMessage] = []

class ConversationUpdate(ApiModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    messages: List[ConversationMessage] = []  # ajoutés à la suite, jamais remplacés

class ConversationOut(ApiModel):
    id: int
    business_id: int
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    messages: List[Dict[str, Any]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ChatRequest(ApiModel):
    message: str = Field(min_length=1)
    conversation_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)

class ChatResponse(ApiModel):
    conversation_id: int
    message: Dict[str, Any]

class WidgetOut(ApiModel):
    embed_code: str
