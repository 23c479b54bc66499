# STOREFRONT/backend/storefront/constants.py

# Constantes pour l'application

# Types de catégories comptables
ACCOUNT_TYPES = ["asset", "liability", "equity", "income", "expense"]

# Catégories système créées à l'inscription (non modifiables, non supprimables)
SYSTEM_ACCOUNT_CATEGORIES = [
    {"name": "Assets", "type": "asset", "description": "Resources owned by the business"},
    {"name": "Liabilities", "type": "liability", "description": "Debts and obligations owed by the business"},
    {"name": "Equity", "type": "equity", "description": "Owner's interest in the business"},
    {"name": "Sales Revenue", "type": "income", "description": "Revenue from sales and operations"},
    {"name": "Expenses", "type": "expense", "description": "Costs incurred in business operations"},
]

# Compte de revenus alimenté par les commandes
SALES_CATEGORY_NAME = "Sales Revenue"
ONLINE_SALES_ACCOUNT = "Online Sales"
ONLINE_SALES_DESCRIPTION = "Revenue from online sales"

# Catégorie produit par défaut
DEFAULT_PRODUCT_CATEGORY = "Other"

TRANSACTION_TYPES = ["income", "expense", "transfer"]
DOCUMENT_TYPES = ["invoice", "receipt", "bill", "voucher"]

# Factures et factures fournisseurs : le statut se déduit du paiement et de la réception
BILL_DOCUMENT_TYPES = ["bill", "invoice"]
BILL_STATUSES = [
    "paid_received",
    "paid_partially_received",
    "partially_paid_received",
    "partially_paid_partially_received",
    "partially_paid",
    "received",
    "partially_received",
]
TRANSACTION_STATUSES = ["draft", "final", "paid", "cancelled"] + BILL_STATUSES

# Nature des entrées de l'historique des transactions
VERSION_CHANGE_TYPES = ["create", "update", "delete", "pre-restore", "restore"]

ORDER_STATUSES = ["pending", "processing", "shipped", "completed", "cancelled"]

USER_TYPES = ["customer", "vendor", "employee"]
BALANCE_OPERATIONS = ["add", "deduct"]

# Nombre de produits recommandés par le chatbot
CHATBOT_MAX_RECOMMENDATIONS = 2

# Modèles de sites proposés par défaut
DEFAULT_TEMPLATES = [
    {
        "name": "Modern Shop",
        "description": "Clean, minimal design for fashion and accessories",
        "preview_url": "https://images.unsplash.com/photo-1542291026-7eec264c27ff?w=500",
        "category": "fashion",
        "is_popular": True,
    },
    {
        "name": "Food & Grocery",
        "description": "Perfect for food delivery and grocery stores",
        "preview_url": "https://images.unsplash.com/photo-1555529669-e69e7aa0ba9a?w=500",
        "category": "food",
        "is_popular": False,
    },
    {
        "name": "Digital Products",
        "description": "Optimized for selling digital downloads and services",
        "preview_url": "https://images.unsplash.com/photo-1470309864661-68328b2cd0a5?w=500",
        "category": "digital",
        "is_popular": False,
    },
    {
        "name": "Handmade Crafts",
        "description": "Showcase your handmade products with this artistic template",
        "preview_url": "https://images.unsplash.com/photo-1560421683-6856ea585c78?w=500",
        "category": "handmade",
        "is_popular": False,
    },
]

# Règles du chatbot, évaluées dans l'ordre : la première qui correspond gagne.
# "all" exige tous les mots-clés, "any" un seul. Un mot-clé correspond à un
# début de mot, ou au mot entier quand la règle porte "whole_word".
CHATBOT_RULES = [
    {
        "intent": "greeting",
        "keywords": ["hello", "hi"],
        "match": "any",
        "whole_word": True,
        "reply": "👋 Hi there! Welcome to {business_name}. How can I help you today?",
    },
    {
        "intent": "product_inquiry",
        "keywords": ["product", "buy", "purchase"],
        "match": "any",
        "reply": "Here are some products that might interest you:",
    },
    {
        "intent": "order_status",
        "keywords": ["order", "status"],
        "match": "all",
        "reply": "You can check your order status in your account. Would you like me to help you navigate there?",
    },
    {
        "intent": "shipping",
        "keywords": ["shipping", "delivery"],
        "match": "any",
        "reply": "We offer standard shipping (3-5 business days) and express shipping (1-2 business days). Free shipping on orders over $50!",
    },
    {
        "intent": "returns",
        "keywords": ["return", "refund"],
        "match": "any",
        "reply": "Our return policy allows returns within 30 days of purchase. Would you like more details about our return process?",
    },
]
CHATBOT_FALLBACK_REPLY = "Thank you for your message. How else can I assist you today?"
