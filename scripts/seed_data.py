# STOREFRONT/backend/scripts/seed_data.py : données de démonstration

#!/usr/bin/env python
"""Crée l'entreprise de démo (demo / password123), son plan de comptes et quelques produits"""

import logging
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storefront.auth import hash_password
from storefront.database import SessionLocal, create_tables
from storefront.services.business_service import bootstrap_business
from storefront.services.storage import Storage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "password123"

# (catégorie système, nom, description, solde d'ouverture en centimes)
STANDARD_ACCOUNTS = [
    ("Assets", "Cash", "Cash on hand", 5000_00),
    ("Assets", "Bank Account", "Primary business checking account", 25000_00),
    ("Assets", "Accounts Receivable", "Money owed by customers", 0),
    ("Assets", "Inventory", "Products held for sale", 15000_00),
    ("Liabilities", "Accounts Payable", "Money owed to suppliers", 5000_00),
    ("Liabilities", "Credit Card", "Business credit card", 2500_00),
    ("Equity", "Owner's Capital", "Owner's investment in the business", 37500_00),
    ("Sales Revenue", "Online Sales", "Revenue from online sales", 0),
    ("Sales Revenue", "In-Store Sales", "Revenue from physical store", 0),
    ("Expenses", "Cost of Goods Sold", "Direct costs of products sold", 0),
    ("Expenses", "Advertising", "Marketing and advertising expenses", 0),
    ("Expenses", "Shipping & Fulfillment", "Costs of shipping and order fulfillment", 0),
]


def _variant(sku, inventory, price=None, **options):
    return {
        "options": [{"group": group, "value": value} for group, value in options.items()],
        "sku": sku,
        "price": price,
        "inventory": inventory,
    }


SAMPLE_PRODUCTS = [
    {
        "name": "Premium Cotton T-Shirt",
        "description": "Super soft, premium cotton t-shirt with custom logo printing. Available in multiple colors and sizes.",
        "price": 2499,
        "sku": "TS-PREMIUM-001",
        "category": "Apparel",
        "image_url": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=500",
        "inventory": 250,
        "has_variants": True,
        "variants": [
            _variant("TS-PREMIUM-SM-BLK", 50, Color="Black", Size="Small"),
            _variant("TS-PREMIUM-MD-BLK", 70, Color="Black", Size="Medium"),
            _variant("TS-PREMIUM-LG-BLK", 80, Color="Black", Size="Large"),
            _variant("TS-PREMIUM-MD-BLU", 50, price=2699, Color="Blue", Size="Medium"),
        ],
        "weight": 0.2,
        "dimensions": {"length": 30, "width": 20, "height": 2},
        "tags": ["t-shirt", "apparel", "cotton", "premium"],
        "is_featured": True,
    },
    {
        "name": "Fleece Zip-Up Hoodie",
        "description": "Cozy fleece hoodie with full-length zipper. Features kangaroo pockets and adjustable hood.",
        "price": 4999,
        "sku": "HD-FLEECE-001",
        "category": "Apparel",
        "image_url": "https://images.unsplash.com/photo-1620799140408-edc6dcb6d633?w=500",
        "inventory": 120,
        "has_variants": True,
        "variants": [
            _variant("HD-FLEECE-SM-GRY", 20, Color="Gray", Size="Small"),
            _variant("HD-FLEECE-MD-GRY", 35, Color="Gray", Size="Medium"),
            _variant("HD-FLEECE-LG-GRY", 40, Color="Gray", Size="Large"),
            _variant("HD-FLEECE-MD-BLK", 25, Color="Black", Size="Medium"),
        ],
        "weight": 0.5,
        "dimensions": {"length": 60, "width": 45, "height": 5},
        "tags": ["hoodie", "apparel", "fleece", "winter"],
        "is_featured": True,
        "is_on_sale": True,
        "sale_price": 3999,
    },
    {
        "name": "Insulated Stainless Steel Water Bottle",
        "description": "Double-walled vacuum insulated water bottle that keeps drinks cold for 24 hours or hot for 12 hours.",
        "price": 2995,
        "sku": "WB-STEEL-001",
        "category": "Accessories",
        "image_url": "https://images.unsplash.com/photo-1602143407151-7111542de6e8?w=500",
        "inventory": 80,
        "has_variants": True,
        "variants": [
            _variant("WB-STEEL-500-SLV", 30, price=2495, Capacity="500ml", Color="Silver"),
            _variant("WB-STEEL-750-SLV", 25, Capacity="750ml", Color="Silver"),
            _variant("WB-STEEL-750-BLK", 25, Capacity="750ml", Color="Black"),
        ],
        "weight": 0.3,
        "dimensions": {"length": 25, "width": 8, "height": 8},
        "tags": ["water bottle", "hydration", "eco-friendly"],
    },
]


def seed_accounts(storage: Storage, business_id: int):
    categories = {c.name: c for c in storage.get_account_categories_by_business(business_id)}
    existing = {a.name for a in storage.get_accounts_by_business(business_id)}
    for category_name, name, description, opening in STANDARD_ACCOUNTS:
        if name in existing:
            continue
        storage.create_account(
            business_id=business_id,
            category_id=categories[category_name].id,
            name=name,
            description=description,
            initial_balance=opening,
            current_balance=opening,
            is_active=True
        )


def seed_products(storage: Storage, business_id: int):
    if storage.get_products_by_business(business_id):
        logger.info("Des produits existent déjà, étape ignorée")
        return
    categories = {c.name: c for c in storage.get_product_categories_by_business(business_id)}
    for product in SAMPLE_PRODUCTS:
        data = dict(product)
        label = data.pop("category")
        if label not in categories:
            categories[label] = storage.create_product_category(business_id=business_id, name=label, is_default=False)
        storage.create_product(
            business_id=business_id,
            category_id=categories[label].id,
            category=label,
            in_stock=data["inventory"] > 0,
            **data
        )


def generate_demo_data():
    """Idempotent : relancer le script ne duplique rien"""
    create_tables()
    db = SessionLocal()
    storage = Storage(db)
    try:
        business = storage.get_business_by_username(DEMO_USERNAME)
        if business is None:
            business = storage.create_business(
                name="Demo Business",
                username=DEMO_USERNAME,
                email="demo@example.com",
                password_hash=hash_password(DEMO_PASSWORD),
                chatbot_settings={}
            )
            logger.info(f"Entreprise de démo créée (id={business.id})")

        bootstrap_business(storage, business)
        seed_accounts(storage, business.id)
        seed_products(storage, business.id)
        storage.commit()
    except Exception:
        storage.rollback()
        raise
    finally:
        db.close()

    print("✅ Données de démo générées avec succès!")
    print(f"👤 Connexion de démo: {DEMO_USERNAME} / {DEMO_PASSWORD}")

if __name__ == "__main__":
    generate_demo_data()
