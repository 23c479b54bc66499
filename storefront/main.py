# STOREFRONT/backend/storefront/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from storefront.routes import (
    account_categories,
    accounts,
    auth,
    business,
    chatbot,
    conversations,
    dashboard,
    orders,
    product_categories,
    products,
    transactions,
    transfers,
    users,
    websites,
)
from storefront.auth import SessionStore
from storefront.config import ALLOWED_ORIGINS, ENVIRONMENT, LOG_LEVEL
from storefront.constants import DEFAULT_TEMPLATES
from storefront.database import SessionLocal, check_connection, create_tables
from storefront.services.storage import Storage
import logging
import datetime
import sys
import fastapi
import sqlalchemy

# Configuration du logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


def seed_templates(storage: Storage) -> int:
    """Insère les modèles de sites par défaut s'il n'y en a aucun"""
    if storage.get_all_templates():
        return 0
    for template in DEFAULT_TEMPLATES:
        storage.create_template(**template)
    return len(DEFAULT_TEMPLATES)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Démarrage de l'API Storefront...")

    if check_connection():
        logger.info("✅ Connexion à la base de données établie")
        # En production, préférer des migrations
        create_tables()

        db = SessionLocal()
        try:
            created = seed_templates(Storage(db))
            purged = SessionStore(db).purge_expired()
            db.commit()
            logger.info(f"{created} modèle(s) de site créé(s), {purged} session(s) expirée(s) supprimée(s)")
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    else:
        logger.error("❌ Impossible de se connecter à la base de données")

    yield

    logger.info("👋 Arrêt de l'API Storefront")


app = FastAPI(
    title="Storefront API",
    description="Back-office pour petites entreprises : catalogue, commandes, comptabilité, contacts et chatbot",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Inscription, connexion et session"},
        {"name": "business", "description": "Profil de l'entreprise"},
        {"name": "products", "description": "Catalogue produits, catégories et variantes"},
        {"name": "orders", "description": "Commandes et comptabilisation du revenu"},
        {"name": "ledger", "description": "Plan de comptes, comptes, transactions et virements"},
        {"name": "users", "description": "Contacts : clients, fournisseurs, employés"},
        {"name": "chatbot", "description": "Widget de chatbot et conversations"},
        {"name": "websites", "description": "Modèles et sites"},
        {"name": "dashboard", "description": "Tableau de bord synthétique"},
    ]
)

# Le cookie de session exige des origines explicites (pas de "*")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Données invalides", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # la session de la requête est annulée par get_db
    logger.exception(f"Erreur non gérée sur {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Erreur interne du serveur"})


# Inclusion des routeurs
app.include_router(auth.router)
app.include_router(business.router)
app.include_router(product_categories.router)
app.include_router(products.router)
app.include_router(websites.templates_router)
app.include_router(websites.router)
app.include_router(orders.router)
app.include_router(account_categories.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(transfers.router)
app.include_router(users.router)
app.include_router(users.vendors_router)
app.include_router(users.invitations_router)
app.include_router(conversations.router)
app.include_router(chatbot.router)
app.include_router(dashboard.router)

@app.get("/")
def root():
    """
    Racine de l'API - Informations générales
    """
    return {
        "success": True,
        "message": "Storefront backend opérationnel 🚀",
        "version": app.version,
        "environment": ENVIRONMENT,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "endpoints": {
            "auth": "/api/auth",
            "business": "/api/business",
            "products": "/api/products",
            "orders": "/api/orders",
            "accounts": "/api/accounts",
            "transactions": "/api/transactions",
            "users": "/api/users",
            "chatbot": "/api/chatbot",
            "websites": "/api/websites",
            "dashboard": "/api/dashboard",
            "docs": "/docs"
        },
        "health_check": "/health"
    }

@app.get("/health")
def health_check():
    """
    Endpoint de santé pour le monitoring
    """
    db_status = check_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "version": app.version,
        "timestamp": datetime.datetime.now().isoformat()
    }

@app.get("/info")
def info():
    """
    Informations détaillées sur l'API
    """
    return {
        "name": app.title,
        "description": app.description,
        "version": app.version,
        "python_version": sys.version,
        "fastapi_version": fastapi.__version__,
        "sqlalchemy_version": sqlalchemy.__version__,
        "environment": ENVIRONMENT
    }
