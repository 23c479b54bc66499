# STOREFRONT/backend/storefront/config.py

import os
import logging
from dotenv import load_dotenv
from pathlib import Path

logger = logging.getLogger(__name__)

# Trouve le chemin absolu du dossier contenant ce fichier (storefront/)
BASE_DIR = Path(__file__).parent.absolute()
env_path = BASE_DIR / '.env'

# Charge les variables depuis le fichier .env
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    logger.info(f"Fichier .env chargé depuis {env_path}")
else:
    load_dotenv()

# ============================================
# CONFIGURATION ENVIRONNEMENT
# ============================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# ============================================
# CONFIGURATION BASE DE DONNÉES
# ============================================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
if ENVIRONMENT == "production" and DATABASE_URL.startswith("sqlite"):
    raise ValueError("DATABASE_URL must point to a real database in production")

# ============================================
# CONFIGURATION SESSIONS
# ============================================
SESSION_SECRET = os.getenv("SESSION_SECRET", "change_this_session_secret")
if SESSION_SECRET == "change_this_session_secret" and ENVIRONMENT == "production":
    raise ValueError("SESSION_SECRET must be changed in production")

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "bizapp.sid")
SESSION_MAX_AGE_HOURS = int(os.getenv("SESSION_MAX_AGE_HOURS", "24"))  # 24 heures par défaut
SESSION_ALGORITHM = os.getenv("SESSION_ALGORITHM", "HS256")  # signature du cookie (JWT)

# Coût du hachage bcrypt (4 minimum, utile pour accélérer les tests)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# ============================================
# LIENS PUBLICS (invitations, widget)
# ============================================
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000").rstrip("/")

# ============================================
# CONFIGURATION CORS (Frontend)
# ============================================
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5000,http://localhost:3000").split(",")

# ============================================
# LOGGING
# ============================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ============================================
# FONCTIONS UTILITAIRES
# ============================================
def is_production():
    """Vérifie si on est en production"""
    return ENVIRONMENT == "production"

def is_development():
    """Vérifie si on est en développement"""
    return ENVIRONMENT == "development"

def session_cookie_secure():
    """Le cookie de session n'est envoyé qu'en HTTPS en production"""
    return is_production()
