# STOREFRONT/backend/storefront/database.py

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from storefront.config import DATABASE_URL
import logging

logger = logging.getLogger(__name__)


def build_engine(url):
    """Crée le moteur SQLAlchemy (SQLite en dev/tests, PostgreSQL en production)"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        pool_size=5,  # Nombre de connexions permanentes
        max_overflow=10,  # Connexions supplémentaires temporaires
        pool_pre_ping=True,  # Vérifie que la connexion est vivante avant utilisation
        echo=False
    )


# Création de la connexion à la base de données
try:
    engine = build_engine(DATABASE_URL)
except Exception as e:
    logger.error(f"Erreur de configuration de la base de données: {e}")
    raise

# Session pour interagir avec la base
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base pour créer les modèles (tables)
Base = declarative_base()

# Dependency pour FastAPI
def get_db():
    """
    Dépendance FastAPI pour obtenir une session de base de données.
    À utiliser dans les routes avec: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        # écritures non validées abandonnées si la requête échoue
        db.rollback()
        raise
    finally:
        db.close()

def create_tables():
    """Crée toutes les tables définies dans les modèles"""
    from storefront.models import models  # noqa: F401  enregistre les tables
    Base.metadata.create_all(bind=engine)
    logger.info("Tables créées/vérifiées avec succès")

def drop_tables():
    """Supprime toutes les tables (UTILISER AVEC PRÉCAUTION)"""
    Base.metadata.drop_all(bind=engine)
    logger.warning("Toutes les tables ont été supprimées")

def check_connection():
    """Vérifie que la connexion à la base fonctionne"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Erreur de connexion: {e}")
        return False
