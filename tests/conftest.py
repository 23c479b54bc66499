# STOREFRONT/backend/tests/conftest.py : configuration pour les tests

import os

# Avant tout import de storefront : base en mémoire, hachage rapide
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "testing"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from storefront.main import app
from storefront.database import Base, get_db
from storefront.models import models  # noqa: F401  enregistre les tables

DEMO_PASSWORD = "password123"


@pytest.fixture(scope="session")
def db_engine():
    """Une seule base SQLite en mémoire partagée par toutes les connexions"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    yield engine
    engine.dispose()

@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Tables recréées pour chaque test"""
    Base.metadata.create_all(bind=db_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    Base.metadata.drop_all(bind=db_engine)

@pytest.fixture
def db_session(session_factory):
    """Session pour vérifier directement l'état de la base"""
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def client(session_factory):
    """Client de test : une session de base par requête, comme en production"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def other_client(client):
    """Second navigateur (cookies séparés) pour les accès entre entreprises"""
    return TestClient(app)


def register(client, username="demo", email=None, name="Demo Business", password=DEMO_PASSWORD):
    """Inscrit une entreprise ; le cookie de session reste dans le client"""
    response = client.post("/api/auth/register", json={
        "name": name,
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password
    })
    assert response.status_code == 201, response.text
    return response.json()

@pytest.fixture
def business(client):
    return register(client)

@pytest.fixture
def other_business(other_client):
    return register(other_client, username="rival", name="Rival Shop")


def sample_product(**overrides):
    payload = {
        "name": "Widget",
        "description": "A very useful widget for testing",
        "price": 999,
        "inventory": 5
    }
    payload.update(overrides)
    return payload


def category_id(client, name):
    return next(c["id"] for c in client.get("/api/account-categories").json() if c["name"] == name)


def create_account(client, name="Cash", category="Assets", initial_balance=10000):
    response = client.post("/api/accounts", json={
        "categoryId": category_id(client, category),
        "name": name,
        "initialBalance": initial_balance
    })
    assert response.status_code == 201, response.text
    return response.json()


def post_transaction(client, account_id, amount, type_, category="General", **extra):
    payload = {"accountId": account_id, "amount": amount, "type": type_, "category": category}
    payload.update(extra)
    response = client.post("/api/transactions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def balance(client, account_id):
    return client.get(f"/api/accounts/{account_id}").json()["currentBalance"]
