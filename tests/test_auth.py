# STOREFRONT/backend/tests/test_auth.py : tests pour l'authentification

from datetime import timedelta

from jose import jwt

from conftest import DEMO_PASSWORD, register
from storefront.auth import hash_password, sign_session_id, unsign_session_id, verify_password
from storefront.config import SESSION_ALGORITHM, SESSION_COOKIE_NAME, SESSION_SECRET
from storefront.models import models
from storefront.models.models import utcnow


class TestPasswords:
    def test_hash_is_salted_and_verifiable(self):
        first = hash_password("password123")
        second = hash_password("password123")
        assert first != second
        assert verify_password("password123", first)
        assert not verify_password("wrong-password", first)

    def test_missing_or_corrupt_hash_never_matches(self):
        assert not verify_password("password123", None)
        assert not verify_password("password123", "not-a-bcrypt-hash")

    def test_session_cookie_signature(self):
        signed = sign_session_id("abc123")
        assert unsign_session_id(signed) == "abc123"
        assert jwt.get_unverified_claims(signed)["sub"] == "abc123"

    def test_tampered_session_token_is_rejected(self):
        header, payload, signature = sign_session_id("abc123").split(".")
        swapped = ("B" if signature[0] == "A" else "A") + signature[1:]
        assert unsign_session_id(f"{header}.{payload}.{swapped}") is None
        foreign = jwt.encode({"sub": "abc123"}, "autre-secret", algorithm=SESSION_ALGORITHM)
        assert unsign_session_id(foreign) is None

    def test_expired_or_garbage_token_is_rejected(self):
        assert unsign_session_id(sign_session_id("abc123", expires_delta=timedelta(seconds=-10))) is None
        assert unsign_session_id("abc123") is None
        assert unsign_session_id("forged.signature") is None

    def test_token_without_subject_is_rejected(self):
        token = jwt.encode({"exp": utcnow() + timedelta(hours=1)}, SESSION_SECRET, algorithm=SESSION_ALGORITHM)
        assert unsign_session_id(token) is None


class TestAuth:
    def test_register_opens_session(self, client):
        """L'inscription connecte directement l'entreprise"""
        data = register(client)
        assert data["username"] == "demo"
        assert "password" not in data
        assert "passwordHash" not in data
        assert SESSION_COOKIE_NAME in client.cookies

        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["id"] == data["id"]

    def test_register_seeds_chart_of_accounts(self, client):
        register(client)
        categories = client.get("/api/account-categories").json()
        names = {(c["name"], c["type"]) for c in categories}
        assert ("Sales Revenue", "income") in names
        assert ("Assets", "asset") in names
        assert all(c["isSystem"] for c in categories)

        product_categories = client.get("/api/product-categories").json()
        assert [c["name"] for c in product_categories] == ["Other"]
        assert product_categories[0]["isDefault"] is True

    def test_register_duplicate_username(self, client, other_client):
        register(client)
        response = other_client.post("/api/auth/register", json={
            "name": "Copy", "username": "demo", "email": "copy@example.com", "password": DEMO_PASSWORD
        })
        assert response.status_code == 400
        assert "Nom d'utilisateur déjà utilisé" in response.json()["detail"]

    def test_register_duplicate_email(self, client, other_client):
        register(client)
        response = other_client.post("/api/auth/register", json={
            "name": "Copy", "username": "other", "email": "demo@example.com", "password": DEMO_PASSWORD
        })
        assert response.status_code == 400
        assert "Email déjà utilisé" in response.json()["detail"]

    def test_register_invalid_payload(self, client):
        response = client.post("/api/auth/register", json={
            "name": "Shop", "username": "ab", "email": "not-an-email", "password": "123"
        })
        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Données invalides"
        fields = {error["loc"][-1] for error in body["errors"]}
        assert {"username", "email", "password"} <= fields

    def test_password_is_stored_hashed(self, client, db_session):
        data = register(client)
        stored = db_session.get(models.Business, data["id"])
        assert stored.password_hash != DEMO_PASSWORD
        assert verify_password(DEMO_PASSWORD, stored.password_hash)

    def test_login_success(self, client, other_client):
        register(client)
        response = other_client.post("/api/auth/login", json={
            "username": "demo", "password": DEMO_PASSWORD
        })
        assert response.status_code == 200
        assert response.json()["username"] == "demo"
        assert other_client.get("/api/auth/me").status_code == 200

    def test_login_wrong_password(self, client, other_client):
        register(client)
        response = other_client.post("/api/auth/login", json={
            "username": "demo", "password": "wrong-password"
        })
        assert response.status_code == 401
        assert response.json()["detail"] == "Identifiants invalides"

    def test_login_unknown_user(self, client):
        response = client.post("/api/auth/login", json={
            "username": "nobody", "password": DEMO_PASSWORD
        })
        assert response.status_code == 401

    def test_me_without_session(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Non authentifié"

    def test_forged_cookie_is_rejected(self, client):
        register(client)
        client.cookies.clear()
        forged = {"Cookie": f"{SESSION_COOKIE_NAME}=forged.signature"}
        assert client.get("/api/auth/me", headers=forged).status_code == 401

    def test_logout_destroys_session(self, client, db_session):
        register(client)
        cookie = client.cookies.get(SESSION_COOKIE_NAME)

        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json()["message"] == "Déconnexion réussie"
        assert db_session.query(models.AuthSession).count() == 0

        # l'ancien cookie ne sert plus à rien
        stale = {"Cookie": f"{SESSION_COOKIE_NAME}={cookie}"}
        assert client.get("/api/auth/me", headers=stale).status_code == 401

    def test_expired_session(self, client, db_session):
        register(client)
        session = db_session.query(models.AuthSession).one()
        session.expires_at = session.created_at
        db_session.commit()
        assert client.get("/api/auth/me").status_code == 401


class TestBusinessProfile:
    def test_get_profile(self, client, business):
        response = client.get("/api/business")
        assert response.status_code == 200
        assert response.json()["name"] == "Demo Business"

    def test_update_profile(self, client, business):
        response = client.patch("/api/business", json={"name": "Renamed", "logoUrl": "https://example.com/logo.png"})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["logoUrl"] == "https://example.com/logo.png"
        assert data["username"] == "demo"

    def test_update_profile_email_taken(self, client, business, other_client, other_business):
        response = client.patch("/api/business", json={"email": "rival@example.com"})
        assert response.status_code == 400

    def test_profile_requires_session(self, client):
        assert client.get("/api/business").status_code == 401
