# STOREFRONT/backend/storefront/auth.py : mots de passe et sessions serveur

"""
Authentification par session serveur.

Le cookie ne contient qu'un identifiant aléatoire, signé en JWT (python-jose) ; l'état de la
session (entreprise connectée, expiration) vit dans la table auth_sessions.
Les mots de passe sont hachés avec bcrypt (sel inclus dans le hash).
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.config import (
    BCRYPT_ROUNDS,
    SESSION_ALGORITHM,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_HOURS,
    SESSION_SECRET,
    session_cookie_secure,
)
from storefront.database import get_db
from storefront.models import models
from storefront.models.models import utcnow

logger = logging.getLogger(__name__)


# ---------- MOTS DE PASSE ----------
def hash_password(password: str) -> str:
    """Hash bcrypt salé d'un mot de passe"""
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode('utf-8')


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Compare un mot de passe à son hash (jamais en clair)"""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # hash corrompu ou mot de passe hors limites bcrypt
        return False


# ---------- SIGNATURE DU COOKIE ----------
def sign_session_id(session_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Jeton JWT portant l'identifiant de session (sub) et son expiration"""
    expire = utcnow() + (expires_delta or timedelta(hours=SESSION_MAX_AGE_HOURS))
    to_encode = {"sub": session_id, "exp": expire}
    return jwt.encode(to_encode, SESSION_SECRET, algorithm=SESSION_ALGORITHM)


def unsign_session_id(token: str) -> Optional[str]:
    """Retourne l'identifiant si le jeton est valide et non expiré, sinon None"""
    try:
        payload = jwt.decode(token, SESSION_SECRET, algorithms=[SESSION_ALGORITHM])
    except JWTError:
        return None
    session_id = payload.get("sub")
    if not isinstance(session_id, str) or not session_id:
        return None
    return session_id


# ---------- DÉPÔT DE SESSIONS ----------
class SessionStore:
    """Dépôt des sessions serveur, une instance par requête"""

    def __init__(self, db: Session, max_age: timedelta = timedelta(hours=SESSION_MAX_AGE_HOURS)):
        self.db = db
        self.max_age = max_age

    def create(self, business_id: int, user_agent: Optional[str] = None) -> models.AuthSession:
        session = models.AuthSession(
            id=secrets.token_urlsafe(32),
            business_id=business_id,
            user_agent=user_agent,
            expires_at=utcnow() + self.max_age,
        )
        self.db.add(session)
        self.db.flush()
        return session

    def get(self, session_id: str) -> Optional[models.AuthSession]:
        session = self.db.get(models.AuthSession, session_id)
        if session is None or session.expires_at <= utcnow():
            return None
        return session

    def destroy(self, session_id: str) -> bool:
        session = self.db.get(models.AuthSession, session_id)
        if session is None:
            return False
        self.db.delete(session)
        self.db.flush()
        return True

    def purge_expired(self) -> int:
        count = self.db.query(models.AuthSession).filter(
            models.AuthSession.expires_at <= utcnow()
        ).delete(synchronize_session=False)
        self.db.flush()
        return count


def set_session_cookie(response, session_id: str):
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=sign_session_id(session_id),
        max_age=SESSION_MAX_AGE_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=session_cookie_secure(),
    )


def clear_session_cookie(response):
    response.delete_cookie(key=SESSION_COOKIE_NAME, httponly=True, samesite="lax")


# ---------- DÉPENDANCES FASTAPI ----------
def get_session_store(db: Session = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


def get_session_id(
    session_cookie: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)
) -> Optional[str]:
    """Identifiant de session lu dans le cookie signé"""
    if not session_cookie:
        return None
    return unsign_session_id(session_cookie)


def get_current_business(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> models.Business:
    """Entreprise connectée ; 401 sans session valide"""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Non authentifié",
    )
    if not session_id:
        raise unauthorized

    session = store.get(session_id)
    if session is None or session.business is None:
        raise unauthorized
    return session.business
