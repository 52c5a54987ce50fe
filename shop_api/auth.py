# auth.py
"""
Password hashing and bearer-token checks.

Passwords are hashed with argon2id (argon2-cffi). Tokens are opaque random
keys kept in the `auth_tokens` table (like DRF's authtoken), so logout can
revoke them.
"""
import logging
from datetime import timedelta
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from shop_api import settings
from shop_api.database import get_session
from shop_api.models import UserSQL
from shop_api.repository import TokenRepository

log = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

password_hasher = PasswordHasher()


def make_password(password: str) -> str:
    return password_hasher.hash(password)


def check_password(password: str, encoded: str) -> bool:
    try:
        return password_hasher.verify(encoded, password)
    except (VerificationError, InvalidHashError):
        return False


def token_ttl() -> timedelta:
    return timedelta(minutes=settings.TOKEN_TTL_MINUTES)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> UserSQL:
    """
    Dependency: resolve the bearer token to its user or stop the request with 401.

    Database errors are left to the app-level SQLAlchemyError handler, which
    answers with the same sanitised 500 the controllers use.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    user = TokenRepository(session).authenticate(credentials.credentials, token_ttl())
    if user is None:
        log.info("Rejected invalid or expired token")
        raise _unauthorized("Invalid or expired token")
    return user
