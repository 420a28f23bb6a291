"""
Single-administrator authentication.

There is exactly one identity: ``ADMIN_USERNAME``. Tokens are HS256 JWTs
carrying ``{"username", "isAdmin": true}`` and expire after
``TOKEN_TTL_HOURS``.
"""
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.errors import InternalError, Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
PLACEHOLDER_HASH = "your_hashed_password_here"
DEVELOPMENT_PASSWORD = "admin"
UNAUTHORIZED_MESSAGE = "Unauthorized. Admin access required."
BCRYPT_MAX_BYTES = 72

_SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}

bearer = HTTPBearer(auto_error=False)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash or password_hash == PLACEHOLDER_HASH:
        logger.warning("ADMIN_PASSWORD_HASH is not set, using the development password")
        return password == DEVELOPMENT_PASSWORD

    # bcrypt only looks at the first 72 bytes of a password
    candidate = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
    except ValueError as exc:
        logger.error("Configured ADMIN_PASSWORD_HASH is not a valid bcrypt hash")
        raise InternalError("Authentication system error") from exc


def generate_token(username: str, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    claims = {
        "username": username,
        "isAdmin": True,
        "iat": issued,
        "exp": issued + timedelta(hours=settings.TOKEN_TTL_HOURS),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> dict | None:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    if claims.get("isAdmin") is not True:
        return None
    return claims


async def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> dict:
    if credentials is None:
        raise Unauthorized(UNAUTHORIZED_MESSAGE)
    claims = verify_token(credentials.credentials)
    if claims is None:
        raise Unauthorized(UNAUTHORIZED_MESSAGE)
    return claims


async def current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> dict | None:
    """Claims of the caller when a valid token was sent, otherwise None."""
    if credentials is None:
        return None
    return verify_token(credentials.credentials)


async def guard_writes(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> None:
    if not settings.REQUIRE_AUTH_FOR_WRITES or request.method in _SAFE_METHODS:
        return
    await require_admin(credentials)
