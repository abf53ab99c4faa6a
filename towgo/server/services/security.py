"""
Password hashing and token handling.

Provides:
- Password hashing and verification (passlib + bcrypt)
- Access token creation and validation (python-jose JWT)
- Signed OAuth ``state`` values
- Random tokens for email verification and password reset links
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from towgo.core.logging_config import get_logger
from towgo.server.core.config import settings

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
OAUTH_STATE_TYPE = "oauth_state"
OAUTH_STATE_TTL = timedelta(minutes=10)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.auth.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: bcrypt hash stored on the user

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def generate_token() -> str:
    """64 hex chars, used for email verification and password reset links."""
    return secrets.token_hex(32)


def _encode(claims: dict, expires_delta: timedelta) -> str:
    auth = settings.auth
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, auth.jwt_secret_key, algorithm=auth.jwt_algorithm)


def _decode(token: str) -> Optional[dict]:
    auth = settings.auth
    try:
        return jwt.decode(token, auth.jwt_secret_key, algorithms=[auth.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        return None


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: Subject of the token
        expires_delta: Lifetime; defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``

    Returns:
        Encoded JWT
    """
    lifetime = expires_delta or timedelta(minutes=settings.auth.access_token_expire_minutes)
    return _encode({"sub": str(user_id), "typ": ACCESS_TOKEN_TYPE}, lifetime)


def decode_access_token(token: str) -> Optional[int]:
    """Return the user id of a valid access token, or None."""
    payload = _decode(token)
    if not payload or payload.get("typ") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def create_oauth_state(provider: str) -> str:
    """Short-lived signed state bound to the provider the flow started with."""
    return _encode({"provider": provider, "nonce": secrets.token_urlsafe(16), "typ": OAUTH_STATE_TYPE}, OAUTH_STATE_TTL)


def verify_oauth_state(state: str, provider: str) -> bool:
    payload = _decode(state)
    return bool(payload and payload.get("typ") == OAUTH_STATE_TYPE and payload.get("provider") == provider)
