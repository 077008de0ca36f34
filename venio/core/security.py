"""Password hashing, JWT access tokens and opaque token helpers."""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from venio.core.config import get_settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

ACCESS_TOKEN_TYPE = "access"

# Verification tokens are 32 random bytes rendered as hex (64 chars).
VERIFICATION_TOKEN_BYTES = 32
REFRESH_TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    email: str,
    username: str,
    roles: list[str],
) -> str:
    """Create a signed JWT access token carrying the user's identity and role names."""
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "username": username,
        "roles": list(roles),
        "type": ACCESS_TOKEN_TYPE,
        "iss": settings.JWT_ISSUER,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, username, roles, exp, iat).
    Raises jwt.PyJWTError on invalid, expired or foreign-issuer tokens.
    """
    settings = get_settings()
    secret = settings.JWT_SECRET.get_secret_value()
    payload = jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        issuer=settings.JWT_ISSUER,
        options={"require": ["exp", "iat", "sub"]},
    )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    return payload


def generate_refresh_token() -> str:
    """Return a new opaque, URL-safe refresh token."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def generate_verification_token() -> str:
    """Return a new email verification token (64 hex chars)."""
    return secrets.token_hex(VERIFICATION_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """SHA-256 hex digest of an opaque token; only the digest is persisted."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
