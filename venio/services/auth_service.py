"""
Authentication: credential check, token issuance and email verification.

Access tokens are short-lived JWTs carrying the user's role names. Refresh
tokens are opaque random strings stored only as SHA-256 digests; each one can
be exchanged once, and presenting an already-used token revokes every refresh
token of that user.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

import jwt
from sqlalchemy.orm import Session

from venio.core.clock import ensure_utc, utcnow
from venio.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
)
from venio.core.security import (
    create_access_token,
    decode_access_token,
    generate_refresh_token,
    generate_verification_token,
    hash_password,
    hash_token,
    verify_password,
)
from venio.models import User
from venio.repositories import RefreshTokenRepository, UserRepository, UserRoleRepository
from venio.schemas.auth import CurrentUser

if TYPE_CHECKING:
    from venio.core.config import Settings

logger = logging.getLogger(__name__)

user_repo = UserRepository()
user_role_repo = UserRoleRepository()
refresh_repo = RefreshTokenRepository()

INVALID_CREDENTIALS = "Invalid email or password."


@dataclass
class IssuedTokens:
    """Result of a successful login or refresh."""

    access_token: str
    refresh_token: str
    expires_in: int
    user: User


@lru_cache
def _dummy_password_hash() -> str:
    # Compared against when the email is unknown, so both paths cost one bcrypt check.
    return hash_password("dummy-password-for-timing")


def _issue_tokens(db: Session, user: User, settings: "Settings") -> IssuedTokens:
    roles = [role.name for role in user_role_repo.get_user_roles(db, user.id)]
    access_token = create_access_token(
        user_id=user.id,
        email=user.email,
        username=user.username,
        roles=roles,
    )
    refresh_token = generate_refresh_token()
    refresh_repo.create(
        db,
        user_id=user.id,
        token_hash=hash_token(refresh_token),
        expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    return IssuedTokens(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=user,
    )


def login(db: Session, email: str, password: str, settings: "Settings") -> IssuedTokens:
    """
    Check credentials and issue an access token and a refresh token.

    Unknown email, wrong password and inactive account all raise the same
    AuthenticationError so callers cannot probe which accounts exist.
    """
    user = user_repo.get_by_email(db, email.strip().lower())
    if user is None:
        verify_password(password, _dummy_password_hash())
        logger.info("Login failed: unknown email")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: bad password", extra={"user_id": user.id})
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.is_active:
        logger.info("Login failed: inactive account", extra={"user_id": user.id})
        raise AuthenticationError(INVALID_CREDENTIALS)

    tokens = _issue_tokens(db, user, settings)
    logger.info("Login succeeded", extra={"user_id": user.id})
    return tokens


def validate_access_token(token: str) -> CurrentUser:
    """
    Verify signature, expiry and issuer of an access token and return its claims.

    Raises TokenExpiredError or InvalidTokenError.
    """
    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired.", cause=e) from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Invalid token.", cause=e) from e

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid token payload.", cause=e) from e

    roles = payload.get("roles") or []
    if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
        raise InvalidTokenError("Invalid token payload.")

    return CurrentUser(
        id=user_id,
        email=str(payload.get("email", "")),
        username=str(payload.get("username", "")),
        roles=roles,
    )


def refresh(db: Session, refresh_token: str, settings: "Settings") -> IssuedTokens:
    """
    Exchange a refresh token for a new access token and a new refresh token.

    The password is not re-checked; roles are re-read from the database. The
    presented token is revoked. Reusing a revoked token revokes all of the
    user's refresh tokens. An expired token is rejected but left unrevoked, so
    retrying it never counts as reuse.

    The row is locked while it is checked, so concurrent refreshes of one
    token are serialized and only the first one rotates it.
    """
    row = refresh_repo.get_by_hash(db, hash_token(refresh_token), for_update=True)
    if row is None:
        raise InvalidTokenError("Invalid refresh token.")

    if ensure_utc(row.expires_at) <= utcnow():
        # Release the row lock; expiry is not revocation.
        db.rollback()
        raise TokenExpiredError("Refresh token has expired.")

    if row.revoked_at is not None:
        revoked = refresh_repo.revoke_all_for_user(db, row.user_id)
        logger.warning(
            "Refresh token reuse detected; revoked all sessions",
            extra={"user_id": row.user_id, "revoked_count": revoked},
        )
        raise InvalidTokenError("Refresh token has been revoked.")

    user = user_repo.get_by_id(db, row.user_id)
    if user is None or not user.is_active:
        refresh_repo.revoke(db, row)
        raise InvalidTokenError("Refresh token is no longer valid.")

    refresh_repo.revoke(db, row)
    return _issue_tokens(db, user, settings)


def logout(db: Session, refresh_token: str) -> None:
    """Revoke a refresh token. Unknown or already revoked tokens are ignored."""
    row = refresh_repo.get_by_hash(db, hash_token(refresh_token))
    if row is not None:
        refresh_repo.revoke(db, row)
        logger.info("Logout", extra={"user_id": row.user_id})


def generate_email_verification_token(
    db: Session,
    user_id: int,
    settings: "Settings",
) -> str:
    """Store a fresh verification token on the user and return it."""
    user = user_repo.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")

    token = generate_verification_token()
    user.email_verification_token = token
    user.email_verification_token_expires_at = utcnow() + timedelta(
        hours=settings.EMAIL_VERIFICATION_EXPIRE_HOURS
    )
    user_repo.update(db, user)

    if settings.APP_ENV == "dev":
        logger.debug("Email verification token for user %s: %s", user.id, token)
    return token


def verify_email(db: Session, token: str) -> User:
    """
    Mark the owner of token as verified and clear the token.

    Raises InvalidTokenError (unknown token), TokenExpiredError or ConflictError
    (already verified).
    """
    user = user_repo.get_by_verification_token(db, token)
    if user is None:
        raise InvalidTokenError("Verification token is invalid or has expired.")

    expires_at = user.email_verification_token_expires_at
    if expires_at is None or utcnow() > ensure_utc(expires_at):
        raise TokenExpiredError("Verification token has expired.")

    if user.is_email_verified:
        raise ConflictError("Email already verified.")

    user.is_email_verified = True
    user.email_verified_at = utcnow()
    user.email_verification_token = None
    user.email_verification_token_expires_at = None
    user_repo.update(db, user)
    logger.info("Email verified", extra={"user_id": user.id})
    return user


def resend_verification_email(db: Session, email: str, settings: "Settings") -> str:
    """
    Issue a new verification token for an unverified account.

    Mail delivery is not wired up; the token is returned to the caller.
    """
    user = user_repo.get_by_email(db, email.strip().lower())
    if user is None:
        raise NotFoundError("User not found.")
    if user.is_email_verified:
        raise ConflictError("Email already verified.")
    return generate_email_verification_token(db, user.id, settings)
