"""User accounts: registration, profile updates, password changes and listing."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from venio.core.errors import ConflictError, NotFoundError, ValidationError
from venio.core.security import hash_password, verify_password
from venio.models import User
from venio.repositories import (
    RefreshTokenRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from venio.schemas.user import UserCreate, UserUpdate

if TYPE_CHECKING:
    from venio.core.config import Settings

logger = logging.getLogger(__name__)

user_repo = UserRepository()
role_repo = RoleRepository()
user_role_repo = UserRoleRepository()
refresh_repo = RefreshTokenRepository()

DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 100


def _check_id(user_id: int) -> None:
    if user_id <= 0:
        raise ValidationError("Invalid user ID.")


def register(
    db: Session,
    data: UserCreate,
    settings: "Settings",
    assign_default_role: bool = True,
) -> User:
    """
    Create an active account with a bcrypt-hashed password.

    Grants settings.DEFAULT_USER_ROLE when that role exists and
    assign_default_role is set. Raises ConflictError if the email or username
    is already taken.
    """
    if user_repo.email_exists(db, data.email):
        raise ConflictError("Email already registered.")
    if user_repo.username_exists(db, data.username):
        raise ConflictError("Username already taken.")

    user = user_repo.create(
        db,
        User(
            email=data.email,
            username=data.username,
            first_name=data.first_name,
            last_name=data.last_name,
            avatar=data.avatar,
            password_hash=hash_password(data.password),
            is_active=True,
            is_email_verified=False,
        ),
    )
    logger.info("User registered", extra={"user_id": user.id})

    if assign_default_role and settings.DEFAULT_USER_ROLE:
        role = role_repo.get_by_name(db, settings.DEFAULT_USER_ROLE)
        if role is None:
            logger.warning(
                "Default role %r not found; user %s has no roles",
                settings.DEFAULT_USER_ROLE,
                user.id,
            )
        else:
            user_role_repo.assign_role(db, user.id, role.id)
    return user


def create_user_with_roles(
    db: Session,
    data: UserCreate,
    role_ids: list[int],
    settings: "Settings",
) -> User:
    """Admin account creation: all role ids must exist before the user is created."""
    wanted = set(role_ids)
    found = {role.id for role in role_repo.get_by_ids(db, list(wanted))}
    missing = sorted(wanted - found)
    if missing:
        raise NotFoundError(f"Role not found: {missing[0]}.")

    user = register(db, data, settings, assign_default_role=False)
    for role_id in sorted(wanted):
        user_role_repo.assign_role(db, user.id, role_id)
    return user


def get_user(db: Session, user_id: int) -> User:
    _check_id(user_id)
    user = user_repo.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


def get_user_by_email(db: Session, email: str) -> User:
    user = user_repo.get_by_email(db, email.strip().lower())
    if user is None:
        raise NotFoundError("User not found.")
    return user


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    """Apply a partial update. Email and username stay unique."""
    user = get_user(db, user_id)

    if data.email is not None and data.email != user.email:
        if user_repo.email_exists(db, data.email):
            raise ConflictError("Email already registered.")
        user.email = data.email
        # A changed address has to be verified again.
        user.is_email_verified = False
        user.email_verified_at = None

    if data.username is not None and data.username != user.username:
        if user_repo.username_exists(db, data.username):
            raise ConflictError("Username already taken.")
        user.username = data.username

    if data.first_name is not None:
        user.first_name = data.first_name
    if data.last_name is not None:
        user.last_name = data.last_name
    if data.avatar is not None:
        user.avatar = data.avatar
    if data.is_active is not None:
        user.is_active = data.is_active

    return user_repo.update(db, user)


def change_password(
    db: Session,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    """Replace the password after checking the current one; signs out every session."""
    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect.")
    if current_password == new_password:
        raise ValidationError("New password must differ from the current password.")
    user.password_hash = hash_password(new_password)
    user_repo.update(db, user)
    revoked = refresh_repo.revoke_all_for_user(db, user.id)
    logger.info(
        "Password changed", extra={"user_id": user.id, "revoked_sessions": revoked}
    )


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    user_repo.delete(db, user)
    logger.info("User deleted", extra={"user_id": user_id})


def list_users(db: Session, limit: int, offset: int) -> tuple[list[User], int]:
    """Page through users ordered by id. Out-of-range limits fall back to the default."""
    if limit <= 0 or limit > MAX_LIST_LIMIT:
        limit = DEFAULT_LIST_LIMIT
    if offset < 0:
        offset = 0
    return user_repo.list(db, limit, offset), user_repo.count(db)
