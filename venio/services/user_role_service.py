"""User-role assignments and the membership checks behind RBAC."""

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy.orm import Session

from venio.core.errors import ValidationError
from venio.models import Role
from venio.repositories import UserRoleRepository

logger = logging.getLogger(__name__)

user_role_repo = UserRoleRepository()


def _check_user_id(user_id: int) -> None:
    if user_id <= 0:
        raise ValidationError("Invalid user ID.")


def _check_role_id(role_id: int) -> None:
    if role_id <= 0:
        raise ValidationError("Invalid role ID.")


def get_user_roles(db: Session, user_id: int) -> list[Role]:
    _check_user_id(user_id)
    return user_role_repo.get_user_roles(db, user_id)


def get_user_role_names(db: Session, user_id: int) -> list[str]:
    """Role names for a user, sorted; this is what goes into access token claims."""
    return [role.name for role in get_user_roles(db, user_id)]


def assign_role(db: Session, user_id: int, role_id: int) -> bool:
    """Assign a role. Idempotent; returns False if the user already had it."""
    _check_user_id(user_id)
    _check_role_id(role_id)
    created = user_role_repo.assign_role(db, user_id, role_id)
    if created:
        logger.info("Role assigned", extra={"user_id": user_id, "role_id": role_id})
    return created


def remove_role(db: Session, user_id: int, role_id: int) -> None:
    _check_user_id(user_id)
    _check_role_id(role_id)
    user_role_repo.remove_role(db, user_id, role_id)
    logger.info("Role removed", extra={"user_id": user_id, "role_id": role_id})


def has_role(db: Session, user_id: int, role_name: str) -> bool:
    _check_user_id(user_id)
    if not role_name:
        raise ValidationError("Role name cannot be empty.")
    return user_role_repo.has_role(db, user_id, role_name)


def has_permission(db: Session, user_id: int, permission_name: str) -> bool:
    _check_user_id(user_id)
    if not permission_name:
        raise ValidationError("Permission name cannot be empty.")
    return user_role_repo.has_permission(db, user_id, permission_name)


def has_any_role(db: Session, user_id: int, role_names: Iterable[str]) -> bool:
    return any(has_role(db, user_id, name) for name in role_names)


def has_any_permission(db: Session, user_id: int, permission_names: Iterable[str]) -> bool:
    return any(has_permission(db, user_id, name) for name in permission_names)


def list_assignments(db: Session) -> list[tuple[int, str, int, str, datetime]]:
    return user_role_repo.list_assignments(db)
