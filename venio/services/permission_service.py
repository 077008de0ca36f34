"""Permissions (resource:action capabilities) and effective-permission lookup."""

import logging

from sqlalchemy.orm import Session

from venio.core.errors import ConflictError, NotFoundError, ValidationError
from venio.models import Permission
from venio.repositories import PermissionRepository
from venio.schemas.permission import PermissionCreate, PermissionUpdate

logger = logging.getLogger(__name__)

permission_repo = PermissionRepository()

DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 100


def get_permission(db: Session, permission_id: int) -> Permission:
    if permission_id <= 0:
        raise ValidationError("Invalid permission ID.")
    permission = permission_repo.get_by_id(db, permission_id)
    if permission is None:
        raise NotFoundError("Permission not found.")
    return permission


def get_permission_by_name(db: Session, name: str) -> Permission:
    if not name or not name.strip():
        raise ValidationError("Permission name cannot be empty.")
    permission = permission_repo.get_by_name(db, name.strip())
    if permission is None:
        raise NotFoundError("Permission not found.")
    return permission


def create_permission(db: Session, data: PermissionCreate) -> Permission:
    if permission_repo.get_by_name(db, data.name) is not None:
        raise ConflictError("Permission with this name already exists.")
    permission = permission_repo.create(db, data.name, data.description)
    logger.info(
        "Permission created",
        extra={"permission_id": permission.id, "permission_name": permission.name},
    )
    return permission


def update_permission(db: Session, permission_id: int, data: PermissionUpdate) -> Permission:
    permission = get_permission(db, permission_id)
    if data.name is not None and data.name != permission.name:
        if permission_repo.get_by_name(db, data.name) is not None:
            raise ConflictError("Permission with this name already exists.")
    return permission_repo.update(
        db, permission, name=data.name, description=data.description
    )


def delete_permission(db: Session, permission_id: int) -> None:
    """Delete a permission. Raises ConflictError while any role grants it."""
    permission = get_permission(db, permission_id)
    permission_repo.delete(db, permission)
    logger.info("Permission deleted", extra={"permission_id": permission_id})


def list_permissions(db: Session, limit: int, offset: int) -> tuple[list[Permission], int]:
    if limit <= 0:
        limit = DEFAULT_LIST_LIMIT
    if limit > MAX_LIST_LIMIT:
        limit = MAX_LIST_LIMIT
    if offset < 0:
        offset = 0
    return permission_repo.list(db, limit, offset)


def get_user_permissions(db: Session, user_id: int) -> list[Permission]:
    """Union of the permissions of every role assigned to the user, deduplicated."""
    if user_id <= 0:
        raise ValidationError("Invalid user ID.")
    return permission_repo.get_by_user_id(db, user_id)
