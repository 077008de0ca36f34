"""Roles and the permissions granted to them."""

import logging

from sqlalchemy.orm import Session

from venio.core.errors import ConflictError, NotFoundError, ValidationError
from venio.models import Permission, Role
from venio.repositories import PermissionRepository, RoleRepository
from venio.schemas.role import AdminRoleCreate, RoleCreate, RoleUpdate

logger = logging.getLogger(__name__)

role_repo = RoleRepository()
permission_repo = PermissionRepository()

DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 100

# Seeded roles; route guards refer to them by name, so they cannot be renamed.
SYSTEM_ROLES = frozenset({"admin", "moderator", "user", "guest"})


def _check_id(value: int, what: str) -> None:
    if value <= 0:
        raise ValidationError(f"Invalid {what} ID.")


def get_role(db: Session, role_id: int) -> Role:
    _check_id(role_id, "role")
    role = role_repo.get_by_id(db, role_id)
    if role is None:
        raise NotFoundError("Role not found.")
    return role


def get_role_by_name(db: Session, name: str) -> Role:
    if not name or not name.strip():
        raise ValidationError("Role name cannot be empty.")
    role = role_repo.get_by_name(db, name.strip())
    if role is None:
        raise NotFoundError("Role not found.")
    return role


def create_role(db: Session, data: RoleCreate) -> Role:
    if role_repo.get_by_name(db, data.name) is not None:
        raise ConflictError("Role with this name already exists.")
    role = role_repo.create(db, data.name, data.description)
    logger.info("Role created", extra={"role_id": role.id, "role_name": role.name})
    return role


def create_role_with_permissions(db: Session, data: AdminRoleCreate) -> Role:
    """Create a role and grant it the given permissions; every id must exist."""
    wanted = set(data.permissions)
    found = {p.id for p in permission_repo.get_by_ids(db, list(wanted))}
    missing = sorted(wanted - found)
    if missing:
        raise NotFoundError(f"Permission not found: {missing[0]}.")

    role = create_role(db, data)
    for permission_id in sorted(wanted):
        permission_repo.assign_to_role(db, role.id, permission_id)
    return role


def update_role(db: Session, role_id: int, data: RoleUpdate) -> Role:
    role = get_role(db, role_id)
    if data.name is not None and data.name != role.name:
        if role.name in SYSTEM_ROLES:
            raise ConflictError(f"Built-in role '{role.name}' cannot be renamed.")
        if role_repo.get_by_name(db, data.name) is not None:
            raise ConflictError("Role with this name already exists.")
    return role_repo.update(db, role, name=data.name, description=data.description)


def delete_role(db: Session, role_id: int) -> None:
    """Delete a role. Raises ConflictError while it is assigned to any user."""
    role = get_role(db, role_id)
    role_repo.delete(db, role)
    logger.info("Role deleted", extra={"role_id": role_id})


def list_roles(db: Session, limit: int, offset: int) -> tuple[list[Role], int]:
    if limit <= 0:
        limit = DEFAULT_LIST_LIMIT
    if limit > MAX_LIST_LIMIT:
        limit = MAX_LIST_LIMIT
    if offset < 0:
        offset = 0
    return role_repo.list(db, limit, offset)


def count_role_users(db: Session, role_id: int) -> int:
    return role_repo.count_users(db, role_id)


def get_role_permissions(db: Session, role_id: int) -> list[Permission]:
    role = get_role(db, role_id)
    return role_repo.get_permissions(db, role.id)


def assign_permission_to_role(db: Session, role_id: int, permission_id: int) -> bool:
    """Grant a permission to a role. Idempotent; returns False if already granted."""
    role = get_role(db, role_id)
    _check_id(permission_id, "permission")
    permission = permission_repo.get_by_id(db, permission_id)
    if permission is None:
        raise NotFoundError("Permission not found.")
    created = permission_repo.assign_to_role(db, role.id, permission.id)
    if created:
        logger.info(
            "Permission granted to role",
            extra={"role_id": role.id, "permission_id": permission.id},
        )
    return created


def remove_permission_from_role(db: Session, role_id: int, permission_id: int) -> None:
    _check_id(role_id, "role")
    _check_id(permission_id, "permission")
    permission_repo.remove_from_role(db, role_id, permission_id)
    logger.info(
        "Permission revoked from role",
        extra={"role_id": role_id, "permission_id": permission_id},
    )
