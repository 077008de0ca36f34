"""Repositories: CRUD and join-table queries over a SQLAlchemy Session."""

from venio.repositories.permission_repository import PermissionRepository
from venio.repositories.refresh_token_repository import RefreshTokenRepository
from venio.repositories.role_repository import RoleRepository
from venio.repositories.user_repository import UserRepository
from venio.repositories.user_role_repository import UserRoleRepository

__all__ = [
    "PermissionRepository",
    "RefreshTokenRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
