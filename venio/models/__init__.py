"""SQLAlchemy ORM models."""

from venio.models.base import Base
from venio.models.permission import Permission, RolePermission
from venio.models.refresh_token import RefreshToken
from venio.models.role import Role, UserRole
from venio.models.user import User

__all__ = [
    "Base",
    "Permission",
    "RefreshToken",
    "Role",
    "RolePermission",
    "User",
    "UserRole",
]
