"""Pydantic request/response schemas."""

from venio.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    MeResponse,
    RefreshRequest,
    ResendVerificationRequest,
    TokenResponse,
    VerifyEmailRequest,
)
from venio.schemas.common import ErrorResponse, MessageResponse
from venio.schemas.health import HealthResponse, ProbeResponse
from venio.schemas.permission import (
    PermissionCreate,
    PermissionResponse,
    PermissionsListResponse,
    PermissionUpdate,
    UserPermissionsResponse,
)
from venio.schemas.role import (
    AdminRoleCreate,
    AdminRoleItem,
    AdminRolesResponse,
    AssignmentsResponse,
    AssignPermissionRequest,
    AssignRoleRequest,
    RemoveAssignmentRequest,
    RoleCreate,
    RoleResponse,
    RolesListResponse,
    RoleUpdate,
    UserRoleAssignment,
    UserRolesResponse,
)
from venio.schemas.user import (
    AdminUserCreate,
    UserCreate,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "AdminRoleCreate",
    "AdminRoleItem",
    "AdminRolesResponse",
    "AdminUserCreate",
    "AssignmentsResponse",
    "AssignPermissionRequest",
    "AssignRoleRequest",
    "ChangePasswordRequest",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MeResponse",
    "MessageResponse",
    "PermissionCreate",
    "PermissionResponse",
    "PermissionsListResponse",
    "PermissionUpdate",
    "ProbeResponse",
    "RefreshRequest",
    "RemoveAssignmentRequest",
    "ResendVerificationRequest",
    "RoleCreate",
    "RoleResponse",
    "RolesListResponse",
    "RoleUpdate",
    "TokenResponse",
    "UserCreate",
    "UserPermissionsResponse",
    "UserResponse",
    "UserRoleAssignment",
    "UserRolesResponse",
    "UsersListResponse",
    "UserUpdate",
    "VerifyEmailRequest",
]
