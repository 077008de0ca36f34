"""Request/response schemas for roles and role assignments."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

ROLE_NAME_MAX_LENGTH = 50
ROLE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_-]*$")


def validate_role_name(value: str) -> str:
    """Role names are lowercase identifiers (e.g. admin, content-editor)."""
    if not value or not value.strip():
        raise ValueError("role name must be non-empty")
    name = value.strip().lower()
    if len(name) > ROLE_NAME_MAX_LENGTH:
        raise ValueError(f"role name must be at most {ROLE_NAME_MAX_LENGTH} characters")
    if not ROLE_NAME_PATTERN.match(name):
        raise ValueError(
            "role name must start with a letter and contain only a-z, 0-9, '_' or '-'"
        )
    return name


class RoleCreate(BaseModel):
    name: str = Field(..., description="Unique role name")
    description: str = Field(default="", max_length=1000)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_role_name(v)


class RoleUpdate(BaseModel):
    name: str | None = None
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        return validate_role_name(v) if v is not None else None


class AdminRoleCreate(RoleCreate):
    """Admin role creation with initial permission ids."""

    permissions: list[int] = Field(default_factory=list, description="Permission ids to grant")


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str
    created_at: datetime

    class Config:
        from_attributes = True


class RolesListResponse(BaseModel):
    items: list[RoleResponse]
    total: int


class AdminRoleItem(RoleResponse):
    """Role entry for the admin overview, with the number of assigned users."""

    user_count: int = 0


class AdminRolesResponse(BaseModel):
    roles: list[AdminRoleItem]


class AssignRoleRequest(BaseModel):
    role_id: int = Field(..., gt=0)


class AssignPermissionRequest(BaseModel):
    permission_id: int = Field(..., gt=0)


class UserRolesResponse(BaseModel):
    user_id: int
    roles: list[RoleResponse]


class UserRoleAssignment(BaseModel):
    """One row of the user_roles join table, denormalized for display."""

    user_id: int
    user_email: str
    role_id: int
    role_name: str
    assigned_at: datetime


class AssignmentsResponse(BaseModel):
    assignments: list[UserRoleAssignment]


class RemoveAssignmentRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    role_id: int = Field(..., gt=0)
