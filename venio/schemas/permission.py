"""Request/response schemas for permissions."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

PERMISSION_NAME_MAX_LENGTH = 100
# resource:action, e.g. users:write or content:moderate
PERMISSION_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_-]*:[a-z][a-z0-9_-]*$")


def validate_permission_name(value: str) -> str:
    """Ensure a permission name has the resource:action shape (lowercased)."""
    if not value or not value.strip():
        raise ValueError("permission name must be non-empty")
    name = value.strip().lower()
    if len(name) > PERMISSION_NAME_MAX_LENGTH:
        raise ValueError(
            f"permission name must be at most {PERMISSION_NAME_MAX_LENGTH} characters"
        )
    if not PERMISSION_NAME_PATTERN.match(name):
        raise ValueError("permission name must look like resource:action (e.g. users:write)")
    return name


class PermissionCreate(BaseModel):
    name: str = Field(..., description="Unique permission name (resource:action)")
    description: str = Field(default="", max_length=1000)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_permission_name(v)


class PermissionUpdate(BaseModel):
    name: str | None = None
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        return validate_permission_name(v) if v is not None else None


class PermissionResponse(BaseModel):
    id: int
    name: str
    description: str
    created_at: datetime

    class Config:
        from_attributes = True


class PermissionsListResponse(BaseModel):
    items: list[PermissionResponse]
    total: int


class UserPermissionsResponse(BaseModel):
    user_id: int
    permissions: list[PermissionResponse]
