"""Request/response schemas for user accounts."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from venio.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _strip_required(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must be non-empty")
    return value.strip()


class UserCreate(BaseModel):
    """Registration payload (also used by admins creating accounts)."""

    email: EmailStr = Field(..., description="Unique email address used to log in")
    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Unique username (3-50 chars)",
    )
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    avatar: str | None = Field(default=None, description="Avatar URL")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password (8-128 chars)",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return _strip_required(v)


class UserUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    email: EmailStr | None = None
    username: str | None = Field(
        default=None,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
    )
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    avatar: str | None = None
    is_active: bool | None = Field(
        default=None,
        description="Soft-disable flag; only users with users:write may change it",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return _normalize_email(v) if v is not None else None

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        return _strip_required(v) if v is not None else None


class AdminUserCreate(UserCreate):
    """Admin account creation with initial role ids."""

    roles: list[int] = Field(default_factory=list, description="Role ids to assign")


class UserResponse(BaseModel):
    """Public user representation (never includes password or tokens)."""

    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    avatar: str | None = None
    is_active: bool
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UsersListResponse(BaseModel):
    """Paginated user list."""

    items: list[UserResponse]
    total: int
