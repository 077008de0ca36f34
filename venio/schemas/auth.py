"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from venio.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from venio.schemas.permission import PermissionResponse
from venio.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    """Access and refresh tokens returned after login or refresh."""

    access_token: str = Field(..., description="JWT access token (short-lived)")
    refresh_token: str = Field(..., description="Opaque refresh token (single use)")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: UserResponse


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, max_length=512)


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=64, max_length=128, description="Verification token")


class ResendVerificationRequest(BaseModel):
    email: EmailStr = Field(..., max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class CurrentUser(BaseModel):
    """Claims of the authenticated caller, taken from a verified access token."""

    id: int
    email: str
    username: str
    roles: list[str] = Field(default_factory=list)

    def has_role(self, name: str) -> bool:
        return name in self.roles


class MeResponse(BaseModel):
    """Current user profile with roles and effective permissions."""

    user: UserResponse
    roles: list[str]
    permissions: list[PermissionResponse]
