"""Auth endpoints: register, login, token refresh, logout, email verification."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from venio.api.v1.deps import get_current_user
from venio.api.v1.errors import http_error
from venio.core.config import Settings, get_settings
from venio.core.database import get_db
from venio.core.errors import InvalidTokenError, ServiceError
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
from venio.schemas.common import MessageResponse
from venio.schemas.permission import PermissionResponse
from venio.schemas.user import UserCreate, UserResponse
from venio.services import auth_service, permission_service, user_role_service, user_service
from venio.services.auth_service import IssuedTokens


router = APIRouter()


def _token_response(tokens: IssuedTokens) -> TokenResponse:
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type="bearer",
        expires_in=tokens.expires_in,
        user=UserResponse.model_validate(tokens.user),
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    """
    Create an account. The new user is active, unverified, and holds the
    default role. A verification token is generated right away.
    """
    try:
        user = user_service.register(db, body, settings)
        auth_service.generate_email_verification_token(db, user.id, settings)
    except ServiceError as e:
        raise http_error(e) from e
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns an access token and a refresh token.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    try:
        tokens = auth_service.login(db, body.email, body.password, settings)
    except ServiceError as e:
        raise http_error(e) from e
    return _token_response(tokens)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """Exchange a refresh token for a new token pair. The old refresh token stops working."""
    try:
        tokens = auth_service.refresh(db, body.refresh_token, settings)
    except ServiceError as e:
        raise http_error(e) from e
    return _token_response(tokens)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    auth_service.logout(db, body.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(
    body: VerifyEmailRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    try:
        auth_service.verify_email(db, body.token)
    except InvalidTokenError as e:
        # Not an auth failure: the caller is anonymous and the link is bad.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except ServiceError as e:
        raise http_error(e) from e
    return MessageResponse(message="Email verified.")


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(
    body: ResendVerificationRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    try:
        auth_service.resend_verification_email(db, body.email, settings)
    except ServiceError as e:
        raise http_error(e) from e
    return MessageResponse(message="Verification email sent.")


@router.get("/me", response_model=MeResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MeResponse:
    """Current user's profile, role names and effective permissions (read from the database)."""
    try:
        user = user_service.get_user(db, current_user.id)
        roles = user_role_service.get_user_role_names(db, user.id)
        permissions = permission_service.get_user_permissions(db, user.id)
    except ServiceError as e:
        raise http_error(e) from e
    return MeResponse(
        user=UserResponse.model_validate(user),
        roles=roles,
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Change the caller's password. All refresh tokens are revoked."""
    try:
        user_service.change_password(
            db, current_user.id, body.current_password, body.new_password
        )
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
