"""Auth and RBAC dependencies: get_current_user, require_role, require_permission."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from venio.core.database import get_db
from venio.core.errors import InvalidTokenError
from venio.schemas.auth import CurrentUser
from venio.schemas.common import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from venio.services import auth_service, user_role_service

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer access token and return its claims.

    Raises 401 if the header is missing, not a Bearer credential, or the token
    is invalid or expired. No database round-trip.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return auth_service.validate_access_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_role(role_name: str) -> Callable[..., CurrentUser]:
    """Dependency factory: 403 unless role_name is among the token's claimed roles."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_role(role_name):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User does not have required role",
            )
        return current_user

    return dependency


def require_any_role(*role_names: str) -> Callable[..., CurrentUser]:
    """Dependency factory: 403 unless at least one of role_names is claimed."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not any(current_user.has_role(name) for name in role_names):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User does not have any of the required roles",
            )
        return current_user

    return dependency


def require_permission(permission_name: str) -> Callable[..., CurrentUser]:
    """
    Dependency factory: 403 unless the user holds permission_name through a role.

    Permissions are not in the token; this queries user_roles -> role_permissions
    -> permissions on every request.
    """

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ) -> CurrentUser:
        if not user_role_service.has_permission(db, current_user.id, permission_name):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User does not have required permission",
            )
        return current_user

    return dependency


def require_any_permission(*permission_names: str) -> Callable[..., CurrentUser]:
    """Dependency factory: 403 unless the user holds at least one of permission_names."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ) -> CurrentUser:
        if not user_role_service.has_any_permission(db, current_user.id, permission_names):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User does not have any of the required permissions",
            )
        return current_user

    return dependency


require_admin = require_role("admin")


def ensure_self_or_permission(
    db: Session,
    current_user: CurrentUser,
    user_id: int,
    permission_name: str,
) -> None:
    """Allow callers acting on their own account; everyone else needs permission_name."""
    if current_user.id == user_id:
        return
    if not user_role_service.has_permission(db, current_user.id, permission_name):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not have required permission",
        )


class Pagination:
    """page/limit query parameters converted to limit/offset."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
        limit: Annotated[
            int, Query(ge=1, le=MAX_PAGE_SIZE, description="Items per page")
        ] = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.limit = limit
        self.offset = (page - 1) * limit
