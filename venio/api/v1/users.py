"""User endpoints: profile CRUD and per-user role and permission views."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from venio.api.v1.deps import (
    Pagination,
    ensure_self_or_permission,
    get_current_user,
    require_admin,
    require_permission,
)
from venio.api.v1.errors import http_error
from venio.core.database import get_db
from venio.core.errors import ServiceError
from venio.schemas.auth import CurrentUser
from venio.schemas.common import MessageResponse
from venio.schemas.permission import PermissionResponse, UserPermissionsResponse
from venio.schemas.role import AssignRoleRequest, RoleResponse, UserRolesResponse
from venio.schemas.user import UserResponse, UsersListResponse, UserUpdate
from venio.services import permission_service, user_role_service, user_service

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _user: Annotated[CurrentUser, Depends(require_permission("users:read"))],
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
) -> UsersListResponse:
    users, total = user_service.list_users(db, pagination.limit, pagination.offset)
    return UsersListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(require_permission("users:read"))],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    try:
        user = user_service.get_user(db, user_id)
    except ServiceError as e:
        raise http_error(e) from e
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Update a profile. Users may edit their own account; editing anyone else
    requires users:write. Only holders of users:write may change is_active.
    """
    ensure_self_or_permission(db, current_user, user_id, "users:write")
    if body.is_active is not None and not user_role_service.has_permission(
        db, current_user.id, "users:write"
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User does not have required permission",
        )
    try:
        user = user_service.update_user(db, user_id, body)
    except ServiceError as e:
        raise http_error(e) from e
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _user: Annotated[CurrentUser, Depends(require_permission("users:delete"))],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        user_service.delete_user(db, user_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/roles", response_model=UserRolesResponse)
def get_user_roles(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRolesResponse:
    ensure_self_or_permission(db, current_user, user_id, "users:read")
    try:
        user = user_service.get_user(db, user_id)
        roles = user_role_service.get_user_roles(db, user.id)
    except ServiceError as e:
        raise http_error(e) from e
    return UserRolesResponse(
        user_id=user.id,
        roles=[RoleResponse.model_validate(r) for r in roles],
    )


@router.get("/{user_id}/permissions", response_model=UserPermissionsResponse)
def get_user_permissions(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPermissionsResponse:
    """Effective permissions: the union of the permissions of every role the user holds."""
    ensure_self_or_permission(db, current_user, user_id, "users:read")
    try:
        user = user_service.get_user(db, user_id)
        permissions = permission_service.get_user_permissions(db, user.id)
    except ServiceError as e:
        raise http_error(e) from e
    return UserPermissionsResponse(
        user_id=user.id,
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )


@router.post("/{user_id}/roles", response_model=MessageResponse)
def assign_role(
    user_id: int,
    body: AssignRoleRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """
    Assign a role (admin only). Takes effect in the user's next access token,
    since role checks read the token claims.
    """
    try:
        created = user_role_service.assign_role(db, user_id, body.role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return MessageResponse(
        message="Role assigned." if created else "Role already assigned."
    )


@router.delete("/{user_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_role(
    user_id: int,
    role_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        user_role_service.remove_role(db, user_id, role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
