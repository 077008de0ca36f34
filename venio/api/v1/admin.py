"""
Admin console endpoints.

Composite operations for the admin UI: create a user together with its roles,
create a role together with its permissions, and inspect the user_roles join
table. Every route requires the admin role.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from venio.api.v1.deps import Pagination, require_admin
from venio.api.v1.errors import http_error
from venio.core.config import Settings, get_settings
from venio.core.database import get_db
from venio.core.errors import ServiceError
from venio.schemas.auth import CurrentUser
from venio.schemas.permission import PermissionResponse, PermissionsListResponse
from venio.schemas.role import (
    AdminRoleCreate,
    AdminRoleItem,
    AdminRolesResponse,
    AssignmentsResponse,
    RemoveAssignmentRequest,
    RoleResponse,
    UserRoleAssignment,
)
from venio.schemas.user import AdminUserCreate, UserResponse, UsersListResponse
from venio.services import permission_service, role_service, user_role_service, user_service

router = APIRouter()

AdminUser = Annotated[CurrentUser, Depends(require_admin)]


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
) -> UsersListResponse:
    users, total = user_service.list_users(db, pagination.limit, pagination.offset)
    return UsersListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
    )


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminUserCreate,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    """Create a user with the given role ids instead of the default role."""
    try:
        user = user_service.create_user_with_roles(db, body, body.roles, settings)
    except ServiceError as e:
        raise http_error(e) from e
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        user_service.delete_user(db, user_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/roles", response_model=AdminRolesResponse)
def list_roles(
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
) -> AdminRolesResponse:
    roles, _total = role_service.list_roles(db, pagination.limit, pagination.offset)
    items = []
    for role in roles:
        item = AdminRoleItem.model_validate(role)
        item.user_count = role_service.count_role_users(db, role.id)
        items.append(item)
    return AdminRolesResponse(roles=items)


@router.post("/roles", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    body: AdminRoleCreate,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> RoleResponse:
    try:
        role = role_service.create_role_with_permissions(db, body)
    except ServiceError as e:
        raise http_error(e) from e
    return RoleResponse.model_validate(role)


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        role_service.delete_role(db, role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/permissions", response_model=PermissionsListResponse)
def list_permissions(
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
) -> PermissionsListResponse:
    permissions, total = permission_service.list_permissions(
        db, pagination.limit, pagination.offset
    )
    return PermissionsListResponse(
        items=[PermissionResponse.model_validate(p) for p in permissions],
        total=total,
    )


@router.get("/user-roles", response_model=AssignmentsResponse)
def list_user_roles(
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> AssignmentsResponse:
    rows = user_role_service.list_assignments(db)
    return AssignmentsResponse(
        assignments=[
            UserRoleAssignment(
                user_id=user_id,
                user_email=email,
                role_id=role_id,
                role_name=role_name,
                assigned_at=assigned_at,
            )
            for user_id, email, role_id, role_name, assigned_at in rows
        ]
    )


@router.delete("/user-roles", status_code=status.HTTP_204_NO_CONTENT)
def remove_user_role(
    body: RemoveAssignmentRequest,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        user_role_service.remove_role(db, body.user_id, body.role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
