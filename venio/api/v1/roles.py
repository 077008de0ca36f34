"""Role management endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from venio.api.v1.deps import Pagination, require_admin
from venio.api.v1.errors import http_error
from venio.core.database import get_db
from venio.core.errors import ServiceError
from venio.schemas.auth import CurrentUser
from venio.schemas.common import MessageResponse
from venio.schemas.permission import PermissionResponse
from venio.schemas.role import (
    AssignPermissionRequest,
    RoleCreate,
    RoleResponse,
    RolesListResponse,
    RoleUpdate,
)
from venio.services import role_service

router = APIRouter()

AdminUser = Annotated[CurrentUser, Depends(require_admin)]


@router.get("", response_model=RolesListResponse)
def list_roles(
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
) -> RolesListResponse:
    roles, total = role_service.list_roles(db, pagination.limit, pagination.offset)
    return RolesListResponse(
        items=[RoleResponse.model_validate(r) for r in roles],
        total=total,
    )


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreate,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> RoleResponse:
    try:
        role = role_service.create_role(db, body)
    except ServiceError as e:
        raise http_error(e) from e
    return RoleResponse.model_validate(role)


@router.get("/{role_id}", response_model=RoleResponse)
def get_role(
    role_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> RoleResponse:
    try:
        role = role_service.get_role(db, role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return RoleResponse.model_validate(role)


@router.put("/{role_id}", response_model=RoleResponse)
def update_role(
    role_id: int,
    body: RoleUpdate,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> RoleResponse:
    try:
        role = role_service.update_role(db, role_id, body)
    except ServiceError as e:
        raise http_error(e) from e
    return RoleResponse.model_validate(role)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(
    role_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a role. 409 while any user still holds it."""
    try:
        role_service.delete_role(db, role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{role_id}/permissions", response_model=list[PermissionResponse])
def get_role_permissions(
    role_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> list[PermissionResponse]:
    try:
        permissions = role_service.get_role_permissions(db, role_id)
    except ServiceError as e:
        raise http_error(e) from e
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post("/{role_id}/permissions", response_model=MessageResponse)
def assign_permission(
    role_id: int,
    body: AssignPermissionRequest,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    try:
        created = role_service.assign_permission_to_role(db, role_id, body.permission_id)
    except ServiceError as e:
        raise http_error(e) from e
    return MessageResponse(
        message="Permission assigned." if created else "Permission already assigned."
    )


@router.delete(
    "/{role_id}/permissions/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_permission(
    role_id: int,
    permission_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    try:
        role_service.remove_permission_from_role(db, role_id, permission_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
