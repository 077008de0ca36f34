"""Permission management endpoints (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from venio.api.v1.deps import Pagination, require_admin
from venio.api.v1.errors import http_error
from venio.core.database import get_db
from venio.core.errors import ServiceError
from venio.schemas.auth import CurrentUser
from venio.schemas.permission import (
    PermissionCreate,
    PermissionResponse,
    PermissionsListResponse,
    PermissionUpdate,
)
from venio.services import permission_service

router = APIRouter()

AdminUser = Annotated[CurrentUser, Depends(require_admin)]


@router.get("", response_model=PermissionsListResponse)
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


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
def create_permission(
    body: PermissionCreate,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> PermissionResponse:
    """Create a permission named resource:action (e.g. reports:export)."""
    try:
        permission = permission_service.create_permission(db, body)
    except ServiceError as e:
        raise http_error(e) from e
    return PermissionResponse.model_validate(permission)


@router.get("/{permission_id}", response_model=PermissionResponse)
def get_permission(
    permission_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> PermissionResponse:
    try:
        permission = permission_service.get_permission(db, permission_id)
    except ServiceError as e:
        raise http_error(e) from e
    return PermissionResponse.model_validate(permission)


@router.put("/{permission_id}", response_model=PermissionResponse)
def update_permission(
    permission_id: int,
    body: PermissionUpdate,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> PermissionResponse:
    try:
        permission = permission_service.update_permission(db, permission_id, body)
    except ServiceError as e:
        raise http_error(e) from e
    return PermissionResponse.model_validate(permission)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission(
    permission_id: int,
    _admin: AdminUser,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a permission. 409 while any role still grants it."""
    try:
        permission_service.delete_permission(db, permission_id)
    except ServiceError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
