"""API v1 routes."""

from fastapi import APIRouter

from venio.api.v1 import admin, auth, health, permissions, roles, users
from venio.schemas.common import ErrorResponse

# Documented failures for routes behind get_current_user and the RBAC gates.
PROTECTED_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired access token"},
    403: {"model": ErrorResponse, "description": "Required role or permission missing"},
}

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(
    users.router, prefix="/users", tags=["users"], responses=PROTECTED_RESPONSES
)
router.include_router(
    roles.router, prefix="/roles", tags=["roles"], responses=PROTECTED_RESPONSES
)
router.include_router(
    permissions.router,
    prefix="/permissions",
    tags=["permissions"],
    responses=PROTECTED_RESPONSES,
)
router.include_router(
    admin.router, prefix="/admin", tags=["admin"], responses=PROTECTED_RESPONSES
)
