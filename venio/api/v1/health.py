"""Health, liveness and readiness endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from venio.core.config import settings
from venio.core.database import check_db_connected, get_db
from venio.schemas.health import HealthResponse, ProbeResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        database=db_status,
    )


@router.get("/live", response_model=ProbeResponse)
def get_live() -> ProbeResponse:
    return ProbeResponse(status="alive")


@router.get("/ready", response_model=ProbeResponse)
def get_ready(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> ProbeResponse:
    """Ready once the database answers; 503 otherwise."""
    if not check_db_connected(db):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ProbeResponse(status="not_ready")
    return ProbeResponse(status="ready")
