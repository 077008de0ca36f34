"""Map service-layer errors to HTTP responses."""

from fastapi import HTTPException, status

from venio.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

_STATUS_BY_ERROR: list[tuple[type[ServiceError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
]


def http_error(e: ServiceError) -> HTTPException:
    """
    Build the HTTPException for a service error; callers raise it with `from e`.

    401 responses carry WWW-Authenticate: Bearer. Unknown subclasses become 400.
    """
    code = status.HTTP_400_BAD_REQUEST
    for error_type, mapped in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            code = mapped
            break
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=code, detail=e.message, headers=headers)
