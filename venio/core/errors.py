"""Domain errors raised by repositories and services; routers map them to HTTP statuses."""


class ServiceError(Exception):
    """Base class for expected, per-request failures (never retried)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(ServiceError):
    """Input failed a business rule (bad id, malformed name, weak password)."""


class NotFoundError(ServiceError):
    """User, role, permission or assignment does not exist."""


class ConflictError(ServiceError):
    """Duplicate name/email, in-use delete, or state already reached."""


class AuthenticationError(ServiceError):
    """Credentials rejected. Message is generic and never reveals which part failed."""


class InvalidTokenError(ServiceError):
    """Access, refresh or verification token is invalid, expired or revoked."""


class TokenExpiredError(InvalidTokenError):
    """Token was well-formed but is past its expiry."""
