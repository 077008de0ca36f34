"""Shared response schemas and pagination helpers."""

from pydantic import BaseModel, Field

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class MessageResponse(BaseModel):
    """Generic success message."""

    message: str = Field(..., description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """Error body used for documented failure responses."""

    detail: str = Field(..., description="Error message")
