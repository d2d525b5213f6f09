"""Response envelope shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import Field

from app.schemas.base import CamelModel

T = TypeVar("T")


class Envelope(CamelModel, Generic[T]):
    """Successful response: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: T


class ErrorBody(CamelModel):
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Any | None = None


class ErrorResponse(CamelModel):
    """Standard error body: ``{"success": false, "error": {...}}``."""

    success: bool = False
    error: ErrorBody


class MessageData(CamelModel):
    message: str
