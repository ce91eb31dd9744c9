"""
Common Schemas

Building blocks shared by every response.

- BaseSchema: ORM-readable base (from_attributes)
- MessageResponse: Plain acknowledgements (logout, password change)
- ErrorResponse: The body every failed request returns
- HealthResponse: /health payload
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Response models validated straight from ORM objects."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable error code, e.g. UNAUTHORIZED")
    message: str = Field(description="Human-readable explanation")
    details: Optional[dict[str, Any]] = Field(default=None, description="Extra context")


class ErrorResponse(BaseModel):
    """
    Error envelope produced by the exception handlers.

    Example:
        {"error": {"code": "UNAUTHORIZED", "message": "Invalid refresh token", "details": {}}}
    """

    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "videotube"
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
