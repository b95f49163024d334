from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class BaseResponse(BaseModel):
    """Base response schema with common fields."""

    success: bool = Field(..., description="Whether the operation was successful")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")


class SuccessResponse(BaseResponse, Generic[T]):
    """Generic success response with typed data."""

    data: T = Field(..., description="Response data")
    message: str | None = Field(None, description="Optional success message")

    @classmethod
    def ok(cls, data: T, message: str | None = None) -> "SuccessResponse[T]":
        """Convenience constructor to avoid payload dicts."""
        return cls.model_validate({"success": True, "data": data, "message": message})


class ErrorResponse(BaseResponse):
    """Error response schema."""

    error: dict[str, Any] = Field(..., description="Error details")
    message: str = Field(..., description="Error message")


class HealthCheckResponse(BaseResponse):
    """Health check response schema."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    database: dict[str, Any] = Field(..., description="Database status")
