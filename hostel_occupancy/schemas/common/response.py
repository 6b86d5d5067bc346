"""
Standard API response wrappers for success and error outcomes.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import Field

from hostel_occupancy.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = [
    "SuccessResponse",
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    message: str = Field(..., description="Response message")
    data: Union[T, None] = Field(default=None, description="Response data")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional context")

    @classmethod
    def create(
        cls,
        message: str,
        data: Union[T, None] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Create success response."""
        return cls(success=True, message=message, data=data, metadata=metadata or {})


class ErrorDetail(BaseSchema):
    """Error detail information."""

    field: Union[str, None] = Field(
        default=None,
        description="Field name causing error",
    )
    message: str = Field(..., description="Error message")
    code: Union[str, None] = Field(
        default=None,
        description="Error code",
    )


class ErrorResponse(BaseSchema):
    """Standard error response."""

    success: bool = Field(default=False, description="Success flag")
    message: str = Field(..., description="Error message")
    errors: Union[List[ErrorDetail], None] = Field(
        default=None,
        description="Detailed errors",
    )
    error_code: Union[str, None] = Field(
        default=None,
        description="Application error code",
    )
    details: Dict[str, Any] = Field(default_factory=dict, description="Error context")
    timestamp: Union[str, None] = Field(
        default=None,
        description="Error timestamp",
    )
    path: Union[str, None] = Field(
        default=None,
        description="Request path that caused error",
    )

    @classmethod
    def create(
        cls,
        message: str,
        errors: Union[List[ErrorDetail], None] = None,
        error_code: Union[str, None] = None,
        details: Optional[Dict[str, Any]] = None,
        path: Optional[str] = None,
    ):
        """Create error response."""
        return cls(
            success=False,
            message=message,
            errors=errors,
            error_code=error_code,
            details=details or {},
            timestamp=datetime.now(timezone.utc).isoformat(),
            path=path,
        )


class MessageResponse(BaseSchema):
    """Simple message response."""

    message: str = Field(..., description="Response message")
