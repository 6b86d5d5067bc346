from hostel_occupancy.schemas.common.base import BaseSchema, BaseDBSchema, TimestampMixin
from hostel_occupancy.schemas.common.response import (
    ErrorDetail,
    ErrorResponse,
    MessageResponse,
    SuccessResponse,
)

__all__ = [
    "BaseSchema",
    "BaseDBSchema",
    "TimestampMixin",
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    "SuccessResponse",
]
