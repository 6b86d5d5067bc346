"""Core application modules."""

from .exceptions import BaseAppException, ErrorCode
from .logging import get_logger

__all__ = ["BaseAppException", "ErrorCode", "get_logger"]
