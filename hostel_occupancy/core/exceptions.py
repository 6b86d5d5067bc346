"""
Custom Exceptions for the Hostel Occupancy Service

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    OPERATION_FAILED = "OPERATION_FAILED"
    CONFLICT = "CONFLICT"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Allocation errors
    INVALID_STRUCTURAL_DEFINITION = "INVALID_STRUCTURAL_DEFINITION"
    NO_CAPACITY_AVAILABLE = "NO_CAPACITY_AVAILABLE"

    # Data source and cascade errors
    EXTERNAL_SOURCE_UNAVAILABLE = "EXTERNAL_SOURCE_UNAVAILABLE"
    CASCADE_STEP_FAILED = "CASCADE_STEP_FAILED"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, 422)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class DuplicateEntryError(BaseAppException):
    """Exception raised when a unique field already holds the value"""

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            f"{resource_type} with this {field} already exists",
            ErrorCode.DUPLICATE_ENTRY,
            {"resource_type": resource_type, "field": field, "value": value},
            409,
        )


# ========================================
# Allocation Exceptions
# ========================================

class InvalidStructuralDefinition(BaseAppException):
    """Hostel has neither valid blocks nor a positive room count"""

    def __init__(self, hostel_name: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or f"Hostel '{hostel_name or ''}' has neither blocks nor a positive room count",
            ErrorCode.INVALID_STRUCTURAL_DEFINITION,
            {"hostel": hostel_name},
            422,
        )


class NoCapacityAvailable(BaseAppException):
    """Every room of the hostel, overflow rooms included, is saturated"""

    def __init__(self, hostel_name: str, rooms_inspected: int = 0):
        super().__init__(
            f"No room with free capacity in hostel '{hostel_name}'",
            ErrorCode.NO_CAPACITY_AVAILABLE,
            {"hostel": hostel_name, "rooms_inspected": rooms_inspected},
            409,
        )


# ========================================
# Data Source & Cascade Exceptions
# ========================================

class ExternalSourceUnavailable(BaseAppException):
    """A data-source read or write failed; never retried internally"""

    def __init__(self, source: str, operation: str, reason: Optional[str] = None):
        message = f"Data source '{source}' unavailable during {operation}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            ErrorCode.EXTERNAL_SOURCE_UNAVAILABLE,
            {"source": source, "operation": operation},
            503,
        )
        self.source = source
        self.operation = operation


class CascadeStepFailed(BaseAppException):
    """A step of a mutation cascade failed"""

    def __init__(
        self,
        step: str,
        entity_id: Optional[str] = None,
        fatal: bool = True,
        reason: Optional[str] = None,
    ):
        message = f"Cascade step '{step}' failed"
        if entity_id:
            message += f" for {entity_id}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            ErrorCode.CASCADE_STEP_FAILED,
            {"step": step, "entity_id": entity_id, "fatal": fatal},
            500,
        )
        self.step = step
        self.entity_id = entity_id
        self.fatal = fatal


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "DuplicateEntryError",
    "InvalidStructuralDefinition",
    "NoCapacityAvailable",
    "ExternalSourceUnavailable",
    "CascadeStepFailed",
]
