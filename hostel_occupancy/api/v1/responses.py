"""
Conversion of `ServiceResult` objects into HTTP responses.
"""

from typing import Any, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse

from hostel_occupancy.core.error_handling import error_json
from hostel_occupancy.core.exceptions import ErrorCode
from hostel_occupancy.schemas.common.response import ErrorDetail, ErrorResponse, SuccessResponse
from hostel_occupancy.services.base import ServiceResult

ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_STRUCTURAL_DEFINITION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.DUPLICATE_ENTRY: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.NO_CAPACITY_AVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.EXTERNAL_SOURCE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.CASCADE_STEP_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.OPERATION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def success_json(result: ServiceResult[Any], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    body = SuccessResponse.create(
        message=result.message or "OK",
        data=result.data,
        metadata=result.metadata,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


def service_response(
    result: ServiceResult[Any],
    request: Request,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Render a result as the success envelope, or the error envelope with a mapped status."""
    if result.is_success:
        return success_json(result, status_code)

    error = result.error
    errors = None
    if error.field:
        errors = [ErrorDetail(field=error.field, message=error.message, code=error.code.value)]
    return error_json(
        ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        ErrorResponse.create(
            message=error.message,
            errors=errors,
            error_code=error.code.value,
            details=error.details or {},
            path=request.url.path,
        ),
    )


__all__ = ["ERROR_STATUS", "service_response", "success_json"]
