"""
Global exception rendering.

Any exception escaping a route is turned into the standard `ErrorResponse`
envelope with a status taken from the exception.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from hostel_occupancy.core.exceptions import BaseAppException, ErrorCode
from hostel_occupancy.core.logging import get_logger
from hostel_occupancy.schemas.common.response import ErrorDetail, ErrorResponse

logger = get_logger(__name__)


def error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )


class GlobalExceptionHandler(BaseHTTPMiddleware):
    """Global exception handling middleware"""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)

        except BaseAppException as e:
            return self._handle_application_exception(e, request)

        except ValidationError as e:
            return self._handle_validation_error(e, request)

        except SQLAlchemyError as e:
            return self._handle_database_error(e, request)

        except Exception as e:
            return self._handle_unexpected_exception(e, request)

    def _handle_application_exception(self, exception: BaseAppException, request: Request) -> JSONResponse:
        log = logger.warning if exception.status_code < 500 else logger.error
        log(
            f"Application exception: {exception}",
            extra={
                "error_code": exception.error_code.value,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return error_json(
            exception.status_code,
            ErrorResponse.create(
                message=exception.message,
                error_code=exception.error_code.value,
                details=exception.details,
                path=request.url.path,
            ),
        )

    def _handle_validation_error(self, exception: ValidationError, request: Request) -> JSONResponse:
        errors = [
            ErrorDetail(
                field=".".join(str(x) for x in error["loc"]) or None,
                message=error["msg"],
                code=error["type"],
            )
            for error in exception.errors()
        ]
        logger.warning(
            f"Validation error: {len(errors)} field(s) failed validation",
            extra={"path": request.url.path, "method": request.method},
        )
        return error_json(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ErrorResponse.create(
                message="Request validation failed",
                errors=errors,
                error_code=ErrorCode.VALIDATION_ERROR.value,
                path=request.url.path,
            ),
        )

    def _handle_database_error(self, exception: SQLAlchemyError, request: Request) -> JSONResponse:
        if isinstance(exception, IntegrityError):
            error_code = ErrorCode.DUPLICATE_ENTRY
            message = "Database integrity constraint violation"
            status_code = status.HTTP_409_CONFLICT
        else:
            error_code = ErrorCode.EXTERNAL_SOURCE_UNAVAILABLE
            message = "Database operation failed"
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE

        logger.error(
            f"Database exception: {error_code.value}",
            extra={
                "exception_type": type(exception).__name__,
                "path": request.url.path,
                "method": request.method,
            },
            exc_info=True,
        )
        return error_json(
            status_code,
            ErrorResponse.create(message=message, error_code=error_code.value, path=request.url.path),
        )

    def _handle_unexpected_exception(self, exception: Exception, request: Request) -> JSONResponse:
        logger.critical(
            f"Unexpected exception: {type(exception).__name__} - {exception}",
            extra={"path": request.url.path, "method": request.method},
            exc_info=True,
        )
        return error_json(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse.create(
                message="An unexpected error occurred",
                error_code=ErrorCode.INTERNAL_ERROR.value,
                path=request.url.path,
            ),
        )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI request validation failures in the standard envelope."""
    errors = [
        ErrorDetail(
            field=".".join(str(x) for x in error["loc"]),
            message=error["msg"],
            code=error["type"],
        )
        for error in exc.errors()
    ]
    logger.warning(
        f"Request validation failed: {len(errors)} error(s)",
        extra={"path": request.url.path, "method": request.method},
    )
    return error_json(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse.create(
            message="Request validation failed",
            errors=errors,
            error_code=ErrorCode.VALIDATION_ERROR.value,
            path=request.url.path,
        ),
    )


__all__ = ["GlobalExceptionHandler", "error_json", "request_validation_handler"]
