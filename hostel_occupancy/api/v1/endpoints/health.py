"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy import __version__
from hostel_occupancy.api.v1.deps import get_db
from hostel_occupancy.core.logging import get_logger
from hostel_occupancy.schemas.common.response import SuccessResponse

router = APIRouter(prefix="/health", tags=["Health"])
logger = get_logger(__name__)


@router.get("")
def health(db: Session = Depends(get_db)) -> JSONResponse:
    database = "ok"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check database query failed: {e}")
        database = "unavailable"

    body = SuccessResponse.create(
        message="Service is healthy" if database == "ok" else "Service is degraded",
        data={"status": "ok" if database == "ok" else "degraded", "version": __version__, "database": database},
    )
    return JSONResponse(
        status_code=200 if database == "ok" else 503,
        content=body.model_dump(mode="json", by_alias=True),
    )
