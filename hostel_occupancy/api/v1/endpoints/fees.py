"""
Challan and fee endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from hostel_occupancy.api.v1.deps import get_fee_service
from hostel_occupancy.api.v1.responses import service_response
from hostel_occupancy.schemas.challan import ChallanCreate, MarkPaidRequest
from hostel_occupancy.services import FeeService

router = APIRouter(tags=["Fees"])


@router.get("/challans")
def list_challans(
    request: Request,
    status_filter: Optional[str] = Query(
        default=None,
        alias="status",
        pattern="^(pending|paid|overdue|cancelled)$",
    ),
    registration_number: Optional[str] = Query(default=None, alias="registrationNumber"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    service: FeeService = Depends(get_fee_service),
) -> JSONResponse:
    result = service.list_challans(status_filter, registration_number, skip=skip, limit=limit)
    return service_response(result, request)


@router.post("/challans", status_code=status.HTTP_201_CREATED)
def create_challan(
    payload: ChallanCreate,
    request: Request,
    username: Optional[str] = Query(default=None),
    service: FeeService = Depends(get_fee_service),
) -> JSONResponse:
    return service_response(service.create_challan(payload, username=username), request, status.HTTP_201_CREATED)


@router.post("/challans/mark-paid")
def mark_paid(
    payload: MarkPaidRequest,
    request: Request,
    service: FeeService = Depends(get_fee_service),
) -> JSONResponse:
    return service_response(service.mark_paid(payload), request)


@router.get("/fees/structure")
def fee_structure(
    request: Request,
    search: Optional[str] = Query(default=None),
    pending_only: bool = Query(default=False, alias="pendingOnly"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    service: FeeService = Depends(get_fee_service),
) -> JSONResponse:
    result = service.fee_structure(search, pending_only=pending_only, skip=skip, limit=limit)
    return service_response(result, request)
