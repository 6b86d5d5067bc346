"""
Audit log endpoints. Entries can be appended and listed, never edited.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from hostel_occupancy.api.v1.deps import get_audit_log_service
from hostel_occupancy.api.v1.responses import service_response
from hostel_occupancy.schemas.audit import AuditLogCreate
from hostel_occupancy.services import AuditLogService

router = APIRouter(prefix="/logs", tags=["Audit Logs"])


@router.get("")
def list_logs(
    request: Request,
    username: Optional[str] = Query(default=None),
    subject_id: Optional[str] = Query(default=None, alias="subjectId"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    service: AuditLogService = Depends(get_audit_log_service),
) -> JSONResponse:
    result = service.list_entries(username=username, subject_id=subject_id, skip=skip, limit=limit)
    return service_response(result, request)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_log(
    payload: AuditLogCreate,
    request: Request,
    service: AuditLogService = Depends(get_audit_log_service),
) -> JSONResponse:
    return service_response(service.create_entry(payload), request, status.HTTP_201_CREATED)
