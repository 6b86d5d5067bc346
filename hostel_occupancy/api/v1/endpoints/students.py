"""
Student endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from hostel_occupancy.api.v1.deps import get_student_service
from hostel_occupancy.api.v1.responses import service_response
from hostel_occupancy.schemas.student import BatchDeleteRequest, StudentCreate, StudentUpdate
from hostel_occupancy.services import StudentService

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("")
def list_students(
    request: Request,
    search: Optional[str] = Query(default=None),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return service_response(service.list_students(search, skip=skip, limit=limit), request)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreate,
    request: Request,
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return service_response(service.create_student(payload), request, status.HTTP_201_CREATED)


# Declared before /{student_id} so "batch" is not taken for an id
@router.delete("/batch")
def delete_batch(
    request: Request,
    department: str = Query(..., min_length=1),
    batch: str = Query(..., min_length=1),
    username: Optional[str] = Query(default=None),
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    payload = BatchDeleteRequest(department=department, batch=batch, username=username)
    return service_response(service.delete_batch(payload), request)


@router.get("/{student_id}")
def get_student(
    student_id: str,
    request: Request,
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return service_response(service.get_student(student_id), request)


@router.put("/{student_id}")
def update_student(
    student_id: str,
    payload: StudentUpdate,
    request: Request,
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return service_response(service.update_student(student_id, payload), request)


@router.delete("/{student_id}")
def delete_student(
    student_id: str,
    request: Request,
    username: Optional[str] = Query(default=None),
    service: StudentService = Depends(get_student_service),
) -> JSONResponse:
    return service_response(service.delete_student(student_id, username=username), request)
