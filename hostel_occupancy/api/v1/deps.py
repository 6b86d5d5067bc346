"""
FastAPI dependencies: one request-scoped session, services built on it.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from hostel_occupancy.config.database import get_db_session
from hostel_occupancy.repositories import (
    AuditLogRepository,
    ChallanRepository,
    HostelRepository,
    StudentRepository,
)
from hostel_occupancy.services import (
    AuditLogService,
    FeeService,
    HostelService,
    RosterService,
    StudentService,
)


def get_db(db: Session = Depends(get_db_session)) -> Session:
    return db


def get_roster_service(db: Session = Depends(get_db)) -> RosterService:
    return RosterService(HostelRepository(db), db)


def get_hostel_service(db: Session = Depends(get_db)) -> HostelService:
    return HostelService(HostelRepository(db), db)


def get_student_service(db: Session = Depends(get_db)) -> StudentService:
    return StudentService(StudentRepository(db), db)


def get_fee_service(db: Session = Depends(get_db)) -> FeeService:
    return FeeService(ChallanRepository(db), db)


def get_audit_log_service(db: Session = Depends(get_db)) -> AuditLogService:
    return AuditLogService(AuditLogRepository(db), db)


__all__ = [
    "get_db",
    "get_roster_service",
    "get_hostel_service",
    "get_student_service",
    "get_fee_service",
    "get_audit_log_service",
]
