"""
Audit log service.

Entries are appended with a structured `subject_id` whenever the subject is
known, so cascades can find them without matching description text.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from hostel_occupancy.models.audit_log import AuditLog
from hostel_occupancy.repositories.audit_log_repository import AuditLogRepository
from hostel_occupancy.schemas.audit import AuditLogCreate, AuditLogResponse
from hostel_occupancy.services.base import BaseService, ServiceResult
from hostel_occupancy.services.constants import (
    DEFAULT_ACTOR,
    DEFAULT_ROLE,
    ENTITY_SYSTEM,
    SUCCESS_LOG_CREATED,
    SUCCESS_LOGS_RETRIEVED,
)


class AuditLogService(BaseService[AuditLog, AuditLogRepository]):
    def __init__(self, repository: AuditLogRepository, db_session: Session):
        super().__init__(repository, db_session)

    def append(
        self,
        action: str,
        description: str,
        username: Optional[str] = None,
        role: Optional[str] = None,
        hostel: Optional[str] = None,
        entity_type: Optional[str] = None,
        subject_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """Stage a new entry in the caller's transaction."""
        entry = AuditLog(
            action=action,
            description=description,
            username=username or DEFAULT_ACTOR,
            role=role or DEFAULT_ROLE,
            hostel=hostel,
            entity_type=entity_type or ENTITY_SYSTEM,
            subject_id=subject_id,
            details=details or {},
        )
        return self.repository.add(entry)

    def create_entry(self, data: AuditLogCreate) -> ServiceResult[AuditLogResponse]:
        try:
            with self.transaction():
                entry = self.append(**data.model_dump())
            return ServiceResult.success(
                AuditLogResponse.model_validate(entry),
                message=SUCCESS_LOG_CREATED,
            )
        except Exception as e:
            return self._handle_exception(e, "create log entry", data.action)

    def list_entries(
        self,
        username: Optional[str] = None,
        subject_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> ServiceResult[List[AuditLogResponse]]:
        """Newest first."""
        try:
            entries = self.repository.list_recent(username, subject_id, skip, limit)
            return ServiceResult.success(
                [AuditLogResponse.model_validate(e) for e in entries],
                message=SUCCESS_LOGS_RETRIEVED,
                metadata={"count": len(entries)},
            )
        except Exception as e:
            return self._handle_exception(e, "list log entries")
