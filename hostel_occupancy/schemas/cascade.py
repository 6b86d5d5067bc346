"""
Cascade side-effect reports returned by mutating operations.
"""

from typing import Optional

from pydantic import Field

from hostel_occupancy.schemas.common.base import BaseSchema
from hostel_occupancy.schemas.student import StudentResponse

__all__ = ["CascadeReport", "StudentMutation"]


class CascadeReport(BaseSchema):
    """Counts of dependent records touched by one mutation."""

    operation: str
    entity_id: Optional[str] = None
    students_deleted: int = 0
    challans_deleted: int = 0
    assignments_removed: int = 0
    assignments_added: int = 0
    logs_removed: int = 0
    log_cleanup_failed: bool = False
    log_cleanup_truncated: bool = Field(
        default=False,
        description="Batch matched more students than the log cleanup bound",
    )
    audit_entry_id: Optional[str] = None


class StudentMutation(BaseSchema):
    student: Optional[StudentResponse] = None
    cascade: CascadeReport
