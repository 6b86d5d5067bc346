"""
Challan and fee schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import Field

from hostel_occupancy.schemas.common.base import BaseDBSchema, BaseSchema
from hostel_occupancy.schemas.student import StudentResponse

__all__ = [
    "ChallanCreate",
    "ChallanResponse",
    "MarkPaidRequest",
    "MarkPaidResult",
    "FeeStructureRow",
]


class ChallanCreate(BaseSchema):
    student_id: str
    semester: Optional[int] = Field(default=None, ge=1, le=12)
    amount: Optional[Decimal] = Field(default=None, ge=0)


class ChallanResponse(BaseDBSchema):
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    registration_number: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[int] = None
    challan_number: str
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    status: str
    paid_at: Optional[datetime] = None
    current_status: Optional[str] = Field(
        default=None,
        description="Status derived from the due date at read time",
    )


class MarkPaidRequest(BaseSchema):
    """Mark a student's challan as paid."""

    registration_number: str = Field(..., min_length=1)
    challan_number: Optional[str] = None
    semester: Optional[int] = Field(default=None, ge=1, le=12)
    username: Optional[str] = None


class MarkPaidResult(BaseSchema):
    student: StudentResponse
    challan: Optional[ChallanResponse] = None
    semester_key: Optional[str] = None


class FeeStructureRow(BaseSchema):
    """Fee table of one student, limited to the semesters of the program."""

    student_id: str
    student_name: str
    registration_number: str
    department: Optional[str] = None
    degree: Optional[str] = None
    assigned_hostel: Optional[str] = None
    room_number: Optional[str] = None
    challan_number: Optional[str] = None
    max_semesters: int
    fee_table: Dict[str, str] = Field(default_factory=dict)
    has_pending: bool = True
