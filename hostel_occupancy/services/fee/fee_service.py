"""
Fee service: challans, payments and per-student fee tables.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from hostel_occupancy.config.settings import settings
from hostel_occupancy.core.exceptions import ResourceNotFoundError, ValidationError
from hostel_occupancy.models.challan import Challan
from hostel_occupancy.models.student import Student
from hostel_occupancy.repositories.challan_repository import ChallanRepository
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.schemas.challan import (
    ChallanCreate,
    ChallanResponse,
    FeeStructureRow,
    MarkPaidRequest,
    MarkPaidResult,
)
from hostel_occupancy.schemas.student import StudentResponse
from hostel_occupancy.services.audit.audit_log_service import AuditLogService
from hostel_occupancy.repositories.audit_log_repository import AuditLogRepository
from hostel_occupancy.services.base import BaseService, ServiceResult
from hostel_occupancy.services.constants import (
    ACTION_CREATE_CHALLAN,
    ACTION_PAYMENT,
    ENTITY_PAYMENT,
    ERROR_CHALLAN_NOT_FOUND,
    ERROR_STUDENT_NOT_FOUND,
    SUCCESS_CHALLAN_CREATED,
    SUCCESS_CHALLANS_RETRIEVED,
    SUCCESS_FEE_STRUCTURE,
    SUCCESS_PAYMENT_MARKED,
)
from hostel_occupancy.services.fee.challan_numbers import generate_challan_number

FEE_PAID = "paid"
FEE_PENDING = "pending"


def semester_key(semester: int) -> str:
    return f"sem{semester}"


def challan_due_date(semester: int, today: Optional[date] = None, grace_days: Optional[int] = None) -> date:
    """
    Day 30 of month ``5 + 2 * semester`` (counted from January of the
    current year, overflowing into later months and years), plus the grace
    period.
    """
    today = today or date.today()
    grace = settings.CHALLAN_GRACE_DAYS if grace_days is None else grace_days
    month = 5 + 2 * semester
    first = date(today.year + month // 12, month % 12 + 1, 1)
    return first + timedelta(days=29 + grace)


def challan_status(challan: Challan, today: Optional[date] = None) -> str:
    """Status of a challan as of `today`, derived from its due date."""
    if challan.status == FEE_PAID:
        return FEE_PAID
    if challan.due_date is None:
        return challan.status
    days_overdue = ((today or date.today()) - challan.due_date).days
    if days_overdue > settings.CHALLAN_CANCEL_AFTER_DAYS:
        return "cancelled"
    if days_overdue > 0:
        return "overdue"
    return FEE_PENDING


def max_semesters(department: Optional[str], degree: Optional[str] = None) -> int:
    pattern = re.compile(settings.EXTENDED_PROGRAM_PATTERN, re.IGNORECASE)
    for program in (department, degree):
        if program and pattern.search(program):
            return settings.EXTENDED_MAX_SEMESTERS
    return settings.DEFAULT_MAX_SEMESTERS


def has_pending_fees(fee_table: Optional[Dict[str, str]]) -> bool:
    if not fee_table:
        return True
    return any(value == FEE_PENDING for value in fee_table.values())


def fee_table_view(student: Student) -> Dict[str, str]:
    """Semesters 1..N of the student's program; missing entries read as pending."""
    table = student.fee_table or {}
    count = max_semesters(student.department, student.degree)
    return {
        semester_key(n): table.get(semester_key(n), FEE_PENDING)
        for n in range(1, count + 1)
    }


class FeeService(BaseService[Challan, ChallanRepository]):
    def __init__(self, repository: ChallanRepository, db_session: Session):
        super().__init__(repository, db_session)
        self.students = StudentRepository(db_session)
        self.audit = AuditLogService(AuditLogRepository(db_session), db_session)

    def _response(self, challan: Challan) -> ChallanResponse:
        response = ChallanResponse.model_validate(challan)
        response.current_status = challan_status(challan)
        return response

    def _number_taken(self, candidate: str) -> bool:
        return self.repository.number_exists(candidate) or self.students.challan_number_exists(candidate)

    def create_challan(self, data: ChallanCreate, username: Optional[str] = None) -> ServiceResult[ChallanResponse]:
        """
        Issue a challan for the student's current billing cycle. The new
        number becomes the student's active challan number.
        """
        try:
            student = self.students.get_by_id(data.student_id)
            if student is None:
                raise ResourceNotFoundError("Student", data.student_id, ERROR_STUDENT_NOT_FOUND)
            semester = data.semester or student.semester or 1

            with self.transaction():
                challan = self.repository.add(
                    Challan(
                        student_id=student.id,
                        student_name=student.student_name,
                        registration_number=student.registration_number,
                        department=student.department,
                        semester=semester,
                        challan_number=generate_challan_number(exists=self._number_taken),
                        amount=data.amount,
                        due_date=challan_due_date(semester),
                        status=FEE_PENDING,
                    )
                )
                student.challan_number = challan.challan_number
                self.audit.append(
                    ACTION_CREATE_CHALLAN,
                    f"Challan {challan.challan_number} created for {student.student_name} "
                    f"({student.registration_number})",
                    username=username,
                    hostel=student.assigned_hostel,
                    entity_type=ENTITY_PAYMENT,
                    subject_id=student.id,
                )

            self._log_operation("create challan", challan.challan_number, {"student_id": student.id})
            return ServiceResult.success(self._response(challan), message=SUCCESS_CHALLAN_CREATED)
        except Exception as e:
            return self._handle_exception(e, "create challan", data.student_id)

    def list_challans(
        self,
        status: Optional[str] = None,
        registration_number: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> ServiceResult[List[ChallanResponse]]:
        """
        Challans with their derived status. A `status` filter applies to the
        derived status, not the stored one.
        """
        try:
            challans = self.repository.list_filtered(registration_number=registration_number)
            responses = [self._response(c) for c in challans]
            if status:
                responses = [r for r in responses if r.current_status == status]
            page = responses[skip : skip + limit]
            return ServiceResult.success(
                page,
                message=SUCCESS_CHALLANS_RETRIEVED,
                metadata={"count": len(page), "total": len(responses)},
            )
        except Exception as e:
            return self._handle_exception(e, "list challans")

    def mark_paid(self, data: MarkPaidRequest) -> ServiceResult[MarkPaidResult]:
        """
        Record a payment against a student's challan.

        Without an explicit challan number the student's active one is used.
        """
        try:
            student = self.students.get_by_registration_number(data.registration_number)
            if student is None:
                raise ResourceNotFoundError("Student", data.registration_number, ERROR_STUDENT_NOT_FOUND)
            challan_number = (data.challan_number or student.challan_number or "").strip()
            if not challan_number:
                raise ValidationError(
                    "Challan number is required",
                    field_errors={"challanNumber": ["missing"]},
                )

            challan = self.repository.get_by_number(challan_number)
            if challan is None and challan_number != student.challan_number:
                raise ResourceNotFoundError("Challan", challan_number, ERROR_CHALLAN_NOT_FOUND)

            key = semester_key(data.semester) if data.semester else None
            with self.transaction():
                if challan is not None:
                    challan.status = FEE_PAID
                    challan.paid_at = datetime.now(timezone.utc)
                fee_table = dict(student.fee_table or {})
                if key:
                    fee_table[key] = FEE_PAID
                self.students.update(
                    student,
                    {"fee_table": fee_table, "hostel_fee": FEE_PAID, "challan_number": challan_number},
                )
                description = f"Payment marked for student {student.student_name} ({student.registration_number})"
                if data.semester:
                    description += f" - Semester {data.semester}"
                self.audit.append(
                    ACTION_PAYMENT,
                    description,
                    username=data.username,
                    hostel=student.assigned_hostel,
                    entity_type=ENTITY_PAYMENT,
                    subject_id=student.id,
                    details={"challanNumber": challan_number, "semester": data.semester},
                )

            self._log_operation("mark paid", student.registration_number, {"challan_number": challan_number})
            return ServiceResult.success(
                MarkPaidResult(
                    student=StudentResponse.model_validate(student),
                    challan=self._response(challan) if challan is not None else None,
                    semester_key=key,
                ),
                message=SUCCESS_PAYMENT_MARKED,
            )
        except Exception as e:
            return self._handle_exception(e, "mark payment", data.registration_number)

    def fee_structure(
        self,
        search: Optional[str] = None,
        pending_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> ServiceResult[List[FeeStructureRow]]:
        try:
            rows = [
                FeeStructureRow(
                    student_id=s.id,
                    student_name=s.student_name,
                    registration_number=s.registration_number,
                    department=s.department,
                    degree=s.degree,
                    assigned_hostel=s.assigned_hostel,
                    room_number=s.room_number,
                    challan_number=s.challan_number,
                    max_semesters=max_semesters(s.department, s.degree),
                    fee_table=fee_table_view(s),
                    has_pending=has_pending_fees(s.fee_table),
                )
                for s in self.students.search(search)
            ]
            if pending_only:
                rows = [r for r in rows if r.has_pending]
            page = rows[skip : skip + limit]
            return ServiceResult.success(
                page,
                message=SUCCESS_FEE_STRUCTURE,
                metadata={"count": len(page), "total": len(rows)},
            )
        except Exception as e:
            return self._handle_exception(e, "build fee structure")


__all__ = [
    "FeeService",
    "challan_due_date",
    "challan_status",
    "fee_table_view",
    "has_pending_fees",
    "max_semesters",
    "semester_key",
]
