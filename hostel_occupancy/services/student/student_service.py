"""
Student service: registry listing and coordinator-backed mutations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from hostel_occupancy.models.student import Student
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.schemas.cascade import CascadeReport, StudentMutation
from hostel_occupancy.schemas.student import (
    BatchDeleteRequest,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from hostel_occupancy.services.base import BaseService, ServiceResult
from hostel_occupancy.services.constants import (
    SUCCESS_BATCH_DELETED,
    SUCCESS_STUDENT_CREATED,
    SUCCESS_STUDENT_DELETED,
    SUCCESS_STUDENT_UPDATED,
    SUCCESS_STUDENTS_RETRIEVED,
)
from hostel_occupancy.services.occupancy import ConsistencyCoordinator


class StudentService(BaseService[Student, StudentRepository]):
    def __init__(
        self,
        repository: StudentRepository,
        db_session: Session,
        coordinator: Optional[ConsistencyCoordinator] = None,
    ):
        super().__init__(repository, db_session)
        self.coordinator = coordinator or ConsistencyCoordinator(db_session)

    def list_students(
        self,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> ServiceResult[List[StudentResponse]]:
        """Newest first; `search` is matched literally, ignoring case."""
        try:
            students = self.repository.search(search, skip=skip, limit=limit)
            return ServiceResult.success(
                [StudentResponse.model_validate(s) for s in students],
                message=SUCCESS_STUDENTS_RETRIEVED,
                metadata={"count": len(students)},
            )
        except Exception as e:
            return self._handle_exception(e, "list students")

    def get_student(self, student_id: str) -> ServiceResult[StudentResponse]:
        try:
            student = self.repository.get_by_id(student_id)
            if student is None:
                return ServiceResult.not_found("Student", student_id)
            return ServiceResult.success(StudentResponse.model_validate(student))
        except Exception as e:
            return self._handle_exception(e, "get student", student_id)

    def create_student(self, data: StudentCreate) -> ServiceResult[StudentMutation]:
        try:
            student, report = self.coordinator.create_student(data)
            return ServiceResult.success(
                StudentMutation(student=StudentResponse.model_validate(student), cascade=report),
                message=SUCCESS_STUDENT_CREATED,
            )
        except Exception as e:
            return self._handle_exception(e, "create student", data.registration_number)

    def update_student(self, student_id: str, data: StudentUpdate) -> ServiceResult[StudentMutation]:
        try:
            student, report = self.coordinator.update_student(student_id, data)
            return ServiceResult.success(
                StudentMutation(student=StudentResponse.model_validate(student), cascade=report),
                message=SUCCESS_STUDENT_UPDATED,
            )
        except Exception as e:
            return self._handle_exception(e, "update student", student_id)

    def delete_student(self, student_id: str, username: Optional[str] = None) -> ServiceResult[StudentMutation]:
        try:
            report = self.coordinator.delete_student(student_id, username=username)
            return ServiceResult.success(StudentMutation(cascade=report), message=SUCCESS_STUDENT_DELETED)
        except Exception as e:
            return self._handle_exception(e, "delete student", student_id)

    def delete_batch(self, data: BatchDeleteRequest) -> ServiceResult[CascadeReport]:
        try:
            report = self.coordinator.delete_batch(data.department, data.batch, username=data.username)
            return ServiceResult.success(
                report,
                message=SUCCESS_BATCH_DELETED,
                metadata={"count": report.students_deleted},
            )
        except Exception as e:
            return self._handle_exception(e, "delete batch", f"{data.department}/{data.batch}")


__all__ = ["StudentService"]
