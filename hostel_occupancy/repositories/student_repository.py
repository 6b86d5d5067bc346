"""
Student repository: registry lookups, search and bulk cascade queries.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.models.student import Student
from hostel_occupancy.repositories.base.base_repository import BaseRepository, escape_like


class StudentRepository(BaseRepository[Student]):
    def __init__(self, db: Session):
        super().__init__(Student, db)

    def get_by_registration_number(self, registration_number: str) -> Optional[Student]:
        try:
            return (
                self.db.query(Student)
                .filter(Student.registration_number == registration_number)
                .first()
            )
        except SQLAlchemyError as e:
            self._unavailable("get_by_registration_number", e)

    def get_by_ids(self, ids: Iterable[str]) -> List[Student]:
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []
        try:
            return self.db.query(Student).filter(Student.id.in_(wanted)).all()
        except SQLAlchemyError as e:
            self._unavailable("get_by_ids", e)

    def challan_number_exists(self, challan_number: str) -> bool:
        try:
            return (
                self.db.query(Student.id)
                .filter(Student.challan_number == challan_number)
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self._unavailable("challan_number_exists", e)

    def search(self, term: Optional[str] = None, skip: int = 0, limit: Optional[int] = None) -> List[Student]:
        """
        Case-insensitive literal substring search over name, registration
        number, department, hostel and district.
        """
        try:
            query = self.db.query(Student)
            if term and term.strip():
                pattern = f"%{escape_like(term.strip())}%"
                query = query.filter(
                    or_(
                        Student.student_name.ilike(pattern, escape="\\"),
                        Student.registration_number.ilike(pattern, escape="\\"),
                        Student.department.ilike(pattern, escape="\\"),
                        Student.assigned_hostel.ilike(pattern, escape="\\"),
                        Student.district.ilike(pattern, escape="\\"),
                    )
                )
            query = query.order_by(Student.created_at.desc(), Student.registration_number).offset(skip)
            if limit is not None:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as e:
            self._unavailable("search", e)

    def list_by_hostel_names(self, names: Iterable[str]) -> List[Student]:
        """Registry students whose weak hostel link matches any of `names`."""
        lowered = sorted({n.lower() for n in names if n})
        if not lowered:
            return []
        try:
            return (
                self.db.query(Student)
                .filter(func.lower(func.trim(Student.assigned_hostel)).in_(lowered))
                .order_by(Student.created_at, Student.registration_number)
                .all()
            )
        except SQLAlchemyError as e:
            self._unavailable("list_by_hostel_names", e)

    def list_batch(self, department: str, batch: str) -> List[Student]:
        """Students of `department` whose registration number contains `batch`."""
        try:
            return (
                self.db.query(Student)
                .filter(Student.department == department)
                .filter(Student.registration_number.contains(batch, autoescape=True))
                .order_by(Student.registration_number)
                .all()
            )
        except SQLAlchemyError as e:
            self._unavailable("list_batch", e)

    def delete_by_ids(self, ids: List[str]) -> int:
        if not ids:
            return 0
        try:
            deleted = (
                self.db.query(Student)
                .filter(Student.id.in_(ids))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_by_ids", e)

    def relink_hostel(self, old_names: Iterable[str], new_name: str, hostel_id: Optional[str]) -> int:
        """Re-point the weak hostel link after a hostel rename."""
        lowered = sorted({n.lower() for n in old_names if n})
        if not lowered:
            return 0
        try:
            updated = (
                self.db.query(Student)
                .filter(func.lower(func.trim(Student.assigned_hostel)).in_(lowered))
                .update(
                    {Student.assigned_hostel: new_name, Student.hostel_id: hostel_id},
                    synchronize_session=False,
                )
            )
            self.db.flush()
            return updated
        except SQLAlchemyError as e:
            self._unavailable("relink_hostel", e)
