"""
Challan repository.
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.models.challan import Challan
from hostel_occupancy.repositories.base.base_repository import BaseRepository


class ChallanRepository(BaseRepository[Challan]):
    def __init__(self, db: Session):
        super().__init__(Challan, db)

    def get_by_number(self, challan_number: str) -> Optional[Challan]:
        try:
            return (
                self.db.query(Challan)
                .filter(Challan.challan_number == challan_number)
                .first()
            )
        except SQLAlchemyError as e:
            self._unavailable("get_by_number", e)

    def number_exists(self, challan_number: str) -> bool:
        return self.get_by_number(challan_number) is not None

    def list_filtered(
        self,
        status: Optional[str] = None,
        registration_number: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Challan]:
        try:
            query = self.db.query(Challan)
            if status:
                query = query.filter(Challan.status == status)
            if registration_number:
                query = query.filter(Challan.registration_number == registration_number)
            query = query.order_by(Challan.created_at.desc()).offset(skip)
            if limit is not None:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as e:
            self._unavailable("list_filtered", e)

    def delete_for_students(self, student_ids: List[str], registration_numbers: List[str]) -> int:
        """Delete every challan referencing the students by id or registration number."""
        conditions = []
        if student_ids:
            conditions.append(Challan.student_id.in_(student_ids))
        if registration_numbers:
            conditions.append(Challan.registration_number.in_(registration_numbers))
        if not conditions:
            return 0
        try:
            deleted = (
                self.db.query(Challan)
                .filter(or_(*conditions))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_for_students", e)
