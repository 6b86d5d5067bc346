"""
Repositories for materialized room assignments and imported legacy rows.
"""

from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.models.room_assignment import LegacyRoomRecord, RoomAssignment
from hostel_occupancy.repositories.base.base_repository import BaseRepository


class RoomAssignmentRepository(BaseRepository[RoomAssignment]):
    def __init__(self, db: Session):
        super().__init__(RoomAssignment, db)

    def list_for_hostel(self, hostel_id: str) -> List[RoomAssignment]:
        try:
            return (
                self.db.query(RoomAssignment)
                .filter(RoomAssignment.hostel_id == hostel_id)
                .order_by(RoomAssignment.room_id, RoomAssignment.assigned_at)
                .all()
            )
        except SQLAlchemyError as e:
            self._unavailable("list_for_hostel", e)

    def list_for_student(self, student_id: str) -> List[RoomAssignment]:
        try:
            return (
                self.db.query(RoomAssignment)
                .filter(RoomAssignment.student_id == student_id)
                .all()
            )
        except SQLAlchemyError as e:
            self._unavailable("list_for_student", e)

    def delete_for_students(self, student_ids: List[str]) -> int:
        if not student_ids:
            return 0
        try:
            deleted = (
                self.db.query(RoomAssignment)
                .filter(RoomAssignment.student_id.in_(student_ids))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_for_students", e)

    def delete_for_room(self, hostel_id: str, room_key: str) -> int:
        """Delete the rows of a room, compared on the upper-cased room id."""
        try:
            deleted = (
                self.db.query(RoomAssignment)
                .filter(RoomAssignment.hostel_id == hostel_id)
                .filter(func.upper(RoomAssignment.room_id) == room_key)
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_for_room", e)

    def delete_for_hostel(self, hostel_id: str) -> int:
        try:
            deleted = (
                self.db.query(RoomAssignment)
                .filter(RoomAssignment.hostel_id == hostel_id)
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_for_hostel", e)

    def rename_hostel(self, hostel_id: str, new_name: str) -> int:
        try:
            updated = (
                self.db.query(RoomAssignment)
                .filter(RoomAssignment.hostel_id == hostel_id)
                .update({RoomAssignment.hostel_name: new_name}, synchronize_session=False)
            )
            self.db.flush()
            return updated
        except SQLAlchemyError as e:
            self._unavailable("rename_hostel", e)


class LegacyRoomRecordRepository(BaseRepository[LegacyRoomRecord]):
    def __init__(self, db: Session):
        super().__init__(LegacyRoomRecord, db)

    def list_for_hostel_names(self, names: Iterable[str]) -> List[LegacyRoomRecord]:
        lowered = sorted({n.lower() for n in names if n})
        if not lowered:
            return []
        try:
            return (
                self.db.query(LegacyRoomRecord)
                .filter(func.lower(LegacyRoomRecord.hostel_name).in_(lowered))
                .order_by(LegacyRoomRecord.imported_at, LegacyRoomRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            self._unavailable("list_for_hostel_names", e)

    def delete_for_hostel_names(self, names: Iterable[str]) -> int:
        lowered = sorted({n.lower() for n in names if n})
        if not lowered:
            return 0
        try:
            deleted = (
                self.db.query(LegacyRoomRecord)
                .filter(func.lower(LegacyRoomRecord.hostel_name).in_(lowered))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_for_hostel_names", e)

    def rename_hostel(self, old_names: Iterable[str], new_name: str) -> int:
        lowered = sorted({n.lower() for n in old_names if n})
        if not lowered:
            return 0
        try:
            updated = (
                self.db.query(LegacyRoomRecord)
                .filter(func.lower(LegacyRoomRecord.hostel_name).in_(lowered))
                .update({LegacyRoomRecord.hostel_name: new_name}, synchronize_session=False)
            )
            self.db.flush()
            return updated
        except SQLAlchemyError as e:
            self._unavailable("rename_hostel", e)
