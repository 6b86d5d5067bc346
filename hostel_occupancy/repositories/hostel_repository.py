"""
Hostel repository.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.models.hostel import Hostel
from hostel_occupancy.repositories.base.base_repository import BaseRepository


class HostelRepository(BaseRepository[Hostel]):
    def __init__(self, db: Session):
        super().__init__(Hostel, db)

    def get_by_name(self, name: str) -> Optional[Hostel]:
        """Exact, case-insensitive name lookup."""
        try:
            return (
                self.db.query(Hostel)
                .filter(func.lower(Hostel.name) == name.strip().lower())
                .first()
            )
        except SQLAlchemyError as e:
            self._unavailable("get_by_name", e)

    def list_ordered(self) -> List[Hostel]:
        try:
            return self.db.query(Hostel).order_by(Hostel.name).all()
        except SQLAlchemyError as e:
            self._unavailable("list_ordered", e)
