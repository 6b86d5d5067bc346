"""
Room occupancy records.

`RoomAssignment` is the persisted, materialized room-to-student mapping kept
in step with the registry; `LegacyRoomRecord` holds rows imported from older
room lists. Both feed the roster merge at lower precedence than the registry.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hostel_occupancy.models.base import BaseModel, utc_now

__all__ = ["RoomAssignment", "LegacyRoomRecord"]


class RoomAssignment(BaseModel):
    """Materialized student occupancy of a room."""

    __tablename__ = "room_assignments"
    __table_args__ = (
        UniqueConstraint("hostel_id", "room_id", "student_id", name="uq_room_assignment"),
    )

    hostel_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    hostel_name: Mapped[str] = mapped_column(String(200), nullable=False)
    room_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    student_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )


class LegacyRoomRecord(BaseModel):
    """Room list row imported from a legacy source."""

    __tablename__ = "legacy_room_records"

    hostel_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    student_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    registration_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    imported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
