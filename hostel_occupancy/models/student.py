"""
Student model.

Students are owned by no other entity: the hostel link is a weak,
denormalized reference by hostel name.
"""

from typing import Dict, Optional

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostel_occupancy.models.base import TimestampModel

__all__ = ["Student"]


class Student(TimestampModel):
    """Student record as held in the live registry."""

    __tablename__ = "students"

    student_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    father_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    registration_number: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )
    degree: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    semester: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    district: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Weak references
    assigned_hostel: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, index=True)
    room_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    hostel_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    hostel_fee: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    challan_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    fee_table: Mapped[Dict[str, str]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="semester key (sem1, sem2, ...) -> paid/pending",
    )
    profile_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
