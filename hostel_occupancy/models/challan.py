"""
Challan (fee record) model.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_occupancy.models.base import TimestampModel

__all__ = ["Challan", "CHALLAN_STATUSES"]

CHALLAN_STATUSES = ("pending", "paid", "overdue", "cancelled")


class Challan(TimestampModel):
    """Fee challan tied to a student's current billing cycle."""

    __tablename__ = "challans"

    student_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    student_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    registration_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    department: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    semester: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    challan_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
