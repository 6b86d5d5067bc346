"""
Audit log model.

Entries are append-only. `subject_id` carries a structured reference to the
entity the entry describes so cleanup never depends on description text.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostel_occupancy.models.base import BaseModel, utc_now

__all__ = ["AuditLog"]


class AuditLog(BaseModel):
    """Immutable activity record."""

    __tablename__ = "audit_logs"

    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    username: Mapped[str] = mapped_column(String(100), nullable=False, default="system")
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="staff")
    hostel: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, default="System")
    subject_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    details: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        index=True,
    )
