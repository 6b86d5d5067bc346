"""
Hostel model.

A hostel's room structure is stored as a document-shaped block list; rooms
themselves are never persisted, they are derived from this definition.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_occupancy.models.base import TimestampModel

__all__ = ["Hostel"]


class Hostel(TimestampModel):
    """
    Hostel building with its structural definition.

    `total_rooms` and `total_capacity` are derived from `blocks` /
    `number_of_rooms` and `capacity_per_room`; services recompute them on
    every structural write.
    """

    __tablename__ = "hostels"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        unique=True,
        index=True,
    )
    warden: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    capacity_per_room: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    number_of_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    number_of_blocks: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    blocks: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered list of {name, numRooms}",
    )
    room_capacities: Mapped[Dict[str, int]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Per-room capacity overrides keyed by normalized room id",
    )

    total_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
