"""
Roster output shapes.
"""

from typing import List, Optional

from pydantic import Field

from hostel_occupancy.schemas.common.base import BaseSchema
from hostel_occupancy.schemas.hostel import HostelStats

__all__ = [
    "RosterStudent",
    "RoomRoster",
    "HostelRoster",
    "AutoAssignment",
    "RoomCapacityCheck",
]


class RosterStudent(BaseSchema):
    """Occupant entry of a room; placeholders mark unfilled slots."""

    name: str = ""
    registration_number: str = ""
    department: str = ""
    placeholder: bool = Field(default=False, exclude=True)


class RoomRoster(BaseSchema):
    room_id: str
    capacity: int
    occupied: int = 0
    available: int = 0
    students: List[RosterStudent] = Field(default_factory=list)

    @property
    def overflowing(self) -> bool:
        return self.occupied > self.capacity


class HostelRoster(BaseSchema):
    """Per-room roster of one hostel."""

    hostel: str
    rooms: List[RoomRoster] = Field(default_factory=list)
    summary: HostelStats = Field(default_factory=HostelStats)


class AutoAssignment(BaseSchema):
    """Room chosen for a student who named none."""

    hostel: str
    room_id: str
    occupied: Optional[int] = Field(
        default=None,
        description="Occupancy of the room, unknown when chosen from the structure alone",
    )
    capacity: Optional[int] = None
    from_roster: bool = True


class RoomCapacityCheck(BaseSchema):
    hostel: str
    room_id: str
    permitted: bool
    occupied: int = 0
    capacity: int = 0
