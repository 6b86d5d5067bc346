"""
Occupancy accounting for merged rosters.

The policy reports state; it never refuses an assignment. Rooms may hold
more real occupants than their nominal capacity and are then reported with
no free slots and no placeholders.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from hostel_occupancy.config.settings import settings
from hostel_occupancy.schemas.hostel import HostelStats, HostelStructure
from hostel_occupancy.schemas.roster import RoomRoster, RosterStudent
from hostel_occupancy.services.allocation.normalizer import room_key
from hostel_occupancy.services.allocation.room_id_generator import capacity_per_room

_UNSET = object()


class CapacityPolicy:
    def __init__(
        self,
        placeholder_name: Optional[str] = None,
        placeholder_marker: Optional[str] = None,
        overflow_factor=_UNSET,
    ):
        self.placeholder_name = placeholder_name or settings.PLACEHOLDER_NAME
        self.placeholder_marker = placeholder_marker or settings.PLACEHOLDER_MARKER
        self.overflow_factor: Optional[float] = (
            settings.ROOM_OVERFLOW_FACTOR if overflow_factor is _UNSET else overflow_factor
        )

    def placeholder(self) -> RosterStudent:
        return RosterStudent(
            name=self.placeholder_name,
            registration_number=self.placeholder_marker,
            department=self.placeholder_marker,
            placeholder=True,
        )

    def capacity_map(self, structure: HostelStructure, default_capacity: Optional[int] = None) -> "RoomCapacities":
        return RoomCapacities(
            capacity_per_room(structure, default_capacity),
            structure.room_capacities,
        )

    def annotate_room(self, room_id: str, entries: Sequence[RosterStudent], capacity: int) -> RoomRoster:
        """
        Count real occupants and pad the list with placeholders up to capacity.

        The resulting list always has ``max(capacity, occupied)`` entries.
        """
        real = [entry for entry in entries if not entry.placeholder]
        occupied = len(real)
        available = max(capacity - occupied, 0)
        students = real + [self.placeholder() for _ in range(available)]
        return RoomRoster(
            room_id=room_id,
            capacity=capacity,
            occupied=occupied,
            available=available,
            students=students,
        )

    def annotate(
        self,
        merged: Mapping[str, Sequence[RosterStudent]],
        capacities: "RoomCapacities",
    ) -> List[RoomRoster]:
        return [
            self.annotate_room(room_id, entries, capacities.for_room(room_id))
            for room_id, entries in merged.items()
        ]

    def summarize(self, rooms: Sequence[RoomRoster]) -> HostelStats:
        return HostelStats(
            total_rooms=len(rooms),
            total_capacity=sum(r.capacity for r in rooms),
            occupied_slots=sum(r.occupied for r in rooms),
            empty_slots=sum(r.available for r in rooms),
            overflowing_rooms=sum(1 for r in rooms if r.occupied > r.capacity),
        )

    @staticmethod
    def has_free_slot(room: RoomRoster) -> bool:
        return room.occupied < room.capacity

    def permits(self, occupied: int, capacity: int) -> bool:
        """
        Whether one more occupant may be recorded in a room.

        Always true unless an overflow factor is configured, in which case
        the room is closed once it holds ``capacity * factor`` occupants.
        """
        if self.overflow_factor is None:
            return True
        return occupied < capacity * self.overflow_factor


class RoomCapacities:
    """Nominal capacity per room with optional per-room overrides."""

    def __init__(self, default: int, overrides: Optional[Mapping[str, int]] = None):
        self.default = default
        self._overrides: Dict[str, int] = {
            room_key(room_id): int(capacity)
            for room_id, capacity in (overrides or {}).items()
            if capacity is not None and int(capacity) > 0
        }

    def for_room(self, room_id: str) -> int:
        return self._overrides.get(room_key(room_id), self.default)


__all__ = ["CapacityPolicy", "RoomCapacities"]
