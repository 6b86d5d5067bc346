"""
Room selection for students who are added without an explicit room.
"""

import logging
from typing import Callable, Optional

from hostel_occupancy.core.exceptions import ExternalSourceUnavailable, NoCapacityAvailable
from hostel_occupancy.schemas.hostel import HostelStructure
from hostel_occupancy.schemas.roster import AutoAssignment, HostelRoster, RoomRoster
from hostel_occupancy.services.allocation.capacity_policy import CapacityPolicy
from hostel_occupancy.services.allocation.normalizer import room_sort_key
from hostel_occupancy.services.allocation.room_id_generator import RoomIdGenerator

logger = logging.getLogger(__name__)

RosterProvider = Callable[[], HostelRoster]
StructureProvider = Callable[[], HostelStructure]


class AutoAssigner:
    """
    Pick the first room, ordered by block and number, with a free slot.

    When the roster cannot be built because a data source is down, the
    first room of the regenerated structure is returned without occupancy
    information.
    """

    def __init__(
        self,
        generator: Optional[RoomIdGenerator] = None,
        policy: Optional[CapacityPolicy] = None,
    ):
        self.generator = generator or RoomIdGenerator()
        self.policy = policy or CapacityPolicy()

    def select_room(self, roster: HostelRoster) -> Optional[RoomRoster]:
        for room in sorted(roster.rooms, key=lambda r: room_sort_key(r.room_id)):
            if self.policy.has_free_slot(room):
                return room
        return None

    def assign(
        self,
        hostel_name: str,
        roster_provider: RosterProvider,
        structure_provider: StructureProvider,
    ) -> AutoAssignment:
        """
        Raises:
            NoCapacityAvailable: Every room, overflow rooms included, is full
            InvalidStructuralDefinition: The hostel defines no rooms
            ExternalSourceUnavailable: The structure itself cannot be read
        """
        try:
            roster = roster_provider()
        except ExternalSourceUnavailable as exc:
            logger.warning(
                f"Roster for '{hostel_name}' unavailable, falling back to structural ids",
                extra={"source": exc.source, "operation": exc.operation},
            )
            return self._assign_from_structure(hostel_name, structure_provider())

        room = self.select_room(roster)
        if room is None:
            raise NoCapacityAvailable(hostel_name, rooms_inspected=len(roster.rooms))
        return AutoAssignment(
            hostel=roster.hostel,
            room_id=room.room_id,
            occupied=room.occupied,
            capacity=room.capacity,
            from_roster=True,
        )

    def _assign_from_structure(self, hostel_name: str, structure: HostelStructure) -> AutoAssignment:
        room_ids = self.generator.generate(structure)
        if not room_ids:
            raise NoCapacityAvailable(hostel_name)
        return AutoAssignment(hostel=structure.name, room_id=room_ids[0], from_roster=False)


__all__ = ["AutoAssigner", "RosterProvider", "StructureProvider"]
