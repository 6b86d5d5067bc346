"""
Roster construction from a caller-owned snapshot.

The builder holds no data between calls: every roster is computed from the
`RosterSnapshot` passed in, so concurrent callers never share state.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from hostel_occupancy.schemas.hostel import HostelStructure
from hostel_occupancy.schemas.roster import HostelRoster
from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation.capacity_policy import CapacityPolicy
from hostel_occupancy.services.allocation.constants import (
    SOURCE_ASSIGNMENTS,
    SOURCE_LEGACY,
    SOURCE_REGISTRY,
)
from hostel_occupancy.services.allocation.room_id_generator import RoomIdGenerator
from hostel_occupancy.services.allocation.roster_merger import RosterMerger, RosterSource


@dataclass
class RosterSnapshot:
    """Point-in-time copy of everything a hostel roster is derived from."""

    structure: HostelStructure
    registry: Sequence[StudentSourceRecord] = field(default_factory=list)
    assignments: Sequence[StudentSourceRecord] = field(default_factory=list)
    legacy: Sequence[StudentSourceRecord] = field(default_factory=list)

    def sources(self) -> List[RosterSource]:
        """Sources in precedence order, highest first."""
        return [
            RosterSource(SOURCE_REGISTRY, tuple(self.registry)),
            RosterSource(SOURCE_ASSIGNMENTS, tuple(self.assignments)),
            RosterSource(SOURCE_LEGACY, tuple(self.legacy)),
        ]


class RosterBuilder:
    """RoomIdGenerator -> RosterMerger -> CapacityPolicy."""

    def __init__(
        self,
        generator: Optional[RoomIdGenerator] = None,
        merger: Optional[RosterMerger] = None,
        policy: Optional[CapacityPolicy] = None,
        default_capacity: Optional[int] = None,
    ):
        self.generator = generator or RoomIdGenerator()
        self.merger = merger or RosterMerger()
        self.policy = policy or CapacityPolicy()
        self.default_capacity = default_capacity

    def build(self, snapshot: RosterSnapshot) -> HostelRoster:
        room_ids = self.generator.generate(snapshot.structure)
        merged = self.merger.merge(room_ids, snapshot.sources())
        rooms = self.policy.annotate(
            merged,
            self.policy.capacity_map(snapshot.structure, self.default_capacity),
        )
        return HostelRoster(
            hostel=snapshot.structure.name,
            rooms=rooms,
            summary=self.policy.summarize(rooms),
        )


__all__ = ["RosterBuilder", "RosterSnapshot"]
