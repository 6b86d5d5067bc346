"""
Merge student-to-room associations from several sources into one roster.

Sources are ranked: the live registry outranks persisted room assignments,
which outrank imported legacy rows. A room listed by a higher-ranked source
takes that source's student list wholesale; lists are never appended across
sources.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from hostel_occupancy.config.settings import settings
from hostel_occupancy.schemas.roster import RosterStudent
from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation.normalizer import (
    identity_key,
    normalize_room_id,
    room_key,
    room_sort_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterSource:
    """One ranked input list of student records."""

    name: str
    records: Sequence[StudentSourceRecord] = field(default_factory=tuple)


@dataclass
class _RoomEntries:
    room_id: str
    rank: int
    entries: List[RosterStudent]
    identities: List[str]


class RosterMerger:
    """Combine ranked sources into ``room id -> deduplicated students``."""

    def __init__(
        self,
        placeholder_name: Optional[str] = None,
        placeholder_marker: Optional[str] = None,
    ):
        self.placeholder_name = placeholder_name or settings.PLACEHOLDER_NAME
        self.placeholder_marker = placeholder_marker or settings.PLACEHOLDER_MARKER

    def merge(
        self,
        room_ids: Sequence[str],
        sources: Sequence[RosterSource],
    ) -> "OrderedDict[str, List[RosterStudent]]":
        """
        Args:
            room_ids: Canonical ids in generator order
            sources: Ranked sources, highest precedence first

        Returns:
            Every canonical room id in order, followed by ids only seen in
            sources (sorted by block and number), each mapped to its students
        """
        canonical: "OrderedDict[str, str]" = OrderedDict()
        for room_id in room_ids:
            canonical.setdefault(room_key(room_id), normalize_room_id(room_id))

        rooms: Dict[str, _RoomEntries] = {}
        # lowest precedence first, so higher sources overwrite
        for rank in reversed(range(len(sources))):
            source = sources[rank]
            for key, grouped in self._group(source).items():
                display = canonical.get(key) or grouped.room_id
                rooms[key] = _RoomEntries(display, rank, grouped.entries, grouped.identities)

        self._drop_relocated(rooms)

        merged: "OrderedDict[str, List[RosterStudent]]" = OrderedDict()
        for key, room_id in canonical.items():
            room = rooms.get(key)
            merged[room_id] = self._dedupe(room) if room else []

        overflow = [room for key, room in rooms.items() if key not in canonical and room.entries]
        for room in sorted(overflow, key=lambda r: room_sort_key(r.room_id)):
            merged[room.room_id] = self._dedupe(room)
            logger.debug(f"Room {room.room_id} is outside the structural definition")
        return merged

    # ------------------------------------------------------------------

    def is_placeholder(self, record: StudentSourceRecord) -> bool:
        reg = (record.registration_number or "").strip()
        name = (record.student_name or "").strip()
        return reg in ("", self.placeholder_marker) and name.lower() == self.placeholder_name.lower()

    def to_entry(self, record: StudentSourceRecord) -> RosterStudent:
        return RosterStudent(
            name=record.student_name or "",
            registration_number=record.registration_number or "",
            department=record.department or "",
        )

    def _group(self, source: RosterSource) -> Dict[str, _RoomEntries]:
        grouped: Dict[str, _RoomEntries] = OrderedDict()
        dropped = 0
        for record in source.records:
            identity = identity_key(
                record.registration_number, record.student_name, self.placeholder_marker
            )
            if not record.room_number or identity is None or self.is_placeholder(record):
                dropped += 1
                continue
            key = room_key(record.room_number)
            room = grouped.get(key)
            if room is None:
                room = grouped[key] = _RoomEntries(normalize_room_id(record.room_number), 0, [], [])
            room.entries.append(self.to_entry(record))
            room.identities.append(identity)
        if dropped:
            logger.debug(f"Ignored {dropped} record(s) without identity or room in source '{source.name}'")
        return grouped

    @staticmethod
    def _drop_relocated(rooms: Dict[str, _RoomEntries]) -> None:
        """
        Remove a student from rooms held by a lower-ranked source when a
        higher-ranked source places them elsewhere.
        """
        best_rank: Dict[str, int] = {}
        for room in rooms.values():
            for identity in room.identities:
                if identity not in best_rank or room.rank < best_rank[identity]:
                    best_rank[identity] = room.rank

        for room in rooms.values():
            keep = [i for i, identity in enumerate(room.identities) if best_rank[identity] == room.rank]
            if len(keep) != len(room.identities):
                room.entries = [room.entries[i] for i in keep]
                room.identities = [room.identities[i] for i in keep]

    @staticmethod
    def _dedupe(room: _RoomEntries) -> List[RosterStudent]:
        seen: Set[str] = set()
        unique: List[RosterStudent] = []
        for identity, entry in zip(room.identities, room.entries):
            if identity in seen:
                continue
            seen.add(identity)
            unique.append(entry)
        return unique


__all__ = ["RosterMerger", "RosterSource"]
