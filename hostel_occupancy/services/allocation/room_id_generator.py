"""
Canonical room id generation from a hostel's structural definition.
"""

from typing import Dict, List, Optional

from hostel_occupancy.config.settings import settings
from hostel_occupancy.core.exceptions import InvalidStructuralDefinition
from hostel_occupancy.schemas.hostel import BlockDefinition, HostelStructure
from hostel_occupancy.services.allocation.constants import (
    FALLBACK_ID_PREFIX,
    FALLBACK_ID_PREFIX_LENGTH,
)
from hostel_occupancy.services.allocation.normalizer import normalize_room_id


def block_label(index: int) -> str:
    """Zero-based index to A, B, ..., Z, AA, AB, ..."""
    label = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def usable_blocks(structure: HostelStructure) -> List[BlockDefinition]:
    """Blocks that contribute rooms: a non-blank name and a positive count."""
    return [b for b in structure.blocks if b.name and b.name.strip() and b.num_rooms > 0]


def total_rooms(structure: HostelStructure) -> int:
    blocks = usable_blocks(structure)
    if blocks:
        return sum(b.num_rooms for b in blocks)
    return max(structure.number_of_rooms, 0)


def capacity_per_room(structure: HostelStructure, default: Optional[int] = None) -> int:
    return structure.capacity_per_room or default or settings.DEFAULT_CAPACITY_PER_ROOM


def total_capacity(structure: HostelStructure, default_capacity: Optional[int] = None) -> int:
    return total_rooms(structure) * capacity_per_room(structure, default_capacity)


class RoomIdGenerator:
    """
    Produce the ordered room id sequence of a hostel.

    The output depends only on the structural definition, so two calls with
    the same definition return the same ids in the same order.
    """

    def __init__(
        self,
        default_number_of_blocks: Optional[int] = None,
        pad_width: Optional[int] = None,
    ):
        self.default_number_of_blocks = default_number_of_blocks or settings.DEFAULT_NUMBER_OF_BLOCKS
        self.pad_width = pad_width or settings.ROOM_NUMBER_PAD_WIDTH

    def generate(self, structure: HostelStructure) -> List[str]:
        """
        Returns:
            Exactly ``total_rooms(structure)`` unique room ids

        Raises:
            InvalidStructuralDefinition: No usable blocks and no positive room count
        """
        blocks = usable_blocks(structure)
        if blocks:
            room_ids = self._from_blocks(blocks)
        elif structure.number_of_rooms > 0:
            room_ids = self._from_room_count(
                structure.number_of_rooms,
                structure.number_of_blocks or self.default_number_of_blocks,
            )
        else:
            raise InvalidStructuralDefinition(structure.name)

        return self._extend_to_total(structure, room_ids, total_rooms(structure))

    def _render(self, block_name: str, number: int) -> str:
        return normalize_room_id(f"{block_name.strip()}-{number:0{self.pad_width}d}", self.pad_width)

    def _from_blocks(self, blocks: List[BlockDefinition]) -> List[str]:
        # a block name declared twice continues its numbering
        next_number: Dict[str, int] = {}
        room_ids: List[str] = []
        for block in blocks:
            key = block.name.strip().upper()
            start = next_number.get(key, 1)
            for number in range(start, start + block.num_rooms):
                room_ids.append(self._render(block.name, number))
            next_number[key] = start + block.num_rooms
        return room_ids

    def _from_room_count(self, number_of_rooms: int, number_of_blocks: int) -> List[str]:
        per_block, remainder = divmod(number_of_rooms, number_of_blocks)
        room_ids: List[str] = []
        for index in range(number_of_blocks):
            rooms_in_block = per_block + (1 if index < remainder else 0)
            letter = block_label(index)
            room_ids.extend(self._render(letter, n) for n in range(1, rooms_in_block + 1))
        return room_ids

    def _extend_to_total(self, structure: HostelStructure, room_ids: List[str], target: int) -> List[str]:
        if len(room_ids) >= target:
            return room_ids
        prefix = structure.name.strip()[:FALLBACK_ID_PREFIX_LENGTH].upper() or FALLBACK_ID_PREFIX
        taken = {r.upper() for r in room_ids}
        counter = len(room_ids)
        while len(room_ids) < target:
            counter += 1
            candidate = self._render(prefix, counter)
            if candidate.upper() in taken:
                continue
            taken.add(candidate.upper())
            room_ids.append(candidate)
        return room_ids


__all__ = [
    "RoomIdGenerator",
    "block_label",
    "usable_blocks",
    "total_rooms",
    "capacity_per_room",
    "total_capacity",
]
