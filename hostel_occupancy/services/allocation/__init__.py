"""
Room allocation engine.

Pure components with no database access:
- RoomIdGenerator: canonical room ids from a structural definition
- normalizer: room id / hostel name / identity key forms
- RosterMerger: ranked merge of student-room sources
- CapacityPolicy: occupancy accounting and placeholders
- AutoAssigner: room selection for unplaced students
- RosterBuilder: the pipeline over a caller-owned RosterSnapshot
"""

from hostel_occupancy.services.allocation.auto_assigner import AutoAssigner
from hostel_occupancy.services.allocation.capacity_policy import CapacityPolicy, RoomCapacities
from hostel_occupancy.services.allocation.normalizer import (
    hostel_name_variants,
    hostel_reference_names,
    hostel_names_match,
    identity_key,
    normalize_room_id,
    room_key,
    room_sort_key,
)
from hostel_occupancy.services.allocation.room_id_generator import (
    RoomIdGenerator,
    capacity_per_room,
    total_capacity,
    total_rooms,
    usable_blocks,
)
from hostel_occupancy.services.allocation.roster_builder import RosterBuilder, RosterSnapshot
from hostel_occupancy.services.allocation.roster_merger import RosterMerger, RosterSource

__all__ = [
    "AutoAssigner",
    "CapacityPolicy",
    "RoomCapacities",
    "RoomIdGenerator",
    "RosterBuilder",
    "RosterMerger",
    "RosterSnapshot",
    "RosterSource",
    "capacity_per_room",
    "hostel_name_variants",
    "hostel_reference_names",
    "hostel_names_match",
    "identity_key",
    "normalize_room_id",
    "room_key",
    "room_sort_key",
    "total_capacity",
    "total_rooms",
    "usable_blocks",
]
