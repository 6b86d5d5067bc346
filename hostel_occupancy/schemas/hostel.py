"""
Hostel schemas: structural definition input, create/update payloads and
read models.
"""

from typing import Dict, List, Optional

from pydantic import Field, field_validator

from hostel_occupancy.schemas.common.base import BaseDBSchema, BaseSchema

__all__ = [
    "BlockDefinition",
    "HostelStructure",
    "HostelCreate",
    "HostelUpdate",
    "HostelResponse",
    "HostelStats",
    "HostelWithStats",
]


class BlockDefinition(BaseSchema):
    """A named block and the number of rooms it holds."""

    name: str = Field(default="", description="Short block code, e.g. 'A'")
    num_rooms: int = Field(default=0, description="Rooms in the block")

    @field_validator("num_rooms", mode="before")
    @classmethod
    def coerce_num_rooms(cls, v):
        if v is None or v == "":
            return 0
        return int(v)


class HostelStructure(BaseSchema):
    """
    Structural definition a roster is derived from.

    Either `blocks` or a positive `number_of_rooms` must be present for room
    ids to be generated; validation of that rule belongs to the generator so
    a stored hostel can always be loaded.
    """

    name: str = Field(..., description="Hostel name")
    capacity_per_room: Optional[int] = Field(default=None, description="Nominal room capacity")
    number_of_rooms: int = Field(default=0, description="Flat room count used without blocks")
    number_of_blocks: Optional[int] = Field(default=None, description="Block count hint")
    blocks: List[BlockDefinition] = Field(default_factory=list)
    room_capacities: Dict[str, int] = Field(
        default_factory=dict,
        description="Per-room capacity overrides",
    )

    @field_validator("capacity_per_room", "number_of_blocks", mode="before")
    @classmethod
    def non_positive_as_unset(cls, v):
        # 0 and blanks fall back to the configured default
        if v in (None, "", 0, "0"):
            return None
        value = int(v)
        return value if value > 0 else None

    @field_validator("number_of_rooms", mode="before")
    @classmethod
    def coerce_room_count(cls, v):
        if v in (None, ""):
            return 0
        return int(v)

    @field_validator("blocks", mode="before")
    @classmethod
    def drop_null_blocks(cls, v):
        if v is None:
            return []
        return [block for block in v if block is not None]


class HostelCreate(BaseSchema):
    """Create hostel payload."""

    name: str = Field(..., min_length=1, max_length=200)
    warden: Optional[str] = Field(default=None, max_length=200)
    image_url: Optional[str] = Field(default=None, max_length=500)
    capacity_per_room: Optional[int] = Field(default=None, ge=1)
    number_of_rooms: Optional[int] = Field(default=None, ge=0)
    number_of_blocks: Optional[int] = Field(default=None, ge=1)
    blocks: List[BlockDefinition] = Field(default_factory=list)
    room_capacities: Dict[str, int] = Field(default_factory=dict)
    username: Optional[str] = Field(default=None, description="Acting user for the audit trail")


class HostelUpdate(BaseSchema):
    """Partial hostel update; omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    warden: Optional[str] = Field(default=None, max_length=200)
    image_url: Optional[str] = Field(default=None, max_length=500)
    capacity_per_room: Optional[int] = Field(default=None, ge=1)
    number_of_rooms: Optional[int] = Field(default=None, ge=0)
    number_of_blocks: Optional[int] = Field(default=None, ge=1)
    blocks: Optional[List[BlockDefinition]] = None
    room_capacities: Optional[Dict[str, int]] = None
    username: Optional[str] = None


class HostelResponse(BaseDBSchema):
    """Hostel read model."""

    name: str
    warden: Optional[str] = None
    image_url: Optional[str] = None
    capacity_per_room: int
    number_of_rooms: int
    number_of_blocks: Optional[int] = None
    blocks: List[BlockDefinition] = Field(default_factory=list)
    room_capacities: Dict[str, int] = Field(default_factory=dict)
    total_rooms: int
    total_capacity: int


class HostelStats(BaseSchema):
    """Occupancy summary of one hostel."""

    total_rooms: int = 0
    total_capacity: int = 0
    occupied_slots: int = 0
    empty_slots: int = 0
    overflowing_rooms: int = 0


class HostelWithStats(HostelResponse):
    """Hostel read model with occupancy summary."""

    stats: HostelStats = Field(default_factory=HostelStats)
