import pytest

from hostel_occupancy.core.exceptions import ExternalSourceUnavailable, NoCapacityAvailable
from hostel_occupancy.schemas.hostel import HostelStructure
from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation import AutoAssigner, RosterBuilder, RosterSnapshot

STRUCTURE = HostelStructure.model_validate(
    {
        "name": "Porali Hostel",
        "blocks": [{"name": "B", "numRooms": 2}, {"name": "A", "numRooms": 2}],
        "capacityPerRoom": 2,
    }
)


def occupants(room, *regs):
    return [StudentSourceRecord(registration_number=r, room_number=room) for r in regs]


def assign(registry):
    snapshot = RosterSnapshot(structure=STRUCTURE, registry=registry)
    return AutoAssigner().assign(
        STRUCTURE.name,
        roster_provider=lambda: RosterBuilder().build(snapshot),
        structure_provider=lambda: STRUCTURE,
    )


def test_first_free_room_in_block_order():
    assignment = assign([])
    assert assignment.room_id == "A-01"
    assert assignment.from_roster
    assert (assignment.occupied, assignment.capacity) == (0, 2)


def test_full_rooms_are_skipped():
    assignment = assign(occupants("A-01", "S1", "S2") + occupants("A-02", "S3"))
    assert assignment.room_id == "A-02"
    assert assignment.occupied == 1


def test_overflow_room_with_space_is_eligible():
    registry = (
        occupants("A-01", "S1", "S2")
        + occupants("A-02", "S3", "S4")
        + occupants("B-01", "S5", "S6")
        + occupants("B-02", "S7", "S8")
        + occupants("Z-01", "S9")
    )
    assert assign(registry).room_id == "Z-01"


def test_saturated_hostel_raises():
    registry = (
        occupants("A-01", "S1", "S2")
        + occupants("A-02", "S3", "S4", "S5")
        + occupants("B-01", "S6", "S7")
        + occupants("B-02", "S8", "S9")
    )
    with pytest.raises(NoCapacityAvailable) as exc_info:
        assign(registry)
    assert exc_info.value.details["rooms_inspected"] == 4


def test_selection_moves_forward_as_rooms_fill():
    registry = []
    chosen = []
    for n in range(8):
        room = assign(registry).room_id
        chosen.append(room)
        registry = registry + occupants(room, f"S{n}")
    assert chosen == ["A-01", "A-01", "A-02", "A-02", "B-01", "B-01", "B-02", "B-02"]


def test_unavailable_roster_falls_back_to_first_structural_room():
    def broken():
        raise ExternalSourceUnavailable("students", "list")

    assignment = AutoAssigner().assign(STRUCTURE.name, broken, lambda: STRUCTURE)

    assert assignment.room_id == "B-01"
    assert not assignment.from_roster
    assert assignment.occupied is None
