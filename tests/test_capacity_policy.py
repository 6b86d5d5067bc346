from hostel_occupancy.schemas.hostel import HostelStructure
from hostel_occupancy.schemas.roster import RosterStudent
from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation import CapacityPolicy, RosterBuilder, RosterSnapshot


def occupants(*regs):
    return [RosterStudent(name=f"Student {r}", registration_number=r, department="CS") for r in regs]


def test_free_slots_are_filled_with_placeholders():
    room = CapacityPolicy().annotate_room("A-01", occupants("S1"), capacity=3)

    assert (room.occupied, room.available) == (1, 2)
    assert len(room.students) == 3
    placeholders = room.students[1:]
    assert all(p.placeholder for p in placeholders)
    assert [p.registration_number for p in placeholders] == ["-", "-"]
    assert placeholders[0].name == "To Be Alloted"


def test_overflow_is_reported_without_placeholders():
    room = CapacityPolicy().annotate_room("A-01", occupants("S1", "S2", "S3"), capacity=2)
    assert (room.occupied, room.available, len(room.students)) == (3, 0, 3)
    assert room.overflowing


def test_incoming_placeholders_are_not_counted():
    policy = CapacityPolicy()
    entries = occupants("S1") + [policy.placeholder()]
    room = policy.annotate_room("A-01", entries, capacity=2)
    assert room.occupied == 1
    assert len(room.students) == 2


def test_placeholder_flag_is_not_serialized():
    dumped = CapacityPolicy().placeholder().model_dump(by_alias=True)
    assert dumped == {"name": "To Be Alloted", "registrationNumber": "-", "department": "-"}


def test_permissive_check_allows_overflow_by_default():
    policy = CapacityPolicy(overflow_factor=None)
    assert policy.permits(occupied=10, capacity=2)


def test_overflow_factor_bounds_the_check():
    policy = CapacityPolicy(overflow_factor=2.0)
    assert policy.permits(occupied=3, capacity=2)
    assert not policy.permits(occupied=4, capacity=2)


def test_per_room_overrides_replace_nominal_capacity():
    structure = HostelStructure(name="Porali", capacity_per_room=2, room_capacities={"a1": 4})
    capacities = CapacityPolicy().capacity_map(structure)
    assert capacities.for_room("A-01") == 4
    assert capacities.for_room("A-02") == 2


def test_overcrowded_single_room_hostel():
    snapshot = RosterSnapshot(
        structure=HostelStructure.model_validate(
            {"name": "Porali", "blocks": [{"name": "A", "numRooms": 1}], "capacityPerRoom": 2}
        ),
        registry=[
            StudentSourceRecord.model_validate({"reg": reg, "room": "A-01"})
            for reg in ("S1", "S2", "S3")
        ],
    )
    roster = RosterBuilder().build(snapshot)

    room = roster.rooms[0]
    assert room.room_id == "A-01"
    assert (room.occupied, room.available, len(room.students)) == (3, 0, 3)
    assert roster.summary.overflowing_rooms == 1
    assert roster.summary.occupied_slots == 3


def test_every_room_lists_max_of_capacity_and_occupancy():
    snapshot = RosterSnapshot(
        structure=HostelStructure.model_validate(
            {"name": "Iqbal", "blocks": [{"name": "A", "numRooms": 3}], "capacityPerRoom": 3}
        ),
        registry=[StudentSourceRecord.model_validate({"reg": "S1", "room": "A-02"})],
        legacy=[
            StudentSourceRecord.model_validate({"reg": r, "room": "A-03"}) for r in ("L1", "L2", "L3", "L4")
        ],
    )
    roster = RosterBuilder().build(snapshot)

    for room in roster.rooms:
        assert len(room.students) == max(room.capacity, room.occupied)
    assert roster.summary.empty_slots == 3 + 2
