import pytest

from hostel_occupancy.core.exceptions import InvalidStructuralDefinition
from hostel_occupancy.schemas.hostel import HostelStructure
from hostel_occupancy.services.allocation import RoomIdGenerator, total_capacity, total_rooms
from hostel_occupancy.services.allocation.room_id_generator import block_label


def structure(**fields):
    fields.setdefault("name", "Porali")
    return HostelStructure.model_validate(fields)


def test_single_block_covers_every_room():
    s = structure(blocks=[{"name": "A", "numRooms": 3}], capacityPerRoom=2)
    assert RoomIdGenerator().generate(s) == ["A-01", "A-02", "A-03"]
    assert total_capacity(s) == 6


def test_generation_is_deterministic():
    s = structure(blocks=[{"name": "B", "numRooms": 2}, {"name": "A", "numRooms": 2}])
    generator = RoomIdGenerator()
    first = generator.generate(s)
    assert first == generator.generate(s)
    assert first == ["B-01", "B-02", "A-01", "A-02"]


def test_room_count_is_spread_over_default_blocks():
    s = structure(numberOfRooms=12)
    ids = RoomIdGenerator(default_number_of_blocks=5).generate(s)
    assert len(ids) == 12
    assert ids[:4] == ["A-01", "A-02", "A-03", "B-01"]
    assert ids[-2:] == ["E-01", "E-02"]


def test_block_hint_controls_letter_count():
    s = structure(numberOfRooms=5, numberOfBlocks=2)
    assert RoomIdGenerator().generate(s) == ["A-01", "A-02", "A-03", "B-01", "B-02"]


def test_unusable_blocks_fall_back_to_room_count():
    s = structure(blocks=[{"name": " ", "numRooms": 4}, {"name": "C", "numRooms": 0}], numberOfRooms=2, numberOfBlocks=1)
    assert RoomIdGenerator().generate(s) == ["A-01", "A-02"]
    assert total_rooms(s) == 2


def test_repeated_block_name_continues_numbering():
    s = structure(blocks=[{"name": "A", "numRooms": 2}, {"name": "a", "numRooms": 1}])
    assert RoomIdGenerator().generate(s) == ["A-01", "A-02", "A-03"]


def test_missing_structure_is_rejected():
    with pytest.raises(InvalidStructuralDefinition) as exc_info:
        RoomIdGenerator().generate(structure(numberOfRooms=0))
    assert exc_info.value.details["hostel"] == "Porali"


def test_short_sequence_is_extended_from_hostel_name():
    class ShortGenerator(RoomIdGenerator):
        def _from_room_count(self, number_of_rooms, number_of_blocks):
            return super()._from_room_count(number_of_rooms, number_of_blocks)[:-2]

    ids = ShortGenerator().generate(structure(numberOfRooms=4, numberOfBlocks=2))
    assert ids == ["A-01", "A-02", "PO-03", "PO-04"]


@pytest.mark.parametrize("index,label", [(0, "A"), (25, "Z"), (26, "AA"), (27, "AB"), (52, "BA")])
def test_block_labels_continue_past_z(index, label):
    assert block_label(index) == label


def test_many_synthesized_blocks_stay_unique():
    ids = RoomIdGenerator().generate(structure(numberOfRooms=30, numberOfBlocks=30))
    assert len(set(ids)) == 30
    assert ids[26] == "AA-01"
