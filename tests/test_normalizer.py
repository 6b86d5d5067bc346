import pytest

from hostel_occupancy.services.allocation import (
    hostel_name_variants,
    hostel_names_match,
    hostel_reference_names,
    identity_key,
    normalize_room_id,
    room_key,
    room_sort_key,
)


@pytest.mark.parametrize("raw", ["b-2", "B-02", " B - 2 ", "b2", "B 02"])
def test_room_ids_normalize_to_block_and_padded_number(raw):
    assert normalize_room_id(raw) == "B-02"


def test_unparseable_room_id_is_trimmed_not_rejected():
    assert normalize_room_id("  Annex  ") == "Annex"
    assert normalize_room_id("12") == "12"
    assert normalize_room_id(None) == ""


def test_pad_width_is_configurable():
    assert normalize_room_id("c-7", pad_width=3) == "C-007"


def test_room_key_ignores_case_for_unparsed_ids():
    assert room_key("annex") == room_key("ANNEX")


def test_room_sort_key_orders_by_block_then_number_then_unparsed():
    rooms = ["B-01", "Annex", "A-10", "A-02"]
    assert sorted(rooms, key=room_sort_key) == ["A-02", "A-10", "B-01", "Annex"]


def test_hostel_name_variants():
    assert hostel_name_variants("  Porali  Hostel ") == ["Porali  Hostel", "Porali", "Porali Hostel"]
    assert hostel_name_variants("") == []


def test_reference_names_include_suffixed_spelling():
    names = hostel_reference_names("Porali")
    assert "Porali" in names
    assert "Porali Hostel" in names


def test_hostel_names_match_across_spellings():
    assert hostel_names_match("Porali", "porali hostel")
    assert hostel_names_match("Iqbal  Hostel", "IQBAL")
    assert not hostel_names_match("Porali", "Iqbal")
    assert not hostel_names_match(None, "Porali")


def test_identity_prefers_registration_number():
    assert identity_key(" S1 ", "Ali") == "s1"
    assert identity_key("-", "Ali   Khan") == "ali khan"
    assert identity_key(None, None) is None
    assert identity_key("", "  ") is None
