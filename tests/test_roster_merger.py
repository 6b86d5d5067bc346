from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation import RosterMerger, RosterSource


def record(reg=None, room=None, name=None, department="CS", **extra):
    data = {"registrationNumber": reg, "studentName": name or (f"Student {reg}" if reg else None), "department": department, "roomNumber": room}
    data.update(extra)
    return StudentSourceRecord.model_validate(data)


def regs(entries):
    return [e.registration_number for e in entries]


def test_every_canonical_room_is_present_in_order():
    merged = RosterMerger().merge(["A-01", "A-02", "B-01"], [])
    assert list(merged) == ["A-01", "A-02", "B-01"]
    assert all(entries == [] for entries in merged.values())


def test_higher_source_replaces_room_list_wholesale():
    registry = RosterSource("registry", [record("S1", "A-01")])
    assignments = RosterSource("assignments", [record("S2", "A-01"), record("S3", "A-02")])

    merged = RosterMerger().merge(["A-01", "A-02"], [registry, assignments])

    assert regs(merged["A-01"]) == ["S1"]
    assert regs(merged["A-02"]) == ["S3"]


def test_student_listed_in_every_source_appears_once():
    registry = RosterSource("registry", [record("S1", "a-1")])
    assignments = RosterSource("assignments", [record("s1", "A-01"), record("S1", "A 01")])
    legacy = RosterSource("legacy", [record("S1", "A01")])

    merged = RosterMerger().merge(["A-01"], [registry, assignments, legacy])

    assert regs(merged["A-01"]) == ["S1"]


def test_duplicates_within_a_room_keep_first_occurrence():
    source = RosterSource("registry", [
        record("S1", "A-01", name="First"),
        record("s1", "A-01", name="Second"),
        record(None, "A-01", name="Ali Khan"),
        record("-", "A-01", name="ali  khan"),
    ])
    merged = RosterMerger().merge(["A-01"], [source])
    assert [e.name for e in merged["A-01"]] == ["First", "Ali Khan"]


def test_rooms_outside_structure_are_kept_after_canonical_rooms():
    source = RosterSource("registry", [
        record("S1", "Z-09"),
        record("S2", "C-01"),
        record("S3", "A-01"),
    ])
    merged = RosterMerger().merge(["A-01"], [source])
    assert list(merged) == ["A-01", "C-01", "Z-09"]


def test_relocated_student_is_removed_from_lower_ranked_room():
    registry = RosterSource("registry", [record("S1", "A-02")])
    legacy = RosterSource("legacy", [record("S1", "A-01"), record("S9", "A-01")])

    merged = RosterMerger().merge(["A-01", "A-02"], [registry, legacy])

    assert regs(merged["A-01"]) == ["S9"]
    assert regs(merged["A-02"]) == ["S1"]


def test_overflow_room_emptied_by_relocation_is_dropped():
    registry = RosterSource("registry", [record("S1", "A-01")])
    legacy = RosterSource("legacy", [record("S1", "OLD-7")])
    merged = RosterMerger().merge(["A-01"], [registry, legacy])
    assert list(merged) == ["A-01"]


def test_records_without_room_identity_or_with_placeholder_shape_are_ignored():
    source = RosterSource("legacy", [
        record("S1", None),
        record(None, "A-01", name=None),
        record("-", "A-01", name="To Be Alloted"),
        record("S2", "A-01"),
    ])
    merged = RosterMerger().merge(["A-01"], [source])
    assert regs(merged["A-01"]) == ["S2"]


def test_source_records_accept_alternate_field_names():
    raw = StudentSourceRecord.model_validate({"regNo": 1024, "fullName": " Sara ", "faculty": "Law", "roomNo": "c 3"})
    merged = RosterMerger().merge(["C-03"], [RosterSource("legacy", [raw])])
    entry = merged["C-03"][0]
    assert (entry.name, entry.registration_number, entry.department) == ("Sara", "1024", "Law")
