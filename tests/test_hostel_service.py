import pytest

from hostel_occupancy.core.exceptions import ErrorCode
from hostel_occupancy.models import AuditLog, Hostel, LegacyRoomRecord, RoomAssignment, Student
from hostel_occupancy.repositories import HostelRepository
from hostel_occupancy.schemas.hostel import HostelCreate, HostelUpdate
from hostel_occupancy.services.hostel import HostelService


@pytest.fixture
def hostels(db, rosters, coordinator):
    return HostelService(HostelRepository(db), db, rosters=rosters, coordinator=coordinator)


def test_create_hostel_derives_totals(db, hostels):
    result = hostels.create_hostel(
        HostelCreate.model_validate(
            {
                "name": " Porali Hostel ",
                "capacityPerRoom": 3,
                "blocks": [{"name": "A ", "numRooms": 4}, {"name": "", "numRooms": 9}, {"name": "B", "numRooms": 2}],
                "username": "admin",
            }
        )
    )

    assert result.is_success
    hostel = result.data
    assert hostel.name == "Porali Hostel"
    assert [(b.name, b.num_rooms) for b in hostel.blocks] == [("A", 4), ("B", 2)]
    assert (hostel.number_of_rooms, hostel.total_rooms, hostel.total_capacity) == (6, 6, 18)
    assert db.query(AuditLog).filter_by(action="ADD_HOSTEL").one().username == "admin"


def test_service_log_records_name_the_service(hostels, app_logs):
    hostels.create_hostel(HostelCreate(name="Iqbal", number_of_rooms=2))

    records = [r for r in app_logs.records if r.getMessage() == "Operation: create hostel"]
    assert records and records[0].service == "HostelService"
    assert records[0].entity_ref == "Iqbal"


def test_create_hostel_without_capacity_uses_default(hostels):
    hostel = hostels.create_hostel(HostelCreate(name="Iqbal", number_of_rooms=10)).data
    assert hostel.capacity_per_room == 3
    assert (hostel.total_rooms, hostel.total_capacity) == (10, 30)


def test_create_hostel_rejects_duplicate_name(hostels, make_hostel):
    make_hostel("Porali Hostel")
    result = hostels.create_hostel(HostelCreate(name="Porali Hostel"))
    assert result.error.code == ErrorCode.DUPLICATE_ENTRY


@pytest.mark.parametrize("name", ["Porali", "porali hostel", " Porali   Hostel "])
def test_create_hostel_rejects_other_spelling_of_existing_name(db, hostels, make_hostel, name):
    make_hostel("Porali Hostel")

    result = hostels.create_hostel(HostelCreate(name=name))

    assert result.error.code == ErrorCode.DUPLICATE_ENTRY
    assert result.error.field == "name"
    assert db.query(Hostel).count() == 1


def test_create_hostel_accepts_name_sharing_only_a_prefix(hostels, make_hostel):
    make_hostel("Porali Hostel")
    assert hostels.create_hostel(HostelCreate(name="Porali Block", number_of_rooms=2)).is_success


def test_rename_onto_other_hostels_spelling_is_rejected(db, hostels, make_hostel, make_student):
    make_hostel("Porali Hostel")
    iqbal = make_hostel("Iqbal")
    make_student("MINE", assigned_hostel="Porali Hostel")
    make_student("OTHER", assigned_hostel="Iqbal")

    result = hostels.update_hostel(iqbal.id, HostelUpdate(name="Porali"))

    assert result.error.code == ErrorCode.DUPLICATE_ENTRY
    assert {s.registration_number: s.assigned_hostel for s in db.query(Student)} == {
        "MINE": "Porali Hostel",
        "OTHER": "Iqbal",
    }


def test_rename_to_own_spelling_is_allowed(hostels, make_hostel):
    hostel = make_hostel("Porali")
    assert hostels.update_hostel(hostel.id, HostelUpdate(name="Porali Hostel")).data.name == "Porali Hostel"


def test_deleting_hostel_leaves_students_of_other_hostels(db, hostels, make_student):
    porali = hostels.create_hostel(HostelCreate(name="Porali", number_of_rooms=2)).data
    assert not hostels.create_hostel(HostelCreate(name="Porali Hostel", number_of_rooms=2)).is_success
    hostels.create_hostel(HostelCreate(name="Iqbal", number_of_rooms=2))
    make_student("MINE", assigned_hostel="Porali", room_number="A-01")
    make_student("OTHER", assigned_hostel="Iqbal", room_number="A-01")

    report = hostels.delete_hostel(porali.id).data

    assert report.students_deleted == 1
    assert [s.registration_number for s in db.query(Student)] == ["OTHER"]


def test_structural_update_recomputes_totals(hostels, make_hostel):
    hostel = make_hostel("Porali Hostel", capacity_per_room=2)

    result = hostels.update_hostel(hostel.id, HostelUpdate(capacity_per_room=4))

    assert result.data.total_capacity == 8


def test_rename_relinks_students_and_rooms(db, hostels, coordinator, make_hostel, make_student):
    hostel = make_hostel("Porali Hostel")
    make_student("R1", assigned_hostel="porali", room_number="A-01")
    make_student("R2", assigned_hostel="Iqbal")
    coordinator.resync_room(hostel, "A-01")
    db.add(LegacyRoomRecord(hostel_name="Porali", room_number="A-02", registration_number="OLD"))
    db.commit()

    result = hostels.update_hostel(hostel.id, HostelUpdate(name="Quaid Hostel"))

    assert result.is_success
    by_reg = {s.registration_number: s for s in db.query(Student)}
    assert by_reg["R1"].assigned_hostel == "Quaid Hostel"
    assert by_reg["R1"].hostel_id == hostel.id
    assert by_reg["R2"].assigned_hostel == "Iqbal"
    assert [a.hostel_name for a in db.query(RoomAssignment)] == ["Quaid Hostel"]
    assert [r.hostel_name for r in db.query(LegacyRoomRecord)] == ["Quaid Hostel"]

    entry = db.query(AuditLog).filter_by(action="UPDATE_HOSTEL").one()
    assert entry.details["studentsRelinked"] == 1

    roster = hostels.rosters.build_roster("Quaid").data
    assert roster.summary.occupied_slots == 2


def test_get_hostel_includes_stats(hostels, make_hostel, make_student):
    make_hostel("Porali Hostel", capacity_per_room=2)
    make_student("R1", assigned_hostel="Porali Hostel", room_number="A-01")

    result = hostels.get_hostel("porali")

    assert result.data.stats.occupied_slots == 1
    assert result.data.stats.empty_slots == 3


def test_list_hostels(hostels, make_hostel):
    make_hostel("B Hostel")
    make_hostel("A Hostel")
    result = hostels.list_hostels()
    assert [h.name for h in result.data] == ["A Hostel", "B Hostel"]
    assert result.metadata["count"] == 2


def test_legacy_import_tolerates_column_names(db, hostels, make_hostel):
    make_hostel("Porali Hostel")
    content = "\ufeffRoom,regNo,fullName,faculty\na 1,L-1,Old One,Law\n,L-2,No Room,Law\nA-02,,,Law\nb2,L-3,Old Three,\n"

    result = hostels.import_legacy_records("Porali", content, username="clerk")

    assert result.is_success
    assert (result.data.imported, result.data.skipped) == (2, 2)
    rows = db.query(LegacyRoomRecord).order_by(LegacyRoomRecord.room_number).all()
    assert [(r.room_number, r.registration_number) for r in rows] == [("A-01", "L-1"), ("B-02", "L-3")]
    assert all(r.hostel_name == "Porali Hostel" for r in rows)


def test_legacy_import_replaces_previous_rows(db, hostels, make_hostel):
    make_hostel("Porali Hostel")
    hostels.import_legacy_records("Porali Hostel", "room,reg\nA-01,L-1\nA-01,L-2\n")

    result = hostels.import_legacy_records("Porali Hostel", "room,reg\nA-02,L-9\n")

    assert result.data.replaced == 2
    assert [r.registration_number for r in db.query(LegacyRoomRecord)] == ["L-9"]


def test_legacy_import_requires_header(hostels, make_hostel):
    make_hostel("Porali Hostel")
    result = hostels.import_legacy_records("Porali Hostel", "")
    assert result.error.code == ErrorCode.VALIDATION_ERROR


def test_delete_hostel_through_service(db, hostels, make_hostel):
    hostel_id = make_hostel("Porali Hostel").id
    result = hostels.delete_hostel("porali")
    assert result.is_success
    assert result.data.entity_id == hostel_id
    assert db.query(AuditLog).filter_by(action="CASCADE_DELETE").count() == 1
