import pytest
from sqlalchemy.exc import OperationalError

from hostel_occupancy.core.exceptions import (
    CascadeStepFailed,
    DuplicateEntryError,
    ResourceNotFoundError,
)
from hostel_occupancy.models import AuditLog, Challan, Hostel, LegacyRoomRecord, RoomAssignment, Student
from hostel_occupancy.repositories.audit_log_repository import AuditLogRepository
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.schemas.student import StudentCreate, StudentUpdate
from hostel_occupancy.services.occupancy import ConsistencyCoordinator


def disk_error(*args, **kwargs):
    raise OperationalError("DELETE", {}, Exception("disk I/O error"))


def assignments_of(db, student_id):
    return [(a.hostel_name, a.room_id) for a in db.query(RoomAssignment).filter_by(student_id=student_id)]


# ---------------------------------------------------------------------------
# create / update
# ---------------------------------------------------------------------------


def test_create_student_places_into_first_free_room(db, coordinator, make_hostel):
    hostel = make_hostel("Porali Hostel", capacity_per_room=1)

    student, report = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="2021-CS-1", assigned_hostel="porali")
    )

    assert student.assigned_hostel == "Porali Hostel"
    assert student.hostel_id == hostel.id
    assert student.room_number == "A-01"
    assert student.challan_number.startswith("CH-")
    assert report.assignments_added == 1
    assert assignments_of(db, student.id) == [("Porali Hostel", "A-01")]

    entry = db.query(AuditLog).filter_by(id=report.audit_entry_id).one()
    assert entry.action == "ADD_STUDENT"
    assert entry.subject_id == student.id


def test_create_student_normalizes_explicit_room(db, coordinator, make_hostel):
    make_hostel("Porali Hostel")
    student, _ = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="R1", assigned_hostel="Porali Hostel", roomNumber="a 2")
    )
    assert student.room_number == "A-02"


def test_create_student_in_unknown_hostel_keeps_text(db, coordinator):
    student, report = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="R1", assigned_hostel="Nowhere", room_number="x-1")
    )
    assert student.assigned_hostel == "Nowhere"
    assert student.hostel_id is None
    assert report.assignments_added == 0


def test_create_student_outside_structure_lands_in_overflow_room(db, coordinator, rosters, make_hostel):
    hostel = make_hostel("Porali Hostel", blocks=[{"name": "A", "numRooms": 2}])

    student, report = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="R1", assigned_hostel="Porali Hostel", room_number="z 9")
    )

    assert student.room_number == "Z-09"
    assert student.hostel_id == hostel.id
    assert report.assignments_added == 1
    assert assignments_of(db, student.id) == [("Porali Hostel", "Z-09")]

    roster = rosters.compute_roster(hostel)
    assert [room.room_id for room in roster.rooms] == ["A-01", "A-02", "Z-09"]
    assert [s.registration_number for s in roster.rooms[-1].students if not s.placeholder] == ["R1"]


def test_create_student_rejects_duplicate_registration_number(coordinator, make_student):
    make_student("R1")
    with pytest.raises(DuplicateEntryError):
        coordinator.create_student(StudentCreate(student_name="Again", registration_number="R1"))


def test_update_moves_assignment_between_rooms(db, coordinator, make_hostel):
    make_hostel("Porali Hostel")
    iqbal = make_hostel("Iqbal Hostel", blocks=[{"name": "B", "numRooms": 1}])
    student, _ = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="R1", assigned_hostel="Porali Hostel", room_number="A-01")
    )

    student, report = coordinator.update_student(
        student.id, StudentUpdate(assigned_hostel="iqbal", room_number="b1")
    )

    assert student.hostel_id == iqbal.id
    assert student.room_number == "B-01"
    assert report.assignments_removed == 1
    assert report.assignments_added == 1
    assert assignments_of(db, student.id) == [("Iqbal Hostel", "B-01")]


def test_update_without_room_change_leaves_assignments(db, coordinator, make_hostel):
    make_hostel("Porali Hostel")
    student, _ = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="R1", assigned_hostel="Porali Hostel", room_number="A-01")
    )

    _, report = coordinator.update_student(student.id, StudentUpdate(district="Lahore"))

    assert (report.assignments_removed, report.assignments_added) == (0, 0)
    assert assignments_of(db, student.id) == [("Porali Hostel", "A-01")]


def test_update_rejects_taken_registration_number(coordinator, make_student):
    student = make_student("R1")
    make_student("R2")
    with pytest.raises(DuplicateEntryError):
        coordinator.update_student(student.id, StudentUpdate(registration_number="R2"))


def test_resync_replaces_rows_of_room_written_in_other_case(db, coordinator, make_hostel, make_student):
    hostel = make_hostel("Porali Hostel")
    student = make_student("R1", assigned_hostel="Porali Hostel", room_number="Annex")
    coordinator.resync_room(hostel, "Annex")
    db.commit()
    student.room_number = "annex"
    db.commit()

    removed, added = coordinator.resync_room(hostel, "annex")
    db.commit()

    assert (removed, added) == (0, 0)
    assert assignments_of(db, student.id) == [("Porali Hostel", "annex")]


def test_update_unknown_student(coordinator):
    with pytest.raises(ResourceNotFoundError):
        coordinator.update_student("missing", StudentUpdate(district="x"))


# ---------------------------------------------------------------------------
# delete student
# ---------------------------------------------------------------------------


def test_delete_student_removes_dependents(db, coordinator, make_hostel, make_challan, make_log):
    make_hostel("Porali Hostel")
    student, _ = coordinator.create_student(
        StudentCreate(student_name="Ali", registration_number="2021-CS-7", assigned_hostel="Porali Hostel")
    )
    student_id = student.id
    make_challan(student, "CH-1")
    make_challan(student, "CH-2")
    make_log("Student Ali (2021-CS-7) moved to A-02")
    make_log("Fee note", subject_id=student_id)
    make_log("Unrelated entry")

    report = coordinator.delete_student(student_id, username="warden")

    assert report.students_deleted == 1
    assert report.challans_deleted == 2
    assert report.assignments_removed == 1
    assert not report.log_cleanup_failed
    # ADD_STUDENT entry, the id-linked note and the text-matched legacy entry
    assert report.logs_removed == 3

    assert db.query(Student).count() == 0
    assert db.query(Challan).count() == 0
    assert db.query(RoomAssignment).count() == 0

    remaining = db.query(AuditLog).all()
    about_student = [e for e in remaining if "2021-CS-7" in e.description or e.subject_id == student_id]
    assert len(about_student) == 1
    assert about_student[0].action == "DELETE_STUDENT"
    assert about_student[0].username == "warden"
    assert about_student[0].id == report.audit_entry_id
    assert any(e.description == "Unrelated entry" for e in remaining)


def test_legacy_text_match_ignores_entries_with_subject(db, coordinator, make_student, make_log):
    target = make_student("R-100")
    other = make_student("R-200")
    make_log("Mentions R-100 but belongs to R-200", subject_id=other.id)
    make_log("Free text about R-100")

    report = coordinator.delete_student(target.id)

    assert report.logs_removed == 1
    assert db.query(AuditLog).filter_by(subject_id=other.id).count() == 1


def test_legacy_text_match_can_be_disabled(db, make_student, make_log):
    coordinator = ConsistencyCoordinator(db, legacy_text_match=False)
    target = make_student("R-100")
    make_log("Free text about R-100")

    report = coordinator.delete_student(target.id)

    assert report.logs_removed == 0


def test_fatal_step_failure_rolls_back_everything(db, coordinator, make_student, make_challan, monkeypatch):
    student = make_student("R1")
    student_id = student.id
    make_challan(student, "CH-1")
    monkeypatch.setattr(StudentRepository, "delete_by_ids", disk_error)

    with pytest.raises(CascadeStepFailed) as exc_info:
        coordinator.delete_student(student_id)

    assert exc_info.value.fatal
    assert exc_info.value.step == "delete_students"
    assert db.query(Student).filter_by(id=student_id).count() == 1
    assert db.query(Challan).filter_by(student_id=student_id).count() == 1


def test_log_cleanup_failure_is_reported_not_raised(db, coordinator, make_student, monkeypatch):
    student = make_student("R1")
    student_id = student.id
    monkeypatch.setattr(AuditLogRepository, "delete_for_subjects", disk_error)

    report = coordinator.delete_student(student_id)

    assert report.log_cleanup_failed
    assert report.logs_removed == 0
    assert report.students_deleted == 1
    assert db.query(Student).count() == 0
    assert report.audit_entry_id is not None


def test_delete_unknown_student(coordinator):
    with pytest.raises(ResourceNotFoundError):
        coordinator.delete_student("missing")


# ---------------------------------------------------------------------------
# batch delete
# ---------------------------------------------------------------------------


def test_batch_delete_bounds_log_cleanup(db, make_student, make_log, make_challan):
    coordinator = ConsistencyCoordinator(db, batch_log_cleanup_limit=2)
    students = [make_student(f"2020-CS-{n}", department="CS") for n in range(3)]
    make_student("2020-EE-9", department="EE")
    make_student("2021-CS-1", department="CS")
    make_challan(students[2], "CH-LAST")
    for s in students:
        make_log(f"note about {s.registration_number}", subject_id=s.id)

    report = coordinator.delete_batch("CS", "2020", username="admin")

    assert report.students_deleted == 3
    assert report.challans_deleted == 1
    assert report.log_cleanup_truncated
    assert report.logs_removed == 2
    assert sorted(s.registration_number for s in db.query(Student)) == ["2020-EE-9", "2021-CS-1"]

    entry = db.query(AuditLog).filter_by(action="BATCH_DELETE_STUDENTS").one()
    assert entry.description == "Deleted batch 2020 of CS (3 students)"
    assert entry.subject_id is None


def test_batch_delete_without_match(coordinator, make_student):
    make_student("2020-CS-1", department="CS")
    with pytest.raises(ResourceNotFoundError):
        coordinator.delete_batch("CS", "1999")


def test_batch_fragment_is_matched_literally(db, coordinator, make_student):
    make_student("2020_CS_1", department="CS")
    make_student("2020-CS-2", department="CS")

    report = coordinator.delete_batch("CS", "_CS_")

    assert report.students_deleted == 1
    assert [s.registration_number for s in db.query(Student)] == ["2020-CS-2"]


# ---------------------------------------------------------------------------
# hostel delete
# ---------------------------------------------------------------------------


def test_delete_hostel_cascades(db, coordinator, make_hostel, make_student, make_challan):
    hostel = make_hostel("Porali Hostel")
    hostel_id = hostel.id
    resident = make_student("R1", assigned_hostel="Porali", room_number="A-01")
    make_student("R2", assigned_hostel="Iqbal Hostel")
    make_challan(resident, "CH-R1")
    db.add(RoomAssignment(hostel_id=hostel_id, hostel_name=hostel.name, room_id="A-01", student_id=resident.id))
    db.add(LegacyRoomRecord(hostel_name="Porali Hostel", room_number="A-02", registration_number="OLD"))
    db.commit()

    report = coordinator.delete_hostel(hostel_id, username="admin")

    assert report.students_deleted == 1
    assert report.challans_deleted == 1
    assert report.assignments_removed == 1
    assert db.query(Hostel).count() == 0
    assert db.query(LegacyRoomRecord).count() == 0
    assert [s.registration_number for s in db.query(Student)] == ["R2"]

    entry = db.query(AuditLog).filter_by(action="CASCADE_DELETE").one()
    assert entry.description == "Cascading deletion for hostel: Porali Hostel"
    assert entry.role == "system"
    assert entry.subject_id == hostel_id
    assert entry.details["students_deleted"] == 1


def test_delete_hostel_failure_keeps_hostel(db, coordinator, make_hostel, make_student, monkeypatch):
    hostel = make_hostel("Porali Hostel")
    hostel_id = hostel.id
    make_student("R1", assigned_hostel="Porali Hostel")
    monkeypatch.setattr(StudentRepository, "delete_by_ids", disk_error)

    with pytest.raises(CascadeStepFailed):
        coordinator.delete_hostel(hostel_id)

    assert db.query(Hostel).filter_by(id=hostel_id).count() == 1
    assert db.query(Student).count() == 1
