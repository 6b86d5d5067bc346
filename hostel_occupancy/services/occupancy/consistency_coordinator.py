"""
Consistency coordinator.

Applies student and hostel mutations together with their dependent
records: materialized room assignments, challans and audit log entries.

Deletion cascades run in a fixed order:

1. challans of the student(s)
2. room assignment rows of the student(s)
3. the student rows themselves (committed together with 1 and 2)
4. audit log cleanup, committed separately and allowed to fail
5. one audit entry describing the deletion, written after the cleanup

A failure in 1-3 rolls the whole deletion back and raises
`CascadeStepFailed(fatal=True)`. A failure in 4 is logged and reported in
the `CascadeReport` but does not undo 1-3.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.config.settings import settings
from hostel_occupancy.core.exceptions import (
    CascadeStepFailed,
    DuplicateEntryError,
    ExternalSourceUnavailable,
    ResourceNotFoundError,
)
from hostel_occupancy.core.logging import get_logger
from hostel_occupancy.models.hostel import Hostel
from hostel_occupancy.models.room_assignment import RoomAssignment
from hostel_occupancy.models.student import Student
from hostel_occupancy.repositories.audit_log_repository import AuditLogRepository
from hostel_occupancy.repositories.challan_repository import ChallanRepository
from hostel_occupancy.repositories.hostel_repository import HostelRepository
from hostel_occupancy.repositories.room_assignment_repository import (
    LegacyRoomRecordRepository,
    RoomAssignmentRepository,
)
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.schemas.cascade import CascadeReport
from hostel_occupancy.schemas.student import StudentCreate, StudentUpdate
from hostel_occupancy.services.allocation import (
    hostel_names_match,
    hostel_reference_names,
    normalize_room_id,
    room_key,
)
from hostel_occupancy.services.audit.audit_log_service import AuditLogService
from hostel_occupancy.services.constants import (
    ACTION_ADD_STUDENT,
    ACTION_CASCADE_DELETE,
    ACTION_DELETE_BATCH,
    ACTION_DELETE_STUDENT,
    ACTION_UPDATE_STUDENT,
    ENTITY_HOSTEL,
    ENTITY_STUDENT,
    ERROR_HOSTEL_NOT_FOUND,
    ERROR_NO_BATCH_MATCH,
    ERROR_STUDENT_NOT_FOUND,
)
from hostel_occupancy.services.fee.challan_numbers import generate_challan_number
from hostel_occupancy.services.roster.roster_service import RosterService

logger = get_logger(__name__)

T = TypeVar("T")

# Step names reported in CascadeStepFailed
STEP_DELETE_CHALLANS = "delete_challans"
STEP_REMOVE_OCCUPANCY = "remove_room_occupancy"
STEP_DELETE_STUDENTS = "delete_students"
STEP_DELETE_LEGACY_ROWS = "delete_legacy_rows"
STEP_DELETE_HOSTEL = "delete_hostel"
STEP_COMMIT = "commit"
STEP_LOG_CLEANUP = "log_cleanup"
STEP_DELETION_ENTRY = "deletion_audit_entry"

_SOURCE_ERRORS = (SQLAlchemyError, ExternalSourceUnavailable)


class ConsistencyCoordinator:
    """
    Entry point for every mutation that affects room occupancy.

    The coordinator owns transaction boundaries: each public method commits
    on success and rolls back on failure.
    """

    def __init__(
        self,
        db: Session,
        rosters: Optional[RosterService] = None,
        audit: Optional[AuditLogService] = None,
        batch_log_cleanup_limit: Optional[int] = None,
        legacy_text_match: Optional[bool] = None,
    ):
        self.db = db
        self.students = StudentRepository(db)
        self.challans = ChallanRepository(db)
        self.hostels = HostelRepository(db)
        self.assignments = RoomAssignmentRepository(db)
        self.legacy_rows = LegacyRoomRecordRepository(db)
        self.audit_logs = AuditLogRepository(db)
        self.rosters = rosters or RosterService(self.hostels, db)
        self.audit = audit or AuditLogService(self.audit_logs, db)
        self.batch_log_cleanup_limit = batch_log_cleanup_limit or settings.BATCH_LOG_CLEANUP_LIMIT
        self.legacy_text_match = (
            settings.AUDIT_LEGACY_TEXT_MATCH if legacy_text_match is None else legacy_text_match
        )

    # =========================================================================
    # Create / update
    # =========================================================================

    def create_student(self, data: StudentCreate) -> Tuple[Student, CascadeReport]:
        """
        Register a student and materialize their room occupancy.

        A room outside the hostel's structure is accepted as is. A student
        with a known hostel but no room is placed by the auto assigner.

        Raises:
            DuplicateEntryError: Registration number already registered
            NoCapacityAvailable: Auto placement found every room full
        """
        report = CascadeReport(operation="create_student")
        if self.students.get_by_registration_number(data.registration_number):
            raise DuplicateEntryError("Student", "registration_number", data.registration_number)

        room_number = normalize_room_id(data.room_number) or None
        hostel_name = (data.assigned_hostel or "").strip() or None
        hostel = self.rosters.find_hostel(hostel_name)
        if hostel is not None:
            hostel_name = hostel.name
            if room_number is None:
                room_number = self.rosters.choose_room(hostel).room_id

        student = Student(
            student_name=data.student_name,
            father_name=data.father_name,
            registration_number=data.registration_number,
            degree=data.degree,
            department=data.department,
            semester=data.semester,
            district=data.district,
            assigned_hostel=hostel_name,
            room_number=room_number,
            hostel_id=hostel.id if hostel else None,
            hostel_fee=data.hostel_fee or "pending",
            challan_number=generate_challan_number(exists=self._challan_number_taken),
            fee_table=dict(data.fee_table or {}),
            profile_image=data.profile_image,
        )

        try:
            self.students.add(student)
            if hostel is not None and room_number:
                removed, added = self._resync_room(hostel, room_number)
                report.assignments_removed += removed
                report.assignments_added += added
            entry = self.audit.append(
                ACTION_ADD_STUDENT,
                f"Student {student.student_name} ({student.registration_number}) added",
                username=data.username,
                hostel=hostel_name,
                entity_type=ENTITY_STUDENT,
                subject_id=student.id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        report.entity_id = student.id
        report.audit_entry_id = entry.id
        logger.info(
            f"Student {student.registration_number} created",
            extra={"student_id": student.id, "hostel": hostel_name, "room": room_number},
        )
        return student, report

    def update_student(self, student_id: str, data: StudentUpdate) -> Tuple[Student, CascadeReport]:
        """
        Apply a partial update. When the hostel or room changes, both the
        old and the new room are rebuilt from the registry.

        Raises:
            ResourceNotFoundError: Unknown student
            DuplicateEntryError: New registration number already registered
        """
        student = self._require_student(student_id)
        report = CascadeReport(operation="update_student", entity_id=student.id)
        changes = data.model_dump(exclude_unset=True, exclude={"username"})

        new_reg = changes.get("registration_number")
        if new_reg and new_reg != student.registration_number:
            if self.students.get_by_registration_number(new_reg):
                raise DuplicateEntryError("Student", "registration_number", new_reg)

        if "room_number" in changes:
            changes["room_number"] = normalize_room_id(changes["room_number"]) or None
        new_hostel: Optional[Hostel] = None
        if "assigned_hostel" in changes:
            requested = (changes["assigned_hostel"] or "").strip() or None
            new_hostel = self.rosters.find_hostel(requested)
            changes["assigned_hostel"] = new_hostel.name if new_hostel else requested
            changes["hostel_id"] = new_hostel.id if new_hostel else None
        else:
            new_hostel = self.rosters.find_hostel(student.assigned_hostel)

        prev_hostel_name, prev_room = student.assigned_hostel, student.room_number

        try:
            self.students.update(student, changes)
            same_hostel = hostel_names_match(prev_hostel_name, student.assigned_hostel) or not (
                prev_hostel_name or student.assigned_hostel
            )
            moved = not same_hostel or room_key(prev_room) != room_key(student.room_number)
            if moved:
                removed, added = self._move_occupancy(student, prev_hostel_name, prev_room, new_hostel)
                report.assignments_removed += removed
                report.assignments_added += added
            entry = self.audit.append(
                ACTION_UPDATE_STUDENT,
                f"Student {student.student_name} ({student.registration_number}) updated",
                username=data.username,
                hostel=student.assigned_hostel,
                entity_type=ENTITY_STUDENT,
                subject_id=student.id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        report.audit_entry_id = entry.id
        logger.info(
            f"Student {student.registration_number} updated",
            extra={
                "student_id": student.id,
                "assignments_removed": report.assignments_removed,
                "assignments_added": report.assignments_added,
            },
        )
        return student, report

    # =========================================================================
    # Deletes
    # =========================================================================

    def delete_student(self, student_id: str, username: Optional[str] = None) -> CascadeReport:
        """
        Raises:
            ResourceNotFoundError: Unknown student
            CascadeStepFailed: A fatal step failed; nothing was deleted
        """
        student = self._require_student(student_id)
        report = CascadeReport(operation="delete_student", entity_id=student.id)
        student_id = student.id
        name, reg, hostel_name = student.student_name, student.registration_number, student.assigned_hostel

        self._delete_students_fatal([student], report)

        report.logs_removed, report.log_cleanup_failed = self._cleanup_logs(
            [student_id], [name, reg], student_id
        )
        report.audit_entry_id = self._append_deletion_entry(
            ACTION_DELETE_STUDENT,
            f"Student {name} ({reg}) deleted",
            username=username,
            hostel=hostel_name,
            entity_type=ENTITY_STUDENT,
            subject_id=student_id,
            report=report,
        )
        logger.info(f"Student {reg} deleted", extra=report.model_dump())
        return report

    def delete_batch(self, department: str, batch: str, username: Optional[str] = None) -> CascadeReport:
        """
        Delete every student of `department` whose registration number
        contains `batch`.

        Log cleanup covers only the first BATCH_LOG_CLEANUP_LIMIT matched
        students; student, challan and occupancy data is removed for all.

        Raises:
            ResourceNotFoundError: No student matches
            CascadeStepFailed: A fatal step failed; nothing was deleted
        """
        department, batch = department.strip(), batch.strip()
        students = self.students.list_batch(department, batch)
        if not students:
            raise ResourceNotFoundError("Student", f"{department}/{batch}", ERROR_NO_BATCH_MATCH)

        report = CascadeReport(operation="delete_batch", entity_id=f"{department}/{batch}")
        bounded = students[: self.batch_log_cleanup_limit]
        report.log_cleanup_truncated = len(students) > len(bounded)
        subject_ids = [s.id for s in bounded]
        terms = [s.registration_number for s in bounded]

        self._delete_students_fatal(students, report)

        report.logs_removed, report.log_cleanup_failed = self._cleanup_logs(
            subject_ids, terms, report.entity_id
        )
        if report.log_cleanup_truncated:
            logger.warning(
                f"Batch log cleanup limited to {len(bounded)} of {len(students)} students",
                extra={"department": department, "batch": batch},
            )
        report.audit_entry_id = self._append_deletion_entry(
            ACTION_DELETE_BATCH,
            f"Deleted batch {batch} of {department} ({len(students)} students)",
            username=username,
            hostel=None,
            entity_type=ENTITY_STUDENT,
            subject_id=None,
            report=report,
        )
        logger.info(f"Batch {batch} of {department} deleted", extra=report.model_dump())
        return report

    def delete_hostel(self, hostel_id: str, username: Optional[str] = None) -> CascadeReport:
        """
        Delete a hostel, every student linked to it by name and their
        challans, then record one summary entry.

        Raises:
            ResourceNotFoundError: Unknown hostel
            CascadeStepFailed: A fatal step failed; nothing was deleted
        """
        hostel = self.hostels.get_by_id(hostel_id)
        if hostel is None:
            raise ResourceNotFoundError("Hostel", hostel_id, ERROR_HOSTEL_NOT_FOUND)
        hostel_id, hostel_name = hostel.id, hostel.name
        report = CascadeReport(operation="delete_hostel", entity_id=hostel_id)
        students = self.rosters.registry_students(hostel)
        ids = [s.id for s in students]
        regs = [s.registration_number for s in students]

        try:
            report.challans_deleted = self._fatal(
                STEP_DELETE_CHALLANS, hostel_id, lambda: self.challans.delete_for_students(ids, regs)
            )
            report.assignments_removed = self._fatal(
                STEP_REMOVE_OCCUPANCY,
                hostel_id,
                lambda: self.assignments.delete_for_hostel(hostel_id)
                + self.assignments.delete_for_students(ids),
            )
            report.students_deleted = self._fatal(
                STEP_DELETE_STUDENTS, hostel_id, lambda: self.students.delete_by_ids(ids)
            )
            self._fatal(
                STEP_DELETE_LEGACY_ROWS,
                hostel_id,
                lambda: self.legacy_rows.delete_for_hostel_names(hostel_reference_names(hostel_name)),
            )
            self._fatal(STEP_DELETE_HOSTEL, hostel_id, lambda: self.hostels.delete(hostel))
            self._fatal(STEP_COMMIT, hostel_id, self.db.commit)
        except CascadeStepFailed as exc:
            self.db.rollback()
            logger.error(f"Hostel deletion aborted at {exc.step}", exc_info=True, extra={"hostel_id": hostel_id})
            raise

        report.audit_entry_id = self._append_deletion_entry(
            ACTION_CASCADE_DELETE,
            f"Cascading deletion for hostel: {hostel_name}",
            username=username,
            hostel=hostel_name,
            entity_type=ENTITY_HOSTEL,
            subject_id=hostel_id,
            report=report,
            role="system",
        )
        logger.info(f"Hostel {hostel_name} deleted", extra=report.model_dump())
        return report

    # =========================================================================
    # Room occupancy materialization
    # =========================================================================

    def resync_room(self, hostel: Hostel, room_id: str) -> Tuple[int, int]:
        """Public form of the room rebuild, committed by the caller."""
        return self._resync_room(hostel, room_id)

    def _resync_room(self, hostel: Hostel, room_id: str) -> Tuple[int, int]:
        """
        Rebuild the assignment rows of one room from the registry.

        Returns:
            (students no longer recorded in the room, students newly recorded)
        """
        room_id = normalize_room_id(room_id)
        wanted = room_key(room_id)
        before: Set[str] = {
            row.student_id
            for row in self.assignments.list_for_hostel(hostel.id)
            if room_key(row.room_id) == wanted
        }
        occupants = [
            s for s in self.rosters.registry_students(hostel)
            if s.room_number and room_key(s.room_number) == wanted
        ]
        self.assignments.delete_for_room(hostel.id, wanted)
        self.assignments.add_many(
            [
                RoomAssignment(
                    hostel_id=hostel.id,
                    hostel_name=hostel.name,
                    room_id=room_id,
                    student_id=s.id,
                )
                for s in occupants
            ]
        )
        after = {s.id for s in occupants}
        return len(before - after), len(after - before)

    def _move_occupancy(
        self,
        student: Student,
        prev_hostel_name: Optional[str],
        prev_room: Optional[str],
        new_hostel: Optional[Hostel],
    ) -> Tuple[int, int]:
        removed = added = 0
        old_hostel = self.rosters.find_hostel(prev_hostel_name)
        if old_hostel is not None and prev_room:
            r, a = self._resync_room(old_hostel, prev_room)
            removed, added = removed + r, added + a
        if new_hostel is not None and student.room_number:
            r, a = self._resync_room(new_hostel, student.room_number)
            removed, added = removed + r, added + a

        # rows left behind in rooms that could not be resolved above
        current = room_key(student.room_number) if student.room_number else None
        for row in self.assignments.list_for_student(student.id):
            in_current_room = (
                new_hostel is not None and row.hostel_id == new_hostel.id and room_key(row.room_id) == current
            )
            if not in_current_room:
                self.assignments.delete(row)
                removed += 1
        return removed, added

    # =========================================================================
    # Cascade steps
    # =========================================================================

    def _delete_students_fatal(self, students: Sequence[Student], report: CascadeReport) -> None:
        ids = [s.id for s in students]
        regs = [s.registration_number for s in students]
        entity = report.entity_id
        try:
            report.challans_deleted = self._fatal(
                STEP_DELETE_CHALLANS, entity, lambda: self.challans.delete_for_students(ids, regs)
            )
            report.assignments_removed = self._fatal(
                STEP_REMOVE_OCCUPANCY, entity, lambda: self.assignments.delete_for_students(ids)
            )
            report.students_deleted = self._fatal(
                STEP_DELETE_STUDENTS, entity, lambda: self.students.delete_by_ids(ids)
            )
            self._fatal(STEP_COMMIT, entity, self.db.commit)
        except CascadeStepFailed as exc:
            self.db.rollback()
            logger.error(
                f"{report.operation} aborted at {exc.step}",
                exc_info=True,
                extra={"entity_id": entity},
            )
            raise

    @staticmethod
    def _fatal(step: str, entity_id: Optional[str], action: Callable[[], T]) -> T:
        try:
            return action()
        except _SOURCE_ERRORS as exc:
            raise CascadeStepFailed(step, entity_id, fatal=True, reason=str(exc)) from exc

    def _cleanup_logs(
        self,
        subject_ids: Sequence[str],
        terms: Iterable[Optional[str]],
        entity_id: Optional[str],
    ) -> Tuple[int, bool]:
        """
        Best-effort removal of entries about the deleted subjects.

        Returns:
            (entries removed, whether the cleanup failed)
        """
        legacy_terms: List[str] = [t for t in terms if t] if self.legacy_text_match else []
        try:
            removed = self.audit_logs.delete_for_subjects(subject_ids, legacy_terms)
            self.db.commit()
            return removed, False
        except _SOURCE_ERRORS as exc:
            self.db.rollback()
            failure = CascadeStepFailed(STEP_LOG_CLEANUP, entity_id, fatal=False, reason=str(exc))
            logger.warning(str(failure), exc_info=True, extra={"entity_id": entity_id})
            return 0, True

    def _append_deletion_entry(
        self,
        action: str,
        description: str,
        username: Optional[str],
        hostel: Optional[str],
        entity_type: str,
        subject_id: Optional[str],
        report: CascadeReport,
        role: Optional[str] = None,
    ) -> Optional[str]:
        details = report.model_dump(exclude={"audit_entry_id"})
        try:
            entry = self.audit.append(
                action,
                description,
                username=username,
                role=role,
                hostel=hostel,
                entity_type=entity_type,
                subject_id=subject_id,
                details=details,
            )
            self.db.commit()
            return entry.id
        except _SOURCE_ERRORS as exc:
            self.db.rollback()
            failure = CascadeStepFailed(STEP_DELETION_ENTRY, report.entity_id, fatal=False, reason=str(exc))
            logger.error(str(failure), exc_info=True, extra={"entity_id": report.entity_id})
            return None

    def _require_student(self, student_id: str) -> Student:
        student = self.students.get_by_id(student_id)
        if student is None:
            raise ResourceNotFoundError("Student", student_id, ERROR_STUDENT_NOT_FOUND)
        return student

    def _challan_number_taken(self, candidate: str) -> bool:
        return self.students.challan_number_exists(candidate) or self.challans.number_exists(candidate)


__all__ = ["ConsistencyCoordinator"]
