"""
Roster service.

Collects the three roster sources for a hostel into a `RosterSnapshot` and
runs the allocation engine over it. Reads from the sources are not isolated
from concurrent writes; each roster reflects whatever the reads returned.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from hostel_occupancy.core.exceptions import (
    InvalidStructuralDefinition,
    ResourceNotFoundError,
)
from hostel_occupancy.models.hostel import Hostel
from hostel_occupancy.models.student import Student
from hostel_occupancy.repositories.hostel_repository import HostelRepository
from hostel_occupancy.repositories.room_assignment_repository import (
    LegacyRoomRecordRepository,
    RoomAssignmentRepository,
)
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.schemas.hostel import HostelStats, HostelStructure
from hostel_occupancy.schemas.roster import AutoAssignment, HostelRoster, RoomCapacityCheck
from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation import (
    AutoAssigner,
    RosterBuilder,
    RosterSnapshot,
    hostel_names_match,
    hostel_reference_names,
    normalize_room_id,
    room_key,
)
from hostel_occupancy.services.base import BaseService, ServiceResult
from hostel_occupancy.services.constants import (
    ERROR_HOSTEL_NOT_FOUND,
    SUCCESS_CAPACITY_CHECKED,
    SUCCESS_ROOM_SELECTED,
    SUCCESS_ROSTER_BUILT,
)


def structure_of(hostel: Hostel) -> HostelStructure:
    return HostelStructure(
        name=hostel.name,
        capacity_per_room=hostel.capacity_per_room,
        number_of_rooms=hostel.number_of_rooms or 0,
        number_of_blocks=hostel.number_of_blocks,
        blocks=hostel.blocks or [],
        room_capacities=hostel.room_capacities or {},
    )


def registry_record(student: Student) -> StudentSourceRecord:
    return StudentSourceRecord(
        registration_number=student.registration_number,
        student_name=student.student_name,
        department=student.department,
        assigned_hostel=student.assigned_hostel,
        room_number=student.room_number,
    )


class RosterService(BaseService[Hostel, HostelRepository]):
    """Build rosters, pick rooms and answer capacity questions for a hostel."""

    def __init__(
        self,
        repository: HostelRepository,
        db_session: Session,
        builder: Optional[RosterBuilder] = None,
        assigner: Optional[AutoAssigner] = None,
    ):
        super().__init__(repository, db_session)
        self.builder = builder or RosterBuilder()
        self.assigner = assigner or AutoAssigner(self.builder.generator, self.builder.policy)
        self.students = StudentRepository(db_session)
        self.assignments = RoomAssignmentRepository(db_session)
        self.legacy = LegacyRoomRecordRepository(db_session)

    # -------------------------------------------------------------------------
    # Raising API used by other services
    # -------------------------------------------------------------------------

    def resolve_hostel(self, identifier: str) -> Hostel:
        """
        Find a hostel by id, by exact name, or by any name variant.

        Raises:
            ResourceNotFoundError: Nothing matches
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise ResourceNotFoundError("Hostel", identifier, ERROR_HOSTEL_NOT_FOUND)
        hostel = self.repository.get_by_id(identifier) or self.repository.get_by_name(identifier)
        if hostel:
            return hostel
        for candidate in self.repository.list_ordered():
            if hostel_names_match(candidate.name, identifier):
                return candidate
        raise ResourceNotFoundError("Hostel", identifier, ERROR_HOSTEL_NOT_FOUND)

    def find_hostel(self, identifier: Optional[str]) -> Optional[Hostel]:
        if not identifier or not identifier.strip():
            return None
        try:
            return self.resolve_hostel(identifier)
        except ResourceNotFoundError:
            return None

    def hostel_claiming_name(self, name: str, exclude_id: Optional[str] = None) -> Optional[Hostel]:
        """
        The hostel already answering to any spelling of `name`. Students and
        room records reference hostels by spelling, so two hostels may never
        share one.
        """
        for candidate in self.repository.list_ordered():
            if candidate.id != exclude_id and hostel_names_match(candidate.name, name):
                return candidate
        return None

    def registry_students(self, hostel: Hostel) -> List[Student]:
        return self.students.list_by_hostel_names(hostel_reference_names(hostel.name))

    def snapshot(self, hostel: Hostel) -> RosterSnapshot:
        registry = [registry_record(s) for s in self.registry_students(hostel)]

        rows = self.assignments.list_for_hostel(hostel.id)
        by_id = {s.id: s for s in self.students.get_by_ids(r.student_id for r in rows)}
        assignments = [
            StudentSourceRecord(
                registration_number=by_id[row.student_id].registration_number,
                student_name=by_id[row.student_id].student_name,
                department=by_id[row.student_id].department,
                assigned_hostel=hostel.name,
                room_number=row.room_id,
            )
            for row in rows
            if row.student_id in by_id
        ]

        legacy = [
            StudentSourceRecord(
                registration_number=row.registration_number,
                student_name=row.student_name,
                department=row.department,
                assigned_hostel=row.hostel_name,
                room_number=row.room_number,
            )
            for row in self.legacy.list_for_hostel_names(hostel_reference_names(hostel.name))
        ]

        return RosterSnapshot(
            structure=structure_of(hostel),
            registry=registry,
            assignments=assignments,
            legacy=legacy,
        )

    def compute_roster(self, hostel: Hostel) -> HostelRoster:
        """
        Raises:
            InvalidStructuralDefinition: The hostel defines no rooms
            ExternalSourceUnavailable: A source read failed
        """
        return self.builder.build(self.snapshot(hostel))

    def choose_room(self, hostel: Hostel) -> AutoAssignment:
        """
        Raises:
            NoCapacityAvailable: Every room is full
        """
        return self.assigner.assign(
            hostel.name,
            roster_provider=lambda: self.compute_roster(hostel),
            structure_provider=lambda: self._reload_structure(hostel),
        )

    def stats_for(self, hostel: Hostel) -> HostelStats:
        try:
            return self.compute_roster(hostel).summary
        except InvalidStructuralDefinition:
            return HostelStats()

    def _reload_structure(self, hostel: Hostel) -> HostelStructure:
        fresh = self.repository.get_by_id(hostel.id)
        if fresh is None:
            raise ResourceNotFoundError("Hostel", hostel.id, ERROR_HOSTEL_NOT_FOUND)
        return structure_of(fresh)

    # -------------------------------------------------------------------------
    # ServiceResult API
    # -------------------------------------------------------------------------

    def build_roster(self, identifier: str) -> ServiceResult[HostelRoster]:
        try:
            hostel = self.resolve_hostel(identifier)
            roster = self.compute_roster(hostel)
            self._logger.debug(
                f"Roster built for {hostel.name}",
                extra={"rooms": len(roster.rooms), "occupied": roster.summary.occupied_slots},
            )
            return ServiceResult.success(roster, message=SUCCESS_ROSTER_BUILT)
        except Exception as e:
            return self._handle_exception(e, "build roster", identifier)

    def auto_assign(self, identifier: str) -> ServiceResult[AutoAssignment]:
        try:
            hostel = self.resolve_hostel(identifier)
            assignment = self.choose_room(hostel)
            self._log_operation(
                "auto assign",
                hostel.name,
                {"room_id": assignment.room_id, "from_roster": assignment.from_roster},
            )
            return ServiceResult.success(assignment, message=SUCCESS_ROOM_SELECTED)
        except Exception as e:
            return self._handle_exception(e, "select room", identifier)

    def room_has_capacity(self, identifier: str, room: str) -> ServiceResult[RoomCapacityCheck]:
        """
        Report a room's occupancy. `permitted` is true unless an overflow
        bound is configured and reached.
        """
        try:
            hostel = self.resolve_hostel(identifier)
            roster = self.compute_roster(hostel)
            wanted = room_key(room)
            match = next((r for r in roster.rooms if room_key(r.room_id) == wanted), None)
            if match is not None:
                occupied, capacity, room_id = match.occupied, match.capacity, match.room_id
            else:
                capacities = self.builder.policy.capacity_map(structure_of(hostel))
                occupied, capacity, room_id = 0, capacities.for_room(room), normalize_room_id(room)
            check = RoomCapacityCheck(
                hostel=hostel.name,
                room_id=room_id,
                permitted=self.builder.policy.permits(occupied, capacity),
                occupied=occupied,
                capacity=capacity,
            )
            return ServiceResult.success(check, message=SUCCESS_CAPACITY_CHECKED)
        except Exception as e:
            return self._handle_exception(e, "check room capacity", identifier)


__all__ = ["RosterService", "structure_of", "registry_record"]
