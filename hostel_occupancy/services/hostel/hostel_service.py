"""
Hostel service.

Keeps a hostel's derived totals in step with its structural definition and
re-points the weak hostel link of students and room records on rename.
"""

import csv
import io
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from hostel_occupancy.config.settings import settings
from hostel_occupancy.core.exceptions import DuplicateEntryError, ValidationError
from hostel_occupancy.models.hostel import Hostel
from hostel_occupancy.models.room_assignment import LegacyRoomRecord
from hostel_occupancy.repositories.hostel_repository import HostelRepository
from hostel_occupancy.repositories.room_assignment_repository import (
    LegacyRoomRecordRepository,
    RoomAssignmentRepository,
)
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.schemas.cascade import CascadeReport
from hostel_occupancy.schemas.hostel import (
    BlockDefinition,
    HostelCreate,
    HostelResponse,
    HostelStructure,
    HostelUpdate,
    HostelWithStats,
)
from hostel_occupancy.schemas.legacy import LegacyImportResult
from hostel_occupancy.schemas.student import StudentSourceRecord
from hostel_occupancy.services.allocation import (
    hostel_reference_names,
    identity_key,
    normalize_room_id,
    total_capacity,
    total_rooms,
    usable_blocks,
)
from hostel_occupancy.services.audit.audit_log_service import AuditLogService
from hostel_occupancy.services.base import BaseService, ServiceResult
from hostel_occupancy.services.constants import (
    ACTION_ADD_HOSTEL,
    ACTION_IMPORT_ROOMS,
    ACTION_UPDATE_HOSTEL,
    ENTITY_HOSTEL,
    SUCCESS_HOSTEL_CREATED,
    SUCCESS_HOSTEL_DELETED,
    SUCCESS_HOSTEL_UPDATED,
    SUCCESS_HOSTELS_RETRIEVED,
    SUCCESS_LEGACY_IMPORTED,
)
from hostel_occupancy.services.occupancy import ConsistencyCoordinator
from hostel_occupancy.services.roster.roster_service import RosterService, structure_of

_STRUCTURAL_FIELDS = ("capacity_per_room", "number_of_rooms", "number_of_blocks", "blocks", "room_capacities")


def clean_blocks(blocks: List[BlockDefinition]) -> List[Dict[str, Any]]:
    """Blocks with a name and a positive room count, names trimmed, as stored."""
    structure = HostelStructure(name="-", blocks=blocks)
    return [
        {"name": b.name.strip(), "numRooms": b.num_rooms}
        for b in usable_blocks(structure)
    ]


def clean_room_capacities(overrides: Dict[str, int]) -> Dict[str, int]:
    return {
        normalize_room_id(room): int(capacity)
        for room, capacity in (overrides or {}).items()
        if normalize_room_id(room) and capacity is not None and int(capacity) > 0
    }


def apply_structure(hostel: Hostel) -> None:
    """Normalize the stored definition and recompute the derived totals."""
    hostel.blocks = clean_blocks([BlockDefinition.model_validate(b) for b in (hostel.blocks or [])])
    hostel.room_capacities = clean_room_capacities(hostel.room_capacities)
    hostel.capacity_per_room = hostel.capacity_per_room or settings.DEFAULT_CAPACITY_PER_ROOM
    structure = structure_of(hostel)
    if hostel.blocks:
        hostel.number_of_rooms = total_rooms(structure)
    hostel.total_rooms = total_rooms(structure)
    hostel.total_capacity = total_capacity(structure)


class HostelService(BaseService[Hostel, HostelRepository]):
    def __init__(
        self,
        repository: HostelRepository,
        db_session: Session,
        rosters: Optional[RosterService] = None,
        coordinator: Optional[ConsistencyCoordinator] = None,
    ):
        super().__init__(repository, db_session)
        self.rosters = rosters or RosterService(repository, db_session)
        self.coordinator = coordinator or ConsistencyCoordinator(db_session, rosters=self.rosters)
        self.audit: AuditLogService = self.coordinator.audit
        self.students = StudentRepository(db_session)
        self.assignments = RoomAssignmentRepository(db_session)
        self.legacy = LegacyRoomRecordRepository(db_session)

    def _with_stats(self, hostel: Hostel) -> HostelWithStats:
        response = HostelWithStats.model_validate(hostel)
        response.stats = self.rosters.stats_for(hostel)
        return response

    def _ensure_name_available(self, name: str, exclude_id: Optional[str] = None) -> None:
        """Raises DuplicateEntryError when another hostel answers to a spelling of `name`."""
        holder = self.rosters.hostel_claiming_name(name, exclude_id=exclude_id)
        if holder is not None:
            raise DuplicateEntryError("Hostel", "name", holder.name)

    # -------------------------------------------------------------------------
    # Create / update
    # -------------------------------------------------------------------------

    def create_hostel(self, data: HostelCreate) -> ServiceResult[HostelResponse]:
        try:
            name = data.name.strip()
            self._ensure_name_available(name)

            with self.transaction():
                hostel = Hostel(
                    name=name,
                    warden=data.warden,
                    image_url=data.image_url,
                    capacity_per_room=data.capacity_per_room,
                    number_of_rooms=data.number_of_rooms or 0,
                    number_of_blocks=data.number_of_blocks,
                    blocks=[b.model_dump(by_alias=True) for b in data.blocks],
                    room_capacities=dict(data.room_capacities),
                )
                apply_structure(hostel)
                self.repository.add(hostel)
                self.audit.append(
                    ACTION_ADD_HOSTEL,
                    f"Hostel {hostel.name} added",
                    username=data.username,
                    hostel=hostel.name,
                    entity_type=ENTITY_HOSTEL,
                    subject_id=hostel.id,
                )

            self._log_operation("create hostel", hostel.name, {"total_rooms": hostel.total_rooms})
            return ServiceResult.success(HostelResponse.model_validate(hostel), message=SUCCESS_HOSTEL_CREATED)
        except Exception as e:
            return self._handle_exception(e, "create hostel", data.name)

    def update_hostel(self, hostel_id: str, data: HostelUpdate) -> ServiceResult[HostelResponse]:
        """
        Partial update. A rename moves the weak hostel link of registry
        students, room assignments and imported legacy rows to the new name.
        """
        try:
            hostel = self.rosters.resolve_hostel(hostel_id)
            changes = data.model_dump(exclude_unset=True, exclude={"username"})
            old_name = hostel.name
            new_name = (changes.pop("name", None) or old_name).strip()
            renamed = new_name != old_name
            if renamed:
                self._ensure_name_available(new_name, exclude_id=hostel.id)

            if "blocks" in changes:
                changes["blocks"] = [
                    BlockDefinition.model_validate(b).model_dump(by_alias=True)
                    for b in (changes["blocks"] or [])
                ]
            if "room_capacities" in changes and changes["room_capacities"] is None:
                changes["room_capacities"] = {}
            if changes.get("number_of_rooms", 0) is None:
                changes.pop("number_of_rooms")

            relinked = 0
            with self.transaction():
                old_references = hostel_reference_names(old_name)
                self.repository.update(hostel, {**changes, "name": new_name})
                apply_structure(hostel)
                if renamed:
                    relinked = self.students.relink_hostel(old_references, new_name, hostel.id)
                    self.assignments.rename_hostel(hostel.id, new_name)
                    self.legacy.rename_hostel(old_references, new_name)
                touched = sorted(set(changes) & set(_STRUCTURAL_FIELDS))
                description = f"Hostel {new_name} updated"
                if renamed:
                    description = f"Hostel {old_name} renamed to {new_name}"
                self.audit.append(
                    ACTION_UPDATE_HOSTEL,
                    description,
                    username=data.username,
                    hostel=new_name,
                    entity_type=ENTITY_HOSTEL,
                    subject_id=hostel.id,
                    details={"structuralFields": touched, "studentsRelinked": relinked},
                )

            self._log_operation(
                "update hostel",
                hostel.id,
                {"renamed": renamed, "students_relinked": relinked, "total_rooms": hostel.total_rooms},
            )
            return ServiceResult.success(HostelResponse.model_validate(hostel), message=SUCCESS_HOSTEL_UPDATED)
        except Exception as e:
            return self._handle_exception(e, "update hostel", hostel_id)

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_hostels(self) -> ServiceResult[List[HostelWithStats]]:
        try:
            hostels = [self._with_stats(h) for h in self.repository.list_ordered()]
            return ServiceResult.success(
                hostels,
                message=SUCCESS_HOSTELS_RETRIEVED,
                metadata={"count": len(hostels)},
            )
        except Exception as e:
            return self._handle_exception(e, "list hostels")

    def get_hostel(self, identifier: str) -> ServiceResult[HostelWithStats]:
        try:
            hostel = self.rosters.resolve_hostel(identifier)
            return ServiceResult.success(self._with_stats(hostel), message=SUCCESS_HOSTELS_RETRIEVED)
        except Exception as e:
            return self._handle_exception(e, "get hostel", identifier)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete_hostel(self, hostel_id: str, username: Optional[str] = None) -> ServiceResult[CascadeReport]:
        try:
            hostel = self.rosters.resolve_hostel(hostel_id)
            report = self.coordinator.delete_hostel(hostel.id, username=username)
            return ServiceResult.success(report, message=SUCCESS_HOSTEL_DELETED)
        except Exception as e:
            return self._handle_exception(e, "delete hostel", hostel_id)

    # -------------------------------------------------------------------------
    # Legacy import
    # -------------------------------------------------------------------------

    def import_legacy_records(
        self,
        identifier: str,
        content: str,
        username: Optional[str] = None,
        replace: bool = True,
    ) -> ServiceResult[LegacyImportResult]:
        """
        Load an old room list (CSV with a header row) as the lowest precedence
        roster source. Column names are matched loosely, e.g. ``roomNo``,
        ``room`` or ``Room`` for the room.

        With `replace`, rows previously imported for the hostel are discarded.
        """
        try:
            hostel = self.rosters.resolve_hostel(identifier)
            reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")))
            if not reader.fieldnames:
                raise ValidationError("Legacy room list has no header row")

            result = LegacyImportResult(hostel=hostel.name)
            rows: List[LegacyRoomRecord] = []
            for line_number, raw in enumerate(reader, start=2):
                cleaned = {(k or "").strip(): v for k, v in raw.items() if k}
                try:
                    record = StudentSourceRecord.model_validate(cleaned)
                except PydanticValidationError as exc:
                    result.skipped += 1
                    result.errors.append(f"line {line_number}: {exc.errors()[0]['msg']}")
                    continue
                room = normalize_room_id(record.room_number)
                if not room:
                    result.skipped += 1
                    result.errors.append(f"line {line_number}: missing room")
                    continue
                if not identity_key(record.registration_number, record.student_name):
                    result.skipped += 1
                    result.errors.append(f"line {line_number}: missing student")
                    continue
                rows.append(
                    LegacyRoomRecord(
                        hostel_name=hostel.name,
                        room_number=room,
                        student_name=record.student_name,
                        registration_number=record.registration_number,
                        department=record.department,
                    )
                )

            with self.transaction():
                if replace:
                    result.replaced = self.legacy.delete_for_hostel_names(hostel_reference_names(hostel.name))
                self.legacy.add_many(rows)
                result.imported = len(rows)
                self.audit.append(
                    ACTION_IMPORT_ROOMS,
                    f"Imported {len(rows)} legacy room records for hostel {hostel.name}",
                    username=username,
                    hostel=hostel.name,
                    entity_type=ENTITY_HOSTEL,
                    subject_id=hostel.id,
                    details={"imported": result.imported, "skipped": result.skipped},
                )

            self._log_operation(
                "import legacy rooms",
                hostel.name,
                {"imported": result.imported, "skipped": result.skipped},
            )
            return ServiceResult.success(result, message=SUCCESS_LEGACY_IMPORTED)
        except Exception as e:
            return self._handle_exception(e, "import legacy room records", identifier)


__all__ = ["HostelService", "apply_structure", "clean_blocks", "clean_room_capacities"]
