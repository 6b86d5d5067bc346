"""
Data access layer.
"""

from hostel_occupancy.repositories.base import BaseRepository
from hostel_occupancy.repositories.hostel_repository import HostelRepository
from hostel_occupancy.repositories.student_repository import StudentRepository
from hostel_occupancy.repositories.challan_repository import ChallanRepository
from hostel_occupancy.repositories.audit_log_repository import AuditLogRepository
from hostel_occupancy.repositories.room_assignment_repository import (
    LegacyRoomRecordRepository,
    RoomAssignmentRepository,
)

__all__ = [
    "BaseRepository",
    "HostelRepository",
    "StudentRepository",
    "ChallanRepository",
    "AuditLogRepository",
    "RoomAssignmentRepository",
    "LegacyRoomRecordRepository",
]
