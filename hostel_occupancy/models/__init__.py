"""
ORM models for the hostel occupancy service.
"""

from hostel_occupancy.models.base import Base, BaseModel, TimestampModel
from hostel_occupancy.models.hostel import Hostel
from hostel_occupancy.models.student import Student
from hostel_occupancy.models.challan import Challan, CHALLAN_STATUSES
from hostel_occupancy.models.audit_log import AuditLog
from hostel_occupancy.models.room_assignment import RoomAssignment, LegacyRoomRecord

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "Hostel",
    "Student",
    "Challan",
    "CHALLAN_STATUSES",
    "AuditLog",
    "RoomAssignment",
    "LegacyRoomRecord",
]
