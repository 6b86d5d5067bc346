"""
Application services.

Each service wraps one repository and returns `ServiceResult` objects; the
allocation engine under `services.allocation` is free of database access.
"""

from hostel_occupancy.services.audit import AuditLogService
from hostel_occupancy.services.fee import FeeService
from hostel_occupancy.services.hostel import HostelService
from hostel_occupancy.services.occupancy import ConsistencyCoordinator
from hostel_occupancy.services.roster import RosterService
from hostel_occupancy.services.student import StudentService

__all__ = [
    "AuditLogService",
    "ConsistencyCoordinator",
    "FeeService",
    "HostelService",
    "RosterService",
    "StudentService",
]
