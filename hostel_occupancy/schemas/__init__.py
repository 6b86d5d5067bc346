"""
Pydantic schemas for requests, responses and the allocation engine.
"""

from hostel_occupancy.schemas.common import (
    BaseSchema,
    BaseDBSchema,
    ErrorDetail,
    ErrorResponse,
    MessageResponse,
    SuccessResponse,
)
from hostel_occupancy.schemas.hostel import (
    BlockDefinition,
    HostelCreate,
    HostelResponse,
    HostelStats,
    HostelStructure,
    HostelUpdate,
    HostelWithStats,
)
from hostel_occupancy.schemas.student import (
    BatchDeleteRequest,
    StudentCreate,
    StudentResponse,
    StudentSourceRecord,
    StudentUpdate,
)
from hostel_occupancy.schemas.roster import (
    AutoAssignment,
    HostelRoster,
    RoomCapacityCheck,
    RoomRoster,
    RosterStudent,
)
from hostel_occupancy.schemas.cascade import CascadeReport, StudentMutation
from hostel_occupancy.schemas.challan import (
    ChallanCreate,
    ChallanResponse,
    FeeStructureRow,
    MarkPaidRequest,
    MarkPaidResult,
)
from hostel_occupancy.schemas.audit import AuditLogCreate, AuditLogResponse
from hostel_occupancy.schemas.legacy import LegacyImportResult

__all__ = [
    "BaseSchema",
    "BaseDBSchema",
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    "SuccessResponse",
    "BlockDefinition",
    "HostelCreate",
    "HostelResponse",
    "HostelStats",
    "HostelStructure",
    "HostelUpdate",
    "HostelWithStats",
    "BatchDeleteRequest",
    "StudentCreate",
    "StudentResponse",
    "StudentSourceRecord",
    "StudentUpdate",
    "AutoAssignment",
    "HostelRoster",
    "RoomCapacityCheck",
    "RoomRoster",
    "RosterStudent",
    "CascadeReport",
    "StudentMutation",
    "ChallanCreate",
    "ChallanResponse",
    "FeeStructureRow",
    "MarkPaidRequest",
    "MarkPaidResult",
    "AuditLogCreate",
    "AuditLogResponse",
    "LegacyImportResult",
]
