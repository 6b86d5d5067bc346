"""
Audit log schemas.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from hostel_occupancy.schemas.common.base import BaseSchema

__all__ = ["AuditLogCreate", "AuditLogResponse"]


class AuditLogCreate(BaseSchema):
    action: str = Field(..., min_length=1, max_length=64)
    description: str = ""
    username: Optional[str] = None
    role: Optional[str] = None
    hostel: Optional[str] = None
    entity_type: Optional[str] = None
    subject_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class AuditLogResponse(BaseSchema):
    id: str
    action: str
    description: str
    username: str
    role: str
    hostel: Optional[str] = None
    entity_type: str
    subject_id: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
