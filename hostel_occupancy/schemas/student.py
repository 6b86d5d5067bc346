"""
Student schemas.

`StudentSourceRecord` is the single ingestion shape every roster source is
converted to; the field aliases absorb the naming differences between the
registry, stored assignments and imported legacy rows.
"""

from typing import Dict, Optional

from pydantic import AliasChoices, Field, field_validator

from hostel_occupancy.schemas.common.base import BaseDBSchema, BaseSchema

__all__ = [
    "StudentSourceRecord",
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "BatchDeleteRequest",
]


class StudentSourceRecord(BaseSchema):
    """Student-to-room association from any roster source."""

    registration_number: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "registrationNumber", "registration_number", "regNo", "reg"
        ),
        serialization_alias="registrationNumber",
    )
    student_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "studentName", "student_name", "name", "fullName", "student"
        ),
        serialization_alias="studentName",
    )
    department: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("department", "faculty", "dept"),
        serialization_alias="department",
    )
    assigned_hostel: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("assignedHostel", "assigned_hostel", "hostel"),
        serialization_alias="assignedHostel",
    )
    room_number: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "roomNumber", "room_number", "roomNo", "room", "Room", "roomId"
        ),
        serialization_alias="roomNumber",
    )

    @field_validator("*", mode="before")
    @classmethod
    def stringify(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class StudentCreate(BaseSchema):
    """Create student payload."""

    student_name: str = Field(..., min_length=1, max_length=200)
    registration_number: str = Field(..., min_length=1, max_length=100)
    father_name: Optional[str] = Field(default=None, max_length=200)
    degree: Optional[str] = Field(default=None, max_length=200)
    department: Optional[str] = Field(default=None, max_length=200)
    semester: Optional[int] = Field(default=None, ge=1, le=12)
    district: Optional[str] = Field(default=None, max_length=200)
    assigned_hostel: Optional[str] = Field(default=None, max_length=200)
    room_number: Optional[str] = Field(default=None, max_length=50)
    hostel_fee: Optional[str] = Field(default=None, pattern="^(paid|pending)$")
    fee_table: Optional[Dict[str, str]] = None
    profile_image: Optional[str] = None
    username: Optional[str] = Field(default=None, description="Acting user for the audit trail")


class StudentUpdate(BaseSchema):
    """Partial student update; omitted fields are left unchanged."""

    student_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    registration_number: Optional[str] = Field(default=None, min_length=1, max_length=100)
    father_name: Optional[str] = Field(default=None, max_length=200)
    degree: Optional[str] = Field(default=None, max_length=200)
    department: Optional[str] = Field(default=None, max_length=200)
    semester: Optional[int] = Field(default=None, ge=1, le=12)
    district: Optional[str] = Field(default=None, max_length=200)
    assigned_hostel: Optional[str] = Field(default=None, max_length=200)
    room_number: Optional[str] = Field(default=None, max_length=50)
    hostel_fee: Optional[str] = Field(default=None, pattern="^(paid|pending)$")
    fee_table: Optional[Dict[str, str]] = None
    profile_image: Optional[str] = None
    username: Optional[str] = None


class StudentResponse(BaseDBSchema):
    """Student read model."""

    student_name: str
    father_name: Optional[str] = None
    registration_number: str
    degree: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[int] = None
    district: Optional[str] = None
    assigned_hostel: Optional[str] = None
    room_number: Optional[str] = None
    hostel_id: Optional[str] = None
    hostel_fee: str = "pending"
    challan_number: str
    fee_table: Dict[str, str] = Field(default_factory=dict)
    profile_image: Optional[str] = None


class BatchDeleteRequest(BaseSchema):
    """Department plus registration-number fragment selecting a batch."""

    department: str = Field(..., min_length=1)
    batch: str = Field(..., min_length=1, description="Substring of the registration number")
    username: Optional[str] = None
