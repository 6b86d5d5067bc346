"""
Legacy room-list import schemas.
"""

from typing import List

from pydantic import Field

from hostel_occupancy.schemas.common.base import BaseSchema

__all__ = ["LegacyImportResult"]


class LegacyImportResult(BaseSchema):
    hostel: str
    imported: int = 0
    skipped: int = 0
    replaced: int = Field(default=0, description="Previously imported rows discarded")
    errors: List[str] = Field(default_factory=list)
