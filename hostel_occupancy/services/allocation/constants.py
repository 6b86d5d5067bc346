"""
Allocation engine constants.
"""

import re
from typing import Final, Pattern

# "b-2", "B02", " b - 2 " all split into letters + digits
ROOM_ID_PATTERN: Final[Pattern[str]] = re.compile(r"^([A-Za-z]+)[-\s]*([0-9]+)$")
HOSTEL_SUFFIX_PATTERN: Final[Pattern[str]] = re.compile(r"\s*hostel\s*$", re.IGNORECASE)

FALLBACK_ID_PREFIX_LENGTH: Final[int] = 2
FALLBACK_ID_PREFIX: Final[str] = "RM"

# Roster source names, highest precedence first
SOURCE_REGISTRY: Final[str] = "registry"
SOURCE_ASSIGNMENTS: Final[str] = "assignments"
SOURCE_LEGACY: Final[str] = "legacy"
