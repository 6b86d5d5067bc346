"""
Challan number generation: ``{prefix}-{epoch milliseconds}-{0..999}``.
"""

import random
import time
from typing import Callable, Optional

from hostel_occupancy.config.settings import settings
from hostel_occupancy.core.exceptions import DuplicateEntryError

MAX_ATTEMPTS = 5


def generate_challan_number(
    prefix: Optional[str] = None,
    exists: Optional[Callable[[str], bool]] = None,
) -> str:
    """
    Args:
        prefix: Number prefix, defaults to CHALLAN_PREFIX
        exists: Predicate telling whether a candidate is already taken

    Raises:
        DuplicateEntryError: No free number after MAX_ATTEMPTS candidates
    """
    prefix = prefix or settings.CHALLAN_PREFIX
    candidate = ""
    for _ in range(MAX_ATTEMPTS):
        candidate = f"{prefix}-{int(time.time() * 1000)}-{random.randint(0, 999)}"
        if exists is None or not exists(candidate):
            return candidate
    raise DuplicateEntryError("Challan", "challan_number", candidate)
