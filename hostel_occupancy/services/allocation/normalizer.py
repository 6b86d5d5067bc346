"""
Canonical key forms for room identifiers, hostel names and student identity.

Everything that compares room ids or hostel names goes through here so the
generator, the merger and the coordinator agree on what "the same room"
means.
"""

from typing import List, Optional, Tuple

from hostel_occupancy.config.settings import settings
from hostel_occupancy.services.allocation.constants import (
    HOSTEL_SUFFIX_PATTERN,
    ROOM_ID_PATTERN,
)

RoomSortKey = Tuple[int, str, int, str]


def normalize_room_id(value: Optional[str], pad_width: Optional[int] = None) -> str:
    """
    Render a free-text room id as ``{LETTERS}-{NN}``.

    Input that does not look like letters followed by a number is returned
    trimmed but otherwise unchanged; this never rejects.
    """
    if value is None:
        return ""
    text = str(value).strip()
    match = ROOM_ID_PATTERN.match(text)
    if not match:
        return text
    width = pad_width or settings.ROOM_NUMBER_PAD_WIDTH
    letters, number = match.groups()
    return f"{letters.upper()}-{int(number):0{width}d}"


def room_key(value: Optional[str], pad_width: Optional[int] = None) -> str:
    """Case-insensitive comparison key of a room id."""
    return normalize_room_id(value, pad_width).upper()


def room_sort_key(room_id: str) -> RoomSortKey:
    """
    Order rooms by (block letters, sequence number).

    Ids that do not parse sort after every parsed id, by their text.
    """
    match = ROOM_ID_PATTERN.match(room_id.strip())
    if match:
        letters, number = match.groups()
        return (0, letters.upper(), int(number), "")
    return (1, "", 0, room_id.strip().upper())


def hostel_name_variants(name: Optional[str]) -> List[str]:
    """
    Spellings under which a hostel may be referenced by other records:
    the trimmed name, the name without a trailing "Hostel", and the name
    with internal whitespace collapsed.
    """
    if not name:
        return []
    trimmed = name.strip()
    candidates = [
        trimmed,
        HOSTEL_SUFFIX_PATTERN.sub("", trimmed).strip(),
        " ".join(trimmed.split()),
    ]
    variants: List[str] = []
    for candidate in candidates:
        if candidate and candidate not in variants:
            variants.append(candidate)
    return variants


def hostel_reference_names(name: Optional[str]) -> List[str]:
    """Variants plus their "... Hostel" spellings, for looking up references."""
    names = hostel_name_variants(name)
    for variant in list(names):
        if not HOSTEL_SUFFIX_PATTERN.search(variant):
            suffixed = f"{variant} Hostel"
            if suffixed not in names:
                names.append(suffixed)
    return names


def hostel_names_match(left: Optional[str], right: Optional[str]) -> bool:
    """True when two names share a spelling, i.e. would pick up the same references."""
    left_keys = {v.lower() for v in hostel_reference_names(left)}
    right_keys = {v.lower() for v in hostel_reference_names(right)}
    return bool(left_keys & right_keys)


def identity_key(
    registration_number: Optional[str],
    name: Optional[str],
    placeholder_marker: Optional[str] = None,
) -> Optional[str]:
    """
    Student identity used for deduplication: the registration number when
    present, else the name. Case and surrounding whitespace are ignored.
    """
    marker = placeholder_marker if placeholder_marker is not None else settings.PLACEHOLDER_MARKER
    for candidate in (registration_number, name):
        if candidate is None:
            continue
        text = " ".join(str(candidate).split())
        if text and text != marker:
            return text.lower()
    return None


__all__ = [
    "normalize_room_id",
    "room_key",
    "room_sort_key",
    "hostel_name_variants",
    "hostel_reference_names",
    "hostel_names_match",
    "identity_key",
]
