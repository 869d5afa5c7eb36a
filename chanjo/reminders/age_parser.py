"""
Age descriptors from the reference schedule ("birth", "6 weeks", "15–18 months")
converted to day offsets from birth.

Months and years use fixed multipliers (30 and 365 days); there is no calendar
arithmetic. A range resolves to its midpoint, so the offset can be fractional.
"""
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)


UNIT_DAYS = {
    "week": 7,
    "weeks": 7,
    "month": 30,
    "months": 30,
    "year": 365,
    "years": 365,
}

# Range separator is a hyphen or an en-dash
RANGE_RE = re.compile(r"^(\d+)[–-](\d+)\s*(\w+)$")
SINGLE_RE = re.compile(r"^(\d+)\s*(\w+)$")


def _match(descriptor: str) -> Optional[float]:
    """Offset in days, or None when the descriptor is not in the grammar."""
    age = descriptor.strip().lower()
    if age == "birth":
        return 0

    match = RANGE_RE.match(age)
    if match:
        start, end, unit = match.groups()
        if unit not in UNIT_DAYS:
            return None
        return (int(start) + int(end)) / 2 * UNIT_DAYS[unit]

    match = SINGLE_RE.match(age)
    if match:
        num, unit = match.groups()
        if unit not in UNIT_DAYS:
            return None
        return int(num) * UNIT_DAYS[unit]

    return None


def parse_age_to_days(descriptor: str) -> float:
    """Convert an age descriptor to days after birth.

    Never raises: anything outside the grammar (including unknown units)
    resolves to 0, i.e. the dose is treated as due at birth.
    """
    days = _match(descriptor or "")
    if days is None:
        logger.warning(f"Unrecognised age descriptor {descriptor!r}, using offset 0")
        return 0
    return days


def is_recognized_age(descriptor: str) -> bool:
    return _match(descriptor or "") is not None
