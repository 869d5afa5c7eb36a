from datetime import datetime, timezone as dt_timezone
from typing import Optional

try:
    from zoneinfo import ZoneInfo  # Python 3.9+
except Exception:  # pragma: no cover
    ZoneInfo = None  # type: ignore

from chanjo.core.config import settings


def get_zoneinfo() -> Optional["ZoneInfo"]:
    tz_name = getattr(settings, "DEFAULT_TIMEZONE", None)
    if not tz_name or not ZoneInfo:
        return None
    try:
        return ZoneInfo(tz_name)
    except Exception:
        return None


def now_local() -> datetime:
    tz = get_zoneinfo()
    return datetime.now(tz) if tz else datetime.now(dt_timezone.utc)


def to_local_naive(dt: datetime | None) -> datetime | None:
    """
    Convert any datetime to local timezone (settings.DEFAULT_TIMEZONE) and strip tzinfo.
    - Aware datetimes are converted to local tz and tzinfo is stripped
    - Naive datetimes are assumed local and returned as-is
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    tz = get_zoneinfo()
    if tz is None:
        # Fallback: convert to UTC then strip
        return dt.astimezone(dt_timezone.utc).replace(tzinfo=None)
    return dt.astimezone(tz).replace(tzinfo=None)


def now_local_naive() -> datetime:
    """Current wall-clock time in DEFAULT_TIMEZONE, the frame reminders are stored in."""
    return to_local_naive(now_local())
