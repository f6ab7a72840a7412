import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from factdesk.core.exceptions import ValidationError

_TIMEFRAME_RE = re.compile(r"^\s*(\d+)\s*([a-z]+)\s*$")

_UNITS = {
    "h": "hours", "hour": "hours", "hours": "hours",
    "d": "days", "day": "days", "days": "days",
    "w": "weeks", "week": "weeks", "weeks": "weeks",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime read back from the database to an aware UTC value.

    SQLite drops tzinfo on the way out; everything we store is UTC, so a
    naive value is interpreted as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timeframe(timeframe: Optional[str]) -> Optional[timedelta]:
    """
    Parse a reporting window such as ``"30 days"``, ``"24 hours"``, ``"2w"``.

    Returns None for ``"all"`` (no lower bound). Raises ValidationError for
    anything else.
    """
    if timeframe is None:
        return None
    text = timeframe.strip().lower()
    if text in ("all", "all time", "all_time"):
        return None

    match = _TIMEFRAME_RE.match(text)
    if not match or match.group(2) not in _UNITS:
        raise ValidationError(
            f"Invalid timeframe '{timeframe}'. Use e.g. '7 days', '24 hours', '2 weeks' or 'all'."
        )

    amount = int(match.group(1))
    if amount <= 0:
        raise ValidationError("Timeframe must be a positive duration")
    return timedelta(**{_UNITS[match.group(2)]: amount})


def window_start(timeframe: Optional[str], now: datetime) -> Optional[datetime]:
    delta = parse_timeframe(timeframe)
    return None if delta is None else now - delta
