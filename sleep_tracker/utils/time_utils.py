"""
Time helpers shared by the clock, history and statistics code paths.

All datetimes handled by the service are naive UTC, matching the
``DateTime`` columns of the store. ``parse_timestamp`` is the single entry
point for client-supplied timestamps so the invalid-format path is the same
for clock-in and clock-out.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a naive UTC datetime.

    Offsets (including a trailing ``Z``) are converted to UTC; timestamps
    without an offset are taken as UTC already.

    Raises:
        ValueError: if the value is not a valid ISO 8601 timestamp.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Timestamp must be a non-empty string")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as e:
            raise ValueError(f"Timestamp out of range in UTC: {value}") from e
    return parsed


def beginning_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def previous_week_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Monday 00:00 through Sunday 23:59:59.999999 of the week before ``now``."""
    now = now or utcnow()
    week_ago = now - timedelta(weeks=1)
    start = beginning_of_day(week_ago - timedelta(days=week_ago.weekday()))
    end = end_of_day(start + timedelta(days=6))
    return start, end


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero on the decimal representation of ``value``."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def seconds_to_hours(seconds: int) -> float:
    return round_half_up(seconds / 3600.0, 2)


def format_duration(duration_seconds: int) -> str:
    """Format seconds as ``"Xh Ym"``."""
    hours = duration_seconds // 3600
    minutes = (duration_seconds % 3600) // 60
    return f"{hours}h {minutes}m"


def hour_of_day(moment: datetime) -> float:
    """Decimal hours since midnight, ignoring seconds."""
    return moment.hour + moment.minute / 60.0


def format_time_of_day(hour_decimal: float) -> str:
    hour = int(hour_decimal)
    minute = int((hour_decimal - hour) * 60)
    return "%02d:%02d" % (hour, minute)
