"""
Time utilities for the study planner.

All instants handled by the engine are timezone-aware datetimes. Rendering
uses the host's local zone unless an explicit tzinfo is passed.
"""

from datetime import UTC, date, datetime, time, timedelta, tzinfo


def utc_now() -> datetime:
    """Current instant, UTC."""
    return datetime.now(UTC)


def parse_instant(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 instant.

    Accepts a trailing "Z". Naive values are rejected: an instant without an
    offset is ambiguous.

    Raises:
        ValueError: If the value is not ISO-8601 or carries no offset
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"Instant has no timezone offset: {value!r}")
    return dt


def parse_local(value: str, tz: tzinfo | None = None) -> datetime:
    """
    Parse user input such as "2026-03-02T09:00".

    Values without an offset are read as wall-clock time in ``tz`` (host
    local time by default); values with an offset are kept as given.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=tz) if tz is not None else dt.astimezone()


def to_iso(dt: datetime) -> str:
    return dt.isoformat()


def _display(dt: datetime, tz: tzinfo | None) -> datetime:
    return dt.astimezone(tz) if tz is not None else dt.astimezone()


def format_time(dt: datetime, tz: tzinfo | None = None) -> str:
    """12-hour clock without leading zero, e.g. "9:00 AM"."""
    local = _display(dt, tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_date(dt: datetime | date, tz: tzinfo | None = None) -> str:
    """e.g. "Mar 2, 2026"."""
    if isinstance(dt, datetime):
        dt = _display(dt, tz)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def format_duration(start: datetime, end: datetime) -> str:
    """Compact duration label: "45m", "2h", "1h 30m"."""
    minutes = int((end - start).total_seconds() // 60)
    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def week_days(day: date) -> list[date]:
    """The Monday-first week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def week_bounds(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """
    Start and end instants of the Monday-first week containing ``day``.

    Monday 00:00 through Sunday 23:59:59.999999 in ``tz`` (host local time
    by default). Both bounds are inclusive.
    """
    days = week_days(day)
    start = datetime.combine(days[0], time.min)
    end = datetime.combine(days[-1], time.max)
    if tz is None:
        # naive -> host local, with the offset in effect on that day
        return start.astimezone(), end.astimezone()
    return start.replace(tzinfo=tz), end.replace(tzinfo=tz)


def time_slots(start_hour: int = 6, end_hour: int = 22) -> list[str]:
    """Half-hour slot labels from start_hour:00 through end_hour:00."""
    slots = []
    for hour in range(start_hour, end_hour + 1):
        slots.append(f"{hour:02d}:00")
        if hour < end_hour:
            slots.append(f"{hour:02d}:30")
    return slots
