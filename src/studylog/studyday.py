"""Study-day calendar: maps instants to study days in a fixed civil offset.

A study day starts at ``day_start_hour`` local time in the reporting zone and
runs until the same hour the next local day. With the product defaults (03:00,
UTC+9) everything from 03:00 JST up to 02:59:59 JST the next morning belongs
to one study day.

All arithmetic happens on UTC instants shifted by whole offsets. Nothing here
builds a local date and then attaches an hour to it, and nothing reads the
host clock or host timezone.
"""
from datetime import date, datetime, timedelta, timezone

from studylog.config import (
    DAY_START_HOUR, REPORTING_OFFSET_MINUTES, check_day_start_hour, check_offset_minutes,
)
from studylog.errors import InvalidInput

ONE_DAY = timedelta(days=1)


def check_instant(instant: datetime) -> None:
    if not isinstance(instant, datetime):
        raise InvalidInput(f"expected a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInput(f"instant {instant.isoformat()} has no timezone")


def _boundary_shift(day_start_hour: int, offset_minutes: int) -> timedelta:
    check_day_start_hour(day_start_hour)
    check_offset_minutes(offset_minutes)
    return timedelta(minutes=offset_minutes - day_start_hour * 60)


def study_day_of(
    instant: datetime,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> date:
    """Return the study day an instant belongs to.

    The instant is moved to UTC, shifted by the civil offset minus the
    day-start hour, and truncated to its UTC date.

    >>> study_day_of(datetime(2026, 2, 10, 18, 0, tzinfo=timezone.utc))
    datetime.date(2026, 2, 11)
    """
    check_instant(instant)
    shift = _boundary_shift(day_start_hour, offset_minutes)
    return (instant.astimezone(timezone.utc) + shift).date()


def range_of_study_day(
    day: date,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` UTC interval of instants mapping to ``day``."""
    shift = _boundary_shift(day_start_hour, offset_minutes)
    start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc) - shift
    return start, start + ONE_DAY


def representative_instant(
    day: date,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> datetime:
    """Midpoint of a study day, safe to store for a date the user picked."""
    start, _ = range_of_study_day(day, day_start_hour, offset_minutes)
    return start + ONE_DAY / 2


def today(
    now: datetime,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> date:
    return study_day_of(now, day_start_hour, offset_minutes)


def week_start(day: date, offset_weeks: int = 0) -> date:
    """Monday of the week containing ``day``; negative offsets go back in time."""
    return day - timedelta(days=day.weekday()) + timedelta(weeks=offset_weeks)


def month_start(day: date, offset_months: int = 0) -> date:
    """First day of the month containing ``day``, moved by whole months."""
    index = day.year * 12 + (day.month - 1) + offset_months
    return date(index // 12, index % 12 + 1, 1)


def parse_study_day(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"not a study day: {text!r}") from e


def format_study_day(day: date) -> str:
    return day.isoformat()


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 instant; a ``Z`` suffix means UTC. Offsets are required."""
    try:
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise InvalidInput(f"not an ISO-8601 instant: {text!r}") from e
    check_instant(value)
    return value
