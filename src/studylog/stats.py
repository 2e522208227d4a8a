"""Streaks and study-time aggregates keyed by study day."""
from datetime import date, datetime, timedelta

from studylog.config import DAY_START_HOUR, HEATMAP_LEVEL_BOUNDS, REPORTING_OFFSET_MINUTES
from studylog.errors import InvalidInput
from studylog.grouping import session_key
from studylog.models import MaterialTotal, Streak, SubjectTotal
from studylog.studyday import study_day_of

ONE_DAY = timedelta(days=1)


def study_days_of(
    sessions,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> set[date]:
    return {study_day_of(s.started_at, day_start_hour, offset_minutes) for s in sessions}


def compute_streaks(study_days, as_of: date) -> Streak:
    """Current and longest runs of consecutive study days.

    The current streak may end on ``as_of`` or the day before it: studying
    yesterday and not yet today keeps the streak alive. ``last_study_day`` is
    the newest day of the current streak, or None when there is no streak.
    """
    days = set(study_days)
    if not days:
        return Streak()

    anchor = as_of if as_of in days else as_of - ONE_DAY
    last_study_day = anchor if anchor in days else None
    current = 0
    while anchor in days:
        current += 1
        anchor -= ONE_DAY

    ordered = sorted(days)
    longest = run = 1
    for prev, cur in zip(ordered, ordered[1:]):
        if cur - prev == ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)

    return Streak(current=current, longest=longest, last_study_day=last_study_day)


def daily_aggregate(
    sessions,
    window_days: int,
    now: datetime,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> dict[date, int]:
    """Minutes per study day for the trailing window ending today (inclusive).

    Keys are ordered oldest first and every day in the window is present.
    """
    if not isinstance(window_days, int) or window_days < 1:
        raise InvalidInput(f"window_days must be a positive int, got {window_days!r}")
    end = study_day_of(now, day_start_hour, offset_minutes)
    start = end - timedelta(days=window_days - 1)
    totals = {start + timedelta(days=i): 0 for i in range(window_days)}
    for s in sessions:
        day = study_day_of(s.started_at, day_start_hour, offset_minutes)
        if day in totals:
            totals[day] += s.duration_minutes
    return totals


def subject_aggregate(sessions) -> list[SubjectTotal]:
    """Total minutes per subject, largest first; ties keep first-seen order."""
    totals: dict[str, int] = {}
    for s in sessions:
        totals[s.subject] = totals.get(s.subject, 0) + s.duration_minutes
    # sorted() is stable, so equal totals stay in insertion order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [SubjectTotal(subject=subject, total_minutes=minutes) for subject, minutes in ranked]


def period_minutes(
    sessions,
    start_day: date,
    end_day: date,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> int:
    """Total minutes logged on study days in ``[start_day, end_day]``."""
    if end_day < start_day:
        raise InvalidInput(f"empty period: {start_day} > {end_day}")
    return sum(
        s.duration_minutes
        for s in sessions
        if start_day <= study_day_of(s.started_at, day_start_hour, offset_minutes) <= end_day
    )


def minutes_on(
    sessions,
    day: date,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> int:
    return period_minutes(sessions, day, day, day_start_hour, offset_minutes)


def material_aggregate(
    sessions,
    materials,
    start_day: date,
    end_day: date,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> list[MaterialTotal]:
    """Minutes per material over study days ``[start_day, end_day]``.

    Sessions without a known material count under their subject, using the
    same keys as the review grouper. Largest first, ties in first-seen order;
    entries with no minutes are left out.
    """
    if end_day < start_day:
        raise InvalidInput(f"empty period: {start_day} > {end_day}")
    by_id = materials if isinstance(materials, dict) else {m.id: m for m in materials}
    totals: dict[str, list] = {}
    for s in sessions:
        day = study_day_of(s.started_at, day_start_hour, offset_minutes)
        if not start_day <= day <= end_day:
            continue
        material = by_id.get(s.material_id) if s.material_id is not None else None
        key, title = session_key(s, material)
        entry = totals.setdefault(key, [title, 0])
        entry[1] += s.duration_minutes
    ranked = sorted(totals.items(), key=lambda item: item[1][1], reverse=True)
    return [
        MaterialTotal(key=key, title=title, total_minutes=minutes)
        for key, (title, minutes) in ranked
        if minutes > 0
    ]


def heatmap_intensity(minutes: int, bounds=HEATMAP_LEVEL_BOUNDS) -> int:
    """Heatmap shade 0-4 for a day's minutes: 0 only for no study at all."""
    if minutes <= 0:
        return 0
    for level, bound in enumerate(bounds, start=1):
        if minutes < bound:
            return level
    return len(bounds) + 1
