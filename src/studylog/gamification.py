"""Badges and the daily mission shown alongside the streak."""
from dataclasses import dataclass
from datetime import datetime

from studylog.config import DAILY_TARGET_MINUTES, DAY_START_HOUR, REPORTING_OFFSET_MINUTES
from studylog.models import Streak
from studylog.stats import minutes_on
from studylog.studyday import study_day_of

HOUR_BADGES = [
    (100, "Study Master"),
    (50, "Study Expert"),
    (20, "Advanced Learner"),
    (10, "Intermediate Learner"),
    (1, "Beginner"),
]

STREAK_BADGES = [
    (30, "30-Day Streak"),
    (14, "2-Week Streak"),
    (7, "1-Week Streak"),
    (3, "3-Day Streak"),
]

SUBJECT_BADGES = [
    (5, "5-Subject Master"),
    (3, "3-Subject Master"),
]


@dataclass(frozen=True)
class Mission:
    title: str
    description: str
    target: int
    current: int

    @property
    def completed(self) -> bool:
        return self.current >= self.target


def _first_tier(value: int, tiers) -> str | None:
    for threshold, label in tiers:
        if value >= threshold:
            return label
    return None


def calculate_badges(sessions, streak: Streak) -> list[str]:
    """At most one badge per category: hours, current streak, subjects."""
    sessions = list(sessions)
    total_hours = sum(s.duration_minutes for s in sessions) // 60
    subjects = {s.subject for s in sessions}
    earned = [
        _first_tier(total_hours, HOUR_BADGES),
        _first_tier(streak.current, STREAK_BADGES),
        _first_tier(len(subjects), SUBJECT_BADGES),
    ]
    return [b for b in earned if b is not None]


def today_mission(
    sessions,
    streak: Streak,
    now: datetime,
    target_minutes: int = DAILY_TARGET_MINUTES,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> Mission:
    day = study_day_of(now, day_start_hour, offset_minutes)
    current = minutes_on(sessions, day, day_start_hour, offset_minutes)
    if streak.current > 0:
        return Mission(
            title="Keep the streak",
            description="Study today to extend your streak.",
            target=target_minutes,
            current=current,
        )
    return Mission(
        title="Get started",
        description="Start a study habit today.",
        target=target_minutes,
        current=current,
    )
