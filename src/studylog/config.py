"""Product constants for the study-day calendar and review ladder."""
from dataclasses import dataclass

from studylog.errors import InvalidInput

DAY_START_HOUR = 3
REPORTING_OFFSET_MINUTES = 9 * 60  # JST
REVIEW_INTERVALS_DAYS = (1, 3, 7, 16, 35)

DEFAULT_WINDOW_DAYS = 7
HEATMAP_WINDOW_DAYS = 84
# upper minute bounds for heatmap levels 1-3; anything above is level 4
HEATMAP_LEVEL_BOUNDS = (30, 60, 120)
DAILY_TARGET_MINUTES = 30


def check_day_start_hour(day_start_hour: int) -> None:
    if not isinstance(day_start_hour, int) or isinstance(day_start_hour, bool):
        raise InvalidInput(f"day_start_hour must be an int, got {day_start_hour!r}")
    if not 0 <= day_start_hour <= 23:
        raise InvalidInput(f"day_start_hour must be in [0, 23], got {day_start_hour}")


def check_offset_minutes(offset_minutes: int) -> None:
    if not isinstance(offset_minutes, int) or isinstance(offset_minutes, bool):
        raise InvalidInput(f"offset_minutes must be an int, got {offset_minutes!r}")
    if not -24 * 60 < offset_minutes < 24 * 60:
        raise InvalidInput(f"offset_minutes out of range: {offset_minutes}")


def check_intervals(intervals_days) -> tuple[int, ...]:
    """Validate a review ladder and return it as a tuple.

    A ladder must be non-empty, made of positive ints, and strictly ascending.
    """
    ladder = tuple(intervals_days)
    if not ladder:
        raise InvalidInput("interval ladder is empty")
    for d in ladder:
        if not isinstance(d, int) or isinstance(d, bool) or d <= 0:
            raise InvalidInput(f"interval must be a positive int, got {d!r}")
    for prev, cur in zip(ladder, ladder[1:]):
        if cur <= prev:
            raise InvalidInput(f"interval ladder must be strictly ascending: {list(ladder)}")
    return ladder


@dataclass(frozen=True)
class EngineConfig:
    day_start_hour: int = DAY_START_HOUR
    offset_minutes: int = REPORTING_OFFSET_MINUTES
    intervals_days: tuple = REVIEW_INTERVALS_DAYS

    def __post_init__(self):
        check_day_start_hour(self.day_start_hour)
        check_offset_minutes(self.offset_minutes)
        object.__setattr__(self, "intervals_days", check_intervals(self.intervals_days))


DEFAULT_CONFIG = EngineConfig()
