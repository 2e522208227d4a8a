"""SM-2 spaced repetition algorithm."""
from dataclasses import dataclass

from studylog.errors import InvalidInput

MIN_EASE_FACTOR = 1.3

# Three-button review grades mapped onto SM-2 quality
RATINGS = {"perfect": 5, "good": 3, "hard": 1}


@dataclass(frozen=True)
class ReviewState:
    interval: int = 0
    ease_factor: float = 2.5
    repetitions: int = 0


def sm2_update(
    quality: int,
    repetitions: int,
    ease_factor: float,
    interval: int,
) -> dict:
    """Calculate next review parameters using SM-2.

    Args:
        quality: Rating 0-5 (0=complete blackout, 5=perfect)
        repetitions: Number of consecutive correct reviews
        ease_factor: Current ease factor (minimum 1.3)
        interval: Current interval in days

    Returns:
        Dict with updated interval, repetitions, ease_factor.
    """
    if not 0 <= quality <= 5:
        raise InvalidInput(f"quality must be in [0, 5], got {quality}")

    new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    new_ef = max(MIN_EASE_FACTOR, new_ef)

    if quality >= 3:
        if repetitions == 0:
            new_interval = 1
        elif repetitions == 1:
            new_interval = 6
        else:
            new_interval = round(interval * ease_factor)
        new_repetitions = repetitions + 1
    else:
        # Incorrect, start over tomorrow
        new_repetitions = 0
        new_interval = 1

    return {
        "interval": new_interval,
        "repetitions": new_repetitions,
        "ease_factor": round(new_ef, 2),
    }


def rate(rating: str, state: ReviewState) -> ReviewState:
    """Apply a named review grade ("perfect", "good", "hard") to ``state``."""
    try:
        quality = RATINGS[rating]
    except KeyError:
        raise InvalidInput(f"unknown rating {rating!r}; expected one of {sorted(RATINGS)}") from None
    updated = sm2_update(
        quality=quality,
        repetitions=state.repetitions,
        ease_factor=state.ease_factor,
        interval=state.interval,
    )
    return ReviewState(**updated)
