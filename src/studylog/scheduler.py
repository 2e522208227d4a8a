"""Spaced-review scheduling on top of study days."""
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta

from studylog.config import DAY_START_HOUR, REPORTING_OFFSET_MINUTES, check_intervals
from studylog.models import COMPLETED, PENDING, ReviewTask, StudySession
from studylog.errors import InvalidInput
from studylog.sm2 import ReviewState, rate
from studylog.studyday import check_instant, study_day_of

logger = logging.getLogger(__name__)


def validate_intervals(intervals_days) -> tuple[int, ...]:
    return check_intervals(intervals_days)


def schedule_reviews(
    session: StudySession,
    intervals_days,
    now: datetime,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> list[ReviewTask]:
    """Build one pending review task per interval in the ladder.

    Due days count whole study days from the session's own study day, so any
    two sessions started within the same study day get the same schedule.
    Task ids derive from the session id and ladder position; calling this
    twice with the same arguments returns equal lists.
    """
    ladder = validate_intervals(intervals_days)
    base = study_day_of(session.started_at, day_start_hour, offset_minutes)
    check_instant(now)
    tasks = [
        ReviewTask(
            id=f"{session.id}:r{i}",
            session_id=session.id,
            due_day=base + timedelta(days=d),
            status=PENDING,
            created_at=now,
        )
        for i, d in enumerate(ladder)
    ]
    logger.debug("scheduled %d reviews for session %s from %s", len(tasks), session.id, base)
    return tasks


def _due_order(task: ReviewTask):
    # tasks without a creation stamp sort ahead of stamped ones on the same day
    created = task.created_at.timestamp() if task.created_at is not None else float("-inf")
    return task.due_day, created


def due_tasks(tasks, as_of: date) -> list[ReviewTask]:
    """Pending tasks due on or before ``as_of``, oldest due first.

    Ties on due day are broken by ``created_at``; remaining ties keep their
    input order.
    """
    due = [t for t in tasks if t.status == PENDING and t.due_day <= as_of]
    return sorted(due, key=_due_order)


def complete_task(task: ReviewTask) -> ReviewTask:
    """Mark a pending task completed. A task completes exactly once."""
    if task.status != PENDING:
        raise InvalidInput(f"task {task.id} is {task.status}, only pending tasks can be completed")
    return replace(task, status=COMPLETED)


def reschedule_after_review(
    task: ReviewTask,
    session: StudySession,
    rating: str,
    state: ReviewState,
    now: datetime,
    day_start_hour: int = DAY_START_HOUR,
    offset_minutes: int = REPORTING_OFFSET_MINUTES,
) -> tuple[ReviewTask, ReviewTask, ReviewState]:
    """Complete ``task`` and schedule the follow-up review from an SM-2 grade.

    The follow-up is due ``interval`` study days after the study day of
    ``now``, not after the original due day, so late reviews are not punished
    with an immediately-due follow-up.
    """
    if task.session_id != session.id:
        raise InvalidInput(f"task {task.id} does not belong to session {session.id}")
    done = complete_task(task)
    new_state = rate(rating, state)
    reviewed_on = study_day_of(now, day_start_hour, offset_minutes)
    follow_up = ReviewTask(
        id=f"{task.id}+{new_state.repetitions}",
        session_id=session.id,
        due_day=reviewed_on + timedelta(days=new_state.interval),
        status=PENDING,
        created_at=now,
    )
    logger.debug(
        "review %s rated %s; next due %s (interval %d)",
        task.id, rating, follow_up.due_day, new_state.interval,
    )
    return done, follow_up, new_state
