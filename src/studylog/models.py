"""Data classes for the study log and review domain."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from studylog.errors import InvalidInput

PENDING = "pending"
COMPLETED = "completed"
TASK_STATUSES = (PENDING, COMPLETED)


def _is_aware(value) -> bool:
    return isinstance(value, datetime) and value.tzinfo is not None and value.utcoffset() is not None


@dataclass(frozen=True)
class StudySession:
    id: str
    subject: str
    started_at: datetime
    duration_minutes: int
    material_id: Optional[str] = None
    note: str = ""

    def __post_init__(self):
        minutes = self.duration_minutes
        if not isinstance(minutes, int) or isinstance(minutes, bool) or minutes < 0:
            raise InvalidInput(
                f"session {self.id}: duration must be a non-negative int, got {minutes!r}"
            )
        if not _is_aware(self.started_at):
            raise InvalidInput(f"session {self.id}: started_at must be timezone-aware")


@dataclass(frozen=True)
class ReviewTask:
    id: str
    session_id: str
    due_day: date
    status: str = PENDING
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # datetime is a date subclass; a due day carries no time of day
        if not isinstance(self.due_day, date) or isinstance(self.due_day, datetime):
            raise InvalidInput(f"task {self.id}: due_day must be a date, got {self.due_day!r}")
        if self.status not in TASK_STATUSES:
            raise InvalidInput(f"task {self.id}: unknown status {self.status!r}")
        if self.created_at is not None and not _is_aware(self.created_at):
            raise InvalidInput(f"task {self.id}: created_at must be timezone-aware")

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING


@dataclass(frozen=True)
class ReviewMaterial:
    id: str
    title: str


@dataclass(frozen=True)
class DueTask:
    """A review task joined with the session that spawned it."""
    task: ReviewTask
    session: StudySession
    material: Optional[ReviewMaterial] = None


@dataclass
class TaskGroup:
    key: str
    title: str
    due_tasks: list = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.due_tasks)


@dataclass(frozen=True)
class Streak:
    current: int = 0
    longest: int = 0
    last_study_day: Optional[date] = None


@dataclass(frozen=True)
class SubjectTotal:
    subject: str
    total_minutes: int


@dataclass(frozen=True)
class MaterialTotal:
    key: str
    title: str
    total_minutes: int
