from dataclasses import replace
from datetime import datetime, timezone

import pytest

from studylog.models import PENDING, StudySession


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def make_session():
    """Build StudySession records with defaults for the fields a test ignores."""
    counter = iter(range(1, 10_000))

    def _make(started_at, subject="Math", minutes=30, material_id=None, session_id=None):
        return StudySession(
            id=session_id or f"s{next(counter)}",
            subject=subject,
            started_at=started_at,
            duration_minutes=minutes,
            material_id=material_id,
        )
    return _make


@pytest.fixture
def reopen_task():
    """Put a completed task back to pending so a fixture can be reused."""
    def _reopen(task):
        return replace(task, status=PENDING)
    return _reopen
