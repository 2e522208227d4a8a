"""Tests for streaks and aggregates."""
from datetime import date

import pytest

from conftest import utc
from studylog.errors import InvalidInput
from studylog.models import MaterialTotal, ReviewMaterial, StudySession, SubjectTotal
from studylog.stats import (
    compute_streaks, daily_aggregate, heatmap_intensity, material_aggregate, minutes_on,
    period_minutes, study_days_of,
    subject_aggregate,
)

RUN = {date(2026, 2, 8), date(2026, 2, 9), date(2026, 2, 10)}


def test_streak_continuity():
    streak = compute_streaks(RUN, as_of=date(2026, 2, 10))
    assert streak.current == 3
    assert streak.longest == 3
    assert streak.last_study_day == date(2026, 2, 10)


def test_streak_grace_day():
    assert compute_streaks(RUN, as_of=date(2026, 2, 11)).current == 3
    assert compute_streaks(RUN, as_of=date(2026, 2, 12)).current == 0


def test_streak_empty():
    streak = compute_streaks(set(), as_of=date(2026, 2, 10))
    assert streak.current == 0
    assert streak.longest == 0
    assert streak.last_study_day is None


def test_longest_streak_elsewhere_in_history():
    days = {date(2026, 1, d) for d in (1, 2, 3, 4, 5)} | {date(2026, 1, 20), date(2026, 1, 21)}
    streak = compute_streaks(days, as_of=date(2026, 1, 21))
    assert streak.current == 2
    assert streak.longest == 5


def test_streak_across_month_end():
    days = {date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 1)}
    assert compute_streaks(days, as_of=date(2026, 2, 1)).current == 3


def test_single_day_streak():
    streak = compute_streaks({date(2026, 2, 10)}, as_of=date(2026, 2, 10))
    assert streak.current == 1
    assert streak.longest == 1


def test_study_days_of_uses_day_boundary(make_session):
    sessions = [
        make_session(utc(2026, 2, 10, 17, 59)),  # 02:59 JST on the 11th
        make_session(utc(2026, 2, 10, 18, 0)),   # 03:00 JST on the 11th
    ]
    assert study_days_of(sessions) == {date(2026, 2, 10), date(2026, 2, 11)}


def test_late_night_session_keeps_streak(make_session):
    # 01:30 JST on the 12th still counts for the 11th
    sessions = [
        make_session(utc(2026, 2, 10, 3, 0)),
        make_session(utc(2026, 2, 11, 16, 30)),
    ]
    days = study_days_of(sessions)
    assert compute_streaks(days, as_of=date(2026, 2, 11)).current == 2


def test_daily_aggregate_window(make_session):
    now = utc(2026, 2, 11, 6, 0)  # study day 2026-02-11
    sessions = [
        make_session(utc(2026, 2, 11, 1, 0), minutes=20),
        make_session(utc(2026, 2, 11, 2, 0), minutes=25),
        make_session(utc(2026, 2, 9, 1, 0), minutes=40),
        make_session(utc(2026, 1, 1, 1, 0), minutes=90),  # outside the window
    ]
    totals = daily_aggregate(sessions, window_days=3, now=now)
    assert list(totals) == [date(2026, 2, 9), date(2026, 2, 10), date(2026, 2, 11)]
    assert totals == {date(2026, 2, 9): 40, date(2026, 2, 10): 0, date(2026, 2, 11): 45}


def test_daily_aggregate_empty_sessions_zero_filled():
    totals = daily_aggregate([], window_days=7, now=utc(2026, 2, 11, 6, 0))
    assert len(totals) == 7
    assert set(totals.values()) == {0}


def test_daily_aggregate_today_follows_day_start():
    # 02:00 JST on the 12th is still the 11th
    totals = daily_aggregate([], window_days=1, now=utc(2026, 2, 11, 17, 0))
    assert list(totals) == [date(2026, 2, 11)]


@pytest.mark.parametrize("window", [0, -3])
def test_daily_aggregate_rejects_bad_window(window):
    with pytest.raises(InvalidInput):
        daily_aggregate([], window_days=window, now=utc(2026, 2, 11))


def test_subject_aggregate_ordering(make_session):
    t = utc(2026, 2, 11, 6, 0)
    sessions = [
        make_session(t, subject="English", minutes=30),
        make_session(t, subject="Math", minutes=60),
        make_session(t, subject="History", minutes=30),
        make_session(t, subject="English", minutes=0),
    ]
    assert subject_aggregate(sessions) == [
        SubjectTotal("Math", 60),
        SubjectTotal("English", 30),
        SubjectTotal("History", 30),
    ]


def test_subject_aggregate_empty():
    assert subject_aggregate([]) == []


def test_period_minutes_inclusive(make_session):
    sessions = [
        make_session(utc(2026, 2, 9, 6, 0), minutes=10),
        make_session(utc(2026, 2, 15, 6, 0), minutes=20),
        make_session(utc(2026, 2, 16, 6, 0), minutes=40),
    ]
    assert period_minutes(sessions, date(2026, 2, 9), date(2026, 2, 15)) == 30
    assert minutes_on(sessions, date(2026, 2, 16)) == 40
    with pytest.raises(InvalidInput):
        period_minutes(sessions, date(2026, 2, 15), date(2026, 2, 9))


def test_negative_duration_rejected_at_construction():
    with pytest.raises(InvalidInput):
        StudySession(id="x", subject="Math", started_at=utc(2026, 2, 11), duration_minutes=-5)


def test_last_study_day_is_end_of_current_streak():
    assert compute_streaks(RUN, as_of=date(2026, 2, 11)).last_study_day == date(2026, 2, 10)
    assert compute_streaks(RUN, as_of=date(2026, 2, 12)).last_study_day is None


def test_last_study_day_ignores_days_after_as_of():
    days = RUN | {date(2026, 2, 20)}
    streak = compute_streaks(days, as_of=date(2026, 2, 10))
    assert streak.current == 3
    assert streak.last_study_day == date(2026, 2, 10)


BOOK = ReviewMaterial(id="b1", title="Focus Gold")


def test_material_aggregate_keys_and_titles(make_session):
    t = utc(2026, 2, 11, 6, 0)
    sessions = [
        make_session(t, subject="Math", minutes=30, material_id="b1"),
        make_session(t, subject="English", minutes=50),
        make_session(t, subject="Math", minutes=40, material_id="b1"),
        make_session(t, subject="Physics", minutes=20, material_id="gone"),
        make_session(t, subject="History", minutes=0),
    ]
    totals = material_aggregate(sessions, [BOOK], date(2026, 2, 11), date(2026, 2, 11))
    assert totals == [
        MaterialTotal("material:b1", "Focus Gold", 70),
        MaterialTotal("subject:English", "English", 50),
        MaterialTotal("subject:Physics", "Physics", 20),
    ]


def test_material_aggregate_range_edges(make_session):
    sessions = [
        make_session(utc(2026, 2, 9, 17, 59), minutes=1, material_id="b1"),   # 02:59 JST 10th -> 9th
        make_session(utc(2026, 2, 9, 18, 0), minutes=10, material_id="b1"),   # first instant of 10th
        make_session(utc(2026, 2, 11, 17, 59), minutes=20, material_id="b1"), # last minute of 11th
        make_session(utc(2026, 2, 11, 18, 0), minutes=100, material_id="b1"), # first instant of 12th
    ]
    totals = material_aggregate(sessions, {"b1": BOOK}, date(2026, 2, 10), date(2026, 2, 11))
    assert totals == [MaterialTotal("material:b1", "Focus Gold", 30)]
    with pytest.raises(InvalidInput):
        material_aggregate(sessions, [BOOK], date(2026, 2, 11), date(2026, 2, 10))


@pytest.mark.parametrize("minutes,level", [
    (0, 0), (1, 1), (29, 1), (30, 2), (59, 2), (60, 3), (119, 3), (120, 4), (600, 4),
])
def test_heatmap_intensity(minutes, level):
    assert heatmap_intensity(minutes) == level
