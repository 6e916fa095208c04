"""
Analytics Tests
===============

Tests for the pure analytics functions: streaks, completion rates,
spending buckets, focus totals and public profile statistics.
"""

from datetime import date, datetime, timezone

import pytest

from lifeos.models.task import TaskStatus
from lifeos.services.analytics import (
    category_breakdown,
    completion_rate,
    current_streak,
    daily_task_activity,
    focus_summary,
    habit_streaks,
    monthly_expense_totals,
    public_profile_stats,
    round_half_up,
    start_of_week,
    unique_habit_days,
    weekly_summary,
)

# 2026-10-19 is a Monday
TODAY = date(2026, 10, 19)


def _task(status: str, created_at, updated_at=None) -> dict:
    return {
        "status": status,
        "created_at": created_at,
        "updated_at": updated_at or created_at,
    }


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------

class TestCurrentStreak:
    """Tests for current_streak"""

    def test_counts_back_from_today(self):
        dates = [date(2026, 10, 19), date(2026, 10, 18), date(2026, 10, 17)]
        assert current_streak(dates, TODAY) == 3

    def test_missing_today_does_not_break_streak(self):
        """The day is not over yet, so the streak runs from yesterday."""
        dates = ["2026-10-18", "2026-10-17"]
        assert current_streak(dates, TODAY) == 2

    def test_gap_ends_streak(self):
        dates = [date(2026, 10, 19), date(2026, 10, 18), date(2026, 10, 16)]
        assert current_streak(dates, TODAY) == 2

    def test_no_completions(self):
        assert current_streak([], TODAY) == 0

    def test_capped_by_window(self):
        dates = [date.fromordinal(TODAY.toordinal() - i) for i in range(40)]
        assert current_streak(dates, TODAY, window=30) == 30

    def test_habit_streaks_covers_every_habit(self):
        habits = [{"id": "h1"}, {"id": "h2"}]
        logs = [
            {"habit_id": "h1", "completed_at": "2026-10-19"},
            {"habit_id": "h1", "completed_at": "2026-10-18"},
        ]

        assert habit_streaks(habits, logs, TODAY) == {"h1": 2, "h2": 0}

    def test_unique_habit_days(self):
        logs = [
            {"habit_id": "h1", "completed_at": "2026-10-19"},
            {"habit_id": "h2", "completed_at": "2026-10-19"},
            {"habit_id": "h1", "completed_at": "2026-10-18"},
        ]
        assert unique_habit_days(logs) == 2


# ---------------------------------------------------------------------------
# Task completion
# ---------------------------------------------------------------------------

class TestCompletionRate:
    """Tests for completion_rate and the weekly summary card"""

    def test_rate_over_tasks(self):
        tasks = [{"status": "completed"}] * 3 + [{"status": "pending"}]
        assert completion_rate(tasks) == 75

    def test_accepts_enum_status(self):
        tasks = [{"status": TaskStatus.COMPLETED}, {"status": TaskStatus.PENDING}]
        assert completion_rate(tasks) == 50

    def test_rounds_half_up(self):
        tasks = [{"status": "completed"}] * 2 + [{"status": "pending"}]
        assert completion_rate(tasks) == 67
        assert round_half_up(2.5) == 3

    def test_empty_value(self):
        assert completion_rate([], empty_value=0) == 0
        assert completion_rate([], empty_value=100) == 100

    def test_weekly_summary_empty_week_is_100(self):
        summary = weekly_summary([], 0, [], [])

        assert summary["completion_rate"] == 100
        assert summary["tasks_total"] == 0
        assert summary["expense_trend"] == 0.0

    def test_weekly_summary_rate_and_trend(self):
        created = [_task("pending", "2026-10-18T10:00:00+00:00")] * 4

        summary = weekly_summary(
            created,
            3,
            [{"amount": "150.00"}],
            [{"amount": 60}, {"amount": 40}],
        )

        assert summary["completion_rate"] == 75
        assert summary["tasks_completed"] == 3
        assert summary["expenses_this_week"] == 150.0
        assert summary["expenses_last_week"] == 100.0
        assert summary["expense_trend"] == 50.0

    @pytest.mark.parametrize(
        "week_start, expected",
        [
            (6, date(2026, 10, 18)),
            (0, date(2026, 10, 19)),
            (1, date(2026, 10, 13)),
        ],
    )
    def test_start_of_week(self, week_start, expected):
        assert start_of_week(TODAY, week_start) == expected

    def test_daily_task_activity(self):
        tasks = [
            _task("completed", "2026-10-19T08:00:00+00:00", "2026-10-19T09:00:00+00:00"),
            _task("pending", "2026-10-17T08:00:00+00:00"),
            _task("completed", "2026-10-16T08:00:00+00:00", "2026-10-17T20:00:00+00:00"),
        ]

        activity = daily_task_activity(tasks, TODAY)

        assert len(activity) == 7
        assert activity[0]["date"] == "2026-10-13"
        assert activity[-1] == {"day": "Mon", "date": "2026-10-19", "created": 1, "completed": 1}
        saturday = activity[-3]
        assert saturday["day"] == "Sat"
        assert saturday["created"] == 1
        assert saturday["completed"] == 1


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

class TestExpenses:
    """Tests for monthly buckets and category breakdown"""

    def test_six_zero_filled_buckets(self):
        today = date(2026, 3, 15)
        expenses = [
            {"amount": "20.50", "created_at": "2026-03-02T10:00:00Z"},
            {"amount": 10, "created_at": "2026-01-10"},
            {"amount": 99, "created_at": "2025-09-30T12:00:00Z"},
        ]

        buckets = monthly_expense_totals(expenses, today)

        assert [b["month"] for b in buckets] == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]
        assert buckets[0]["key"] == "2025-10"
        assert buckets[-1]["amount"] == 20.5
        assert buckets[3]["amount"] == 10.0
        assert sum(b["amount"] for b in buckets) == 30.5

    def test_buckets_when_nothing_spent(self):
        buckets = monthly_expense_totals([], TODAY)

        assert len(buckets) == 6
        assert all(b["amount"] == 0 for b in buckets)

    def test_category_breakdown_current_month_only(self):
        expenses = [
            {"amount": 30, "category": "Food & Dining", "created_at": datetime(2026, 10, 2, tzinfo=timezone.utc)},
            {"amount": 50, "category": "Transport", "created_at": datetime(2026, 10, 5, tzinfo=timezone.utc)},
            {"amount": 25, "category": "Food & Dining", "created_at": datetime(2026, 10, 9, tzinfo=timezone.utc)},
            {"amount": 500, "category": "Travel", "created_at": datetime(2026, 9, 28, tzinfo=timezone.utc)},
        ]

        breakdown = category_breakdown(expenses, TODAY)

        assert breakdown == [
            {"name": "Food & Dining", "value": 55.0},
            {"name": "Transport", "value": 50.0},
        ]

    def test_category_breakdown_limit(self):
        expenses = [
            {"amount": i + 1, "category": f"C{i}", "created_at": "2026-10-01"}
            for i in range(8)
        ]

        breakdown = category_breakdown(expenses, TODAY, limit=5)

        assert len(breakdown) == 5
        assert breakdown[0]["name"] == "C7"


# ---------------------------------------------------------------------------
# Focus time
# ---------------------------------------------------------------------------

class TestFocusSummary:
    """Tests for focus_summary"""

    def test_week_starts_on_monday(self):
        sessions = [
            {"duration_minutes": 50, "category": "Work", "started_at": "2026-10-19T08:00:00Z"},
            {"duration_minutes": 25, "category": "Work", "started_at": "2026-10-19T13:00:00Z"},
            {"duration_minutes": 45, "category": "Learning", "started_at": "2026-10-20T09:00:00Z"},
            {"duration_minutes": 120, "category": "Creative", "started_at": "2026-10-18T09:00:00Z"},
        ]

        summary = focus_summary(sessions, date(2026, 10, 20))

        assert summary["week_minutes"] == 120
        assert summary["week_hours"] == 2
        assert summary["sessions_today"] == 1
        assert summary["average_minutes"] == 60
        assert summary["category_count"] == 2
        assert summary["categories"] == [
            {"name": "Work", "minutes": 75, "hours": 1.3, "percent": 63},
            {"name": "Learning", "minutes": 45, "hours": 0.8, "percent": 38},
        ]

    def test_no_sessions(self):
        summary = focus_summary([], TODAY)

        assert summary["week_minutes"] == 0
        assert summary["average_minutes"] == 0
        assert summary["categories"] == []


# ---------------------------------------------------------------------------
# Public profile
# ---------------------------------------------------------------------------

class TestPublicProfileStats:
    """Tests for public_profile_stats"""

    def test_only_enabled_sections(self):
        profile = {"show_task_stats": True, "show_habit_streaks": False, "show_expense_summary": False}
        tasks = [{"status": "completed"}, {"status": "pending"}]

        stats = public_profile_stats(profile, tasks, [], [], [], TODAY)

        assert stats == {"task_stats": {"completion_rate": 50, "completed": 1}}

    def test_habits_without_recent_completions_are_hidden(self):
        profile = {"show_task_stats": False, "show_habit_streaks": True, "show_expense_summary": False}
        habits = [
            {"id": "h1", "name": "Read", "color": "emerald"},
            {"id": "h2", "name": "Run", "color": None},
        ]
        logs = [
            {"habit_id": "h1", "completed_at": "2026-10-18"},
            {"habit_id": "h1", "completed_at": "2026-10-17"},
            {"habit_id": "h2", "completed_at": "2026-08-01"},
        ]

        stats = public_profile_stats(profile, [], habits, logs, [], TODAY)

        assert stats["habits"] == [{"name": "Read", "color": "emerald", "completions": 2}]

    def test_expense_summary_has_no_amounts(self):
        profile = {"show_task_stats": False, "show_habit_streaks": False, "show_expense_summary": True}
        expenses = [
            {"amount": 12, "category": "Food & Dining", "created_at": "2026-10-03"},
            {"amount": 40, "category": "Food & Dining", "created_at": "2026-10-04"},
            {"amount": 8, "category": "Transport", "created_at": "2026-10-05"},
        ]

        stats = public_profile_stats(profile, [], [], [], expenses, TODAY)

        assert stats == {"expense_categories": ["Food & Dining", "Transport"]}
