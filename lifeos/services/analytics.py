"""
Analytics
=========

Pure functions that turn fetched rows into streaks, completion rates,
spending buckets, focus totals and public profile statistics.

Rows may be ORM objects or plain mappings (as returned by the Supabase
REST API), and date/time fields may be ``date``/``datetime`` objects or
ISO 8601 strings. None of these functions touch the database and none of
them raise on empty input.
"""

import math
from collections import Counter, OrderedDict
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Any, Optional

from lifeos.config import settings
from lifeos.utils.helpers import is_completed, parse_date, row_amount, row_get

STREAK_WINDOW_DAYS = 30
MONTH_BUCKETS = 6
TOP_CATEGORIES = 5
PUBLIC_HABIT_LIMIT = 5
DEFAULT_FOCUS_CATEGORY = "General"

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
# Indexed by JavaScript-style day number (Sunday = 0)
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def js_day(d: date) -> int:
    """Day number with Sunday = 0, as used for the Sun..Sat labels."""
    return (d.weekday() + 1) % 7


# =============================================================================
# Streaks
# =============================================================================

def current_streak(
    completion_dates: Iterable[Any],
    today: date,
    window: int = STREAK_WINDOW_DAYS,
) -> int:
    """
    Count consecutive completed days ending today or yesterday.

    Walks back from ``today`` over ``window`` days. A missing today does
    not break the streak (the day is not over yet); any other missing day
    ends it.
    """
    done = {d for d in (parse_date(v) for v in completion_dates) if d is not None}

    streak = 0
    for offset in range(window):
        if today - timedelta(days=offset) in done:
            streak += 1
        elif offset > 0:
            break
    return streak


def habit_streaks(
    habits: Iterable[Any],
    logs: Iterable[Any],
    today: date,
) -> dict[str, int]:
    """Streak per habit id (as string), for every habit given."""
    by_habit: dict[str, list[Any]] = {}
    for log in logs:
        by_habit.setdefault(str(row_get(log, "habit_id")), []).append(row_get(log, "completed_at"))

    return {
        str(row_get(habit, "id")): current_streak(by_habit.get(str(row_get(habit, "id")), []), today)
        for habit in habits
    }


def completed_on(logs: Iterable[Any], habit_id: Any, day: date) -> bool:
    """True when ``habit_id`` has a log for ``day``."""
    return any(
        str(row_get(log, "habit_id")) == str(habit_id) and parse_date(row_get(log, "completed_at")) == day
        for log in logs
    )


def unique_habit_days(logs: Iterable[Any]) -> int:
    """Number of distinct dates with at least one habit completion."""
    return len({d for d in (parse_date(row_get(log, "completed_at")) for log in logs) if d is not None})


# =============================================================================
# Task completion
# =============================================================================

def completion_rate(tasks: Iterable[Any], empty_value: int = 0) -> int:
    """Integer percentage of completed tasks; ``empty_value`` when there are none."""
    tasks = list(tasks)
    if not tasks:
        return empty_value
    completed = sum(1 for t in tasks if is_completed(t))
    return round_half_up(completed / len(tasks) * 100)


def start_of_week(today: date, week_start: Optional[int] = None) -> date:
    """
    First day of the week containing ``today``.

    ``week_start`` uses Python weekday numbers (Monday = 0 ... Sunday = 6)
    and defaults to ``WEEK_STARTS_ON``.
    """
    if week_start is None:
        week_start = settings.WEEK_STARTS_ON
    return today - timedelta(days=(today.weekday() - week_start) % 7)


def spending_trend(this_week_total: float, last_week_total: float) -> float:
    """Percent change week over week; 0 when last week had no spending."""
    if last_week_total > 0:
        return (this_week_total - last_week_total) / last_week_total * 100
    return 0.0


def weekly_summary(
    tasks_created: Iterable[Any],
    completed_count: int,
    this_week_expenses: Iterable[Any],
    last_week_expenses: Iterable[Any],
) -> dict:
    """
    Dashboard weekly summary card.

    ``completed_count`` is the number of tasks completed this week (by
    ``updated_at``), which can include tasks created in earlier weeks.
    """
    tasks_created = list(tasks_created)
    total = len(tasks_created)
    this_week = sum(row_amount(e) for e in this_week_expenses)
    last_week = sum(row_amount(e) for e in last_week_expenses)

    rate = round_half_up(completed_count / total * 100) if total > 0 else 100

    return {
        "tasks_completed": completed_count,
        "tasks_total": total,
        "completion_rate": rate,
        "expenses_this_week": round(this_week, 2),
        "expenses_last_week": round(last_week, 2),
        "expense_trend": round(spending_trend(this_week, last_week), 1),
    }


def daily_task_activity(tasks: Iterable[Any], today: date, days: int = 7) -> list[dict]:
    """Tasks created and completed per day for the last ``days`` days, oldest first."""
    created = Counter()
    completed = Counter()
    for task in tasks:
        created_day = parse_date(row_get(task, "created_at"))
        if created_day is not None:
            created[created_day] += 1
        if is_completed(task):
            done_day = parse_date(row_get(task, "updated_at"))
            if done_day is not None:
                completed[done_day] += 1

    activity = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        activity.append({
            "day": WEEKDAY_LABELS[js_day(day)],
            "date": day.isoformat(),
            "created": created[day],
            "completed": completed[day],
        })
    return activity


# =============================================================================
# Expenses
# =============================================================================

def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_expense_totals(expenses: Iterable[Any], today: date) -> list[dict]:
    """
    Totals for the current month and the five before it, oldest first.

    Always returns exactly six zero-filled buckets; expenses outside the
    window are ignored.
    """
    buckets: "OrderedDict[str, float]" = OrderedDict()
    for delta in range(-(MONTH_BUCKETS - 1), 1):
        year, month = _shift_month(today.year, today.month, delta)
        buckets[f"{year:04d}-{month:02d}"] = 0.0

    for expense in expenses:
        day = parse_date(row_get(expense, "created_at"))
        if day is None:
            continue
        key = f"{day.year:04d}-{day.month:02d}"
        if key in buckets:
            buckets[key] += row_amount(expense)

    return [
        {
            "key": key,
            "month": MONTH_NAMES[int(key[5:7]) - 1],
            "amount": round(amount, 2),
        }
        for key, amount in buckets.items()
    ]


def _in_month(expense: Any, today: date) -> bool:
    day = parse_date(row_get(expense, "created_at"))
    return day is not None and day.year == today.year and day.month == today.month


def month_total(expenses: Iterable[Any], today: date) -> float:
    return round(sum(row_amount(e) for e in expenses if _in_month(e, today)), 2)


def category_totals(expenses: Iterable[Any]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for expense in expenses:
        category = row_get(expense, "category") or "Other"
        totals[category] = totals.get(category, 0.0) + row_amount(expense)
    return totals


def category_breakdown(
    expenses: Iterable[Any],
    today: date,
    limit: int = TOP_CATEGORIES,
) -> list[dict]:
    """Current-month spend per category, largest first, top ``limit``."""
    totals = category_totals(e for e in expenses if _in_month(e, today))
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [{"name": name, "value": round(value, 2)} for name, value in ranked[:limit]]


# =============================================================================
# Focus time
# =============================================================================

# The focus week always starts on Monday, whatever WEEK_STARTS_ON says
FOCUS_WEEK_START = 0


def focus_summary(sessions: Iterable[Any], today: date) -> dict:
    """
    Focus statistics over the listed sessions.

    Weekly minutes and the per-category breakdown cover sessions started
    since Monday; the session average covers every session given.
    """
    sessions = list(sessions)
    week_start = start_of_week(today, FOCUS_WEEK_START)

    week_minutes = 0
    by_category: dict[str, int] = {}
    sessions_today = 0
    for session in sessions:
        minutes = int(row_get(session, "duration_minutes") or 0)
        day = parse_date(row_get(session, "started_at"))
        if day is None:
            continue
        if day == today:
            sessions_today += 1
        if day >= week_start:
            week_minutes += minutes
            category = row_get(session, "category") or DEFAULT_FOCUS_CATEGORY
            by_category[category] = by_category.get(category, 0) + minutes

    average = 0
    if sessions:
        average = round_half_up(sum(int(row_get(s, "duration_minutes") or 0) for s in sessions) / len(sessions))

    ranked = sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    return {
        "week_minutes": week_minutes,
        "week_hours": round_half_up(week_minutes / 60),
        "sessions_today": sessions_today,
        "average_minutes": average,
        "category_count": len(by_category),
        "categories": [
            {
                "name": name,
                "minutes": minutes,
                "hours": round_half_up(minutes / 60 * 10) / 10,
                "percent": round_half_up(minutes / week_minutes * 100) if week_minutes else 0,
            }
            for name, minutes in ranked
        ],
    }


# =============================================================================
# Wellness
# =============================================================================

def weekly_average(mood_logs: Iterable[Any], field: str) -> Optional[float]:
    """Mean of ``field`` (mood or energy) to one decimal, or None without logs."""
    values = [row_get(log, field) for log in mood_logs]
    values = [v for v in values if v is not None]
    if not values:
        return None
    return round(sum(values) / len(values), 1)


# =============================================================================
# Public profile
# =============================================================================

def public_profile_stats(
    profile: Any,
    tasks: Iterable[Any],
    habits: Iterable[Any],
    habit_logs: Iterable[Any],
    expenses: Iterable[Any],
    today: date,
) -> dict:
    """
    Aggregate statistics for a public profile page.

    Only the sections enabled on the profile are computed. Expenses are
    reduced to category names; amounts never leave this function.
    """
    stats: dict[str, Any] = {}

    if row_get(profile, "show_task_stats"):
        tasks = list(tasks)
        stats["task_stats"] = {
            "completion_rate": completion_rate(tasks, empty_value=0),
            "completed": sum(1 for t in tasks if is_completed(t)),
        }

    if row_get(profile, "show_habit_streaks"):
        window_start = today - timedelta(days=STREAK_WINDOW_DAYS)
        counts = Counter()
        for log in habit_logs:
            day = parse_date(row_get(log, "completed_at"))
            if day is not None and day >= window_start:
                counts[str(row_get(log, "habit_id"))] += 1

        listed = []
        for habit in habits:
            completions = counts[str(row_get(habit, "id"))]
            if completions > 0:
                listed.append({
                    "name": row_get(habit, "name"),
                    "color": row_get(habit, "color") or "indigo",
                    "completions": completions,
                })
        stats["habits"] = listed[:PUBLIC_HABIT_LIMIT]

    if row_get(profile, "show_expense_summary"):
        categories: list[str] = []
        for expense in expenses:
            category = row_get(expense, "category")
            if category and category not in categories and _in_month(expense, today):
                categories.append(category)
        stats["expense_categories"] = categories[:TOP_CATEGORIES]

    return stats
