"""
Insights
========

Rule-based advisories built on top of ``lifeos.services.analytics``:
burnout flags, the dashboard "smart insight", smart notifications, the
rotating focus/reflection prompts and suggested follow-up tasks.
"""

import random
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from typing import Any, Optional

from lifeos.services.analytics import category_totals, round_half_up, unique_habit_days
from lifeos.utils.helpers import (
    is_completed,
    is_pending,
    local_datetime,
    parse_date,
    row_amount,
    row_get,
)

BURNOUT_MIN_ENTRIES = 5
BURNOUT_RECENT_ENTRIES = 7
BURNOUT_LOW_THRESHOLD = 2.5
BURNOUT_TREND_DROP = 1.0
BURNOUT_PENDING_LIMIT = 15

STALE_TASK_DAYS = 7
MANY_PENDING_TASKS = 10
SPENDING_SPIKE_FACTOR = 1.5

LOW_MOOD_MESSAGE = (
    "Your mood has been lower than usual this week. "
    "Consider taking some time for activities that bring you joy."
)
LOW_ENERGY_MESSAGE = (
    "Your energy levels have been low recently. "
    "Rest and recovery might be helpful right now."
)
DECLINING_MOOD_MESSAGE = (
    "There's been a downward trend in your mood. "
    "It might be a good time to pause and check in with yourself."
)
OVERLOAD_MESSAGE = (
    "You have {count} pending tasks. "
    "Consider prioritizing or delegating some to reduce overwhelm."
)

DEFAULT_INSIGHT_MESSAGE = "Start tracking your habits and expenses to get personalized insights."

FOCUS_MESSAGES = (
    "Focus on completing your important tasks today. Small wins matter.",
    "Take it one step at a time. Progress is progress, no matter how small.",
    "Your future self will thank you for the decisions you make today.",
    "Clear mind, clear focus. You've got this.",
    "Every task completed is a step toward your goals.",
)

REFLECTION_PROMPTS = (
    "What's one thing you're grateful for today?",
    "What was your biggest win today, no matter how small?",
    "What's something you learned today?",
    "How did you take care of yourself today?",
    "What made you smile today?",
    "What challenged you today, and how did you handle it?",
    "What's one thing you'd do differently tomorrow?",
)


@dataclass(frozen=True)
class Insight:
    message: str
    type: str = "info"
    icon: str = "lightbulb"

    def to_api_dict(self) -> dict:
        return asdict(self)


DEFAULT_INSIGHT = Insight(message=DEFAULT_INSIGHT_MESSAGE)


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    link: str
    type: str

    def to_api_dict(self) -> dict:
        return asdict(self)


# =============================================================================
# Burnout
# =============================================================================

def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def detect_burnout(mood_logs: Iterable[Any], tasks: Iterable[Any]) -> dict:
    """
    Burnout advisory over the last 30 days of moods and tasks.

    Mood and energy flags need at least five check-ins; they look at the
    seven most recent by date. The declining flag compares the mean mood of
    the older half (split at floor(n/2)) with the newer half. Every flag
    that applies is reported, in a fixed order.
    """
    moods = sorted(
        (log for log in mood_logs if parse_date(row_get(log, "logged_at")) is not None),
        key=lambda log: parse_date(row_get(log, "logged_at")),
    )

    low_mood = low_energy = declining = False
    warnings: list[str] = []

    if len(moods) >= BURNOUT_MIN_ENTRIES:
        recent = moods[-BURNOUT_RECENT_ENTRIES:]
        mood_values = [row_get(m, "mood") for m in recent]
        energy_values = [row_get(m, "energy") for m in recent]

        if _mean(mood_values) < BURNOUT_LOW_THRESHOLD:
            low_mood = True
            warnings.append(LOW_MOOD_MESSAGE)

        if _mean(energy_values) < BURNOUT_LOW_THRESHOLD:
            low_energy = True
            warnings.append(LOW_ENERGY_MESSAGE)

        if len(recent) >= 3:
            split = len(recent) // 2
            first_avg = _mean(mood_values[:split])
            second_avg = _mean(mood_values[split:])
            if second_avg < first_avg - BURNOUT_TREND_DROP:
                declining = True
                warnings.append(DECLINING_MOOD_MESSAGE)

    pending = sum(1 for t in tasks if is_pending(t))
    overloaded = pending > BURNOUT_PENDING_LIMIT
    if overloaded:
        warnings.append(OVERLOAD_MESSAGE.format(count=pending))

    return {
        "at_risk": bool(warnings),
        "warnings": warnings,
        "low_mood": low_mood,
        "low_energy": low_energy,
        "declining_mood": declining,
        "overloaded": overloaded,
    }


# =============================================================================
# Smart insight
# =============================================================================

def generate_insights(
    tasks: Iterable[Any],
    expenses: Iterable[Any],
    habit_logs: Iterable[Any],
) -> list[Insight]:
    """
    Candidate insights over the last 30 days, in a fixed order.

    The caller passes tasks and expenses created in the window and habit
    logs completed in it. Returns an empty list when nothing applies.
    """
    tasks = list(tasks)
    expenses = list(expenses)
    habit_logs = list(habit_logs)
    insights: list[Insight] = []

    if tasks:
        completed = [t for t in tasks if is_completed(t)]
        rate = len(completed) / len(tasks) * 100

        if rate >= 80:
            insights.append(Insight(
                message=f"Great job! You've completed {round_half_up(rate)}% of your tasks this month.",
                type="success",
                icon="trending-up",
            ))
        elif rate < 50:
            insights.append(Insight(
                message="Try breaking down larger tasks into smaller, manageable pieces.",
                icon="target",
            ))

        evening = 0
        for task in completed:
            done_at = local_datetime(row_get(task, "updated_at"))
            if done_at is not None and done_at.hour >= 18:
                evening += 1
        if evening > len(completed) * 0.6:
            insights.append(Insight(
                message="You seem most productive in the evenings. Schedule important tasks accordingly!",
                icon="clock",
            ))

    if expenses:
        total = sum(row_amount(e) for e in expenses)
        weekend_total = 0.0
        for expense in expenses:
            spent_at = local_datetime(row_get(expense, "created_at"))
            # Saturday and Sunday
            if spent_at is not None and spent_at.weekday() >= 5:
                weekend_total += row_amount(expense)

        if weekend_total > total * 0.4:
            insights.append(Insight(
                message="Weekend spending is higher than weekdays. Consider budgeting for leisure.",
                type="warning",
                icon="dollar-sign",
            ))

        totals = category_totals(expenses)
        if totals:
            top_category = max(totals.items(), key=lambda item: item[1])[0]
            insights.append(Insight(
                message=f"{top_category} is your top spending category this month.",
                icon="dollar-sign",
            ))

    if habit_logs:
        days = unique_habit_days(habit_logs)
        if days >= 7:
            insights.append(Insight(
                message=f"You've been consistent with habits for {days} days this month. Keep it up!",
                type="success",
                icon="target",
            ))

    return insights


def pick_insight(
    candidates: Sequence[Insight],
    rng: Optional[random.Random] = None,
) -> Insight:
    """Pick one candidate uniformly at random, or the default when empty."""
    if not candidates:
        return DEFAULT_INSIGHT
    rng = rng or random.Random()
    return candidates[int(rng.random() * len(candidates))]


def pick_message(messages: Sequence[str], rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return messages[int(rng.random() * len(messages))]


# =============================================================================
# Smart notifications
# =============================================================================

def smart_notifications(
    old_pending: Sequence[Any],
    this_week_expenses: Iterable[Any],
    month_expenses: Sequence[Any],
    pending_count: int,
) -> list[Notification]:
    """
    Dashboard nudges.

    ``old_pending`` holds up to three tasks pending for more than a week;
    ``month_expenses`` covers the last month and sets the weekly average
    (a quarter of its total).
    """
    notifications: list[Notification] = []

    if old_pending:
        count = len(old_pending)
        notifications.append(Notification(
            id="old-tasks",
            message=f"You have {count} task{'s' if count > 1 else ''} waiting for over a week",
            link="/tasks",
            type="task",
        ))

    if month_expenses:
        week_total = sum(row_amount(e) for e in this_week_expenses)
        weekly_avg = sum(row_amount(e) for e in month_expenses) / 4
        if week_total > weekly_avg * SPENDING_SPIKE_FACTOR:
            notifications.append(Notification(
                id="high-spending",
                message="Spending this week is 50% higher than your average",
                link="/expenses",
                type="expense",
            ))

    if pending_count >= MANY_PENDING_TASKS:
        notifications.append(Notification(
            id="many-tasks",
            message=f"You have {pending_count} pending tasks. Consider prioritizing",
            link="/tasks",
            type="task",
        ))

    return notifications


# =============================================================================
# Suggested tasks
# =============================================================================

SUGGESTED_TASK_LIMIT = 3
FOLLOW_UP_PHRASES = ("want to", "should")


def suggest_tasks(
    decisions: Iterable[Any],
    goals: Iterable[Any],
    reflections: Iterable[Any],
    limit: int = SUGGESTED_TASK_LIMIT,
) -> list[dict]:
    """
    Follow-up tasks drawn from recent activity, first ``limit`` only.

    Pending decisions come first, then in-progress learning goals, then
    reflections that mention something the user wants to (or should) do.
    """
    suggestions = []
    for decision in decisions:
        if is_pending(decision):
            question = row_get(decision, "question") or ""
            suggestions.append({
                "title": f"Research more about: {question[:50]}...",
                "category": "Personal",
                "source": "Decision",
            })

    for goal in goals:
        suggestions.append({
            "title": f"Work on: {row_get(goal, 'title')}",
            "category": "Learning",
            "source": "Learning Goal",
        })

    for reflection in reflections:
        content = row_get(reflection, "content") or ""
        if any(phrase in content.lower() for phrase in FOLLOW_UP_PHRASES):
            suggestions.append({
                "title": f"Follow up on reflection: {content[:40]}...",
                "category": "Personal",
                "source": "Reflection",
            })

    return suggestions[:limit]
