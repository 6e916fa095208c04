"""
Insight Tests
=============

Tests for burnout detection, the smart insight, smart notifications and
suggested follow-up tasks.
"""

import random
from datetime import date, timedelta
from unittest.mock import MagicMock

from lifeos.services.insights import (
    DECLINING_MOOD_MESSAGE,
    DEFAULT_INSIGHT,
    LOW_ENERGY_MESSAGE,
    LOW_MOOD_MESSAGE,
    Insight,
    detect_burnout,
    generate_insights,
    pick_insight,
    smart_notifications,
    suggest_tasks,
)

START = date(2026, 10, 1)


def _moods(values, energy=4):
    return [
        {"logged_at": (START + timedelta(days=i)).isoformat(), "mood": mood, "energy": energy}
        for i, mood in enumerate(values)
    ]


# ---------------------------------------------------------------------------
# Burnout
# ---------------------------------------------------------------------------

class TestDetectBurnout:
    """Tests for detect_burnout"""

    def test_declining_trend_only(self):
        """Mean mood 2.57 is not low, but the newer half drops by 2.5."""
        report = detect_burnout(_moods([4, 4, 4, 2, 2, 1, 1]), [])

        assert report["at_risk"] is True
        assert report["declining_mood"] is True
        assert report["low_mood"] is False
        assert report["low_energy"] is False
        assert report["warnings"] == [DECLINING_MOOD_MESSAGE]

    def test_orders_checkins_by_date(self):
        logs = list(reversed(_moods([4, 4, 4, 2, 2, 1, 1])))

        report = detect_burnout(logs, [])

        assert report["declining_mood"] is True

    def test_low_mood_and_energy(self):
        report = detect_burnout(_moods([1, 2, 1, 2, 1], energy=2), [])

        assert report["warnings"] == [LOW_MOOD_MESSAGE, LOW_ENERGY_MESSAGE]
        assert report["declining_mood"] is False

    def test_needs_five_checkins(self):
        report = detect_burnout(_moods([1, 1, 1, 1], energy=1), [])

        assert report["at_risk"] is False
        assert report["warnings"] == []

    def test_overloaded_with_pending_tasks(self):
        tasks = [{"status": "pending"}] * 16 + [{"status": "completed"}] * 3

        report = detect_burnout([], tasks)

        assert report["overloaded"] is True
        assert report["warnings"] == [
            "You have 16 pending tasks. Consider prioritizing or delegating some to reduce overwhelm."
        ]

    def test_fifteen_pending_is_fine(self):
        report = detect_burnout([], [{"status": "pending"}] * 15)

        assert report["overloaded"] is False
        assert report["at_risk"] is False


# ---------------------------------------------------------------------------
# Smart insight
# ---------------------------------------------------------------------------

class TestGenerateInsights:
    """Tests for generate_insights and pick_insight"""

    def test_candidates_in_fixed_order(self):
        tasks = [
            {"status": "completed", "updated_at": "2026-10-1%dT10:00:00+00:00" % i}
            for i in range(5)
        ]
        expenses = [
            # Saturday
            {"amount": 100, "category": "Entertainment", "created_at": "2026-10-17T12:00:00+00:00"},
            {"amount": 10, "category": "Food & Dining", "created_at": "2026-10-14T12:00:00+00:00"},
        ]
        habit_logs = [
            {"habit_id": "h1", "completed_at": (START + timedelta(days=i)).isoformat()}
            for i in range(7)
        ]

        insights = generate_insights(tasks, expenses, habit_logs)

        assert [i.message for i in insights] == [
            "Great job! You've completed 100% of your tasks this month.",
            "Weekend spending is higher than weekdays. Consider budgeting for leisure.",
            "Entertainment is your top spending category this month.",
            "You've been consistent with habits for 7 days this month. Keep it up!",
        ]
        assert insights[0].type == "success"
        assert insights[1].type == "warning"

    def test_low_completion_and_evening_work(self):
        tasks = [
            {"status": "completed", "updated_at": "2026-10-10T19:30:00+00:00"},
            {"status": "pending", "updated_at": "2026-10-10T08:00:00+00:00"},
            {"status": "pending", "updated_at": "2026-10-10T08:00:00+00:00"},
        ]

        insights = generate_insights(tasks, [], [])

        assert [i.icon for i in insights] == ["target", "clock"]

    def test_nothing_to_say(self):
        assert generate_insights([], [], []) == []
        assert pick_insight([]) is DEFAULT_INSIGHT

    def test_pick_uses_rng(self):
        candidates = [Insight(message="a"), Insight(message="b"), Insight(message="c")]
        rng = MagicMock()
        rng.random.return_value = 0.99

        assert pick_insight(candidates, rng).message == "c"

    def test_pick_is_reproducible_with_seed(self):
        candidates = [Insight(message=str(i)) for i in range(5)]

        first = pick_insight(candidates, random.Random(42))
        second = pick_insight(candidates, random.Random(42))

        assert first == second


# ---------------------------------------------------------------------------
# Smart notifications
# ---------------------------------------------------------------------------

class TestSmartNotifications:
    """Tests for smart_notifications"""

    def test_all_nudges(self):
        notes = smart_notifications(
            old_pending=[{"id": "t1"}, {"id": "t2"}],
            this_week_expenses=[{"amount": 151}],
            month_expenses=[{"amount": 400}],
            pending_count=10,
        )

        assert [n.id for n in notes] == ["old-tasks", "high-spending", "many-tasks"]
        assert notes[0].message == "You have 2 tasks waiting for over a week"
        assert notes[2].message == "You have 10 pending tasks. Consider prioritizing"

    def test_singular_task(self):
        notes = smart_notifications([{"id": "t1"}], [], [], 1)

        assert len(notes) == 1
        assert notes[0].message == "You have 1 task waiting for over a week"
        assert notes[0].to_api_dict()["link"] == "/tasks"

    def test_normal_spending_is_quiet(self):
        notes = smart_notifications([], [{"amount": 150}], [{"amount": 400}], 0)

        assert notes == []


# ---------------------------------------------------------------------------
# Suggested tasks
# ---------------------------------------------------------------------------

class TestSuggestTasks:
    """Tests for suggest_tasks"""

    def test_sources_in_order(self):
        decisions = [
            {"question": "Should I move to Lisbon next spring or wait another year?", "status": "pending"},
            {"question": "Buy a bike?", "status": "decided"},
        ]
        goals = [{"title": "Learn Rust"}]
        reflections = [
            {"content": "I want to call my sister more often than I currently do"},
            {"content": "Great day overall"},
        ]

        suggestions = suggest_tasks(decisions, goals, reflections, limit=5)

        assert suggestions == [
            {
                "title": "Research more about: Should I move to Lisbon next spring or wait anothe...",
                "category": "Personal",
                "source": "Decision",
            },
            {"title": "Work on: Learn Rust", "category": "Learning", "source": "Learning Goal"},
            {
                "title": "Follow up on reflection: I want to call my sister more often than...",
                "category": "Personal",
                "source": "Reflection",
            },
        ]

    def test_only_three_by_default(self):
        goals = [{"title": f"Goal {i}"} for i in range(5)]

        suggestions = suggest_tasks([], goals, [])

        assert [s["title"] for s in suggestions] == ["Work on: Goal 0", "Work on: Goal 1", "Work on: Goal 2"]

    def test_reflection_match_ignores_case(self):
        suggestions = suggest_tasks([], [], [{"content": "I SHOULD sleep earlier"}])

        assert len(suggestions) == 1

    def test_nothing_to_suggest(self):
        assert suggest_tasks([], [], [{"content": "Quiet evening"}]) == []
