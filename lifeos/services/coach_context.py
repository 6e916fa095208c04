"""
Coach Context Service
=====================

Reads a bounded slice of the caller's data and renders it into the prompts
sent to the AI gateway:

- chat: 50 newest tasks, active habits, 30 days of habit logs, 100 newest
  expenses, 20 newest decisions
- alignment: 10 newest habit logs, 10 most recently updated tasks,
  5 newest decisions, 7 newest mood check-ins
- recall: 20 most recently updated notes and every learning goal

Every query is filtered by the authenticated user's id.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.models.decision import Decision
from lifeos.models.habit import Habit, HabitLog
from lifeos.models.expense import Expense
from lifeos.models.learning import LearningGoal
from lifeos.models.note import Note
from lifeos.models.task import Task
from lifeos.models.wellness import MoodLog
from lifeos.services.analytics import category_totals, completion_rate
from lifeos.utils.helpers import is_completed, is_pending, row_amount, row_get

CHAT_TASK_LIMIT = 50
CHAT_EXPENSE_LIMIT = 100
CHAT_DECISION_LIMIT = 20
CHAT_HABIT_LOG_DAYS = 30

ALIGNMENT_HABIT_LOG_LIMIT = 10
ALIGNMENT_TASK_LIMIT = 10
ALIGNMENT_DECISION_LIMIT = 5
ALIGNMENT_MOOD_LIMIT = 7

RECALL_NOTE_LIMIT = 20

ALIGNMENT_FALLBACK = "Unable to generate alignment check."
RECALL_FALLBACK = "No response generated."


# =============================================================================
# Context snapshots
# =============================================================================

@dataclass
class ChatContext:
    tasks: list[Any] = field(default_factory=list)
    habits: list[Any] = field(default_factory=list)
    habit_logs: list[Any] = field(default_factory=list)
    expenses: list[Any] = field(default_factory=list)
    decisions: list[Any] = field(default_factory=list)


@dataclass
class AlignmentContext:
    habit_names: list[str] = field(default_factory=list)
    tasks: list[Any] = field(default_factory=list)
    decisions: list[Any] = field(default_factory=list)
    moods: list[Any] = field(default_factory=list)


@dataclass
class RecallContext:
    notes: list[Any] = field(default_factory=list)
    goals: list[Any] = field(default_factory=list)


class CoachContextService:
    """Loads the per-mode context for one user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _all(self, stmt) -> list[Any]:
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def chat_context(self, user_id: uuid.UUID, today: date) -> ChatContext:
        since = today - timedelta(days=CHAT_HABIT_LOG_DAYS)

        return ChatContext(
            tasks=await self._all(
                select(Task)
                .where(Task.user_id == user_id)
                .order_by(Task.created_at.desc())
                .limit(CHAT_TASK_LIMIT)
            ),
            habits=await self._all(
                select(Habit)
                .where(Habit.user_id == user_id, Habit.archived.is_(False))
                .order_by(Habit.created_at.asc())
            ),
            habit_logs=await self._all(
                select(HabitLog)
                .where(HabitLog.user_id == user_id, HabitLog.completed_at >= since)
            ),
            expenses=await self._all(
                select(Expense)
                .where(Expense.user_id == user_id)
                .order_by(Expense.created_at.desc())
                .limit(CHAT_EXPENSE_LIMIT)
            ),
            decisions=await self._all(
                select(Decision)
                .where(Decision.user_id == user_id)
                .order_by(Decision.created_at.desc())
                .limit(CHAT_DECISION_LIMIT)
            ),
        )

    async def alignment_context(self, user_id: uuid.UUID) -> AlignmentContext:
        result = await self.db.execute(
            select(Habit.name)
            .join(HabitLog, HabitLog.habit_id == Habit.id)
            .where(HabitLog.user_id == user_id)
            .order_by(HabitLog.completed_at.desc())
            .limit(ALIGNMENT_HABIT_LOG_LIMIT)
        )

        return AlignmentContext(
            habit_names=[name for name in result.scalars().all() if name],
            tasks=await self._all(
                select(Task)
                .where(Task.user_id == user_id)
                .order_by(Task.updated_at.desc())
                .limit(ALIGNMENT_TASK_LIMIT)
            ),
            decisions=await self._all(
                select(Decision)
                .where(Decision.user_id == user_id)
                .order_by(Decision.created_at.desc())
                .limit(ALIGNMENT_DECISION_LIMIT)
            ),
            moods=await self._all(
                select(MoodLog)
                .where(MoodLog.user_id == user_id)
                .order_by(MoodLog.logged_at.desc())
                .limit(ALIGNMENT_MOOD_LIMIT)
            ),
        )

    async def recall_context(self, user_id: uuid.UUID) -> RecallContext:
        return RecallContext(
            notes=await self._all(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(Note.updated_at.desc())
                .limit(RECALL_NOTE_LIMIT)
            ),
            goals=await self._all(
                select(LearningGoal)
                .where(LearningGoal.user_id == user_id)
                .order_by(LearningGoal.created_at.asc())
            ),
        )


# =============================================================================
# Chat prompt
# =============================================================================

def _joined(items: Iterable[str], empty: str, sep: str = ", ") -> str:
    return sep.join(items) or empty


def _value(row: Any, key: str) -> str:
    value = row_get(row, key)
    return str(getattr(value, "value", value) or "")


def build_context_summary(ctx: ChatContext) -> str:
    """Render the USER CONTEXT block placed inside the system prompt."""
    tasks = ctx.tasks
    pending = [t for t in tasks if is_pending(t)]
    completed = [t for t in tasks if is_completed(t)]

    task_categories: dict[str, int] = {}
    for task in tasks:
        category = _value(task, "category")
        task_categories[category] = task_categories.get(category, 0) + 1

    # Completions over the window, keyed by habit name
    completions: dict[str, int] = {}
    for habit in ctx.habits:
        habit_id = str(row_get(habit, "id"))
        completions[row_get(habit, "name")] = sum(
            1 for log in ctx.habit_logs if str(row_get(log, "habit_id")) == habit_id
        )

    total_expenses = sum(row_amount(e) for e in ctx.expenses)
    by_category = category_totals(ctx.expenses)

    recent_pending = _joined(
        (f'"{row_get(t, "title")}" ({_value(t, "category")})' for t in pending[:5]),
        "None",
    )
    recent_topics = _joined((f'"{row_get(d, "question")}"' for d in ctx.decisions[:3]), "None")

    return f"""
USER CONTEXT (Use this to personalize your responses):

TASKS:
- Total tasks: {len(tasks)}
- Pending: {len(pending)}
- Completed: {len(completed)}
- Completion rate: {completion_rate(tasks, empty_value=0)}%
- Recent pending tasks: {recent_pending}
- Task categories breakdown: {_joined((f"{k}: {v}" for k, v in task_categories.items()), "None")}

HABITS (Last 30 days):
- Active habits: {_joined((row_get(h, "name") for h in ctx.habits), "None created yet")}
- Habit completion this month: {_joined((f"{name}: {count} days" for name, count in completions.items()), "No logs yet")}

EXPENSES (Recent):
- Total tracked: ${total_expenses:.2f}
- By category: {_joined((f"{k}: ${v:.2f}" for k, v in by_category.items()), "None")}

DECISIONS:
- Past decisions analyzed: {len(ctx.decisions)}
- Recent topics: {recent_topics}
"""


def build_system_prompt(ctx: ChatContext) -> str:
    return f"""You are a thoughtful AI Life Coach within the LifeOS app. You help users improve their productivity, habits, and life decisions based on their actual data.

{build_context_summary(ctx)}

YOUR ROLE:
- Be a supportive, honest advisor - not a generic chatbot
- Give specific, actionable advice based on the user's actual data
- Be direct and practical - avoid motivational fluff
- Acknowledge patterns you notice in their behavior
- Suggest concrete next steps

GUIDELINES:
- Reference their actual tasks, habits, expenses when relevant
- If they ask about productivity, look at their task completion patterns
- If they ask about habits, reference their actual habit streaks
- If they ask about spending, reference their expense categories
- Be encouraging but honest - if there's room for improvement, say so kindly

SAFETY (Always follow these):
- Never give medical, legal, or professional financial advice
- Don't make guarantees about outcomes
- If asked about serious health or financial issues, suggest they consult a professional
- You're a helpful tool, not a replacement for professional help

TONE:
- Warm but direct
- Insightful, not preachy
- Like a thoughtful friend who happens to have access to their data
- Keep responses concise - aim for 2-4 paragraphs max unless they ask for detail"""


def build_chat_messages(
    system_prompt: str,
    history: Sequence[Any],
    message: str,
    history_limit: int,
) -> list[dict]:
    """
    ``[system, *history, user]`` as sent upstream.

    Only the trailing ``history_limit`` turns are kept, and only user and
    assistant roles pass through.
    """
    turns = [
        {"role": row_get(turn, "role"), "content": row_get(turn, "content")}
        for turn in history
        if row_get(turn, "role") in ("user", "assistant")
    ]
    if history_limit <= 0:
        turns = []
    else:
        turns = turns[-history_limit:]

    return [
        {"role": "system", "content": system_prompt},
        *turns,
        {"role": "user", "content": message},
    ]


# =============================================================================
# Alignment prompt
# =============================================================================

def average_mood(moods: Sequence[Any]) -> str:
    """Mean mood to one decimal place, or 'N/A' without check-ins."""
    if not moods:
        return "N/A"
    return f"{sum(row_get(m, 'mood') for m in moods) / len(moods):.1f}"


def build_alignment_prompt(vision: str, values: Sequence[str], ctx: AlignmentContext) -> str:
    completed = [row_get(t, "title") for t in ctx.tasks if is_completed(t)]
    pending = [row_get(t, "title") for t in ctx.tasks if is_pending(t)]
    decisions = [row_get(d, "question") for d in ctx.decisions]

    return f"""You are a compassionate life coach helping someone align their daily actions with their future vision.

Their future vision: "{vision}"
Their core values: {_joined(values, "Not specified")}

Recent activity:
- Habits practiced: {_joined(ctx.habit_names, "None recorded")}
- Completed tasks: {_joined(completed[:5], "None")}
- Pending tasks: {_joined(pending[:5], "None")}
- Recent decisions being considered: {_joined(decisions, "None", sep="; ")}
- Average mood (1-5): {average_mood(ctx.moods)}

Provide a brief, encouraging analysis (2-3 paragraphs) of how well their recent actions align with their vision. Be specific but kind. Highlight what's going well and gently suggest one or two areas for improvement. End with an encouraging note. Don't be preachy or judgmental."""


# =============================================================================
# Knowledge recall prompt
# =============================================================================

SUMMARIZE_SYSTEM_PROMPT = (
    "You are a helpful learning assistant. Based on the user's notes and learning goals, "
    "provide a concise summary of their learning journey and key takeaways. "
    "Be encouraging and highlight progress."
)
ASK_SYSTEM_PROMPT = (
    "You are a knowledgeable assistant helping the user recall and understand information "
    "from their personal notes and learning goals. Answer questions based on the provided "
    "context. If the information isn't in their notes, say so politely and offer general guidance."
)


def build_recall_messages(action: str, question: Optional[str], ctx: RecallContext) -> list[dict]:
    notes_context = "\n\n".join(
        f"Note: {row_get(n, 'title')}\n{row_get(n, 'content') or ''}" for n in ctx.notes
    )
    goals_context = "\n\n".join(
        f"Learning Goal: {row_get(g, 'title')} ({row_get(g, 'progress')}% complete, {_value(g, 'status')})\n"
        f"{row_get(g, 'description') or ''}"
        for g in ctx.goals
    )

    if action == "summarize":
        system_prompt = SUMMARIZE_SYSTEM_PROMPT
        user_prompt = (
            "Please summarize my learning based on these notes and goals:"
            f"\n\n{notes_context}\n\n{goals_context}"
        )
    else:
        system_prompt = ASK_SYSTEM_PROMPT
        user_prompt = (
            f"Context from my notes:\n{notes_context}\n\n"
            f"My learning goals:\n{goals_context}\n\n"
            f"Question: {question or ''}"
        )

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
