"""
Database Models
===============

SQLAlchemy ORM models for all database entities.

All models are imported here to ensure they are registered
with SQLAlchemy's metadata for migrations and relationships.
"""

from lifeos.models.task import (
    Task,
    TaskStatus,
    TASK_CATEGORY_PRESETS,
    DEFAULT_TASK_CATEGORY,
)
from lifeos.models.habit import Habit, HabitLog, HabitColor, DEFAULT_HABIT_COLOR
from lifeos.models.expense import Expense, EXPENSE_CATEGORIES, DEFAULT_EXPENSE_CATEGORY
from lifeos.models.note import Note, NoteLink, LinkedType
from lifeos.models.decision import Decision
from lifeos.models.learning import LearningGoal, GoalStatus
from lifeos.models.wellness import MoodLog, Reflection
from lifeos.models.team import (
    Team,
    TeamMember,
    TeamRole,
    SharedTask,
    SharedExpense,
)
from lifeos.models.profile import PublicProfile
from lifeos.models.time_block import (
    TimeBlock,
    FocusSession,
    BlockColor,
    DEFAULT_BLOCK_COLOR,
    TIME_CATEGORY_PRESETS,
)
from lifeos.models.automation import (
    AutomationRule,
    LifeTemplate,
    TriggerType,
    ActionType,
    TemplateCategory,
)
from lifeos.models.vision import (
    FutureVision,
    RoadmapItem,
    RoadmapItemType,
    RoadmapCategory,
    RoadmapStatus,
)

__all__ = [
    # Task
    "Task",
    "TaskStatus",
    "TASK_CATEGORY_PRESETS",
    "DEFAULT_TASK_CATEGORY",
    # Habit
    "Habit",
    "HabitLog",
    "HabitColor",
    "DEFAULT_HABIT_COLOR",
    # Expense
    "Expense",
    "EXPENSE_CATEGORIES",
    "DEFAULT_EXPENSE_CATEGORY",
    # Knowledge
    "Note",
    "NoteLink",
    "LinkedType",
    "LearningGoal",
    "GoalStatus",
    # Decision
    "Decision",
    # Wellness
    "MoodLog",
    "Reflection",
    # Team
    "Team",
    "TeamMember",
    "TeamRole",
    "SharedTask",
    "SharedExpense",
    # Profile
    "PublicProfile",
    # Time
    "TimeBlock",
    "FocusSession",
    "BlockColor",
    "DEFAULT_BLOCK_COLOR",
    "TIME_CATEGORY_PRESETS",
    # Automation
    "AutomationRule",
    "LifeTemplate",
    "TriggerType",
    "ActionType",
    "TemplateCategory",
    # Vision
    "FutureVision",
    "RoadmapItem",
    "RoadmapItemType",
    "RoadmapCategory",
    "RoadmapStatus",
]
