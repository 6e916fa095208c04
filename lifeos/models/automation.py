"""
Automation Models
=================

SQLAlchemy models for user automation rules and reusable life templates.
"""

from enum import Enum
from typing import Any, Optional
import uuid

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, IdMixin, TimestampMixin, UserOwnedMixin


class TriggerType(str, Enum):
    HABIT_COMPLETED = "habit_completed"
    TASK_COMPLETED = "task_completed"
    GOAL_PROGRESS = "goal_progress"
    MOOD_LOGGED = "mood_logged"
    DECISION_MADE = "decision_made"


class ActionType(str, Enum):
    CREATE_TASK = "create_task"
    LOG_HABIT = "log_habit"
    SEND_NOTIFICATION = "send_notification"
    UPDATE_GOAL = "update_goal"


class TemplateCategory(str, Enum):
    """Template categories with a dedicated apply step."""
    MORNING_ROUTINE = "morning_routine"
    WEEKLY_REVIEW = "weekly_review"
    GOAL_SETTING = "goal_setting"


class AutomationRule(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """
    "When <trigger>, do <action>" rule.

    Rules are stored and toggled here; ``action_config`` carries the
    free-text ``value`` the action uses.
    """

    __tablename__ = "automation_rules"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    trigger_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )
    trigger_config: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )
    action_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )
    action_config: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    __table_args__ = (
        Index("idx_automation_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AutomationRule(id={self.id}, name={self.name})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "trigger_type": self.trigger_type,
            "trigger_config": self.trigger_config or {},
            "action_type": self.action_type,
            "action_config": self.action_config or {},
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class LifeTemplate(Base, IdMixin, TimestampMixin):
    """
    Reusable bundle of habits or tasks.

    System templates have no owner and are visible to everyone.
    """

    __tablename__ = "life_templates"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    template_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
    )
    is_system: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    def __repr__(self) -> str:
        return f"<LifeTemplate(id={self.id}, category={self.category})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "template_data": self.template_data or {},
            "is_system": self.is_system,
        }
