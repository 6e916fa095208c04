"""Time blocks, automation and life vision

Revision ID: 20261019_120000
Revises: 20261019_090000
Create Date: 2026-10-19 12:00:00.000000

Adds the day planner (time blocks, focus sessions), automation rules with
the shared life templates, and the future vision with its roadmap. Seeds
the system templates.
"""
from typing import Sequence, Union
import uuid

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261019_120000"
down_revision: Union[str, None] = "20261019_090000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


SYSTEM_TEMPLATES = [
    {
        "name": "Morning Routine",
        "description": "Start every day with a few grounding habits.",
        "category": "morning_routine",
        "template_data": {"habits": ["meditate", "exercise", "journal", "drink water"]},
    },
    {
        "name": "Weekly Review",
        "description": "Close the week and plan the next one.",
        "category": "weekly_review",
        "template_data": {"tasks": ["review_goals", "plan_next_week", "clear_inbox", "reflect_on_wins"]},
    },
    {
        "name": "Goal Setting",
        "description": "Specific, measurable, achievable, relevant and time-bound goals.",
        "category": "goal_setting",
        "template_data": {"framework": "SMART"},
    },
]


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _user_id(nullable: bool = False) -> sa.Column:
    return sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=nullable)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _task_ref() -> sa.Column:
    return sa.Column(
        "task_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("tasks.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    # Time
    op.create_table(
        "time_blocks",
        _id(),
        _user_id(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="General"),
        sa.Column("color", sa.String(20), nullable=False, server_default="blue"),
        _task_ref(),
        _created_at(),
        sa.CheckConstraint("end_time > start_time", name="ck_time_block_order"),
    )
    op.create_index("ix_time_blocks_user_id", "time_blocks", ["user_id"])
    op.create_index("idx_time_block_user_start", "time_blocks", ["user_id", "start_time"])

    op.create_table(
        "focus_sessions",
        _id(),
        _user_id(),
        _task_ref(),
        sa.Column("category", sa.String(50), nullable=False, server_default="General"),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.CheckConstraint("duration_minutes >= 1", name="ck_focus_duration_positive"),
    )
    op.create_index("ix_focus_sessions_user_id", "focus_sessions", ["user_id"])
    op.create_index("idx_focus_user_started", "focus_sessions", ["user_id", "started_at"])

    # Automation
    op.create_table(
        "automation_rules",
        _id(),
        _user_id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("trigger_type", sa.String(30), nullable=False),
        sa.Column("trigger_config", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("action_type", sa.String(30), nullable=False),
        sa.Column("action_config", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_automation_rules_user_id", "automation_rules", ["user_id"])
    op.create_index("idx_automation_user_created", "automation_rules", ["user_id", "created_at"])

    templates = op.create_table(
        "life_templates",
        _id(),
        _user_id(nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("template_data", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_life_templates_user_id", "life_templates", ["user_id"])
    op.bulk_insert(
        templates,
        [{"id": uuid.uuid4(), "user_id": None, "is_system": True, **t} for t in SYSTEM_TEMPLATES],
    )

    # Vision
    op.create_table(
        "future_vision",
        _id(),
        _user_id(),
        sa.Column("vision_text", sa.Text(), nullable=False),
        sa.Column("values", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("ideal_routines", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("target_year", sa.Integer(), nullable=False),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("user_id", name="uq_future_vision_user"),
    )
    op.create_index("ix_future_vision_user_id", "future_vision", ["user_id"])

    op.create_table(
        "life_roadmap",
        _id(),
        _user_id(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("target_date", sa.Date(), nullable=False),
        sa.Column("item_type", sa.String(20), nullable=False, server_default="goal"),
        sa.Column("category", sa.String(20), nullable=False, server_default="personal"),
        sa.Column("status", sa.String(20), nullable=False, server_default="planned"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_life_roadmap_user_id", "life_roadmap", ["user_id"])
    op.create_index("idx_roadmap_user_target", "life_roadmap", ["user_id", "target_date"])


def downgrade() -> None:
    for table in (
        "life_roadmap",
        "future_vision",
        "life_templates",
        "automation_rules",
        "focus_sessions",
        "time_blocks",
    ):
        op.drop_table(table)
