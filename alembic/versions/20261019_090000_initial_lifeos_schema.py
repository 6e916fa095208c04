"""Initial LifeOS schema

Revision ID: 20261019_090000
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the personal-productivity tables (tasks, habits, expenses, notes,
decisions, learning goals, wellness), the team tables and public profiles.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261019_090000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


TASK_STATUS_VALUES = ("pending", "completed")
GOAL_STATUS_VALUES = ("in_progress", "completed")
LINKED_TYPE_VALUES = ("task", "habit", "decision")
TEAM_ROLE_VALUES = ("owner", "member")

ENUMS = {
    "taskstatus": TASK_STATUS_VALUES,
    "goalstatus": GOAL_STATUS_VALUES,
    "linkedtype": LINKED_TYPE_VALUES,
    "teamrole": TEAM_ROLE_VALUES,
}


def _enum(name: str) -> postgresql.ENUM:
    """Reference an enum type created up front."""
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _id() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _user_id() -> sa.Column:
    return sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        sa.Enum(*values, name=name).create(bind, checkfirst=True)

    # Tasks
    op.create_table(
        "tasks",
        _id(),
        _user_id(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("status", _enum("taskstatus"), nullable=False),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"])
    op.create_index("idx_task_user_created", "tasks", ["user_id", "created_at"])
    op.create_index("idx_task_user_status", "tasks", ["user_id", "status"])

    # Habits
    op.create_table(
        "habits",
        _id(),
        _user_id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(20), nullable=False),
        sa.Column("frequency", sa.String(20), nullable=False),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_habits_user_id", "habits", ["user_id"])
    op.create_index("idx_habit_user_archived", "habits", ["user_id", "archived"])

    op.create_table(
        "habit_logs",
        _id(),
        _user_id(),
        sa.Column(
            "habit_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("habits.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("completed_at", sa.Date(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("habit_id", "completed_at", name="uq_habit_log_day"),
    )
    op.create_index("ix_habit_logs_user_id", "habit_logs", ["user_id"])
    op.create_index("idx_habit_log_user_day", "habit_logs", ["user_id", "completed_at"])

    # Expenses
    op.create_table(
        "expenses",
        _id(),
        _user_id(),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        sa.CheckConstraint("amount >= 0", name="ck_expense_amount_non_negative"),
    )
    op.create_index("ix_expenses_user_id", "expenses", ["user_id"])
    op.create_index("idx_expense_user_created", "expenses", ["user_id", "created_at"])

    # Notes
    op.create_table(
        "notes",
        _id(),
        _user_id(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_notes_user_id", "notes", ["user_id"])
    op.create_index("idx_note_user_updated", "notes", ["user_id", "updated_at"])

    op.create_table(
        "note_links",
        _id(),
        sa.Column(
            "note_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("notes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("linked_type", _enum("linkedtype"), nullable=False),
        sa.Column("linked_id", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.UniqueConstraint("note_id", "linked_type", "linked_id", name="uq_note_link_target"),
    )

    # Decisions
    op.create_table(
        "decisions",
        _id(),
        _user_id(),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("pros", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("cons", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("recommendation", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_decisions_user_id", "decisions", ["user_id"])
    op.create_index("idx_decision_user_created", "decisions", ["user_id", "created_at"])

    # Learning goals
    op.create_table(
        "learning_goals",
        _id(),
        _user_id(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", _enum("goalstatus"), nullable=False),
        sa.Column("target_date", sa.Date(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint("progress BETWEEN 0 AND 100", name="ck_goal_progress_range"),
    )
    op.create_index("ix_learning_goals_user_id", "learning_goals", ["user_id"])

    # Wellness
    op.create_table(
        "mood_logs",
        _id(),
        _user_id(),
        sa.Column("logged_at", sa.Date(), nullable=False),
        sa.Column("mood", sa.SmallInteger(), nullable=False),
        sa.Column("energy", sa.SmallInteger(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("user_id", "logged_at", name="uq_mood_user_day"),
        sa.CheckConstraint("mood BETWEEN 1 AND 5", name="ck_mood_range"),
        sa.CheckConstraint("energy BETWEEN 1 AND 5", name="ck_energy_range"),
    )
    op.create_index("ix_mood_logs_user_id", "mood_logs", ["user_id"])

    op.create_table(
        "reflections",
        _id(),
        _user_id(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=True),
        sa.Column("logged_at", sa.Date(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_reflections_user_id", "reflections", ["user_id"])
    op.create_index("idx_reflection_user_day", "reflections", ["user_id", "logged_at"])

    # Teams
    op.create_table(
        "teams",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("invite_code", sa.String(16), nullable=False, unique=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        "team_members",
        _id(),
        sa.Column(
            "team_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", _enum("teamrole"), nullable=False),
        _created_at(),
        sa.UniqueConstraint("team_id", "user_id", name="uq_team_member"),
    )
    op.create_index("ix_team_members_user_id", "team_members", ["user_id"])

    op.create_table(
        "shared_tasks",
        _id(),
        sa.Column(
            "team_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("status", _enum("taskstatus"), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("assigned_to", postgresql.UUID(as_uuid=True), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_shared_tasks_team_id", "shared_tasks", ["team_id"])

    op.create_table(
        "shared_expenses",
        _id(),
        sa.Column(
            "team_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("paid_by", postgresql.UUID(as_uuid=True), nullable=False),
        _created_at(),
        sa.CheckConstraint("amount >= 0", name="ck_shared_expense_amount_non_negative"),
    )
    op.create_index("ix_shared_expenses_team_id", "shared_expenses", ["team_id"])

    # Public profiles
    op.create_table(
        "public_profiles",
        _id(),
        _user_id(),
        sa.Column("username", sa.String(50), nullable=True, unique=True),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("show_task_stats", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("show_habit_streaks", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("show_expense_summary", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint("user_id", name="uq_public_profile_user"),
    )
    op.create_index("ix_public_profiles_user_id", "public_profiles", ["user_id"])


def downgrade() -> None:
    for table in (
        "public_profiles",
        "shared_expenses",
        "shared_tasks",
        "team_members",
        "teams",
        "reflections",
        "mood_logs",
        "learning_goals",
        "decisions",
        "note_links",
        "notes",
        "expenses",
        "habit_logs",
        "habits",
        "tasks",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name, values in ENUMS.items():
        sa.Enum(*values, name=name).drop(bind, checkfirst=True)
