"""
Team Models
===========

SQLAlchemy models for teams, memberships and team-scoped tasks/expenses.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
import secrets
import uuid

from sqlalchemy import (
    CheckConstraint,
    Enum as SQLEnum,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifeos.db.base import Base, CreatedAtMixin, IdMixin, TimestampMixin
from lifeos.models.task import TaskStatus


class TeamRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


def generate_invite_code() -> str:
    """Eight lowercase hex characters."""
    return secrets.token_hex(4)


class Team(Base, IdMixin, TimestampMixin):
    """Team model; joined through its invite code."""

    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    invite_code: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        unique=True,
        default=generate_invite_code,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )

    members: Mapped[list["TeamMember"]] = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name={self.name})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "invite_code": self.invite_code,
            "created_by": str(self.created_by),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TeamMember(Base, IdMixin, CreatedAtMixin):
    """Membership row; required to read or write any team-scoped row."""

    __tablename__ = "team_members"

    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )
    role: Mapped[TeamRole] = mapped_column(
        SQLEnum(TeamRole, name="teamrole", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TeamRole.MEMBER,
    )

    team: Mapped["Team"] = relationship(
        "Team",
        back_populates="members",
    )

    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_member"),
    )

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "team_id": str(self.team_id),
            "user_id": str(self.user_id),
            "role": TeamRole(self.role).value,
            "joined_at": self.created_at.isoformat() if self.created_at else None,
        }


class SharedTask(Base, IdMixin, TimestampMixin):
    """Team-scoped task."""

    __tablename__ = "shared_tasks"

    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, name="taskstatus", create_constraint=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
    )

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "team_id": str(self.team_id),
            "title": self.title,
            "status": TaskStatus(self.status).value,
            "created_by": str(self.created_by),
            "assigned_to": str(self.assigned_to) if self.assigned_to else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class SharedExpense(Base, IdMixin, CreatedAtMixin):
    """Team-scoped expense."""

    __tablename__ = "shared_expenses"

    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    paid_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_shared_expense_amount_non_negative"),
    )

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "team_id": str(self.team_id),
            "amount": float(self.amount),
            "category": self.category,
            "note": self.note,
            "paid_by": str(self.paid_by),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
