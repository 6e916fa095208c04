"""
Task Models
===========

SQLAlchemy model for personal tasks.
"""

from enum import Enum

from sqlalchemy import Enum as SQLEnum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from lifeos.db.base import Base, IdMixin, TimestampMixin, UserOwnedMixin


# =============================================================================
# Enums
# =============================================================================

class TaskStatus(str, Enum):
    """Task completion status. Transitions are a binary toggle."""
    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> "TaskStatus":
        if self is TaskStatus.PENDING:
            return TaskStatus.COMPLETED
        return TaskStatus.PENDING


# Preset categories offered by the client; any free-text category is accepted.
TASK_CATEGORY_PRESETS = ("Work", "Personal", "Health")
DEFAULT_TASK_CATEGORY = "Personal"


# =============================================================================
# Models
# =============================================================================

class Task(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """
    Task model.

    ``updated_at`` moves on every status toggle, which the analytics use
    as the completion time.
    """

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_TASK_CATEGORY,
    )
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, name="taskstatus", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=TaskStatus.PENDING,
    )

    __table_args__ = (
        Index("idx_task_user_created", "user_id", "created_at"),
        Index("idx_task_user_status", "user_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title[:30]})>"

    def toggle(self) -> TaskStatus:
        """Flip pending <-> completed and return the new status."""
        self.status = TaskStatus(self.status).toggled()
        return self.status

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "title": self.title,
            "category": self.category,
            "status": TaskStatus(self.status).value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
