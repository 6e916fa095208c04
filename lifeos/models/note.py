"""
Note Models
===========

SQLAlchemy models for notes and their loose links to tasks, habits and
decisions.
"""

from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import (
    Enum as SQLEnum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifeos.db.base import Base, CreatedAtMixin, IdMixin, TimestampMixin, UserOwnedMixin


class LinkedType(str, Enum):
    """Kinds of rows a note can point at."""
    TASK = "task"
    HABIT = "habit"
    DECISION = "decision"

    @property
    def deleted_label(self) -> str:
        """Title shown when the linked row no longer exists."""
        return f"Deleted {self.value}"


class Note(Base, IdMixin, UserOwnedMixin, TimestampMixin):
    """Note model."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    content: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    links: Mapped[list["NoteLink"]] = relationship(
        "NoteLink",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_note_user_updated", "user_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title[:30]})>"

    def to_api_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class NoteLink(Base, IdMixin, CreatedAtMixin):
    """
    Join row from a note to a task, habit or decision.

    ``linked_id`` is a loose reference: the target may be deleted, leaving
    the link dangling until it is resolved at read time.
    """

    __tablename__ = "note_links"

    note_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )
    linked_type: Mapped[LinkedType] = mapped_column(
        SQLEnum(LinkedType, name="linkedtype", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    linked_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )

    note: Mapped["Note"] = relationship(
        "Note",
        back_populates="links",
    )

    __table_args__ = (
        UniqueConstraint("note_id", "linked_type", "linked_id", name="uq_note_link_target"),
    )

    def __repr__(self) -> str:
        return f"<NoteLink(note_id={self.note_id}, {self.linked_type}={self.linked_id})>"
