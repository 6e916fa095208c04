"""
Note Schemas
============

Pydantic schemas for notes, note links and linkable items.
"""

from typing import Optional
import uuid

from pydantic import BaseModel, Field

from lifeos.models.note import LinkedType


class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: Optional[str] = None


class NoteUpdate(BaseModel):
    """Partial update; omitted fields keep their current values."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None


class NoteLinkCreate(BaseModel):
    linked_type: LinkedType
    linked_id: uuid.UUID


class ResolvedNoteLink(BaseModel):
    """A link with its target's current title (or a "Deleted ..." label)."""

    id: str
    linked_type: LinkedType
    linked_id: str
    title: str
    exists: bool


class LinkableItem(BaseModel):
    id: str
    title: str
