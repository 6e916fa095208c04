"""
Note Service
============

Business logic for notes and their links to tasks, habits and decisions.

Links are loose references: deleting a task does not delete the links that
point at it. Titles are resolved when links are read, and a missing target
shows up as "Deleted task" (or habit/decision).
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lifeos.core.errors import ConflictError, ErrorCodes, NotFoundError
from lifeos.models.decision import Decision
from lifeos.models.habit import Habit
from lifeos.models.note import LinkedType, Note, NoteLink
from lifeos.models.task import Task
from lifeos.schemas.note import NoteCreate, NoteLinkCreate, NoteUpdate
from lifeos.utils.validators import validate_title

logger = logging.getLogger(__name__)

LINKABLE_LIMIT = 50

# Model and title column per link target
_TARGETS = {
    LinkedType.TASK: (Task, Task.title),
    LinkedType.HABIT: (Habit, Habit.name),
    LinkedType.DECISION: (Decision, Decision.question),
}


class NoteService:
    """Service for note and note link operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Notes
    # =========================================================================

    async def get_note(self, note_id: uuid.UUID, user_id: uuid.UUID) -> Note:
        result = await self.db.execute(
            select(Note).where(Note.id == note_id, Note.user_id == user_id)
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(code=ErrorCodes.NOTE_NOT_FOUND, message="Note not found")
        return note

    async def list_notes(self, user_id: uuid.UUID) -> list[Note]:
        result = await self.db.execute(
            select(Note).where(Note.user_id == user_id).order_by(Note.updated_at.desc())
        )
        return list(result.scalars().all())

    async def create_note(self, user_id: uuid.UUID, data: NoteCreate) -> Note:
        note = Note(
            user_id=user_id,
            title=validate_title(data.title),
            content=data.content,
        )
        self.db.add(note)
        await self.db.flush()
        await self.db.refresh(note)
        return note

    async def update_note(self, note_id: uuid.UUID, user_id: uuid.UUID, data: NoteUpdate) -> Note:
        note = await self.get_note(note_id, user_id)
        if data.title is not None:
            note.title = validate_title(data.title)
        if data.content is not None:
            note.content = data.content
        await self.db.flush()
        await self.db.refresh(note)
        return note

    async def delete_note(self, note_id: uuid.UUID, user_id: uuid.UUID) -> None:
        note = await self.get_note(note_id, user_id)
        await self.db.delete(note)
        await self.db.flush()

    # =========================================================================
    # Links
    # =========================================================================

    async def _resolve_title(self, link: NoteLink, user_id: uuid.UUID) -> tuple[str, bool]:
        linked_type = LinkedType(link.linked_type)
        model, title_column = _TARGETS[linked_type]
        result = await self.db.execute(
            select(title_column).where(model.id == link.linked_id, model.user_id == user_id)
        )
        title = result.scalar_one_or_none()
        if title is None:
            return linked_type.deleted_label, False
        return title, True

    async def _link_dict(self, link: NoteLink, user_id: uuid.UUID) -> dict:
        title, exists = await self._resolve_title(link, user_id)
        return {
            "id": str(link.id),
            "linked_type": LinkedType(link.linked_type).value,
            "linked_id": str(link.linked_id),
            "title": title,
            "exists": exists,
        }

    async def list_links(self, note_id: uuid.UUID, user_id: uuid.UUID) -> list[dict]:
        await self.get_note(note_id, user_id)
        result = await self.db.execute(
            select(NoteLink)
            .where(NoteLink.note_id == note_id)
            .order_by(NoteLink.created_at.asc())
        )

        return [await self._link_dict(link, user_id) for link in result.scalars().all()]

    async def add_link(self, note_id: uuid.UUID, user_id: uuid.UUID, data: NoteLinkCreate) -> dict:
        await self.get_note(note_id, user_id)

        link = NoteLink(
            note_id=note_id,
            linked_type=data.linked_type,
            linked_id=data.linked_id,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(link)
        except IntegrityError:
            raise ConflictError(
                code=ErrorCodes.NOTE_LINK_EXISTS,
                message="This item is already linked to the note",
            )
        await self.db.refresh(link)
        return await self._link_dict(link, user_id)

    async def remove_link(self, note_id: uuid.UUID, link_id: uuid.UUID, user_id: uuid.UUID) -> None:
        await self.get_note(note_id, user_id)
        result = await self.db.execute(
            select(NoteLink).where(NoteLink.id == link_id, NoteLink.note_id == note_id)
        )
        link = result.scalar_one_or_none()
        if link is None:
            raise NotFoundError(code=ErrorCodes.NOTE_LINK_NOT_FOUND, message="Link not found")
        await self.db.delete(link)
        await self.db.flush()

    async def linkable_items(
        self,
        note_id: uuid.UUID,
        user_id: uuid.UUID,
        linked_type: LinkedType,
    ) -> list[dict]:
        """
        Candidates for a new link of ``linked_type``: the 50 newest tasks or
        decisions, or every active habit, minus what is already linked.
        """
        await self.get_note(note_id, user_id)

        model, title_column = _TARGETS[linked_type]
        stmt = select(model.id, title_column).where(model.user_id == user_id)
        if linked_type is LinkedType.HABIT:
            stmt = stmt.where(Habit.archived.is_(False))
        stmt = stmt.order_by(model.created_at.desc())
        if linked_type is not LinkedType.HABIT:
            stmt = stmt.limit(LINKABLE_LIMIT)

        linked = await self.db.execute(
            select(NoteLink.linked_id).where(
                NoteLink.note_id == note_id,
                NoteLink.linked_type == linked_type,
            )
        )
        already_linked = set(linked.scalars().all())

        rows = await self.db.execute(stmt)
        return [
            {"id": str(item_id), "title": title}
            for item_id, title in rows.all()
            if item_id not in already_linked
        ]
