"""
Note Service Tests
==================

Tests for note links: duplicate links and targets that no longer exist.
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from lifeos.core.errors import ConflictError, NotFoundError
from lifeos.models.note import LinkedType, Note, NoteLink
from lifeos.schemas.note import NoteLinkCreate
from lifeos.services.note_service import NoteService
from tests.conftest import USER_ID, make_result, make_session

NOTE_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


def _note() -> Note:
    return Note(id=NOTE_ID, user_id=USER_ID, title="Trip ideas", content=None)


def _link(linked_type: LinkedType = LinkedType.TASK) -> NoteLink:
    return NoteLink(id=uuid.uuid4(), note_id=NOTE_ID, linked_type=linked_type, linked_id=uuid.uuid4())


class TestNoteLinks:
    """Tests for NoteService link operations"""

    @pytest.mark.asyncio
    async def test_unknown_note(self):
        db = make_session()

        with pytest.raises(NotFoundError) as exc_info:
            await NoteService(db).list_links(NOTE_ID, USER_ID)

        assert exc_info.value.code == "NOTE_001"

    @pytest.mark.asyncio
    async def test_duplicate_link_is_a_conflict(self):
        db = make_session()
        db.execute.return_value = make_result(scalar=_note())
        db.begin_nested.return_value.__aexit__.side_effect = IntegrityError(
            "INSERT INTO note_links", {}, Exception("duplicate key")
        )

        with pytest.raises(ConflictError) as exc_info:
            await NoteService(db).add_link(
                NOTE_ID,
                USER_ID,
                NoteLinkCreate(linked_type="task", linked_id=uuid.uuid4()),
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "NOTE_003"

    @pytest.mark.asyncio
    async def test_links_resolve_titles(self):
        db = make_session()
        live, dangling = _link(LinkedType.HABIT), _link(LinkedType.TASK)
        db.execute.side_effect = [
            make_result(scalar=_note()),
            make_result(scalars=[live, dangling]),
            make_result(scalar="Morning run"),
            make_result(scalar=None),
        ]

        links = await NoteService(db).list_links(NOTE_ID, USER_ID)

        assert [(l["linked_type"], l["title"], l["exists"]) for l in links] == [
            ("habit", "Morning run", True),
            ("task", "Deleted task", False),
        ]

    @pytest.mark.asyncio
    async def test_remove_missing_link(self):
        db = make_session()
        db.execute.side_effect = [make_result(scalar=_note()), make_result(scalar=None)]

        with pytest.raises(NotFoundError) as exc_info:
            await NoteService(db).remove_link(NOTE_ID, uuid.uuid4(), USER_ID)

        assert exc_info.value.code == "NOTE_002"
        db.delete.assert_not_called()
