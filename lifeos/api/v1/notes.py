"""
Notes API Endpoints
===================

Notes plus links from a note to tasks, habits and decisions.
"""

import uuid

from fastapi import APIRouter, Query, status

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.models.note import LinkedType
from lifeos.schemas.common import BaseResponse, DeleteResponse
from lifeos.schemas.note import (
    LinkableItem,
    NoteCreate,
    NoteLinkCreate,
    NoteUpdate,
    ResolvedNoteLink,
)
from lifeos.services.note_service import NoteService

router = APIRouter()


# =============================================================================
# Notes
# =============================================================================

@router.get(
    "",
    response_model=BaseResponse[list[dict]],
)
async def list_notes(
    current_user: CurrentUser,
    db: DBSession,
):
    """Notes, most recently edited first."""
    notes = await NoteService(db).list_notes(current_user.user_id)
    return BaseResponse(data=[n.to_api_dict() for n in notes])


@router.post(
    "",
    response_model=BaseResponse[dict],
    status_code=status.HTTP_201_CREATED,
)
async def create_note(
    note_data: NoteCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    note = await NoteService(db).create_note(current_user.user_id, note_data)
    return BaseResponse(data=note.to_api_dict(), message="Note created")


@router.get(
    "/{note_id}",
    response_model=BaseResponse[dict],
)
async def get_note(
    note_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    note = await NoteService(db).get_note(note_id, current_user.user_id)
    return BaseResponse(data=note.to_api_dict())


@router.patch(
    "/{note_id}",
    response_model=BaseResponse[dict],
)
async def update_note(
    note_id: uuid.UUID,
    note_data: NoteUpdate,
    current_user: CurrentUser,
    db: DBSession,
):
    note = await NoteService(db).update_note(note_id, current_user.user_id, note_data)
    return BaseResponse(data=note.to_api_dict(), message="Note updated")


@router.delete(
    "/{note_id}",
    response_model=DeleteResponse,
)
async def delete_note(
    note_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """Delete a note together with its links."""
    await NoteService(db).delete_note(note_id, current_user.user_id)
    return DeleteResponse(message="Note deleted")


# =============================================================================
# Links
# =============================================================================

@router.get(
    "/{note_id}/links",
    response_model=BaseResponse[list[ResolvedNoteLink]],
)
async def list_note_links(
    note_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Links with their target's current title.

    Targets deleted since the link was made show as "Deleted task",
    "Deleted habit" or "Deleted decision" with `exists: false`.
    """
    links = await NoteService(db).list_links(note_id, current_user.user_id)
    return BaseResponse(data=links)


@router.post(
    "/{note_id}/links",
    response_model=BaseResponse[ResolvedNoteLink],
    status_code=status.HTTP_201_CREATED,
)
async def add_note_link(
    note_id: uuid.UUID,
    link_data: NoteLinkCreate,
    current_user: CurrentUser,
    db: DBSession,
):
    link = await NoteService(db).add_link(note_id, current_user.user_id, link_data)
    return BaseResponse(data=link, message="Link added")


@router.delete(
    "/{note_id}/links/{link_id}",
    response_model=DeleteResponse,
)
async def remove_note_link(
    note_id: uuid.UUID,
    link_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
):
    await NoteService(db).remove_link(note_id, link_id, current_user.user_id)
    return DeleteResponse(message="Link removed")


@router.get(
    "/{note_id}/linkable",
    response_model=BaseResponse[list[LinkableItem]],
)
async def list_linkable_items(
    note_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
    linked_type: LinkedType = Query(alias="type"),
):
    """Items of `type` that could be linked to this note."""
    items = await NoteService(db).linkable_items(note_id, current_user.user_id, linked_type)
    return BaseResponse(data=items)
