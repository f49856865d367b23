"""
Note endpoints.

GET    /api/v1/notes           List notes (non-leads see their own notes)
POST   /api/v1/notes           Create a note (any member)
PATCH  /api/v1/notes?id=<id>   Update a note (creator or lead)
DELETE /api/v1/notes?id=<id>   Delete a note (creator or lead)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.core.database import get_session
from app.core.policies import NOTES, create_body, require_create
from app.models.note import Note
from app.services import records
from opsdesk_shared.schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteRead,
    NoteResponse,
    NoteUpdate,
)
from opsdesk_shared.schemas.common import SuccessResponse

router = APIRouter()


@router.get("", response_model=NoteListResponse)
async def list_notes(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    rows = await records.list_records(session, Note, NOTES, auth)
    return NoteListResponse(data=[NoteRead.model_validate(r) for r in rows])


@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    auth: AuthenticatedUser = Depends(require_create(NOTES)),
    body: NoteCreate = Depends(create_body(NOTES, NoteCreate)),
    session: AsyncSession = Depends(get_session),
):
    note = await records.create_record(session, Note, NOTES, auth, body)
    return NoteResponse(data=NoteRead.model_validate(note))


@router.patch("", response_model=NoteResponse)
async def update_note(
    body: NoteUpdate,
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    note = await records.update_record(session, Note, NOTES, auth, record_id, body)
    return NoteResponse(data=NoteRead.model_validate(note))


@router.delete("", response_model=SuccessResponse)
async def delete_note(
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    await records.delete_record(session, Note, NOTES, auth, record_id)
    return SuccessResponse()
