from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, UUID4

from .common import NoteType, PatchModel


class NoteCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=300)
    content: Optional[str] = None
    note_type: NoteType = NoteType.GENERAL
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[UUID4] = None


class NoteUpdate(PatchModel):
    non_nullable = ("title", "note_type")

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    content: Optional[str] = None
    note_type: Optional[NoteType] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[UUID4] = None


class NoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    title: str
    content: Optional[str] = None
    note_type: NoteType
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[UUID4] = None
    created_by: UUID4
    created_at: datetime
    updated_at: datetime


class NoteResponse(BaseModel):
    data: NoteRead


class NoteListResponse(BaseModel):
    data: List[NoteRead]
