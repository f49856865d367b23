"""Note model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import CreatorMixin, TimestampMixin, UUIDMixin


class Note(UUIDMixin, TimestampMixin, CreatorMixin, SQLModel, table=True):
    __tablename__ = "notes"

    title: str = Field(nullable=False)
    content: Optional[str] = None
    note_type: str = Field(nullable=False, default="general")  # general | meeting | decision | idea
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[uuid.UUID] = None
