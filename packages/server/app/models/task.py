"""Task model."""

from datetime import date
from typing import List, Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatorMixin, TimestampMixin, UUIDMixin


class Task(UUIDMixin, TimestampMixin, CreatorMixin, SQLModel, table=True):
    __tablename__ = "tasks"

    title: str = Field(nullable=False)
    description: Optional[str] = None
    status: str = Field(nullable=False, default="backlog", index=True)  # backlog | in_progress | done | blocked
    priority: str = Field(nullable=False, default="medium")  # low | medium | high
    due_date: Optional[date] = None
    assignee_user_id: Optional[uuid.UUID] = Field(default=None, index=True)
    tags: List[str] = Field(default_factory=list, sa_type=sa.JSON)
