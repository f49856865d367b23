"""User role (one row per user; a missing row means non_lead)."""

import uuid

from sqlmodel import Field, SQLModel

from .base import UUIDMixin


class UserRole(UUIDMixin, SQLModel, table=True):
    __tablename__ = "user_roles"

    user_id: uuid.UUID = Field(
        foreign_key="users.id", nullable=False, unique=True, index=True, ondelete="CASCADE"
    )
    role: str = Field(nullable=False, default="non_lead")  # lead | non_lead
