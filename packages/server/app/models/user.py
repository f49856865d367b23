"""User (profile) model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    email: str = Field(nullable=False, unique=True, index=True)
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    status: str = Field(nullable=False, default="active")  # active | inactive
    password_hash: Optional[str] = Field(default=None)  # bcrypt hash
