"""Team and profile schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, UUID4, field_validator

from .common import PatchModel, Role, UserStatus, check_password_bytes


class TeamAction(str, Enum):
    ROLE = "role"
    STATUS = "status"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserCreateRequest(BaseModel):
    """Create a team member with an initial password (lead only)."""
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)
    full_name: Optional[str] = Field(default=None, max_length=200)
    role: Role = Role.NON_LEAD

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class TeamUpdateRequest(BaseModel):
    """Body for PATCH /team?action=role|status; the action picks the field used."""
    model_config = ConfigDict(extra="forbid")

    role: Optional[Role] = None
    status: Optional[UserStatus] = None


class ProfileUpdateRequest(PatchModel):
    """Self-service profile edit. Email, role and status are not editable here."""
    full_name: Optional[str] = Field(default=None, max_length=200)
    avatar_url: Optional[str] = Field(default=None, max_length=512)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class TeamMember(BaseModel):
    id: UUID4
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    status: UserStatus
    role: Role
    created_at: datetime


class TeamMemberResponse(BaseModel):
    data: TeamMember


class TeamListResponse(BaseModel):
    data: List[TeamMember]


class ProfileRead(BaseModel):
    """Directory entry used by assignment pickers."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    email: str
    full_name: Optional[str] = None


class ProfileListResponse(BaseModel):
    data: List[ProfileRead]
