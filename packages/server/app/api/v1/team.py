"""
Team management endpoints.

GET    /api/v1/team                               List members with their roles
POST   /api/v1/team                               Create a member (lead only)
PATCH  /api/v1/team?userId=<id>&action=role       Change a member's role (lead only)
PATCH  /api/v1/team?userId=<id>&action=status     Change a member's status (lead only)
DELETE /api/v1/team?userId=<id>                   Remove a member (lead only)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_authenticated_user, require_lead
from app.core.database import get_session
from app.core.policies import TEAM, create_body, require_create
from app.services import users as user_service
from opsdesk_shared.schemas.common import SuccessResponse
from opsdesk_shared.schemas.users import (
    TeamListResponse,
    TeamMember,
    TeamMemberResponse,
    TeamUpdateRequest,
    UserCreateRequest,
)

router = APIRouter()


@router.get("", response_model=TeamListResponse)
async def list_team(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """List every member with their role, newest first."""
    items = await user_service.list_team(session)
    return TeamListResponse(data=[TeamMember(**item) for item in items])


@router.post("", response_model=TeamMemberResponse, status_code=201)
async def create_member(
    auth: AuthenticatedUser = Depends(require_create(TEAM)),
    body: UserCreateRequest = Depends(create_body(TEAM, UserCreateRequest)),
    session: AsyncSession = Depends(get_session),
):
    """Create a member with an initial password. Duplicate emails are rejected with 409."""
    info = await user_service.create_user(session, body, auth)
    return TeamMemberResponse(data=TeamMember(**info))


@router.patch("", response_model=TeamMemberResponse)
async def update_member(
    body: TeamUpdateRequest,
    user_id: Optional[uuid.UUID] = Query(None, alias="userId"),
    action: Optional[str] = Query(None),
    auth: AuthenticatedUser = Depends(require_lead),
    session: AsyncSession = Depends(get_session),
):
    info = await user_service.update_member(session, user_id, action, body, auth)
    return TeamMemberResponse(data=TeamMember(**info))


@router.delete("", response_model=SuccessResponse)
async def delete_member(
    user_id: Optional[uuid.UUID] = Query(None, alias="userId"),
    auth: AuthenticatedUser = Depends(require_lead),
    session: AsyncSession = Depends(get_session),
):
    """Delete a member and their role. A lead cannot delete themselves."""
    await user_service.delete_member(session, user_id, auth)
    return SuccessResponse()
