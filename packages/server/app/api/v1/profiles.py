"""
Profile endpoints.

GET    /api/v1/profiles       Directory of users (id, email, full name)
GET    /api/v1/profiles/me    The caller's own profile and role
PATCH  /api/v1/profiles/me    Edit the caller's full name or avatar
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.core.database import get_session
from app.services import users as user_service
from opsdesk_shared.schemas.users import (
    ProfileListResponse,
    ProfileRead,
    ProfileUpdateRequest,
    TeamMember,
    TeamMemberResponse,
)

router = APIRouter()


@router.get("", response_model=ProfileListResponse)
async def list_profiles(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    users = await user_service.list_profiles(session)
    return ProfileListResponse(data=[ProfileRead.model_validate(u) for u in users])


@router.get("/me", response_model=TeamMemberResponse)
async def get_me(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    info = await user_service.get_member(session, auth.user_id)
    return TeamMemberResponse(data=TeamMember(**info))


@router.patch("/me", response_model=TeamMemberResponse)
async def update_me(
    body: ProfileUpdateRequest,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Update the caller's own profile fields."""
    info = await user_service.update_profile(session, body, auth)
    return TeamMemberResponse(data=TeamMember(**info))
