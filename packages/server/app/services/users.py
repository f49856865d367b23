"""
Team service: member directory, role/status management and user lifecycle.

Every mutation here is lead-only (TEAM policy); a lead may not delete,
deactivate or demote their own account.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import AuthenticatedUser, get_role, hash_password
from app.core.config import get_settings
from app.core.errors import Conflict, InvalidOperation, NotFound, ValidationError
from app.core.policies import TEAM, Action, authorize
from app.models.user import User
from app.models.user_role import UserRole
from opsdesk_shared.schemas.common import Role, UserStatus, check_password_bytes
from opsdesk_shared.schemas.users import (
    ProfileUpdateRequest,
    TeamAction,
    TeamUpdateRequest,
    UserCreateRequest,
)

log = structlog.get_logger()
settings = get_settings()


def _member_info(user: User, role: Optional[str]) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "avatar_url": user.avatar_url,
        "status": user.status,
        "role": role or Role.NON_LEAD.value,
        "created_at": user.created_at,
    }


async def _get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


async def _get_role_row(session: AsyncSession, user_id: uuid.UUID) -> Optional[UserRole]:
    result = await session.execute(select(UserRole).where(UserRole.user_id == user_id))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_team(session: AsyncSession) -> list[dict]:
    """Every profile with its role, newest first (missing role → non_lead)."""
    result = await session.execute(
        select(User, UserRole.role)
        .outerjoin(UserRole, UserRole.user_id == User.id)
        .order_by(User.created_at.desc(), User.id.asc())
    )
    return [_member_info(user, role) for user, role in result.all()]


async def get_member(session: AsyncSession, user_id: uuid.UUID) -> dict:
    user = await _get_user_or_404(session, user_id)
    role = await get_role(session, user_id)
    return _member_info(user, role.value)


async def list_profiles(session: AsyncSession) -> list[User]:
    result = await session.execute(
        select(User).order_by(User.created_at.desc(), User.id.asc())
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def add_user(
    session: AsyncSession,
    email: str,
    password: str,
    full_name: Optional[str],
    role: Role,
) -> User:
    """Insert a User and its role row. Caller commits."""
    if len(password) < settings.min_password_length:
        raise ValidationError(
            f"Password must be at least {settings.min_password_length} characters"
        )
    try:
        check_password_bytes(password)
    except ValueError as exc:
        raise ValidationError(str(exc))

    result = await session.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise Conflict("Email already registered")

    user = User(
        email=email,
        full_name=full_name,
        status=UserStatus.ACTIVE.value,
        password_hash=hash_password(password),
    )
    session.add(user)
    await session.flush()
    session.add(UserRole(user_id=user.id, role=role.value))
    await session.flush()
    return user


async def create_user(
    session: AsyncSession,
    req: UserCreateRequest,
    caller: AuthenticatedUser,
) -> dict:
    """Create a team member with an initial password (lead only)."""
    authorize(TEAM, caller, Action.CREATE)

    user = await add_user(session, req.email, req.password, req.full_name, req.role)
    await session.commit()
    await session.refresh(user)

    log.info(
        "user.created",
        user_id=str(user.id),
        role=req.role.value,
        created_by=str(caller.user_id),
    )
    return _member_info(user, req.role.value)


async def update_member(
    session: AsyncSession,
    user_id: Optional[uuid.UUID],
    action: Optional[str],
    req: TeamUpdateRequest,
    caller: AuthenticatedUser,
) -> dict:
    """Apply a role or status change to a member (lead only)."""
    authorize(TEAM, caller, Action.UPDATE)
    if user_id is None:
        raise ValidationError("User ID required")
    try:
        team_action = TeamAction(action)
    except ValueError:
        raise ValidationError("Invalid action")

    user = await _get_user_or_404(session, user_id)
    role_row = await _get_role_row(session, user_id)

    if team_action is TeamAction.ROLE:
        if req.role is None:
            raise ValidationError("Missing required field: role")
        if user_id == caller.user_id and req.role != Role.LEAD:
            raise InvalidOperation("Cannot remove your own lead role")
        if role_row is None:
            role_row = UserRole(user_id=user_id, role=req.role.value)
        else:
            role_row.role = req.role.value
        session.add(role_row)
    else:
        if req.status is None:
            raise ValidationError("Missing required field: status")
        if user_id == caller.user_id and req.status != UserStatus.ACTIVE:
            raise InvalidOperation("Cannot deactivate your own account")
        user.status = req.status.value
        session.add(user)

    await session.commit()
    await session.refresh(user)

    log.info(
        "user.updated",
        user_id=str(user_id),
        action=team_action.value,
        updated_by=str(caller.user_id),
    )
    return _member_info(user, role_row.role if role_row else None)


async def delete_member(
    session: AsyncSession,
    user_id: Optional[uuid.UUID],
    caller: AuthenticatedUser,
) -> None:
    """Remove a user and their role row. Self-deletion is refused."""
    authorize(TEAM, caller, Action.DELETE)
    if user_id is None:
        raise ValidationError("User ID required")
    if user_id == caller.user_id:
        raise InvalidOperation("Cannot delete your own account")

    user = await _get_user_or_404(session, user_id)
    role_row = await _get_role_row(session, user_id)
    if role_row is not None:
        await session.delete(role_row)
    await session.delete(user)
    await session.commit()

    log.info("user.deleted", user_id=str(user_id), deleted_by=str(caller.user_id))


# ---------------------------------------------------------------------------
# Self-service
# ---------------------------------------------------------------------------


async def update_profile(
    session: AsyncSession,
    req: ProfileUpdateRequest,
    caller: AuthenticatedUser,
) -> dict:
    user = await _get_user_or_404(session, caller.user_id)
    changes = req.changes()
    for key, value in changes.items():
        setattr(user, key, value)
    session.add(user)
    await session.commit()
    await session.refresh(user)

    log.info("profile.updated", user_id=str(user.id), fields=sorted(changes))
    return _member_info(user, caller.role.value)
