"""
Authentication endpoints.

- Email/Password login issuing a bearer JWT
- First-run bootstrap creating the initial lead account
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import create_jwt, get_role, verify_password
from app.core.database import get_session
from app.core.errors import Conflict, Unauthenticated
from app.models.user import User
from app.services.users import add_user
from opsdesk_shared.schemas.common import Role, UserStatus, check_password_bytes

log = structlog.get_logger()
router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class BootstrapRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)
    full_name: str | None = Field(default=None, max_length=200)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: Role


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    """Authenticate with email/password and receive a bearer token."""
    result = await session.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if not user or not user.password_hash:
        raise Unauthenticated("Invalid email or password")

    if not verify_password(body.password, user.password_hash):
        log.warning("auth.login_failure", email=body.email, reason="bad_password")
        raise Unauthenticated("Invalid email or password")

    if user.status != UserStatus.ACTIVE.value:
        log.warning("auth.login_failure", email=body.email, reason="inactive")
        raise Unauthenticated("Account is inactive")

    role = await get_role(session, user.id)
    token = create_jwt(user.id)

    log.info("auth.login_success", user_id=str(user.id))
    return TokenResponse(access_token=token, user_id=str(user.id), role=role)


@router.post("/bootstrap", response_model=TokenResponse, status_code=201)
async def bootstrap(
    body: BootstrapRequest,
    session: AsyncSession = Depends(get_session),
):
    """Create the first account as a lead. Refused once any user exists."""
    result = await session.execute(select(func.count()).select_from(User))
    if result.scalar_one() > 0:
        raise Conflict("Already bootstrapped")

    user = await add_user(session, body.email, body.password, body.full_name, Role.LEAD)
    await session.commit()

    log.info("auth.bootstrapped", user_id=str(user.id))
    return TokenResponse(
        access_token=create_jwt(user.id),
        user_id=str(user.id),
        role=Role.LEAD,
    )
