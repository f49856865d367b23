"""
Authentication and identity resolution for Ops Desk.

Supports:
- Email/Password credentials (bcrypt hashes)
- JWT bearer tokens issued by /auth/login
- Per-request identity + role resolution (role is never cached)
- Role-based authorization dependencies
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.config import get_settings
from app.core.database import get_session
from app.core.errors import Forbidden, Unauthenticated
from app.models.user import User
from app.models.user_role import UserRole
from opsdesk_shared.schemas.common import MAX_PASSWORD_BYTES, Role, UserStatus

log = structlog.get_logger()
settings = get_settings()

authorization_header = APIKeyHeader(name="Authorization", auto_error=False)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with cost factor 12."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash.

    Input longer than bcrypt's 72-byte limit can never have been stored, so it
    simply fails to match.
    """
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode())


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: uuid.UUID,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed bearer token for a user.

    The token carries identity only; the role is looked up on every request
    so that role changes take effect immediately.
    """
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": exp,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise Unauthenticated()
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthenticated()
    return token


# ---------------------------------------------------------------------------
# Identity resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller's identity for the duration of one request."""

    user_id: uuid.UUID
    role: Role
    email: str = ""

    @property
    def is_lead(self) -> bool:
        return self.role == Role.LEAD


async def get_role(session: AsyncSession, user_id: uuid.UUID) -> Role:
    """Look up a user's role; a missing role row means non_lead."""
    result = await session.execute(
        select(UserRole.role).where(UserRole.user_id == user_id)
    )
    role = result.scalar_one_or_none()
    return Role(role) if role else Role.NON_LEAD


async def resolve_identity(token: str, session: AsyncSession) -> AuthenticatedUser:
    """Resolve a bearer token to the caller's identity and current role."""
    try:
        payload = decode_jwt(token)
        user_id = uuid.UUID(str(payload["sub"]))
    except (jwt.PyJWTError, KeyError, ValueError):
        raise Unauthenticated()

    user = await session.get(User, user_id)
    if not user:
        raise Unauthenticated()
    if user.status != UserStatus.ACTIVE.value:
        log.info("auth.inactive_user", user_id=str(user_id))
        raise Unauthenticated()

    role = await get_role(session, user_id)
    return AuthenticatedUser(user_id=user.id, role=role, email=user.email)


# ---------------------------------------------------------------------------
# Authentication / authorization dependencies
# ---------------------------------------------------------------------------

async def get_authenticated_user(
    authorization: Optional[str] = Depends(authorization_header),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedUser:
    """Main authentication dependency: Bearer JWT → AuthenticatedUser."""
    token = parse_bearer(authorization)
    return await resolve_identity(token, session)


async def require_lead(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
) -> AuthenticatedUser:
    """Requires the lead role."""
    if not auth.is_lead:
        raise Forbidden()
    return auth
