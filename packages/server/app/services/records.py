"""
Record service layer: policy-checked CRUD shared by budgets, invoices, tasks
and notes.

Every entry point takes the resolved caller and the resource's Policy:
- list applies the policy's read predicate inside the query
- create checks the create rule before touching the payload, then stamps created_by
- update/delete load the stored record, check it, then write (read → check → write)
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional, Sequence, TypeVar

import structlog
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from app.core.auth import AuthenticatedUser
from app.core.errors import NotFound, ValidationError
from app.core.policies import Action, Policy, authorize
from opsdesk_shared.schemas.common import PatchModel

log = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=SQLModel)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _column_values(payload: BaseModel) -> dict:
    data = payload.model_dump()
    return {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}


def require_id(record_id: Optional[uuid.UUID], policy: Policy) -> uuid.UUID:
    if record_id is None:
        raise ValidationError(f"{policy.entity.capitalize()} ID required")
    return record_id


async def get_record_or_404(
    session: AsyncSession,
    model: type[ModelT],
    record_id: uuid.UUID,
    policy: Policy,
) -> ModelT:
    record = await session.get(model, record_id)
    if record is None:
        raise NotFound(f"{policy.entity.capitalize()} not found")
    return record


def scoped_select(model: type[ModelT], policy: Policy, caller: AuthenticatedUser):
    """SELECT over ``model`` restricted to the caller's read scope."""
    stmt = select(model)
    predicate = policy.read_filter(model, caller)
    if predicate is not None:
        stmt = stmt.where(predicate)
    return stmt


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def list_records(
    session: AsyncSession,
    model: type[ModelT],
    policy: Policy,
    caller: AuthenticatedUser,
    limit: Optional[int] = None,
) -> Sequence[ModelT]:
    """Newest first; ties broken by id so the order is deterministic."""
    stmt = scoped_select(model, policy, caller).order_by(
        model.created_at.desc(), model.id.asc()
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return result.scalars().all()


async def create_record(
    session: AsyncSession,
    model: type[ModelT],
    policy: Policy,
    caller: AuthenticatedUser,
    payload: BaseModel,
) -> ModelT:
    authorize(policy, caller, Action.CREATE)

    record = model(**_column_values(payload), created_by=caller.user_id)
    session.add(record)
    await session.commit()
    await session.refresh(record)

    log.info(
        f"{policy.entity}.created",
        record_id=str(record.id),
        user_id=str(caller.user_id),
    )
    return record


async def update_record(
    session: AsyncSession,
    model: type[ModelT],
    policy: Policy,
    caller: AuthenticatedUser,
    record_id: Optional[uuid.UUID],
    patch: PatchModel,
) -> ModelT:
    record_id = require_id(record_id, policy)
    record = await get_record_or_404(session, model, record_id, policy)
    authorize(policy, caller, Action.UPDATE, record)

    changes = patch.changes()
    for key, value in changes.items():
        setattr(record, key, value)

    session.add(record)
    await session.commit()
    await session.refresh(record)

    log.info(
        f"{policy.entity}.updated",
        record_id=str(record.id),
        user_id=str(caller.user_id),
        fields=sorted(changes),
    )
    return record


async def delete_record(
    session: AsyncSession,
    model: type[ModelT],
    policy: Policy,
    caller: AuthenticatedUser,
    record_id: Optional[uuid.UUID],
) -> None:
    record_id = require_id(record_id, policy)
    record = await get_record_or_404(session, model, record_id, policy)
    authorize(policy, caller, Action.DELETE, record)

    await session.delete(record)
    await session.commit()

    log.info(
        f"{policy.entity}.deleted",
        record_id=str(record_id),
        user_id=str(caller.user_id),
    )
