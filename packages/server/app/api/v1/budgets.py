"""
Budget endpoints.

GET    /api/v1/budgets           List budgets (every member)
POST   /api/v1/budgets           Create a budget (lead only)
PATCH  /api/v1/budgets?id=<id>   Update a budget (lead only)
DELETE /api/v1/budgets?id=<id>   Delete a budget (lead only)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.core.database import get_session
from app.core.policies import BUDGETS, create_body, require_create
from app.models.budget import Budget
from app.services import records
from opsdesk_shared.schemas.budgets import (
    BudgetCreate,
    BudgetListResponse,
    BudgetRead,
    BudgetResponse,
    BudgetUpdate,
)
from opsdesk_shared.schemas.common import SuccessResponse

router = APIRouter()


@router.get("", response_model=BudgetListResponse)
async def list_budgets(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    rows = await records.list_records(session, Budget, BUDGETS, auth)
    return BudgetListResponse(data=[BudgetRead.model_validate(r) for r in rows])


@router.post("", response_model=BudgetResponse, status_code=201)
async def create_budget(
    auth: AuthenticatedUser = Depends(require_create(BUDGETS)),
    body: BudgetCreate = Depends(create_body(BUDGETS, BudgetCreate)),
    session: AsyncSession = Depends(get_session),
):
    budget = await records.create_record(session, Budget, BUDGETS, auth, body)
    return BudgetResponse(data=BudgetRead.model_validate(budget))


@router.patch("", response_model=BudgetResponse)
async def update_budget(
    body: BudgetUpdate,
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    budget = await records.update_record(session, Budget, BUDGETS, auth, record_id, body)
    return BudgetResponse(data=BudgetRead.model_validate(budget))


@router.delete("", response_model=SuccessResponse)
async def delete_budget(
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    await records.delete_record(session, Budget, BUDGETS, auth, record_id)
    return SuccessResponse()
