"""
Task endpoints.

GET    /api/v1/tasks           List tasks (non-leads see tasks they created or are assigned to)
POST   /api/v1/tasks           Create a task (any member)
PATCH  /api/v1/tasks?id=<id>   Update a task (assignee, creator or lead)
DELETE /api/v1/tasks?id=<id>   Delete a task (assignee, creator or lead)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.core.database import get_session
from app.core.policies import TASKS, create_body, require_create
from app.models.task import Task
from app.services import records
from opsdesk_shared.schemas.tasks import (
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskResponse,
    TaskUpdate,
)
from opsdesk_shared.schemas.common import SuccessResponse

router = APIRouter()


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """List tasks visible to the caller, newest first."""
    rows = await records.list_records(session, Task, TASKS, auth)
    return TaskListResponse(data=[TaskRead.model_validate(r) for r in rows])


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    auth: AuthenticatedUser = Depends(require_create(TASKS)),
    body: TaskCreate = Depends(create_body(TASKS, TaskCreate)),
    session: AsyncSession = Depends(get_session),
):
    """Create a task. Defaults: status=backlog, priority=medium."""
    task = await records.create_record(session, Task, TASKS, auth, body)
    return TaskResponse(data=TaskRead.model_validate(task))


@router.patch("", response_model=TaskResponse)
async def update_task(
    body: TaskUpdate,
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Partially update a task. Ownership is checked against the stored row."""
    task = await records.update_record(session, Task, TASKS, auth, record_id, body)
    return TaskResponse(data=TaskRead.model_validate(task))


@router.delete("", response_model=SuccessResponse)
async def delete_task(
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    await records.delete_record(session, Task, TASKS, auth, record_id)
    return SuccessResponse()
