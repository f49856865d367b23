"""
Dashboard aggregation.

Each counter and the recent-task list is a separate query on its own
session; they run concurrently and are joined with ``asyncio.gather``. A
failure in any sub-query fails the whole call, so partial stats are never
returned.

On PostgreSQL the sub-queries read from one exported snapshot, so all numbers
describe the same instant. Other backends (SQLite in tests) read per statement.
"""

from __future__ import annotations

import asyncio
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

import structlog
from sqlalchemy import func, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core import database
from app.core.auth import AuthenticatedUser
from app.core.config import get_settings
from app.core.policies import BUDGETS, INVOICES, NOTES, TASKS, TEAM, Policy
from app.models.budget import Budget
from app.models.invoice import Invoice
from app.models.note import Note
from app.models.task import Task
from app.models.user import User
from app.services.records import list_records
from opsdesk_shared.schemas.common import BudgetStatus, InvoiceStatus, TaskStatus
from opsdesk_shared.schemas.dashboard import DashboardRead, DashboardStats
from opsdesk_shared.schemas.tasks import TaskRead

log = structlog.get_logger()
settings = get_settings()

SessionFactory = Callable[[], AsyncSession]

# pg_export_snapshot() ids look like 00000003-0000001B-1
_SNAPSHOT_ID = re.compile(r"^[0-9A-Fa-f]+(-[0-9A-Fa-f]+)+$")


@asynccontextmanager
async def _shared_snapshot(session_factory: SessionFactory) -> AsyncIterator[Optional[str]]:
    """Export a REPEATABLE READ snapshot for the sub-queries to import.

    Yields None on backends without snapshot export. The exporting transaction
    stays open until the block exits.
    """
    async with session_factory() as session:
        if session.bind.dialect.name != "postgresql":
            yield None
            return
        await session.connection(execution_options={"isolation_level": "REPEATABLE READ"})
        result = await session.execute(text("SELECT pg_export_snapshot()"))
        yield result.scalar_one()


@asynccontextmanager
async def _reader(
    session_factory: SessionFactory, snapshot_id: Optional[str]
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        if snapshot_id is not None:
            if not _SNAPSHOT_ID.match(snapshot_id):
                raise ValueError(f"Unexpected snapshot id: {snapshot_id!r}")
            await session.connection(execution_options={"isolation_level": "REPEATABLE READ"})
            await session.execute(text(f"SET TRANSACTION SNAPSHOT '{snapshot_id}'"))
        yield session


def _count_stmt(model: Any, policy: Policy, caller: AuthenticatedUser, *criteria):
    stmt = select(func.count(func.distinct(model.id))).select_from(model)
    predicate = policy.read_filter(model, caller)
    if predicate is not None:
        stmt = stmt.where(predicate)
    for criterion in criteria:
        stmt = stmt.where(criterion)
    return stmt


async def _scalar(session_factory: SessionFactory, snapshot_id: Optional[str], stmt) -> int:
    async with _reader(session_factory, snapshot_id) as session:
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)


async def _recent_tasks(
    session_factory: SessionFactory,
    snapshot_id: Optional[str],
    caller: AuthenticatedUser,
    limit: int,
) -> list[TaskRead]:
    async with _reader(session_factory, snapshot_id) as session:
        rows = await list_records(session, Task, TASKS, caller, limit=limit)
        return [TaskRead.model_validate(r) for r in rows]


async def get_dashboard(
    caller: AuthenticatedUser,
    session_factory: Optional[SessionFactory] = None,
    recent_limit: Optional[int] = None,
) -> DashboardRead:
    """Compute the caller's dashboard counters and most recent tasks."""
    factory = session_factory or database.async_session_factory
    limit = recent_limit if recent_limit is not None else settings.recent_items_limit

    counters = {
        "total_budgets": _count_stmt(Budget, BUDGETS, caller),
        "active_budgets": _count_stmt(
            Budget, BUDGETS, caller, Budget.status == BudgetStatus.ACTIVE.value
        ),
        "total_invoices": _count_stmt(Invoice, INVOICES, caller),
        "unpaid_invoices": _count_stmt(
            Invoice, INVOICES, caller, Invoice.status == InvoiceStatus.UNPAID.value
        ),
        "total_tasks": _count_stmt(Task, TASKS, caller),
        "pending_tasks": _count_stmt(
            Task, TASKS, caller, Task.status != TaskStatus.DONE.value
        ),
        "total_notes": _count_stmt(Note, NOTES, caller),
        "team_members": _count_stmt(User, TEAM, caller),
    }

    async with _shared_snapshot(factory) as snapshot_id:
        *values, recent = await asyncio.gather(
            *(_scalar(factory, snapshot_id, stmt) for stmt in counters.values()),
            _recent_tasks(factory, snapshot_id, caller, limit),
        )
    stats = DashboardStats(**dict(zip(counters, values)))

    log.debug("dashboard.computed", user_id=str(caller.user_id), recent=len(recent))
    return DashboardRead(stats=stats, recent_items=recent)
