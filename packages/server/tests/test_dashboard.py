"""
Dashboard aggregation tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from httpx import AsyncClient

from app.core.auth import AuthenticatedUser
from app.models.budget import Budget
from app.models.invoice import Invoice
from app.models.note import Note
from app.models.task import Task
from app.services.dashboard import get_dashboard
from opsdesk_shared.schemas.common import Role

from conftest import insert


async def _seed(lead, alice):
    await insert(
        Budget(name="B1", status="active", created_by=lead.id),
        Budget(name="B2", status="draft", created_by=lead.id),
        Budget(name="B3", status="closed", created_by=lead.id),
    )
    await insert(
        Invoice(vendor_name="Acme", status="unpaid", assigned_user_id=alice.id, created_by=lead.id),
        Invoice(vendor_name="Globex", status="unpaid", created_by=lead.id),
    )
    tasks = []
    for i, status in enumerate(["done", "done", "backlog", "in_progress", "blocked"]):
        tasks.append(await insert(Task(title=f"t{i}", status=status, created_by=lead.id)))
    await insert(Note(title="n", created_by=alice.id))
    return tasks


class TestDashboardEndpoint:
    @pytest.mark.asyncio
    async def test_lead_counters(self, client: AsyncClient, lead, alice):
        tasks = await _seed(lead, alice)

        resp = await client.get("/api/v1/dashboard", headers=lead.headers)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["stats"] == {
            "totalBudgets": 3,
            "activeBudgets": 1,
            "totalInvoices": 2,
            "unpaidInvoices": 2,
            "totalTasks": 5,
            "pendingTasks": 3,
            "totalNotes": 1,
            "teamMembers": 2,
        }
        recent_ids = [t["id"] for t in data["recentItems"]]
        assert recent_ids == [str(t.id) for t in reversed(tasks)]

    @pytest.mark.asyncio
    async def test_non_lead_counters_are_scoped(self, client: AsyncClient, lead, alice):
        await _seed(lead, alice)
        mine = await insert(Task(title="mine", assignee_user_id=alice.id, created_by=lead.id))

        resp = await client.get("/api/v1/dashboard", headers=alice.headers)
        data = resp.json()["data"]
        stats = data["stats"]
        assert stats["totalBudgets"] == 3
        assert stats["totalInvoices"] == 1
        assert stats["unpaidInvoices"] == 1
        assert stats["totalTasks"] == 1
        assert stats["pendingTasks"] == 1
        assert stats["totalNotes"] == 1
        assert stats["teamMembers"] == 2
        assert [t["id"] for t in data["recentItems"]] == [str(mine.id)]

    @pytest.mark.asyncio
    async def test_recent_items_bounded(self, client: AsyncClient, lead):
        for i in range(8):
            await insert(Task(title=f"t{i}", created_by=lead.id))

        resp = await client.get("/api/v1/dashboard", headers=lead.headers)
        assert len(resp.json()["data"]["recentItems"]) == 5

    @pytest.mark.asyncio
    async def test_empty(self, client: AsyncClient, lead):
        resp = await client.get("/api/v1/dashboard", headers=lead.headers)
        data = resp.json()["data"]
        assert data["recentItems"] == []
        assert data["stats"]["totalTasks"] == 0
        assert data["stats"]["teamMembers"] == 1


class _FailingSession:
    bind = SimpleNamespace(dialect=SimpleNamespace(name="sqlite"))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, stmt):
        raise RuntimeError("database unavailable")


class _Result:
    def __init__(self, value):
        self._value = value

    def scalar_one(self):
        return self._value

    def scalars(self):
        return SimpleNamespace(all=lambda: [])


class _RecordingSession:
    """Stands in for a PostgreSQL session and records what each one executes."""

    bind = SimpleNamespace(dialect=SimpleNamespace(name="postgresql"))
    snapshot_id = "00000003-0000001B-1"

    def __init__(self, opened: list):
        self.events: list = []
        opened.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def connection(self, execution_options=None):
        self.events.append(("begin", execution_options["isolation_level"]))

    async def execute(self, stmt):
        sql = str(stmt)
        self.events.append(("sql", sql))
        if "pg_export_snapshot" in sql:
            return _Result(self.snapshot_id)
        return _Result(0)


class TestDashboardService:
    @pytest.mark.asyncio
    async def test_any_failure_fails_whole_call(self):
        caller = AuthenticatedUser(user_id=uuid.uuid4(), role=Role.LEAD)
        with pytest.raises(RuntimeError):
            await get_dashboard(caller, session_factory=_FailingSession)

    @pytest.mark.asyncio
    async def test_custom_recent_limit(self, lead):
        for i in range(4):
            await insert(Task(title=f"t{i}", created_by=lead.id))
        caller = AuthenticatedUser(user_id=lead.id, role=Role.LEAD)

        result = await get_dashboard(caller, recent_limit=2)
        assert len(result.recent_items) == 2
        assert result.stats.total_tasks == 4


@pytest.mark.asyncio
async def test_recent_items_tie_order_is_by_id(client: AsyncClient, lead):
    stamp = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)
    ids = sorted(uuid.uuid4() for _ in range(3))
    for task_id in reversed(ids):
        await insert(Task(id=task_id, title=str(task_id), created_at=stamp, created_by=lead.id))

    resp = await client.get("/api/v1/dashboard", headers=lead.headers)
    assert [t["id"] for t in resp.json()["data"]["recentItems"]] == [str(i) for i in ids]


@pytest.mark.asyncio
async def test_postgres_sub_queries_share_one_snapshot():
    opened: list[_RecordingSession] = []
    caller = AuthenticatedUser(user_id=uuid.uuid4(), role=Role.LEAD)

    result = await get_dashboard(caller, session_factory=lambda: _RecordingSession(opened))
    assert result.stats.total_tasks == 0

    exporter, *readers = opened
    assert exporter.events == [
        ("begin", "REPEATABLE READ"),
        ("sql", "SELECT pg_export_snapshot()"),
    ]
    # eight counters plus the recent-task list
    assert len(readers) == 9
    for reader in readers:
        assert reader.events[0] == ("begin", "REPEATABLE READ")
        assert reader.events[1] == ("sql", "SET TRANSACTION SNAPSHOT '00000003-0000001B-1'")
        assert len(reader.events) == 3
