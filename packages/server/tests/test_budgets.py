"""
Budget endpoint tests: everyone reads, only leads write.
"""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient

from app.models.budget import Budget

from conftest import insert

Q1_OPS = {
    "name": "Q1 Ops",
    "period_type": "month",
    "total_budget_amount": 10000,
    "currency": "USD",
    "status": "draft",
}


class TestCreateBudget:
    @pytest.mark.asyncio
    async def test_lead_creates_and_everyone_lists(self, client: AsyncClient, lead, alice):
        resp = await client.post("/api/v1/budgets", json=Q1_OPS, headers=lead.headers)
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["id"]
        assert data["status"] == "draft"
        assert data["created_by"] == str(lead.id)

        for member in (lead, alice):
            resp = await client.get("/api/v1/budgets", headers=member.headers)
            assert resp.status_code == 200
            assert [b["id"] for b in resp.json()["data"]] == [data["id"]]

    @pytest.mark.asyncio
    async def test_defaults(self, client: AsyncClient, lead):
        resp = await client.post("/api/v1/budgets", json={"name": "Misc"}, headers=lead.headers)
        data = resp.json()["data"]
        assert data["period_type"] == "month"
        assert data["currency"] == "USD"
        assert data["status"] == "draft"

    @pytest.mark.asyncio
    async def test_non_lead_forbidden(self, client: AsyncClient, alice):
        resp = await client.post("/api/v1/budgets", json=Q1_OPS, headers=alice.headers)
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}

    @pytest.mark.asyncio
    async def test_non_lead_forbidden_before_body_validation(self, client: AsyncClient, alice):
        resp = await client.post("/api/v1/budgets", json={}, headers=alice.headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_non_lead_forbidden_even_with_malformed_json(self, client: AsyncClient, alice):
        resp = await client.post(
            "/api/v1/budgets",
            content=b"{not json",
            headers={**alice.headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}

    @pytest.mark.asyncio
    async def test_unauthenticated_with_malformed_json(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/budgets",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_lead_malformed_json(self, client: AsyncClient, lead):
        resp = await client.post(
            "/api/v1/budgets",
            content=b"{not json",
            headers={**lead.headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body"}

    @pytest.mark.asyncio
    async def test_missing_name(self, client: AsyncClient, lead):
        resp = await client.post("/api/v1/budgets", json={"currency": "EUR"}, headers=lead.headers)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required field: name"}

    @pytest.mark.asyncio
    async def test_created_by_cannot_be_forged(self, client: AsyncClient, lead):
        body = {**Q1_OPS, "created_by": str(uuid.uuid4())}
        resp = await client.post("/api/v1/budgets", json=body, headers=lead.headers)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Unknown field: created_by"}


class TestUpdateBudget:
    @pytest.mark.asyncio
    async def test_lead_partial_update(self, client: AsyncClient, lead):
        budget = await insert(Budget(name="Q1 Ops", created_by=lead.id))
        resp = await client.patch(
            f"/api/v1/budgets?id={budget.id}", json={"status": "active"}, headers=lead.headers
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "active"
        assert data["name"] == "Q1 Ops"

    @pytest.mark.asyncio
    async def test_non_lead_forbidden(self, client: AsyncClient, lead, alice):
        budget = await insert(Budget(name="Q1 Ops", created_by=alice.id))
        resp = await client.patch(
            f"/api/v1/budgets?id={budget.id}", json={"name": "Mine"}, headers=alice.headers
        )
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_id(self, client: AsyncClient, lead):
        resp = await client.patch("/api/v1/budgets", json={"name": "X"}, headers=lead.headers)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Budget ID required"}

    @pytest.mark.asyncio
    async def test_unknown_id(self, client: AsyncClient, lead):
        resp = await client.patch(
            f"/api/v1/budgets?id={uuid.uuid4()}", json={"name": "X"}, headers=lead.headers
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Budget not found"}

    @pytest.mark.asyncio
    async def test_null_name_rejected(self, client: AsyncClient, lead):
        budget = await insert(Budget(name="Q1 Ops", created_by=lead.id))
        resp = await client.patch(
            f"/api/v1/budgets?id={budget.id}", json={"name": None}, headers=lead.headers
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client: AsyncClient, lead):
        budget = await insert(Budget(name="Q1 Ops", created_by=lead.id))
        resp = await client.patch(
            f"/api/v1/budgets?id={budget.id}", json={"status": "bogus"}, headers=lead.headers
        )
        assert resp.status_code == 400


class TestDeleteBudget:
    @pytest.mark.asyncio
    async def test_lead_deletes(self, client: AsyncClient, lead):
        budget = await insert(Budget(name="Q1 Ops", created_by=lead.id))
        resp = await client.delete(f"/api/v1/budgets?id={budget.id}", headers=lead.headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        resp = await client.get("/api/v1/budgets", headers=lead.headers)
        assert resp.json()["data"] == []

    @pytest.mark.asyncio
    async def test_non_lead_forbidden(self, client: AsyncClient, lead, alice):
        budget = await insert(Budget(name="Q1 Ops", created_by=lead.id))
        resp = await client.delete(f"/api/v1/budgets?id={budget.id}", headers=alice.headers)
        assert resp.status_code == 403
