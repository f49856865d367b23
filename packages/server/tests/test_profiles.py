"""
Profile directory and self-service profile tests.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_directory_lists_everyone(client: AsyncClient, lead, alice):
    resp = await client.get("/api/v1/profiles", headers=alice.headers)
    assert resp.status_code == 200
    entries = resp.json()["data"]
    assert {e["id"] for e in entries} == {str(lead.id), str(alice.id)}
    assert set(entries[0]) == {"id", "email", "full_name"}


@pytest.mark.asyncio
async def test_me_includes_role(client: AsyncClient, lead):
    resp = await client.get("/api/v1/profiles/me", headers=lead.headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == str(lead.id)
    assert data["role"] == "lead"


@pytest.mark.asyncio
async def test_update_me(client: AsyncClient, alice):
    resp = await client.patch(
        "/api/v1/profiles/me",
        json={"full_name": "Alice Example", "avatar_url": "https://example.com/a.png"},
        headers=alice.headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["full_name"] == "Alice Example"
    assert data["avatar_url"] == "https://example.com/a.png"
    assert data["role"] == "non_lead"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["role", "status", "email"])
async def test_update_me_cannot_escalate(client: AsyncClient, alice, field):
    resp = await client.patch("/api/v1/profiles/me", json={field: "lead"}, headers=alice.headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": f"Unknown field: {field}"}
