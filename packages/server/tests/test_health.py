"""
Health check endpoint tests.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Health endpoint should return status ok without credentials."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_openapi_lists_resource_routes(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    for path in ("/api/v1/budgets", "/api/v1/invoices", "/api/v1/tasks", "/api/v1/notes",
                 "/api/v1/team", "/api/v1/dashboard", "/auth/login"):
        assert path in paths


def test_run_serves_on_configured_address(monkeypatch):
    import uvicorn

    from app.core.config import get_settings
    from app.main import run

    calls = {}
    monkeypatch.setattr(uvicorn, "run", lambda target, **kwargs: calls.update(target=target, **kwargs))
    run()

    settings = get_settings()
    assert calls["target"] == "app.main:app"
    assert calls["host"] == settings.host
    assert calls["port"] == settings.port
