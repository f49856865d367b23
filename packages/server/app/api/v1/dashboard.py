"""
Dashboard endpoint.

GET /api/v1/dashboard    Counters and recent tasks, scoped to what the caller can see
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.services import dashboard as dashboard_service
from opsdesk_shared.schemas.dashboard import DashboardResponse

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(auth: AuthenticatedUser = Depends(get_authenticated_user)):
    data = await dashboard_service.get_dashboard(auth)
    return DashboardResponse(data=data)
