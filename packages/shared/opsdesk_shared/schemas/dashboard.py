"""Dashboard aggregation schemas (camelCase on the wire)."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .tasks import TaskRead


class DashboardStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_budgets: int = 0
    active_budgets: int = 0
    total_invoices: int = 0
    unpaid_invoices: int = 0
    total_tasks: int = 0
    pending_tasks: int = 0
    total_notes: int = 0
    team_members: int = 0


class DashboardRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    stats: DashboardStats
    recent_items: List[TaskRead]


class DashboardResponse(BaseModel):
    data: DashboardRead
