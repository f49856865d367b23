"""Budget schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, UUID4

from .common import BudgetStatus, PatchModel, PeriodType


class BudgetCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    period_type: PeriodType = PeriodType.MONTH
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_budget_amount: Optional[float] = Field(default=None, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    status: BudgetStatus = BudgetStatus.DRAFT


class BudgetUpdate(PatchModel):
    non_nullable = ("name", "period_type", "currency", "status")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    period_type: Optional[PeriodType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_budget_amount: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    status: Optional[BudgetStatus] = None


class BudgetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    name: str
    period_type: PeriodType
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_budget_amount: Optional[float] = None
    currency: str
    status: BudgetStatus
    created_by: UUID4
    created_at: datetime
    updated_at: datetime


class BudgetResponse(BaseModel):
    data: BudgetRead


class BudgetListResponse(BaseModel):
    data: List[BudgetRead]
