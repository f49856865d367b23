"""Budget model."""

from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatorMixin, TimestampMixin, UUIDMixin


class Budget(UUIDMixin, TimestampMixin, CreatorMixin, SQLModel, table=True):
    __tablename__ = "budgets"

    name: str = Field(nullable=False)
    period_type: str = Field(nullable=False, default="month")  # month | quarter | year | custom
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_budget_amount: Optional[float] = None
    currency: str = Field(nullable=False, default="USD")
    status: str = Field(nullable=False, default="draft", index=True)  # draft | active | closed
