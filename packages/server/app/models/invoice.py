"""Invoice model."""

from datetime import date
from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import CreatorMixin, TimestampMixin, UUIDMixin


class Invoice(UUIDMixin, TimestampMixin, CreatorMixin, SQLModel, table=True):
    __tablename__ = "invoices"

    vendor_name: str = Field(nullable=False)
    client_name: Optional[str] = None
    invoice_number: Optional[str] = None
    amount: Optional[float] = None
    status: str = Field(nullable=False, default="unpaid", index=True)  # unpaid | paid | overdue
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_user_id: Optional[uuid.UUID] = Field(default=None, index=True)
    linked_budget_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="budgets.id", ondelete="SET NULL"
    )
    linked_category_id: Optional[uuid.UUID] = None
