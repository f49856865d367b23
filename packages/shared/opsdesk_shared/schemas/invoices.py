"""Invoice schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, UUID4

from .common import InvoiceStatus, PatchModel


class InvoiceCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    vendor_name: str = Field(min_length=1, max_length=200)
    client_name: Optional[str] = None
    invoice_number: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    status: InvoiceStatus = InvoiceStatus.UNPAID
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_user_id: Optional[UUID4] = None
    linked_budget_id: Optional[UUID4] = None
    linked_category_id: Optional[UUID4] = None


class InvoiceUpdate(PatchModel):
    non_nullable = ("vendor_name", "status")

    vendor_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    client_name: Optional[str] = None
    invoice_number: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    status: Optional[InvoiceStatus] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_user_id: Optional[UUID4] = None
    linked_budget_id: Optional[UUID4] = None
    linked_category_id: Optional[UUID4] = None


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    vendor_name: str
    client_name: Optional[str] = None
    invoice_number: Optional[str] = None
    amount: Optional[float] = None
    status: InvoiceStatus
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_user_id: Optional[UUID4] = None
    linked_budget_id: Optional[UUID4] = None
    linked_category_id: Optional[UUID4] = None
    created_by: UUID4
    created_at: datetime
    updated_at: datetime


class InvoiceResponse(BaseModel):
    data: InvoiceRead


class InvoiceListResponse(BaseModel):
    data: List[InvoiceRead]
