"""
Invoice endpoints.

GET    /api/v1/invoices           List invoices (non-leads see invoices assigned to them)
POST   /api/v1/invoices           Create an invoice (lead only)
PATCH  /api/v1/invoices?id=<id>   Update an invoice (lead only)
DELETE /api/v1/invoices?id=<id>   Delete an invoice (lead only)
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.core.database import get_session
from app.core.policies import INVOICES, create_body, require_create
from app.models.invoice import Invoice
from app.services import records
from opsdesk_shared.schemas.invoices import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoiceRead,
    InvoiceResponse,
    InvoiceUpdate,
)
from opsdesk_shared.schemas.common import SuccessResponse

router = APIRouter()


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Leads see every invoice; everyone else only those assigned to them."""
    rows = await records.list_records(session, Invoice, INVOICES, auth)
    return InvoiceListResponse(data=[InvoiceRead.model_validate(r) for r in rows])


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    auth: AuthenticatedUser = Depends(require_create(INVOICES)),
    body: InvoiceCreate = Depends(create_body(INVOICES, InvoiceCreate)),
    session: AsyncSession = Depends(get_session),
):
    invoice = await records.create_record(session, Invoice, INVOICES, auth, body)
    return InvoiceResponse(data=InvoiceRead.model_validate(invoice))


@router.patch("", response_model=InvoiceResponse)
async def update_invoice(
    body: InvoiceUpdate,
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    invoice = await records.update_record(session, Invoice, INVOICES, auth, record_id, body)
    return InvoiceResponse(data=InvoiceRead.model_validate(invoice))


@router.delete("", response_model=SuccessResponse)
async def delete_invoice(
    record_id: Optional[uuid.UUID] = Query(None, alias="id"),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    await records.delete_record(session, Invoice, INVOICES, auth, record_id)
    return SuccessResponse()
