"""Invoice endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ledgerdesk.api.dependencies import InvoiceServiceDep
from ledgerdesk.models import schemas

router = APIRouter(tags=["invoices"])


@router.post("", response_model=schemas.InvoiceOut, status_code=201)
def create_invoice(data: schemas.InvoiceCreate, service: InvoiceServiceDep):
    return service.create_invoice(data)


@router.get("", response_model=list[schemas.InvoiceOut])
def list_invoices(
    service: InvoiceServiceDep,
    status: str | None = Query(None, description="Filter by status"),
):
    return service.list_invoices(status=status)


@router.get("/{invoice_id}", response_model=schemas.InvoiceOut)
def get_invoice(invoice_id: int, service: InvoiceServiceDep):
    return service.get_invoice(invoice_id)


@router.put("/{invoice_id}", response_model=schemas.InvoiceOut)
def update_invoice(invoice_id: int, data: schemas.InvoiceUpdate, service: InvoiceServiceDep):
    return service.update_invoice(invoice_id, data)


@router.patch("/{invoice_id}/status", response_model=schemas.InvoiceOut)
def update_invoice_status(invoice_id: int, data: schemas.InvoiceStatusUpdate, service: InvoiceServiceDep):
    return service.update_status(invoice_id, data.status)


@router.delete("/{invoice_id}", status_code=204)
def delete_invoice(invoice_id: int, service: InvoiceServiceDep):
    service.delete_invoice(invoice_id)
    return Response(status_code=204)
