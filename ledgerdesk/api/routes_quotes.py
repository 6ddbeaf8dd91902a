"""Quote endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ledgerdesk.api.dependencies import QuoteServiceDep
from ledgerdesk.models import schemas

router = APIRouter(tags=["quotes"])


@router.post("", response_model=schemas.QuoteOut, status_code=201)
def create_quote(data: schemas.QuoteCreate, service: QuoteServiceDep):
    return service.create_quote(data)


@router.get("", response_model=list[schemas.QuoteOut])
def list_quotes(
    service: QuoteServiceDep,
    status: str | None = Query(None, description="Filter by status"),
):
    return service.list_quotes(status=status)


@router.get("/{quote_id}", response_model=schemas.QuoteOut)
def get_quote(quote_id: int, service: QuoteServiceDep):
    return service.get_quote(quote_id)


@router.put("/{quote_id}", response_model=schemas.QuoteOut)
def update_quote(quote_id: int, data: schemas.QuoteUpdate, service: QuoteServiceDep):
    """Edit a quote; converted quotes answer 409."""
    return service.update_quote(quote_id, data)


@router.patch("/{quote_id}/status", response_model=schemas.QuoteOut)
def update_quote_status(quote_id: int, data: schemas.QuoteStatusUpdate, service: QuoteServiceDep):
    return service.update_status(quote_id, data.status)


@router.post("/{quote_id}/convert", response_model=schemas.InvoiceOut, status_code=201)
def convert_quote(quote_id: int, service: QuoteServiceDep):
    """Turn an accepted quote into a Draft invoice."""
    return service.convert_quote_to_invoice(quote_id)


@router.delete("/{quote_id}", status_code=204)
def delete_quote(quote_id: int, service: QuoteServiceDep):
    service.delete_quote(quote_id)
    return Response(status_code=204)
