"""Product endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ledgerdesk.api.dependencies import ProductServiceDep
from ledgerdesk.models import schemas
from ledgerdesk.models.schemas.product import ProductStatusLiteral

router = APIRouter(tags=["products"])


@router.post("", response_model=schemas.ProductOut, status_code=201)
def create_product(data: schemas.ProductCreate, service: ProductServiceDep):
    """Create a product; the SKU is generated server-side."""
    return service.create_product(data)


@router.get("", response_model=list[schemas.ProductOut])
def list_products(
    service: ProductServiceDep,
    status: ProductStatusLiteral | None = Query(None, description="Filter by status"),
    search: str | None = Query(None, description="Search by name or SKU"),
):
    return service.list_products(status=status, search=search)


@router.get("/{sku}", response_model=schemas.ProductOut)
def get_product(sku: str, service: ProductServiceDep):
    return service.get_product(sku)


@router.put("/{sku}", response_model=schemas.ProductOut)
def update_product(sku: str, data: schemas.ProductUpdate, service: ProductServiceDep):
    return service.update_product(sku, data)


@router.delete("/{sku}", status_code=204)
def delete_product(sku: str, service: ProductServiceDep):
    service.delete_product(sku)
    return Response(status_code=204)
