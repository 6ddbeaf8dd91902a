"""Customer endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ledgerdesk.api.dependencies import CustomerServiceDep
from ledgerdesk.models import schemas

router = APIRouter(tags=["customers"])


@router.post("", response_model=schemas.CustomerOut, status_code=201)
def create_customer(data: schemas.CustomerCreate, service: CustomerServiceDep):
    return service.create_customer(data)


@router.get("", response_model=list[schemas.CustomerOut])
def list_customers(
    service: CustomerServiceDep,
    search: str | None = Query(None, description="Search by name, email or customer ID"),
):
    return service.list_customers(search=search)


@router.get("/{public_customer_id}", response_model=schemas.CustomerOut)
def get_customer(public_customer_id: str, service: CustomerServiceDep):
    return service.get_customer(public_customer_id)


@router.put("/{public_customer_id}", response_model=schemas.CustomerOut)
def update_customer(public_customer_id: str, data: schemas.CustomerUpdate, service: CustomerServiceDep):
    return service.update_customer(public_customer_id, data)


@router.delete("/{public_customer_id}", status_code=204)
def delete_customer(public_customer_id: str, service: CustomerServiceDep):
    service.delete_customer(public_customer_id)
    return Response(status_code=204)
