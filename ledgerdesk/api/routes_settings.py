from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ledgerdesk.api.dependencies import DbDep, IssuingEntityServiceDep, PaymentSourceServiceDep
from ledgerdesk.models import schemas
from ledgerdesk.services import settings_service
from ledgerdesk.services.exchange_rate import get_base_currency

router = APIRouter(tags=["settings"])


@router.get("", response_model=schemas.SettingsOut)
def read_settings(db: DbDep):
    """Current settings; defaults are reported until the row is first saved."""
    row = settings_service.get_app_settings(db)
    if row is not None:
        return row
    return schemas.SettingsOut(
        base_currency=get_base_currency(db),
        default_tax_percentage=settings_service.DEFAULT_TAX_PERCENTAGE,
        default_quote_expiry_days=settings_service.DEFAULT_QUOTE_EXPIRY_DAYS,
        default_invoice_payment_terms_days=settings_service.DEFAULT_INVOICE_PAYMENT_TERMS_DAYS,
    )


@router.put("", response_model=schemas.SettingsOut)
def write_settings(data: schemas.SettingsUpdate, db: DbDep):
    return settings_service.update_app_settings(db, data)


# ── Issuing entities ────────────────────────────────────────────────

@router.post("/entities", response_model=schemas.IssuingEntityOut, status_code=201)
def create_entity(data: schemas.IssuingEntityCreate, service: IssuingEntityServiceDep):
    return service.create_entity(data)


@router.get("/entities", response_model=list[schemas.IssuingEntityOut])
def list_entities(service: IssuingEntityServiceDep):
    return service.list_entities()


@router.get("/entities/{entity_id}", response_model=schemas.IssuingEntityOut)
def get_entity(entity_id: int, service: IssuingEntityServiceDep):
    return service.get_entity(entity_id)


@router.put("/entities/{entity_id}", response_model=schemas.IssuingEntityOut)
def update_entity(entity_id: int, data: schemas.IssuingEntityUpdate, service: IssuingEntityServiceDep):
    return service.update_entity(entity_id, data)


@router.delete("/entities/{entity_id}", status_code=204)
def delete_entity(entity_id: int, service: IssuingEntityServiceDep):
    service.delete_entity(entity_id)
    return Response(status_code=204)


# ── Payment sources ─────────────────────────────────────────────────

@router.post("/payment-sources", response_model=schemas.PaymentSourceOut, status_code=201)
def create_payment_source(data: schemas.PaymentSourceCreate, service: PaymentSourceServiceDep):
    return service.create_payment_source(data)


@router.get("/payment-sources", response_model=list[schemas.PaymentSourceOut])
def list_payment_sources(
    service: PaymentSourceServiceDep,
    issuing_entity_id: int | None = Query(None, description="Only sources of this entity"),
):
    return service.list_payment_sources(issuing_entity_id=issuing_entity_id)


@router.get("/payment-sources/{payment_source_id}", response_model=schemas.PaymentSourceOut)
def get_payment_source(payment_source_id: int, service: PaymentSourceServiceDep):
    return service.get_payment_source(payment_source_id)


@router.put("/payment-sources/{payment_source_id}", response_model=schemas.PaymentSourceOut)
def update_payment_source(
    payment_source_id: int, data: schemas.PaymentSourceUpdate, service: PaymentSourceServiceDep
):
    return service.update_payment_source(payment_source_id, data)


@router.delete("/payment-sources/{payment_source_id}", status_code=204)
def delete_payment_source(payment_source_id: int, service: PaymentSourceServiceDep):
    service.delete_payment_source(payment_source_id)
    return Response(status_code=204)
