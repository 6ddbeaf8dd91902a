"""Row builders shared by the test modules."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import httpx

from ledgerdesk.models import models


def add_rate(db, from_currency: str, to_currency: str, rate: str, created_at: dt.datetime | None = None):
    row = models.ExchangeRate(from_currency=from_currency, to_currency=to_currency, rate=Decimal(rate))
    if created_at is not None:
        row.created_at = created_at
    db.add(row)
    db.commit()
    return row


_invoice_seq = iter(range(10000, 99999))


def add_invoice(
    db,
    customer,
    issue_date: dt.date,
    total: str,
    currency: str | None = "USD",
    status: str = "Paid",
    due_date: dt.date | None = None,
    deleted: bool = False,
):
    """Insert an invoice row directly, bypassing totals computation."""
    invoice = models.Invoice(
        invoice_number=f"T{next(_invoice_seq)}",
        customer_id=customer.id,
        issue_date=issue_date,
        due_date=due_date or issue_date + dt.timedelta(days=30),
        currency_code=currency,
        status=status,
        subtotal_amount=Decimal(total),
        tax_percentage=Decimal("0"),
        tax_amount=Decimal("0"),
        total_amount=Decimal(total),
        deleted_at=dt.datetime.now(dt.timezone.utc) if deleted else None,
    )
    db.add(invoice)
    db.commit()
    return invoice


def fake_response(payload, status_code: int = 200, url: str = "http://testserver/api/fx") -> httpx.Response:
    return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url))




def add_entity(db, name: str = "Acme Holdings Ltd", is_primary: bool = False):
    entity = models.IssuingEntity(entity_name=name, is_primary=is_primary)
    db.add(entity)
    db.commit()
    return entity


def add_payment_source(db, entity, name: str = "Main account", currency: str = "USD", is_primary: bool = False):
    source = models.PaymentSource(
        name=name,
        currency_code=currency,
        issuing_entity_id=entity.id,
        is_primary_for_entity=is_primary,
    )
    db.add(source)
    db.commit()
    return source
