"""Dashboard KPIs and work lists.

Every monetary figure is converted into the organisation base currency
before it is summed; documents in other currencies are never added up raw.
"""
from __future__ import annotations

import datetime as dt
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session, joinedload

from ledgerdesk.models import models
from ledgerdesk.models.schemas import (
    DashboardKpis,
    ExpiringQuoteOut,
    MoneyKpi,
    OverdueInvoiceOut,
    RecentItemOut,
    TopProductOut,
)
from ledgerdesk.services.document_totals import quantize_money
from ledgerdesk.services.exchange_rate import convert_currency, get_base_currency
from ledgerdesk.utils.currency import format_currency

logger = logging.getLogger(__name__)

ACCEPTED_QUOTES_WINDOW_DAYS = 30
EXPIRING_QUOTES_WINDOW_DAYS = 7
RECENT_ITEMS_LIMIT = 10


def _sum_in_base(
    db: Session,
    rows: Iterable[tuple[Decimal | None, str | None]],
    base_currency: str,
) -> Decimal:
    total = Decimal("0")
    for amount, currency_code in rows:
        if not amount:
            continue
        total += convert_currency(db, amount, currency_code or base_currency, base_currency)
    return quantize_money(total)


def _money(amount: Decimal, currency: str) -> MoneyKpi:
    return MoneyKpi(amount=amount, currency=currency, formatted=format_currency(amount, currency))


def _invoice_amounts(db: Session, *criteria) -> list[tuple[Decimal | None, str | None]]:
    return (
        db.query(models.Invoice.total_amount, models.Invoice.currency_code)
        .filter(models.Invoice.deleted_at.is_(None), *criteria)
        .all()
    )


def get_total_sent_mtd(db: Session, today: dt.date | None = None, base_currency: str | None = None) -> MoneyKpi:
    """Invoices in ``Sent`` status issued since the first of this month."""
    today = today or dt.date.today()
    base_currency = base_currency or get_base_currency(db)
    rows = _invoice_amounts(
        db,
        models.Invoice.status == models.InvoiceStatus.SENT.value,
        models.Invoice.issue_date >= today.replace(day=1),
        models.Invoice.issue_date <= today,
    )
    return _money(_sum_in_base(db, rows, base_currency), base_currency)


def get_outstanding_amount(db: Session, base_currency: str | None = None) -> MoneyKpi:
    base_currency = base_currency or get_base_currency(db)
    rows = _invoice_amounts(
        db,
        models.Invoice.status.in_([models.InvoiceStatus.SENT.value, models.InvoiceStatus.OVERDUE.value]),
    )
    return _money(_sum_in_base(db, rows, base_currency), base_currency)


def get_accepted_quotes_30d(
    db: Session, today: dt.date | None = None, base_currency: str | None = None
) -> MoneyKpi:
    today = today or dt.date.today()
    base_currency = base_currency or get_base_currency(db)
    rows = (
        db.query(models.Quote.total_amount, models.Quote.currency_code)
        .filter(
            models.Quote.deleted_at.is_(None),
            models.Quote.status == models.QuoteStatus.ACCEPTED.value,
            models.Quote.issue_date >= today - dt.timedelta(days=ACCEPTED_QUOTES_WINDOW_DAYS),
        )
        .all()
    )
    return _money(_sum_in_base(db, rows, base_currency), base_currency)


def get_top_product(db: Session, base_currency: str | None = None) -> TopProductOut | None:
    """Product with the most paid-invoice line revenue, or None without sales."""
    base_currency = base_currency or get_base_currency(db)
    rows = (
        db.query(models.InvoiceItem.product_id, models.InvoiceItem.line_total, models.Invoice.currency_code)
        .join(models.Invoice, models.InvoiceItem.invoice_id == models.Invoice.id)
        .join(models.Product, models.InvoiceItem.product_id == models.Product.id)
        .filter(
            models.Invoice.status == models.InvoiceStatus.PAID.value,
            models.Invoice.deleted_at.is_(None),
            models.InvoiceItem.deleted_at.is_(None),
            models.Product.deleted_at.is_(None),
        )
        .all()
    )
    per_product: dict[int, Decimal] = defaultdict(Decimal)
    for product_id, amount, currency_code in rows:
        if not amount:
            continue
        per_product[product_id] += convert_currency(db, amount, currency_code or base_currency, base_currency)

    if not per_product:
        return None

    product_id, revenue = max(per_product.items(), key=lambda kv: kv[1])
    product = db.get(models.Product, product_id)
    revenue = quantize_money(revenue)
    return TopProductOut(
        sku=product.sku,
        name=product.name,
        revenue=revenue,
        currency=base_currency,
        formatted=format_currency(revenue, base_currency),
    )


def get_dashboard_kpis(db: Session, today: dt.date | None = None) -> DashboardKpis:
    base_currency = get_base_currency(db)
    return DashboardKpis(
        base_currency=base_currency,
        total_sent_mtd=get_total_sent_mtd(db, today, base_currency),
        outstanding=get_outstanding_amount(db, base_currency),
        accepted_quotes_30d=get_accepted_quotes_30d(db, today, base_currency),
        top_product=get_top_product(db, base_currency),
    )


def get_overdue_invoices(db: Session, today: dt.date | None = None) -> list[OverdueInvoiceOut]:
    """Unpaid, uncancelled invoices past their due date, oldest due first."""
    today = today or dt.date.today()
    base_currency = get_base_currency(db)
    invoices = (
        db.query(models.Invoice)
        .options(joinedload(models.Invoice.customer))
        .filter(
            models.Invoice.deleted_at.is_(None),
            models.Invoice.status.notin_([models.InvoiceStatus.PAID.value, models.InvoiceStatus.CANCELLED.value]),
            models.Invoice.due_date < today,
        )
        .order_by(models.Invoice.due_date.asc())
        .all()
    )
    return [
        OverdueInvoiceOut(
            id=inv.id,
            invoice_number=inv.invoice_number,
            customer_name=inv.customer.company_contact_name if inv.customer else None,
            due_date=inv.due_date,
            days_overdue=(today - inv.due_date).days,
            total_amount=inv.total_amount or Decimal("0"),
            currency_code=inv.currency_code or base_currency,
        )
        for inv in invoices
    ]


def get_expiring_quotes(db: Session, today: dt.date | None = None) -> list[ExpiringQuoteOut]:
    """Sent quotes that expire within the next week."""
    today = today or dt.date.today()
    quotes = (
        db.query(models.Quote)
        .options(joinedload(models.Quote.customer))
        .filter(
            models.Quote.deleted_at.is_(None),
            models.Quote.status == models.QuoteStatus.SENT.value,
            models.Quote.expiry_date >= today,
            models.Quote.expiry_date <= today + dt.timedelta(days=EXPIRING_QUOTES_WINDOW_DAYS),
        )
        .order_by(models.Quote.expiry_date.asc())
        .all()
    )
    return [
        ExpiringQuoteOut(
            id=q.id,
            quote_number=q.quote_number,
            customer_name=q.customer.company_contact_name if q.customer else None,
            expiry_date=q.expiry_date,
            days_left=(q.expiry_date - today).days,
            total_amount=q.total_amount,
            currency_code=q.currency_code,
        )
        for q in quotes
    ]


def _as_aware(value: dt.datetime) -> dt.datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)


def get_recently_updated(db: Session, limit: int = RECENT_ITEMS_LIMIT) -> list[RecentItemOut]:
    """Most recently touched customers, products, invoices and quotes."""
    items: list[RecentItemOut] = []
    sources = (
        ("customer", models.Customer, lambda c: f"{c.company_contact_name} ({c.public_customer_id})"),
        ("product", models.Product, lambda p: f"{p.name} ({p.sku})"),
        ("invoice", models.Invoice, lambda i: f"Invoice {i.invoice_number}"),
        ("quote", models.Quote, lambda q: f"Quote {q.quote_number}"),
    )
    for kind, model, label in sources:
        rows = (
            db.query(model)
            .filter(model.deleted_at.is_(None))
            .order_by(model.updated_at.desc())
            .limit(limit)
            .all()
        )
        items.extend(
            RecentItemOut(kind=kind, id=row.id, label=label(row), updated_at=_as_aware(row.updated_at))
            for row in rows
        )
    items.sort(key=lambda item: item.updated_at, reverse=True)
    return items[:limit]
