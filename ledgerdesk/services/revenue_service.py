"""Trailing six-month paid revenue, restated in the base currency."""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.models import models
from ledgerdesk.services.exchange_rate import convert_currency, get_base_currency

logger = logging.getLogger(__name__)

WINDOW_MONTHS = 6


@dataclass(frozen=True)
class MonthlyRevenue:
    month: str  # "Jan"
    month_full: str  # "January 2025"
    revenue: int


# Served when the series cannot be built at all. The labels are not the
# real trailing window.
FALLBACK_SERIES: tuple[MonthlyRevenue, ...] = (
    MonthlyRevenue("Jan", "January", 0),
    MonthlyRevenue("Feb", "February", 0),
    MonthlyRevenue("Mar", "March", 0),
    MonthlyRevenue("Apr", "April", 0),
    MonthlyRevenue("May", "May", 0),
    MonthlyRevenue("Jun", "June", 0),
)


def _shift_month(day: dt.date, months_back: int) -> dt.date:
    """First day of the month *months_back* months before *day*'s month."""
    index = day.year * 12 + (day.month - 1) - months_back
    return dt.date(index // 12, index % 12 + 1, 1)


def month_window(today: dt.date, months: int = WINDOW_MONTHS) -> list[tuple[dt.date, dt.date]]:
    """``[start, next_start)`` pairs for the trailing *months*, oldest first."""
    window = []
    for back in range(months - 1, -1, -1):
        start = _shift_month(today, back)
        window.append((start, _shift_month(start, -1)))
    return window


def _paid_invoices_for_month(db: Session, start: dt.date, end: dt.date) -> list[tuple[Decimal | None, str | None]]:
    return (
        db.query(models.Invoice.total_amount, models.Invoice.currency_code)
        .filter(
            models.Invoice.status == models.InvoiceStatus.PAID.value,
            models.Invoice.issue_date >= start,
            models.Invoice.issue_date < end,
            models.Invoice.deleted_at.is_(None),
        )
        .all()
    )


def round_half_toward_positive(value: Decimal) -> int:
    """Round to a whole unit with halves going up, so -10.5 becomes -10."""
    return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def _month_total(db: Session, start: dt.date, end: dt.date, base_currency: str) -> int:
    total = Decimal("0")
    for amount, currency_code in _paid_invoices_for_month(db, start, end):
        if not amount:
            continue
        total += convert_currency(db, amount, currency_code or base_currency, base_currency)
    return round_half_toward_positive(total)


def get_monthly_revenue(db: Session, today: dt.date | None = None) -> list[MonthlyRevenue]:
    """Paid revenue per month for the trailing six months, oldest first.

    A month whose query fails reports 0 without affecting the others.
    """
    try:
        base_currency = get_base_currency(db)
        today = today or dt.date.today()
        series: list[MonthlyRevenue] = []
        for start, end in month_window(today):
            month_short = start.strftime("%b")
            month_full = start.strftime("%B %Y")
            try:
                revenue = _month_total(db, start, end, base_currency)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("Error fetching revenue for %s: %s", month_full, exc)
                revenue = 0
            series.append(MonthlyRevenue(month_short, month_full, revenue))
        return series
    except Exception:  # noqa: BLE001
        logger.exception("Error building monthly revenue series")
        return list(FALLBACK_SERIES)
