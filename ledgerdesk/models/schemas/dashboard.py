"""Dashboard schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel


class MonthlyRevenueOut(BaseModel):
    """One month of paid revenue in the base currency."""
    month: str  # "Jan"
    month_full: str  # "January 2025"
    revenue: int


class MoneyKpi(BaseModel):
    amount: Decimal
    currency: str
    formatted: str  # "€1,234.50"


class TopProductOut(BaseModel):
    sku: str
    name: str
    revenue: Decimal
    currency: str
    formatted: str


class DashboardKpis(BaseModel):
    base_currency: str
    total_sent_mtd: MoneyKpi
    outstanding: MoneyKpi
    accepted_quotes_30d: MoneyKpi
    top_product: TopProductOut | None = None


class OverdueInvoiceOut(BaseModel):
    id: int
    invoice_number: str
    customer_name: str | None = None
    due_date: dt.date
    days_overdue: int
    total_amount: Decimal
    currency_code: str


class ExpiringQuoteOut(BaseModel):
    id: int
    quote_number: str
    customer_name: str | None = None
    expiry_date: dt.date
    days_left: int
    total_amount: Decimal
    currency_code: str


class RecentItemOut(BaseModel):
    kind: Literal["customer", "product", "invoice", "quote"]
    id: int
    label: str
    updated_at: dt.datetime
