"""Invoice and quote schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import normalize_currency_code

InvoiceStatusLiteral = Literal["Draft", "Sent", "Paid", "Overdue", "Cancelled"]
QuoteStatusLiteral = Literal["Draft", "Sent", "Accepted", "Rejected", "Expired"]


class LineItemIn(BaseModel):
    description: str = Field(min_length=1)
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    product_id: int | None = None
    fx_rate: Decimal | None = None


class LineItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int | None = None
    description: str
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    fx_rate: Decimal | None = None


class _DocumentCreate(BaseModel):
    public_customer_id: str
    currency_code: str
    issue_date: dt.date | None = None
    tax_percentage: Decimal | None = Field(default=None, ge=0, le=100)
    notes: str | None = None
    items: list[LineItemIn] = Field(min_length=1)
    issuing_entity_id: int | None = None
    payment_source_id: int | None = None

    @field_validator("currency_code")
    @classmethod
    def _check_currency(cls, v: str) -> str:
        return normalize_currency_code(v)


class InvoiceCreate(_DocumentCreate):
    due_date: dt.date | None = None
    status: InvoiceStatusLiteral = "Draft"


class QuoteCreate(_DocumentCreate):
    expiry_date: dt.date | None = None
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    status: QuoteStatusLiteral = "Draft"


class _DocumentUpdate(BaseModel):
    """Header fields left unset keep their value; ``items`` replaces all lines."""

    public_customer_id: str | None = None
    currency_code: str | None = None
    issue_date: dt.date | None = None
    tax_percentage: Decimal | None = Field(default=None, ge=0, le=100)
    notes: str | None = None
    issuing_entity_id: int | None = None
    payment_source_id: int | None = None
    items: list[LineItemIn] | None = Field(default=None, min_length=1)

    @field_validator("currency_code")
    @classmethod
    def _check_currency(cls, v: str | None) -> str | None:
        return normalize_currency_code(v)


class InvoiceUpdate(_DocumentUpdate):
    due_date: dt.date | None = None
    status: InvoiceStatusLiteral | None = None


class QuoteUpdate(_DocumentUpdate):
    expiry_date: dt.date | None = None
    discount_percentage: Decimal | None = Field(default=None, ge=0, le=100)
    status: QuoteStatusLiteral | None = None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatusLiteral


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatusLiteral


class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    customer_id: int
    issue_date: dt.date
    due_date: dt.date
    currency_code: str | None = None
    status: str
    subtotal_amount: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    total_amount: Decimal | None = None
    notes: str | None = None
    issuing_entity_id: int | None = None
    payment_source_id: int | None = None
    source_quote_id: int | None = None
    items: list[LineItemOut] = Field(default_factory=list)
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class QuoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quote_number: str
    customer_id: int
    issue_date: dt.date
    expiry_date: dt.date
    currency_code: str
    status: str
    subtotal_amount: Decimal
    discount_percentage: Decimal
    discount_amount: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    notes: str | None = None
    issuing_entity_id: int | None = None
    payment_source_id: int | None = None
    converted_invoice_id: int | None = None
    items: list[LineItemOut] = Field(default_factory=list)
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
