"""Organisation settings schemas."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import normalize_currency_code


class SettingsUpdate(BaseModel):
    base_currency: str | None = None
    default_tax_percentage: Decimal | None = Field(default=None, ge=0, le=100)
    default_quote_expiry_days: int | None = Field(default=None, ge=0)
    default_invoice_payment_terms_days: int | None = Field(default=None, ge=0)
    default_quote_notes: str | None = None
    default_invoice_notes: str | None = None

    @field_validator("base_currency")
    @classmethod
    def _check_currency(cls, v: str | None) -> str | None:
        return normalize_currency_code(v)


class SettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    base_currency: str
    default_tax_percentage: Decimal
    default_quote_expiry_days: int
    default_invoice_payment_terms_days: int
    default_quote_notes: str | None = None
    default_invoice_notes: str | None = None
