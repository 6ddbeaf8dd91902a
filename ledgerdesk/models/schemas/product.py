"""Product and price-list schemas."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import normalize_currency_code

ProductUnit = Literal["pc", "box", "kit", "kg", "hr"]
ProductStatusLiteral = Literal["Active", "Inactive"]


class AdditionalPriceIn(BaseModel):
    currency_code: str
    price: Decimal = Field(ge=0)

    @field_validator("currency_code")
    @classmethod
    def _check_currency(cls, v: str) -> str:
        return normalize_currency_code(v)


class AdditionalPriceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    currency_code: str
    price: Decimal


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    unit: ProductUnit
    base_price: Decimal = Field(ge=0)
    status: ProductStatusLiteral = "Active"
    description: str | None = None
    additional_prices: list[AdditionalPriceIn] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Partial update. The SKU is immutable and therefore not accepted."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    unit: ProductUnit | None = None
    base_price: Decimal | None = Field(default=None, ge=0)
    status: ProductStatusLiteral | None = None
    description: str | None = None
    # None leaves the price list untouched, a list replaces it
    additional_prices: list[AdditionalPriceIn] | None = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    name: str
    unit: str
    base_price: Decimal
    status: str
    description: str | None = None
    additional_prices: list[AdditionalPriceOut] = Field(default_factory=list)
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class SkuOut(BaseModel):
    sku: str
