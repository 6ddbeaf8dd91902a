"""Customer schemas."""
from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .utils import normalize_currency_code


class CustomerCreate(BaseModel):
    company_contact_name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    preferred_currency: str = "USD"
    address: str | None = None
    notes: str | None = None

    @field_validator("company_contact_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Contact name is required")
        return v

    @field_validator("preferred_currency")
    @classmethod
    def _check_currency(cls, v: str) -> str:
        return normalize_currency_code(v)


class CustomerUpdate(BaseModel):
    company_contact_name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    preferred_currency: str | None = None
    address: str | None = None
    notes: str | None = None

    @field_validator("preferred_currency")
    @classmethod
    def _check_currency(cls, v: str | None) -> str | None:
        return normalize_currency_code(v)


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    public_customer_id: str
    company_contact_name: str
    email: str | None = None
    phone: str | None = None
    preferred_currency: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
