"""Issuing entity and payment source schemas."""
from __future__ import annotations

import datetime as dt

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, field_validator

from .utils import normalize_currency_code


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class IssuingEntityCreate(BaseModel):
    entity_name: str = Field(min_length=1, max_length=200)
    registration_number: str | None = Field(default=None, max_length=100)
    address: str | None = None
    website: AnyHttpUrl | None = None
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    logo_url: AnyHttpUrl | None = None
    is_primary: bool = False

    @field_validator("website", "email", "logo_url", mode="before")
    @classmethod
    def _empty_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("entity_name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Entity name is required")
        return v


class IssuingEntityUpdate(BaseModel):
    entity_name: str | None = Field(default=None, min_length=1, max_length=200)
    registration_number: str | None = Field(default=None, max_length=100)
    address: str | None = None
    website: AnyHttpUrl | None = None
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    logo_url: AnyHttpUrl | None = None
    is_primary: bool | None = None

    @field_validator("website", "email", "logo_url", mode="before")
    @classmethod
    def _empty_is_missing(cls, v):
        return _blank_to_none(v)


class IssuingEntityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entity_name: str
    registration_number: str | None = None
    address: str | None = None
    website: str | None = None
    email: str | None = None
    phone: str | None = None
    logo_url: str | None = None
    is_primary: bool
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class _PaymentSourceFields(BaseModel):
    bank_name: str | None = None
    account_holder_name: str | None = None
    account_number: str | None = Field(default=None, max_length=64)
    iban: str | None = Field(default=None, max_length=64)
    swift_bic: str | None = Field(default=None, max_length=16)
    routing_number_us: str | None = Field(default=None, max_length=16)
    sort_code_uk: str | None = Field(default=None, max_length=16)
    additional_details: str | None = None


class PaymentSourceCreate(_PaymentSourceFields):
    name: str = Field(min_length=1, max_length=200)
    currency_code: str
    issuing_entity_id: int
    is_primary_for_entity: bool = False

    @field_validator("currency_code")
    @classmethod
    def _check_currency(cls, v: str) -> str:
        return normalize_currency_code(v)


class PaymentSourceUpdate(_PaymentSourceFields):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    currency_code: str | None = None
    issuing_entity_id: int | None = None
    is_primary_for_entity: bool | None = None

    @field_validator("currency_code")
    @classmethod
    def _check_currency(cls, v: str | None) -> str | None:
        return normalize_currency_code(v)


class PaymentSourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    currency_code: str
    issuing_entity_id: int
    bank_name: str | None = None
    account_holder_name: str | None = None
    account_number: str | None = None
    iban: str | None = None
    swift_bic: str | None = None
    routing_number_us: str | None = None
    sort_code_uk: str | None = None
    additional_details: str | None = None
    is_primary_for_entity: bool
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
