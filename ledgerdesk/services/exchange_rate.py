"""Exchange-rate lookup, currency conversion and the organisation base currency.

Rates are resolved in two tiers: the most recent stored row in
``exchange_rates`` for the pair, then the FX endpoint (``FX_API_URL``).
Lookups are best effort. Any failure is logged and the neutral rate 1 is
used instead, so callers always get a number back. ``resolve_exchange_rate``
exposes which tier produced the value for callers that need to know.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Literal

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.models import models

logger = logging.getLogger(__name__)

NEUTRAL_RATE = Decimal("1")

RateSource = Literal["identity", "stored", "remote", "fallback"]


@dataclass(frozen=True)
class RateLookup:
    rate: Decimal
    source: RateSource

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


def _as_rate(raw) -> Decimal | None:
    """Coerce *raw* into a usable positive rate, or None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        rate = Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


def _stored_rate(db: Session, from_currency: str, to_currency: str) -> Decimal | None:
    row = (
        db.query(models.ExchangeRate.rate)
        .filter(
            models.ExchangeRate.from_currency == from_currency,
            models.ExchangeRate.to_currency == to_currency,
        )
        .order_by(models.ExchangeRate.created_at.desc(), models.ExchangeRate.id.desc())
        .first()
    )
    if row is None:
        return None
    return _as_rate(row[0])


def _remote_rate(from_currency: str, to_currency: str) -> Decimal:
    resp = httpx.get(
        settings.FX_API_URL,
        params={"from": from_currency, "to": to_currency},
        timeout=settings.FX_HTTP_TIMEOUT,
    )
    resp.raise_for_status()
    payload = resp.json()
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected FX payload: {payload!r}")
    rate = _as_rate(payload.get("rate"))
    if rate is None:
        raise ValueError(f"FX response has no usable rate: {payload!r}")
    return rate


def resolve_exchange_rate(db: Session, from_currency: str, to_currency: str) -> RateLookup:
    """Return the rate for one unit of *from_currency* in *to_currency*.

    Never raises. The ``source`` of the result is ``fallback`` when neither
    the stored rates nor the FX endpoint produced a value.
    """
    if from_currency == to_currency:
        return RateLookup(NEUTRAL_RATE, "identity")

    try:
        stored = _stored_rate(db, from_currency, to_currency)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error reading stored exchange rate %s->%s: %s", from_currency, to_currency, exc)
        stored = None
    if stored is not None:
        return RateLookup(stored, "stored")

    try:
        remote = _remote_rate(from_currency, to_currency)
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Error fetching exchange rate from %s to %s: %s", from_currency, to_currency, exc)
        return RateLookup(NEUTRAL_RATE, "fallback")

    logger.debug("Fetched %s->%s rate %s from FX endpoint", from_currency, to_currency, remote)
    return RateLookup(remote, "remote")


def get_exchange_rate(db: Session, from_currency: str, to_currency: str) -> Decimal:
    return resolve_exchange_rate(db, from_currency, to_currency).rate


def convert_currency(
    db: Session,
    amount: Decimal | float | int,
    from_currency: str,
    to_currency: str,
) -> Decimal:
    """Convert *amount*; no rounding is applied."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    if from_currency == to_currency:
        return value
    return value * get_exchange_rate(db, from_currency, to_currency)


def get_base_currency(db: Session) -> str:
    """Return the configured base currency, ``DEFAULT_BASE_CURRENCY`` (USD) when unset or unreadable."""
    try:
        value = db.query(models.AppSettings.base_currency).order_by(models.AppSettings.id).limit(1).scalar()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error fetching base currency: %s", exc)
        return settings.DEFAULT_BASE_CURRENCY
    return value or settings.DEFAULT_BASE_CURRENCY
