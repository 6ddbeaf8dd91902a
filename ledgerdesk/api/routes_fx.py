"""Exchange-rate endpoints.

``GET /api/fx`` is also the remote tier consulted by the rate resolver when
no stored rate exists for a pair.
"""
from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Query

from ledgerdesk.api.dependencies import DbDep
from ledgerdesk.core.exceptions import InvalidCurrencyError
from ledgerdesk.models.schemas import FxConversionOut, FxRateOut
from ledgerdesk.services import ecb_rates
from ledgerdesk.services.exchange_rate import resolve_exchange_rate
from ledgerdesk.utils.currency import is_allowed_currency

router = APIRouter(tags=["fx"])


def _currency(value: str | None) -> str:
    code = (value or "").strip().upper()
    if not is_allowed_currency(code):
        raise InvalidCurrencyError(value)
    return code


@router.get("", response_model=FxRateOut)
def get_fx_rate(
    from_: str | None = Query(None, alias="from"),
    to: str | None = Query(None),
    base: str | None = Query(None, description="Alias of 'from'"),
    target: str | None = Query(None, description="Alias of 'to'"),
):
    """Reference rate for one unit of ``from`` in ``to``, with its ECB date."""
    from_currency = _currency(from_ or base)
    to_currency = _currency(to or target)
    quote = ecb_rates.get_rate(from_currency, to_currency)
    return FxRateOut(rate=quote.rate, date=quote.date)


@router.get("/convert", response_model=FxConversionOut)
def convert(
    db: DbDep,
    amount: float = Query(...),
    from_: str = Query(..., alias="from"),
    to: str = Query(...),
):
    """Convert using stored rates first; ``source`` says which tier answered."""
    from_currency = _currency(from_)
    to_currency = _currency(to)
    lookup = resolve_exchange_rate(db, from_currency, to_currency)
    return FxConversionOut(
        amount=amount,
        from_currency=from_currency,
        to_currency=to_currency,
        rate=float(lookup.rate),
        source=lookup.source,
        converted=float(Decimal(str(amount)) * lookup.rate),
    )
