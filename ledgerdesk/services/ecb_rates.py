"""ECB reference rates, cached in-process.

The ECB publishes one EUR-based rate per currency per business day. Rates for
other pairs are derived from those: the inverse for ``X -> EUR`` and the
cross rate ``target / base`` for two non-EUR currencies. Backs ``/api/fx``.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass

import httpx

from ledgerdesk.core.config import settings
from ledgerdesk.core.exceptions import ExchangeRateUnavailableError

logger = logging.getLogger(__name__)

EUR = "EUR"
RATE_PRECISION = 6

# ── In-memory cache (all ECB rates are quoted against EUR) ──────────
_cached_rates: dict[str, float] = {EUR: 1.0}
_cached_date: str | None = None
_cached_at: float = 0.0


@dataclass(frozen=True)
class EcbRate:
    rate: float
    date: str  # observation date, YYYY-MM-DD


def clear_cache() -> None:
    global _cached_rates, _cached_date, _cached_at  # noqa: PLW0603
    _cached_rates = {EUR: 1.0}
    _cached_date = None
    _cached_at = 0.0


def _cache_is_fresh() -> bool:
    return _cached_date is not None and (time.monotonic() - _cached_at) < settings.FX_CACHE_TTL_SECONDS


def _series_url(currencies: list[str]) -> str:
    return f"{settings.ECB_API_URL}/EXR/D.{'+'.join(currencies)}.EUR.SP00.A"


def parse_ecb_payload(data: dict, wanted: list[str]) -> tuple[dict[str, float], str]:
    """Extract ``{currency: rate}`` and the observation date from SDMX-JSON.

    Series keys look like ``0:{i}:0:0:0`` where ``i`` indexes the CURRENCY
    dimension values.
    """
    observation_date = data["structure"]["dimensions"]["observation"][0]["values"][0]["id"]
    dimensions = data["structure"]["dimensions"]["series"]
    currency_dim = next((d for d in dimensions if d.get("id") == "CURRENCY"), None)
    if currency_dim is None:
        raise KeyError("CURRENCY dimension not found in ECB structure")

    series = data["dataSets"][0]["series"]
    rates: dict[str, float] = {}
    for index, value in enumerate(currency_dim["values"]):
        code = value["id"]
        entry = series.get(f"0:{index}:0:0:0")
        if entry is None or code not in wanted:
            continue
        rates[code] = float(entry["observations"]["0"][0])
    return rates, observation_date


def _fetch(currencies: list[str]) -> tuple[dict[str, float], str]:
    url = _series_url(currencies)
    logger.info("Fetching ECB rates for %s", ", ".join(currencies))
    resp = httpx.get(
        url,
        params={"format": "jsondata", "lastNObservations": 1},
        timeout=settings.FX_HTTP_TIMEOUT,
    )
    resp.raise_for_status()
    return parse_ecb_payload(resp.json(), currencies)


def get_rates_against_eur(currencies: list[str]) -> tuple[dict[str, float], str]:
    """Return EUR-based rates for *currencies*, serving from cache where possible.

    Raises ``ExchangeRateUnavailableError`` when the ECB cannot be reached or
    its payload cannot be read.
    """
    global _cached_rates, _cached_date, _cached_at  # noqa: PLW0603

    if _cache_is_fresh():
        missing = [c for c in currencies if c not in _cached_rates]
    else:
        missing = [c for c in currencies if c != EUR]

    if not missing:
        date = _cached_date or dt.date.today().isoformat()
        return {c: _cached_rates[c] for c in currencies}, date

    try:
        fetched, date = _fetch(missing)
    except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as exc:
        logger.error("Error fetching or parsing ECB data: %s", exc)
        raise ExchangeRateUnavailableError(EUR, "+".join(missing), str(exc)) from exc

    known = _cached_rates if _cache_is_fresh() else {EUR: 1.0}
    _cached_rates = {**known, **fetched, EUR: 1.0}
    _cached_date = date
    _cached_at = time.monotonic()

    return {c: _cached_rates[c] for c in currencies if c in _cached_rates}, date


def get_rate(base: str, target: str) -> EcbRate:
    """Rate for one unit of *base* in *target*, rounded to 6 decimals."""
    if base == target:
        return EcbRate(rate=1.0, date=dt.date.today().isoformat())

    if base == EUR:
        rates, date = get_rates_against_eur([target])
        if not rates.get(target):
            raise ExchangeRateUnavailableError(base, target, f"no ECB rate for {target}")
        rate = rates[target]
    elif target == EUR:
        rates, date = get_rates_against_eur([base])
        if not rates.get(base):
            raise ExchangeRateUnavailableError(base, target, f"no ECB rate for {base}")
        rate = 1 / rates[base]
    else:
        rates, date = get_rates_against_eur([base, target])
        if not rates.get(base) or not rates.get(target):
            raise ExchangeRateUnavailableError(base, target, "missing rates for cross-currency calculation")
        rate = rates[target] / rates[base]

    return EcbRate(rate=round(rate, RATE_PRECISION), date=date)
