"""Tests for the ECB reference-rate source behind /api/fx."""
from __future__ import annotations

import httpx
import pytest

from factories import fake_response
from ledgerdesk.core.exceptions import ExchangeRateUnavailableError
from ledgerdesk.services import ecb_rates

ECB_RATES = {"USD": 1.08, "GBP": 0.85, "JPY": 162.5}


def ecb_payload(codes: list[str], date: str = "2025-01-10") -> dict:
    """Minimal SDMX-JSON document as returned by the ECB data API."""
    return {
        "dataSets": [
            {
                "series": {
                    f"0:{i}:0:0:0": {"observations": {"0": [ECB_RATES[code], 0, 0]}}
                    for i, code in enumerate(codes)
                }
            }
        ],
        "structure": {
            "dimensions": {
                "series": [
                    {"id": "FREQ", "values": [{"id": "D"}]},
                    {"id": "CURRENCY", "values": [{"id": code} for code in codes]},
                    {"id": "CURRENCY_DENOM", "values": [{"id": "EUR"}]},
                    {"id": "EXR_TYPE", "values": [{"id": "SP00"}]},
                    {"id": "EXR_SUFFIX", "values": [{"id": "A"}]},
                ],
                "observation": [{"id": "TIME_PERIOD", "values": [{"id": date}]}],
            }
        },
    }


@pytest.fixture
def ecb(monkeypatch):
    calls: list[str] = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        codes = url.split("/D.")[1].split(".EUR")[0].split("+")
        return fake_response(ecb_payload(codes), url=url)

    monkeypatch.setattr(httpx, "get", fake_get)
    return calls


def test_eur_base_is_direct(ecb):
    quote = ecb_rates.get_rate("EUR", "USD")
    assert quote.rate == 1.08
    assert quote.date == "2025-01-10"
    assert ecb[0].endswith("/EXR/D.USD.EUR.SP00.A")


def test_eur_target_is_inverse(ecb):
    assert ecb_rates.get_rate("GBP", "EUR").rate == round(1 / 0.85, 6)


def test_cross_rate(ecb):
    assert ecb_rates.get_rate("USD", "JPY").rate == round(162.5 / 1.08, 6)
    assert "USD+JPY" in ecb[0]


def test_same_currency_needs_no_fetch(ecb):
    assert ecb_rates.get_rate("CHF", "CHF").rate == 1.0
    assert ecb == []


def test_rates_are_cached(ecb):
    ecb_rates.get_rate("EUR", "USD")
    ecb_rates.get_rate("USD", "EUR")
    assert len(ecb) == 1

    # a new currency only fetches what is missing
    ecb_rates.get_rate("USD", "GBP")
    assert len(ecb) == 2
    assert ecb[1].endswith("/D.GBP.EUR.SP00.A")


def test_upstream_failure_raises(monkeypatch):
    monkeypatch.setattr(httpx, "get", lambda url, **kw: fake_response({}, status_code=503, url=url))
    with pytest.raises(ExchangeRateUnavailableError) as exc:
        ecb_rates.get_rate("EUR", "USD")
    assert exc.value.status_code == 502


def test_malformed_payload_raises(monkeypatch):
    monkeypatch.setattr(httpx, "get", lambda url, **kw: fake_response({"dataSets": []}, url=url))
    with pytest.raises(ExchangeRateUnavailableError):
        ecb_rates.get_rate("USD", "GBP")
