from decimal import Decimal

import pytest

from ledgerdesk.utils.currency import (
    ALLOWED_CURRENCIES,
    format_currency,
    get_currency_symbol,
    is_allowed_currency,
)


def test_allowed_currency_list():
    assert len(ALLOWED_CURRENCIES) == 11
    assert is_allowed_currency("SGD")
    assert not is_allowed_currency("NGN")
    assert not is_allowed_currency(None)
    assert not is_allowed_currency("usd")


@pytest.mark.parametrize(
    "code,symbol",
    [
        ("USD", "$"),
        ("EUR", "€"),
        ("GBP", "£"),
        ("JPY", "¥"),
        ("CNY", "¥"),
        ("AUD", "A$"),
        ("CAD", "C$"),
        ("CHF", "CHF"),
        ("SGD", "S$"),
        ("HKD", "HK$"),
        ("NZD", "NZ$"),
        ("XYZ", "$"),
        (None, "$"),
    ],
)
def test_currency_symbols(code, symbol):
    assert get_currency_symbol(code) == symbol


def test_format_currency():
    assert format_currency(Decimal("1234.5"), "EUR") == "€1,234.50"
    assert format_currency(10, "CHF") == "CHF 10.00"
    assert format_currency(Decimal("-5.555"), "USD") == "-$5.56"
    assert format_currency(None, "GBP") == "£0.00"
