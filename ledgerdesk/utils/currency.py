"""Currency codes, display symbols and amount formatting.

Usage
-----
    from ledgerdesk.utils.currency import format_currency, get_currency_symbol

    get_currency_symbol("GBP")              # "£"
    format_currency(Decimal("1234.5"), "EUR")  # "€1,234.50"
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ALLOWED_CURRENCIES: tuple[str, ...] = (
    "USD", "GBP", "EUR", "CHF", "SGD", "HKD",
    "CNY", "JPY", "CAD", "AUD", "NZD",
)

_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "CNY": "¥",
    "SGD": "S$",
    "HKD": "HK$",
    "NZD": "NZ$",
}

_CENTS = Decimal("0.01")


def is_allowed_currency(code: str | None) -> bool:
    return bool(code) and code in ALLOWED_CURRENCIES


def get_currency_symbol(code: str | None) -> str:
    """Return the display symbol for *code*; unknown codes fall back to ``$``."""
    if not code:
        return "$"
    return _SYMBOLS.get(code, "$")


def format_currency(amount: Decimal | float | int | None, code: str | None) -> str:
    """Format *amount* with the currency symbol and 2 decimal places."""
    value = Decimal(str(amount or 0)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    symbol = get_currency_symbol(code)
    # CHF is a letter code, keep it readable
    if symbol.isalpha():
        return f"{sign}{symbol} {abs(value):,}"
    return f"{sign}{symbol}{abs(value):,}"
