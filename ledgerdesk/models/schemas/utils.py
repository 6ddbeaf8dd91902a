"""Common helpers shared by the schema modules."""
from __future__ import annotations

from ledgerdesk.utils.currency import is_allowed_currency


def normalize_currency_code(value: str | None) -> str | None:
    """Upper-case *value* and check it against the supported currency list."""
    if value is None:
        return None
    code = value.strip().upper()
    if not is_allowed_currency(code):
        raise ValueError(f"Unsupported currency code: {value}")
    return code
