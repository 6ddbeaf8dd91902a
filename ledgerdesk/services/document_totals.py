"""Line, discount, tax and grand totals for invoices and quotes."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

_CENTS = Decimal("0.01")
_HUNDRED = Decimal("100")


def quantize_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal


def line_total(quantity: Decimal, unit_price: Decimal) -> Decimal:
    return quantize_money(Decimal(quantity) * Decimal(unit_price))


def _subtotal(lines: Iterable[tuple[Decimal, Decimal]]) -> Decimal:
    return sum((line_total(q, p) for q, p in lines), Decimal("0"))


def invoice_totals(lines: Iterable[tuple[Decimal, Decimal]], tax_percentage: Decimal) -> DocumentTotals:
    """*lines* are ``(quantity, unit_price)`` pairs."""
    subtotal = _subtotal(lines)
    tax = quantize_money(subtotal * Decimal(tax_percentage) / _HUNDRED)
    return DocumentTotals(
        subtotal=quantize_money(subtotal),
        discount=Decimal("0.00"),
        tax=tax,
        total=quantize_money(subtotal + tax),
    )


def quote_totals(
    lines: Iterable[tuple[Decimal, Decimal]],
    discount_percentage: Decimal,
    tax_percentage: Decimal,
) -> DocumentTotals:
    """Discount first, then tax on the discounted amount."""
    subtotal = _subtotal(lines)
    discount = quantize_money(subtotal * Decimal(discount_percentage) / _HUNDRED)
    taxable = subtotal - discount
    tax = quantize_money(taxable * Decimal(tax_percentage) / _HUNDRED)
    return DocumentTotals(
        subtotal=quantize_money(subtotal),
        discount=discount,
        tax=tax,
        total=quantize_money(taxable + tax),
    )
