from decimal import Decimal

from ledgerdesk.services.document_totals import invoice_totals, line_total, quote_totals


def test_line_total_is_rounded_to_cents():
    assert line_total(Decimal("3"), Decimal("19.995")) == Decimal("59.99")
    assert line_total(Decimal("1.5"), Decimal("10")) == Decimal("15.00")


def test_invoice_totals():
    totals = invoice_totals([(Decimal("2"), Decimal("50")), (Decimal("1"), Decimal("25.50"))], Decimal("10"))
    assert totals.subtotal == Decimal("125.50")
    assert totals.tax == Decimal("12.55")
    assert totals.total == Decimal("138.05")
    assert totals.discount == Decimal("0")


def test_quote_discount_applies_before_tax():
    totals = quote_totals([(Decimal("4"), Decimal("25"))], Decimal("10"), Decimal("20"))
    assert totals.subtotal == Decimal("100.00")
    assert totals.discount == Decimal("10.00")
    assert totals.tax == Decimal("18.00")
    assert totals.total == Decimal("108.00")


def test_zero_rates():
    totals = quote_totals([(Decimal("1"), Decimal("0"))], Decimal("0"), Decimal("0"))
    assert totals.total == Decimal("0.00")
