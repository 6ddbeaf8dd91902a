"""Tests for the trailing six-month revenue series."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from factories import add_invoice, add_rate
from ledgerdesk.services import revenue_service
from ledgerdesk.services.revenue_service import (
    FALLBACK_SERIES,
    get_monthly_revenue,
    month_window,
    round_half_toward_positive,
)

TODAY = dt.date(2025, 3, 15)


def test_month_window_crosses_year_boundary():
    window = month_window(TODAY)
    assert [start for start, _ in window] == [
        dt.date(2024, 10, 1),
        dt.date(2024, 11, 1),
        dt.date(2024, 12, 1),
        dt.date(2025, 1, 1),
        dt.date(2025, 2, 1),
        dt.date(2025, 3, 1),
    ]
    assert window[2] == (dt.date(2024, 12, 1), dt.date(2025, 1, 1))


def test_empty_series_has_six_labelled_months(db_session):
    series = get_monthly_revenue(db_session, today=TODAY)
    assert [m.month for m in series] == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]
    assert series[0].month_full == "October 2024"
    assert series[-1].month_full == "March 2025"
    assert all(m.revenue == 0 for m in series)


def test_only_paid_live_invoices_in_window_count(db_session, customer):
    add_invoice(db_session, customer, dt.date(2025, 3, 1), "100.40")
    add_invoice(db_session, customer, dt.date(2025, 3, 31), "50.20")
    add_invoice(db_session, customer, dt.date(2025, 3, 10), "999", status="Sent")
    add_invoice(db_session, customer, dt.date(2025, 3, 10), "999", deleted=True)
    add_invoice(db_session, customer, dt.date(2024, 9, 30), "999")
    add_invoice(db_session, customer, dt.date(2025, 1, 31), "10")

    series = {m.month: m.revenue for m in get_monthly_revenue(db_session, today=TODAY)}
    assert series["Mar"] == 151
    assert series["Jan"] == 10
    assert series["Oct"] == 0


def test_foreign_currency_invoices_are_converted_to_base(db_session, customer, base_currency_usd):
    add_rate(db_session, "EUR", "USD", "1.10")
    add_invoice(db_session, customer, dt.date(2025, 2, 3), "100", currency="EUR")
    add_invoice(db_session, customer, dt.date(2025, 2, 4), "20", currency="USD")
    # no currency on the invoice means base currency
    add_invoice(db_session, customer, dt.date(2025, 2, 5), "5", currency=None)

    series = {m.month: m.revenue for m in get_monthly_revenue(db_session, today=TODAY)}
    assert series["Feb"] == 135


def test_revenue_rounds_half_up(db_session, customer):
    add_invoice(db_session, customer, dt.date(2025, 3, 2), "10.50")
    series = get_monthly_revenue(db_session, today=TODAY)
    assert series[-1].revenue == 11


def test_negative_half_rounds_toward_positive(db_session, customer):
    # credit-note style month
    add_invoice(db_session, customer, dt.date(2025, 3, 2), "-10.50")
    series = get_monthly_revenue(db_session, today=TODAY)
    assert series[-1].revenue == -10


@pytest.mark.parametrize(
    ("value", "expected"),
    [("2.5", 3), ("2.49", 2), ("-2.5", -2), ("-2.51", -3), ("0", 0)],
)
def test_round_half_toward_positive(value, expected):
    assert round_half_toward_positive(Decimal(value)) == expected


def test_failed_month_reports_zero_without_affecting_others(db_session, customer, monkeypatch):
    add_invoice(db_session, customer, dt.date(2024, 12, 5), "40")
    add_invoice(db_session, customer, dt.date(2025, 1, 5), "70")
    add_invoice(db_session, customer, dt.date(2025, 2, 5), "30")

    original = revenue_service._paid_invoices_for_month

    def flaky(db, start, end):
        if start == dt.date(2025, 1, 1):
            raise SQLAlchemyError("statement timeout")
        return original(db, start, end)

    monkeypatch.setattr(revenue_service, "_paid_invoices_for_month", flaky)
    series = get_monthly_revenue(db_session, today=TODAY)

    assert len(series) == 6
    assert {m.month: m.revenue for m in series} == {
        "Oct": 0,
        "Nov": 0,
        "Dec": 40,
        "Jan": 0,
        "Feb": 30,
        "Mar": 0,
    }


def test_total_failure_returns_canned_series(db_session, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(revenue_service, "month_window", broken)
    series = get_monthly_revenue(db_session, today=TODAY)

    assert series == list(FALLBACK_SERIES)
    assert [m.month for m in series] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    assert series[0].month_full == "January"
