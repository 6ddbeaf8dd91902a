from __future__ import annotations

import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ledgerdesk.models.schemas import SettingsUpdate
from ledgerdesk.services import settings_service


def test_defaults_without_settings_row(db_session):
    assert settings_service.get_app_settings(db_session) is None
    assert settings_service.get_default_tax_percentage(db_session) == Decimal("0")
    assert settings_service.get_default_quote_expiry_days(db_session) == 30
    assert settings_service.get_default_invoice_payment_terms_days(db_session) == 30


def test_update_creates_row_then_updates_it(db_session):
    row = settings_service.update_app_settings(
        db_session, SettingsUpdate(base_currency="eur", default_tax_percentage=Decimal("7.5"))
    )
    assert row.base_currency == "EUR"
    assert row.default_quote_expiry_days == 30

    again = settings_service.update_app_settings(db_session, SettingsUpdate(default_quote_expiry_days=14))
    assert again.id == row.id
    assert again.base_currency == "EUR"
    assert settings_service.get_default_quote_expiry_days(db_session) == 14
    assert settings_service.get_default_tax_percentage(db_session) == Decimal("7.5")


def test_base_currency_change_is_logged(db_session, caplog):
    settings_service.update_app_settings(db_session, SettingsUpdate(base_currency="USD"))
    with caplog.at_level(logging.WARNING):
        settings_service.update_app_settings(db_session, SettingsUpdate(base_currency="GBP"))
    assert any("USD to GBP" in rec.getMessage() for rec in caplog.records)


@pytest.mark.parametrize(
    "payload",
    [
        {"base_currency": "NGN"},
        {"default_tax_percentage": "101"},
        {"default_tax_percentage": "-1"},
        {"default_quote_expiry_days": -1},
        {"default_invoice_payment_terms_days": -5},
    ],
)
def test_invalid_settings_are_rejected(payload):
    with pytest.raises(ValidationError):
        SettingsUpdate(**payload)
