"""Organisation settings: a single ``app_settings`` row read per call."""
from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from ledgerdesk.core.config import settings
from ledgerdesk.models import models
from ledgerdesk.models.schemas import SettingsUpdate

logger = logging.getLogger(__name__)

DEFAULT_TAX_PERCENTAGE = Decimal("0")
DEFAULT_QUOTE_EXPIRY_DAYS = 30
DEFAULT_INVOICE_PAYMENT_TERMS_DAYS = 30


def get_app_settings(db: Session) -> models.AppSettings | None:
    return db.query(models.AppSettings).order_by(models.AppSettings.id).first()


def update_app_settings(db: Session, data: SettingsUpdate) -> models.AppSettings:
    """Apply *data* to the settings row, creating it on first use."""
    row = get_app_settings(db)
    changes = data.model_dump(exclude_unset=True)
    # base_currency is NOT NULL; an explicit null means "leave as is"
    if changes.get("base_currency") is None:
        changes.pop("base_currency", None)

    if row is None:
        row = models.AppSettings(
            base_currency=changes.pop("base_currency", None) or settings.DEFAULT_BASE_CURRENCY,
            default_tax_percentage=DEFAULT_TAX_PERCENTAGE,
            default_quote_expiry_days=DEFAULT_QUOTE_EXPIRY_DAYS,
            default_invoice_payment_terms_days=DEFAULT_INVOICE_PAYMENT_TERMS_DAYS,
        )
        db.add(row)
        logger.info("Created organisation settings with base currency %s", row.base_currency)
    elif "base_currency" in changes and changes["base_currency"] != row.base_currency:
        # Stored documents keep their own currency; reports will now be restated
        logger.warning(
            "Base currency changed from %s to %s",
            row.base_currency,
            changes["base_currency"],
        )

    for field, value in changes.items():
        if value is None and field in {
            "default_tax_percentage",
            "default_quote_expiry_days",
            "default_invoice_payment_terms_days",
        }:
            continue
        setattr(row, field, value)

    db.commit()
    db.refresh(row)
    return row


def get_default_tax_percentage(db: Session) -> Decimal:
    row = get_app_settings(db)
    if row is None or row.default_tax_percentage is None:
        return DEFAULT_TAX_PERCENTAGE
    return Decimal(row.default_tax_percentage)


def get_default_quote_expiry_days(db: Session) -> int:
    row = get_app_settings(db)
    if row is None or row.default_quote_expiry_days is None:
        return DEFAULT_QUOTE_EXPIRY_DAYS
    return row.default_quote_expiry_days


def get_default_invoice_payment_terms_days(db: Session) -> int:
    row = get_app_settings(db)
    if row is None or row.default_invoice_payment_terms_days is None:
        return DEFAULT_INVOICE_PAYMENT_TERMS_DAYS
    return row.default_invoice_payment_terms_days
