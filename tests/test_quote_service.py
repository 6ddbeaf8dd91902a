from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from factories import add_entity, add_payment_source
from ledgerdesk.core.exceptions import DocumentLockedError, QuoteConversionError, QuoteNotFoundError
from ledgerdesk.models.schemas import LineItemIn, QuoteCreate, QuoteUpdate
from ledgerdesk.services.invoice_service import InvoiceService
from ledgerdesk.services.quote_service import QuoteService


def _quote(customer, **overrides) -> QuoteCreate:
    data = {
        "public_customer_id": customer.public_customer_id,
        "currency_code": "EUR",
        "issue_date": dt.date(2025, 4, 1),
        "tax_percentage": Decimal("20"),
        "items": [LineItemIn(description="Design sprint", quantity=Decimal("4"), unit_price=Decimal("25"))],
    }
    data.update(overrides)
    return QuoteCreate(**data)


def test_create_quote_with_discount(db_session, customer):
    quote = QuoteService(db_session).create_quote(_quote(customer, discount_percentage=Decimal("10")))

    assert quote.status == "Draft"
    assert quote.expiry_date == dt.date(2025, 5, 1)
    assert quote.subtotal_amount == Decimal("100.00")
    assert quote.discount_amount == Decimal("10.00")
    assert quote.tax_amount == Decimal("18.00")
    assert quote.total_amount == Decimal("108.00")


def test_only_accepted_quotes_convert(db_session, customer):
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer))
    with pytest.raises(QuoteConversionError):
        service.convert_quote_to_invoice(quote.id)


def test_convert_accepted_quote_links_both_ways(db_session, customer):
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer))
    service.update_status(quote.id, "Accepted")

    invoice = service.convert_quote_to_invoice(quote.id)

    assert invoice.source_quote_id == quote.id
    assert invoice.customer_id == customer.id
    assert invoice.currency_code == "EUR"
    assert invoice.status == "Draft"
    assert invoice.tax_percentage == Decimal("20")
    assert invoice.total_amount == Decimal("120.00")
    assert [(i.description, i.quantity) for i in invoice.items] == [("Design sprint", Decimal("4"))]
    assert service.get_quote(quote.id).converted_invoice_id == invoice.id
    assert InvoiceService(db_session).get_invoice(invoice.id).id == invoice.id


def test_conversion_folds_discount_into_prices(db_session, customer):
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer, discount_percentage=Decimal("10")))
    service.update_status(quote.id, "Accepted")

    invoice = service.convert_quote_to_invoice(quote.id)

    assert invoice.items[0].unit_price == Decimal("22.50")
    assert invoice.total_amount == quote.total_amount


def test_quote_cannot_be_converted_twice(db_session, customer):
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer))
    service.update_status(quote.id, "Accepted")
    service.convert_quote_to_invoice(quote.id)

    with pytest.raises(QuoteConversionError):
        service.convert_quote_to_invoice(quote.id)


def test_soft_deleted_quote_is_hidden(db_session, customer):
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer))
    service.delete_quote(quote.id)
    with pytest.raises(QuoteNotFoundError):
        service.get_quote(quote.id)
    assert service.list_quotes() == []


def test_update_quote_recomputes_discount_and_tax(db_session, customer):
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer))

    updated = service.update_quote(
        quote.id,
        QuoteUpdate(
            discount_percentage=Decimal("10"),
            expiry_date=dt.date(2025, 6, 30),
            items=[
                LineItemIn(description="Workshop", quantity=Decimal("2"), unit_price=Decimal("60")),
            ],
        ),
    )

    assert updated.subtotal_amount == Decimal("120.00")
    assert updated.discount_amount == Decimal("12.00")
    assert updated.tax_amount == Decimal("21.60")
    assert updated.total_amount == Decimal("129.60")
    assert updated.expiry_date == dt.date(2025, 6, 30)
    assert [i.description for i in updated.items] == ["Workshop"]


def test_converted_or_deleted_quote_cannot_be_edited(db_session, customer):
    service = QuoteService(db_session)
    converted = service.create_quote(_quote(customer))
    service.update_status(converted.id, "Accepted")
    service.convert_quote_to_invoice(converted.id)
    with pytest.raises(DocumentLockedError):
        service.update_quote(converted.id, QuoteUpdate(notes="changed my mind"))

    deleted = service.create_quote(_quote(customer))
    service.delete_quote(deleted.id)
    with pytest.raises(QuoteNotFoundError):
        service.update_quote(deleted.id, QuoteUpdate(notes="gone"))


def test_conversion_carries_issuer(db_session, customer):
    entity = add_entity(db_session, is_primary=True)
    account = add_payment_source(db_session, entity, currency="EUR")
    service = QuoteService(db_session)
    quote = service.create_quote(_quote(customer, issuing_entity_id=entity.id, payment_source_id=account.id))
    service.update_status(quote.id, "Accepted")

    invoice = service.convert_quote_to_invoice(quote.id)

    assert invoice.issuing_entity_id == entity.id
    assert invoice.payment_source_id == account.id
