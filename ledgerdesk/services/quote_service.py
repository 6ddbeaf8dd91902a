"""
Quote Service - quotes, their edits and their conversion into invoices.
"""
from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy.orm import selectinload

from ledgerdesk.core.exceptions import (
    DocumentLockedError,
    InvalidDocumentStatusError,
    QuoteConversionError,
    QuoteNotFoundError,
)
from ledgerdesk.models.models import Invoice, Quote, QuoteItem, QuoteStatus
from ledgerdesk.models.schemas import InvoiceCreate, LineItemIn, QuoteCreate, QuoteUpdate
from ledgerdesk.services import settings_service
from ledgerdesk.services.document_base import DocumentServiceBase
from ledgerdesk.services.document_totals import quantize_money, quote_totals
from ledgerdesk.services.invoice_service import InvoiceService
from ledgerdesk.utils.id_generator import new_quote_number

logger = logging.getLogger(__name__)

QUOTE_STATUSES = frozenset(s.value for s in QuoteStatus)


class QuoteService(DocumentServiceBase):
    def _active(self):
        return (
            self._db.query(Quote)
            .options(selectinload(Quote.items))
            .filter(Quote.deleted_at.is_(None))
        )

    def create_quote(self, data: QuoteCreate) -> Quote:
        customer = self._customer_by_public_id(data.public_customer_id)
        self._check_products(data.items)
        issuing_entity_id, payment_source_id = self._check_issuer(data.issuing_entity_id, data.payment_source_id)

        issue_date = data.issue_date or dt.date.today()
        expiry_date = data.expiry_date or issue_date + dt.timedelta(
            days=settings_service.get_default_quote_expiry_days(self._db)
        )
        tax_percentage = (
            data.tax_percentage
            if data.tax_percentage is not None
            else settings_service.get_default_tax_percentage(self._db)
        )
        totals = quote_totals(
            ((i.quantity, i.unit_price) for i in data.items),
            data.discount_percentage,
            tax_percentage,
        )

        quote = Quote(
            quote_number=new_quote_number(self._db),
            customer_id=customer.id,
            issue_date=issue_date,
            expiry_date=expiry_date,
            currency_code=data.currency_code,
            status=data.status,
            subtotal_amount=totals.subtotal,
            discount_percentage=data.discount_percentage,
            discount_amount=totals.discount,
            tax_percentage=tax_percentage,
            tax_amount=totals.tax,
            total_amount=totals.total,
            notes=data.notes,
            issuing_entity_id=issuing_entity_id,
            payment_source_id=payment_source_id,
        )
        quote.items = [QuoteItem(**self._item_kwargs(item)) for item in data.items]
        self._db.add(quote)
        self._db.commit()
        self._db.refresh(quote)
        logger.info("Created quote %s for customer %s", quote.quote_number, customer.public_customer_id)
        return quote

    def get_quote(self, quote_id: int) -> Quote:
        quote = self._active().filter(Quote.id == quote_id).first()
        if quote is None:
            raise QuoteNotFoundError(quote_id)
        return quote

    def list_quotes(self, status: str | None = None) -> Sequence[Quote]:
        query = self._active()
        if status:
            if status not in QUOTE_STATUSES:
                raise InvalidDocumentStatusError("quote", status)
            query = query.filter(Quote.status == status)
        return query.order_by(Quote.issue_date.desc(), Quote.id.desc()).all()

    def update_quote(self, quote_id: int, data: QuoteUpdate) -> Quote:
        """Edit header fields and optionally replace every line item.

        A quote that has been converted into an invoice is frozen.
        """
        quote = self.get_quote(quote_id)
        if quote.converted_invoice_id is not None:
            raise DocumentLockedError(
                "quote", quote.id, f"already converted to invoice {quote.converted_invoice_id}"
            )
        self._apply_changes(quote, data, QuoteItem)

        totals = quote_totals(self._live_lines(quote), quote.discount_percentage, quote.tax_percentage)
        quote.subtotal_amount = totals.subtotal
        quote.discount_amount = totals.discount
        quote.tax_amount = totals.tax
        quote.total_amount = totals.total

        self._db.commit()
        self._db.refresh(quote)
        logger.info("Updated quote %s: total %s %s", quote.quote_number, quote.total_amount, quote.currency_code)
        return quote

    def update_status(self, quote_id: int, status: str) -> Quote:
        if status not in QUOTE_STATUSES:
            raise InvalidDocumentStatusError("quote", status)
        quote = self.get_quote(quote_id)
        if quote.converted_invoice_id is not None and status != QuoteStatus.ACCEPTED.value:
            raise InvalidDocumentStatusError("quote", status, "Quote has already been converted to an invoice")
        previous = quote.status
        quote.status = status
        self._db.commit()
        self._db.refresh(quote)
        logger.info("Quote %s status %s -> %s", quote.quote_number, previous, status)
        return quote

    def delete_quote(self, quote_id: int) -> None:
        quote = self.get_quote(quote_id)
        now = self._now()
        quote.deleted_at = now
        for item in quote.items:
            item.deleted_at = now
        self._db.commit()
        logger.info("Soft-deleted quote %s", quote.quote_number)

    def convert_quote_to_invoice(self, quote_id: int) -> Invoice:
        """Create a Draft invoice from an accepted quote and link the two.

        The invoice has no discount column, so a quote discount is folded
        into the copied unit prices.
        """
        quote = self.get_quote(quote_id)
        if quote.status != QuoteStatus.ACCEPTED.value:
            raise QuoteConversionError(quote.id, f"status is {quote.status}, only Accepted quotes can be converted")
        if quote.converted_invoice_id is not None:
            raise QuoteConversionError(quote.id, f"already converted to invoice {quote.converted_invoice_id}")

        keep = (Decimal("100") - Decimal(quote.discount_percentage)) / Decimal("100")
        items = [
            LineItemIn(
                description=item.description,
                quantity=item.quantity,
                unit_price=quantize_money(Decimal(item.unit_price) * keep),
                product_id=item.product_id,
                fx_rate=item.fx_rate,
            )
            for item in quote.items
            if item.deleted_at is None
        ]
        payload = InvoiceCreate(
            public_customer_id=quote.customer.public_customer_id,
            currency_code=quote.currency_code,
            tax_percentage=quote.tax_percentage,
            notes=quote.notes,
            issuing_entity_id=quote.issuing_entity_id,
            payment_source_id=quote.payment_source_id,
            items=items,
        )
        invoice = InvoiceService(self._db).create_invoice(payload, source_quote_id=quote.id)

        quote.converted_invoice_id = invoice.id
        self._db.commit()
        self._db.refresh(quote)
        logger.info("Converted quote %s into invoice %s", quote.quote_number, invoice.invoice_number)
        return invoice
