"""
Invoice Service - create, read, edit, status changes and soft delete.

Totals are always recomputed from the line items; clients never send them.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Sequence

from sqlalchemy.orm import selectinload

from ledgerdesk.core.exceptions import InvalidDocumentStatusError, InvoiceNotFoundError
from ledgerdesk.models.models import Invoice, InvoiceItem, InvoiceStatus
from ledgerdesk.models.schemas import InvoiceCreate, InvoiceUpdate
from ledgerdesk.services import settings_service
from ledgerdesk.services.document_base import DocumentServiceBase
from ledgerdesk.services.document_totals import invoice_totals
from ledgerdesk.utils.id_generator import new_invoice_number

logger = logging.getLogger(__name__)

INVOICE_STATUSES = frozenset(s.value for s in InvoiceStatus)


class InvoiceService(DocumentServiceBase):
    def _active(self):
        return (
            self._db.query(Invoice)
            .options(selectinload(Invoice.items))
            .filter(Invoice.deleted_at.is_(None))
        )

    def create_invoice(self, data: InvoiceCreate, source_quote_id: int | None = None) -> Invoice:
        customer = self._customer_by_public_id(data.public_customer_id)
        self._check_products(data.items)
        issuing_entity_id, payment_source_id = self._check_issuer(data.issuing_entity_id, data.payment_source_id)

        issue_date = data.issue_date or dt.date.today()
        due_date = data.due_date or issue_date + dt.timedelta(
            days=settings_service.get_default_invoice_payment_terms_days(self._db)
        )
        tax_percentage = (
            data.tax_percentage
            if data.tax_percentage is not None
            else settings_service.get_default_tax_percentage(self._db)
        )
        totals = invoice_totals(((i.quantity, i.unit_price) for i in data.items), tax_percentage)

        invoice = Invoice(
            invoice_number=new_invoice_number(self._db),
            customer_id=customer.id,
            issue_date=issue_date,
            due_date=due_date,
            currency_code=data.currency_code,
            status=data.status,
            subtotal_amount=totals.subtotal,
            tax_percentage=tax_percentage,
            tax_amount=totals.tax,
            total_amount=totals.total,
            notes=data.notes,
            issuing_entity_id=issuing_entity_id,
            payment_source_id=payment_source_id,
            source_quote_id=source_quote_id,
        )
        invoice.items = [InvoiceItem(**self._item_kwargs(item)) for item in data.items]
        self._db.add(invoice)
        self._db.commit()
        self._db.refresh(invoice)
        logger.info(
            "Created invoice %s for customer %s: %s %s",
            invoice.invoice_number,
            customer.public_customer_id,
            invoice.total_amount,
            invoice.currency_code,
        )
        return invoice

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self._active().filter(Invoice.id == invoice_id).first()
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    def list_invoices(self, status: str | None = None) -> Sequence[Invoice]:
        query = self._active()
        if status:
            if status not in INVOICE_STATUSES:
                raise InvalidDocumentStatusError("invoice", status)
            query = query.filter(Invoice.status == status)
        return query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()

    def update_invoice(self, invoice_id: int, data: InvoiceUpdate) -> Invoice:
        """Edit header fields and optionally replace every line item.

        Subtotal, tax and total are recomputed from the resulting lines.
        """
        invoice = self.get_invoice(invoice_id)
        self._apply_changes(invoice, data, InvoiceItem)

        totals = invoice_totals(self._live_lines(invoice), invoice.tax_percentage)
        invoice.subtotal_amount = totals.subtotal
        invoice.tax_amount = totals.tax
        invoice.total_amount = totals.total

        self._db.commit()
        self._db.refresh(invoice)
        logger.info("Updated invoice %s: total %s %s", invoice.invoice_number, invoice.total_amount, invoice.currency_code)
        return invoice

    def update_status(self, invoice_id: int, status: str) -> Invoice:
        if status not in INVOICE_STATUSES:
            raise InvalidDocumentStatusError("invoice", status)
        invoice = self.get_invoice(invoice_id)
        previous = invoice.status
        invoice.status = status
        self._db.commit()
        self._db.refresh(invoice)
        logger.info("Invoice %s status %s -> %s", invoice.invoice_number, previous, status)
        return invoice

    def delete_invoice(self, invoice_id: int) -> None:
        invoice = self.get_invoice(invoice_id)
        now = self._now()
        invoice.deleted_at = now
        for item in invoice.items:
            item.deleted_at = now
        self._db.commit()
        logger.info("Soft-deleted invoice %s", invoice.invoice_number)
