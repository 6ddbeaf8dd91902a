"""Shared plumbing for the invoice and quote services."""
from __future__ import annotations

from typing import Iterable

from ledgerdesk.core.exceptions import (
    CustomerNotFoundError,
    IssuingEntityNotFoundError,
    PaymentSourceMismatchError,
    PaymentSourceNotFoundError,
    ProductNotFoundError,
)
from ledgerdesk.models.models import Customer, IssuingEntity, PaymentSource, Product
from ledgerdesk.models.schemas import LineItemIn
from ledgerdesk.services.base import BaseService
from ledgerdesk.services.document_totals import line_total


class DocumentServiceBase(BaseService):
    def _customer_by_public_id(self, public_customer_id: str) -> Customer:
        customer = (
            self._db.query(Customer)
            .filter(
                Customer.public_customer_id == public_customer_id,
                Customer.deleted_at.is_(None),
            )
            .first()
        )
        if customer is None:
            raise CustomerNotFoundError(public_customer_id)
        return customer

    def _check_products(self, items: Iterable[LineItemIn]) -> None:
        ids = {item.product_id for item in items if item.product_id is not None}
        if not ids:
            return
        found = {
            row[0]
            for row in self._db.query(Product.id)
            .filter(Product.id.in_(ids), Product.deleted_at.is_(None))
            .all()
        }
        missing = ids - found
        if missing:
            raise ProductNotFoundError(str(min(missing)))

    def _check_issuer(
        self, issuing_entity_id: int | None, payment_source_id: int | None
    ) -> tuple[int | None, int | None]:
        """Validate the issuer pair; a payment source alone implies its entity."""
        if issuing_entity_id is not None and self._db.get(IssuingEntity, issuing_entity_id) is None:
            raise IssuingEntityNotFoundError(issuing_entity_id)
        if payment_source_id is None:
            return issuing_entity_id, None

        source = self._db.get(PaymentSource, payment_source_id)
        if source is None:
            raise PaymentSourceNotFoundError(payment_source_id)
        if issuing_entity_id is None:
            return source.issuing_entity_id, payment_source_id
        if source.issuing_entity_id != issuing_entity_id:
            raise PaymentSourceMismatchError(payment_source_id, issuing_entity_id)
        return issuing_entity_id, payment_source_id

    @staticmethod
    def _item_kwargs(item: LineItemIn) -> dict:
        return {
            "product_id": item.product_id,
            "description": item.description.strip(),
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "line_total": line_total(item.quantity, item.unit_price),
            "fx_rate": item.fx_rate,
        }

    def _replace_items(self, current: list, item_cls: type, items: Iterable[LineItemIn]) -> None:
        current.clear()
        # Flush the orphan deletes before the new lines go in
        self._db.flush()
        current.extend(item_cls(**self._item_kwargs(item)) for item in items)

    def _apply_changes(self, document, data, item_cls: type) -> None:
        """Copy set header fields of *data* onto *document* and swap its items.

        ``notes`` and the issuer pair may be cleared with an explicit null;
        any other null leaves the stored value alone.
        """
        changes = data.model_dump(exclude_unset=True, exclude={"items", "public_customer_id"})
        if data.public_customer_id is not None:
            document.customer_id = self._customer_by_public_id(data.public_customer_id).id

        if "issuing_entity_id" in changes or "payment_source_id" in changes:
            entity_id, source_id = self._check_issuer(
                changes.pop("issuing_entity_id", document.issuing_entity_id),
                changes.pop("payment_source_id", document.payment_source_id),
            )
            document.issuing_entity_id = entity_id
            document.payment_source_id = source_id

        for field, value in changes.items():
            if value is None and field != "notes":
                continue
            setattr(document, field, value)

        if data.items is not None:
            self._check_products(data.items)
            self._replace_items(document.items, item_cls, data.items)

    @staticmethod
    def _live_lines(document) -> list[tuple]:
        return [(item.quantity, item.unit_price) for item in document.items if item.deleted_at is None]
