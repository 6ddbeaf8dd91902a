"""
Issuing Entity Service - the legal entities that issue documents and their
payment sources.

Only one issuing entity is primary, and each entity has at most one primary
payment source. Marking a record primary clears the flag on its siblings.
"""
from __future__ import annotations

import logging
from typing import Sequence

from ledgerdesk.core.exceptions import (
    IssuingEntityNotFoundError,
    PaymentSourceNotFoundError,
    RecordInUseError,
)
from ledgerdesk.models.models import Invoice, IssuingEntity, PaymentSource, Quote
from ledgerdesk.models.schemas import (
    IssuingEntityCreate,
    IssuingEntityUpdate,
    PaymentSourceCreate,
    PaymentSourceUpdate,
)
from ledgerdesk.services.base import BaseService

logger = logging.getLogger(__name__)


class IssuingEntityService(BaseService):
    def _clear_primary(self, keep_id: int | None = None) -> None:
        query = self._db.query(IssuingEntity).filter(IssuingEntity.is_primary.is_(True))
        if keep_id is not None:
            query = query.filter(IssuingEntity.id != keep_id)
        query.update({IssuingEntity.is_primary: False}, synchronize_session="fetch")

    def create_entity(self, data: IssuingEntityCreate) -> IssuingEntity:
        if data.is_primary:
            self._clear_primary()
        entity = IssuingEntity(**data.model_dump(mode="json"))
        self._db.add(entity)
        self._db.commit()
        self._db.refresh(entity)
        logger.info("Created issuing entity: %s (primary=%s)", entity.entity_name, entity.is_primary)
        return entity

    def get_entity(self, entity_id: int) -> IssuingEntity:
        entity = self._db.get(IssuingEntity, entity_id)
        if entity is None:
            raise IssuingEntityNotFoundError(entity_id)
        return entity

    def get_primary_entity(self) -> IssuingEntity | None:
        return self._db.query(IssuingEntity).filter(IssuingEntity.is_primary.is_(True)).first()

    def list_entities(self) -> Sequence[IssuingEntity]:
        return self._db.query(IssuingEntity).order_by(IssuingEntity.entity_name).all()

    def update_entity(self, entity_id: int, data: IssuingEntityUpdate) -> IssuingEntity:
        entity = self.get_entity(entity_id)
        changes = data.model_dump(mode="json", exclude_unset=True)
        if changes.get("is_primary"):
            self._clear_primary(keep_id=entity.id)
        for field, value in changes.items():
            if value is None and field in ("entity_name", "is_primary"):
                continue
            setattr(entity, field, value)
        self._db.commit()
        self._db.refresh(entity)
        logger.info("Updated issuing entity %s", entity_id)
        return entity

    def delete_entity(self, entity_id: int) -> None:
        entity = self.get_entity(entity_id)
        if entity.payment_sources:
            raise RecordInUseError("issuing entity", entity_id, "it still has payment sources")
        if _referenced_by_documents(self._db, issuing_entity_id=entity_id):
            raise RecordInUseError("issuing entity", entity_id, "invoices or quotes reference it")
        self._db.delete(entity)
        self._db.commit()
        logger.info("Deleted issuing entity %s", entity_id)


class PaymentSourceService(BaseService):
    def _clear_primary(self, issuing_entity_id: int, keep_id: int | None = None) -> None:
        query = self._db.query(PaymentSource).filter(
            PaymentSource.issuing_entity_id == issuing_entity_id,
            PaymentSource.is_primary_for_entity.is_(True),
        )
        if keep_id is not None:
            query = query.filter(PaymentSource.id != keep_id)
        query.update({PaymentSource.is_primary_for_entity: False}, synchronize_session="fetch")

    def create_payment_source(self, data: PaymentSourceCreate) -> PaymentSource:
        IssuingEntityService(self._db).get_entity(data.issuing_entity_id)
        if data.is_primary_for_entity:
            self._clear_primary(data.issuing_entity_id)
        source = PaymentSource(**data.model_dump())
        self._db.add(source)
        self._db.commit()
        self._db.refresh(source)
        logger.info("Created payment source %s for entity %s", source.name, source.issuing_entity_id)
        return source

    def get_payment_source(self, payment_source_id: int) -> PaymentSource:
        source = self._db.get(PaymentSource, payment_source_id)
        if source is None:
            raise PaymentSourceNotFoundError(payment_source_id)
        return source

    def list_payment_sources(self, issuing_entity_id: int | None = None) -> Sequence[PaymentSource]:
        query = self._db.query(PaymentSource)
        if issuing_entity_id is not None:
            query = query.filter(PaymentSource.issuing_entity_id == issuing_entity_id)
        return query.order_by(PaymentSource.name).all()

    def update_payment_source(self, payment_source_id: int, data: PaymentSourceUpdate) -> PaymentSource:
        source = self.get_payment_source(payment_source_id)
        changes = data.model_dump(exclude_unset=True)
        required = ("name", "currency_code", "issuing_entity_id", "is_primary_for_entity")
        changes = {k: v for k, v in changes.items() if v is not None or k not in required}

        if "issuing_entity_id" in changes:
            IssuingEntityService(self._db).get_entity(changes["issuing_entity_id"])
        entity_id = changes.get("issuing_entity_id", source.issuing_entity_id)
        if changes.get("is_primary_for_entity"):
            self._clear_primary(entity_id, keep_id=source.id)

        for field, value in changes.items():
            setattr(source, field, value)
        self._db.commit()
        self._db.refresh(source)
        logger.info("Updated payment source %s", payment_source_id)
        return source

    def delete_payment_source(self, payment_source_id: int) -> None:
        source = self.get_payment_source(payment_source_id)
        if _referenced_by_documents(self._db, payment_source_id=payment_source_id):
            raise RecordInUseError("payment source", payment_source_id, "invoices or quotes reference it")
        self._db.delete(source)
        self._db.commit()
        logger.info("Deleted payment source %s", payment_source_id)


def _referenced_by_documents(db, issuing_entity_id: int | None = None, payment_source_id: int | None = None) -> bool:
    # Soft-deleted documents still hold the foreign key
    for model in (Invoice, Quote):
        if issuing_entity_id is not None:
            criterion = model.issuing_entity_id == issuing_entity_id
        else:
            criterion = model.payment_source_id == payment_source_id
        if db.query(model.id).filter(criterion).first() is not None:
            return True
    return False
