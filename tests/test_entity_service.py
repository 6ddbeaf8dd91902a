from __future__ import annotations

import datetime as dt

import pytest
from pydantic import ValidationError

from factories import add_entity, add_invoice, add_payment_source
from ledgerdesk.core.exceptions import (
    IssuingEntityNotFoundError,
    PaymentSourceNotFoundError,
    RecordInUseError,
)
from ledgerdesk.models.schemas import (
    IssuingEntityCreate,
    IssuingEntityUpdate,
    PaymentSourceCreate,
    PaymentSourceUpdate,
)
from ledgerdesk.services.entity_service import IssuingEntityService, PaymentSourceService


def test_create_entity_blank_optional_fields_become_null(db_session):
    entity = IssuingEntityService(db_session).create_entity(
        IssuingEntityCreate(entity_name="  Northwind GmbH ", website="", email="", registration_number="HRB 1234")
    )
    assert entity.entity_name == "Northwind GmbH"
    assert entity.website is None
    assert entity.email is None
    assert entity.registration_number == "HRB 1234"
    assert entity.is_primary is False


def test_entity_validation():
    with pytest.raises(ValidationError):
        IssuingEntityCreate(entity_name="   ")
    with pytest.raises(ValidationError):
        IssuingEntityCreate(entity_name="Bad URL", website="not a url")


def test_only_one_primary_entity(db_session):
    service = IssuingEntityService(db_session)
    first = service.create_entity(IssuingEntityCreate(entity_name="First", is_primary=True))
    second = service.create_entity(IssuingEntityCreate(entity_name="Second", is_primary=True))

    db_session.refresh(first)
    assert first.is_primary is False
    assert service.get_primary_entity().id == second.id

    service.update_entity(first.id, IssuingEntityUpdate(is_primary=True))
    db_session.refresh(second)
    assert second.is_primary is False
    assert service.get_primary_entity().id == first.id


def test_update_entity_keeps_unset_fields(db_session):
    service = IssuingEntityService(db_session)
    entity = service.create_entity(IssuingEntityCreate(entity_name="Contoso", phone="+44 20 7946 0000"))

    updated = service.update_entity(entity.id, IssuingEntityUpdate(address="1 High Street"))

    assert updated.entity_name == "Contoso"
    assert updated.phone == "+44 20 7946 0000"
    assert updated.address == "1 High Street"


def test_list_entities_sorted_by_name(db_session):
    add_entity(db_session, "Zeta")
    add_entity(db_session, "Alpha")
    names = [e.entity_name for e in IssuingEntityService(db_session).list_entities()]
    assert names == ["Alpha", "Zeta"]


def test_delete_entity_blocked_by_payment_sources(db_session):
    entity = add_entity(db_session)
    add_payment_source(db_session, entity)
    service = IssuingEntityService(db_session)

    with pytest.raises(RecordInUseError):
        service.delete_entity(entity.id)


def test_delete_entity_blocked_by_documents(db_session, customer):
    entity = add_entity(db_session)
    invoice = add_invoice(db_session, customer, dt.date(2025, 5, 1), "10")
    invoice.issuing_entity_id = entity.id
    db_session.commit()

    with pytest.raises(RecordInUseError):
        IssuingEntityService(db_session).delete_entity(entity.id)


def test_delete_unused_entity(db_session):
    entity = add_entity(db_session)
    service = IssuingEntityService(db_session)
    service.delete_entity(entity.id)
    with pytest.raises(IssuingEntityNotFoundError):
        service.get_entity(entity.id)


def test_payment_source_requires_existing_entity(db_session):
    with pytest.raises(IssuingEntityNotFoundError):
        PaymentSourceService(db_session).create_payment_source(
            PaymentSourceCreate(name="Ghost", currency_code="USD", issuing_entity_id=999)
        )


def test_payment_source_currency_is_checked():
    with pytest.raises(ValidationError):
        PaymentSourceCreate(name="Crypto", currency_code="BTC", issuing_entity_id=1)


def test_primary_payment_source_is_per_entity(db_session):
    north = add_entity(db_session, "North")
    south = add_entity(db_session, "South")
    south_primary = add_payment_source(db_session, south, "South GBP", "GBP", is_primary=True)
    service = PaymentSourceService(db_session)

    first = service.create_payment_source(
        PaymentSourceCreate(name="North USD", currency_code="usd", issuing_entity_id=north.id, is_primary_for_entity=True)
    )
    second = service.create_payment_source(
        PaymentSourceCreate(name="North EUR", currency_code="EUR", issuing_entity_id=north.id, is_primary_for_entity=True)
    )

    db_session.refresh(first)
    db_session.refresh(south_primary)
    assert first.currency_code == "USD"
    assert first.is_primary_for_entity is False
    assert second.is_primary_for_entity is True
    assert south_primary.is_primary_for_entity is True
    assert [s.name for s in service.list_payment_sources(issuing_entity_id=north.id)] == ["North EUR", "North USD"]


def test_update_payment_source(db_session):
    entity = add_entity(db_session)
    source = add_payment_source(db_session, entity)
    service = PaymentSourceService(db_session)

    updated = service.update_payment_source(source.id, PaymentSourceUpdate(iban="GB29NWBK60161331926819", name=None))

    assert updated.iban == "GB29NWBK60161331926819"
    assert updated.name == "Main account"
    with pytest.raises(IssuingEntityNotFoundError):
        service.update_payment_source(source.id, PaymentSourceUpdate(issuing_entity_id=999))


def test_delete_payment_source_blocked_by_documents(db_session, customer):
    entity = add_entity(db_session)
    source = add_payment_source(db_session, entity)
    invoice = add_invoice(db_session, customer, dt.date(2025, 5, 1), "10", deleted=True)
    invoice.payment_source_id = source.id
    db_session.commit()
    service = PaymentSourceService(db_session)

    with pytest.raises(RecordInUseError):
        service.delete_payment_source(source.id)

    invoice.payment_source_id = None
    db_session.commit()
    service.delete_payment_source(source.id)
    with pytest.raises(PaymentSourceNotFoundError):
        service.get_payment_source(source.id)
