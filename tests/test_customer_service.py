from __future__ import annotations

import pytest
from pydantic import ValidationError

from ledgerdesk.core.exceptions import CustomerEmailExistsError, CustomerNotFoundError
from ledgerdesk.models.schemas import CustomerCreate, CustomerUpdate
from ledgerdesk.services.customer_service import CustomerService


def test_create_assigns_public_id(db_session):
    service = CustomerService(db_session)
    customer = service.create_customer(CustomerCreate(company_contact_name="  Globex  ", email="a@globex.example.com"))
    assert len(customer.public_customer_id) == 5
    assert customer.company_contact_name == "Globex"
    assert customer.preferred_currency == "USD"
    assert service.get_customer(customer.public_customer_id).id == customer.id


def test_duplicate_email_rejected(db_session):
    service = CustomerService(db_session)
    service.create_customer(CustomerCreate(company_contact_name="One", email="dup@example.com"))
    with pytest.raises(CustomerEmailExistsError) as exc:
        service.create_customer(CustomerCreate(company_contact_name="Two", email="dup@example.com"))
    assert exc.value.status_code == 409


def test_contact_name_and_currency_validated():
    with pytest.raises(ValidationError):
        CustomerCreate(company_contact_name="   ")
    with pytest.raises(ValidationError):
        CustomerCreate(company_contact_name="Ok", preferred_currency="XYZ")


def test_list_search_and_soft_delete(db_session):
    service = CustomerService(db_session)
    a = service.create_customer(CustomerCreate(company_contact_name="Beta Corp"))
    service.create_customer(CustomerCreate(company_contact_name="Alpha Inc"))

    assert [c.company_contact_name for c in service.list_customers()] == ["Alpha Inc", "Beta Corp"]
    assert [c.company_contact_name for c in service.list_customers(search="beta")] == ["Beta Corp"]

    service.delete_customer(a.public_customer_id)
    assert [c.company_contact_name for c in service.list_customers()] == ["Alpha Inc"]
    with pytest.raises(CustomerNotFoundError):
        service.get_customer(a.public_customer_id)


def test_update_customer(db_session):
    service = CustomerService(db_session)
    customer = service.create_customer(CustomerCreate(company_contact_name="Initech"))
    updated = service.update_customer(
        customer.public_customer_id, CustomerUpdate(phone="+44 20 7946 0000", preferred_currency="gbp")
    )
    assert updated.phone == "+44 20 7946 0000"
    assert updated.preferred_currency == "GBP"
    assert updated.company_contact_name == "Initech"
