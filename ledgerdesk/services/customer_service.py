"""
Customer Service - CRUD operations for customers.

Customers are addressed by their public 5-character ID; soft-deleted rows
are invisible to every read.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import or_

from ledgerdesk.core.exceptions import CustomerEmailExistsError, CustomerNotFoundError
from ledgerdesk.models.models import Customer
from ledgerdesk.models.schemas import CustomerCreate, CustomerUpdate
from ledgerdesk.services.base import BaseService
from ledgerdesk.utils.id_generator import new_public_customer_id

logger = logging.getLogger(__name__)


class CustomerService(BaseService):
    def _active(self):
        return self._db.query(Customer).filter(Customer.deleted_at.is_(None))

    def _ensure_email_free(self, email: str | None, exclude_id: int | None = None) -> None:
        if not email:
            return
        query = self._db.query(Customer.id).filter(Customer.email == email)
        if exclude_id is not None:
            query = query.filter(Customer.id != exclude_id)
        if query.first() is not None:
            raise CustomerEmailExistsError(email)

    def create_customer(self, data: CustomerCreate) -> Customer:
        self._ensure_email_free(data.email)
        customer = Customer(
            public_customer_id=new_public_customer_id(self._db),
            company_contact_name=data.company_contact_name,
            email=data.email,
            phone=data.phone,
            preferred_currency=data.preferred_currency,
            address=data.address,
            notes=data.notes,
        )
        self._db.add(customer)
        self._db.commit()
        self._db.refresh(customer)
        logger.info("Created customer %s (%s)", customer.public_customer_id, customer.company_contact_name)
        return customer

    def get_customer(self, public_customer_id: str) -> Customer:
        customer = self._active().filter(Customer.public_customer_id == public_customer_id).first()
        if customer is None:
            raise CustomerNotFoundError(public_customer_id)
        return customer

    def list_customers(self, search: str | None = None) -> Sequence[Customer]:
        query = self._active()
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Customer.company_contact_name.ilike(term),
                    Customer.email.ilike(term),
                    Customer.public_customer_id.ilike(term),
                )
            )
        return query.order_by(Customer.company_contact_name).all()

    def update_customer(self, public_customer_id: str, data: CustomerUpdate) -> Customer:
        customer = self.get_customer(public_customer_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("email"):
            self._ensure_email_free(changes["email"], exclude_id=customer.id)
        if "company_contact_name" in changes and not changes["company_contact_name"]:
            changes.pop("company_contact_name")
        for field, value in changes.items():
            setattr(customer, field, value)
        self._db.commit()
        self._db.refresh(customer)
        return customer

    def delete_customer(self, public_customer_id: str) -> None:
        customer = self.get_customer(public_customer_id)
        customer.deleted_at = self._now()
        self._db.commit()
        logger.info("Soft-deleted customer %s", public_customer_id)
