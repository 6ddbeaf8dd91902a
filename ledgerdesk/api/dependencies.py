"""Common dependencies for the API routers."""
from typing import Annotated, TypeAlias

from fastapi import Depends
from sqlalchemy.orm import Session

from ledgerdesk.db.session import get_db
from ledgerdesk.services.customer_service import CustomerService
from ledgerdesk.services.entity_service import IssuingEntityService, PaymentSourceService
from ledgerdesk.services.invoice_service import InvoiceService
from ledgerdesk.services.product_service import ProductService
from ledgerdesk.services.quote_service import QuoteService

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]


def get_customer_service(db: DbDep) -> CustomerService:
    return CustomerService(db)


def get_product_service(db: DbDep) -> ProductService:
    return ProductService(db)


def get_issuing_entity_service(db: DbDep) -> IssuingEntityService:
    return IssuingEntityService(db)


def get_payment_source_service(db: DbDep) -> PaymentSourceService:
    return PaymentSourceService(db)


def get_invoice_service(db: DbDep) -> InvoiceService:
    return InvoiceService(db)


def get_quote_service(db: DbDep) -> QuoteService:
    return QuoteService(db)


CustomerServiceDep: TypeAlias = Annotated[CustomerService, Depends(get_customer_service)]
ProductServiceDep: TypeAlias = Annotated[ProductService, Depends(get_product_service)]
InvoiceServiceDep: TypeAlias = Annotated[InvoiceService, Depends(get_invoice_service)]
QuoteServiceDep: TypeAlias = Annotated[QuoteService, Depends(get_quote_service)]
IssuingEntityServiceDep: TypeAlias = Annotated[IssuingEntityService, Depends(get_issuing_entity_service)]
PaymentSourceServiceDep: TypeAlias = Annotated[PaymentSourceService, Depends(get_payment_source_service)]
