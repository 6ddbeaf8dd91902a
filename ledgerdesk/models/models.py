from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ledgerdesk.db.base_class import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class InvoiceStatus(str, enum.Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"


class QuoteStatus(str, enum.Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    EXPIRED = "Expired"


class ProductStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class AppSettings(Base):
    """Organisation-wide defaults. A single row is expected."""

    __tablename__ = "app_settings"
    __table_args__ = (
        CheckConstraint("default_tax_percentage >= 0 AND default_tax_percentage <= 100", name="ck_settings_tax"),
        CheckConstraint("default_quote_expiry_days >= 0", name="ck_settings_quote_expiry"),
        CheckConstraint("default_invoice_payment_terms_days >= 0", name="ck_settings_payment_terms"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    base_currency: Mapped[str] = mapped_column(String(3), default="USD", server_default="USD")
    default_tax_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))
    default_quote_expiry_days: Mapped[int] = mapped_column(Integer, default=30)
    default_invoice_payment_terms_days: Mapped[int] = mapped_column(Integer, default=30)
    default_quote_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_invoice_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )


class ExchangeRate(Base):
    """Stored conversion rate; the most recent row for a pair wins."""

    __tablename__ = "exchange_rates"

    id: Mapped[int] = mapped_column(primary_key=True)
    from_currency: Mapped[str] = mapped_column(String(3), index=True)
    to_currency: Mapped[str] = mapped_column(String(3), index=True)
    rate: Mapped[Decimal | None] = mapped_column(Numeric(18, 8), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    public_customer_id: Mapped[str] = mapped_column(String(5), unique=True, index=True)
    company_contact_name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    preferred_currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    invoices: Mapped[list[Invoice]] = relationship("Invoice", back_populates="customer")
    quotes: Mapped[list[Quote]] = relationship("Quote", back_populates="customer")


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("base_price >= 0", name="ck_products_base_price"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    # Application-generated, e.g. PR-7KQ2M; never reused
    sku: Mapped[str] = mapped_column(String(16), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    unit: Mapped[str] = mapped_column(String(8))
    base_price: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    status: Mapped[str] = mapped_column(String(10), default=ProductStatus.ACTIVE.value)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    additional_prices: Mapped[list[ProductAdditionalPrice]] = relationship(
        "ProductAdditionalPrice",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductAdditionalPrice.currency_code",
    )


class ProductAdditionalPrice(Base):
    """Price of a product in a currency other than the base currency."""

    __tablename__ = "product_additional_prices"
    __table_args__ = (
        UniqueConstraint("product_id", "currency_code", name="uq_product_currency"),
        CheckConstraint("price >= 0", name="ck_additional_price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), index=True)
    currency_code: Mapped[str] = mapped_column(String(3))
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2))

    product: Mapped[Product] = relationship("Product", back_populates="additional_prices")


class IssuingEntity(Base):
    """Legal entity that issues invoices and quotes. At most one is primary."""

    __tablename__ = "issuing_entities"

    id: Mapped[int] = mapped_column(primary_key=True)
    entity_name: Mapped[str] = mapped_column(String(200))
    registration_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    payment_sources: Mapped[list[PaymentSource]] = relationship(
        "PaymentSource",
        back_populates="issuing_entity",
        cascade="all, delete-orphan",
        order_by="PaymentSource.name",
    )


class PaymentSource(Base):
    """Bank account or other payment details belonging to an issuing entity."""

    __tablename__ = "payment_sources"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    currency_code: Mapped[str] = mapped_column(String(3))
    issuing_entity_id: Mapped[int] = mapped_column(ForeignKey("issuing_entities.id", ondelete="CASCADE"), index=True)
    bank_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    account_holder_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    iban: Mapped[str | None] = mapped_column(String(64), nullable=True)
    swift_bic: Mapped[str | None] = mapped_column(String(16), nullable=True)
    routing_number_us: Mapped[str | None] = mapped_column(String(16), nullable=True)
    sort_code_uk: Mapped[str | None] = mapped_column(String(16), nullable=True)
    additional_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_primary_for_entity: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    issuing_entity: Mapped[IssuingEntity] = relationship("IssuingEntity", back_populates="payment_sources")


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("tax_percentage >= 0 AND tax_percentage <= 100", name="ck_invoices_tax"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    invoice_number: Mapped[str] = mapped_column(String(10), unique=True, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), index=True)
    issue_date: Mapped[dt.date] = mapped_column(Date, default=dt.date.today)
    due_date: Mapped[dt.date] = mapped_column(Date)
    currency_code: Mapped[str | None] = mapped_column(String(3), nullable=True)
    status: Mapped[str] = mapped_column(String(12), default=InvoiceStatus.DRAFT.value, index=True)
    subtotal_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    tax_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    issuing_entity_id: Mapped[int | None] = mapped_column(
        ForeignKey("issuing_entities.id"), nullable=True, index=True
    )
    payment_source_id: Mapped[int | None] = mapped_column(
        ForeignKey("payment_sources.id"), nullable=True, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_quote_id: Mapped[int | None] = mapped_column(
        ForeignKey("quotes.id", ondelete="SET NULL", use_alter=True), nullable=True, index=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    customer: Mapped[Customer] = relationship("Customer", back_populates="invoices")
    items: Mapped[list[InvoiceItem]] = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_invoice_items_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_invoice_items_unit_price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    invoice_id: Mapped[int] = mapped_column(ForeignKey("invoices.id", ondelete="CASCADE"), index=True)
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id"), nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    line_total: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    # FX rate applied when the unit price was converted from the product's base price
    fx_rate: Mapped[Decimal | None] = mapped_column(Numeric(15, 6), nullable=True)
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    invoice: Mapped[Invoice] = relationship("Invoice", back_populates="items")
    product: Mapped[Product | None] = relationship("Product")


class Quote(Base):
    __tablename__ = "quotes"
    __table_args__ = (
        CheckConstraint("tax_percentage >= 0 AND tax_percentage <= 100", name="ck_quotes_tax"),
        CheckConstraint("discount_percentage >= 0 AND discount_percentage <= 100", name="ck_quotes_discount"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    quote_number: Mapped[str] = mapped_column(String(10), unique=True, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), index=True)
    issue_date: Mapped[dt.date] = mapped_column(Date, default=dt.date.today)
    expiry_date: Mapped[dt.date] = mapped_column(Date)
    currency_code: Mapped[str] = mapped_column(String(3))
    status: Mapped[str] = mapped_column(String(12), default=QuoteStatus.DRAFT.value, index=True)
    subtotal_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    discount_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    tax_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"))
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    total_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    issuing_entity_id: Mapped[int | None] = mapped_column(
        ForeignKey("issuing_entities.id"), nullable=True, index=True
    )
    payment_source_id: Mapped[int | None] = mapped_column(
        ForeignKey("payment_sources.id"), nullable=True, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    converted_invoice_id: Mapped[int | None] = mapped_column(
        ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    customer: Mapped[Customer] = relationship("Customer", back_populates="quotes")
    items: Mapped[list[QuoteItem]] = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteItem.id",
    )


class QuoteItem(Base):
    __tablename__ = "quote_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_quote_items_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_quote_items_unit_price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    quote_id: Mapped[int] = mapped_column(ForeignKey("quotes.id", ondelete="CASCADE"), index=True)
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id"), nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(15, 2))
    line_total: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    fx_rate: Mapped[Decimal | None] = mapped_column(Numeric(15, 6), nullable=True)
    deleted_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    quote: Mapped[Quote] = relationship("Quote", back_populates="items")
    product: Mapped[Product | None] = relationship("Product")
