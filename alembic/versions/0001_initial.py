from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "app_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("base_currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("default_tax_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("default_quote_expiry_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("default_invoice_payment_terms_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("default_quote_notes", sa.Text(), nullable=True),
        sa.Column("default_invoice_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("default_tax_percentage >= 0 AND default_tax_percentage <= 100", name="ck_settings_tax"),
        sa.CheckConstraint("default_quote_expiry_days >= 0", name="ck_settings_quote_expiry"),
        sa.CheckConstraint("default_invoice_payment_terms_days >= 0", name="ck_settings_payment_terms"),
    )

    op.create_table(
        "exchange_rates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("from_currency", sa.String(length=3), nullable=False),
        sa.Column("to_currency", sa.String(length=3), nullable=False),
        sa.Column("rate", sa.Numeric(18, 8), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_exchange_rates_from_currency", "exchange_rates", ["from_currency"])
    op.create_index("ix_exchange_rates_to_currency", "exchange_rates", ["to_currency"])
    op.create_index("ix_exchange_rates_created_at", "exchange_rates", ["created_at"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("public_customer_id", sa.String(length=5), nullable=False),
        sa.Column("company_contact_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("preferred_currency", sa.String(length=3), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="uq_customers_email"),
    )
    op.create_index("ix_customers_public_customer_id", "customers", ["public_customer_id"], unique=True)
    op.create_index("ix_customers_deleted_at", "customers", ["deleted_at"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sku", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("unit", sa.String(length=8), nullable=False),
        sa.Column("base_price", sa.Numeric(15, 2), nullable=False),
        sa.Column("status", sa.String(length=10), nullable=False, server_default="Active"),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("base_price >= 0", name="ck_products_base_price"),
    )
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)
    op.create_index("ix_products_deleted_at", "products", ["deleted_at"])

    op.create_table(
        "product_additional_prices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("currency_code", sa.String(length=3), nullable=False),
        sa.Column("price", sa.Numeric(15, 2), nullable=False),
        sa.UniqueConstraint("product_id", "currency_code", name="uq_product_currency"),
        sa.CheckConstraint("price >= 0", name="ck_additional_price"),
    )
    op.create_index("ix_product_additional_prices_product_id", "product_additional_prices", ["product_id"])

    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quote_number", sa.String(length=10), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column("currency_code", sa.String(length=3), nullable=False),
        sa.Column("status", sa.String(length=12), nullable=False, server_default="Draft"),
        sa.Column("subtotal_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("tax_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("converted_invoice_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("tax_percentage >= 0 AND tax_percentage <= 100", name="ck_quotes_tax"),
        sa.CheckConstraint("discount_percentage >= 0 AND discount_percentage <= 100", name="ck_quotes_discount"),
    )
    op.create_index("ix_quotes_quote_number", "quotes", ["quote_number"], unique=True)
    op.create_index("ix_quotes_customer_id", "quotes", ["customer_id"])
    op.create_index("ix_quotes_status", "quotes", ["status"])
    op.create_index("ix_quotes_deleted_at", "quotes", ["deleted_at"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(length=10), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("currency_code", sa.String(length=3), nullable=True),
        sa.Column("status", sa.String(length=12), nullable=False, server_default="Draft"),
        sa.Column("subtotal_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("tax_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(15, 2), nullable=True, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "source_quote_id",
            sa.Integer(),
            sa.ForeignKey("quotes.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("tax_percentage >= 0 AND tax_percentage <= 100", name="ck_invoices_tax"),
    )
    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"], unique=True)
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_status", "invoices", ["status"])
    op.create_index("ix_invoices_source_quote_id", "invoices", ["source_quote_id"])
    op.create_index("ix_invoices_deleted_at", "invoices", ["deleted_at"])

    # quotes <-> invoices reference each other; close the cycle once both exist
    with op.batch_alter_table("quotes") as batch:
        batch.create_foreign_key(
            "fk_quotes_converted_invoice_id",
            "invoices",
            ["converted_invoice_id"],
            ["id"],
            ondelete="SET NULL",
        )

    for table, parent in (("invoice_items", "invoices"), ("quote_items", "quotes")):
        parent_fk = "invoice_id" if table == "invoice_items" else "quote_id"
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(parent_fk, sa.Integer(), sa.ForeignKey(f"{parent}.id", ondelete="CASCADE"), nullable=False),
            sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=True),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
            sa.Column("unit_price", sa.Numeric(15, 2), nullable=False),
            sa.Column("line_total", sa.Numeric(15, 2), nullable=False, server_default="0"),
            sa.Column("fx_rate", sa.Numeric(15, 6), nullable=True),
            sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
            sa.CheckConstraint("quantity > 0", name=f"ck_{table}_quantity"),
            sa.CheckConstraint("unit_price >= 0", name=f"ck_{table}_unit_price"),
        )
        op.create_index(f"ix_{table}_{parent_fk}", table, [parent_fk])
        op.create_index(f"ix_{table}_product_id", table, ["product_id"])


def downgrade() -> None:
    op.drop_table("quote_items")
    op.drop_table("invoice_items")
    with op.batch_alter_table("quotes") as batch:
        batch.drop_constraint("fk_quotes_converted_invoice_id", type_="foreignkey")
    op.drop_table("invoices")
    op.drop_table("quotes")
    op.drop_table("product_additional_prices")
    op.drop_table("products")
    op.drop_table("customers")
    op.drop_table("exchange_rates")
    op.drop_table("app_settings")
