"""Add issuing entities and payment sources, referenced from invoices and quotes

Revision ID: 0002_issuing_entities
Revises: 0001_initial
Create Date: 2025-09-05
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002_issuing_entities"
down_revision: Union[str, None] = "0001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "issuing_entities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("entity_name", sa.String(length=200), nullable=False),
        sa.Column("registration_number", sa.String(length=100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "payment_sources",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("currency_code", sa.String(length=3), nullable=False),
        sa.Column(
            "issuing_entity_id",
            sa.Integer(),
            sa.ForeignKey("issuing_entities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("bank_name", sa.String(length=200), nullable=True),
        sa.Column("account_holder_name", sa.String(length=200), nullable=True),
        sa.Column("account_number", sa.String(length=64), nullable=True),
        sa.Column("iban", sa.String(length=64), nullable=True),
        sa.Column("swift_bic", sa.String(length=16), nullable=True),
        sa.Column("routing_number_us", sa.String(length=16), nullable=True),
        sa.Column("sort_code_uk", sa.String(length=16), nullable=True),
        sa.Column("additional_details", sa.Text(), nullable=True),
        sa.Column("is_primary_for_entity", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_payment_sources_issuing_entity_id", "payment_sources", ["issuing_entity_id"])

    for table in ("invoices", "quotes"):
        with op.batch_alter_table(table) as batch:
            batch.add_column(sa.Column("issuing_entity_id", sa.Integer(), nullable=True))
            batch.add_column(sa.Column("payment_source_id", sa.Integer(), nullable=True))
            batch.create_foreign_key(
                f"fk_{table}_issuing_entity_id_issuing_entities",
                "issuing_entities",
                ["issuing_entity_id"],
                ["id"],
            )
            batch.create_foreign_key(
                f"fk_{table}_payment_source_id_payment_sources",
                "payment_sources",
                ["payment_source_id"],
                ["id"],
            )
            batch.create_index(f"ix_{table}_issuing_entity_id", ["issuing_entity_id"])
            batch.create_index(f"ix_{table}_payment_source_id", ["payment_source_id"])


def downgrade() -> None:
    for table in ("quotes", "invoices"):
        with op.batch_alter_table(table) as batch:
            batch.drop_index(f"ix_{table}_payment_source_id")
            batch.drop_index(f"ix_{table}_issuing_entity_id")
            batch.drop_constraint(f"fk_{table}_payment_source_id_payment_sources", type_="foreignkey")
            batch.drop_constraint(f"fk_{table}_issuing_entity_id_issuing_entities", type_="foreignkey")
            batch.drop_column("payment_source_id")
            batch.drop_column("issuing_entity_id")
    op.drop_index("ix_payment_sources_issuing_entity_id", table_name="payment_sources")
    op.drop_table("payment_sources")
    op.drop_table("issuing_entities")
