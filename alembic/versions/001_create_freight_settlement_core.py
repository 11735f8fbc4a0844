"""Create cargos, route segments and financial movements tables.

Revision ID: 001_create_freight_settlement_core
Revises:
Create Date: 2026-10-17
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_freight_settlement_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


cargo_status_enum = sa.Enum(
    "a_coletar",
    "em_transito",
    "armazenada",
    "entregue",
    "cancelada",
    name="cargo_status",
)
movement_kind_enum = sa.Enum("receita", "despesa", name="movement_kind")
movement_category_enum = sa.Enum(
    "FRETE", "DIARIA", "OUTRAS DESPESAS", name="movement_category"
)
payment_status_enum = sa.Enum("pendente", "pago", "cancelado", name="payment_status")


def upgrade() -> None:
    op.create_table(
        "cargos",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("crt", sa.String(length=40), nullable=True),
        sa.Column("description", sa.String(length=280), nullable=False),
        sa.Column("status", cargo_status_enum, nullable=False),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_cargos"),
    )

    op.create_table(
        "route_segments",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cargo_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("segment_index", sa.Integer(), nullable=False),
        sa.Column("origin_city", sa.String(length=120), nullable=False),
        sa.Column("origin_state", sa.String(length=40), nullable=True),
        sa.Column("destination_city", sa.String(length=120), nullable=False),
        sa.Column("destination_state", sa.String(length=40), nullable=True),
        sa.Column("base_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("collection_date", sa.Date(), nullable=True),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("carrier_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("driver_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "trailer_ids",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.CheckConstraint(
            "segment_index > 0", name="ck_route_segments_index_positive"
        ),
        sa.CheckConstraint(
            "base_value >= 0", name="ck_route_segments_base_value_non_negative"
        ),
        sa.ForeignKeyConstraint(
            ["cargo_id"],
            ["cargos.id"],
            name="fk_route_segments_cargo_id_cargos",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_route_segments"),
        sa.UniqueConstraint(
            "cargo_id", "segment_index", name="uq_route_segments_index"
        ),
    )

    op.create_table(
        "financial_movements",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kind", movement_kind_enum, nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(length=280), nullable=False),
        sa.Column("category", movement_category_enum, nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("payment_status", payment_status_enum, nullable=False),
        sa.Column("cargo_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("segment_index", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint(
            "amount > 0", name="ck_financial_movements_amount_positive"
        ),
        sa.CheckConstraint(
            "segment_index IS NULL OR segment_index > 0",
            name="ck_financial_movements_segment_index_positive",
        ),
        sa.ForeignKeyConstraint(
            ["cargo_id"],
            ["cargos.id"],
            name="fk_financial_movements_cargo_id_cargos",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_financial_movements"),
    )
    op.create_index(
        "ix_financial_movements_cargo_segment_category",
        "financial_movements",
        ["cargo_id", "segment_index", "category"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_financial_movements_cargo_segment_category",
        table_name="financial_movements",
    )
    op.drop_table("financial_movements")
    op.drop_table("route_segments")
    op.drop_table("cargos")
    bind = op.get_bind()
    payment_status_enum.drop(bind, checkfirst=True)
    movement_category_enum.drop(bind, checkfirst=True)
    movement_kind_enum.drop(bind, checkfirst=True)
    cargo_status_enum.drop(bind, checkfirst=True)
