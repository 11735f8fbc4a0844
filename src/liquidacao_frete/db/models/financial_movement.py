"""Financial movement (ledger row) ORM model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from liquidacao_frete.db.base import Base
from liquidacao_frete.domain.ledger import (
    MovementCategory,
    MovementKind,
    PaymentStatus,
)

__all__ = ["FinancialMovement", "MovementCategory", "MovementKind", "PaymentStatus"]


class FinancialMovement(Base):
    """Ledger movement, optionally tied to one route segment of a cargo."""

    __tablename__ = "financial_movements"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_financial_movements_amount_positive"),
        CheckConstraint(
            "segment_index IS NULL OR segment_index > 0",
            name="ck_financial_movements_segment_index_positive",
        ),
        Index(
            "ix_financial_movements_cargo_segment_category",
            "cargo_id",
            "segment_index",
            "category",
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    kind: Mapped[MovementKind] = mapped_column(
        Enum(
            MovementKind,
            name="movement_kind",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(280), nullable=False)
    category: Mapped[MovementCategory | None] = mapped_column(
        Enum(
            MovementCategory,
            name="movement_category",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=True,
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(
            PaymentStatus,
            name="payment_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    cargo_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cargos.id"),
        nullable=True,
    )
    segment_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
