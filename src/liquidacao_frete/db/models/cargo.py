"""Cargo and route segment ORM models."""

from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liquidacao_frete.db.base import Base


class CargoStatus(enum.StrEnum):
    """Operational status of a cargo, independent of settlement."""

    TO_COLLECT = "a_coletar"
    IN_TRANSIT = "em_transito"
    STORED = "armazenada"
    DELIVERED = "entregue"
    CANCELLED = "cancelada"


class Cargo(Base):
    """Shipment record composed of ordered route segments."""

    __tablename__ = "cargos"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    crt: Mapped[str | None] = mapped_column(String(40), nullable=True)
    description: Mapped[str] = mapped_column(String(280), nullable=False)
    status: Mapped[CargoStatus] = mapped_column(
        Enum(
            CargoStatus,
            name="cargo_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
        default=CargoStatus.TO_COLLECT,
    )
    client_id: Mapped[UUID | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    segments: Mapped[list[RouteSegment]] = relationship(
        "RouteSegment",
        back_populates="cargo",
        cascade="all, delete-orphan",
        order_by="RouteSegment.index",
    )

    @property
    def identifier(self) -> str:
        """Human identifier used in ledger descriptions (CRT, else id)."""
        return self.crt or str(self.id)

    @property
    def total_value(self) -> Decimal:
        return sum((segment.base_value for segment in self.segments), Decimal("0.00"))

    def get_segment(self, index: int) -> RouteSegment | None:
        for segment in self.segments:
            if segment.index == index:
                return segment
        return None


class RouteSegment(Base):
    """One leg of a cargo's journey, the unit of freight settlement."""

    __tablename__ = "route_segments"
    __table_args__ = (
        CheckConstraint("segment_index > 0", name="ck_route_segments_index_positive"),
        CheckConstraint(
            "base_value >= 0", name="ck_route_segments_base_value_non_negative"
        ),
        UniqueConstraint("cargo_id", "segment_index", name="uq_route_segments_index"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    cargo_id: Mapped[UUID] = mapped_column(
        ForeignKey("cargos.id", ondelete="CASCADE"),
        nullable=False,
    )
    index: Mapped[int] = mapped_column("segment_index", Integer, nullable=False)
    origin_city: Mapped[str] = mapped_column(String(120), nullable=False)
    origin_state: Mapped[str | None] = mapped_column(String(40), nullable=True)
    destination_city: Mapped[str] = mapped_column(String(120), nullable=False)
    destination_state: Mapped[str | None] = mapped_column(String(40), nullable=True)
    base_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    collection_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    delivery_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    carrier_id: Mapped[UUID | None] = mapped_column(nullable=True)
    driver_id: Mapped[UUID | None] = mapped_column(nullable=True)
    vehicle_id: Mapped[UUID | None] = mapped_column(nullable=True)
    trailer_ids: Mapped[list[Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list,
    )

    cargo: Mapped[Cargo] = relationship("Cargo", back_populates="segments")
