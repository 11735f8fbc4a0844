"""Cargo financial summary aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from liquidacao_frete.db.models.cargo import Cargo
from liquidacao_frete.db.models.financial_movement import (
    FinancialMovement,
    MovementCategory,
)
from liquidacao_frete.domain.errors import CargoNotFoundError
from liquidacao_frete.domain.money import ZERO, quantize_money
from liquidacao_frete.domain.settlement_state import (
    SettlementState,
    resolve_settlement_state,
)


class CargoRepositoryProtocol(Protocol):
    def get(self, cargo_id: UUID) -> Cargo | None: ...


class MovementRepositoryProtocol(Protocol):
    def list_for_cargo(self, cargo_id: UUID) -> list[FinancialMovement]: ...


@dataclass(slots=True, frozen=True)
class SegmentSettlementSummary:
    index: int
    origin_city: str
    destination_city: str
    base_value: Decimal
    state: SettlementState


@dataclass(slots=True, frozen=True)
class CargoFinancialSummary:
    cargo_id: UUID
    cargo_identifier: str
    base_value: Decimal
    per_diem_total: Decimal
    other_expenses_total: Decimal
    segments: list[SegmentSettlementSummary]

    @property
    def financial_total(self) -> Decimal:
        return self.base_value + self.per_diem_total + self.other_expenses_total


class CargoSummaryService:
    """Summarizes what a cargo costs and how far each segment is settled."""

    def __init__(
        self,
        *,
        cargo_repository: CargoRepositoryProtocol,
        movement_repository: MovementRepositoryProtocol,
    ) -> None:
        self._cargo_repository = cargo_repository
        self._movement_repository = movement_repository

    def get_summary(self, cargo_id: UUID) -> CargoFinancialSummary:
        cargo = self._cargo_repository.get(cargo_id)
        if cargo is None:
            raise CargoNotFoundError(details={"cargo_id": str(cargo_id)})

        movements = self._movement_repository.list_for_cargo(cargo.id)
        segments = [
            SegmentSettlementSummary(
                index=segment.index,
                origin_city=segment.origin_city,
                destination_city=segment.destination_city,
                base_value=quantize_money(segment.base_value),
                state=resolve_settlement_state(
                    movement
                    for movement in movements
                    if movement.segment_index == segment.index
                    and movement.category == MovementCategory.FREIGHT
                ),
            )
            for segment in cargo.segments
        ]
        return CargoFinancialSummary(
            cargo_id=cargo.id,
            cargo_identifier=cargo.identifier,
            base_value=quantize_money(cargo.total_value),
            per_diem_total=_category_total(movements, MovementCategory.PER_DIEM),
            other_expenses_total=_category_total(
                movements, MovementCategory.OTHER_EXPENSE
            ),
            segments=segments,
        )


def _category_total(
    movements: list[FinancialMovement], category: MovementCategory
) -> Decimal:
    return sum(
        (movement.amount for movement in movements if movement.category == category),
        ZERO,
    )
