"""Financial movement persistence operations."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from liquidacao_frete.db.models.financial_movement import (
    FinancialMovement,
    MovementCategory,
)


class MovementRepository:
    """Repository for ledger movement persistence and lookup."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_segment(
        self,
        *,
        cargo_id: UUID,
        segment_index: int,
        category: MovementCategory,
    ) -> list[FinancialMovement]:
        statement = (
            select(FinancialMovement)
            .where(
                FinancialMovement.cargo_id == cargo_id,
                FinancialMovement.segment_index == segment_index,
                FinancialMovement.category == category,
            )
            .order_by(FinancialMovement.created_at.asc())
        )
        return list(self._session.scalars(statement).all())

    def list_for_cargo(self, cargo_id: UUID) -> list[FinancialMovement]:
        statement = (
            select(FinancialMovement)
            .where(FinancialMovement.cargo_id == cargo_id)
            .order_by(FinancialMovement.created_at.asc())
        )
        return list(self._session.scalars(statement).all())

    def add(self, movement: FinancialMovement) -> FinancialMovement:
        self._session.add(movement)
        self._session.flush()
        return movement

    def delete_many(self, movement_ids: Sequence[UUID]) -> int:
        if not movement_ids:
            return 0
        statement = delete(FinancialMovement).where(
            FinancialMovement.id.in_(list(movement_ids))
        )
        result = self._session.execute(statement)
        return int(result.rowcount or 0)
