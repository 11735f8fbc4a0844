"""Freight settlement orchestration over ledger storage."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from liquidacao_frete.db.models.cargo import Cargo, RouteSegment
from liquidacao_frete.db.models.financial_movement import (
    FinancialMovement,
    MovementCategory,
    PaymentStatus,
)
from liquidacao_frete.domain.dates import local_today
from liquidacao_frete.domain.errors import (
    CargoNotFoundError,
    DomainError,
    RouteSegmentNotFoundError,
    SettlementConfigurationError,
    compose_error_message,
)
from liquidacao_frete.domain.settlement_config import SettlementConfiguration
from liquidacao_frete.domain.settlement_planner import SettlementPlan, plan_settlement
from liquidacao_frete.domain.settlement_state import (
    SettlementState,
    resolve_settlement_state,
)
from liquidacao_frete.services.undo_registry import UndoAction

logger = logging.getLogger(__name__)


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by this service."""

    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def refresh(self, instance: object) -> None: ...


class CargoRepositoryProtocol(Protocol):
    """Cargo repository contract consumed by service."""

    def get(self, cargo_id: UUID) -> Cargo | None: ...

    def get_for_update(self, cargo_id: UUID) -> Cargo | None: ...


class MovementRepositoryProtocol(Protocol):
    """Movement repository contract consumed by service."""

    def list_for_segment(
        self,
        *,
        cargo_id: UUID,
        segment_index: int,
        category: MovementCategory,
    ) -> list[FinancialMovement]: ...

    def add(self, movement: FinancialMovement) -> FinancialMovement: ...


class ReversalRegistrationProtocol(Protocol):
    """Undo registration contract consumed by service."""

    def register_settlement(
        self,
        *,
        cargo_identifier: str,
        movement_ids: Sequence[UUID],
    ) -> UndoAction: ...


@dataclass(slots=True, frozen=True)
class SettlementResult:
    """Movements created by one successful settlement attempt."""

    plan: SettlementPlan
    movements: list[FinancialMovement]
    undo_action: UndoAction


class SettlementService:
    """Validates and posts the ledger movements paying a route segment."""

    def __init__(
        self,
        *,
        cargo_repository: CargoRepositoryProtocol,
        movement_repository: MovementRepositoryProtocol,
        reversal_service: ReversalRegistrationProtocol,
        session: SessionProtocol,
        today_provider: Callable[[], date] = local_today,
    ) -> None:
        self._cargo_repository = cargo_repository
        self._movement_repository = movement_repository
        self._reversal_service = reversal_service
        self._session = session
        self._today_provider = today_provider

    def segment_state(self, cargo_id: UUID, segment_index: int) -> SettlementState:
        cargo = self._get_cargo(cargo_id, for_update=False)
        self._get_segment(cargo, segment_index)
        return resolve_settlement_state(self._freight_movements(cargo, segment_index))

    def preview(
        self, cargo_id: UUID, config: SettlementConfiguration
    ) -> SettlementPlan:
        """Plan the attempt against current ledger data without writing."""

        cargo = self._get_cargo(cargo_id, for_update=False)
        return self._plan(cargo, config)

    def settle(
        self, cargo_id: UUID, config: SettlementConfiguration
    ) -> SettlementResult:
        """Post the planned movements in one transaction and register undo.

        The cargo row is locked and the segment movements are re-read inside
        the same transaction, so two concurrent attempts on one segment
        cannot both pass validation. Any failure rolls back every insert.
        """

        try:
            cargo = self._get_cargo(cargo_id, for_update=True)
            plan = self._plan(cargo, config)
            created_movements = [
                self._movement_repository.add(
                    FinancialMovement(
                        kind=line.kind,
                        amount=line.amount,
                        description=line.description,
                        category=line.category,
                        due_date=line.due_date,
                        payment_status=PaymentStatus.PENDING,
                        cargo_id=cargo.id,
                        segment_index=line.segment_index,
                        notes=line.notes,
                    )
                )
                for line in plan.movements
            ]
            self._session.commit()
        except DomainError as exc:
            self._session.rollback()
            logger.warning(
                "settlement_rejected",
                extra={
                    "cargo_id": str(cargo_id),
                    "segment_index": config.segment_index,
                    "code": exc.code,
                    "details": exc.details,
                },
            )
            raise
        except Exception:
            self._session.rollback()
            raise

        # Ids are set at flush; the undo must exist before any further I/O.
        undo_action = self._reversal_service.register_settlement(
            cargo_identifier=cargo.identifier,
            movement_ids=[movement.id for movement in created_movements],
        )
        for movement in created_movements:
            self._session.refresh(movement)

        logger.info(
            "settlement_posted",
            extra={
                "cargo_id": str(cargo.id),
                "segment_index": plan.segment_index,
                "movement_ids": [str(movement.id) for movement in created_movements],
                "total_amount": str(plan.total_amount),
                "undo_action_id": undo_action.id,
            },
        )
        return SettlementResult(
            plan=plan,
            movements=created_movements,
            undo_action=undo_action,
        )

    def _plan(self, cargo: Cargo, config: SettlementConfiguration) -> SettlementPlan:
        if config.segment_index is None:
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause="No route segment was selected.",
                    action="Select the route segment to settle and resubmit.",
                ),
                field_name="segment_index",
            )
        segment = self._get_segment(cargo, config.segment_index)
        return plan_settlement(
            cargo_identifier=cargo.identifier,
            base_value=segment.base_value,
            existing_freight_movements=self._freight_movements(cargo, segment.index),
            config=config,
            today=self._today_provider(),
        )

    def _freight_movements(
        self, cargo: Cargo, segment_index: int
    ) -> list[FinancialMovement]:
        return self._movement_repository.list_for_segment(
            cargo_id=cargo.id,
            segment_index=segment_index,
            category=MovementCategory.FREIGHT,
        )

    def _get_cargo(self, cargo_id: UUID, *, for_update: bool) -> Cargo:
        if for_update:
            cargo = self._cargo_repository.get_for_update(cargo_id)
        else:
            cargo = self._cargo_repository.get(cargo_id)
        if cargo is None:
            raise CargoNotFoundError(details={"cargo_id": str(cargo_id)})
        return cargo

    def _get_segment(self, cargo: Cargo, segment_index: int) -> RouteSegment:
        segment = cargo.get_segment(segment_index)
        if segment is None:
            raise RouteSegmentNotFoundError(
                details={"cargo_id": str(cargo.id), "segment_index": segment_index}
            )
        return segment
