from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from liquidacao_frete.db.models.cargo import Cargo, RouteSegment
from liquidacao_frete.db.models.financial_movement import (
    FinancialMovement,
    MovementCategory,
    PaymentStatus,
)
from liquidacao_frete.domain.errors import (
    CargoNotFoundError,
    RouteSegmentNotFoundError,
    SettlementConfigurationError,
    SettlementConflictError,
)
from liquidacao_frete.domain.settlement_config import (
    AdvanceSplit,
    SettlementConfiguration,
    SplitOption,
)
from liquidacao_frete.services.settlement_service import SettlementService
from liquidacao_frete.services.undo_registry import UndoAction

TODAY = date(2026, 3, 10)


class FakeSession:
    def __init__(self, *, fail_on_refresh: bool = False) -> None:
        self.committed = False
        self.rolled_back = False
        self.fail_on_refresh = fail_on_refresh

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True

    def refresh(self, instance: object) -> None:
        _ = instance
        if self.fail_on_refresh:
            raise RuntimeError("connection lost")


@dataclass
class FakeCargoRepository:
    cargos: dict[UUID, Cargo]
    locked: list[UUID] = field(default_factory=list)

    def get(self, cargo_id: UUID) -> Cargo | None:
        return self.cargos.get(cargo_id)

    def get_for_update(self, cargo_id: UUID) -> Cargo | None:
        self.locked.append(cargo_id)
        return self.cargos.get(cargo_id)


@dataclass
class FakeMovementRepository:
    movements: list[FinancialMovement] = field(default_factory=list)
    fail_on_add: int | None = None

    def list_for_segment(
        self,
        *,
        cargo_id: UUID,
        segment_index: int,
        category: MovementCategory,
    ) -> list[FinancialMovement]:
        return [
            movement
            for movement in self.movements
            if movement.cargo_id == cargo_id
            and movement.segment_index == segment_index
            and movement.category == category
        ]

    def add(self, movement: FinancialMovement) -> FinancialMovement:
        if self.fail_on_add is not None and len(self.movements) >= self.fail_on_add:
            raise RuntimeError("database unavailable")
        movement.id = uuid4()
        self.movements.append(movement)
        return movement


@dataclass
class FakeReversalService:
    registered: list[tuple[str, tuple[UUID, ...]]] = field(default_factory=list)

    def register_settlement(
        self,
        *,
        cargo_identifier: str,
        movement_ids: Sequence[UUID],
    ) -> UndoAction:
        self.registered.append((cargo_identifier, tuple(movement_ids)))
        return UndoAction(
            id="undo_test",
            type="integrate_financial",
            description=f"Integração financeira da carga {cargo_identifier}",
            undo=lambda: None,
        )


def _cargo(*segment_values: str) -> Cargo:
    cargo = Cargo(id=uuid4(), crt="CRT-0042", description="Soja")
    cargo.segments = [
        RouteSegment(
            index=position,
            origin_city="Uruguaiana",
            destination_city="Buenos Aires",
            base_value=Decimal(value),
        )
        for position, value in enumerate(segment_values, start=1)
    ]
    return cargo


def _service(
    cargo: Cargo,
    movement_repository: FakeMovementRepository | None = None,
) -> tuple[SettlementService, FakeSession, FakeMovementRepository, FakeReversalService]:
    session = FakeSession()
    movements = movement_repository or FakeMovementRepository()
    reversal = FakeReversalService()
    service = SettlementService(
        cargo_repository=FakeCargoRepository(cargos={cargo.id: cargo}),
        movement_repository=movements,
        reversal_service=reversal,
        session=session,
        today_provider=lambda: TODAY,
    )
    return service, session, movements, reversal


def test_settle_posts_planned_movements_and_registers_undo() -> None:
    cargo = _cargo("1000.00")
    service, session, movements, reversal = _service(cargo)

    result = service.settle(
        cargo.id,
        SettlementConfiguration(segment_index=1, split=AdvanceSplit()),
    )

    assert session.committed is True
    assert [movement.amount for movement in movements.movements] == [
        Decimal("700.00"),
        Decimal("300.00"),
    ]
    assert all(
        movement.payment_status == PaymentStatus.PENDING
        and movement.cargo_id == cargo.id
        and movement.due_date == TODAY
        for movement in result.movements
    )
    assert reversal.registered == [
        ("CRT-0042", tuple(movement.id for movement in result.movements))
    ]
    assert result.undo_action.id == "undo_test"
    assert result.plan.state_after.is_fully_settled is True


def test_settle_rereads_segment_movements_before_posting() -> None:
    cargo = _cargo("1000.00")
    service, session, movements, _ = _service(cargo)
    service.settle(
        cargo.id,
        SettlementConfiguration(
            segment_index=1, split=AdvanceSplit(option=SplitOption.ADVANCE)
        ),
    )

    with pytest.raises(SettlementConflictError):
        service.settle(
            cargo.id,
            SettlementConfiguration(
                segment_index=1, split=AdvanceSplit(option=SplitOption.ADVANCE)
            ),
        )

    assert session.rolled_back is True
    assert len(movements.movements) == 1


def test_settle_locks_cargo_row() -> None:
    cargo = _cargo("1000.00")
    session = FakeSession()
    cargo_repository = FakeCargoRepository(cargos={cargo.id: cargo})
    service = SettlementService(
        cargo_repository=cargo_repository,
        movement_repository=FakeMovementRepository(),
        reversal_service=FakeReversalService(),
        session=session,
        today_provider=lambda: TODAY,
    )

    service.settle(cargo.id, SettlementConfiguration(segment_index=1))

    assert cargo_repository.locked == [cargo.id]


def test_settle_rolls_back_when_a_later_insert_fails() -> None:
    cargo = _cargo("1000.00")
    service, session, movements, reversal = _service(
        cargo, FakeMovementRepository(fail_on_add=1)
    )

    with pytest.raises(RuntimeError):
        service.settle(
            cargo.id,
            SettlementConfiguration(segment_index=1, split=AdvanceSplit()),
        )

    assert session.committed is False
    assert session.rolled_back is True
    assert reversal.registered == []


def test_settle_unknown_cargo_raises_not_found() -> None:
    cargo = _cargo("1000.00")
    service, session, _, _ = _service(cargo)

    with pytest.raises(CargoNotFoundError):
        service.settle(uuid4(), SettlementConfiguration(segment_index=1))

    assert session.rolled_back is True


def test_settle_unknown_segment_raises_not_found() -> None:
    cargo = _cargo("1000.00")
    service, _, _, _ = _service(cargo)

    with pytest.raises(RouteSegmentNotFoundError) as exc_info:
        service.settle(cargo.id, SettlementConfiguration(segment_index=3))

    assert exc_info.value.details["segment_index"] == 3


def test_preview_requires_segment_selection() -> None:
    cargo = _cargo("1000.00")
    service, _, _, _ = _service(cargo)

    with pytest.raises(SettlementConfigurationError) as exc_info:
        service.preview(cargo.id, SettlementConfiguration(segment_index=None))

    assert exc_info.value.details["field"] == "segment_index"


def test_preview_does_not_write() -> None:
    cargo = _cargo("1000.00", "450.00")
    service, session, movements, _ = _service(cargo)

    plan = service.preview(cargo.id, SettlementConfiguration(segment_index=2))

    assert plan.total_amount == Decimal("450.00")
    assert plan.movements[0].description == "Frete - Carga CRT-0042 - Trajeto 2"
    assert movements.movements == []
    assert session.committed is False


def test_segment_state_reflects_posted_shares() -> None:
    cargo = _cargo("1000.00")
    service, _, _, _ = _service(cargo)
    service.settle(
        cargo.id,
        SettlementConfiguration(
            segment_index=1, split=AdvanceSplit(option=SplitOption.BALANCE)
        ),
    )

    state = service.segment_state(cargo.id, 1)

    assert state.has_balance is True
    assert state.has_advance is False
    assert state.status == "partial"


def test_settle_registers_undo_even_when_refresh_fails() -> None:
    cargo = _cargo("1000.00")
    session = FakeSession(fail_on_refresh=True)
    movements = FakeMovementRepository()
    reversal = FakeReversalService()
    service = SettlementService(
        cargo_repository=FakeCargoRepository(cargos={cargo.id: cargo}),
        movement_repository=movements,
        reversal_service=reversal,
        session=session,
        today_provider=lambda: TODAY,
    )

    with pytest.raises(RuntimeError, match="connection lost"):
        service.settle(
            cargo.id,
            SettlementConfiguration(segment_index=1, split=AdvanceSplit()),
        )

    assert session.committed is True
    assert reversal.registered == [
        ("CRT-0042", tuple(movement.id for movement in movements.movements))
    ]
