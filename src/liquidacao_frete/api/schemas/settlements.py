"""Schemas for settlement endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from liquidacao_frete.db.models.financial_movement import FinancialMovement
from liquidacao_frete.domain.money import format_money, parse_amount
from liquidacao_frete.domain.settlement_config import (
    AdditionalExpenses,
    AdvancePercent,
    AdvanceSplit,
    ConsolidationTarget,
    ExtraPosting,
    PerDiem,
    SettlementConfiguration,
    SplitOption,
)
from liquidacao_frete.domain.settlement_planner import PlannedMovement, SettlementPlan
from liquidacao_frete.domain.settlement_state import SettlementState
from liquidacao_frete.services.settlement_service import SettlementResult
from liquidacao_frete.services.undo_registry import UndoAction

MONEY_PATTERN = r"^-?[0-9]+\.[0-9]{2}$"
ExtraPostingKind = Literal["consolidado", "individual"]


class AdvanceSplitRequest(BaseModel):
    """Advance/balance split selection."""

    percent: Literal[70, 80] = 70
    option: Literal["ambos", "adiantamento", "saldo"] = "ambos"
    consolidation_target: Literal["adiantamento", "saldo"] | None = None
    advance_due_date: date | None = None
    balance_due_date: date | None = None


class AdditionalExpensesRequest(BaseModel):
    """Additional expenses typed as localized currency text."""

    foreign_amount: str = Field(default="", max_length=40)
    conversion_rate: str = Field(default="", max_length=40)
    direct_amount: str = Field(default="", max_length=40)
    posting: ExtraPostingKind = "consolidado"
    due_date: date | None = None


class PerDiemRequest(BaseModel):
    """Per-diem typed as localized currency text."""

    amount: str = Field(default="", max_length=40)
    posting: ExtraPostingKind = "consolidado"
    due_date: date | None = None


class SettlementRequest(BaseModel):
    """Settlement configuration; omitted sections are disabled toggles."""

    segment_index: int | None = Field(default=None, ge=1)
    split: AdvanceSplitRequest | None = None
    expenses: AdditionalExpensesRequest | None = None
    per_diem: PerDiemRequest | None = None
    due_date: date | None = None

    def to_configuration(self) -> SettlementConfiguration:
        split = None
        if self.split is not None:
            split = AdvanceSplit(
                percent=AdvancePercent(self.split.percent),
                option=SplitOption(self.split.option),
                consolidation_target=(
                    None
                    if self.split.consolidation_target is None
                    else ConsolidationTarget(self.split.consolidation_target)
                ),
                advance_due_date=self.split.advance_due_date,
                balance_due_date=self.split.balance_due_date,
            )
        expenses = None
        if self.expenses is not None:
            expenses = AdditionalExpenses(
                foreign_amount=parse_amount(self.expenses.foreign_amount),
                conversion_rate=parse_amount(self.expenses.conversion_rate),
                direct_amount=parse_amount(self.expenses.direct_amount),
                posting=ExtraPosting(self.expenses.posting),
                due_date=self.expenses.due_date,
            )
        per_diem = None
        if self.per_diem is not None:
            per_diem = PerDiem(
                amount=parse_amount(self.per_diem.amount),
                posting=ExtraPosting(self.per_diem.posting),
                due_date=self.per_diem.due_date,
            )
        return SettlementConfiguration(
            segment_index=self.segment_index,
            split=split,
            expenses=expenses,
            per_diem=per_diem,
            single_due_date=self.due_date,
        )


class SettlementStateResponse(BaseModel):
    """Freight shares already posted for a route segment."""

    has_advance: bool
    has_balance: bool
    has_single: bool
    is_fully_settled: bool
    status: Literal["unsettled", "partial", "settled"]

    @classmethod
    def from_state(cls, state: SettlementState) -> SettlementStateResponse:
        return cls(
            has_advance=state.has_advance,
            has_balance=state.has_balance,
            has_single=state.has_single,
            is_fully_settled=state.is_fully_settled,
            status=state.status.value,
        )


class PlannedMovementResponse(BaseModel):
    """Ledger line that a settlement attempt would create."""

    kind: str
    category: str
    amount: str = Field(pattern=MONEY_PATTERN)
    description: str
    due_date: date
    segment_index: int
    notes: str

    @classmethod
    def from_planned(cls, movement: PlannedMovement) -> PlannedMovementResponse:
        return cls(
            kind=movement.kind.value,
            category=movement.category.value,
            amount=format_money(movement.amount),
            description=movement.description,
            due_date=movement.due_date,
            segment_index=movement.segment_index,
            notes=movement.notes,
        )


class SettlementPreviewResponse(BaseModel):
    """Plan of a settlement attempt, nothing persisted."""

    cargo_identifier: str
    segment_index: int
    state_before: SettlementStateResponse
    state_after: SettlementStateResponse
    total_amount: str = Field(pattern=MONEY_PATTERN)
    movements: list[PlannedMovementResponse]

    @classmethod
    def from_plan(cls, plan: SettlementPlan) -> SettlementPreviewResponse:
        return cls(
            cargo_identifier=plan.cargo_identifier,
            segment_index=plan.segment_index,
            state_before=SettlementStateResponse.from_state(plan.state_before),
            state_after=SettlementStateResponse.from_state(plan.state_after),
            total_amount=format_money(plan.total_amount),
            movements=[
                PlannedMovementResponse.from_planned(movement)
                for movement in plan.movements
            ],
        )


class MovementResponse(BaseModel):
    """Serialized ledger movement returned by API."""

    id: UUID
    kind: str
    category: str | None
    amount: str = Field(pattern=MONEY_PATTERN)
    description: str
    due_date: date
    payment_status: str
    cargo_id: UUID | None
    segment_index: int | None
    notes: str | None
    created_at: datetime

    @classmethod
    def from_model(cls, movement: FinancialMovement) -> MovementResponse:
        return cls(
            id=movement.id,
            kind=movement.kind.value,
            category=movement.category.value if movement.category else None,
            amount=format_money(movement.amount),
            description=movement.description,
            due_date=movement.due_date,
            payment_status=movement.payment_status.value,
            cargo_id=movement.cargo_id,
            segment_index=movement.segment_index,
            notes=movement.notes,
            created_at=movement.created_at,
        )


class UndoActionResponse(BaseModel):
    """Pending undo action."""

    id: str
    type: str
    description: str
    data: dict[str, Any]
    created_at: datetime

    @classmethod
    def from_action(cls, action: UndoAction) -> UndoActionResponse:
        return cls(
            id=action.id,
            type=action.type,
            description=action.description,
            data=action.data,
            created_at=action.created_at,
        )


class SettlementResponse(BaseModel):
    """Movements created by a settlement attempt plus its undo handle."""

    cargo_identifier: str
    segment_index: int
    state_after: SettlementStateResponse
    total_amount: str = Field(pattern=MONEY_PATTERN)
    movements: list[MovementResponse]
    undo_action: UndoActionResponse

    @classmethod
    def from_result(cls, result: SettlementResult) -> SettlementResponse:
        return cls(
            cargo_identifier=result.plan.cargo_identifier,
            segment_index=result.plan.segment_index,
            state_after=SettlementStateResponse.from_state(result.plan.state_after),
            total_amount=format_money(result.plan.total_amount),
            movements=[
                MovementResponse.from_model(movement) for movement in result.movements
            ],
            undo_action=UndoActionResponse.from_action(result.undo_action),
        )
