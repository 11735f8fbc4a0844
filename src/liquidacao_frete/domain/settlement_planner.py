"""Freight settlement planning: validation and ledger line emission.

The planner is pure. Given the freight movements already posted for a route
segment and the configuration chosen for this attempt, it either rejects the
attempt or returns the complete list of ledger lines to create. Nothing is
emitted when validation fails.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from liquidacao_frete.domain.errors import (
    SettlementConfigurationError,
    SettlementConflictError,
    compose_error_message,
)
from liquidacao_frete.domain.ledger import (
    MAX_LEDGER_AMOUNT,
    MovementCategory,
    MovementKind,
)
from liquidacao_frete.domain.money import ZERO, format_brl
from liquidacao_frete.domain.settlement_amounts import (
    SettlementAmounts,
    calculate_amounts,
    consolidation_share,
)
from liquidacao_frete.domain.settlement_config import (
    AdditionalExpenses,
    AdvanceSplit,
    ConsolidationTarget,
    ExtraPosting,
    PerDiem,
    SettlementConfiguration,
    SplitOption,
)
from liquidacao_frete.domain.settlement_state import (
    ADDITIONAL_EXPENSES_TOKEN,
    ADVANCE_LABEL,
    BALANCE_LABEL,
    DESCRIPTION_SEPARATOR,
    PER_DIEM_TOKEN,
    SINGLE_PAYMENT_LABEL,
    DescribedMovement,
    FreightShare,
    SettlementState,
    resolve_settlement_state,
)


_AMOUNT_FIELDS = {
    MovementCategory.FREIGHT: "base_value",
    MovementCategory.PER_DIEM: "per_diem.amount",
    MovementCategory.OTHER_EXPENSE: "expenses",
}


@dataclass(frozen=True, slots=True)
class PlannedMovement:
    """Ledger line to be created by a settlement attempt."""

    kind: MovementKind
    category: MovementCategory
    amount: Decimal
    description: str
    due_date: date
    segment_index: int
    notes: str
    share: FreightShare | None = None


@dataclass(frozen=True, slots=True)
class SettlementPlan:
    """Validated outcome of planning one settlement attempt."""

    cargo_identifier: str
    segment_index: int
    state_before: SettlementState
    amounts: SettlementAmounts
    movements: tuple[PlannedMovement, ...]

    @property
    def total_amount(self) -> Decimal:
        return sum((movement.amount for movement in self.movements), ZERO)

    @property
    def state_after(self) -> SettlementState:
        posted = {movement.share for movement in self.movements}
        return SettlementState(
            has_advance=self.state_before.has_advance
            or FreightShare.ADVANCE in posted,
            has_balance=self.state_before.has_balance
            or FreightShare.BALANCE in posted,
            has_single=self.state_before.has_single or FreightShare.SINGLE in posted,
        )


def build_movement_description(
    label: str, cargo_identifier: str, segment_index: int
) -> str:
    """Canonical ledger description, e.g. ``Adto - Carga CRT-1 - Trajeto 2``."""
    return DESCRIPTION_SEPARATOR.join(
        (label, f"Carga {cargo_identifier}", f"Trajeto {segment_index}")
    )


def validate_settlement(
    state: SettlementState, config: SettlementConfiguration, amounts: SettlementAmounts
) -> int:
    """Raise when the attempt cannot be posted on top of ``state``.

    Returns the selected segment index.
    """
    if config.segment_index is None:
        raise SettlementConfigurationError(
            message=compose_error_message(
                cause="No route segment was selected.",
                action="Select the route segment to settle and resubmit.",
            ),
            field_name="segment_index",
        )

    _validate_state(state, config)
    _validate_extras(config, amounts)
    _validate_consolidation(config, amounts)
    return config.segment_index


def plan_settlement(
    *,
    cargo_identifier: str,
    base_value: Decimal,
    existing_freight_movements: Iterable[DescribedMovement],
    config: SettlementConfiguration,
    today: date,
) -> SettlementPlan:
    """Validate ``config`` against the segment state and emit its ledger lines.

    ``existing_freight_movements`` must hold the FREIGHT movements of the
    selected segment only. ``today`` is the due date used for freight lines
    whose due date was left blank.
    """
    state = resolve_settlement_state(existing_freight_movements)
    amounts = calculate_amounts(base_value, config)
    segment_index = validate_settlement(state, config, amounts)

    if config.split is None:
        movements = _single_payment_lines(
            cargo_identifier, segment_index, config, amounts, today
        )
    else:
        movements = _split_lines(
            cargo_identifier, segment_index, config, config.split, amounts, today
        )

    for movement in movements:
        if movement.amount <= ZERO:
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause=f"'{movement.description}' would be posted with no value.",
                    action="Review the segment freight value before settling it.",
                ),
                field_name="base_value",
            )
        if movement.amount > MAX_LEDGER_AMOUNT:
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause=(
                        f"'{movement.description}' exceeds the largest ledger "
                        f"amount ({format_brl(MAX_LEDGER_AMOUNT)})."
                    ),
                    action="Review the typed values before settling the segment.",
                ),
                field_name=_AMOUNT_FIELDS[movement.category],
            )

    return SettlementPlan(
        cargo_identifier=cargo_identifier,
        segment_index=segment_index,
        state_before=state,
        amounts=amounts,
        movements=tuple(movements),
    )


def _validate_state(state: SettlementState, config: SettlementConfiguration) -> None:
    if state.has_single:
        raise SettlementConflictError(
            message=compose_error_message(
                cause="Route segment was already settled in a single freight payment.",
                action="Delete the freight movement before settling it again.",
            ),
            share=FreightShare.SINGLE.value,
        )
    if state.is_fully_settled:
        raise SettlementConflictError(
            message=compose_error_message(
                cause="Advance and balance were already posted for this segment.",
                action="Delete one of the freight movements before settling again.",
            ),
            share="both",
        )

    if config.split is None:
        if state.has_advance or state.has_balance:
            existing = (
                FreightShare.ADVANCE if state.has_advance else FreightShare.BALANCE
            )
            raise SettlementConflictError(
                message=compose_error_message(
                    cause=(
                        f"The {existing.value} share was already posted, so the "
                        "freight cannot be paid in a single movement."
                    ),
                    action="Enable the advance split and post the missing share.",
                ),
                share=existing.value,
            )
        return

    option = config.split.option
    if option == SplitOption.BOTH and (state.has_advance or state.has_balance):
        existing = FreightShare.ADVANCE if state.has_advance else FreightShare.BALANCE
        raise SettlementConflictError(
            message=compose_error_message(
                cause=(
                    f"The {existing.value} share was already posted, so advance "
                    "and balance cannot be posted together."
                ),
                action="Post only the missing share.",
            ),
            share=existing.value,
        )
    if option == SplitOption.ADVANCE and state.has_advance:
        raise SettlementConflictError(
            message=compose_error_message(
                cause="The advance share was already posted.",
                action="Post the balance share instead.",
            ),
            share=FreightShare.ADVANCE.value,
        )
    if option == SplitOption.BALANCE and state.has_balance:
        raise SettlementConflictError(
            message=compose_error_message(
                cause="The balance share was already posted.",
                action="Post the advance share instead.",
            ),
            share=FreightShare.BALANCE.value,
        )


def _validate_extras(
    config: SettlementConfiguration, amounts: SettlementAmounts
) -> None:
    if config.expenses is not None:
        if amounts.converted_expenses <= ZERO:
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause="Additional expenses are enabled but total zero.",
                    action=(
                        "Fill in the foreign amount and conversion rate, or a "
                        "direct BRL amount, or disable additional expenses."
                    ),
                ),
                field_name="expenses",
            )
        _validate_ledger_limit(amounts.converted_expenses, "expenses")
        posted_alone = (
            config.split is not None
            and config.expenses.posting == ExtraPosting.INDIVIDUAL
        )
        if posted_alone and config.expenses.due_date is None:
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause="Additional expenses posted separately need a due date.",
                    action="Fill in the additional expenses due date.",
                ),
                field_name="expenses.due_date",
            )

    if config.per_diem is not None:
        if amounts.per_diem <= ZERO:
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause="Per-diem is enabled but its amount is zero.",
                    action="Fill in the per-diem amount or disable it.",
                ),
                field_name="per_diem.amount",
            )
        _validate_ledger_limit(amounts.per_diem, "per_diem.amount")
        if (
            config.per_diem.posting == ExtraPosting.INDIVIDUAL
            and config.per_diem.due_date is None
        ):
            raise SettlementConfigurationError(
                message=compose_error_message(
                    cause="Per-diem posted separately needs a due date.",
                    action="Fill in the per-diem due date.",
                ),
                field_name="per_diem.due_date",
            )


def _validate_ledger_limit(amount: Decimal, field_name: str) -> None:
    if amount > MAX_LEDGER_AMOUNT:
        raise SettlementConfigurationError(
            message=compose_error_message(
                cause=(
                    f"Amount {amount} exceeds the largest ledger amount "
                    f"({format_brl(MAX_LEDGER_AMOUNT)})."
                ),
                action="Review the typed value and resubmit.",
            ),
            field_name=field_name,
        )


def _validate_consolidation(
    config: SettlementConfiguration, amounts: SettlementAmounts
) -> None:
    if config.split is None or amounts.consolidated_extras <= ZERO:
        return
    posted_target = {
        SplitOption.ADVANCE: ConsolidationTarget.ADVANCE,
        SplitOption.BALANCE: ConsolidationTarget.BALANCE,
    }.get(config.split.option)
    if posted_target is not None and consolidation_share(config) != posted_target:
        raise SettlementConfigurationError(
            message=compose_error_message(
                cause=(
                    "Consolidated extras target a share that is not posted in "
                    "this attempt."
                ),
                action=(
                    "Sum the extras into the share being posted or post the "
                    "extras individually."
                ),
            ),
            field_name="split.consolidation_target",
        )


def _single_payment_lines(
    cargo_identifier: str,
    segment_index: int,
    config: SettlementConfiguration,
    amounts: SettlementAmounts,
    today: date,
) -> list[PlannedMovement]:
    folded_extras = amounts.single_payment - amounts.base_value
    if folded_extras > ZERO:
        notes = (
            f"Valor do trajeto: {format_brl(amounts.base_value)}, "
            f"Extras: {format_brl(folded_extras)}"
        )
    else:
        notes = (
            "Integração sem adiantamento. "
            f"Valor do trajeto: {format_brl(amounts.base_value)}"
        )
    lines = [
        PlannedMovement(
            kind=MovementKind.EXPENSE,
            category=MovementCategory.FREIGHT,
            amount=amounts.single_payment,
            description=build_movement_description(
                SINGLE_PAYMENT_LABEL, cargo_identifier, segment_index
            ),
            due_date=config.single_due_date or today,
            segment_index=segment_index,
            notes=notes,
            share=FreightShare.SINGLE,
        )
    ]
    if config.per_diem is not None and amounts.individual_per_diem > ZERO:
        lines.append(
            _per_diem_line(cargo_identifier, segment_index, config.per_diem, amounts)
        )
    return lines


def _split_lines(
    cargo_identifier: str,
    segment_index: int,
    config: SettlementConfiguration,
    split: AdvanceSplit,
    amounts: SettlementAmounts,
    today: date,
) -> list[PlannedMovement]:
    advance_percent = int(split.percent)
    lines: list[PlannedMovement] = []

    if split.option in (SplitOption.BOTH, SplitOption.ADVANCE):
        lines.append(
            PlannedMovement(
                kind=MovementKind.EXPENSE,
                category=MovementCategory.FREIGHT,
                amount=amounts.advance_total,
                description=build_movement_description(
                    ADVANCE_LABEL, cargo_identifier, segment_index
                ),
                due_date=split.advance_due_date or today,
                segment_index=segment_index,
                notes=_share_notes(
                    "Adiantamento",
                    advance_percent,
                    amounts.advance_share,
                    amounts.advance_total - amounts.advance_share,
                ),
                share=FreightShare.ADVANCE,
            )
        )
    if split.option in (SplitOption.BOTH, SplitOption.BALANCE):
        lines.append(
            PlannedMovement(
                kind=MovementKind.EXPENSE,
                category=MovementCategory.FREIGHT,
                amount=amounts.balance_total,
                description=build_movement_description(
                    BALANCE_LABEL, cargo_identifier, segment_index
                ),
                due_date=split.balance_due_date or today,
                segment_index=segment_index,
                notes=_share_notes(
                    "Saldo",
                    100 - advance_percent,
                    amounts.balance_share,
                    amounts.balance_total - amounts.balance_share,
                ),
                share=FreightShare.BALANCE,
            )
        )

    if config.expenses is not None and amounts.individual_expenses > ZERO:
        lines.append(
            PlannedMovement(
                kind=MovementKind.EXPENSE,
                category=MovementCategory.OTHER_EXPENSE,
                amount=amounts.individual_expenses,
                description=build_movement_description(
                    ADDITIONAL_EXPENSES_TOKEN, cargo_identifier, segment_index
                ),
                due_date=_required_due_date(
                    config.expenses.due_date, "expenses.due_date"
                ),
                segment_index=segment_index,
                notes=_expenses_notes(config.expenses, amounts),
            )
        )
    if config.per_diem is not None and amounts.individual_per_diem > ZERO:
        lines.append(
            _per_diem_line(cargo_identifier, segment_index, config.per_diem, amounts)
        )
    return lines


def _per_diem_line(
    cargo_identifier: str,
    segment_index: int,
    per_diem: PerDiem,
    amounts: SettlementAmounts,
) -> PlannedMovement:
    return PlannedMovement(
        kind=MovementKind.EXPENSE,
        category=MovementCategory.PER_DIEM,
        amount=amounts.individual_per_diem,
        description=build_movement_description(
            PER_DIEM_TOKEN, cargo_identifier, segment_index
        ),
        due_date=_required_due_date(per_diem.due_date, "per_diem.due_date"),
        segment_index=segment_index,
        notes=f"Diárias: {format_brl(amounts.individual_per_diem)}",
    )


def _required_due_date(due_date: date | None, field_name: str) -> date:
    if due_date is None:
        raise SettlementConfigurationError(
            message=compose_error_message(
                cause="An extra posted separately needs a due date.",
                action="Fill in the due date and resubmit.",
            ),
            field_name=field_name,
        )
    return due_date


def _share_notes(label: str, percent: int, share: Decimal, extras: Decimal) -> str:
    notes = f"{label} {percent}%: {format_brl(share)}"
    if extras > ZERO:
        notes += f", Extras somados: {format_brl(extras)}"
    return notes


def _expenses_notes(expenses: AdditionalExpenses, amounts: SettlementAmounts) -> str:
    notes = f"Despesas adicionais: {format_brl(amounts.individual_expenses)}"
    if expenses.foreign_amount > ZERO:
        notes += (
            f" (ARS {expenses.foreign_amount} x {expenses.conversion_rate}"
            f" + {format_brl(expenses.direct_amount)})"
        )
    return notes
