"""Amount rules for freight settlement (advance/balance split and extras)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from liquidacao_frete.domain.money import ZERO, quantize_money
from liquidacao_frete.domain.settlement_config import (
    AdditionalExpenses,
    AdvancePercent,
    ConsolidationTarget,
    ExtraPosting,
    PerDiem,
    SettlementConfiguration,
    SplitOption,
)


@dataclass(frozen=True, slots=True)
class SettlementAmounts:
    """Every amount derived for one settlement attempt."""

    base_value: Decimal
    advance_share: Decimal
    balance_share: Decimal
    converted_expenses: Decimal
    per_diem: Decimal
    consolidated_extras: Decimal
    individual_expenses: Decimal
    individual_per_diem: Decimal
    single_payment: Decimal
    advance_total: Decimal
    balance_total: Decimal

    @property
    def extras_total(self) -> Decimal:
        return self.converted_expenses + self.per_diem


def advance_amount(base_value: Decimal, percent: AdvancePercent) -> Decimal:
    return quantize_money(base_value * Decimal(int(percent)) / Decimal(100))


def balance_amount(base_value: Decimal, percent: AdvancePercent) -> Decimal:
    """Remainder of the base value, so advance + balance is always exact."""
    return quantize_money(base_value) - advance_amount(base_value, percent)


def converted_expenses_amount(expenses: AdditionalExpenses | None) -> Decimal:
    if expenses is None:
        return ZERO
    converted = expenses.foreign_amount * expenses.conversion_rate
    return quantize_money(converted + expenses.direct_amount)


def per_diem_amount(per_diem: PerDiem | None) -> Decimal:
    if per_diem is None:
        return ZERO
    return quantize_money(per_diem.amount)


def consolidation_share(config: SettlementConfiguration) -> ConsolidationTarget | None:
    """Share that receives consolidated extras, ``None`` without a split.

    When both shares are posted the extras always land on the balance. A
    single-share attempt without an explicit target sums them into the share
    being posted.
    """
    if config.split is None:
        return None
    if config.split.option == SplitOption.BOTH:
        return ConsolidationTarget.BALANCE
    if config.split.consolidation_target is not None:
        return config.split.consolidation_target
    if config.split.option == SplitOption.ADVANCE:
        return ConsolidationTarget.ADVANCE
    return ConsolidationTarget.BALANCE


def consolidated_extras_amount(config: SettlementConfiguration) -> Decimal:
    if config.split is None:
        return ZERO
    total = ZERO
    if _is_consolidated(config.expenses):
        total += converted_expenses_amount(config.expenses)
    if _is_consolidated(config.per_diem):
        total += per_diem_amount(config.per_diem)
    return total


def individual_extras_amount(config: SettlementConfiguration) -> Decimal:
    if config.split is None:
        return ZERO
    total = ZERO
    if _is_individual(config.expenses):
        total += converted_expenses_amount(config.expenses)
    if _is_individual(config.per_diem):
        total += per_diem_amount(config.per_diem)
    return total


def single_payment_amount(base_value: Decimal, config: SettlementConfiguration) -> Decimal:
    """Freight line of a settlement without split.

    Expenses are always folded in; the per-diem too unless it is posted on
    its own line.
    """
    total = quantize_money(base_value) + converted_expenses_amount(config.expenses)
    if not _is_individual(config.per_diem):
        total += per_diem_amount(config.per_diem)
    return total


def calculate_amounts(
    base_value: Decimal, config: SettlementConfiguration
) -> SettlementAmounts:
    """Derive every amount needed to plan the settlement of one segment."""
    base = quantize_money(base_value)
    expenses = converted_expenses_amount(config.expenses)
    per_diem = per_diem_amount(config.per_diem)

    if config.split is None:
        separate_per_diem = per_diem if _is_individual(config.per_diem) else ZERO
        return SettlementAmounts(
            base_value=base,
            advance_share=ZERO,
            balance_share=ZERO,
            converted_expenses=expenses,
            per_diem=per_diem,
            consolidated_extras=ZERO,
            individual_expenses=ZERO,
            individual_per_diem=separate_per_diem,
            single_payment=single_payment_amount(base, config),
            advance_total=ZERO,
            balance_total=ZERO,
        )

    advance_share = advance_amount(base, config.split.percent)
    balance_share = balance_amount(base, config.split.percent)
    consolidated = consolidated_extras_amount(config)
    target = consolidation_share(config)
    return SettlementAmounts(
        base_value=base,
        advance_share=advance_share,
        balance_share=balance_share,
        converted_expenses=expenses,
        per_diem=per_diem,
        consolidated_extras=consolidated,
        individual_expenses=expenses if _is_individual(config.expenses) else ZERO,
        individual_per_diem=per_diem if _is_individual(config.per_diem) else ZERO,
        single_payment=ZERO,
        advance_total=advance_share
        + (consolidated if target == ConsolidationTarget.ADVANCE else ZERO),
        balance_total=balance_share
        + (consolidated if target == ConsolidationTarget.BALANCE else ZERO),
    )


def _is_individual(extra: AdditionalExpenses | PerDiem | None) -> bool:
    return extra is not None and extra.posting == ExtraPosting.INDIVIDUAL


def _is_consolidated(extra: AdditionalExpenses | PerDiem | None) -> bool:
    return extra is not None and extra.posting == ExtraPosting.CONSOLIDATED
