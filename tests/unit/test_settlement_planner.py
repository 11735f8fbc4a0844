from __future__ import annotations

import ast
import inspect
from datetime import date
from decimal import Decimal

import pytest

from liquidacao_frete.db.models import financial_movement
from liquidacao_frete.domain import settlement_planner
from liquidacao_frete.domain.errors import (
    SettlementConfigurationError,
    SettlementConflictError,
)
from liquidacao_frete.domain.ledger import MovementCategory, MovementKind
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
from liquidacao_frete.domain.settlement_planner import (
    PlannedMovement,
    SettlementPlan,
    build_movement_description,
    plan_settlement,
)
from liquidacao_frete.domain.settlement_state import resolve_settlement_state

TODAY = date(2026, 3, 10)
DUE = date(2026, 4, 1)


def _plan(
    config: SettlementConfiguration,
    *,
    base_value: str = "1000.00",
    existing: tuple[PlannedMovement, ...] = (),
) -> SettlementPlan:
    return plan_settlement(
        cargo_identifier="CRT-0001",
        base_value=Decimal(base_value),
        existing_freight_movements=[
            movement
            for movement in existing
            if movement.category == MovementCategory.FREIGHT
        ],
        config=config,
        today=TODAY,
    )


def _split(option: SplitOption, **kwargs: object) -> SettlementConfiguration:
    return SettlementConfiguration(
        segment_index=1,
        split=AdvanceSplit(option=option),
        **kwargs,  # type: ignore[arg-type]
    )


def test_both_shares_without_extras_emit_advance_and_balance() -> None:
    plan = _plan(
        SettlementConfiguration(
            segment_index=1,
            split=AdvanceSplit(
                percent=AdvancePercent.SEVENTY,
                option=SplitOption.BOTH,
                advance_due_date=date(2026, 3, 15),
                balance_due_date=date(2026, 4, 15),
            ),
        )
    )

    assert [(m.description, m.amount, m.due_date) for m in plan.movements] == [
        ("Adto - Carga CRT-0001 - Trajeto 1", Decimal("700.00"), date(2026, 3, 15)),
        ("Saldo - Carga CRT-0001 - Trajeto 1", Decimal("300.00"), date(2026, 4, 15)),
    ]
    assert {m.category for m in plan.movements} == {MovementCategory.FREIGHT}
    assert {m.kind for m in plan.movements} == {MovementKind.EXPENSE}
    assert resolve_settlement_state(plan.movements).is_fully_settled is True


def test_single_payment_with_separate_per_diem() -> None:
    plan = _plan(
        SettlementConfiguration(
            segment_index=1,
            per_diem=PerDiem(
                amount=Decimal("150.00"),
                posting=ExtraPosting.INDIVIDUAL,
                due_date=DUE,
            ),
        )
    )

    assert [(m.category, m.amount) for m in plan.movements] == [
        (MovementCategory.FREIGHT, Decimal("1000.00")),
        (MovementCategory.PER_DIEM, Decimal("150.00")),
    ]
    assert plan.movements[0].description == "Frete - Carga CRT-0001 - Trajeto 1"
    assert plan.movements[0].due_date == TODAY
    assert plan.movements[1].description == "Diárias - Carga CRT-0001 - Trajeto 1"
    assert plan.movements[1].due_date == DUE


def test_single_payment_folds_extras_into_freight_line() -> None:
    plan = _plan(
        SettlementConfiguration(
            segment_index=2,
            expenses=AdditionalExpenses(
                foreign_amount=Decimal("10000"),
                conversion_rate=Decimal("0.005"),
                posting=ExtraPosting.INDIVIDUAL,
            ),
            per_diem=PerDiem(amount=Decimal("150.00")),
            single_due_date=DUE,
        )
    )

    assert len(plan.movements) == 1
    line = plan.movements[0]
    assert line.amount == Decimal("1200.00")
    assert line.description == "Frete - Carga CRT-0001 - Trajeto 2"
    assert line.due_date == DUE
    assert line.notes == "Valor do trajeto: R$ 1.000,00, Extras: R$ 200,00"


@pytest.mark.parametrize(
    "config",
    [
        SettlementConfiguration(segment_index=1),
        _split(SplitOption.BOTH),
        _split(SplitOption.ADVANCE),
        _split(SplitOption.BALANCE),
    ],
)
def test_single_payment_already_posted_rejects_any_attempt(
    config: SettlementConfiguration,
) -> None:
    existing = _plan(SettlementConfiguration(segment_index=1)).movements

    with pytest.raises(SettlementConflictError) as exc_info:
        _plan(config, existing=existing)

    assert exc_info.value.details == {"share": "single"}


def test_advance_then_balance_settles_segment() -> None:
    first = _plan(_split(SplitOption.ADVANCE))
    second = _plan(_split(SplitOption.BALANCE), existing=first.movements)

    assert first.state_after.status == "partial"
    assert [m.amount for m in second.movements] == [Decimal("300.00")]
    assert second.state_after.is_fully_settled is True
    assert resolve_settlement_state(
        first.movements + second.movements
    ).is_fully_settled


@pytest.mark.parametrize(
    ("posted", "requested", "share"),
    [
        (SplitOption.ADVANCE, SplitOption.BOTH, "advance"),
        (SplitOption.BALANCE, SplitOption.BOTH, "balance"),
        (SplitOption.ADVANCE, SplitOption.ADVANCE, "advance"),
        (SplitOption.BALANCE, SplitOption.BALANCE, "balance"),
    ],
)
def test_reposting_an_existing_share_is_rejected(
    posted: SplitOption, requested: SplitOption, share: str
) -> None:
    existing = _plan(_split(posted)).movements

    with pytest.raises(SettlementConflictError) as exc_info:
        _plan(_split(requested), existing=existing)

    assert exc_info.value.details["share"] == share


def test_single_payment_after_partial_split_is_rejected() -> None:
    existing = _plan(_split(SplitOption.BALANCE)).movements

    with pytest.raises(SettlementConflictError):
        _plan(SettlementConfiguration(segment_index=1), existing=existing)


def test_fully_settled_segment_rejects_any_attempt() -> None:
    existing = _plan(_split(SplitOption.BOTH)).movements

    with pytest.raises(SettlementConflictError) as exc_info:
        _plan(_split(SplitOption.ADVANCE), existing=existing)

    assert exc_info.value.details["share"] == "both"


def test_missing_segment_is_rejected() -> None:
    with pytest.raises(SettlementConfigurationError) as exc_info:
        _plan(SettlementConfiguration(segment_index=None))

    assert exc_info.value.details["field"] == "segment_index"


@pytest.mark.parametrize(
    ("config", "field"),
    [
        (
            SettlementConfiguration(
                segment_index=1,
                expenses=AdditionalExpenses(foreign_amount=Decimal("100")),
            ),
            "expenses",
        ),
        (
            SettlementConfiguration(segment_index=1, per_diem=PerDiem()),
            "per_diem.amount",
        ),
        (
            _split(
                SplitOption.BOTH,
                expenses=AdditionalExpenses(
                    direct_amount=Decimal("80"), posting=ExtraPosting.INDIVIDUAL
                ),
            ),
            "expenses.due_date",
        ),
        (
            SettlementConfiguration(
                segment_index=1,
                per_diem=PerDiem(amount=Decimal("50"), posting=ExtraPosting.INDIVIDUAL),
            ),
            "per_diem.due_date",
        ),
        (
            SettlementConfiguration(
                segment_index=1,
                split=AdvanceSplit(
                    option=SplitOption.ADVANCE,
                    consolidation_target=ConsolidationTarget.BALANCE,
                ),
                per_diem=PerDiem(amount=Decimal("50")),
            ),
            "split.consolidation_target",
        ),
    ],
)
def test_incomplete_configuration_is_rejected(
    config: SettlementConfiguration, field: str
) -> None:
    with pytest.raises(SettlementConfigurationError) as exc_info:
        _plan(config)

    assert exc_info.value.details["field"] == field


def test_zero_base_value_without_extras_is_rejected() -> None:
    with pytest.raises(SettlementConfigurationError) as exc_info:
        _plan(SettlementConfiguration(segment_index=1), base_value="0.00")

    assert exc_info.value.details["field"] == "base_value"


def test_individual_extras_are_posted_on_their_own_lines() -> None:
    plan = _plan(
        _split(
            SplitOption.BOTH,
            expenses=AdditionalExpenses(
                direct_amount=Decimal("80.00"),
                posting=ExtraPosting.INDIVIDUAL,
                due_date=DUE,
            ),
            per_diem=PerDiem(
                amount=Decimal("120.00"),
                posting=ExtraPosting.INDIVIDUAL,
                due_date=DUE,
            ),
        )
    )

    assert [(m.category, m.amount) for m in plan.movements] == [
        (MovementCategory.FREIGHT, Decimal("700.00")),
        (MovementCategory.FREIGHT, Decimal("300.00")),
        (MovementCategory.OTHER_EXPENSE, Decimal("80.00")),
        (MovementCategory.PER_DIEM, Decimal("120.00")),
    ]
    assert plan.movements[2].description == (
        "Despesas Adicionais - Carga CRT-0001 - Trajeto 1"
    )


def test_consolidated_extras_notes_mention_summed_extras() -> None:
    plan = _plan(
        SettlementConfiguration(
            segment_index=1,
            split=AdvanceSplit(
                option=SplitOption.BALANCE,
                consolidation_target=ConsolidationTarget.BALANCE,
            ),
            per_diem=PerDiem(amount=Decimal("150.00")),
        )
    )

    assert len(plan.movements) == 1
    assert plan.movements[0].amount == Decimal("450.00")
    assert plan.movements[0].notes == (
        "Saldo 30%: R$ 300,00, Extras somados: R$ 150,00"
    )


EXPENSES = AdditionalExpenses(
    foreign_amount=Decimal("12345"),
    conversion_rate=Decimal("0.0061"),
    direct_amount=Decimal("33.33"),
    due_date=DUE,
)
PER_DIEM = PerDiem(amount=Decimal("187.45"), due_date=DUE)


@pytest.mark.parametrize("percent", list(AdvancePercent))
@pytest.mark.parametrize("split_enabled", [True, False])
@pytest.mark.parametrize("expenses_posting", [None, *ExtraPosting])
@pytest.mark.parametrize("per_diem_posting", [None, *ExtraPosting])
def test_every_extra_is_represented_exactly_once(
    percent: AdvancePercent,
    split_enabled: bool,
    expenses_posting: ExtraPosting | None,
    per_diem_posting: ExtraPosting | None,
) -> None:
    expenses = (
        None
        if expenses_posting is None
        else AdditionalExpenses(
            foreign_amount=EXPENSES.foreign_amount,
            conversion_rate=EXPENSES.conversion_rate,
            direct_amount=EXPENSES.direct_amount,
            posting=expenses_posting,
            due_date=DUE,
        )
    )
    per_diem = (
        None
        if per_diem_posting is None
        else PerDiem(amount=PER_DIEM.amount, posting=per_diem_posting, due_date=DUE)
    )
    config = SettlementConfiguration(
        segment_index=1,
        split=AdvanceSplit(percent=percent) if split_enabled else None,
        expenses=expenses,
        per_diem=per_diem,
    )

    plan = _plan(config, base_value="1234.57")

    assert plan.total_amount == plan.amounts.base_value + plan.amounts.extras_total
    assert resolve_settlement_state(
        m for m in plan.movements if m.category == MovementCategory.FREIGHT
    ) == plan.state_after


def test_build_movement_description_uses_canonical_template() -> None:
    assert (
        build_movement_description("Saldo", "CRT-77", 3)
        == "Saldo - Carga CRT-77 - Trajeto 3"
    )


def test_balance_without_target_sums_extras_into_balance() -> None:
    first = _plan(_split(SplitOption.ADVANCE))
    plan = _plan(
        _split(SplitOption.BALANCE, per_diem=PerDiem(amount=Decimal("150.00"))),
        existing=first.movements,
    )

    assert [m.amount for m in plan.movements] == [Decimal("450.00")]
    assert plan.state_after.is_fully_settled is True


def test_advance_without_target_sums_extras_into_advance() -> None:
    plan = _plan(_split(SplitOption.ADVANCE, per_diem=PerDiem(amount=Decimal("50"))))

    assert [m.amount for m in plan.movements] == [Decimal("750.00")]


@pytest.mark.parametrize(
    ("config", "base_value", "field"),
    [
        (
            SettlementConfiguration(
                segment_index=1, per_diem=PerDiem(amount=Decimal("9" * 30))
            ),
            "1000.00",
            "per_diem.amount",
        ),
        (
            _split(
                SplitOption.BOTH,
                expenses=AdditionalExpenses(direct_amount=Decimal("1" + "0" * 12)),
            ),
            "1000.00",
            "expenses",
        ),
        (SettlementConfiguration(segment_index=1), "1" + "0" * 15, "base_value"),
        (
            SettlementConfiguration(
                segment_index=1, per_diem=PerDiem(amount=Decimal("9000000000.00"))
            ),
            "1000000000.00",
            "base_value",
        ),
    ],
)
def test_amounts_above_ledger_limit_are_rejected(
    config: SettlementConfiguration, base_value: str, field: str
) -> None:
    with pytest.raises(SettlementConfigurationError) as exc_info:
        _plan(config, base_value=base_value)

    assert exc_info.value.details["field"] == field


def test_planner_does_not_depend_on_persistence() -> None:
    tree = ast.parse(inspect.getsource(settlement_planner))
    imported = {
        node.module for node in ast.walk(tree) if isinstance(node, ast.ImportFrom)
    }

    assert not any(
        module.startswith(("liquidacao_frete.db", "sqlalchemy"))
        for module in imported
        if module is not None
    )
    assert financial_movement.MovementCategory is MovementCategory
    assert MovementCategory.__module__ == "liquidacao_frete.domain.ledger"
