"""Per-attempt settlement configuration value objects."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal


class AdvancePercent(enum.IntEnum):
    """Allowed advance percentages over the segment base value."""

    SEVENTY = 70
    EIGHTY = 80


class SplitOption(enum.StrEnum):
    """Which freight shares are posted when the advance split is enabled."""

    BOTH = "ambos"
    ADVANCE = "adiantamento"
    BALANCE = "saldo"


class ConsolidationTarget(enum.StrEnum):
    """Freight share receiving consolidated extras in single-share modes."""

    ADVANCE = "adiantamento"
    BALANCE = "saldo"


class ExtraPosting(enum.StrEnum):
    """How an extra is represented in the ledger."""

    CONSOLIDATED = "consolidado"
    INDIVIDUAL = "individual"


@dataclass(frozen=True, slots=True)
class AdvanceSplit:
    """Advance/balance split of the segment base value."""

    percent: AdvancePercent = AdvancePercent.SEVENTY
    option: SplitOption = SplitOption.BOTH
    consolidation_target: ConsolidationTarget | None = None
    advance_due_date: date | None = None
    balance_due_date: date | None = None


@dataclass(frozen=True, slots=True)
class AdditionalExpenses:
    """Extra costs paid in foreign currency plus a direct BRL amount."""

    foreign_amount: Decimal = Decimal("0")
    conversion_rate: Decimal = Decimal("0")
    direct_amount: Decimal = Decimal("0")
    posting: ExtraPosting = ExtraPosting.CONSOLIDATED
    due_date: date | None = None


@dataclass(frozen=True, slots=True)
class PerDiem:
    """Driver per-diem paid with the freight."""

    amount: Decimal = Decimal("0")
    posting: ExtraPosting = ExtraPosting.CONSOLIDATED
    due_date: date | None = None


@dataclass(frozen=True, slots=True)
class SettlementConfiguration:
    """Decision object for one settlement attempt on one route segment.

    A disabled toggle is represented by ``None``: ``split`` absent means the
    freight is posted as a single payment, ``expenses``/``per_diem`` absent
    means the extra is not part of this attempt.
    """

    segment_index: int | None
    split: AdvanceSplit | None = None
    expenses: AdditionalExpenses | None = None
    per_diem: PerDiem | None = None
    single_due_date: date | None = None
