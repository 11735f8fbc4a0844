"""Settlement state detection from already-posted freight movements.

A route segment carries no persisted settlement status. Whether it was paid
in a single movement, or which of the advance/balance shares were posted, is
recognized from the description prefix of its FREIGHT movements. Prefixes are
matched exactly (case-sensitive, anchored at the start) so historical ledger
rows keep being recognized.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

SINGLE_PAYMENT_LABEL = "Frete"
ADVANCE_LABEL = "Adto"
BALANCE_LABEL = "Saldo"
PER_DIEM_TOKEN = "Diárias"
ADDITIONAL_EXPENSES_TOKEN = "Despesas Adicionais"
DESCRIPTION_SEPARATOR = " - "

SINGLE_PAYMENT_MARKER = f"{SINGLE_PAYMENT_LABEL}{DESCRIPTION_SEPARATOR}"
ADVANCE_MARKER = f"{ADVANCE_LABEL}{DESCRIPTION_SEPARATOR}"
BALANCE_MARKER = f"{BALANCE_LABEL}{DESCRIPTION_SEPARATOR}"


class DescribedMovement(Protocol):
    """Anything exposing a ledger description."""

    @property
    def description(self) -> str: ...


class SettlementStatus(enum.StrEnum):
    """Settlement lifecycle of one route segment."""

    UNSETTLED = "unsettled"
    PARTIAL = "partial"
    SETTLED = "settled"


class FreightShare(enum.StrEnum):
    """Freight postings recognized by the resolver."""

    SINGLE = "single"
    ADVANCE = "advance"
    BALANCE = "balance"


SHARE_MARKERS: dict[FreightShare, str] = {
    FreightShare.SINGLE: SINGLE_PAYMENT_MARKER,
    FreightShare.ADVANCE: ADVANCE_MARKER,
    FreightShare.BALANCE: BALANCE_MARKER,
}


@dataclass(frozen=True, slots=True)
class SettlementState:
    """Which freight shares already exist for a route segment."""

    has_advance: bool = False
    has_balance: bool = False
    has_single: bool = False

    @property
    def is_fully_settled(self) -> bool:
        return self.has_single or (self.has_advance and self.has_balance)

    @property
    def status(self) -> SettlementStatus:
        if self.is_fully_settled:
            return SettlementStatus.SETTLED
        if self.has_advance or self.has_balance:
            return SettlementStatus.PARTIAL
        return SettlementStatus.UNSETTLED


def resolve_settlement_state(
    movements: Iterable[DescribedMovement],
) -> SettlementState:
    """Classify a segment from its FREIGHT movements.

    The caller is expected to pass only movements of the same cargo, route
    segment and FREIGHT category.
    """
    descriptions = [movement.description for movement in movements]
    posted = {
        share
        for share, marker in SHARE_MARKERS.items()
        if any(description.startswith(marker) for description in descriptions)
    }
    return SettlementState(
        has_advance=FreightShare.ADVANCE in posted,
        has_balance=FreightShare.BALANCE in posted,
        has_single=FreightShare.SINGLE in posted,
    )
