"""Ledger vocabulary shared by the settlement planner and persistence."""

from __future__ import annotations

import enum
from decimal import Decimal

# Largest value a ``Numeric(12, 2)`` ledger amount can hold.
MAX_LEDGER_AMOUNT = Decimal("9999999999.99")


class MovementKind(enum.StrEnum):
    """Ledger direction of a movement."""

    INCOME = "receita"
    EXPENSE = "despesa"


class MovementCategory(enum.StrEnum):
    """Ledger categories produced and consumed by freight settlement."""

    FREIGHT = "FRETE"
    PER_DIEM = "DIARIA"
    OTHER_EXPENSE = "OUTRAS DESPESAS"


class PaymentStatus(enum.StrEnum):
    """Payment lifecycle of a ledger movement."""

    PENDING = "pendente"
    PAID = "pago"
    CANCELLED = "cancelado"
