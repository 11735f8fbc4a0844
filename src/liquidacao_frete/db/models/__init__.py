"""ORM models for the freight settlement domain."""

from liquidacao_frete.db.models.cargo import Cargo, CargoStatus, RouteSegment
from liquidacao_frete.db.models.financial_movement import (
    FinancialMovement,
    MovementCategory,
    MovementKind,
    PaymentStatus,
)

__all__ = [
    "Cargo",
    "CargoStatus",
    "FinancialMovement",
    "MovementCategory",
    "MovementKind",
    "PaymentStatus",
    "RouteSegment",
]
