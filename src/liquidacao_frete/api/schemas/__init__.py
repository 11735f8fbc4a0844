"""API schema exports."""

from liquidacao_frete.api.schemas.cargos import CargoFinancialSummaryResponse
from liquidacao_frete.api.schemas.settlements import (
    SettlementPreviewResponse,
    SettlementRequest,
    SettlementResponse,
    SettlementStateResponse,
    UndoActionResponse,
)

__all__ = [
    "CargoFinancialSummaryResponse",
    "SettlementPreviewResponse",
    "SettlementRequest",
    "SettlementResponse",
    "SettlementStateResponse",
    "UndoActionResponse",
]
