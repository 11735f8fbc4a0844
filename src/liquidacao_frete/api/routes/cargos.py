"""Cargo financial summary routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from liquidacao_frete.api.dependencies import get_cargo_summary_service
from liquidacao_frete.api.schemas.cargos import CargoFinancialSummaryResponse
from liquidacao_frete.services.cargo_summary_service import CargoSummaryService

router = APIRouter(prefix="/cargos", tags=["Cargos"])


@router.get(
    "/{cargo_id}/financial-summary",
    response_model=CargoFinancialSummaryResponse,
    responses={404: {"description": "Carga nao encontrada"}},
)
def get_cargo_financial_summary(
    cargo_id: UUID,
    service: Annotated[CargoSummaryService, Depends(get_cargo_summary_service)],
) -> CargoFinancialSummaryResponse:
    """Return cargo value, posted extras and per-segment settlement state."""

    return CargoFinancialSummaryResponse.from_summary(service.get_summary(cargo_id))
