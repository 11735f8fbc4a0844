"""Freight settlement routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from liquidacao_frete.api.dependencies import get_settlement_service
from liquidacao_frete.api.schemas.settlements import (
    SettlementPreviewResponse,
    SettlementRequest,
    SettlementResponse,
    SettlementStateResponse,
)
from liquidacao_frete.services.settlement_service import SettlementService

router = APIRouter(prefix="/cargos/{cargo_id}", tags=["Settlements"])


@router.get(
    "/segments/{segment_index}/settlement",
    response_model=SettlementStateResponse,
    responses={404: {"description": "Carga ou trajeto nao encontrado"}},
)
def get_segment_settlement(
    cargo_id: UUID,
    segment_index: Annotated[int, Path(ge=1)],
    service: Annotated[SettlementService, Depends(get_settlement_service)],
) -> SettlementStateResponse:
    """Return which freight shares were already posted for the segment."""

    state = service.segment_state(cargo_id, segment_index)
    return SettlementStateResponse.from_state(state)


@router.post(
    "/settlements/preview",
    response_model=SettlementPreviewResponse,
    responses={
        400: {"description": "Payload invalido"},
        404: {"description": "Carga ou trajeto nao encontrado"},
        409: {"description": "Parcela ja lancada"},
        422: {"description": "Configuracao incompleta"},
    },
)
def preview_settlement(
    cargo_id: UUID,
    payload: SettlementRequest,
    service: Annotated[SettlementService, Depends(get_settlement_service)],
) -> SettlementPreviewResponse:
    """Compute the movements a settlement would create, without posting."""

    plan = service.preview(cargo_id, payload.to_configuration())
    return SettlementPreviewResponse.from_plan(plan)


@router.post(
    "/settlements",
    response_model=SettlementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Payload invalido"},
        404: {"description": "Carga ou trajeto nao encontrado"},
        409: {"description": "Parcela ja lancada"},
        422: {"description": "Configuracao incompleta"},
    },
)
def create_settlement(
    cargo_id: UUID,
    payload: SettlementRequest,
    service: Annotated[SettlementService, Depends(get_settlement_service)],
) -> SettlementResponse:
    """Post the freight settlement movements of one route segment."""

    result = service.settle(cargo_id, payload.to_configuration())
    return SettlementResponse.from_result(result)
