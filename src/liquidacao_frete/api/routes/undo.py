"""Undo routes for the most recent reversible action."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from liquidacao_frete.api.dependencies import get_undo_registry
from liquidacao_frete.api.schemas.settlements import UndoActionResponse
from liquidacao_frete.domain.errors import UndoActionNotFoundError
from liquidacao_frete.services.undo_registry import UndoRegistry

router = APIRouter(prefix="/undo", tags=["Undo"])


@router.get(
    "",
    response_model=UndoActionResponse,
    responses={404: {"description": "Nenhuma acao para desfazer"}},
)
def get_current_undo_action(
    registry: Annotated[UndoRegistry, Depends(get_undo_registry)],
) -> UndoActionResponse:
    """Return the action that can still be undone."""

    action = registry.current_action()
    if action is None:
        raise UndoActionNotFoundError()
    return UndoActionResponse.from_action(action)


@router.post(
    "",
    response_model=UndoActionResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Nenhuma acao para desfazer"}},
)
def execute_undo(
    registry: Annotated[UndoRegistry, Depends(get_undo_registry)],
) -> UndoActionResponse:
    """Revert the most recent action and return what was undone."""

    return UndoActionResponse.from_action(registry.execute_undo())
