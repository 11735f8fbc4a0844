"""Registers settlement attempts as one atomic undo unit."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from liquidacao_frete.repositories.movement_repository import MovementRepository
from liquidacao_frete.services.undo_registry import UndoAction, UndoRegistry

logger = logging.getLogger(__name__)

SETTLEMENT_UNDO_TYPE = "integrate_financial"


class ReversalService:
    """Builds undo callables that delete exactly the movements of one attempt."""

    def __init__(
        self,
        *,
        session_factory: Callable[[], Session],
        undo_registry: UndoRegistry,
    ) -> None:
        self._session_factory = session_factory
        self._undo_registry = undo_registry

    def register_settlement(
        self,
        *,
        cargo_identifier: str,
        movement_ids: Sequence[UUID],
    ) -> UndoAction:
        ids = tuple(movement_ids)

        def undo() -> None:
            self.delete_movements(ids)
            logger.info(
                "settlement_undone",
                extra={
                    "cargo": cargo_identifier,
                    "movement_ids": [str(movement_id) for movement_id in ids],
                },
            )

        return self._undo_registry.register_undo(
            action_type=SETTLEMENT_UNDO_TYPE,
            description=f"Integração financeira da carga {cargo_identifier}",
            undo=undo,
            data={"movement_ids": [str(movement_id) for movement_id in ids]},
        )

    def delete_movements(self, movement_ids: Sequence[UUID]) -> int:
        with self._session_factory() as session:
            try:
                deleted = MovementRepository(session).delete_many(movement_ids)
                session.commit()
            except Exception:
                session.rollback()
                raise
        return deleted
