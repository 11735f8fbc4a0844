"""API dependency providers."""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from liquidacao_frete.core.settings import get_settings
from liquidacao_frete.db.session import SessionFactory, get_db_session
from liquidacao_frete.domain.dates import local_today
from liquidacao_frete.repositories.cargo_repository import CargoRepository
from liquidacao_frete.repositories.movement_repository import MovementRepository
from liquidacao_frete.services.cargo_summary_service import CargoSummaryService
from liquidacao_frete.services.reversal_service import ReversalService
from liquidacao_frete.services.settlement_service import SettlementService
from liquidacao_frete.services.undo_registry import UndoRegistry


@lru_cache(maxsize=1)
def get_undo_registry() -> UndoRegistry:
    """Return the process-wide undo registry."""

    return UndoRegistry(timeout_seconds=get_settings().undo_timeout_seconds)


def get_session_factory() -> Callable[[], Session]:
    """Session factory used outside the request lifecycle (undo callables)."""

    return SessionFactory


def get_reversal_service(
    session_factory: Annotated[Callable[[], Session], Depends(get_session_factory)],
    undo_registry: Annotated[UndoRegistry, Depends(get_undo_registry)],
) -> ReversalService:
    """Build reversal registration bound to the undo registry."""

    return ReversalService(
        session_factory=session_factory,
        undo_registry=undo_registry,
    )


def get_settlement_service(
    session: Annotated[Session, Depends(get_db_session)],
    reversal_service: Annotated[ReversalService, Depends(get_reversal_service)],
) -> SettlementService:
    """Build settlement service with per-request session."""

    timezone_name = get_settings().app_timezone
    return SettlementService(
        cargo_repository=CargoRepository(session),
        movement_repository=MovementRepository(session),
        reversal_service=reversal_service,
        session=session,
        today_provider=lambda: local_today(timezone_name),
    )


def get_cargo_summary_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> CargoSummaryService:
    """Build cargo summary service with per-request session."""

    return CargoSummaryService(
        cargo_repository=CargoRepository(session),
        movement_repository=MovementRepository(session),
    )
