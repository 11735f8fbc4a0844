"""Single-slot registry of the most recent undoable action."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import Lock
from typing import Any
from uuid import uuid4

from liquidacao_frete.domain.errors import UndoActionNotFoundError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class UndoAction:
    """Action that can be reverted while it is the registry's current one."""

    id: str
    type: str
    description: str
    undo: Callable[[], None] = field(repr=False)
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class UndoRegistry:
    """Keeps only the latest action, which expires after ``timeout_seconds``."""

    def __init__(
        self,
        *,
        timeout_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._clock = clock
        self._lock = Lock()
        self._current: UndoAction | None = None
        self._registered_at = 0.0

    def register_undo(
        self,
        *,
        action_type: str,
        description: str,
        undo: Callable[[], None],
        data: dict[str, Any] | None = None,
    ) -> UndoAction:
        """Make ``undo`` the current action, replacing any previous one."""

        action = UndoAction(
            id=f"undo_{uuid4().hex}",
            type=action_type,
            description=description,
            undo=undo,
            data=data or {},
        )
        with self._lock:
            self._current = action
            self._registered_at = self._clock()
        logger.info(
            "undo_action_registered",
            extra={"undo_action_id": action.id, "type": action_type},
        )
        return action

    def current_action(self) -> UndoAction | None:
        with self._lock:
            return self._current_locked()

    def execute_undo(self) -> UndoAction:
        """Run the current action and clear it.

        A failing undo callable propagates and leaves the action in place so
        it can be retried before it expires.
        """
        with self._lock:
            action = self._current_locked()
            if action is None:
                raise UndoActionNotFoundError()
            action.undo()
            self._current = None
        logger.info(
            "undo_action_executed",
            extra={"undo_action_id": action.id, "type": action.type},
        )
        return action

    def cancel(self) -> None:
        with self._lock:
            self._current = None

    def _current_locked(self) -> UndoAction | None:
        if self._current is None:
            return None
        if self._clock() - self._registered_at >= self._timeout_seconds:
            logger.info(
                "undo_action_expired",
                extra={"undo_action_id": self._current.id},
            )
            self._current = None
        return self._current
