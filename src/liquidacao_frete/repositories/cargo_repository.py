"""Cargo persistence operations."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from liquidacao_frete.db.models.cargo import Cargo


class CargoRepository:
    """Repository for cargo lookup used by settlement flows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, cargo_id: UUID) -> Cargo | None:
        statement = (
            select(Cargo)
            .where(Cargo.id == cargo_id)
            .options(selectinload(Cargo.segments))
        )
        return self._session.scalar(statement)

    def get_for_update(self, cargo_id: UUID) -> Cargo | None:
        """Load the cargo holding a row lock until the transaction ends."""
        statement = (
            select(Cargo)
            .where(Cargo.id == cargo_id)
            .options(selectinload(Cargo.segments))
            .with_for_update(of=Cargo)
        )
        return self._session.scalar(statement)

    def add(self, cargo: Cargo) -> Cargo:
        self._session.add(cargo)
        self._session.flush()
        return cargo
