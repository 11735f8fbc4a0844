from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from liquidacao_frete.api.app import create_app
from liquidacao_frete.api.dependencies import get_session_factory, get_undo_registry
from liquidacao_frete.db.base import Base, import_orm_models
from liquidacao_frete.db.models.cargo import Cargo, RouteSegment
from liquidacao_frete.db.session import (
    build_engine,
    build_session_factory,
    get_db_session,
)
from liquidacao_frete.repositories.cargo_repository import CargoRepository
from liquidacao_frete.services.undo_registry import UndoRegistry


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    import_orm_models()
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    factory = build_session_factory(engine)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)


def seed_cargo(
    session: Session,
    *,
    crt: str = "CRT-0001",
    segment_values: tuple[str, ...] = ("1000.00",),
) -> UUID:
    cargo = Cargo(crt=crt, description="Bobinas de aco")
    cargo.segments = [
        RouteSegment(
            index=position,
            origin_city=f"Origem {position}",
            destination_city=f"Destino {position}",
            base_value=Decimal(value),
            collection_date=date(2026, 3, position),
            trailer_ids=[],
        )
        for position, value in enumerate(segment_values, start=1)
    ]
    CargoRepository(session).add(cargo)
    session.commit()
    return cargo.id


@pytest.fixture
def undo_registry() -> UndoRegistry:
    return UndoRegistry(timeout_seconds=60)


@pytest.fixture
def client(
    sqlite_session_factory: sessionmaker[Session],
    undo_registry: UndoRegistry,
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db_session() -> Generator[Session, None, None]:
        with sqlite_session_factory() as session:
            yield session

    def override_get_session_factory() -> Callable[[], Session]:
        return sqlite_session_factory

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_session_factory] = override_get_session_factory
    app.dependency_overrides[get_undo_registry] = lambda: undo_registry
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def cargo_id(sqlite_session_factory: sessionmaker[Session]) -> UUID:
    with sqlite_session_factory() as session:
        return seed_cargo(session, segment_values=("1000.00", "500.00"))
