"""SQLAlchemy engine and session factory definitions."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from liquidacao_frete.core.settings import get_settings


def build_engine(database_url: str, **engine_options: Any) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""

    if database_url.startswith("sqlite"):
        engine_options.setdefault("connect_args", {"check_same_thread": False})
    else:
        engine_options.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **engine_options)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Session factory keeping attributes loaded after commit.

    Settlement responses and undo registration read movement ids after the
    transaction commits.
    """

    return sessionmaker(
        bind=bind,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.sql_echo)
SessionFactory = build_session_factory(engine)


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session per request lifecycle."""

    with SessionFactory() as session:
        yield session
