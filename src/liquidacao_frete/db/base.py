"""SQLAlchemy base metadata and model registration utilities."""

from importlib import import_module

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

ORM_MODULES = (
    "liquidacao_frete.db.models.cargo",
    "liquidacao_frete.db.models.financial_movement",
)


class Base(DeclarativeBase):
    """Base class for freight settlement ORM models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def import_orm_models() -> None:
    """Import cargo and ledger models so metadata is fully populated."""

    for module_name in ORM_MODULES:
        import_module(module_name)
