"""
agency_core.db.base

SQLAlchemy declarative base.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData, inspect
from sqlalchemy.orm import DeclarativeBase

# Deterministic constraint names keep Alembic autogenerate diffs stable across backends.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def row_key(row: Base) -> Any:
    """
    Primary key of a persistent row, read from its identity key.

    Rows passed in by a caller may have been expired by an earlier rollback;
    reading the key this way does not trigger a lazy load.
    """
    identity = inspect(row).identity
    if identity is None:
        raise ValueError(f"{type(row).__name__} has not been persisted")
    return identity[0]


# --- Module Notes -----------------------------------------------------------
# All ORM models should inherit from `Base` so Alembic and metadata discovery work.
