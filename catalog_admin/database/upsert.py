"""Dialect-aware INSERT .. ON CONFLICT builder."""

from __future__ import annotations

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_statement(
    session: AsyncSession | Session,
    table: Table,
    values: dict,
    conflict_columns: list[str],
    update_columns: list[str],
):
    """Build an atomic upsert for *table* keyed by a unique constraint.

    The row is inserted with *values*; if a row with the same
    *conflict_columns* already exists, only *update_columns* are overwritten.
    Relies on the database's unique constraint, so concurrent callers can
    never produce two rows for the same key.
    """
    dialect = session.get_bind().dialect.name
    try:
        insert = _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported on dialect '{dialect}'") from None

    stmt = insert(table).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=conflict_columns,
        set_={column: stmt.excluded[column] for column in update_columns},
    )
