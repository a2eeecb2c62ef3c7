"""Dialect-aware INSERT for conflict handling (ON CONFLICT DO NOTHING / DO UPDATE)."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(db: AsyncSession, table: Any) -> Any:
    """Return an upsert-capable INSERT for the session's backend."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(table)
    if dialect == "sqlite":
        return sqlite_insert(table)
    msg = f"Unsupported database dialect: {dialect}"
    raise RuntimeError(msg)
