# Overview: Dialect-aware INSERT ... ON CONFLICT helper shared by the upserting services.

from __future__ import annotations

from sqlalchemy.dialects import postgresql, sqlite


def dialect_insert(session, model):
    """
    Return an Insert construct supporting on_conflict_do_update().

    Only SQLite and PostgreSQL are supported; both spell the upsert the same way.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert not supported for dialect {dialect}")
