"""
Dialect-aware INSERT ... ON CONFLICT helper.

Both SQLite and PostgreSQL support conflict-target upserts; the statement
classes live in dialect-specific modules, so pick by the session's bind.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(db: AsyncSession, table):
    """Return a dialect `insert()` construct supporting on_conflict_do_update."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"Upsert is not supported for dialect {dialect!r}")
