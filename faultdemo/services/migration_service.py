from __future__ import annotations

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError


# Targets a table that never exists, so this always fails.
FAULTY_STATEMENT = "ALTER TABLE imaginary ADD COLUMN foo TEXT"


class MigrationError(Exception):
    pass


def run_faulty_migration(engine: Engine) -> None:
    """Apply the broken schema change inside a transaction.

    ``engine.begin()`` rolls the transaction back on any exception and only
    commits when the block exits cleanly, so nothing partial survives.
    """

    try:
        with engine.begin() as conn:
            structlog.get_logger("migration").info("running migration")
            try:
                conn.execute(text(FAULTY_STATEMENT))
            except DBAPIError as exc:
                raise MigrationError(f"alter table: {exc.orig}") from exc
    except MigrationError:
        raise
    except SQLAlchemyError as exc:
        raise MigrationError(f"begin tx: {exc}") from exc
