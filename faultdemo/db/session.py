from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

# In-memory only; the store is thrown away with the process.
STORE_URL = "sqlite://"

_engine: Engine | None = None


def set_engine(engine: Engine | None) -> None:
    global _engine
    _engine = engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        # A single shared connection: every checkout sees the same in-memory database.
        _engine = create_engine(
            STORE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return _engine


def open_store() -> Engine:
    """Create the process-wide engine and check that a connection can be made."""

    engine = get_engine()
    with engine.connect():
        pass
    return engine


def close_store() -> None:
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
