"""
Storage handle: declarative base, engine factory and scoped session.

There is no process-wide connection. Callers open the database with
`open_db()` and everything is released when the block exits.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from timecop.core.config import settings
from timecop.db.migrate import run_migrations


class Base(DeclarativeBase):
    pass


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def make_engine(url: Optional[str] = None) -> Engine:
    """Build an engine for `url` (defaults to the configured database)."""
    engine = create_engine(url or settings.DATABASE_URL)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_foreign_keys)
    return engine


@contextmanager
def open_db(url: Optional[str] = None, migrate: bool = True) -> Iterator[Session]:
    """
    Open the database, bring the schema up to date and yield a session.
    The session is closed and the engine disposed on exit, even on error.
    """
    engine = make_engine(url)
    try:
        if migrate:
            run_migrations(engine)
        factory = sessionmaker(bind=engine, autoflush=False)
        db = factory()
        try:
            yield db
        finally:
            db.close()
    finally:
        engine.dispose()
