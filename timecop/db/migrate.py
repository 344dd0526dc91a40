"""
Migration runner.

The schema lives in an append-only list of Alembic revisions under
timecop/migrations/versions. Only upgrades are run automatically; a rollback
is a new revision.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.util import CommandError
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from timecop.core.errors import MigrationError
from timecop.core.logging_config import get_logger

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"

log = get_logger("timecop.migrate")


def alembic_config(url: Optional[str] = None) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    if url:
        # ConfigParser interpolates '%'
        cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return cfg


def current_revision(connection: Connection) -> Optional[str]:
    return MigrationContext.configure(connection).get_current_revision()


def run_migrations(engine: Engine) -> Optional[str]:
    """Upgrade the database behind `engine` to head and return the new revision."""
    cfg = alembic_config(engine.url.render_as_string(hide_password=False))

    with engine.begin() as connection:
        before = current_revision(connection)
        cfg.attributes["connection"] = connection
        try:
            command.upgrade(cfg, "head")
        except (CommandError, SQLAlchemyError) as exc:
            raise MigrationError(f"Migration failed: {exc}", revision=before) from exc
        after = current_revision(connection)

    if before != after:
        log.info("migrated database %s from %s to %s", engine.url, before or "base", after)
    return after
