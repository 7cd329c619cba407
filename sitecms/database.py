"""Database configuration, session management and schema migrations."""

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parent.parent / "alembic"

Base: Any = declarative_base()


def _configure_sqlite(dbapi_connection, connection_record) -> None:
    """Enable WAL and foreign keys on every new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine and session factory for one database.

    Opened once at process start (or per test), migrated before the app serves
    traffic, and disposed at shutdown.
    """

    def __init__(self, url: str, **engine_options: Any) -> None:
        self.url = url
        if url.startswith("sqlite"):
            # Single writer: wait for the lock instead of failing immediately
            engine_options.setdefault("connect_args", {"check_same_thread": False, "timeout": 30})
        else:
            engine_options.setdefault("pool_pre_ping", True)

        self.engine = create_engine(url, **engine_options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _configure_sqlite)

        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    def session(self) -> Session:
        """Open a new ORM session."""
        return self.SessionLocal()

    def migrate(self) -> None:
        """Apply all pending migrations in one transaction."""
        config = Config()
        config.set_main_option("script_location", str(ALEMBIC_DIR))
        with self.engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
