"""Database engine setup for the document adapter: SQLModel/SQLAlchemy.

- SQLite (default and tests): WAL mode plus a busy timeout, set per engine;
  Transactions start with BEGIN IMMEDIATE so read-then-write operations
  (counters, conditional inserts) hold the write lock from their first read
- ``sqlite:///:memory:`` uses a StaticPool so every session shares the one
  in-memory database
- Any other SQLAlchemy URL is passed through unchanged
"""

from __future__ import annotations

import os

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from casebook.config import settings

# Registers the document tables on SQLModel.metadata
from casebook.repository.document import tables  # noqa: F401


def get_database_url(url: str | None = None) -> str:
    """Resolve the database URL, ensuring a SQLite file's directory exists."""
    url = url or settings.database_url
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        db_dir = os.path.dirname(url.replace("sqlite:///", ""))
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    return url


def set_sqlite_pragmas(dbapi_connection, connection_record):
    """Enable WAL mode for concurrent reads and hand transaction control to SQLAlchemy."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA busy_timeout=5000")  # 5s wait on lock
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()
    # Let the "begin" hook below own transaction start
    dbapi_connection.isolation_level = None


def begin_immediate(connection):
    connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str | None = None) -> Engine:
    url = get_database_url(url)
    if not url.startswith("sqlite"):
        return create_engine(url, echo=False)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url == "sqlite:///:memory:" or url == "sqlite://":
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=False, **kwargs)
    event.listen(engine, "connect", set_sqlite_pragmas)
    event.listen(engine, "begin", begin_immediate)
    return engine


def create_db_and_tables(engine: Engine) -> None:
    """Create all tables defined by SQLModel metadata."""
    SQLModel.metadata.create_all(engine)
