"""
Engine and session factory for the task tracker database.

The engine is built once from ``DATABASE_URL``. On SQLite, foreign keys are
switched on per connection so that ``ON DELETE CASCADE`` from users and task
groups reaches the tasks table.
"""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from todo.core.config import get_settings

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@lru_cache
def get_engine() -> Engine:
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is empty; the task tracker needs a database.")
    engine = create_engine(url, future=True, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@lru_cache
def _get_sessionmaker() -> sessionmaker:
    # repositories read attributes after commit, so rows must not expire
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session() -> Iterator[Session]:
    """One unit of work; anything not committed is rolled back on close."""
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()
