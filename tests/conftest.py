from __future__ import annotations

import sys
from pathlib import Path

import pytest
from argon2 import PasswordHasher

# Make the todo package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from todo.core import config as core_config  # noqa: E402
from todo.core.context import RequestContext  # noqa: E402
from todo.db import create_tables  # noqa: E402
from todo.db import session as db_session  # noqa: E402
from todo.repositories.sql_repository import SQLStore  # noqa: E402
from todo.services import build_services  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Point DATABASE_URL at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    _clear_caches()

    engine = db_session.get_engine()
    create_tables.drop_all()
    create_tables.create_all()

    yield db_file

    create_tables.drop_all()
    engine.dispose()
    _clear_caches()


@pytest.fixture()
def fast_hasher() -> PasswordHasher:
    """Cheapest argon2 parameters, tests only."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture()
def store(db_env) -> SQLStore:
    return SQLStore.create()


@pytest.fixture()
def services(store, fast_hasher):
    return build_services(store, fast_hasher)


@pytest.fixture()
def ctx() -> RequestContext:
    return RequestContext.background()


@pytest.fixture()
def alice(services, ctx):
    return services.auth.register(ctx, "alice", "secret1")


@pytest.fixture()
def bob(services, ctx):
    return services.auth.register(ctx, "bob", "hunter22")
