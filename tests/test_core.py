from __future__ import annotations

import dataclasses
import threading
import time

import pytest
from argon2 import PasswordHasher

from todo.core import config as core_config
from todo.core.context import RequestContext
from todo.core.errors import CancelledError, ErrorKind, NotFoundError, ServiceError
from todo.core.security import build_password_hasher, hash_password, needs_rehash, verify_password
from todo.domain.entities import GroupStatus
from todo.domain.validation import parse_group_status, require_text, validate_credentials


@pytest.fixture()
def settings(monkeypatch):
    for key in ("APP_ENV", "PASSWORD_TIME_COST", "PASSWORD_MEMORY_COST", "PASSWORD_PARALLELISM"):
        monkeypatch.delenv(key, raising=False)
    core_config.get_settings.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()


def test_settings_defaults_and_overrides(monkeypatch, settings):
    assert settings.app_env == "dev"
    assert settings.password_time_cost == 3

    monkeypatch.setenv("APP_ENV", "PROD")
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "not-a-number")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    core_config.get_settings.cache_clear()
    overridden = core_config.get_settings()

    assert overridden.app_env == "prod"
    assert overridden.request_timeout_seconds == 30.0
    assert overridden.cors_origins == ("https://a.example", "https://b.example")


def test_weak_hash_policy_rejected_in_prod(settings):
    weak = dataclasses.replace(settings, app_env="prod", password_time_cost=1, password_memory_cost=8)

    with pytest.raises(RuntimeError):
        build_password_hasher(weak)

    dev_hasher = build_password_hasher(dataclasses.replace(weak, app_env="dev", password_parallelism=1))
    assert dev_hasher.time_cost == 1


def test_verify_password_handles_garbage_hashes(fast_hasher):
    hashed = hash_password("secret1", fast_hasher)

    assert verify_password("secret1", hashed, fast_hasher)
    assert not verify_password("secret2", hashed, fast_hasher)
    assert not verify_password("secret1", "", fast_hasher)
    assert not verify_password("secret1", None, fast_hasher)
    assert not verify_password("secret1", "not-a-hash", fast_hasher)
    assert needs_rehash("not-a-hash", fast_hasher)
    assert not needs_rehash(hashed, fast_hasher)
    assert needs_rehash(hashed, PasswordHasher(time_cost=2, memory_cost=16, parallelism=1))


def test_request_context_cancel_from_other_thread():
    ctx = RequestContext.background()
    assert ctx.remaining() is None
    ctx.check()

    worker = threading.Thread(target=ctx.cancel)
    worker.start()
    worker.join()

    assert ctx.cancelled and ctx.done
    with pytest.raises(CancelledError, match="cancelled"):
        ctx.check()


def test_request_context_deadline():
    assert RequestContext.with_timeout(0).remaining() is None

    ctx = RequestContext.with_timeout(0.01)
    assert 0 < ctx.remaining() <= 0.01
    time.sleep(0.02)

    assert ctx.expired and not ctx.cancelled
    assert ctx.remaining() == 0.0
    with pytest.raises(CancelledError, match="deadline"):
        ctx.check()


def test_error_kinds():
    exc = NotFoundError("task not found")

    assert isinstance(exc, ServiceError)
    assert exc.kind is ErrorKind.NOT_FOUND
    assert exc.message == "task not found"
    assert "not_found" in repr(exc)


def test_validation_helpers():
    validate_credentials("abc", "123456")
    assert require_text("x", "title") == "x"
    assert parse_group_status("daily") is GroupStatus.DAILY
    assert parse_group_status(GroupStatus.LONGTERM) is GroupStatus.LONGTERM
    with pytest.raises(ServiceError) as info:
        parse_group_status(None)
    assert info.value.kind is ErrorKind.VALIDATION


def test_main_serves_on_configured_port(monkeypatch, settings):
    from todo import __main__ as entrypoint

    monkeypatch.setenv("APP_PORT", "9123")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    core_config.get_settings.cache_clear()
    calls = []
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    entrypoint.main()

    [(target, kwargs)] = calls
    assert target == "todo.app:create_app"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9123
    assert kwargs["log_level"] == "info"
