"""
FastAPI shell around the service layer.

Business routes are mounted by the transport collaborator; this module only
wires services onto ``app.state``, tags and logs every request, maps the error
taxonomy to HTTP status codes and serves ``GET /health``. Run with
``python -m todo`` or ``uvicorn --factory todo.app:create_app``.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from argon2 import PasswordHasher
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from todo.core.config import Settings, get_settings
from todo.core.context import RequestContext
from todo.core.errors import ErrorKind, ServiceError
from todo.core.log import configure_logging
from todo.core.security import build_password_hasher
from todo.repositories.sql_repository import SQLStore
from todo.services import build_services

REQUEST_ID_HEADER = "X-Request-ID"

ERROR_STATUS = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CANCELLED: 408,
    ErrorKind.INFRASTRUCTURE: 500,
}


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Reuse or assign an X-Request-ID, echo it back and log one line per request."""

    def __init__(self, app, *, logger: logging.Logger) -> None:
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        client_ip = _client_ip(request)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._logger.exception(
                "%s %s from %s crashed request_id=%s", request.method, request.url.path, client_ip, request_id
            )
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        self._logger.info(
            "%s %s from %s -> %s in %.1fms request_id=%s",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


def request_context(request: Request) -> RequestContext:
    """FastAPI dependency: a fresh cancellation token bounded by the request timeout."""
    settings: Settings = request.app.state.settings
    return RequestContext.with_timeout(settings.request_timeout_seconds)


def create_app(
    settings: Optional[Settings] = None,
    store=None,
    hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    settings = settings or get_settings()
    logger = configure_logging(settings)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.services = build_services(
        store if store is not None else SQLStore.create(),
        hasher or build_password_hasher(settings),
        logger.getChild("services"),
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token", REQUEST_ID_HEADER],
            expose_headers=[REQUEST_ID_HEADER],
            max_age=300,
        )
    # added last so it wraps CORS and sees every request first
    app.add_middleware(RequestLogMiddleware, logger=logger.getChild("requests"))

    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError) -> JSONResponse:
        status = ERROR_STATUS.get(exc.kind, 500)
        if status >= 500:
            logging.getLogger("todo.app").error(
                "%s %s failed request_id=%s: %r",
                request.method,
                request.url.path,
                getattr(request.state, "request_id", "-"),
                exc,
            )
        return JSONResponse({"error": exc.kind.value, "detail": exc.message}, status_code=status)

    @app.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        return "ok"

    logger.info("%s configured (env=%s, port=%s)", settings.app_name, settings.app_env, settings.app_port)
    return app
