from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from structlog.contextvars import bind_contextvars, reset_contextvars

from article_reader.api.routes import router
from article_reader.dependencies import get_settings, get_telemetry
from article_reader.logging_config import configure_application_logging
from article_reader.telemetry import TelemetryClient, elapsed_ms

LOGGER = logging.getLogger("article_reader.http")

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]


def health_check() -> dict[str, str]:
    return {"status": "ok"}


@asynccontextmanager
async def app_lifespan(_: FastAPI) -> AsyncIterator[None]:
    log_file = configure_application_logging(get_settings())
    LOGGER.info("article reader api started log_file=%s", log_file)
    yield


async def request_context_middleware(request: Request, call_next: CallNext) -> Response:
    telemetry = get_telemetry()
    request_id = _request_id_from(request)
    context_tokens = bind_contextvars(
        http_request_id=request_id,
        http_method=request.method,
        http_path=request.url.path,
    )
    started_at = perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        _emit_request_event(
            telemetry,
            "http.request.error",
            request,
            request_id=request_id,
            started_at=started_at,
            error_type=type(exc).__name__,
        )
        raise
    finally:
        reset_contextvars(**context_tokens)

    response.headers[REQUEST_ID_HEADER] = request_id
    _emit_request_event(
        telemetry,
        "http.request.finish",
        request,
        request_id=request_id,
        started_at=started_at,
        status_code=response.status_code,
    )
    return response


def create_app() -> FastAPI:
    app = FastAPI(title="Article Reader API", version="0.1.0", lifespan=app_lifespan)
    app.middleware("http")(request_context_middleware)
    app.include_router(router)
    app.add_api_route(
        "/health",
        health_check,
        methods=["GET"],
        tags=["system"],
        operation_id="health_check",
    )
    return app


def _request_id_from(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER)
    if isinstance(incoming, str) and incoming.strip():
        return incoming.strip()
    return str(uuid4())


def _emit_request_event(
    telemetry: TelemetryClient,
    event_name: str,
    request: Request,
    *,
    request_id: str,
    started_at: float,
    **attributes: object,
) -> None:
    telemetry.emit(
        event_name,
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        duration_ms=elapsed_ms(started_at),
        **attributes,
    )
