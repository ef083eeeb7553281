"""
FastAPI + Uvicorn ASGI application — the certificate REST API.

Routes (all under /api/certificates):
  POST   /info                      look up a URL's certificate, nothing stored
  POST   /add                       look up a URL's certificate and store it
  GET    /all                       list stored certificates
  DELETE /delete/{certificate_id}   delete a stored certificate

Plus GET /health for liveness probes, and the dashboard (static/) served at /.

Each route runs its pipeline in a worker thread (the TLS lookup and the
database calls block) inside a LoggingExecutionContext, and renders the
Result through railway.http_support.

Entry points: the `cert-tracker` console script, or
  uvicorn cert_tracker.asgi:app --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, TypeVar

import structlog
from fastapi import FastAPI, Response
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from railway import LoggingExecutionContext, Result
from railway.http_support import build_fastapi_response

from cert_tracker import __version__
from cert_tracker.config import AppSettings
from cert_tracker.main import Adapters, configure_structlog, create_adapters
from cert_tracker.pipeline import (
    delete_certificate,
    inspect_certificate,
    list_certificates,
    retrieve_and_store,
)

T = TypeVar("T")

# ─────────────────────── Global State ───────────────────────
# Set during app startup, read by the route handlers.

_adapters: Adapters | None = None
_error_message: str | None = None
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    FastAPI lifespan context manager — runs on startup and shutdown.

    Startup: load settings, create adapters, make sure the table exists.
    """
    global _adapters, _error_message

    log.info("asgi.startup", event="lifespan_startup")

    try:
        settings = AppSettings()
    except Exception as e:
        _error_message = f"Configuration error: {e}"
        log.error("asgi.startup_error", error=_error_message)
        raise

    configure_structlog(settings.log_level)

    try:
        adapters = create_adapters(settings)
        await asyncio.to_thread(adapters.repository.create_schema)
    except Exception as e:
        _error_message = f"Failed to initialize adapters: {e}"
        log.error("asgi.init_error", error=_error_message)
        raise

    _adapters = adapters
    log.info("asgi.startup_complete", version=__version__)

    yield

    log.info("asgi.shutdown_complete")


# ─────────────────────── FastAPI Application ───────────────────────

app = FastAPI(
    title="cert-tracker",
    description="Records the TLS certificates presented by HTTPS endpoints",
    version=__version__,
    lifespan=lifespan,
)


class UrlRequest(BaseModel):
    """Request body for /info and /add."""

    url: str | None = None


def _unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"status": "unavailable", "reason": "Adapters not initialized"},
    )


async def _run(operation: str, pipeline: Callable[[], Result[T]]) -> Result[T]:
    ctx = LoggingExecutionContext(operation=operation)
    return await asyncio.to_thread(ctx.execute, pipeline)


@app.post("/api/certificates/info")
async def certificate_info(request: UrlRequest) -> Response:
    """Return the certificate currently served at the URL, without storing it."""
    if _adapters is None:
        return _unavailable()
    adapters = _adapters

    result = await _run(
        "InspectCertificate",
        lambda: inspect_certificate(request.url, adapters.fetcher, adapters.parser),
    )
    return build_fastapi_response(result, body_mapper=lambda record: record.to_dict())


@app.post("/api/certificates/add")
async def add_certificate(request: UrlRequest) -> Response:
    """Look up the certificate served at the URL and store it."""
    if _adapters is None:
        return _unavailable()
    adapters = _adapters

    result = await _run(
        "RetrieveAndStoreCertificate",
        lambda: retrieve_and_store(
            request.url, adapters.fetcher, adapters.parser, adapters.repository
        ),
    )
    return build_fastapi_response(result, body_mapper=lambda record: record.to_dict())


@app.get("/api/certificates/all")
async def all_certificates() -> Response:
    if _adapters is None:
        return _unavailable()
    adapters = _adapters

    result = await _run("ListCertificates", lambda: list_certificates(adapters.repository))
    return build_fastapi_response(
        result, body_mapper=lambda records: [record.to_dict() for record in records]
    )


@app.delete("/api/certificates/delete/{certificate_id}")
async def delete_certificate_by_id(certificate_id: int) -> Response:
    """Returns 204 on success, 404 for unknown ids."""
    if _adapters is None:
        return _unavailable()
    adapters = _adapters

    result = await _run(
        "DeleteCertificate",
        lambda: delete_certificate(certificate_id, adapters.repository),
    )
    return build_fastapi_response(result, success_status=204)


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe.

    Returns 503 if startup failed or has not completed, 200 otherwise.
    """
    if _error_message:
        log.warning("health.check_failed", error=_error_message)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": _error_message},
        )

    if _adapters is None:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "reason": "adapters not initialized"},
        )

    content: dict[str, Any] = {"status": "healthy", "version": __version__}
    return JSONResponse(status_code=200, content=content)


# Mounted last so the API routes above take precedence over "/".
app.mount(
    "/",
    StaticFiles(directory=Path(__file__).parent / "static", html=True),
    name="dashboard",
)
