"""
Acceptance test fixtures — the real API wired to real adapters.

Reuses the PostgreSQL container and the local HTTPS server from the
integration fixtures and installs concrete adapters on the ASGI module.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from cert_tracker import asgi
from cert_tracker.config import AppSettings, DatabaseSettings, FetcherSettings
from cert_tracker.main import create_adapters
from tests.integration.conftest import dsn, postgres_container, tls_server  # noqa: F401


@pytest.fixture()
def api(dsn: str) -> Iterator[TestClient]:  # noqa: F811
    """TestClient over the real app with adapters built from settings."""
    settings = AppSettings(
        database=DatabaseSettings(dsn=dsn),
        fetcher=FetcherSettings(timeout_seconds=5),
    )
    asgi._adapters = create_adapters(settings)
    asgi._error_message = None

    yield TestClient(asgi.app, raise_server_exceptions=False)

    asgi._adapters = None
