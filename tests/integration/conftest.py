"""
Integration test fixtures — PostgreSQL testcontainer and a local HTTPS server.

  - postgres_container / dsn: a real PostgreSQL instance per test session,
    with the certificates table truncated before each test
  - tls_server: a threaded HTTPS server on 127.0.0.1 presenting a freshly
    generated certificate; "/" answers 200, every other path 404
"""

from __future__ import annotations

import ssl
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import psycopg
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from testcontainers.postgres import PostgresContainer

from cert_tracker.adapters.repository import DDL
from tests.conftest import make_certificate

TRUNCATE_ALL = "TRUNCATE certificates RESTART IDENTITY"


# ─────────────────────── PostgreSQL ───────────────────────


@pytest.fixture(scope="session")
def postgres_container() -> Iterator[PostgresContainer]:
    """Start a PostgreSQL container for the entire test session."""
    with PostgresContainer("postgres:16-alpine") as pg:
        dsn = pg.get_connection_url().replace("postgresql+psycopg2", "postgresql")
        with psycopg.connect(dsn) as conn:
            conn.execute(DDL)
        yield pg


@pytest.fixture()
def dsn(postgres_container: PostgresContainer) -> str:
    """Return a psycopg-compatible DSN and empty the table before each test."""
    connection_url = postgres_container.get_connection_url().replace(
        "postgresql+psycopg2", "postgresql"
    )
    with psycopg.connect(connection_url) as conn:
        conn.execute(TRUNCATE_ALL)
    return connection_url


# ─────────────────────── Local HTTPS server ───────────────────────


@dataclass(frozen=True)
class TlsServer:
    base_url: str
    port: int
    certificate: x509.Certificate


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:  # noqa: N802
        status = 200 if self.path == "/" else 404
        body = b"ok" if status == 200 else b"not found"
        self.send_response(status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture(scope="session")
def tls_server(tmp_path_factory: pytest.TempPathFactory) -> Iterator[TlsServer]:
    """Serve HTTPS on an ephemeral port with a self-signed localhost certificate."""
    now = datetime.now(UTC)
    cert, key = make_certificate(
        common_name="localhost",
        issuer_common_name="Integration Test CA",
        not_before=now - timedelta(days=1),
        not_after=now + timedelta(days=30),
    )

    workdir: Path = tmp_path_factory.mktemp("tls")
    cert_file = workdir / "server.pem"
    key_file = workdir / "server.key"
    cert_file.write_bytes(cert.public_bytes(serialization.Encoding.PEM))
    key_file.write_bytes(
        key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(cert_file, key_file)

    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.socket = context.wrap_socket(server.socket, server_side=True)
    port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield TlsServer(base_url=f"https://localhost:{port}", port=port, certificate=cert)

    server.shutdown()
    server.server_close()
