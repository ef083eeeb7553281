"""
Application entry point — wires dependencies and starts the HTTP server.

Composition root: creates concrete adapters and hands them to the API.
This is the ONLY place where concrete classes are instantiated.
Everything else depends on Protocol interfaces.

Responsibilities:
  1. Configure structlog for structured logging
  2. Load and validate configuration from environment
  3. Create concrete adapter instances (fetcher + parser + repository)
  4. Start Uvicorn serving cert_tracker.asgi:app
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

import structlog

from cert_tracker import __version__
from cert_tracker.adapters.repository import PsycopgCertificateRepository
from cert_tracker.adapters.tls_fetcher import HttpsCertificateFetcher
from cert_tracker.adapters.x509_parser import X509CertificateParser
from cert_tracker.config import AppSettings


def configure_structlog(log_level: str = "INFO") -> None:
    """Configure structlog with colored, human-readable console output."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@dataclass(frozen=True, slots=True)
class Adapters:
    """The concrete port implementations the API works with."""

    fetcher: HttpsCertificateFetcher
    parser: X509CertificateParser
    repository: PsycopgCertificateRepository


def create_adapters(settings: AppSettings) -> Adapters:
    """Instantiate all concrete adapters from application settings."""
    return Adapters(
        fetcher=HttpsCertificateFetcher(
            timeout=settings.fetcher.timeout_seconds,
            verify=settings.fetcher.verify_tls,
            require_ok_status=settings.fetcher.require_ok_status,
        ),
        parser=X509CertificateParser(),
        repository=PsycopgCertificateRepository(dsn=settings.database.get_dsn()),
    )


def main() -> None:
    """Validate configuration and serve the API."""
    try:
        settings = AppSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    log.info(
        "app.starting",
        version=__version__,
        log_level=settings.log_level,
        host=settings.server.host,
        port=settings.server.port,
        require_ok_status=settings.fetcher.require_ok_status,
    )

    import uvicorn

    uvicorn.run(
        "cert_tracker.asgi:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
