"""
Pipeline — the ROP pipelines behind every certificate operation.

Domain layer — PURE BUSINESS LOGIC. All I/O is injected via ports
(Protocol interfaces), passed in as plain parameters.

Lookup pipelines connect stages via flat_map, forming a railway:

  validate_url(url)
    → fetcher.fetch(url)          leaf certificate DER
      → parser.parse(der)         CertificateDetails
        → CertificateRecord       transient record
          → repository.save()     persisted record (retrieve_and_store only)

Each stage returns Result[T]. Failures short-circuit automatically
through the railway — no try/except needed, no retry, no state kept
between calls.
"""

from __future__ import annotations

import httpx
import structlog
from railway import ErrorCode
from railway.result import Result
from railway.result_failures import ResultFailures

from cert_tracker.domain.models import CertificateRecord
from cert_tracker.domain.ports import (
    CertificateFetcher,
    CertificateParser,
    CertificateRepository,
)

log = structlog.get_logger()

EMPTY_URL_MESSAGE = "URL cannot be null or empty."
UNSUPPORTED_SCHEME_MESSAGE = "Only HTTPS URLs are supported."
EMPTY_COLLECTION_MESSAGE = "No certificates found in the database"
DELETE_FAILED_MESSAGE = "Error deleting the certificate"


def validate_url(url: str | None) -> Result[str]:
    """
    Check that the URL is present, absolute and https, in that order.

    Returns the URL unchanged on success so the record keeps the caller's
    spelling. The scheme comparison is case-insensitive.
    """
    if not url:
        return ResultFailures.invalid_input(EMPTY_URL_MESSAGE)

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        return ResultFailures.invalid_input(f"Invalid URL format - {e}")

    if not parsed.scheme:
        return ResultFailures.invalid_input(f"Invalid URL format - no protocol: {url}")
    if parsed.scheme.lower() != "https":
        return ResultFailures.unsupported_scheme(UNSUPPORTED_SCHEME_MESSAGE)
    if not parsed.host:
        return ResultFailures.invalid_input(f"Invalid URL format - missing host: {url}")
    return Result.success(url)


def _lookup(
    url: str,
    fetcher: CertificateFetcher,
    parser: CertificateParser,
) -> Result[CertificateRecord]:
    return (
        fetcher.fetch(url)
        .flat_map(parser.parse)
        .map(lambda details: CertificateRecord.from_details(url, details))
    )


def inspect_certificate(
    url: str | None,
    fetcher: CertificateFetcher,
    parser: CertificateParser,
) -> Result[CertificateRecord]:
    """
    Look up the certificate served at `url` without storing it.

    Flow:
      1. Validate the URL (present, well-formed, https)
      2. Fetch the leaf certificate over a fresh TLS connection
      3. Decode subject, issuer and validity window

    Returns a transient CertificateRecord (id is None) on success,
    or the failure from the first failing stage.
    """
    return (
        validate_url(url)
        .flat_map(lambda valid_url: _lookup(valid_url, fetcher, parser))
        .peek(lambda record: log.info("pipeline.inspected", url=record.url, subject=record.subject))
        .peek_failure(lambda err: log.warning("pipeline.inspect_failed", url=url, failure=str(err)))
    )


def retrieve_and_store(
    url: str | None,
    fetcher: CertificateFetcher,
    parser: CertificateParser,
    repository: CertificateRepository,
) -> Result[CertificateRecord]:
    """
    Look up the certificate served at `url` and store it.

    Same stages as inspect_certificate, then repository.save is called
    exactly once with the transient record. Returns whatever save returned,
    including the assigned id. save is never reached if an earlier stage fails.
    """
    return (
        validate_url(url)
        .flat_map(lambda valid_url: _lookup(valid_url, fetcher, parser))
        .flat_map(repository.save)
        .peek(lambda record: log.info("pipeline.stored", id=record.id, url=record.url))
        .peek_failure(lambda err: log.warning("pipeline.store_failed", url=url, failure=str(err)))
    )


def list_certificates(repository: CertificateRepository) -> Result[list[CertificateRecord]]:
    """Return every stored record; an empty store is an EMPTY_COLLECTION failure."""
    return repository.find_all().ensure(
        lambda records: len(records) > 0,
        ErrorCode.EMPTY_COLLECTION,
        EMPTY_COLLECTION_MESSAGE,
    )


def delete_certificate(certificate_id: int, repository: CertificateRepository) -> Result[int]:
    """
    Delete a stored record by id.

    Unknown ids fail with NOT_FOUND before the delete primitive is touched.
    A failing delete is reported as DELETE_FAILED, keeping the original
    exception on the failure.
    """

    def _delete_existing(exists: bool) -> Result[int]:
        if not exists:
            return ResultFailures.not_found("Certificate", certificate_id)
        return repository.delete_by_id(certificate_id).map_failure(
            lambda err: ResultFailures.delete_failed(DELETE_FAILED_MESSAGE, err.exception).error()
        )

    return repository.exists_by_id(certificate_id).flat_map(_delete_existing)
