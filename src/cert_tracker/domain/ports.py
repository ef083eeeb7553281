"""
Ports — Protocol-based interfaces for infrastructure adapters.

These define WHAT the pipeline needs without specifying HOW it's done:

  Domain ← Ports (protocols) ← Adapters (implementations)

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.

Lookup flow:
  1. CertificateFetcher    → leaf certificate DER bytes from an https URL
  2. CertificateParser     → CertificateDetails from DER bytes
  3. CertificateRepository → durable storage of CertificateRecord values
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from railway.result import Result

from cert_tracker.domain.models import CertificateDetails, CertificateRecord


@runtime_checkable
class CertificateFetcher(Protocol):
    """
    Port: connect to an https URL and return the peer's leaf certificate.

    The URL has already been validated as https by the caller. Each call
    opens and closes exactly one connection.

    Failures: CONNECTION_FAILED, NO_SERVER_CERTIFICATE.
    """

    def fetch(self, url: str) -> Result[bytes]: ...


@runtime_checkable
class CertificateParser(Protocol):
    """
    Port: decode DER bytes of one X.509 certificate.

    Failures: MALFORMED_CERTIFICATE. No partial results.
    """

    def parse(self, der_bytes: bytes) -> Result[CertificateDetails]: ...


@runtime_checkable
class CertificateRepository(Protocol):
    """
    Port: durable storage of certificate records.

    save() is a one-shot append: it receives a transient record and
    returns a new record carrying the assigned id.
    """

    def save(self, record: CertificateRecord) -> Result[CertificateRecord]: ...

    def find_all(self) -> Result[list[CertificateRecord]]: ...

    def exists_by_id(self, record_id: int) -> Result[bool]: ...

    def delete_by_id(self, record_id: int) -> Result[int]:
        """Delete the record and return its id."""
        ...
