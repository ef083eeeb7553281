"""
X.509 parser adapter — DER certificate decoding with cryptography (PyCA).

Adapter layer — implements the CertificateParser port.

    DER bytes
      → cryptography: x509.load_der_x509_certificate()
      → subject / issuer as RFC 4514 strings
      → not-before / not-after as UTC datetimes
      → CertificateDetails (domain model)

Decoding is all-or-nothing: any error yields MALFORMED_CERTIFICATE.
"""

from __future__ import annotations

import structlog
from cryptography import x509
from railway.result import Result
from railway.result_failures import ResultFailures

from cert_tracker.domain.models import CertificateDetails

log = structlog.get_logger()


def _decode(der_bytes: bytes) -> CertificateDetails:
    cert = x509.load_der_x509_certificate(der_bytes)
    return CertificateDetails(
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        valid_from=cert.not_valid_before_utc,
        valid_to=cert.not_valid_after_utc,
    )


class X509CertificateParser:
    """Implements the CertificateParser port."""

    def parse(self, der_bytes: bytes) -> Result[CertificateDetails]:
        try:
            details = _decode(der_bytes)
        except (ValueError, TypeError) as e:
            log.warning("parser.malformed_certificate", size_bytes=len(der_bytes), error=str(e))
            return ResultFailures.malformed_certificate(
                f"Error while processing the SSL certificate: {e}", e
            )

        log.debug("parser.decoded", subject=details.subject, issuer=details.issuer)
        return Result.success(details)
