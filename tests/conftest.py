"""
Shared test fixtures and helpers for the cert-tracker test suite.

Certificates are generated on the fly with cryptography so no binary
fixtures are checked in.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

NOT_BEFORE = datetime(2025, 1, 1, 0, 0, 0, tzinfo=UTC)
NOT_AFTER = datetime(2027, 1, 1, 0, 0, 0, tzinfo=UTC)


def make_certificate(
    common_name: str = "localhost",
    issuer_common_name: str = "Test Root CA",
    not_before: datetime = NOT_BEFORE,
    not_after: datetime = NOT_AFTER,
) -> tuple[x509.Certificate, ec.EllipticCurvePrivateKey]:
    """
    Build a certificate for `common_name`, named as issued by `issuer_common_name`.

    The certificate is signed with its own key; only the names differ.
    """
    key = ec.generate_private_key(ec.SECP256R1())
    subject = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Org"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    issuer = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Trust"),
        x509.NameAttribute(NameOID.COMMON_NAME, issuer_common_name),
    ])
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(
            x509.SubjectAlternativeName([x509.DNSName(common_name)]),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    return cert, key


def certificate_der(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.DER)


@pytest.fixture(scope="session")
def sample_certificate() -> x509.Certificate:
    """A certificate for CN=localhost issued by CN=Test Root CA."""
    cert, _ = make_certificate()
    return cert


@pytest.fixture(scope="session")
def sample_der(sample_certificate: x509.Certificate) -> bytes:
    """DER bytes of the sample certificate."""
    return certificate_der(sample_certificate)
