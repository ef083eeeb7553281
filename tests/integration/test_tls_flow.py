"""
Integration tests for the certificate lookup against a real TLS endpoint.

A local HTTPS server (see conftest.tls_server) presents a freshly generated
certificate; these tests exercise the real httpx + ssl + cryptography chain
without leaving the machine.

Each test follows Given/When/Then BDD structure.
"""

from __future__ import annotations

import socket

import pytest
from railway import ErrorCode, ResultAssertions

from cert_tracker.adapters.tls_fetcher import HttpsCertificateFetcher
from cert_tracker.adapters.x509_parser import X509CertificateParser
from cert_tracker.pipeline import inspect_certificate
from tests.conftest import certificate_der
from tests.integration.conftest import TlsServer

pytestmark = pytest.mark.integration


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestFetchFromLocalServer:
    def test_fetch_returns_served_certificate(self, tls_server: TlsServer) -> None:
        """
        GIVEN an HTTPS server answering 200 on "/"
        WHEN the fetcher is pointed at it
        THEN the DER bytes match the certificate the server presents.
        """
        fetcher = HttpsCertificateFetcher(timeout=5)

        result = fetcher.fetch(f"{tls_server.base_url}/")

        ResultAssertions.assert_success_value(result, certificate_der(tls_server.certificate))

    def test_inspect_certificate_end_to_end(self, tls_server: TlsServer) -> None:
        """
        GIVEN the local HTTPS server
        WHEN inspect_certificate runs with the real adapters
        THEN the record names the server's subject and issuer and has no id.
        """
        record = ResultAssertions.assert_success(
            inspect_certificate(
                tls_server.base_url,
                HttpsCertificateFetcher(timeout=5),
                X509CertificateParser(),
            )
        )

        assert record.id is None
        assert record.url == tls_server.base_url
        assert record.subject == "CN=localhost,O=Example Org,C=US"
        assert record.issuer == "CN=Integration Test CA,O=Example Trust"
        assert record.valid_from == tls_server.certificate.not_valid_before_utc
        assert record.valid_to == tls_server.certificate.not_valid_after_utc

    def test_non_ok_path_is_connection_failed(self, tls_server: TlsServer) -> None:
        """
        GIVEN the server answers 404 on /missing
        WHEN the fetcher is pointed at it
        THEN the lookup fails even though the handshake succeeded.
        """
        result = HttpsCertificateFetcher(timeout=5).fetch(f"{tls_server.base_url}/missing")

        ResultAssertions.assert_failure(result, ErrorCode.CONNECTION_FAILED)
        ResultAssertions.assert_failure_message_equals(
            result, "Failed to establish HTTPS connection. Response code: 404"
        )

    def test_non_ok_path_allowed_when_status_not_required(self, tls_server: TlsServer) -> None:
        fetcher = HttpsCertificateFetcher(timeout=5, require_ok_status=False)

        result = fetcher.fetch(f"{tls_server.base_url}/missing")

        ResultAssertions.assert_success_value(result, certificate_der(tls_server.certificate))


class TestConnectionFailures:
    def test_closed_port_is_connection_failed(self) -> None:
        result = HttpsCertificateFetcher(timeout=2).fetch(f"https://127.0.0.1:{_closed_port()}/")

        ResultAssertions.assert_failure(result, ErrorCode.CONNECTION_FAILED)
        ResultAssertions.assert_failure_message_contains(
            result, "Error while establishing the HTTPS connection"
        )

    def test_verification_rejects_untrusted_certificate(self, tls_server: TlsServer) -> None:
        """
        GIVEN verify=True and a server certificate no trust store knows
        WHEN the fetcher is pointed at it
        THEN the handshake fails with CONNECTION_FAILED.
        """
        result = HttpsCertificateFetcher(timeout=5, verify=True).fetch(f"{tls_server.base_url}/")

        ResultAssertions.assert_failure(result, ErrorCode.CONNECTION_FAILED)
