"""
TLS adapter — leaf certificate retrieval via httpx.

Adapter layer — implements the CertificateFetcher port using httpx for a
single sync HTTPS exchange per call.

Flow for one fetch(url):
  1. Open a fresh httpx.Client (no pooling across calls, no retry)
  2. Stream a GET for the URL (headers only, body never read)
  3. Check the response status (200 required unless relaxed)
  4. Read the peer leaf certificate from the TLS object of the network stream
  5. Close the response and the client on every exit path

Peer verification is disabled by default: the tracker records whatever the
server presents, trusted or not.

All transport errors are captured into Result failures — no exceptions
leak to the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog
from railway.result import Result
from railway.result_failures import ResultFailures

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class _Exchange:
    """What one HTTPS round trip yielded, before any policy is applied."""

    status_code: int
    leaf_der: bytes | None


class HttpsCertificateFetcher:
    """
    Fetch the leaf certificate presented by an HTTPS server.

    Implements the CertificateFetcher port.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        verify: bool = False,
        require_ok_status: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._verify = verify
        self._require_ok_status = require_ok_status
        self._transport = transport

    def fetch(self, url: str) -> Result[bytes]:
        """
        Connect to the URL and return the DER bytes of the peer's leaf certificate.

        Returns Result.failure(CONNECTION_FAILED, ...) on DNS, connect, handshake
        or timeout errors and on a non-200 status, and
        Result.failure(NO_SERVER_CERTIFICATE, ...) when the peer presented none.
        """
        try:
            exchange = self._exchange(url)
        except (httpx.HTTPError, OSError, UnicodeError) as e:
            log.warning("fetcher.connection_failed", url=url, error=str(e))
            return ResultFailures.connection_failed(
                f"Error while establishing the HTTPS connection: {e}", e
            )

        return (
            Result.success(exchange)
            .flat_map(self._check_status)
            .flat_map(self._leaf_certificate)
            .peek(lambda der: log.info("fetcher.certificate_received", url=url, size_bytes=len(der)))
        )

    def _exchange(self, url: str) -> _Exchange:
        """One streamed GET; the TLS object is read before the connection closes."""
        with (
            httpx.Client(
                timeout=self._timeout,
                verify=self._verify,
                follow_redirects=False,
                transport=self._transport,
            ) as client,
            client.stream("GET", url) as response,
        ):
            log.debug("fetcher.handshake_complete", url=url, status_code=response.status_code)
            return _Exchange(
                status_code=response.status_code,
                leaf_der=_peer_leaf_certificate(response),
            )

    def _check_status(self, exchange: _Exchange) -> Result[_Exchange]:
        if self._require_ok_status and exchange.status_code != httpx.codes.OK:
            return ResultFailures.connection_failed(
                f"Failed to establish HTTPS connection. Response code: {exchange.status_code}"
            )
        return Result.success(exchange)

    @staticmethod
    def _leaf_certificate(exchange: _Exchange) -> Result[bytes]:
        if not exchange.leaf_der:
            return ResultFailures.no_server_certificate()
        return Result.success(exchange.leaf_der)


def _peer_leaf_certificate(response: httpx.Response) -> bytes | None:
    """
    DER bytes of the first certificate in the peer's chain, or None.

    httpcore exposes the live connection as the "network_stream" response
    extension; its "ssl_object" is the negotiated TLS session.
    """
    network_stream = response.extensions.get("network_stream")
    if network_stream is None:
        return None
    ssl_object = network_stream.get_extra_info("ssl_object")
    if ssl_object is None:
        return None
    # _ssl._SSLSocket.getpeercert takes the flag positionally only
    return ssl_object.getpeercert(True)
