"""
Convenience factory methods for the failure kinds.

    from railway.result_failures import ResultFailures

    # Instead of:
    Result.failure(ErrorCode.INVALID_INPUT, "URL cannot be null or empty.")

    # Write:
    ResultFailures.invalid_input("URL cannot be null or empty.")
"""

from __future__ import annotations

from railway.failure import ErrorCode
from railway.result import Result


class ResultFailures:
    """Factory methods for the failures raised by the pipeline and its adapters."""

    @staticmethod
    def invalid_input(message: str) -> Result:
        return Result.failure(ErrorCode.INVALID_INPUT, message)

    @staticmethod
    def unsupported_scheme(message: str = "Only HTTPS URLs are supported.") -> Result:
        return Result.failure(ErrorCode.UNSUPPORTED_SCHEME, message)

    @staticmethod
    def not_found(resource_type: str, identifier: object) -> Result:
        return Result.failure(
            ErrorCode.NOT_FOUND,
            f"{resource_type} with ID {identifier} not found",
        )

    @staticmethod
    def connection_failed(message: str, exception: BaseException | None = None) -> Result:
        """DNS, connect, handshake, timeout or non-OK HTTP response."""
        return Result.failure(ErrorCode.CONNECTION_FAILED, message, exception)

    @staticmethod
    def no_server_certificate(message: str = "No server certificates found.") -> Result:
        return Result.failure(ErrorCode.NO_SERVER_CERTIFICATE, message)

    @staticmethod
    def malformed_certificate(message: str, exception: BaseException | None = None) -> Result:
        return Result.failure(ErrorCode.MALFORMED_CERTIFICATE, message, exception)

    @staticmethod
    def delete_failed(message: str, exception: BaseException | None = None) -> Result:
        return Result.failure(ErrorCode.DELETE_FAILED, message, exception)

