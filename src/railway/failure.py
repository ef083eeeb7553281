"""
Failure description — structured error information for the failure track.

ErrorCode is the closed taxonomy of failure kinds a certificate lookup,
store, list or delete can end in. FailureDescription carries the kind, a
human-readable message, the originating exception (if any) and a timestamp.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Failure kinds for the failure track.

    Grouped by who is at fault:
    - Caller errors: INVALID_INPUT, UNSUPPORTED_SCHEME, NOT_FOUND, EMPTY_COLLECTION
    - Remote endpoint errors: CONNECTION_FAILED, NO_SERVER_CERTIFICATE, MALFORMED_CERTIFICATE
    - Server errors: DELETE_FAILED, DATABASE_ERROR, TECHNICAL_ERROR
    """

    # --- Caller errors ---
    INVALID_INPUT = "INVALID_INPUT"
    """Empty or malformed URL."""

    UNSUPPORTED_SCHEME = "UNSUPPORTED_SCHEME"
    """Well-formed URL whose scheme is not https."""

    NOT_FOUND = "NOT_FOUND"
    """No stored certificate with the requested identifier."""

    EMPTY_COLLECTION = "EMPTY_COLLECTION"
    """Listing was requested but the store holds no certificates."""

    # --- Remote endpoint errors ---
    CONNECTION_FAILED = "CONNECTION_FAILED"
    """DNS, connect, TLS handshake, timeout or non-OK response."""

    NO_SERVER_CERTIFICATE = "NO_SERVER_CERTIFICATE"
    """Handshake completed but the peer presented no certificate."""

    MALFORMED_CERTIFICATE = "MALFORMED_CERTIFICATE"
    """Peer certificate bytes do not decode as X.509."""

    # --- Server errors ---
    DELETE_FAILED = "DELETE_FAILED"
    """The store raised while deleting an existing certificate."""

    DATABASE_ERROR = "DATABASE_ERROR"
    """Database connectivity or query failures."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Unexpected failures outside the pipeline stages."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.INVALID_INPUT, "URL cannot be null or empty.")
    >>> desc.code
    <ErrorCode.INVALID_INPUT: 'INVALID_INPUT'>
    >>> desc.message
    'URL cannot be null or empty.'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__)
        )
        return f"{self.message}\n{tb}"
