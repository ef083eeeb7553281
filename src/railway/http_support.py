"""
HTTP integration — ErrorCode→HTTP status mapping and FastAPI response builders.

    status = HttpStatusMapper.map_error_code(ErrorCode.NOT_FOUND)  # → 404
    return build_fastapi_response(result, body_mapper=lambda record: record.to_dict())
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, TypeVar

from fastapi.responses import JSONResponse, Response

from railway.failure import ErrorCode, FailureDescription
from railway.result import Result

T = TypeVar("T")


class HttpStatusMapper:
    """Maps ErrorCode values to HTTP status codes and error titles."""

    _CODE_TO_STATUS: dict[ErrorCode, int] = {
        ErrorCode.INVALID_INPUT: 400,
        ErrorCode.UNSUPPORTED_SCHEME: 400,
        ErrorCode.NOT_FOUND: 404,
        ErrorCode.EMPTY_COLLECTION: 404,
        ErrorCode.CONNECTION_FAILED: 502,
        ErrorCode.NO_SERVER_CERTIFICATE: 502,
        ErrorCode.MALFORMED_CERTIFICATE: 502,
        ErrorCode.DELETE_FAILED: 500,
        ErrorCode.DATABASE_ERROR: 500,
        ErrorCode.TECHNICAL_ERROR: 500,
    }

    _CODE_TO_TITLE: dict[ErrorCode, str] = {
        ErrorCode.INVALID_INPUT: "Error processing certificate",
        ErrorCode.UNSUPPORTED_SCHEME: "Error processing certificate",
        ErrorCode.CONNECTION_FAILED: "Error processing certificate",
        ErrorCode.NO_SERVER_CERTIFICATE: "Error processing certificate",
        ErrorCode.MALFORMED_CERTIFICATE: "Error processing certificate",
        ErrorCode.NOT_FOUND: "Certificate not Found",
        ErrorCode.EMPTY_COLLECTION: "No Content Found",
        ErrorCode.DELETE_FAILED: "Error deleting the certificate",
    }

    @classmethod
    def map_error_code(cls, code: ErrorCode) -> int:
        return cls._CODE_TO_STATUS.get(code, 500)

    @classmethod
    def map_failure(cls, failure: FailureDescription) -> int:
        return cls.map_error_code(failure.code)

    @classmethod
    def title_for(cls, code: ErrorCode) -> str:
        return cls._CODE_TO_TITLE.get(code, "Internal server error")


@dataclass(frozen=True, slots=True)
class ErrorResponse:
    """
    Standardized error response body.

        {
            "status": 502,
            "error": "Error processing certificate",
            "error_code": "CONNECTION_FAILED",
            "message": "Failed to establish HTTPS connection. Response code: 404",
            "timestamp": "2026-02-17T10:30:00+00:00"
        }
    """

    status: int
    error: str
    error_code: str
    message: str
    timestamp: str

    @staticmethod
    def from_failure(failure: FailureDescription) -> ErrorResponse:
        return ErrorResponse(
            status=HttpStatusMapper.map_failure(failure),
            error=HttpStatusMapper.title_for(failure.code),
            error_code=failure.code.value,
            message=failure.message,
            timestamp=failure.timestamp.isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_response(
    result: Result[T],
    success_status: int = 200,
    body_mapper: Callable[[T], Any] | None = None,
) -> tuple[Any, int]:
    """
    Build a (body, status_code) tuple from a Result.

        body, status = build_response(result, body_mapper=lambda r: r.to_dict())
    """
    return result.either(
        on_success=lambda value: (
            body_mapper(value) if body_mapper is not None else value,
            success_status,
        ),
        on_failure=lambda error: (
            ErrorResponse.from_failure(error).to_dict(),
            HttpStatusMapper.map_failure(error),
        ),
    )


def build_fastapi_response(
    result: Result[T],
    success_status: int = 200,
    body_mapper: Callable[[T], Any] | None = None,
) -> Response:
    """
    Build a FastAPI response from a Result.

    A 204 success is sent without a body.
    """
    body, status = build_response(result, success_status, body_mapper)
    if status == 204:
        return Response(status_code=204)
    return JSONResponse(content=body, status_code=status)
