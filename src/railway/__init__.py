"""
Railway-Oriented Programming (ROP) support for cert-tracker.

Every pipeline stage returns a Result; failures carry an ErrorCode from a
closed taxonomy and short-circuit the rest of the pipeline.

    from railway import Result, ErrorCode

    def require_https(url: httpx.URL) -> Result[httpx.URL]:
        if url.scheme != "https":
            return Result.failure(ErrorCode.UNSUPPORTED_SCHEME, "Only HTTPS URLs are supported.")
        return Result.success(url)
"""

from railway.assertions import ResultAssertions
from railway.execution import (
    ExecutionContext,
    LoggingExecutionContext,
    NoOpExecutionContext,
)
from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result, Success
from railway.result_failures import ResultFailures

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ResultFailures",
    "ResultAssertions",
]
