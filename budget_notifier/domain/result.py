"""Explicit success/failure results for calls to the completion endpoint"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar, Union

from budget_notifier.domain.exceptions import (
    CompletionError,
    CompletionHTTPError,
    CompletionTimeoutError,
    CompletionTransportError,
    MalformedCompletionError,
    RateLimitError,
)

T = TypeVar("T")


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    HTTP_ERROR = "http_error"
    TRANSPORT = "transport"
    MALFORMED = "malformed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: FailureKind
    message: str


Result = Union[Ok[T], Err]


def classify_failure(error: BaseException) -> FailureKind:
    """Map an error raised on the completion path onto its failure kind"""
    if not isinstance(error, CompletionError):
        return FailureKind.UNEXPECTED
    if isinstance(error, RateLimitError):
        return FailureKind.RATE_LIMITED
    if isinstance(error, CompletionTimeoutError):
        return FailureKind.TIMEOUT
    if isinstance(error, MalformedCompletionError):
        return FailureKind.MALFORMED
    if isinstance(error, CompletionHTTPError):
        return FailureKind.HTTP_ERROR
    if isinstance(error, CompletionTransportError):
        return FailureKind.TRANSPORT
    return FailureKind.HTTP_ERROR


def sanitize_message(error: BaseException) -> str:
    """First line of the error text; upstream errors may embed HTML bodies"""
    lines = str(error).strip().splitlines()
    return lines[0] if lines else type(error).__name__


async def attempt(operation: Callable[[], Awaitable[T]]) -> Result:
    """Run operation, turning any error it raises into an Err value"""
    try:
        return Ok(await operation())
    except Exception as e:
        return Err(kind=classify_failure(e), message=sanitize_message(e))
