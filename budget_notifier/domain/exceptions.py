"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CompletionError(DomainException):
    """Completion endpoint failed or returned something unusable"""

    pass


class CompletionTimeoutError(CompletionError):
    """Completion request exceeded the client timeout"""

    pass


class RateLimitError(CompletionError):
    """Completion endpoint answered HTTP 429"""

    pass


class CompletionHTTPError(CompletionError):
    """Completion endpoint returned a non-2xx status"""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Completion API error: {status_code}")


class CompletionTransportError(CompletionError):
    """Network-level failure talking to the completion endpoint"""

    pass


class MalformedCompletionError(CompletionError):
    """Completion response did not have the expected shape"""

    pass


class InvalidRecordError(DomainException):
    """Record from the persistent store is malformed"""

    pass


class ScheduleWindowError(ValueError):
    """Explicit notification hour falls outside the permitted window.

    Raised for caller bugs, never caught by the scheduler.
    """

    pass
