"""
Error taxonomy for the validation layer.

Every error carries the HTTP status the API surfaces it with, a stable
error code and a generic message used when raw detail must not leak.
"""

from typing import Optional


class DemoError(Exception):
    """Base class for failures propagated out of a service."""

    status_code: int = 500
    error_code: str = "DEMO_000"
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class InvalidInput(DemoError):
    """Caller-supplied value is missing or malformed."""

    status_code = 400
    error_code = "INPUT_001"
    public_message = "Invalid input"


class ResourceNotFound(DemoError):
    """Requested user or file does not exist."""

    status_code = 404
    error_code = "NOTFOUND_001"
    public_message = "Not found"


class AccessDenied(DemoError):
    """Resolved resource lies outside the permitted scope or is unreadable."""

    status_code = 403
    error_code = "ACCESS_001"
    public_message = "Access denied"


class Fault(DemoError):
    """Operation failed at runtime; never retried."""

    status_code = 500
    error_code = "FAULT_001"


class NullElementError(Fault):
    """Aggregation met a null element under the fail-fast policy."""

    error_code = "FAULT_002"

    def __init__(self, index: int):
        super().__init__(f"Cannot add null element at index {index}")
        self.index = index


class MatcherTimeout(Fault):
    """Pattern evaluation exceeded its time budget."""

    error_code = "FAULT_003"

    def __init__(self, timeout: float, length: int):
        super().__init__(
            f"Email pattern evaluation exceeded {timeout}s on input of length {length}"
        )
        self.timeout = timeout
        self.length = length
