"""
Error taxonomy for the response pipeline.

Only RateLimitError and InputError ever reach the user, and both are
rendered as friendly text rather than raised to the display layer.
"""

from typing import Optional


class RefaqError(Exception):
    """Base exception for all ReFAQ errors."""


class ConfigurationError(RefaqError):
    """Raised when the remote service has no credential configured."""


class NetworkError(RefaqError):
    """Raised when the remote call fails before a response arrives."""

    def __init__(self, message: str, timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class ProtocolError(RefaqError):
    """Raised on a non-success HTTP status or a malformed payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(RefaqError):
    """Raised when the usage gate denies a request."""

    def __init__(self, message: str, decision):
        super().__init__(message)
        self.decision = decision


class InputError(RefaqError):
    """Raised when a calculation request carries no usable amount."""
