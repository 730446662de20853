"""
Exception hierarchy for consulkit.

All custom exceptions inherit from ConsulkitError base class. Errors raised by
API calls derive from ConsulError so callers can catch a single type around
any request.
"""

from typing import Optional


class ConsulkitError(Exception):
    """Base exception for all consulkit errors."""
    pass


# Configuration Errors
class ConfigurationError(ConsulkitError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


# API Errors
class ConsulError(ConsulkitError):
    """Base exception for errors surfaced by a control-plane API call."""
    pass


class HttpError(ConsulError):
    """Raised when the HTTP transport fails (connection refused, timeout, TLS)."""
    pass


class RequestFailedError(ConsulError):
    """Raised when the server answers with a non-2xx status code.

    The response body is never decoded; only the status code is kept.
    """

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"request failed with code {status_code}")


class ValidationError(ConsulError):
    """Base exception for client-side precondition failures.

    These are raised before any network round trip is attempted.
    """
    pass


class MissingParameterError(ValidationError):
    """Raised when a required parameter was not provided."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"missing parameter, {parameter}")


class EmptyKeyError(ValidationError):
    """Raised when a KV operation that requires a key is given an empty one."""

    def __init__(self) -> None:
        super().__init__("expected a non-empty key, got empty")


class DecodeError(ConsulError):
    """Raised when a response body or required header cannot be decoded."""
    pass
