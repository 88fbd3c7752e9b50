import re
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure classification shared by providers, router and telemetry."""

    INVALID_INPUT = "invalid_input"
    NOT_CONFIGURED = "not_configured"
    TRANSIENT = "transient"
    REJECTED = "rejected"
    EMPTY_RESULT = "empty_result"


class APIError(Exception):
    """Unified error class for all upstream sources and the routing layer."""

    kind: Optional[ErrorKind] = None

    def __init__(self, source: str, code: str, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "code": self.code,
            "message": self.message,
            **({"kind": self.kind.value} if self.kind else {}),
            **({"details": self.details} if self.details else {}),
        }


class InvalidInputError(APIError):
    """Query rejected before any I/O (empty, whitespace-only, wrong type)."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, details: Optional[str] = None, source: str = "classifier"):
        super().__init__(source, "INVALID_INPUT", message, details)


class ConfigurationError(APIError):
    kind = ErrorKind.NOT_CONFIGURED

    def __init__(self, source: str, message: str = "Provider not configured", details: Optional[str] = None):
        super().__init__(source, "NOT_CONFIGURED", message, details)


class TransientProviderError(APIError):
    """Timeout or connection failure; worth exactly one retry."""

    kind = ErrorKind.TRANSIENT

    def __init__(self, source: str, message: str, details: Optional[str] = None, code: str = "TRANSIENT"):
        super().__init__(source, code, message, details)


class ProviderRejectionError(APIError):
    """Any non-2xx status (429 and 5xx included), malformed response."""

    kind = ErrorKind.REJECTED

    def __init__(self, source: str, message: str, details: Optional[str] = None, code: str = "REJECTED"):
        super().__init__(source, code, message, details)


class EmptyResultError(APIError):
    kind = ErrorKind.EMPTY_RESULT

    def __init__(self, source: str, message: str = "No data", details: Optional[str] = None):
        super().__init__(source, "EMPTY_RESULT", message, details)


_SECRET_PATTERNS = (
    (re.compile(r"(X-Auth-Token[:=\s]+)[A-Za-z0-9._-]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._-]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"(api_?key=)[A-Za-z0-9._-]+", re.IGNORECASE), r"\1***"),
    (re.compile(r"gsk_[A-Za-z0-9]+"), "gsk_***"),
)


def sanitize_error_message(message) -> str:
    """Remove credentials from error text before it is logged or returned."""
    sanitized = str(message)
    for pattern, replacement in _SECRET_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized
