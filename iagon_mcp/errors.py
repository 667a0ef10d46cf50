"""Error taxonomy shared by the gateway, orchestrator and tool layer."""
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Machine-readable classification of a failed operation."""
    INPUT = "input"
    POLICY = "policy"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    PERMISSION = "permission"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    CONNECTIVITY = "connectivity"
    SERVER = "server"
    UNKNOWN = "unknown"

    @property
    def is_transient(self) -> bool:
        """True when resubmitting later may succeed."""
        return self in _TRANSIENT_KINDS


_TRANSIENT_KINDS = frozenset({
    ErrorKind.RATE_LIMITED,
    ErrorKind.TIMEOUT,
    ErrorKind.CONNECTIVITY,
    ErrorKind.SERVER,
})


class IagonError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(IagonError):
    """Raised when required configuration (e.g. the access token) is missing or invalid."""


class InputError(IagonError, ValueError):
    """Raised for invalid caller input, always before any remote call."""

    kind = ErrorKind.INPUT


class GatewayError(IagonError):
    """Classified failure of a remote Iagon API call."""

    def __init__(self, kind: ErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"GatewayError(kind={self.kind.name}, message={self.message!r})"
