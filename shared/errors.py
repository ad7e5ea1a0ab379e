"""
Shared error handling for the HollyMarket Access Gateway.

Every failure the gateway reports is a ``GatewayError`` tagged with an
``ErrorKind``. The terminal error handler looks the kind up in
``ERROR_KINDS`` to find the HTTP status and wire code, so adding a new
failure mode means adding a kind, not a subclass.
"""

from enum import Enum
from typing import Any, Dict, NamedTuple, Optional


class ErrorKind(str, Enum):
    """Failure categories exposed to API callers."""

    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    AUTHENTICATION = "authentication"
    UNAUTHORIZED = "unauthorized"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    SERVER_ERROR = "server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    TIMEOUT = "timeout"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class KindInfo(NamedTuple):
    status_code: int
    code: str
    message: str


ERROR_KINDS: Dict[ErrorKind, KindInfo] = {
    ErrorKind.VALIDATION: KindInfo(400, "VALIDATION_ERROR", "Validation failed"),
    ErrorKind.BAD_REQUEST: KindInfo(400, "BAD_REQUEST", "Bad request"),
    ErrorKind.AUTHENTICATION: KindInfo(401, "AUTHENTICATION_ERROR", "Authentication required"),
    ErrorKind.UNAUTHORIZED: KindInfo(401, "UNAUTHORIZED", "Unauthorized"),
    ErrorKind.AUTHORIZATION: KindInfo(403, "AUTHORIZATION_ERROR", "Insufficient permissions"),
    ErrorKind.NOT_FOUND: KindInfo(404, "NOT_FOUND", "Resource not found"),
    ErrorKind.RATE_LIMIT_EXCEEDED: KindInfo(429, "RATE_LIMIT_EXCEEDED", "Rate limit exceeded"),
    ErrorKind.SERVER_ERROR: KindInfo(500, "SERVER_ERROR", "Upstream server error"),
    ErrorKind.SERVICE_UNAVAILABLE: KindInfo(503, "SERVICE_UNAVAILABLE", "Service unavailable"),
    ErrorKind.TIMEOUT: KindInfo(504, "TIMEOUT", "Request timeout"),
    ErrorKind.UPSTREAM: KindInfo(502, "UPSTREAM_ERROR", "Upstream error"),
    ErrorKind.INTERNAL: KindInfo(500, "INTERNAL_SERVER_ERROR", "Internal server error"),
}


class GatewayError(Exception):
    """A failure with a kind, message and optional details.

    ``code`` and ``status_code`` default to the values registered for the
    kind; upstream errors override them to mirror the upstream status.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        details: Optional[Any] = None,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        info = ERROR_KINDS[kind]
        self.kind = kind
        self.message = message or info.message
        self.details = details
        self.code = code or info.code
        self.status_code = status_code or info.status_code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"GatewayError(kind={self.kind.value!r}, status={self.status_code}, message={self.message!r})"

    def to_error_block(self) -> Dict[str, Any]:
        """Render the ``error`` member of the response envelope."""
        block: Dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details is not None:
            block["details"] = self.details
        return block


def validation_error(message: str = "Validation failed", details: Optional[Any] = None) -> GatewayError:
    return GatewayError(ErrorKind.VALIDATION, message, details)


def authentication_error(message: str = "Authentication required") -> GatewayError:
    return GatewayError(ErrorKind.AUTHENTICATION, message)


def not_found_error(message: str = "Resource not found", code: Optional[str] = None) -> GatewayError:
    return GatewayError(ErrorKind.NOT_FOUND, message, code=code)
