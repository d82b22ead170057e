"""Error taxonomy for the market proxy.

Every failure the proxy can relay to a client is one of these exceptions.
Each carries an ``ErrorKind`` so handlers and logs can tell them apart
without isinstance chains.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    UPSTREAM_STATUS = "upstream_status"
    INVALID_BODY = "invalid_body"
    ORIGIN_REJECTED = "origin_rejected"
    NOT_FOUND = "not_found"


class ProxyError(Exception):
    """Base exception for all proxy errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(ProxyError):
    """Base class for failures talking to the upstream exchange API."""

    def __init__(self, message: str, host: Optional[str] = None):
        super().__init__(message)
        self.host = host

    @property
    def retryable(self) -> bool:
        """True when repeating the call later could succeed."""
        return False


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream did not answer within the timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str = "Request timeout", host: Optional[str] = None):
        super().__init__(message, host=host)

    @property
    def retryable(self) -> bool:
        return True


class UpstreamTransportError(UpstreamError):
    """Raised on connection-level failures (DNS, refused, reset)."""

    kind = ErrorKind.TRANSPORT

    @property
    def retryable(self) -> bool:
        return True


class UpstreamStatusError(UpstreamError):
    """Raised when the upstream answered with a status other than 200."""

    kind = ErrorKind.UPSTREAM_STATUS

    def __init__(self, status_code: int, body: str, host: Optional[str] = None):
        super().__init__(f"HTTP {status_code}: {body}", host=host)
        self.status_code = status_code
        self.body = body

    @property
    def retryable(self) -> bool:
        # 4xx means the request itself is wrong (or we are throttled)
        return self.status_code >= 500


class InvalidBodyError(UpstreamError):
    """Raised when the upstream body is not valid JSON."""

    kind = ErrorKind.INVALID_BODY

    def __init__(self, message: str = "Invalid JSON response", host: Optional[str] = None):
        super().__init__(message, host=host)


class OriginRejectedError(ProxyError):
    """Raised when a request Origin fails the cross-origin policy."""

    kind = ErrorKind.ORIGIN_REJECTED

    def __init__(self, origin: str, message: str = "Not allowed by CORS"):
        super().__init__(message)
        self.origin = origin
