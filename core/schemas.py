"""
Data Schemas

Pydantic models shared by the fetcher, the shaper and the API layer.

Models:
    - UpstreamRequest: One validated (host, path) pair for an outbound GET
    - UpstreamResult: Outcome of a fetch, either Ok(payload) or Err(error)
    - Candle: Candlestick derived from an upstream kline row
    - SuccessEnvelope / ErrorEnvelope: Shapes of every JSON response body

Candle and the envelopes serialize with camelCase keys (openTime, closeTime)
because that is what the browser frontend consumes.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict, ValidationInfo

from core.config import KNOWN_UPSTREAM_HOSTS
from core.errors import ErrorKind, UpstreamError


# ============================================
# Upstream Request / Result
# ============================================

class UpstreamRequest(BaseModel):
    """
    A single outbound GET, immutable for the duration of the call.

    Attributes:
        host: Upstream hostname, one of KNOWN_UPSTREAM_HOSTS
        path: Path plus query string, starting with the API version prefix
        api_prefix: Prefix the path is checked against

    Example:
        >>> req = UpstreamRequest(host="api1.binance.com", path="/api/v3/ticker/price")
        >>> req.url
        'https://api1.binance.com/api/v3/ticker/price'
    """

    api_prefix: str = "/api/v3"
    host: str
    path: str

    model_config = ConfigDict(frozen=True)

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        host = v.strip().lower()
        if host not in KNOWN_UPSTREAM_HOSTS:
            raise ValueError(f"Unknown upstream host: {v}")
        return host

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str, info: ValidationInfo) -> str:
        prefix = info.data.get("api_prefix", "/api/v3")
        if not v.startswith(prefix):
            raise ValueError(f"Upstream path must start with {prefix}: {v}")
        return v

    @property
    def url(self) -> str:
        return f"https://{self.host}{self.path}"


class UpstreamResult(BaseModel):
    """
    Outcome of an upstream fetch: Ok(payload) or Err(error).

    Build with UpstreamResult.success() / UpstreamResult.failure(), never by
    hand. ``unwrap()`` returns the payload or raises the carried error.

    Example:
        >>> result = await fetcher.fetch("/api/v3/ticker/price?symbol=BTCUSDT")
        >>> if result.ok:
        ...     print(result.payload["price"], "from", result.host)
        ... else:
        ...     print(result.kind, result.message)
    """

    ok: bool
    payload: Any = None
    error: Optional[UpstreamError] = None
    host: Optional[str] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @classmethod
    def success(cls, payload: Any, host: str) -> "UpstreamResult":
        return cls(ok=True, payload=payload, host=host)

    @classmethod
    def failure(cls, error: UpstreamError) -> "UpstreamResult":
        return cls(ok=False, error=error, host=error.host)

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> Any:
        """Return the payload, or raise the UpstreamError of a failed fetch."""
        if not self.ok:
            raise self.error
        return self.payload


# ============================================
# Candle (Kline) Schema
# ============================================

class Candle(BaseModel):
    """
    One candlestick, positionally mapped from an upstream kline row.

    Upstream row layout:
        [
          1499040000000,      // 0 Open time
          "0.01634000",       // 1 Open
          "0.80000000",       // 2 High
          "0.01575800",       // 3 Low
          "0.01577100",       // 4 Close
          "148976.11427815",  // 5 Volume
          1499644799999,      // 6 Close time
          "2434.19055334",    // 7 Quote asset volume
          308,                // 8 Number of trades
          ...
        ]
    """

    open_time: int = Field(..., alias="openTime", description="Open time (ms since epoch)")
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(..., description="Volume in base asset")
    close_time: int = Field(..., alias="closeTime", description="Close time (ms since epoch)")
    trades: int = Field(..., description="Number of trades in the interval")

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "openTime": 1704110400000,
                "open": 42000.0,
                "high": 42500.0,
                "low": 41800.0,
                "close": 42300.0,
                "volume": 1250.5,
                "closeTime": 1704113999999,
                "trades": 18234
            }
        }
    )


# ============================================
# Response Envelopes
# ============================================

class SuccessEnvelope(BaseModel):
    """
    Body of every successful market response.

    Optional fields (source, count, symbol, interval) are only emitted when set.
    """

    success: bool = True
    timestamp: str
    data: Any
    source: Optional[str] = None
    count: Optional[int] = None
    symbol: Optional[str] = None
    interval: Optional[str] = None


class ErrorEnvelope(BaseModel):
    """Body of every error response. ``path`` is only set for unmatched routes."""

    success: bool = False
    error: str
    timestamp: str
    path: Optional[str] = None
