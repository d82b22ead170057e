"""
Response Envelopes

Every body the API returns is wrapped in one of two shapes:

    {"success": true,  "timestamp": "...Z", "data": ..., ["source", "count", "symbol", "interval"]}
    {"success": false, "timestamp": "...Z", "error": "...", ["path"]}
"""

from typing import Any, Optional

from fastapi.responses import JSONResponse

from core.schemas import ErrorEnvelope, SuccessEnvelope
from core.utils.time import to_iso_timestamp


def success_response(data: Any, **extra: Any) -> dict:
    """
    Wrap a payload in the success envelope.

    Args:
        data: JSON-serializable payload
        **extra: Optional envelope fields (source, count, symbol, interval)

    Example:
        >>> success_response([{"symbol": "BTCUSDT"}], source="api1.binance.com", count=1)
        {'success': True, 'timestamp': '2024-01-01T12:00:00.000Z', 'data': [...], 'source': 'api1.binance.com', 'count': 1}
    """
    envelope = SuccessEnvelope(timestamp=to_iso_timestamp(), data=data, **extra)
    body = envelope.model_dump(exclude_none=True)
    # A JSON null from upstream is still a payload
    body["data"] = data
    return body


def error_response(message: str, status_code: int = 500, path: Optional[str] = None) -> JSONResponse:
    """Build an error envelope response with the given HTTP status."""
    envelope = ErrorEnvelope(error=message, timestamp=to_iso_timestamp(), path=path)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(exclude_none=True))
