"""
Cross-Origin Policy

Decides which browser origins may call the proxy and rejects the rest before
any route handler runs.

Rules:
    - No Origin header (curl, server-to-server, same-origin GET): allowed
    - Origin equal to one of the configured exact origins: allowed
    - Origin fully matching the wildcard-subdomain pattern: allowed
    - Anything else: rejected with an error envelope

Allowed cross-origin requests still go through Starlette's CORSMiddleware,
which adds the Access-Control-* headers. OriginGuardMiddleware only blocks.
"""

import re
from typing import Iterable, Optional

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from core.config import Settings
from core.errors import OriginRejectedError
from core.logging import get_logger
from core.schemas import ErrorEnvelope
from core.utils.time import to_iso_timestamp


logger = get_logger(__name__)


class OriginPolicy:
    """
    Immutable origin allow-list.

    Example:
        >>> policy = OriginPolicy(["http://localhost:3000"], r"https?://.+\\.onrender\\.com")
        >>> policy.is_allowed("https://x.onrender.com")
        True
        >>> policy.is_allowed("https://evil.example.com")
        False
    """

    def __init__(self, origins: Iterable[str], origin_regex: Optional[str] = None):
        self.origins = frozenset(origins)
        self.origin_regex = origin_regex
        self._pattern = re.compile(origin_regex) if origin_regex else None

    @classmethod
    def from_settings(cls, config: Settings) -> "OriginPolicy":
        return cls(config.cors_origins_list, config.cors_origin_regex or None)

    def is_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return True
        if origin in self.origins:
            return True
        return bool(self._pattern and self._pattern.fullmatch(origin))

    def check(self, origin: Optional[str]) -> None:
        """Raise OriginRejectedError if the origin is not allowed."""
        if not self.is_allowed(origin):
            raise OriginRejectedError(origin)


class OriginGuardMiddleware:
    """
    ASGI middleware rejecting HTTP requests from disallowed origins with 403.

    Registered as the outermost middleware so rejected requests never reach
    CORS handling, routing or the upstream.
    """

    def __init__(self, app: ASGIApp, policy: OriginPolicy):
        self.app = app
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        try:
            self.policy.check(origin)
        except OriginRejectedError as e:
            logger.warning(f"Rejected origin {e.origin} for {scope.get('path', '')}")
            envelope = ErrorEnvelope(error=e.message, timestamp=to_iso_timestamp())
            response = JSONResponse(status_code=403, content=envelope.model_dump(exclude_none=True))
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
