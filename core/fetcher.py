"""
Upstream Fetcher

Async GET against the exchange market-data API with a per-host timeout and
sequential host failover.

It handles:
- One outbound HTTPS GET per host attempt (no retries on the same host)
- A hard timeout around the whole exchange (connect, send, read body)
- Mapping transport, status and body failures to typed UpstreamErrors
- Trying the next configured host when the failure is host-specific

Failover:
    Hosts are tried in configuration order, short-circuiting on the first
    success. A failure moves on to the next host only when another host could
    plausibly answer differently: timeouts, connection errors, unparsable
    bodies, 5xx, and access blocks (403 / 451). Any other 4xx (bad symbol,
    rate limited) is returned immediately.

Usage:
    fetcher = UpstreamFetcher(["data-api.binance.vision", "api1.binance.com"])

    result = await fetcher.fetch("/api/v3/ticker/price?symbol=BTCUSDT")
    if result.ok:
        print(result.payload)
"""

import asyncio
import time
from typing import Any, Optional, Sequence

import httpx

from core.config import Settings
from core.errors import (
    InvalidBodyError,
    UpstreamError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from core.logging import get_logger, log_upstream_request, log_upstream_response
from core.schemas import UpstreamRequest, UpstreamResult


# Statuses returned by hosts that refuse the caller's network or region
GEO_BLOCK_STATUSES = frozenset({403, 451})

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class UpstreamFetcher:
    """
    Fetches JSON from the upstream API across an ordered list of hosts.

    Instances hold no per-request state and can be shared by concurrent
    requests. Every attempt opens its own httpx.AsyncClient, so requests never
    share a connection.

    Attributes:
        hosts: Hostnames in failover order (primary first)
        api_prefix: Prefix every path must start with (e.g. "/api/v3")
        timeout: Maximum seconds to wait on a single host
        user_agent: User-Agent header sent upstream

    Example:
        >>> fetcher = UpstreamFetcher.from_settings(settings)
        >>> tickers = (await fetcher.fetch("/api/v3/ticker/24hr")).unwrap()
    """

    def __init__(
        self,
        hosts: Sequence[str],
        api_prefix: str = "/api/v3",
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            hosts: Upstream hostnames in failover order
            api_prefix: API version prefix for paths
            timeout: Per-host timeout in seconds
            user_agent: User-Agent header value
            transport: Optional httpx transport (tests pass httpx.MockTransport)

        Raises:
            ValueError: If no hosts are given
        """
        if not hosts:
            raise ValueError("UpstreamFetcher needs at least one host")

        self.hosts = tuple(host.strip().lower() for host in hosts)
        self.api_prefix = api_prefix
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "UpstreamFetcher":
        return cls(
            hosts=config.upstream_hosts_list,
            api_prefix=config.api_prefix,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
            transport=transport,
        )

    @property
    def headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    # ============================================
    # Single Host Attempt
    # ============================================

    async def _get(self, request: UpstreamRequest) -> httpx.Response:
        async with httpx.AsyncClient(
            transport=self._transport,
            headers=self.headers,
            timeout=self.timeout,
        ) as client:
            # Non-streaming request: the full body is read before returning
            return await client.get(request.url)

    async def fetch_from_host(self, host: str, path: str) -> Any:
        """
        Make exactly one GET request against one host.

        Args:
            host: Upstream hostname (must be a known host)
            path: Path and query string (must start with api_prefix)

        Returns:
            Parsed JSON payload

        Raises:
            UpstreamTimeoutError: No complete response within the timeout
            UpstreamTransportError: DNS, refused, reset or similar
            UpstreamStatusError: Status other than 200 ("HTTP <code>: <body>")
            InvalidBodyError: Body is not valid JSON
            ValueError: Unknown host or path without the API prefix
        """
        request = UpstreamRequest(api_prefix=self.api_prefix, host=host, path=path)

        log_upstream_request(request.host, request.path)
        started = time.perf_counter()

        try:
            response = await asyncio.wait_for(self._get(request), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise UpstreamTimeoutError(host=request.host)
        except httpx.RequestError as e:
            raise UpstreamTransportError(str(e) or e.__class__.__name__, host=request.host)

        log_upstream_response(
            request.host, request.path, response.status_code, time.perf_counter() - started
        )

        if response.status_code != 200:
            raise UpstreamStatusError(response.status_code, response.text, host=request.host)

        try:
            return response.json()
        except ValueError:
            raise InvalidBodyError(host=request.host)

    # ============================================
    # Failover
    # ============================================

    @staticmethod
    def should_fail_over(error: UpstreamError) -> bool:
        """
        Decide whether the next host is worth trying after this failure.

        Args:
            error: Failure from the previous host

        Returns:
            True for host-specific failures, False when every host would
            answer the same way
        """
        if isinstance(error, UpstreamStatusError):
            return error.retryable or error.status_code in GEO_BLOCK_STATUSES
        return error.retryable or isinstance(error, InvalidBodyError)

    async def fetch(self, path: str, host: Optional[str] = None) -> UpstreamResult:
        """
        Fetch a path, failing over across the configured hosts.

        Args:
            path: Path and query string (e.g. "/api/v3/ticker/price?symbol=BTCUSDT")
            host: Pin the call to a single host (no failover)

        Returns:
            UpstreamResult.success(payload, host) from the first host that
            answered, or UpstreamResult.failure(error) carrying the last error
        """
        hosts = (host,) if host else self.hosts
        last_error: Optional[UpstreamError] = None

        for index, candidate in enumerate(hosts):
            try:
                payload = await self.fetch_from_host(candidate, path)
            except UpstreamError as e:
                last_error = e
                self.logger.error(f"Upstream {e.kind.value} on {candidate}: {e.message}")

                if not self.should_fail_over(e):
                    break
                if index + 1 < len(hosts):
                    self.logger.warning(f"Failing over from {candidate} to {hosts[index + 1]}")
                continue

            if index > 0:
                self.logger.info(f"Served {path} from failover host {candidate}")
            return UpstreamResult.success(payload, host=candidate)

        return UpstreamResult.failure(last_error)

