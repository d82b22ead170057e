"""
Shared test fixtures.

FakeUpstream stands in for the Binance hosts: tests register canned responses
per (host, path) and inspect the requests the proxy actually sent.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from core.config import Settings


PRIMARY_HOST = "data-api.binance.vision"
SECONDARY_HOST = "api1.binance.com"


class FakeUpstream:
    """Routes (host, path) pairs to canned responses and records every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        host: str,
        path: str,
        status: int = 200,
        json: Any = None,
        text: Optional[str] = None,
        error: Optional[str] = None,
        delay: Optional[float] = None,
    ) -> None:
        self.routes[(host, path)] = {
            "status": status,
            "json": json,
            "text": text,
            "error": error,
            "delay": delay,
        }

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.url.host, request.url.path))
        if route is None:
            return httpx.Response(404, text="no route registered")

        if route["delay"]:
            await asyncio.sleep(route["delay"])
        if route["error"]:
            raise httpx.ConnectError(route["error"], request=request)
        if route["text"] is not None:
            return httpx.Response(route["status"], text=route["text"])
        return httpx.Response(route["status"], json=route["json"])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def hosts_called(self) -> List[str]:
        return [request.url.host for request in self.requests]


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def test_settings():
    """Settings with two hosts, a short timeout and small allow-lists."""
    return Settings(
        _env_file=None,
        upstream_hosts=f"{PRIMARY_HOST},{SECONDARY_HOST}",
        request_timeout=0.5,
        ticker_symbols="BTCUSDT,ETHUSDT,SOLUSDT",
        exchange_info_symbols="BTCUSDT,ETHUSDT",
        cors_origins="http://localhost:3000",
        cors_origin_regex=r"https?://.+\.onrender\.com",
    )


@pytest.fixture
def client(test_settings, upstream):
    """TestClient for an app whose upstream calls go to FakeUpstream."""
    app = create_app(test_settings, transport=upstream.transport)
    return TestClient(app)
