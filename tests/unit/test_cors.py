"""
Unit Tests for the Cross-Origin Policy

These tests verify that:
- Requests without an Origin header are allowed
- Exact and wildcard-subdomain origins are allowed
- Any other origin is rejected before a route (or the upstream) is reached

Run with:
    pytest tests/unit/test_cors.py -v
"""

import pytest

from core.cors import OriginPolicy
from core.errors import ErrorKind, OriginRejectedError
from tests.conftest import PRIMARY_HOST


@pytest.fixture
def policy():
    return OriginPolicy(
        ["http://localhost:3000", "https://crypto-simulator-front.onrender.com"],
        r"https?://.+\.onrender\.com",
    )


class TestOriginPolicy:
    """Tests for OriginPolicy.is_allowed / check"""

    @pytest.mark.parametrize("origin", [
        None,
        "",
        "http://localhost:3000",
        "https://crypto-simulator-front.onrender.com",
        "https://x.onrender.com",
        "http://preview-42.onrender.com",
    ])
    def test_allowed(self, policy, origin):
        assert policy.is_allowed(origin) is True

    @pytest.mark.parametrize("origin", [
        "https://evil.example.com",
        "http://localhost:3001",
        "https://onrender.com.evil.example.com",
        "https://x.onrender.com.evil.example.com",
    ])
    def test_rejected(self, policy, origin):
        assert policy.is_allowed(origin) is False

    def test_check_raises_origin_rejected(self, policy):
        with pytest.raises(OriginRejectedError) as exc_info:
            policy.check("https://evil.example.com")

        assert exc_info.value.kind == ErrorKind.ORIGIN_REJECTED
        assert exc_info.value.origin == "https://evil.example.com"

    def test_without_pattern_only_exact_origins_pass(self):
        policy = OriginPolicy(["http://localhost:3000"])

        assert policy.is_allowed("http://localhost:3000") is True
        assert policy.is_allowed("https://x.onrender.com") is False


class TestOriginGuard:
    """Tests for the middleware wired into the app"""

    def test_disallowed_origin_rejected_before_upstream(self, client, upstream):
        upstream.add(PRIMARY_HOST, "/api/v3/ticker/price", json={"symbol": "BTCUSDT", "price": "1"})

        response = client.get(
            "/api/market/price/BTCUSDT",
            headers={"Origin": "https://evil.example.com"},
        )

        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Not allowed by CORS"
        assert "timestamp" in body
        assert upstream.requests == []

    def test_no_origin_allowed(self, client, upstream):
        upstream.add(PRIMARY_HOST, "/api/v3/ticker/price", json={"symbol": "BTCUSDT", "price": "1"})

        response = client.get("/api/market/price/BTCUSDT")

        assert response.status_code == 200
        assert len(upstream.requests) == 1

    def test_wildcard_origin_allowed_with_cors_headers(self, client, upstream):
        upstream.add(PRIMARY_HOST, "/api/v3/ticker/price", json={"symbol": "BTCUSDT", "price": "1"})

        response = client.get(
            "/api/market/price/BTCUSDT",
            headers={"Origin": "https://x.onrender.com"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://x.onrender.com"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_preflight_from_allowed_origin(self, client):
        response = client.options(
            "/api/market/ticker",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    def test_preflight_from_disallowed_origin(self, client):
        response = client.options(
            "/api/market/ticker",
            headers={
                "Origin": "https://evil.example.com",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 403
