"""
Test Suite

Structure:
- tests/unit/: Tests for individual components (fetcher, shaper, CORS, config)
  and end-to-end routing through FastAPI's TestClient with a mocked upstream

Uses pytest with pytest-asyncio for testing async functionality.
Upstream HTTP is faked with httpx.MockTransport; no test touches the network.
"""
