"""
Binance Spot Market-Data Client

Builds Binance spot REST paths (/api/v3/...) and runs them through the
UpstreamFetcher, which owns host selection, timeouts and failover.

Methods return the fetcher's UpstreamResult untouched, so callers see which
host answered (result.host) and decide how to shape the payload.

API Documentation:
    https://developers.binance.com/docs/binance-spot-api-docs/rest-api/market-data-endpoints

Usage:
    client = BinanceMarketClient(fetcher)
    result = await client.get_klines("BTCUSDT", "1h", limit="60")
    rows = result.unwrap()
"""

from typing import Optional
from urllib.parse import urlencode

from core.fetcher import UpstreamFetcher
from core.logging import get_logger
from core.schemas import UpstreamResult


class BinanceMarketClient:
    """
    Path builder for the Binance spot market-data endpoints.

    Query values are forwarded as given (URL-encoded only). Binance validates
    symbols, intervals and limits, and its error is relayed to the caller.

    Attributes:
        fetcher: UpstreamFetcher doing the actual HTTP work
        logger: Logger instance for debugging

    Example:
        >>> client = BinanceMarketClient(UpstreamFetcher(["api1.binance.com"]))
        >>> result = await client.get_price("BTCUSDT")
        >>> result.payload
        {'symbol': 'BTCUSDT', 'price': '42000.00000000'}
    """

    def __init__(self, fetcher: UpstreamFetcher):
        self.fetcher = fetcher
        self.logger = get_logger(__name__)

    def _path(self, endpoint: str, params: Optional[dict] = None) -> str:
        path = f"{self.fetcher.api_prefix}{endpoint}"
        if params:
            path = f"{path}?{urlencode(params)}"
        return path

    async def get_ticker_24hr(self) -> UpstreamResult:
        """
        Fetch the 24h rolling ticker for every symbol.

        Binance Endpoint:
            GET /api/v3/ticker/24hr

        Response Format:
            [
              {
                "symbol": "BTCUSDT",
                "priceChangePercent": "1.250",
                "lastPrice": "42000.00000000",
                "volume": "25000.12345000",
                ...
              }
            ]
        """
        self.logger.info("Fetching 24h tickers")
        return await self.fetcher.fetch(self._path("/ticker/24hr"))

    async def get_price(self, symbol: Optional[str] = None) -> UpstreamResult:
        """
        Fetch the latest price for one symbol, or for all symbols.

        Args:
            symbol: Trading pair (e.g. "BTCUSDT"); None returns every symbol

        Binance Endpoint:
            GET /api/v3/ticker/price

        Response Format:
            {"symbol": "BTCUSDT", "price": "42000.00000000"}   (with symbol)
            [{"symbol": "...", "price": "..."}, ...]           (without)
        """
        self.logger.info(f"Fetching price: {symbol or 'all'}")
        params = {"symbol": symbol} if symbol else None
        return await self.fetcher.fetch(self._path("/ticker/price", params))

    async def get_klines(self, symbol: str, interval: str, limit: str) -> UpstreamResult:
        """
        Fetch candlestick rows.

        Args:
            symbol: Trading pair (e.g. "BTCUSDT")
            interval: Candle interval (e.g. "1m", "1h", "1d")
            limit: Number of candles, passed through as received

        Binance Endpoint:
            GET /api/v3/klines

        Response Format:
            [
              [
                1499040000000,      // Open time
                "0.01634000",       // Open
                "0.80000000",       // High
                "0.01575800",       // Low
                "0.01577100",       // Close
                "148976.11427815",  // Volume
                1499644799999,      // Close time
                "2434.19055334",    // Quote asset volume
                308,                // Number of trades
                ...
              ]
            ]
        """
        self.logger.info(f"Fetching klines: {symbol} {interval} (limit={limit})")
        params = {"symbol": symbol, "interval": interval, "limit": limit}
        return await self.fetcher.fetch(self._path("/klines", params))

    async def get_exchange_info(self) -> UpstreamResult:
        """
        Fetch exchange trading rules and symbol metadata.

        Binance Endpoint:
            GET /api/v3/exchangeInfo

        Response Format:
            {
              "timezone": "UTC",
              "serverTime": 1565246363776,
              "symbols": [{"symbol": "ETHBTC", "status": "TRADING", ...}]
            }
        """
        self.logger.info("Fetching exchange info")
        return await self.fetcher.fetch(self._path("/exchangeInfo"))
