"""
Binance Exchange Connector

Spot market-data endpoints (/api/v3) reached through the UpstreamFetcher.
"""

from exchanges.binance.api_client import BinanceMarketClient

__all__ = ["BinanceMarketClient"]
