"""
Response Shaper

Pure transformations from raw upstream payloads to what the frontend consumes.

- Ticker filter: keep only allow-listed symbols from the 24h ticker snapshot
- Candle mapper: turn kline rows (array-of-arrays) into Candle objects
- Exchange-info filter: keep only allow-listed symbols from exchange metadata

Allow-lists are fixed when the shaper is built, so tests can construct one
with their own fixtures instead of patching module globals.
"""

from typing import Any, Dict, Iterable, List

from core.config import Settings
from core.schemas import Candle


class ResponseShaper:
    """
    Filters and reshapes upstream payloads.

    Attributes:
        ticker_symbols: Symbols kept by filter_tickers()
        exchange_info_symbols: Symbols kept by filter_exchange_info()

    Example:
        >>> shaper = ResponseShaper(["BTCUSDT", "ETHUSDT"], ["BTCUSDT"])
        >>> shaper.filter_tickers([{"symbol": "DOGEBTC"}, {"symbol": "ETHUSDT"}])
        [{'symbol': 'ETHUSDT'}]
    """

    def __init__(self, ticker_symbols: Iterable[str], exchange_info_symbols: Iterable[str]):
        self.ticker_symbols = frozenset(s.upper() for s in ticker_symbols)
        self.exchange_info_symbols = frozenset(s.upper() for s in exchange_info_symbols)

    @classmethod
    def from_settings(cls, config: Settings) -> "ResponseShaper":
        return cls(
            ticker_symbols=config.ticker_symbols_list,
            exchange_info_symbols=config.exchange_info_symbols_list,
        )

    @staticmethod
    def _filter_by_symbol(entries: Iterable[Dict[str, Any]], allowed: frozenset) -> List[Dict[str, Any]]:
        # Upstream order is kept; a symbol listed twice upstream is emitted once
        seen = set()
        kept = []
        for entry in entries:
            symbol = entry.get("symbol")
            if symbol in allowed and symbol not in seen:
                seen.add(symbol)
                kept.append(entry)
        return kept

    def filter_tickers(self, tickers: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Keep 24h tickers whose symbol is allow-listed.

        Args:
            tickers: Raw /ticker/24hr payload (list of ticker dicts)

        Returns:
            Ticker dicts, unchanged, in upstream order
        """
        return self._filter_by_symbol(tickers, self.ticker_symbols)

    def filter_exchange_info(self, symbols: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Keep symbol metadata entries whose symbol is allow-listed.

        Args:
            symbols: The "symbols" list of the /exchangeInfo payload

        Returns:
            Metadata dicts, unchanged, in upstream order
        """
        return self._filter_by_symbol(symbols, self.exchange_info_symbols)

    @staticmethod
    def map_candles(rows: Iterable[List[Any]]) -> List[Candle]:
        """
        Map kline rows to Candle objects by position.

        Index 0 is the open time, 1..5 are OHLCV as decimal strings, 6 is the
        close time and 8 the trade count. Rows are assumed full length; a short
        row raises IndexError.

        Example:
            >>> row = [1, "100.0", "110.0", "90.0", "105.0", "50.0", 2, "0", 42, "0", "0", "0"]
            >>> ResponseShaper.map_candles([row])[0].trades
            42
        """
        return [
            Candle(
                open_time=int(row[0]),
                open=float(row[1]),
                high=float(row[2]),
                low=float(row[3]),
                close=float(row[4]),
                volume=float(row[5]),
                close_time=int(row[6]),
                trades=int(row[8]),
            )
            for row in rows
        ]
