"""
FastAPI Application - Crypto Market Proxy

Relays Binance spot market data to the browser frontend, reshaped into a
uniform success/error envelope and served from whichever upstream host is
reachable.

Endpoints:
    - GET /                              API information
    - GET /health                        Liveness and uptime
    - GET /api/market/ticker             24h tickers for allow-listed symbols
    - GET /api/market/price/{symbol}     Latest price (symbol optional)
    - GET /api/market/klines             Candles (?symbol=&interval=&limit=)
    - GET /api/market/exchangeInfo       Metadata for allow-listed symbols

Usage:
    uvicorn app.main:app --reload --host 0.0.0.0 --port 3001

Docs:
    - Swagger: http://localhost:3001/docs
    - ReDoc: http://localhost:3001/redoc
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.responses import error_response, success_response
from core.config import Settings, settings, validate_configuration
from core.cors import OriginGuardMiddleware, OriginPolicy
from core.errors import UpstreamError
from core.fetcher import UpstreamFetcher
from core.logging import logger
from core.shaper import ResponseShaper
from core.utils.time import to_iso_timestamp, uptime_seconds
from exchanges.binance import BinanceMarketClient


APP_NAME = "Crypto Market Proxy"
APP_VERSION = "2.0.0"


# ============================================
# Dependencies
# ============================================

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_market_client(request: Request) -> BinanceMarketClient:
    return request.app.state.market_client


def get_shaper(request: Request) -> ResponseShaper:
    return request.app.state.shaper


router = APIRouter()


# ============================================
# System Endpoints
# ============================================

@router.get("/", tags=["System"])
async def root(config: Settings = Depends(get_settings)):
    """API information and available endpoints."""
    return {
        "status": "ok",
        "message": APP_NAME,
        "version": APP_VERSION,
        "timestamp": to_iso_timestamp(),
        "upstreamHosts": config.upstream_hosts_list,
        "endpoints": {
            "health": "/health",
            "ticker": "/api/market/ticker",
            "price": "/api/market/price/:symbol?",
            "klines": "/api/market/klines?symbol=&interval=&limit=",
            "exchangeInfo": "/api/market/exchangeInfo",
        },
    }


@router.get("/health", tags=["System"])
async def health_check():
    """Liveness check. Never calls the upstream."""
    return {"status": "ok", "uptime": round(uptime_seconds(), 3), "timestamp": to_iso_timestamp()}


# ============================================
# Market Data Endpoints
# ============================================

@router.get("/api/market/ticker", tags=["Market Data"])
async def get_ticker(
    client: BinanceMarketClient = Depends(get_market_client),
    shaper: ResponseShaper = Depends(get_shaper),
):
    """
    24h ticker statistics for the allow-listed symbols.

    Example:
        GET /api/market/ticker
    """
    result = await client.get_ticker_24hr()
    tickers = shaper.filter_tickers(result.unwrap())

    logger.info(f"Fetched {len(tickers)} tickers from {result.host}")
    return success_response(tickers, source=result.host, count=len(tickers))


@router.get("/api/market/price", tags=["Market Data"])
@router.get("/api/market/price/{symbol}", tags=["Market Data"])
async def get_price(
    symbol: Optional[str] = None,
    client: BinanceMarketClient = Depends(get_market_client),
):
    """
    Latest price for one symbol, or for every symbol when none is given.

    Examples:
        GET /api/market/price/btcusdt  ->  data: {"symbol": "BTCUSDT", "price": "..."}
        GET /api/market/price          ->  data: [{"symbol": ..., "price": ...}, ...]
    """
    symbol = symbol.upper() if symbol else None

    result = await client.get_price(symbol)
    return success_response(result.unwrap(), source=result.host, symbol=symbol)


@router.get("/api/market/klines", tags=["Market Data"])
async def get_klines(
    symbol: Optional[str] = None,
    interval: Optional[str] = None,
    limit: Optional[str] = None,
    client: BinanceMarketClient = Depends(get_market_client),
    shaper: ResponseShaper = Depends(get_shaper),
    config: Settings = Depends(get_settings),
):
    """
    Candlestick history.

    Query values are not validated here: a bad interval or limit is rejected
    by Binance and relayed as a 500 with Binance's message.

    Example:
        GET /api/market/klines?symbol=ethusdt&interval=15m&limit=100
    """
    symbol = symbol.upper() if symbol else config.default_kline_symbol
    interval = interval or config.default_kline_interval
    limit = limit or str(config.default_kline_limit)

    result = await client.get_klines(symbol, interval, limit)
    candles = [candle.model_dump(by_alias=True) for candle in shaper.map_candles(result.unwrap())]

    logger.info(f"Fetched {len(candles)} candles for {symbol} {interval} from {result.host}")
    return success_response(
        candles,
        source=result.host,
        symbol=symbol,
        interval=interval,
        count=len(candles),
    )


@router.get("/api/market/exchangeInfo", tags=["Market Data"])
async def get_exchange_info(
    client: BinanceMarketClient = Depends(get_market_client),
    shaper: ResponseShaper = Depends(get_shaper),
):
    """Trading rules and metadata for the allow-listed symbols."""
    result = await client.get_exchange_info()
    symbols = shaper.filter_exchange_info(result.unwrap().get("symbols", []))

    return success_response(symbols, source=result.host, count=len(symbols))


# ============================================
# Application Factory
# ============================================

def create_app(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Settings to use (defaults to the global settings)
        transport: Optional httpx transport for upstream calls (tests)

    Returns:
        Configured FastAPI app
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown."""
        logger.info("=== Application Starting ===")
        validate_configuration(config)
        logger.info(f"{APP_NAME} v{APP_VERSION} on port {config.app_port}")
        logger.info("=== Started Successfully ===")

        yield

        logger.info("=== Shutdown Complete ===")

    app = FastAPI(
        title=APP_NAME,
        description=(
            "Proxy for Binance spot market data with upstream host failover.\n\n"
            "All responses use the envelope `{success, timestamp, data | error}`."
        ),
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    policy = OriginPolicy.from_settings(config)
    fetcher = UpstreamFetcher.from_settings(config, transport=transport)

    app.state.settings = config
    app.state.market_client = BinanceMarketClient(fetcher)
    app.state.shaper = ResponseShaper.from_settings(config)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(policy.origins),
        allow_origin_regex=policy.origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"]
    )

    # Added last so it wraps everything above
    app.add_middleware(OriginGuardMiddleware, policy=policy)

    app.include_router(router)

    # ============================================
    # Error Handlers
    # ============================================

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        """Relay upstream failures as 500 with the raw message."""
        logger.error(f"{request.url.path} failed ({exc.kind.value} via {exc.host}): {exc.message}")
        return error_response(exc.message, status_code=500)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Handle 404 and other framework-raised HTTP errors."""
        if exc.status_code == 404:
            return error_response("Endpoint not found", status_code=404, path=request.url.path)
        return error_response(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        """Handle 500 errors."""
        logger.error(f"Internal error on {request.url.path}: {exc!r}")
        return error_response("Internal server error", status_code=500)

    return app


app = create_app()
