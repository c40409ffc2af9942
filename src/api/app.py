"""FastAPI application factory — gateway plus analysis dashboard API."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from loguru import logger
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.cors import CORSMiddleware

from config.settings import settings
from src.api.middleware import SecurityHeadersMiddleware
from src.parsers.alerts import NotificationDispatcher
from src.parsers.provider import BalanceProvider, TradingAnalyticsProvider
from src.parsers.token_analyzer import TokenAnalyzer
from src.parsers.wallet_profile import WalletProfileLoader

# Rate limiter (shared instance)
limiter = Limiter(key_func=get_remote_address)

VERSION = "0.1.0"


def create_app(
    *,
    analytics: TradingAnalyticsProvider | None = None,
    balances: BalanceProvider | None = None,
    upstream: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Provider adapters and the gateway's upstream client can be injected;
    by default the adapters talk to this same server's gateway routes.
    """
    if analytics is None:
        from src.parsers.nansen.client import NansenClient

        analytics = NansenClient()
    if balances is None:
        from src.parsers.moralis.client import MoralisClient

        balances = MoralisClient()
    if upstream is None:
        upstream = httpx.AsyncClient(timeout=settings.http_timeout_sec)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await analytics.close()
        await balances.close()
        await upstream.aclose()
        logger.info("HTTP clients closed")

    app = FastAPI(
        title="BEP-20 Trader Intelligence API",
        version=VERSION,
        docs_url="/api/docs" if os.getenv("DASHBOARD_DEBUG") else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if os.getenv("DASHBOARD_DEBUG") else None,
        lifespan=lifespan,
    )

    notifier = NotificationDispatcher()
    app.state.upstream = upstream
    app.state.analytics = analytics
    app.state.balances = balances
    app.state.notifier = notifier
    app.state.analyzer = TokenAnalyzer(analytics, notifier)
    app.state.wallet_loader = WalletProfileLoader(analytics, balances, notifier)

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    # Import and include routers
    from src.api.routers.analysis import router as analysis_router
    from src.api.routers.gateway import router as gateway_router
    from src.api.routers.health import router as health_router
    from src.api.routers.wallets import router as wallets_router

    app.include_router(health_router)
    app.include_router(analysis_router)
    app.include_router(wallets_router)
    app.include_router(gateway_router)

    return app
