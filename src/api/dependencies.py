"""FastAPI dependency injection — services stored on app.state."""

from __future__ import annotations

import httpx
from fastapi import Request

from src.parsers.provider import TradingAnalyticsProvider
from src.parsers.token_analyzer import TokenAnalyzer
from src.parsers.wallet_profile import WalletProfileLoader


def get_upstream_client(request: Request) -> httpx.AsyncClient:
    """HTTP client the gateway uses to reach Nansen and Moralis."""
    return request.app.state.upstream


def get_analytics_provider(request: Request) -> TradingAnalyticsProvider:
    return request.app.state.analytics


def get_analyzer(request: Request) -> TokenAnalyzer:
    return request.app.state.analyzer


def get_wallet_loader(request: Request) -> WalletProfileLoader:
    return request.app.state.wallet_loader
