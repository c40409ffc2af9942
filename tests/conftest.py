"""Shared test fixtures: in-memory provider adapters, record factories, API client."""

import asyncio
from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from config.settings import settings
from src.api.app import create_app
from src.models.analysis import LeaderboardEntry, TokenAnalysisResult, TokenHolder, TokenInfo
from src.models.wallet import PortfolioHolding, WalletPnlSummary, WalletPortfolio
from src.parsers.provider import (
    BalanceProvider,
    DateRange,
    LeaderboardQuery,
    ProviderError,
    TradingAnalyticsProvider,
)

CAKE = "0x0e09fabb73bd3ade0a17ecc321fd13a19e81ce82"
BUSD = "0xe9e7cea3dcae0e1a7e2e8cd36f4ab0fd7b8a8d07"


class FakeAnalytics(TradingAnalyticsProvider):
    """Canned responses keyed by address; addresses in ``fail`` raise."""

    def __init__(self) -> None:
        self.infos: dict[str, TokenInfo] = {}
        self.leaderboards: dict[str, list[LeaderboardEntry]] = {}
        self.summaries: dict[str, WalletPnlSummary] = {}
        self.holders: dict[str, list[TokenHolder]] = {}
        self.fail: set[str] = set()
        self.delays: dict[str, float] = {}
        self.leaderboard_queries: list[LeaderboardQuery] = []
        self.summary_calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _maybe_fail(self, key: str) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
        finally:
            self.in_flight -= 1
        if key in self.fail:
            raise ProviderError(f"boom: {key}", status_code=500)

    async def get_token_holders(self, token_address: str, limit: int = 100) -> list[TokenHolder]:
        await self._maybe_fail(token_address)
        return self.holders.get(token_address, [])[:limit]

    async def get_pnl_leaderboard(self, query: LeaderboardQuery) -> list[LeaderboardEntry]:
        self.leaderboard_queries.append(query)
        await self._maybe_fail(f"lb:{query.token_address}")
        return self.leaderboards.get(query.token_address, [])

    async def get_wallet_pnl_summary(
        self,
        address: str,
        *,
        date_range: DateRange | None = None,
        token_address: str | None = None,
    ) -> WalletPnlSummary:
        self.summary_calls.append(address)
        await self._maybe_fail(f"pnl:{address}")
        return self.summaries.get(address, WalletPnlSummary(address=address))

    async def get_token_info(self, token_address: str) -> TokenInfo | None:
        await self._maybe_fail(f"info:{token_address}")
        return self.infos.get(token_address)


class FakeBalances(BalanceProvider):
    def __init__(self) -> None:
        self.portfolios: dict[str, WalletPortfolio] = {}
        self.fail: set[str] = set()
        self.delays: dict[str, float] = {}

    async def get_wallet_portfolio(self, address: str) -> WalletPortfolio:
        await asyncio.sleep(self.delays.get(address, 0))
        if address in self.fail:
            raise ProviderError(f"Moralis API error: {address}", status_code=500)
        return self.portfolios.get(address, WalletPortfolio(address=address))


@pytest.fixture
def make_entry() -> Callable[..., LeaderboardEntry]:
    def _make(address: str, pnl: float, roi: float = 0.0, **kwargs) -> LeaderboardEntry:
        kwargs.setdefault("pnl_usd_realised", pnl)
        return LeaderboardEntry(address=address, pnl_usd_total=pnl, roi_percent=roi, **kwargs)

    return _make


@pytest.fixture
def make_token() -> Callable[..., TokenAnalysisResult]:
    def _make(symbol: str, wallets: list[LeaderboardEntry], address: str | None = None) -> TokenAnalysisResult:
        return TokenAnalysisResult(
            address=address or "0x" + symbol.lower().ljust(40, "0")[:40],
            symbol=symbol,
            name=f"{symbol} Token",
            wallets=wallets,
        )

    return _make


@pytest.fixture
def two_token_batch(make_entry, make_token) -> list[TokenAnalysisResult]:
    """X: 0xA 500/20, 0xB 300/10 — Y: 0xA 400/15, 0xC 200/5."""
    return [
        make_token("X", [make_entry("0xA", 500, 20), make_entry("0xB", 300, 10)]),
        make_token("Y", [make_entry("0xA", 400, 15), make_entry("0xC", 200, 5)]),
    ]


@pytest.fixture
def fake_analytics() -> FakeAnalytics:
    return FakeAnalytics()


@pytest.fixture
def fake_balances() -> FakeBalances:
    return FakeBalances()


@pytest.fixture
def sample_portfolio() -> Callable[[str], WalletPortfolio]:
    def _make(address: str) -> WalletPortfolio:
        return WalletPortfolio(
            address=address,
            holdings=[
                PortfolioHolding(chain="bnb", token_address=CAKE, token_symbol="CAKE", balance_usd=120.5),
                PortfolioHolding(chain="bnb", token_address=BUSD, token_symbol="BUSD", balance_usd=30.0),
            ],
        )

    return _make


@pytest.fixture
def upstream() -> AsyncMock:
    """Stand-in for the gateway's outbound httpx client."""
    client = AsyncMock()
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = {"data": []}
    client.request = AsyncMock(return_value=resp)
    return client


@pytest.fixture
def api_keys(monkeypatch) -> None:
    monkeypatch.setattr(settings, "nansen_api_key", "test-nansen-key")
    monkeypatch.setattr(settings, "moralis_api_key", "test-moralis-key")


@pytest.fixture
def api_client(fake_analytics, fake_balances, upstream) -> Iterator[TestClient]:
    app = create_app(analytics=fake_analytics, balances=fake_balances, upstream=upstream)
    with TestClient(app) as client:
        yield client
