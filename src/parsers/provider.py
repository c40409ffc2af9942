"""Provider adapters — one implementation per upstream schema.

Call sites depend only on these interfaces and the records in
``src.models``; each provider maps its own payloads onto them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

from src.models.analysis import LeaderboardEntry, TokenHolder, TokenInfo
from src.models.wallet import WalletPnlSummary, WalletPortfolio


class ProviderError(Exception):
    """Upstream call failed (transport, non-2xx, or unusable payload)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window, serialized as YYYY-MM-DD."""

    date_from: date
    date_to: date

    @classmethod
    def trailing(cls, days: int, *, now: datetime | None = None) -> DateRange:
        today = (now or datetime.now(UTC)).date()
        return cls(date_from=today - timedelta(days=days), date_to=today)

    def as_payload(self) -> dict[str, str]:
        return {"from": self.date_from.isoformat(), "to": self.date_to.isoformat()}


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: str = "DESC"


@dataclass(frozen=True)
class LeaderboardQuery:
    """Leaderboard request in internal terms."""

    token_address: str
    date_range: DateRange
    page: int = 1
    limit: int = 20
    min_holding_usd: float = 0.0
    min_realised_pnl_usd: float = 100.0
    order_by: tuple[OrderBy, ...] = field(
        default_factory=lambda: (OrderBy("pnl_usd_total", "DESC"),)
    )


class TradingAnalyticsProvider(ABC):
    """Leaderboards, wallet P&L, token metadata and holders."""

    @abstractmethod
    async def get_token_holders(self, token_address: str, limit: int = 100) -> list[TokenHolder]:
        ...

    @abstractmethod
    async def get_pnl_leaderboard(self, query: LeaderboardQuery) -> list[LeaderboardEntry]:
        ...

    @abstractmethod
    async def get_wallet_pnl_summary(
        self,
        address: str,
        *,
        date_range: DateRange | None = None,
        token_address: str | None = None,
    ) -> WalletPnlSummary:
        ...

    @abstractmethod
    async def get_token_info(self, token_address: str) -> TokenInfo | None:
        ...

    async def close(self) -> None:
        return None


class BalanceProvider(ABC):
    """Wallet token balances."""

    @abstractmethod
    async def get_wallet_portfolio(self, address: str) -> WalletPortfolio:
        ...

    async def close(self) -> None:
        return None
