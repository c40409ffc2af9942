"""Wallet detail loader — PnL summary plus portfolio for the selected wallet.

Selections are not cancelled when a newer one arrives. Each selection gets a
generation number and only the latest generation may update ``current`` or
notify the user.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

from loguru import logger

from src.models.wallet import WalletPortfolio, WalletProfile
from src.parsers.alerts import Notification, NotificationDispatcher
from src.parsers.provider import (
    BalanceProvider,
    DateRange,
    ProviderError,
    TradingAnalyticsProvider,
)


@dataclass
class WalletSelection:
    """Result of one select() call that was still current when it resolved."""

    profile: WalletProfile
    notifications: list[Notification] = field(default_factory=list)


class WalletProfileLoader:
    def __init__(
        self,
        analytics: TradingAnalyticsProvider,
        balances: BalanceProvider,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        self._analytics = analytics
        self._balances = balances
        self._notifier = notifier or NotificationDispatcher()
        self._generation = 0
        self._selected: str | None = None
        self.current: WalletProfile | None = None

    @property
    def selected(self) -> str | None:
        return self._selected

    async def fetch(self, address: str, date_range: DateRange | None = None) -> WalletProfile:
        """Fetch a fresh profile without touching selection state.

        A failed PnL lookup leaves ``pnl_summary`` as None; a failed portfolio
        lookup yields an empty portfolio.
        """
        pnl_result, portfolio_result = await asyncio.gather(
            self._analytics.get_wallet_pnl_summary(address, date_range=date_range),
            self._balances.get_wallet_portfolio(address),
            return_exceptions=True,
        )

        if isinstance(portfolio_result, ProviderError):
            logger.warning(f"[WALLET] Portfolio for {address[:10]} unavailable: {portfolio_result}")
            portfolio_result = WalletPortfolio(address=address)
        elif isinstance(portfolio_result, BaseException):
            raise portfolio_result

        if isinstance(pnl_result, ProviderError):
            logger.warning(f"[WALLET] PnL summary for {address[:10]} failed: {pnl_result}")
            pnl_result = None
        elif isinstance(pnl_result, BaseException):
            raise pnl_result

        return WalletProfile(
            address=address,
            pnl_summary=pnl_result,
            portfolio=portfolio_result,
            fetched_at=datetime.now(UTC),
        )

    async def select(self, address: str, date_range: DateRange | None = None) -> WalletSelection | None:
        """Select ``address`` and load its profile.

        Returns None when a newer selection (or close()) happened while the
        fetch was in flight; the stale profile is discarded silently.
        """
        self._generation += 1
        generation = self._generation
        self._selected = address
        self.current = None

        profile = await self.fetch(address, date_range)

        if generation != self._generation:
            logger.debug(f"[WALLET] Dropping stale profile for {address[:10]}")
            return None

        selection = WalletSelection(profile=profile)
        if profile.pnl_summary is None:
            selection.notifications.append(
                self._notifier.error("Error", "Failed to load wallet data. Please try again.")
            )
        self.current = profile
        return selection

    def close(self) -> None:
        """Close the detail view; in-flight selections become stale."""
        self._generation += 1
        self._selected = None
        self.current = None
