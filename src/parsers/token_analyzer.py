"""Token analysis orchestrator — fan out per-token fetches, build the batch.

For each requested token: metadata and PnL leaderboard are fetched
concurrently and best-effort. Leaderboards are reduced to the top 10
profitable traders; tokens without any are dropped. The batch replaces the
previous one only after every branch has resolved.
"""

import asyncio
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from loguru import logger

from config.settings import settings
from src.models.analysis import (
    CrossTokenReport,
    LeaderboardEntry,
    TokenAnalysisResult,
    TokenInfo,
)
from src.models.wallet import WalletPnlSummary
from src.parsers.alerts import Notification, NotificationDispatcher
from src.parsers.cross_token import build_report
from src.parsers.provider import (
    DateRange,
    LeaderboardQuery,
    OrderBy,
    ProviderError,
    TradingAnalyticsProvider,
)
from src.parsers.token_input import validate_token_addresses

T = TypeVar("T")


@dataclass
class AnalysisBatch:
    """Result of one analyze() call."""

    results: list[TokenAnalysisResult] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)

    @property
    def total_traders(self) -> int:
        return sum(len(r.wallets) for r in self.results)


def select_top_traders(entries: Sequence[LeaderboardEntry], limit: int = 10) -> list[LeaderboardEntry]:
    """Keep profitable entries with an address, best total PnL first."""
    kept = [e for e in entries if e.address and e.pnl_usd_total > 0]
    kept.sort(key=lambda e: e.pnl_usd_total, reverse=True)
    return kept[:limit]


async def _best_effort(coro: Awaitable[T], what: str) -> T | None:
    try:
        return await coro
    except ProviderError as e:
        logger.warning(f"[ANALYZE] {what} failed: {e}")
        return None


class TokenAnalyzer:
    """Runs analysis batches against a trading-analytics provider."""

    def __init__(
        self,
        provider: TradingAnalyticsProvider,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        self._provider = provider
        self._notifier = notifier or NotificationDispatcher()
        self._results: list[TokenAnalysisResult] = []

    @property
    def results(self) -> list[TokenAnalysisResult]:
        return list(self._results)

    def report(self) -> CrossTokenReport:
        return build_report(
            self._results,
            top_tokens_limit=settings.top_tokens_limit,
            max_nodes=settings.cross_nodes_limit,
        )

    def _leaderboard_query(self, token_address: str) -> LeaderboardQuery:
        return LeaderboardQuery(
            token_address=token_address,
            date_range=DateRange.trailing(settings.leaderboard_lookback_days),
            page=1,
            limit=settings.leaderboard_limit,
            min_holding_usd=settings.leaderboard_min_holding_usd,
            min_realised_pnl_usd=settings.leaderboard_min_realised_pnl_usd,
            order_by=(OrderBy("pnl_usd_total", "DESC"),),
        )

    async def _analyze_token(self, token_address: str) -> TokenAnalysisResult:
        short = token_address[:10]
        info, entries = await asyncio.gather(
            _best_effort(self._provider.get_token_info(token_address), f"token info {short}"),
            _best_effort(
                self._provider.get_pnl_leaderboard(self._leaderboard_query(token_address)),
                f"leaderboard {short}",
            ),
        )
        info = info or TokenInfo(address=token_address.lower())
        wallets = select_top_traders(entries or [], limit=settings.leaderboard_limit)
        logger.debug(f"[ANALYZE] {info.symbol} ({short}): {len(wallets)} qualifying traders")
        return TokenAnalysisResult(
            address=token_address.lower(),
            symbol=info.symbol,
            name=info.name,
            wallets=wallets,
        )

    async def analyze(self, token_addresses: Sequence[str]) -> AnalysisBatch:
        """Analyze 1..max_tokens tokens and replace the current batch.

        Raises InvalidAddressError before any request if the input is unusable.
        """
        addresses = validate_token_addresses(token_addresses, max_tokens=settings.max_tokens)
        self._results = []
        batch = AnalysisBatch()

        try:
            analyzed = await asyncio.gather(*(self._analyze_token(a) for a in addresses))
        except Exception:
            logger.exception(f"[ANALYZE] Batch of {len(addresses)} tokens failed")
            batch.notifications.append(
                self._notifier.error(
                    "Analysis Failed",
                    "Failed to analyze tokens. Please check the addresses and try again.",
                )
            )
            return batch

        batch.results = [r for r in analyzed if r.wallets]
        self._results = list(batch.results)

        total = batch.total_traders
        if total > 0:
            batch.notifications.append(
                self._notifier.success(
                    "Analysis Complete",
                    f"Found {total} profitable traders across {len(batch.results)} token(s).",
                )
            )
        else:
            batch.notifications.append(
                self._notifier.error("No Data", "No profitable traders found for these tokens.")
            )
        return batch

    async def get_batch_wallet_pnl(
        self,
        addresses: Sequence[str],
        *,
        date_range: DateRange | None = None,
    ) -> list[WalletPnlSummary]:
        """PnL summaries for many wallets, ``wallet_batch_size`` requests at a time.

        Groups run one after another; calls inside a group run concurrently.
        Failed lookups are dropped.
        """
        date_range = date_range or DateRange.trailing(settings.wallet_lookback_days)
        size = settings.wallet_batch_size
        summaries: list[WalletPnlSummary] = []

        for start in range(0, len(addresses), size):
            group = addresses[start:start + size]
            results = await asyncio.gather(
                *(
                    _best_effort(
                        self._provider.get_wallet_pnl_summary(a, date_range=date_range),
                        f"wallet PnL {a[:10]}",
                    )
                    for a in group
                )
            )
            summaries.extend(r for r in results if r is not None)

        logger.info(f"[ANALYZE] Batch wallet PnL: {len(summaries)}/{len(addresses)} resolved")
        return summaries
