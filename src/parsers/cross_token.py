"""Cross-token wallet aggregation — smart money across analyzed tokens.

Every function here is a pure function of the batch's TokenAnalysisResult
list. Views are rebuilt from scratch after each analysis run.

Two P&L totals coexist:
- global ranking seeds a wallet with its first entry and adds every later
  sighting to it;
- common wallets sum all per-token contributions.
They agree for every wallet seen more than once; single-token wallets only
show up in the global ranking.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.models.analysis import (
    AggregatedWallet,
    CommonWallet,
    CrossTokenNode,
    CrossTokenReport,
    SideBySideColumn,
    SideBySideEntry,
    TokenAnalysisResult,
    TokenProfit,
)

TOP_N = 10
MIN_SHARED_TOKENS = 2


@dataclass
class _WalletTrace:
    symbols: list[str] = field(default_factory=list)
    pnls: list[float] = field(default_factory=list)
    rois: list[float] = field(default_factory=list)

    def add(self, symbol: str, pnl: float, roi: float) -> None:
        if symbol not in self.symbols:
            self.symbols.append(symbol)
        self.pnls.append(pnl)
        self.rois.append(roi)


def _trace_wallets(token_results: Sequence[TokenAnalysisResult]) -> dict[str, _WalletTrace]:
    """Group each token's top-10 entries by wallet address."""
    traces: dict[str, _WalletTrace] = defaultdict(_WalletTrace)
    for token in token_results:
        for wallet in token.wallets[:TOP_N]:
            traces[wallet.address].add(token.symbol, wallet.pnl_usd_total, wallet.roi_percent)
    return traces


def build_global_ranking(token_results: Sequence[TokenAnalysisResult]) -> list[AggregatedWallet]:
    """Deduplicated wallet ranking with multi-token P&L accumulation."""
    ranking: dict[str, AggregatedWallet] = {}

    for token in token_results:
        for entry in token.wallets:
            agg = ranking.get(entry.address)
            if agg is None:
                ranking[entry.address] = AggregatedWallet(
                    address=entry.address,
                    tokens=[token.symbol],
                    pnl_usd_total=entry.pnl_usd_total,
                    pnl_usd_realised=entry.pnl_usd_realised,
                    pnl_usd_unrealised=entry.pnl_usd_unrealised,
                    roi_percent=entry.roi_percent,
                    winrate_percent=entry.winrate_percent,
                    num_trades=entry.num_trades,
                )
                continue

            if token.symbol not in agg.tokens:
                agg.tokens.append(token.symbol)
            agg.pnl_usd_total += entry.pnl_usd_total
            agg.pnl_usd_realised += entry.pnl_usd_realised
            agg.pnl_usd_unrealised += entry.pnl_usd_unrealised

    return sorted(ranking.values(), key=lambda w: w.pnl_usd_total, reverse=True)


def build_common_wallets(token_results: Sequence[TokenAnalysisResult]) -> list[CommonWallet]:
    """Wallets in the top 10 of at least two tokens, by summed P&L."""
    common = [
        CommonWallet(
            address=address,
            tokens=list(trace.symbols),
            total_pnl=sum(trace.pnls),
            avg_roi=sum(trace.rois) / len(trace.rois),
        )
        for address, trace in _trace_wallets(token_results).items()
        if len(trace.symbols) >= MIN_SHARED_TOKENS
    ]
    return sorted(common, key=lambda w: w.total_pnl, reverse=True)


def top_performing_tokens(
    token_results: Sequence[TokenAnalysisResult], limit: int = 5
) -> list[TokenProfit]:
    """Tokens ranked by the summed P&L of their top 10 traders."""
    profits = [
        TokenProfit(
            address=token.address,
            symbol=token.symbol,
            total_pnl=sum(w.pnl_usd_total for w in token.wallets[:TOP_N]),
        )
        for token in token_results
    ]
    profits.sort(key=lambda t: t.total_pnl, reverse=True)
    return profits[:limit]


def build_cross_visualization_nodes(
    token_results: Sequence[TokenAnalysisResult], max_nodes: int = 15
) -> list[CrossTokenNode]:
    """Multi-token wallets ordered by breadth, then P&L."""
    token_count = len(token_results)
    nodes = [
        CrossTokenNode(
            address=address,
            tokens=list(trace.symbols),
            total_pnl=sum(trace.pnls),
            coverage=len(trace.symbols) / token_count,
        )
        for address, trace in _trace_wallets(token_results).items()
        if len(trace.symbols) >= MIN_SHARED_TOKENS
    ]
    nodes.sort(key=lambda n: (len(n.tokens), n.total_pnl), reverse=True)
    return nodes[:max_nodes]


def merge_side_by_side(token_results: Sequence[TokenAnalysisResult]) -> list[SideBySideColumn]:
    """Per-token wallet lists flagged with cross-token membership."""
    traces = _trace_wallets(token_results)
    common = {w.address for w in build_common_wallets(token_results)}

    columns = []
    for token in token_results:
        entries = [
            SideBySideEntry(
                rank=rank,
                wallet=wallet,
                is_common=wallet.address in common,
                token_count=len(traces[wallet.address].symbols),
            )
            for rank, wallet in enumerate(token.wallets[:TOP_N], start=1)
        ]
        columns.append(
            SideBySideColumn(
                address=token.address,
                symbol=token.symbol,
                name=token.name,
                entries=entries,
            )
        )
    return columns


def build_report(
    token_results: Sequence[TokenAnalysisResult],
    *,
    top_tokens_limit: int = 5,
    max_nodes: int = 15,
) -> CrossTokenReport:
    """Assemble every cross-token view for one batch."""
    global_ranking = build_global_ranking(token_results)
    return CrossTokenReport(
        tokens=list(token_results),
        global_ranking=global_ranking,
        common_wallets=build_common_wallets(token_results),
        top_tokens=top_performing_tokens(token_results, limit=top_tokens_limit),
        cross_nodes=build_cross_visualization_nodes(token_results, max_nodes=max_nodes),
        side_by_side=merge_side_by_side(token_results),
        total_traders=sum(len(t.wallets) for t in token_results),
        unique_wallets=len(global_ranking),
    )
