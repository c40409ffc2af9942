"""Internal schema for per-token leaderboards and cross-token views.

Provider adapters normalize into these records; the aggregator only ever
reads them. Records produced by a batch are frozen.
"""

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """A trader's performance on one token."""

    address: str
    pnl_usd_realised: float = 0.0
    pnl_usd_unrealised: float = 0.0
    pnl_usd_total: float = 0.0
    roi_percent: float = 0.0
    winrate_percent: float = 0.0
    num_trades: int = 0
    volume_usd: float = 0.0
    holding_usd: float = 0.0
    avg_entry_price: float = 0.0
    avg_exit_price: float = 0.0

    model_config = {"frozen": True}


class TokenInfo(BaseModel):
    """Token metadata from the screener."""

    address: str
    symbol: str = "Unknown"
    name: str = "Unknown Token"
    price_usd: float = 0.0
    market_cap_usd: float = 0.0
    liquidity_usd: float = 0.0
    volume_usd: float = 0.0

    model_config = {"frozen": True}


class TokenHolder(BaseModel):
    """Single holder from the token holder list."""

    address: str
    address_label: str = ""
    token_amount: float = 0.0
    value_usd: float = 0.0
    ownership_percentage: float = 0.0

    model_config = {"frozen": True}


class TokenAnalysisResult(BaseModel):
    """One analyzed token: metadata plus its top profitable traders."""

    address: str
    symbol: str = "Unknown"
    name: str = "Unknown Token"
    wallets: list[LeaderboardEntry] = []

    model_config = {"frozen": True}


class AggregatedWallet(BaseModel):
    """Deduplicated wallet across the batch with accumulated P&L."""

    address: str
    tokens: list[str]
    pnl_usd_total: float
    pnl_usd_realised: float
    pnl_usd_unrealised: float
    roi_percent: float = 0.0
    winrate_percent: float = 0.0
    num_trades: int = 0


class CommonWallet(BaseModel):
    """Wallet found in the top lists of two or more tokens."""

    address: str
    tokens: list[str]
    total_pnl: float
    avg_roi: float


class TokenProfit(BaseModel):
    """Aggregate profitability of a token's top traders."""

    address: str
    symbol: str
    total_pnl: float


class CrossTokenNode(BaseModel):
    """Wallet node for the cross-token network view."""

    address: str
    tokens: list[str]
    total_pnl: float
    coverage: float  # share of analyzed tokens, display only


class SideBySideEntry(BaseModel):
    rank: int
    wallet: LeaderboardEntry
    is_common: bool
    token_count: int


class SideBySideColumn(BaseModel):
    address: str
    symbol: str
    name: str
    entries: list[SideBySideEntry]


class CrossTokenReport(BaseModel):
    """Every derived view of one analysis batch."""

    tokens: list[TokenAnalysisResult] = []
    global_ranking: list[AggregatedWallet] = []
    common_wallets: list[CommonWallet] = []
    top_tokens: list[TokenProfit] = []
    cross_nodes: list[CrossTokenNode] = []
    side_by_side: list[SideBySideColumn] = []
    total_traders: int = 0
    unique_wallets: int = 0
