from src.models.analysis import (
    AggregatedWallet,
    CommonWallet,
    CrossTokenNode,
    CrossTokenReport,
    LeaderboardEntry,
    SideBySideColumn,
    SideBySideEntry,
    TokenAnalysisResult,
    TokenHolder,
    TokenInfo,
    TokenProfit,
)
from src.models.wallet import (
    PortfolioHolding,
    TopTokenPnl,
    WalletPnlSummary,
    WalletPortfolio,
    WalletProfile,
)

__all__ = [
    "LeaderboardEntry",
    "TokenInfo",
    "TokenHolder",
    "TokenAnalysisResult",
    "AggregatedWallet",
    "CommonWallet",
    "TokenProfit",
    "CrossTokenNode",
    "SideBySideEntry",
    "SideBySideColumn",
    "CrossTokenReport",
    "TopTokenPnl",
    "WalletPnlSummary",
    "PortfolioHolding",
    "WalletPortfolio",
    "WalletProfile",
]
