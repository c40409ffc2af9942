"""Wallet detail records, fetched on demand when a wallet is selected."""

from datetime import datetime

from pydantic import BaseModel, computed_field


class TopTokenPnl(BaseModel):
    """One row of the wallet's top-5 token breakdown."""

    token_address: str
    token_name: str
    token_symbol: str = "-"
    pnl_usd: float = 0.0
    roi_percent: float = 0.0


class WalletPnlSummary(BaseModel):
    """Realised P&L summary for a trailing lookback window."""

    address: str
    date_from: str = ""
    date_to: str = ""
    pnl_usd_realised: float = 0.0
    pnl_usd_unrealised: float = 0.0
    pnl_usd_total: float = 0.0
    roi_percent: float = 0.0
    winrate_percent: float = 0.0
    num_trades: int = 0
    top_tokens: list[TopTokenPnl] = []


class PortfolioHolding(BaseModel):
    chain: str
    token_address: str
    token_symbol: str = "-"
    token_name: str = ""
    balance: str = "0"
    balance_usd: float = 0.0
    price_usd: float = 0.0
    logo: str | None = None
    native_token: bool = False


class WalletPortfolio(BaseModel):
    """Current token holdings with USD valuation."""

    address: str
    holdings: list[PortfolioHolding] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_value_usd(self) -> float:
        """Sum of the kept holdings; dust below the threshold is not counted."""
        return sum(h.balance_usd for h in self.holdings)


class WalletProfile(BaseModel):
    """P&L summary plus portfolio for the selected wallet."""

    address: str
    pnl_summary: WalletPnlSummary | None = None
    portfolio: WalletPortfolio
    fetched_at: datetime
