"""Pydantic models for Nansen API responses.

Fields are optional across the board: Nansen drops keys it has no value for,
and the leaderboard has shipped under two naming schemes.
"""

from typing import Any

from pydantic import BaseModel

from src.models.analysis import LeaderboardEntry, TokenHolder, TokenInfo
from src.models.wallet import TopTokenPnl, WalletPnlSummary


def _num(value: float | None) -> float:
    return value if value is not None else 0.0


class NansenLeaderboardItem(BaseModel):
    """Item from POST /tgm/pnl-leaderboard."""

    trader_address: str | None = None
    address: str | None = None
    pnl_usd_realised: float | None = None
    pnl_usd_unrealised: float | None = None
    pnl_usd_total: float | None = None
    roi_percent_total: float | None = None  # fraction, not percent
    roi_percent: float | None = None  # older name, also a fraction
    winrate_percent: float | None = None
    num_trades: float | None = None  # some payloads send counts as floats
    nof_trades: float | None = None
    volume_usd: float | None = None
    holding_usd: float | None = None
    avg_entry_price: float | None = None
    avg_exit_price: float | None = None

    model_config = {"extra": "ignore"}

    def to_entry(self) -> LeaderboardEntry:
        realised = _num(self.pnl_usd_realised)
        unrealised = _num(self.pnl_usd_unrealised)
        total = self.pnl_usd_total if self.pnl_usd_total is not None else realised + unrealised
        roi = self.roi_percent_total if self.roi_percent_total is not None else self.roi_percent
        trades = self.num_trades if self.num_trades is not None else self.nof_trades
        return LeaderboardEntry(
            address=self.trader_address or self.address or "",
            pnl_usd_realised=realised,
            pnl_usd_unrealised=unrealised,
            pnl_usd_total=total,
            roi_percent=_num(roi) * 100,
            winrate_percent=_num(self.winrate_percent),
            num_trades=int(trades or 0),
            volume_usd=_num(self.volume_usd),
            holding_usd=_num(self.holding_usd),
            avg_entry_price=_num(self.avg_entry_price),
            avg_exit_price=_num(self.avg_exit_price),
        )


class NansenTopToken(BaseModel):
    """Entry of ``top5_tokens`` in the address PnL summary."""

    token_address: str | None = None
    token_symbol: str | None = None
    realized_pnl: float | None = None
    realized_roi: float | None = None

    model_config = {"extra": "ignore"}

    def to_top_token(self) -> TopTokenPnl:
        address = self.token_address or ""
        return TopTokenPnl(
            token_address=address,
            token_name=self.token_symbol or address,
            token_symbol=self.token_symbol or "-",
            pnl_usd=_num(self.realized_pnl),
            roi_percent=_num(self.realized_roi) * 100,
        )


class NansenPnlSummary(BaseModel):
    """Response from POST /profiler/address/pnl-summary."""

    realized_pnl_usd: float | None = None
    realized_pnl_percent: float | None = None
    win_rate: float | None = None
    traded_times: float | None = None
    top5_tokens: list[Any] | None = None  # validated per item by the client

    model_config = {"extra": "ignore"}

    def to_summary(
        self,
        address: str,
        date_from: str = "",
        date_to: str = "",
        top_tokens: list[NansenTopToken] | None = None,
    ) -> WalletPnlSummary:
        realised = _num(self.realized_pnl_usd)
        return WalletPnlSummary(
            address=address,
            date_from=date_from,
            date_to=date_to,
            pnl_usd_realised=realised,
            pnl_usd_unrealised=0.0,  # summary endpoint reports realised only
            pnl_usd_total=realised,
            roi_percent=_num(self.realized_pnl_percent) * 100,
            winrate_percent=_num(self.win_rate) * 100,
            num_trades=int(self.traded_times or 0),
            top_tokens=[t.to_top_token() for t in top_tokens or []],
        )


class NansenScreenerItem(BaseModel):
    """Item from POST /token-screener."""

    token_address: str | None = None
    token_symbol: str | None = None
    token_name: str | None = None
    price_usd: float | None = None
    market_cap_usd: float | None = None
    liquidity: float | None = None
    volume: float | None = None

    model_config = {"extra": "ignore"}

    def to_info(self, fallback_address: str) -> TokenInfo:
        return TokenInfo(
            address=(self.token_address or fallback_address).lower(),
            symbol=self.token_symbol or "Unknown",
            name=self.token_name or "Unknown Token",
            price_usd=_num(self.price_usd),
            market_cap_usd=_num(self.market_cap_usd),
            liquidity_usd=_num(self.liquidity),
            volume_usd=_num(self.volume),
        )


class NansenHolder(BaseModel):
    """Item from POST /tgm/holders."""

    address: str | None = None
    address_label: str | None = None
    token_amount: float | None = None
    value_usd: float | None = None
    ownership_percentage: float | None = None

    model_config = {"extra": "ignore"}

    def to_holder(self) -> TokenHolder:
        return TokenHolder(
            address=self.address or "",
            address_label=self.address_label or "",
            token_amount=_num(self.token_amount),
            value_usd=_num(self.value_usd),
            ownership_percentage=_num(self.ownership_percentage),
        )
