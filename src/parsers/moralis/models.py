"""Pydantic models for Moralis wallet token balances."""

from pydantic import BaseModel

from src.models.wallet import PortfolioHolding


class MoralisTokenBalance(BaseModel):
    """Item of ``result`` from GET /wallets/{address}/tokens."""

    token_address: str = ""
    symbol: str | None = None
    name: str | None = None
    logo: str | None = None
    thumbnail: str | None = None
    balance_formatted: str | None = None
    usd_price: float | None = None
    usd_value: float | None = None
    native_token: bool | None = None

    model_config = {"extra": "ignore"}

    def to_holding(self, chain: str) -> PortfolioHolding:
        return PortfolioHolding(
            chain=chain,
            token_address=self.token_address,
            token_symbol=self.symbol or "-",
            token_name=self.name or self.token_address,
            balance=self.balance_formatted or "0",
            balance_usd=self.usd_value or 0.0,
            price_usd=self.usd_price or 0.0,
            logo=self.logo or self.thumbnail,
            native_token=bool(self.native_token),
        )


class MoralisWalletTokens(BaseModel):
    """Response envelope from GET /wallets/{address}/tokens."""

    result: list[MoralisTokenBalance] | None = None
    cursor: str | None = None

    model_config = {"extra": "ignore"}
