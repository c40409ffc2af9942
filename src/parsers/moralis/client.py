"""Moralis balance API client — wallet token holdings on BSC.

Used for portfolios because Nansen's balance endpoint is unreliable for BNB.
Requests go through the gateway, which adds the X-API-Key header.
"""

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from config.settings import settings
from src.models.wallet import WalletPortfolio
from src.parsers.moralis.models import MoralisWalletTokens
from src.parsers.provider import BalanceProvider, ProviderError
from src.parsers.rate_limiter import RateLimiter


class MoralisApiError(ProviderError):
    pass


class MoralisClient(BalanceProvider):
    """Async client for Moralis wallet balances via the gateway."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        max_rps: float | None = None,
        timeout: float | None = None,
    ) -> None:
        self._rate_limiter = RateLimiter(max_rps or settings.moralis_max_rps)
        self._client = httpx.AsyncClient(
            base_url=base_url or f"{settings.gateway_url}/moralis",
            timeout=timeout or settings.http_timeout_sec,
            headers={"Accept": "application/json"},
        )

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise MoralisApiError(f"Request failed: {path}: {e}") from e

        if resp.status_code >= 400:
            raise MoralisApiError(
                f"Moralis API error: {resp.status_code}", status_code=resp.status_code
            )
        try:
            return resp.json()
        except ValueError as e:
            raise MoralisApiError(
                f"Invalid JSON from {path}", status_code=resp.status_code
            ) from e

    async def get_wallet_portfolio(self, address: str) -> WalletPortfolio:
        """Token balances worth more than the dust threshold.

        Endpoint: GET /wallets/{address}/tokens
        """
        data = await self._get(
            f"/wallets/{address}/tokens",
            {
                "chain": settings.moralis_chain,
                "exclude_spam": "true",
                "limit": settings.moralis_token_limit,
                "min_pair_side_liquidity_usd": int(settings.moralis_min_pair_liquidity_usd),
            },
        )
        try:
            parsed = MoralisWalletTokens.model_validate(data if isinstance(data, dict) else {})
        except ValidationError as e:
            raise MoralisApiError(f"Unexpected balances payload: {e}") from e

        tokens = parsed.result or []
        holdings = [
            t.to_holding(settings.chain)
            for t in tokens
            if (t.usd_value or 0) > settings.portfolio_min_value_usd
        ]
        logger.debug(
            f"[MORALIS] {address[:10]}: {len(tokens)} tokens, "
            f"{len(holdings)} above ${settings.portfolio_min_value_usd:g}"
        )
        return WalletPortfolio(address=address, holdings=holdings)

    async def close(self) -> None:
        await self._client.aclose()
