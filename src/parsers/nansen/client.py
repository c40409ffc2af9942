"""Nansen API client — leaderboards, wallet PnL, token metadata, holders.

All calls go through the local gateway, which injects the API key.
Chain is fixed to BNB Smart Chain. No retries: a failed call raises
NansenApiError and the caller decides how to degrade.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from config.settings import settings
from src.models.analysis import LeaderboardEntry, TokenHolder, TokenInfo
from src.models.wallet import WalletPnlSummary
from src.parsers.nansen.models import (
    NansenHolder,
    NansenLeaderboardItem,
    NansenPnlSummary,
    NansenScreenerItem,
    NansenTopToken,
)
from src.parsers.provider import (
    DateRange,
    LeaderboardQuery,
    ProviderError,
    TradingAnalyticsProvider,
)
from src.parsers.rate_limiter import RateLimiter

M = TypeVar("M", bound=BaseModel)


class NansenApiError(ProviderError):
    pass


def _extract_items(data: Any) -> list:
    """Nansen wraps result lists as ``data``, ``items`` or ``data.items``."""
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    inner = data.get("data")
    if isinstance(inner, list) and inner:
        return inner
    items = data.get("items")
    if isinstance(items, list) and items:
        return items
    if isinstance(inner, dict) and isinstance(inner.get("items"), list):
        return inner["items"]
    return []


def _parse_items(model: type[M], items: list, what: str) -> list[M]:
    """Validate items one by one; a malformed item is skipped, not fatal."""
    parsed: list[M] = []
    for raw in items:
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"[NANSEN] Skipping malformed {what} item: {e.error_count()} errors")
    return parsed


class NansenClient(TradingAnalyticsProvider):
    """Async client for the Nansen API via the gateway."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        chain: str | None = None,
        max_rps: float | None = None,
        timeout: float | None = None,
    ) -> None:
        self._chain = chain or settings.chain
        self._rate_limiter = RateLimiter(max_rps or settings.nansen_max_rps)
        self._client = httpx.AsyncClient(
            base_url=base_url or f"{settings.gateway_url}/nansen",
            timeout=timeout or settings.http_timeout_sec,
            headers={"Content-Type": "application/json"},
        )

    async def _request(self, method: str, path: str, body: dict | None = None) -> Any:
        await self._rate_limiter.acquire()
        try:
            resp = await self._client.request(
                method, path, json=body if method != "GET" else None
            )
        except httpx.HTTPError as e:
            logger.warning(f"[NANSEN] {type(e).__name__} on {path}: {e}")
            raise NansenApiError(f"Request failed: {path}: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise NansenApiError(
                f"Invalid JSON from {path}", status_code=resp.status_code
            ) from e

        if resp.status_code >= 400:
            message = "API call failed"
            if isinstance(data, dict):
                message = data.get("message") or data.get("error") or message
            logger.warning(f"[NANSEN] HTTP {resp.status_code} on {path}: {message}")
            raise NansenApiError(message, status_code=resp.status_code)
        return data

    async def get_token_holders(self, token_address: str, limit: int = 100) -> list[TokenHolder]:
        """Top holders by USD value. Endpoint: POST /tgm/holders"""
        data = await self._request(
            "POST",
            "/tgm/holders",
            {
                "chain": self._chain,
                "token_address": token_address.lower(),
                "aggregate_by_entity": False,
                "label_type": "all_holders",
                "pagination": {"page": 1, "per_page": limit},
                "filters": {"value_usd": {"min": settings.holders_min_value_usd}},
                "order_by": [{"field": "value_usd", "direction": "DESC"}],
            },
        )
        holders = _parse_items(NansenHolder, _extract_items(data), "holder")
        return [h.to_holder() for h in holders]

    async def get_pnl_leaderboard(self, query: LeaderboardQuery) -> list[LeaderboardEntry]:
        """Traders ranked by PnL on one token. Endpoint: POST /tgm/pnl-leaderboard

        Returns every item normalized; filtering is left to the caller.
        """
        data = await self._request(
            "POST",
            "/tgm/pnl-leaderboard",
            {
                "chain": self._chain,
                "token_address": query.token_address.lower(),
                "date": query.date_range.as_payload(),
                "pagination": {"page": query.page, "per_page": query.limit},
                "filters": {
                    "holding_usd": {"min": query.min_holding_usd},
                    "pnl_usd_realised": {"min": query.min_realised_pnl_usd},
                },
                "order_by": [
                    {"field": o.field, "direction": o.direction} for o in query.order_by
                ],
            },
        )
        items = _parse_items(NansenLeaderboardItem, _extract_items(data), "leaderboard")
        logger.debug(f"[NANSEN] Leaderboard {query.token_address[:10]}: {len(items)} items")
        return [it.to_entry() for it in items]

    async def get_wallet_pnl_summary(
        self,
        address: str,
        *,
        date_range: DateRange | None = None,
        token_address: str | None = None,
    ) -> WalletPnlSummary:
        """Realised PnL summary. Endpoint: POST /profiler/address/pnl-summary

        Defaults to the trailing wallet lookback window (90 days).
        """
        date_range = date_range or DateRange.trailing(settings.wallet_lookback_days)
        body: dict[str, Any] = {
            "address": address,
            "chain": self._chain,
            "date": date_range.as_payload(),
        }
        if token_address:
            body["token_address"] = token_address.lower()

        data = await self._request("POST", "/profiler/address/pnl-summary", body)
        try:
            summary = NansenPnlSummary.model_validate(data if isinstance(data, dict) else {})
        except ValidationError as e:
            raise NansenApiError(f"Unexpected PnL summary payload: {e}") from e
        top_tokens = _parse_items(NansenTopToken, summary.top5_tokens or [], "top token")
        payload = date_range.as_payload()
        return summary.to_summary(address, payload["from"], payload["to"], top_tokens)

    async def get_token_info(self, token_address: str) -> TokenInfo | None:
        """Token metadata from the screener. Endpoint: POST /token-screener"""
        now = datetime.now(UTC)
        data = await self._request(
            "POST",
            "/token-screener",
            {
                "chains": [self._chain],
                "date": {
                    "from": (now - timedelta(days=1)).isoformat(),
                    "to": now.isoformat(),
                },
                "pagination": {"page": 1, "per_page": 1},
                "filters": {"token_address": token_address.lower()},
            },
        )
        items = _extract_items(data)
        if not items:
            return None
        try:
            return NansenScreenerItem.model_validate(items[0]).to_info(token_address)
        except ValidationError as e:
            raise NansenApiError(f"Unexpected screener payload: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
