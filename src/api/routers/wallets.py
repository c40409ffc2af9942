"""Wallet detail endpoints — select a wallet, close the detail view."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from config.settings import settings
from src.api.dependencies import get_wallet_loader
from src.models.wallet import WalletProfile
from src.parsers.provider import DateRange
from src.parsers.token_input import is_valid_address
from src.parsers.wallet_profile import WalletProfileLoader

router = APIRouter(prefix="/api/v1/wallets", tags=["wallets"])


class WalletProfileResponse(BaseModel):
    profile: WalletProfile
    notifications: list[dict[str, Any]]


@router.delete("/selection", status_code=status.HTTP_204_NO_CONTENT)
async def close_selection(loader: WalletProfileLoader = Depends(get_wallet_loader)) -> None:
    """Close the detail view; pending lookups are discarded."""
    loader.close()


@router.get("/{address}", response_model=WalletProfileResponse)
async def wallet_profile(
    address: str,
    date_from: date | None = Query(None, description="Defaults to 90 days ago"),
    date_to: date | None = Query(None, description="Defaults to today"),
    loader: WalletProfileLoader = Depends(get_wallet_loader),
) -> WalletProfileResponse:
    """Select a wallet and return its PnL summary, portfolio and notifications."""
    if not is_valid_address(address):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid wallet address")

    date_range = None
    if date_from or date_to:
        default = DateRange.trailing(settings.wallet_lookback_days)
        date_range = DateRange(date_from or default.date_from, date_to or default.date_to)
        if date_range.date_from > date_range.date_to:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="date_from must not be after date_to",
            )

    selection = await loader.select(address, date_range)
    if selection is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Superseded by a newer wallet selection",
        )
    return WalletProfileResponse(
        profile=selection.profile,
        notifications=[n.to_dict() for n in selection.notifications],
    )
