"""Health check."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request
from pydantic import BaseModel

from config.settings import settings

router = APIRouter(prefix="/api/v1", tags=["health"])

_STARTED = time.monotonic()


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_sec: int
    nansen_configured: bool
    moralis_configured: bool
    tokens_in_batch: int


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report whether both upstream keys are present."""
    from src.api.app import VERSION

    nansen_ok = bool(settings.nansen_api_key)
    moralis_ok = bool(settings.moralis_api_key)

    return HealthResponse(
        status="ok" if nansen_ok and moralis_ok else "degraded",
        version=VERSION,
        uptime_sec=int(time.monotonic() - _STARTED),
        nansen_configured=nansen_ok,
        moralis_configured=moralis_ok,
        tokens_in_batch=len(request.app.state.analyzer.results),
    )
