"""Analysis endpoints — run a batch, read its views, export wallets."""

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, Field

from config.settings import settings
from src.api.app import limiter
from src.api.dependencies import get_analytics_provider, get_analyzer
from src.models.analysis import CrossTokenReport, TokenHolder
from src.models.wallet import WalletPnlSummary
from src.parsers.export import ExportError, export_rows, render_export
from src.parsers.provider import ProviderError, TradingAnalyticsProvider
from src.parsers.token_analyzer import TokenAnalyzer
from src.parsers.token_input import InvalidAddressError, is_valid_address

router = APIRouter(prefix="/api/v1", tags=["analysis"])


class AnalyzeRequest(BaseModel):
    addresses: list[str] = Field(min_length=1)


class AnalyzeResponse(BaseModel):
    report: CrossTokenReport
    notifications: list[dict[str, Any]]


class ExportRequest(BaseModel):
    wallets: list[str] = Field(min_length=1)
    format: Literal["json", "csv"] = "json"
    filename: str = Field("wallets", pattern=r"^[\w\-]{1,64}$")


class BatchPnlRequest(BaseModel):
    addresses: list[str] = Field(min_length=1, max_length=100)


@router.post("/analysis", response_model=AnalyzeResponse)
@limiter.limit(settings.analysis_rate_limit)
async def run_analysis(
    request: Request,
    body: AnalyzeRequest,
    analyzer: TokenAnalyzer = Depends(get_analyzer),
) -> AnalyzeResponse:
    """Analyze up to five tokens; replaces the current batch."""
    try:
        batch = await analyzer.analyze(body.addresses)
    except InvalidAddressError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    return AnalyzeResponse(
        report=analyzer.report(),
        notifications=[n.to_dict() for n in batch.notifications],
    )


@router.get("/analysis", response_model=CrossTokenReport)
async def current_analysis(analyzer: TokenAnalyzer = Depends(get_analyzer)) -> CrossTokenReport:
    """Views of the latest batch (empty before the first run)."""
    return analyzer.report()


@router.post("/analysis/export")
async def export_wallets(
    body: ExportRequest,
    analyzer: TokenAnalyzer = Depends(get_analyzer),
) -> Response:
    """Download the selected wallets of the global ranking as JSON or CSV."""
    rows = export_rows(analyzer.report().global_ranking, body.wallets)
    try:
        content, media_type = render_export(rows, body.format)
    except ExportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{body.filename}.{body.format}"'},
    )


@router.get("/tokens/{token_address}/holders", response_model=list[TokenHolder])
async def token_holders(
    token_address: str,
    limit: int = Query(100, ge=1, le=500),
    provider: TradingAnalyticsProvider = Depends(get_analytics_provider),
) -> list[TokenHolder]:
    if not is_valid_address(token_address):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid token address")
    try:
        return await provider.get_token_holders(token_address, limit=limit)
    except ProviderError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e


@router.post("/wallets/pnl-batch", response_model=list[WalletPnlSummary])
async def batch_wallet_pnl(
    body: BatchPnlRequest,
    analyzer: TokenAnalyzer = Depends(get_analyzer),
) -> list[WalletPnlSummary]:
    """PnL summaries for many wallets; failed lookups are omitted."""
    invalid = [a for a in body.addresses if not is_valid_address(a)]
    if invalid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid wallet address: {invalid[0]}",
        )
    return await analyzer.get_batch_wallet_pnl(body.addresses)
