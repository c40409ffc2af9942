"""Gateway — relays /api/<provider>/<path> upstream with the provider's API key.

Responses are passed through verbatim, including error statuses and bodies.
Anything that goes wrong inside the relay itself becomes a 500 JSON error.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger

from config.settings import settings
from src.api.dependencies import get_upstream_client

router = APIRouter(prefix="/api", tags=["gateway"])

RELAY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(frozen=True)
class Upstream:
    name: str
    base_url: str
    api_key: str
    key_header: str
    json_body: bool


def _nansen() -> Upstream:
    return Upstream(
        name="Nansen",
        base_url=settings.nansen_base_url,
        api_key=settings.nansen_api_key,
        key_header="apiKey",
        json_body=True,
    )


def _moralis() -> Upstream:
    return Upstream(
        name="Moralis",
        base_url=settings.moralis_base_url,
        api_key=settings.moralis_api_key,
        key_header="X-API-Key",
        json_body=False,
    )


def _proxy_error(details: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Proxy server error", "details": details},
    )


async def relay(
    upstream: Upstream,
    path: str,
    request: Request,
    client: httpx.AsyncClient,
) -> JSONResponse:
    """Forward one request upstream and mirror the JSON response."""
    if not upstream.api_key:
        logger.error(f"[GATEWAY] {upstream.name} API key not configured")
        return _proxy_error(f"{upstream.name} API key not configured")

    url = f"{upstream.base_url.rstrip('/')}/{path}"
    headers = {upstream.key_header: upstream.api_key, "accept": "application/json"}
    content: bytes | None = None
    if upstream.json_body and request.method != "GET":
        headers["Content-Type"] = "application/json"
        content = await request.body() or b"{}"

    logger.info(f"[GATEWAY] -> {upstream.name}: {request.method} {path}")
    try:
        resp = await client.request(
            request.method,
            url,
            params=list(request.query_params.multi_items()),
            headers=headers,
            content=content,
        )
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"[GATEWAY] {upstream.name} relay error on {path}: {e}")
        return _proxy_error(str(e))

    if resp.status_code >= 400:
        logger.warning(f"[GATEWAY] {upstream.name} API error {resp.status_code} on {path}")
    else:
        logger.debug(f"[GATEWAY] OK {upstream.name} {path}")
    return JSONResponse(status_code=resp.status_code, content=data)


@router.api_route("/nansen/{path:path}", methods=RELAY_METHODS)
async def proxy_nansen(
    path: str,
    request: Request,
    client: httpx.AsyncClient = Depends(get_upstream_client),
) -> JSONResponse:
    return await relay(_nansen(), path, request, client)


@router.api_route("/moralis/{path:path}", methods=RELAY_METHODS)
async def proxy_moralis(
    path: str,
    request: Request,
    client: httpx.AsyncClient = Depends(get_upstream_client),
) -> JSONResponse:
    return await relay(_moralis(), path, request, client)
