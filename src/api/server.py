"""API server: gateway relay plus dashboard endpoints on one uvicorn instance."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import settings


async def run_api_server() -> None:
    """Serve the app on the current event loop until uvicorn exits."""
    from src.api.app import create_app

    config = uvicorn.Config(
        app=create_app(),
        host=settings.gateway_host,
        port=settings.gateway_port,
        log_level="warning",
        access_log=False,  # the gateway logs each relay itself
        timeout_graceful_shutdown=settings.shutdown_timeout_sec,
        loop="none",
    )
    server = uvicorn.Server(config)

    base = f"http://{settings.gateway_host}:{settings.gateway_port}"
    logger.info(f"[GATEWAY] Listening on {base}")
    logger.info(f"[GATEWAY] {base}/api/nansen/* -> {settings.nansen_base_url}")
    logger.info(f"[GATEWAY] {base}/api/moralis/* -> {settings.moralis_base_url}")
    await server.serve()
    logger.info("[GATEWAY] Server stopped")
