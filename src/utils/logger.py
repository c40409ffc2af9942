import os
import sys

from loguru import logger

from config.settings import settings


def _redact_api_keys(record) -> None:
    """Mask upstream API keys if one ever ends up in a log message."""
    for secret in (settings.nansen_api_key, settings.moralis_api_key):
        if secret and secret in record["message"]:
            record["message"] = record["message"].replace(secret, "***")


def setup_logger(*, json_logs: bool = False, level: str = "INFO") -> None:
    """Configure loguru for the gateway and analysis services.

    Console level comes from LOG_LEVEL (falls back to ``level``). The file
    sink under ``settings.log_dir`` keeps DEBUG, which includes the per-item
    payload warnings from the provider clients.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()
    logger.configure(patcher=_redact_api_keys)

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <7}</level> | "
                "<cyan>{name}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    logger.add(
        f"{settings.log_dir}/bep20_intel_{{time:YYYY-MM-DD}}.log",
        rotation="00:00",
        retention="14 days",
        level="DEBUG",
        serialize=json_logs,
        enqueue=True,
    )
