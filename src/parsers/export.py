"""JSON and CSV snapshots of selected wallets."""

import json
from collections.abc import Iterable, Sequence
from typing import Any

from src.models.analysis import AggregatedWallet

EXPORT_FIELDS = (
    "address",
    "pnl_usd_total",
    "pnl_usd_realised",
    "pnl_usd_unrealised",
    "roi_percent",
)


class ExportError(ValueError):
    pass


def export_rows(wallets: Sequence[AggregatedWallet], selected: Iterable[str]) -> list[dict[str, Any]]:
    """Rows for the selected addresses, in selection order. Unknown addresses are skipped."""
    by_address = {w.address: w for w in wallets}
    rows = []
    for address in dict.fromkeys(selected):
        wallet = by_address.get(address)
        if wallet is None:
            continue
        rows.append({name: getattr(wallet, name) for name in EXPORT_FIELDS})
    return rows


def to_json(rows: Sequence[dict[str, Any]]) -> str:
    return json.dumps(list(rows), indent=2)


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    if isinstance(value, str):
        # Only comma-bearing strings get quoted
        if "," in value:
            return '"' + value.replace('"', '""') + '"'
        return value
    return str(value)


def to_csv(rows: Sequence[dict[str, Any]]) -> str:
    """CSV with the first record's keys as header row."""
    if not rows:
        raise ExportError("No data to export")

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_csv_value(row.get(h)) for h in headers))
    return "\n".join(lines)


def render_export(rows: Sequence[dict[str, Any]], fmt: str) -> tuple[str, str]:
    """Return (body, media type) for ``fmt`` in {"json", "csv"}."""
    if fmt == "json":
        return to_json(rows), "application/json"
    if fmt == "csv":
        return to_csv(rows), "text/csv"
    raise ExportError(f"Unsupported export format: {fmt}")
