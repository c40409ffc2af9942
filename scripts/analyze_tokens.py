"""Analyze BEP-20 tokens from the command line.

Prints the global trader ranking, smart money (wallets profitable on several
tokens) and the top tokens. Requires the API gateway to be running.

Usage:
    python scripts/analyze_tokens.py 0xTOKEN1 0xTOKEN2
    python scripts/analyze_tokens.py -f tokens.txt --export csv --out top.csv
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402

from config.settings import settings  # noqa: E402
from src.models.analysis import CrossTokenReport  # noqa: E402
from src.parsers.export import export_rows, render_export  # noqa: E402
from src.parsers.nansen.client import NansenClient  # noqa: E402
from src.parsers.token_analyzer import TokenAnalyzer  # noqa: E402
from src.parsers.token_input import InvalidAddressError, parse_token_input  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402


def _short(address: str) -> str:
    return f"{address[:8]}...{address[-6:]}"


def print_report(report: CrossTokenReport, limit: int) -> None:
    print(f"\n=== Tokens ({len(report.tokens)}) ===")
    for token in report.tokens:
        print(f"  {token.symbol:<10} {token.name:<30} {token.address}  traders={len(token.wallets)}")

    print(f"\n=== All traders ({report.unique_wallets} unique) ===")
    for i, w in enumerate(report.global_ranking[:limit], start=1):
        print(
            f"  #{i:<3} {_short(w.address)}  PnL ${w.pnl_usd_total:>14,.0f}  "
            f"ROI {w.roi_percent:+8.2f}%  tokens={','.join(w.tokens)}"
        )

    print(f"\n=== Smart money ({len(report.common_wallets)}) ===")
    if not report.common_wallets:
        print("  No common wallets found. Analyze multiple tokens to see patterns.")
    for w in report.common_wallets[:limit]:
        print(
            f"  {_short(w.address)}  {len(w.tokens)} tokens [{', '.join(w.tokens)}]  "
            f"${w.total_pnl:,.0f}  {w.avg_roi:.1f}% avg ROI"
        )

    print("\n=== Top performing tokens ===")
    for i, t in enumerate(report.top_tokens, start=1):
        print(f"  #{i} {t.symbol:<10} ${t.total_pnl:,.0f}")


async def run(args: argparse.Namespace) -> int:
    text = "\n".join(args.tokens)
    if args.file:
        text += "\n" + Path(args.file).read_text()
    addresses = parse_token_input(text, max_tokens=settings.max_tokens)

    client = NansenClient(base_url=args.gateway + "/nansen" if args.gateway else None)
    analyzer = TokenAnalyzer(client)
    try:
        batch = await analyzer.analyze(addresses)
    except InvalidAddressError as e:
        logger.error(f"Nothing to analyze: {e}")
        return 2
    finally:
        await client.close()

    report = analyzer.report()
    print_report(report, args.limit)

    if args.export and report.global_ranking:
        selected = [w.address for w in report.global_ranking[: args.limit]]
        body, _ = render_export(export_rows(report.global_ranking, selected), args.export)
        out = Path(args.out or f"wallets.{args.export}")
        out.write_text(body)
        logger.info(f"Exported {len(selected)} wallets to {out}")

    return 0 if batch.results else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Cross-token trader analysis for BEP-20 tokens")
    parser.add_argument("tokens", nargs="*", help="Token contract addresses (max 5)")
    parser.add_argument("-f", "--file", help="File with one address per line")
    parser.add_argument("--limit", type=int, default=20, help="Rows per section")
    parser.add_argument("--export", choices=["json", "csv"], help="Export the listed wallets")
    parser.add_argument("--out", help="Export file path")
    parser.add_argument("--gateway", help=f"Gateway base URL (default {settings.gateway_url})")
    args = parser.parse_args()

    setup_logger(level="WARNING")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
