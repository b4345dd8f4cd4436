#!/usr/bin/env python3
"""
Leaderboard Preview
Fetches the spreadsheet export once and prints the ranked table.

Usage:
    python preview.py [--url=<csv export url>] [--rows=5] [--no-proxy]

Example:
    python preview.py --url "https://docs.google.com/.../pub?output=csv" --rows 10
"""

import argparse
import asyncio
import logging
import sys

from tabulate import tabulate

from wagerboard.config import Config
from wagerboard.datasources import PublishedSheetSource
from wagerboard.exceptions import EmptySourceError, FetchFailure
from wagerboard.models import FetchState
from wagerboard.services import build_display_rows, iter_rows, normalize_rows, rank_records
from wagerboard.services.render_service import format_amount


async def fetch_table(config: Config, min_rows: int) -> list[list[str]]:
    """Run fetch → decode → normalize → rank once and return printable rows."""
    state = FetchState(refresh_interval_ms=config.refresh_interval_ms)
    source = PublishedSheetSource(
        sheet_url=config.sheet_url,
        proxy_url=config.proxy_url,
        state=state,
        timeout=config.request_timeout_seconds,
    )
    try:
        text = await source.fetch_text()
    finally:
        await source.close()

    snapshot = rank_records(normalize_rows(iter_rows(text)))
    table = []
    for row in build_display_rows(snapshot, min_rows):
        table.append([
            f"#{row.rank}",
            row.username or "-",
            format_amount(row.wagered) if row.wagered else "-",
            row.prize,
        ])
    return table


def main():
    parser = argparse.ArgumentParser(
        description="Print the wager leaderboard from a published spreadsheet"
    )
    parser.add_argument("--url", help="CSV export URL (defaults to SHEET_URL)")
    parser.add_argument("--rows", type=int, default=5, help="Minimum rows to show (default: 5)")
    parser.add_argument(
        "--no-proxy",
        action="store_true",
        help="Retry the direct URL instead of the proxy when the first fetch fails",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = Config.from_env()
    if args.url:
        config.sheet_url = args.url
    if args.no_proxy:
        config.sheet_proxy_prefix = ""

    print(f"Fetching leaderboard from {config.sheet_url}...")

    try:
        table = asyncio.run(fetch_table(config, args.rows))
    except FetchFailure as e:
        print(f"Error: {e} ({e.kind.value})")
        sys.exit(1)
    except EmptySourceError as e:
        print(str(e))
        sys.exit(0)

    print()
    print(tabulate(table, headers=["Rank", "Player", "Wagered", "Prize"], tablefmt="simple"))


if __name__ == "__main__":
    main()
