"""
backend/scripts/market_chart.py

Purpose:
    Print the weekly panel chart (open / jodi / close per day) for a market.

Usage:
    cd backend
    MATKA_API_TOKEN=... python scripts/market_chart.py "Kalyan"
    python scripts/market_chart.py "Kalyan" --weeks 4
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from matka.auth import SettingsCredentialProvider
from matka.config import settings
from matka.errors import AuthError
from matka.logging_config import setup_logging
from matka.models.chart import WEEKDAYS, WeeklyBucket
from matka.providers.matka_api import MatkaApi
from matka.services.weekly_chart_service import WeeklyAggregator

_CELL = 9


def render_week(week: WeeklyBucket) -> list[str]:
    """Three text lines per week: open digit | jodi | close digit per day."""
    lines = []
    for row in range(3):
        label = week.week_key if row == 1 else ""
        cells = []
        for _day, result in week.cells():
            middle = result.jodi if row == 1 else ""
            cell = f"{result.open_digits[row]} {middle:^3} {result.close_digits[row]}"
            cells.append(cell.center(_CELL))
        lines.append(f"{label:<24}|" + "|".join(cells))
    return lines


def render_chart(weeks: list[WeeklyBucket]) -> str:
    header = f"{'Date Range':<24}|" + "|".join(d[:3].center(_CELL) for d in WEEKDAYS)
    out = [header, "-" * len(header)]
    if not weeks:
        out.append("No results found for this market.")
    for week in weeks:
        out.extend(render_week(week))
        out.append("-" * len(header))
    return "\n".join(out)


async def run(market_name: str, limit: int | None) -> int:
    api = MatkaApi(SettingsCredentialProvider())
    try:
        aggregator = WeeklyAggregator(api)
        try:
            weeks = await aggregator.load(market_name)
        except AuthError:
            print("Please log in: set MATKA_API_TOKEN.", file=sys.stderr)
            return 2
        print(render_chart(weeks[:limit] if limit else weeks))
        return 0
    finally:
        await api.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Show the weekly result chart of a market.")
    parser.add_argument("market", help="Market name, e.g. 'Kalyan'")
    parser.add_argument("--weeks", type=int, default=None, help="Only show the N most recent weeks")
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL)
    raise SystemExit(asyncio.run(run(args.market, args.weeks)))


if __name__ == "__main__":
    main()
