"""
backend/scripts/place_bets.py

Purpose:
    Build a bet slip for one market/game and submit it in a single batch.

Usage:
    cd backend
    MATKA_API_TOKEN=... python scripts/place_bets.py "Kalyan" "Triple Pana" --bet 777=10 --bet 555=20
    python scripts/place_bets.py "Kalyan" "Half Sangam" --session Close --bet 5:123=50
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from matka.auth import SettingsCredentialProvider
from matka.config import settings
from matka.logging_config import setup_logging
from matka.models.game import GAMES, get_game
from matka.providers.matka_api import MatkaApi
from matka.services.bet_slip_service import BetSlipEngine


def parse_bet(spec: str) -> tuple[str, str | None, str]:
    """'NUM=POINTS' or 'NUM:NUM2=POINTS' -> (primary, secondary, points)."""
    number, _, points = spec.partition("=")
    primary, _, secondary = number.partition(":")
    return primary, secondary or None, points


async def run(market: str, game_name: str, session: str, bets: list[str]) -> int:
    api = MatkaApi(SettingsCredentialProvider())
    try:
        engine = BetSlipEngine(api, get_game(game_name), market)
        engine.select_session(session)
        if not await engine.refresh():
            print(engine.error_message, file=sys.stderr)
            return 2
        print(f"Coins: {engine.balance}")

        for spec in bets:
            primary, secondary, points = parse_bet(spec)
            if engine.add_wager(primary, points, secondary_input=secondary) is None:
                print(f"{spec}: {engine.error_message}", file=sys.stderr)
                return 1

        for wager in engine.pending:
            print(f"  {wager.display_number:<10} {wager.points:>6}  {wager.session.value}")

        if not await engine.submit_slip():
            print(engine.error_message, file=sys.stderr)
            return 1
        print(f"{engine.notice} Coins left: {engine.balance}")
        return 0
    finally:
        await api.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Submit a bet slip.")
    parser.add_argument("market", help="Market name")
    parser.add_argument("game", choices=sorted(GAMES), help="Game type")
    parser.add_argument("--session", choices=["Open", "Close"], default="Open")
    parser.add_argument(
        "--bet", action="append", required=True,
        help="NUM=POINTS, or ANK:PANA=POINTS for composite games (repeatable)",
    )
    args = parser.parse_args()

    setup_logging(settings.LOG_LEVEL)
    raise SystemExit(asyncio.run(run(args.market, args.game, args.session, args.bet)))


if __name__ == "__main__":
    main()
