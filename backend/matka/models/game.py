"""Game catalogue: number fields, formats and payout ratio per game type."""

import re
from dataclasses import dataclass
from typing import Optional

from matka.models.bet import Session


@dataclass(frozen=True)
class NumberField:
    name: str      # "ank" | "pana"
    label: str
    pattern: str   # full-match regex

    def matches(self, value: str) -> bool:
        return re.fullmatch(self.pattern, value) is not None


ANK = NumberField(name="ank", label="Ank", pattern=r"[0-9]")
PANA = NumberField(name="pana", label="Pana", pattern=r"[0-9]{3}")


@dataclass(frozen=True)
class GameType:
    """One game screen.

    `fields[0]` is the primary number; a second field makes the game composite.
    Composite display numbers flip with the session:
        Open  -> "{secondary}-{primary}"
        Close -> "{primary}-{secondary}"
    """
    name: str
    fields: tuple[NumberField, ...]
    winning_ratio: int
    missing_message: str
    format_message: str

    @property
    def is_composite(self) -> bool:
        return len(self.fields) > 1

    def display_number(
        self, primary: str, secondary: Optional[str], session: Session
    ) -> str:
        if not self.is_composite:
            return primary
        if session == Session.open:
            return f"{secondary}-{primary}"
        return f"{primary}-{secondary}"


HALF_SANGAM = GameType(
    name="Half Sangam",
    fields=(ANK, PANA),
    winning_ratio=18,
    missing_message="Ank, Pana, and Points are required!",
    format_message="Ank must be a single digit and Pana must be a three-digit number!",
)

TRIPLE_PANA = GameType(
    name="Triple Pana",
    fields=(PANA,),
    winning_ratio=9,
    missing_message="Both input and points are required!",
    format_message="Input must be a three-digit number!",
)

GAMES: dict[str, GameType] = {g.name: g for g in (HALF_SANGAM, TRIPLE_PANA)}


def get_game(name: str) -> GameType:
    """Look up a game by name (case-insensitive). Raises KeyError if unknown."""
    wanted = str(name or "").strip().lower()
    for game in GAMES.values():
        if game.name.lower() == wanted:
            return game
    raise KeyError(name)
