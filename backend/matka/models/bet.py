"""Bet slip models: pending wagers and placed-bet ledger entries."""

import logging
import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("matka.models.bet")


class Session(str, Enum):
    """Half of the day's draw a wager targets (sent to the backend as betType)."""
    open = "Open"
    close = "Close"

    @classmethod
    def parse(cls, value: "str | Session") -> "Session":
        if isinstance(value, Session):
            return value
        wanted = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(f"Unknown session: {value!r}")


class BetStatus(str, Enum):
    pending = "Pending"
    win = "Win"
    lose = "Lose"

    @classmethod
    def from_server(cls, raw: Any) -> "BetStatus":
        """Map a backend status string ("pending", "win", ...) to an enum member.

        Missing status defaults to Pending.
        """
        if raw is None or raw == "":
            return cls.pending
        key = str(raw).strip().lower()
        if key in ("win", "won"):
            return cls.win
        if key in ("lose", "lost", "loss"):
            return cls.lose
        if key != "pending":
            logger.warning("Unknown bet status %r, treating as pending", raw)
        return cls.pending


def new_wager_id() -> str:
    return uuid.uuid4().hex


class Wager(BaseModel):
    """One pending entry in the local slip. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_wager_id)
    game_name: str
    primary_number: str
    secondary_number: Optional[str] = None   # Second half of a composite number
    points: int = Field(gt=0)
    session: Session
    display_number: str
    placed: bool = False


class PlacedBet(BaseModel):
    """Ledger entry. Only the backend changes `status`."""
    model_config = ConfigDict(frozen=True)

    id: str                                  # Local wager id, or server id for fetched bets
    server_id: Optional[str] = None          # Backend `_id` when known
    game_name: str
    market_name: Optional[str] = None
    primary_number: Optional[str] = None
    secondary_number: Optional[str] = None
    points: int
    session: Session
    display_number: str
    placed: bool = True
    status: BetStatus = BetStatus.pending

    @classmethod
    def from_wager(
        cls,
        wager: Wager,
        market_name: Optional[str],
        response: Optional[dict[str, Any]],
    ) -> "PlacedBet":
        response = response or {}
        server_id = response.get("_id")
        return cls(
            id=wager.id,
            server_id=str(server_id) if server_id is not None else None,
            game_name=wager.game_name,
            market_name=market_name,
            primary_number=wager.primary_number,
            secondary_number=wager.secondary_number,
            points=wager.points,
            session=wager.session,
            display_number=wager.display_number,
            status=BetStatus.from_server(response.get("status")),
        )

    @classmethod
    def from_server(cls, doc: dict[str, Any]) -> "PlacedBet":
        """Build from a `/bets/user/` entry.

        Raises ValueError/TypeError (incl. pydantic's) on unusable documents.
        """
        server_id = doc.get("_id")
        if server_id is None:
            raise ValueError("bet without _id")
        return cls(
            id=str(server_id),
            server_id=str(server_id),
            game_name=str(doc.get("gameName") or ""),
            market_name=doc.get("marketName"),
            points=int(doc.get("amount")),
            session=Session.parse(doc.get("betType") or Session.open),
            display_number=str(doc.get("number") or ""),
            status=BetStatus.from_server(doc.get("status")),
        )
