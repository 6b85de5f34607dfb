"""
backend/matka/services/bet_slip_service.py

Purpose:
    Bet slip engine for one game screen of one market. Validates entered
    numbers, keeps the local queue of pending wagers, and submits the whole
    slip as concurrent requests with an all-or-nothing commit into the ledger.

Dependencies:
    - matka.providers.matka_api
    - matka.models.bet
    - matka.models.game
"""

import asyncio
import logging
import re
from typing import Optional

from matka.errors import AuthError, MatkaError, NetworkError, ValidationError
from matka.models.bet import PlacedBet, Session, Wager
from matka.models.game import GameType
from matka.providers.matka_api import MatkaApi

logger = logging.getLogger("matka.bet_slip_service")

MSG_NON_POSITIVE_POINTS = "Points must be greater than 0!"
MSG_EMPTY_SLIP = "No bets to place!"
MSG_INSUFFICIENT_BALANCE = "Insufficient coins!"
MSG_LOGIN_TO_PLACE = "You need to log in to place bets."
MSG_LOGIN_TO_VIEW = "You need to log in to see your balance and bets."
MSG_SUBMIT_FAILED = "Failed submitting!"
MSG_FETCH_FAILED = "Failed to fetch data!"
MSG_SUBMITTED = "Submitted successfully!"
MSG_SUBMIT_IN_FLIGHT = "Bets are already being submitted."


_POINTS_PATTERN = re.compile(r"-?[0-9]+")


def _parse_points(raw: "str | int") -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not _POINTS_PATTERN.fullmatch(text):
        return None
    return int(text)


class BetSlipEngine:
    """Owns balance, pending queue and ledger for a (market, game) pair.

    Public operations never raise MatkaError: failures land in `self.error`
    and the call returns a falsy value.
    """

    def __init__(self, api: MatkaApi, game: GameType, market_name: str):
        self._api = api
        self.game = game
        self.market_name = market_name

        self.pending: list[Wager] = []
        self.ledger: list[PlacedBet] = []
        self.balance: int = 0
        self.session: Session = Session.open
        self.error: Optional[MatkaError] = None
        self.notice: Optional[str] = None
        self.submitting = False
        self._commits = 0          # Successful submissions so far

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @property
    def total_points(self) -> int:
        return sum(w.points for w in self.pending)

    def select_session(self, session: "str | Session") -> Session:
        self.session = Session.parse(session)
        return self.session

    # ---------- Page load ----------

    async def refresh(self) -> bool:
        """Fetch wallet balance and this screen's pending bets in parallel."""
        if not self._api.credentials.get_token():
            self.error = AuthError(message=MSG_LOGIN_TO_VIEW)
            return False

        commits_before = self._commits
        try:
            balance, bets = await asyncio.gather(
                self._api.get_wallet_balance(),
                self._api.get_user_bets(),
            )
        except AuthError as e:
            logger.warning("Refresh rejected for market=%s: %s", self.market_name, e)
            self.error = AuthError(e.code, MSG_LOGIN_TO_VIEW)
            return False
        except MatkaError as e:
            logger.error("Error fetching data for market=%s: %s", self.market_name, e)
            self.error = type(e)(e.code, MSG_FETCH_FAILED)
            return False

        ledger: list[PlacedBet] = []
        for doc in bets:
            if (
                doc.get("gameName") != self.game.name
                or doc.get("marketName") != self.market_name
                or doc.get("status") != "pending"
            ):
                continue
            try:
                ledger.append(PlacedBet.from_server(doc))
            except (TypeError, ValueError) as e:
                logger.warning("Dropping malformed bet %r: %s", doc.get("_id"), e)

        if self.submitting or self._commits != commits_before:
            # Server balance may already include an in-flight or just committed slip.
            logger.info(
                "Refresh for %s/%s discarded: submission overlapped",
                self.market_name, self.game.name,
            )
            return False

        self.balance = balance
        self.ledger = ledger
        self.error = None
        logger.info(
            "Loaded %s/%s: balance=%d pending_bets=%d",
            self.market_name, self.game.name, balance, len(ledger),
        )
        return True

    # ---------- Local slip ----------

    def _validate(
        self, primary: str, secondary: Optional[str], points: "str | int"
    ) -> int:
        values = [primary] + ([secondary] if self.game.is_composite else [])
        if any(not v for v in values) or points is None or str(points).strip() == "":
            raise ValidationError("missing-field", self.game.missing_message)

        for field, value in zip(self.game.fields, values):
            if not field.matches(value):
                raise ValidationError("bad-format", self.game.format_message)

        parsed = _parse_points(points)
        if parsed is None or parsed <= 0:
            raise ValidationError("non-positive-points", MSG_NON_POSITIVE_POINTS)
        return parsed

    def add_wager(
        self,
        primary_input: str,
        points: "str | int",
        session: "str | Session | None" = None,
        secondary_input: Optional[str] = None,
    ) -> Optional[Wager]:
        """Validate and queue one wager. Returns it, or None with `error` set."""
        primary = str(primary_input or "").strip()
        secondary = str(secondary_input or "").strip() or None

        try:
            stake = self._validate(primary, secondary, points)
            chosen = self.session if session is None else Session.parse(session)
        except ValidationError as e:
            self.error = e
            return None
        except ValueError as e:
            self.error = ValidationError("bad-format", str(e))
            return None

        wager = Wager(
            game_name=self.game.name,
            primary_number=primary,
            secondary_number=secondary if self.game.is_composite else None,
            points=stake,
            session=chosen,
            display_number=self.game.display_number(primary, secondary, chosen),
        )
        self.pending.append(wager)
        self.error = None
        return wager

    def delete_wager(self, wager_id: str) -> bool:
        """Drop an unplaced wager. Unknown ids are ignored."""
        before = len(self.pending)
        self.pending = [
            w for w in self.pending if not (w.id == wager_id and not w.placed)
        ]
        return len(self.pending) != before

    # ---------- Submission ----------

    def _check_submittable(self) -> int:
        total = self.total_points
        if total <= 0:
            raise ValidationError("empty-slip", MSG_EMPTY_SLIP)
        if total > self.balance:
            raise ValidationError("insufficient-balance", MSG_INSUFFICIENT_BALANCE)
        if not self._api.credentials.get_token():
            raise AuthError(message=MSG_LOGIN_TO_PLACE)
        return total

    async def _place(self, wager: Wager) -> dict:
        return await self._api.place_bet(
            market_name=self.market_name,
            game_name=self.game.name,
            number=wager.display_number,
            amount=wager.points,
            winning_ratio=self.game.winning_ratio,
            bet_type=wager.session.value,
        )

    async def submit_slip(self) -> bool:
        """Place every pending wager concurrently; commit only if all succeed."""
        if self.submitting:
            self.error = ValidationError("submit-in-flight", MSG_SUBMIT_IN_FLIGHT)
            return False
        self.notice = None
        try:
            total = self._check_submittable()
        except MatkaError as e:
            self.error = e
            return False

        batch = list(self.pending)
        self.submitting = True
        try:
            outcomes = await asyncio.gather(
                *(self._place(w) for w in batch), return_exceptions=True
            )
        finally:
            self.submitting = False

        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            for exc in failures:
                if not isinstance(exc, Exception):
                    raise exc
                logger.error(
                    "Error placing bets on %s/%s: %s",
                    self.market_name, self.game.name, exc,
                )
            logger.warning(
                "Slip rejected: %d/%d submissions failed, nothing committed",
                len(failures), len(batch),
            )
            first = failures[0]
            if isinstance(first, AuthError):
                self.error = AuthError(first.code, MSG_LOGIN_TO_PLACE)
            else:
                code = first.code if isinstance(first, MatkaError) else "request-failed"
                self.error = NetworkError(code, MSG_SUBMIT_FAILED)
            return False

        confirmed = [
            PlacedBet.from_wager(w, self.market_name, resp)
            for w, resp in zip(batch, outcomes)
        ]
        self.ledger = self.ledger + confirmed
        self.balance -= total
        self._commits += 1
        submitted_ids = {w.id for w in batch}
        self.pending = [w for w in self.pending if w.id not in submitted_ids]
        self.error = None
        self.notice = MSG_SUBMITTED

        logger.info(
            "Slip placed: market=%s game=%s wagers=%d points=%d balance=%d",
            self.market_name, self.game.name, len(batch), total, self.balance,
        )
        return True

