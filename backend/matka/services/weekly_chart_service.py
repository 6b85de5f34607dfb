"""
backend/matka/services/weekly_chart_service.py

Purpose:
    Weekly panel chart for one market: resolves the market id, fetches the
    flat list of daily results, and groups them into Monday–Sunday rows,
    most recent week first.

Dependencies:
    - matka.providers.matka_api
    - matka.models.chart
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

from matka.errors import AuthError, DataError, MatkaError
from matka.models.chart import (
    DRAW_WIDTH,
    PLACEHOLDER,
    WEEKDAYS,
    DayResult,
    WeeklyBucket,
)
from matka.providers.matka_api import MatkaApi

logger = logging.getLogger("matka.weekly_chart_service")

# Backend sends DD-MM-YYYY; other variants seen in the wild are accepted too.
_DATE_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%Y-%m-%d", "%Y/%m/%d")
_KEY_FORMAT = "%d-%m-%Y"


def parse_result_date(value: Any) -> date:
    """Parse a result date (DD-MM-YYYY, YYYY-MM-DD, or full ISO 8601).

    Raises DataError if the value is not a recognisable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise DataError("bad-date", f"Invalid date: {value!r}")

    text = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    raise DataError("bad-date", f"Invalid date: {value!r}")


def week_bounds(day: date) -> tuple[date, date]:
    """Return (Monday, Sunday) of the week containing `day`."""
    weekday_index = day.isoweekday() % 7            # 0 = Sunday .. 6 = Saturday
    monday = day - timedelta(days=(weekday_index - 1) % 7)
    return monday, monday + timedelta(days=6)


def week_key(monday: date, sunday: date) -> str:
    return f"{monday.strftime(_KEY_FORMAT)} to {sunday.strftime(_KEY_FORMAT)}"


def split_digits(value: Any) -> tuple[str, ...]:
    """Split a draw like "123" into three characters, padding with "-"."""
    chars = list(str(value)) if value not in (None, "") else []
    chars = chars[:DRAW_WIDTH]
    chars += [PLACEHOLDER] * (DRAW_WIDTH - len(chars))
    return tuple(chars)


def aggregate_weekly(entries: Iterable[Any]) -> list[WeeklyBucket]:
    """Group daily results into weekly buckets, most recent week first.

    Entries with an unparseable date (or that are not objects) are dropped.
    """
    buckets: dict[str, WeeklyBucket] = {}
    dropped = 0

    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object result entry: %r", entry)
            dropped += 1
            continue
        try:
            day = parse_result_date(entry.get("date"))
        except DataError as e:
            logger.warning("Skipping result entry: %s", e.message)
            dropped += 1
            continue

        monday, sunday = week_bounds(day)
        key = week_key(monday, sunday)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = WeeklyBucket(week_key=key, week_start=monday, week_end=sunday)
            buckets[key] = bucket

        jodi = entry.get("jodiResult")
        bucket.days[WEEKDAYS[day.weekday()]] = DayResult(
            open_digits=split_digits(entry.get("openNumber")),
            close_digits=split_digits(entry.get("closeNumber")),
            jodi=str(jodi) if jodi not in (None, "") else PLACEHOLDER,
        )

    if dropped:
        logger.info("Weekly chart: dropped %d malformed entries", dropped)
    return sorted(buckets.values(), key=lambda b: b.week_start, reverse=True)


class WeeklyAggregator:
    """Chart state for one market screen.

    Fetch failures leave `weeks` empty ("no results"); a missing credential
    raises AuthError so the caller can send the user to log in.
    """

    def __init__(self, api: MatkaApi):
        self._api = api
        self.market_name: Optional[str] = None
        self.market_id: Optional[str] = None
        self.weeks: list[WeeklyBucket] = []
        self._generation = 0

    @property
    def is_empty(self) -> bool:
        return not self.weeks

    async def _lookup_market_id(self, market_name: str) -> Optional[str]:
        try:
            return await self._api.get_market_id(market_name)
        except MatkaError as e:
            logger.error("Error fetching market id for %s: %s", market_name, e)
            return None

    async def _fetch_weeks(self, market_id: str) -> list[WeeklyBucket]:
        if not self._api.credentials.get_token():
            raise AuthError()

        try:
            entries = await self._api.get_results(market_id)
        except AuthError:
            raise
        except MatkaError as e:
            logger.error("Error fetching market results for %s: %s", market_id, e)
            return []

        weeks = aggregate_weekly(entries)
        logger.info(
            "Weekly chart for market_id=%s: %d entries in %d weeks",
            market_id, len(entries), len(weeks),
        )
        return weeks

    async def resolve_market_id(self, market_name: str) -> Optional[str]:
        """Look up the market id; on failure log and leave `market_id` unset."""
        market_id = await self._lookup_market_id(market_name)
        if market_id is not None:
            self.market_id = market_id
        return market_id

    async def load_results(self, market_id: str) -> list[WeeklyBucket]:
        self.weeks = await self._fetch_weeks(market_id)
        return self.weeks

    async def load(self, market_name: str) -> list[WeeklyBucket]:
        """Resolve the market, then load its results.

        A call superseded by a newer `load` leaves the newer state alone.
        """
        if not market_name:
            return self.weeks
        self._generation += 1
        generation = self._generation
        self.market_name = market_name
        self.market_id = None
        self.weeks = []

        market_id = await self._lookup_market_id(market_name)
        if market_id is None or generation != self._generation:
            return self.weeks
        self.market_id = market_id

        weeks = await self._fetch_weeks(market_id)
        if generation != self._generation:
            return self.weeks
        self.weeks = weeks
        return weeks
