"""
backend/tests/test_weekly_chart_service.py

Purpose:
    Weekly aggregation (Monday-start buckets, descending order, per-day
    decomposition) and the market-id -> results loading sequence.
"""

from __future__ import annotations

import asyncio
from datetime import date
import sys

import pytest

sys.path.insert(0, "backend")

from matka.auth import StaticCredentialProvider
from matka.errors import AuthError, DataError, NetworkError
from matka.models.chart import WEEKDAYS
from matka.services.weekly_chart_service import (
    WeeklyAggregator,
    aggregate_weekly,
    parse_result_date,
    split_digits,
    week_bounds,
)


class _FakeApi:
    def __init__(self, token: str | None = "tok", market_ids=None, results=None) -> None:
        self.credentials = StaticCredentialProvider(token)
        self.market_ids = market_ids or {}
        self.results = results or {}
        self.calls: list[tuple[str, str]] = []

    async def get_market_id(self, market_name: str) -> str:
        self.calls.append(("market", market_name))
        value = self.market_ids.get(market_name)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise NetworkError("http-error", status_code=404)
        return value

    async def get_results(self, market_id: str):
        self.calls.append(("results", market_id))
        value = self.results.get(market_id, [])
        if isinstance(value, Exception):
            raise value
        return value


# ---------- pure helpers ----------

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("01-04-2024", date(2024, 4, 1)),
        ("2024-04-01", date(2024, 4, 1)),
        ("01/04/2024", date(2024, 4, 1)),
        ("2024-04-01T18:30:00.000Z", date(2024, 4, 1)),
        ("2024-04-01T10:00:00+05:30", date(2024, 4, 1)),
    ],
)
def test_parse_result_date_accepts_known_formats(raw, expected):
    assert parse_result_date(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "32-01-2024", "yesterday", 20240401])
def test_parse_result_date_rejects_garbage(raw):
    with pytest.raises(DataError):
        parse_result_date(raw)


def test_week_bounds_start_on_monday():
    # 2024-04-01 is a Monday, 2024-04-07 a Sunday
    assert week_bounds(date(2024, 4, 1)) == (date(2024, 4, 1), date(2024, 4, 7))
    assert week_bounds(date(2024, 4, 3)) == (date(2024, 4, 1), date(2024, 4, 7))
    assert week_bounds(date(2024, 4, 7)) == (date(2024, 4, 1), date(2024, 4, 7))
    assert week_bounds(date(2024, 4, 8)) == (date(2024, 4, 8), date(2024, 4, 14))


def test_split_digits_pads_missing_data():
    assert split_digits("123") == ("1", "2", "3")
    assert split_digits("12") == ("1", "2", "-")
    assert split_digits(None) == ("-", "-", "-")
    assert split_digits("") == ("-", "-", "-")


# ---------- aggregate_weekly ----------

def test_entries_in_same_week_share_a_bucket():
    weeks = aggregate_weekly([
        {"date": "01-04-2024", "openNumber": "123", "closeNumber": "456", "jodiResult": "7"},
        {"date": "03-04-2024", "openNumber": "000", "closeNumber": "999", "jodiResult": "8"},
    ])

    assert len(weeks) == 1
    week = weeks[0]
    assert week.week_key == "01-04-2024 to 07-04-2024"
    assert week.week_start == date(2024, 4, 1)
    assert set(week.days) == {"Monday", "Wednesday"}
    assert week.days["Monday"].open_digits == ("1", "2", "3")
    assert week.days["Monday"].close_digits == ("4", "5", "6")
    assert week.days["Monday"].jodi == "7"
    assert week.days["Wednesday"].jodi == "8"


def test_weeks_sorted_most_recent_first():
    weeks = aggregate_weekly([
        {"date": "01-04-2024", "openNumber": "123", "closeNumber": "456", "jodiResult": "70"},
        {"date": "15-04-2024", "openNumber": "111", "closeNumber": "222", "jodiResult": "34"},
        {"date": "09-04-2024", "openNumber": "333", "closeNumber": "444", "jodiResult": "01"},
    ])
    assert [w.week_key for w in weeks] == [
        "15-04-2024 to 21-04-2024",
        "08-04-2024 to 14-04-2024",
        "01-04-2024 to 07-04-2024",
    ]


def test_sunday_belongs_to_preceding_monday():
    weeks = aggregate_weekly([{"date": "07-04-2024", "openNumber": "1", "closeNumber": "2", "jodiResult": "3"}])
    assert weeks[0].week_key == "01-04-2024 to 07-04-2024"
    assert list(weeks[0].days) == ["Sunday"]


def test_unparseable_date_is_dropped_without_affecting_others():
    good = {"date": "02-04-2024", "openNumber": "123", "closeNumber": "456", "jodiResult": "12"}
    with_bad = aggregate_weekly([good, {"date": "not-a-date", "openNumber": "999"}, "junk"])
    alone = aggregate_weekly([good])
    assert [w.model_dump() for w in with_bad] == [w.model_dump() for w in alone]


def test_missing_draws_use_placeholders():
    weeks = aggregate_weekly([{"date": "02-04-2024", "openNumber": "123"}])
    tuesday = weeks[0].days["Tuesday"]
    assert tuesday.close_digits == ("-", "-", "-")
    assert tuesday.jodi == "-"


def test_cells_cover_all_weekdays_with_placeholders():
    weeks = aggregate_weekly([{"date": "03-04-2024", "openNumber": "123", "closeNumber": "456", "jodiResult": "39"}])
    cells = list(weeks[0].cells())
    assert [day for day, _ in cells] == list(WEEKDAYS)
    by_day = dict(cells)
    assert by_day["Wednesday"].jodi == "39"
    assert by_day["Friday"].open_digits == ("-", "-", "-")
    assert len(weeks[0].days) <= 7


# ---------- WeeklyAggregator ----------

@pytest.mark.asyncio
async def test_load_resolves_market_then_fetches_results():
    api = _FakeApi(
        market_ids={"Kalyan": "m1"},
        results={"m1": [{"date": "01-04-2024", "openNumber": "123", "closeNumber": "456", "jodiResult": "7"}]},
    )
    aggregator = WeeklyAggregator(api)

    weeks = await aggregator.load("Kalyan")

    assert api.calls == [("market", "Kalyan"), ("results", "m1")]
    assert aggregator.market_id == "m1"
    assert len(weeks) == 1
    assert aggregator.is_empty is False


@pytest.mark.asyncio
async def test_market_lookup_failure_is_silent():
    api = _FakeApi(market_ids={})
    aggregator = WeeklyAggregator(api)

    assert await aggregator.resolve_market_id("Nowhere") is None
    assert await aggregator.load("Nowhere") == []
    assert aggregator.market_id is None
    assert ("results", None) not in api.calls
    assert all(kind == "market" for kind, _ in api.calls)


@pytest.mark.asyncio
async def test_load_results_without_token_asks_for_login():
    api = _FakeApi(token=None, market_ids={"Kalyan": "m1"})
    aggregator = WeeklyAggregator(api)
    with pytest.raises(AuthError):
        await aggregator.load_results("m1")
    assert api.calls == []


@pytest.mark.asyncio
async def test_results_fetch_failure_yields_empty_chart():
    api = _FakeApi(market_ids={"Kalyan": "m1"}, results={"m1": NetworkError(message="down")})
    aggregator = WeeklyAggregator(api)
    assert await aggregator.load("Kalyan") == []
    assert aggregator.is_empty is True


@pytest.mark.asyncio
async def test_superseded_load_does_not_overwrite_newer_results():
    release_first = asyncio.Event()

    class _SlowApi(_FakeApi):
        async def get_results(self, market_id: str):
            if market_id == "old":
                await release_first.wait()
            return await super().get_results(market_id)

    api = _SlowApi(
        market_ids={"Old": "old", "New": "new"},
        results={
            "old": [{"date": "01-01-2024", "openNumber": "111", "closeNumber": "111", "jodiResult": "33"}],
            "new": [{"date": "01-04-2024", "openNumber": "222", "closeNumber": "222", "jodiResult": "66"}],
        },
    )
    aggregator = WeeklyAggregator(api)

    first = asyncio.create_task(aggregator.load("Old"))
    await asyncio.sleep(0)
    await aggregator.load("New")
    release_first.set()
    await first

    assert aggregator.market_id == "new"
    assert [w.week_key for w in aggregator.weeks] == ["01-04-2024 to 07-04-2024"]
