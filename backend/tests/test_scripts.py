"""
backend/tests/test_scripts.py

Purpose:
    Argument parsing and text rendering of the command-line scripts.
"""

from __future__ import annotations

from market_chart import render_chart
from matka.services.weekly_chart_service import aggregate_weekly
from place_bets import parse_bet


def test_parse_bet_single_and_composite():
    assert parse_bet("777=10") == ("777", None, "10")
    assert parse_bet("5:123=50") == ("5", "123", "50")


def test_render_chart_empty_state():
    assert "No results found for this market." in render_chart([])


def test_render_chart_shows_week_and_digits():
    weeks = aggregate_weekly([
        {"date": "01-04-2024", "openNumber": "123", "closeNumber": "456", "jodiResult": "67"},
    ])
    text = render_chart(weeks)
    assert "01-04-2024 to 07-04-2024" in text
    assert "67" in text
    lines = text.splitlines()
    assert lines[0].startswith("Date Range")
    assert "No results" not in text
