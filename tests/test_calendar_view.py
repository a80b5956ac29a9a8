from __future__ import annotations

import datetime

from oooff.calendar_view import format_balance, format_month, format_range_info, format_trips
from oooff.ledger import Trip, range_info


def _d(value: str) -> datetime.date:
    return datetime.date.fromisoformat(value)


class TestFormatMonth:
    def test_header_and_weekday_row(self) -> None:
        output = format_month(2026, 3, [], [])
        lines = output.splitlines()
        assert lines[0] == "  March 2026"
        assert lines[1] == "  Mo  Tu  We  Th  Fr  Sa  Su"

    def test_first_row_is_aligned(self) -> None:
        # March 1, 2026 is a Sunday: six empty cells before it.
        first_week = format_month(2026, 3, [], []).splitlines()[2]
        assert first_week == " " * 24 + "   1"

    def test_markers(self) -> None:
        holidays = [(_d("2026-12-25"), "Christmas Day")]
        trip = Trip("t", "Oslo", _d("2026-12-21"), _d("2026-12-22"))
        time_off = {_d("2026-12-21"), _d("2026-12-22"), _d("2026-12-23"), _d("2026-12-25")}
        output = format_month(2026, 12, holidays, time_off, [trip])
        assert " 21T" in output
        assert " 23O" in output
        assert " 25H" in output
        assert "Christmas Day" in output
        assert "Oslo" in output

    def test_trip_from_previous_month(self) -> None:
        trip = Trip("t", "Oslo", _d("2026-02-27"), _d("2026-03-02"))
        output = format_month(2026, 3, [], [], [trip])
        assert "  2T" in output
        assert "Oslo" in output


class TestSummaries:
    def test_range_info(self) -> None:
        output = format_range_info(range_info(_d("2026-01-03"), _d("2026-01-04"), []))
        assert "(2 days)" in output
        assert "Weekend days:    2" in output
        assert "PTO days needed: 0" in output

    def test_balance_over_allocated(self) -> None:
        output = format_balance("me@example.com", "Canada", 1, 3, -2)
        assert "Remaining:         -2" in output
        assert "Over-allocated by 2 days." in output

    def test_trips(self) -> None:
        trip = Trip("abc", "Rome", _d("2026-05-04"), _d("2026-05-04"), "gelato")
        output = format_trips([trip])
        assert "abc  Rome  Mon, May 04  (1 day)" in output
        assert "gelato" in output
