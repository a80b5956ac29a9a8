"""PTO accounting engine.

Pure functions over a *ledger* (the set of dates a user has marked as time
off) and a country's holiday list.  Weekends and public holidays are free;
every other ledger date costs one PTO day.

Nothing in here mutates its inputs or raises: callers own the ledger, hand
it in, and get an updated copy back.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from typing import NamedTuple

Holiday = tuple[datetime.date, str]
Ledger = frozenset[datetime.date]

EMPTY_LEDGER: Ledger = frozenset()

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class Trip(NamedTuple):
    """Time off with a label: a destination attached to a closed date range."""

    id: str
    destination: str
    start_date: datetime.date
    end_date: datetime.date
    notes: str | None = None

    @property
    def span(self) -> list[datetime.date]:
        return date_span(self.start_date, self.end_date)


class RangeInfo(NamedTuple):
    """Cost breakdown of a selected date range."""

    total_days: int
    holiday_days: int
    weekend_days: int
    pto_days_needed: int
    all_dates: list[datetime.date]

    @property
    def start_date(self) -> datetime.date:
        return self.all_dates[0]

    @property
    def end_date(self) -> datetime.date:
        return self.all_dates[-1]


# ---------------------------------------------------------------------------
# Date helpers
# ---------------------------------------------------------------------------


def is_weekend(d: datetime.date) -> bool:
    return d.weekday() >= 5


def holiday_dates(holidays: Iterable[Holiday]) -> set[datetime.date]:
    """Collapse ``(date, name)`` pairs into a set of dates."""
    return {d for d, _name in holidays}


def normalize_range(
    a: datetime.date, b: datetime.date
) -> tuple[datetime.date, datetime.date]:
    """Order a selection's two anchor dates so that start <= end."""
    if a > b:
        return b, a
    return a, b


def date_span(start: datetime.date, end: datetime.date) -> list[datetime.date]:
    """Every calendar day from *start* to *end*, both included.

    Returns an empty list when *end* precedes *start*.
    """
    n = (end - start).days + 1
    return [start + datetime.timedelta(days=i) for i in range(max(n, 0))]


# ---------------------------------------------------------------------------
# Accounting
# ---------------------------------------------------------------------------


def days_used(ledger: Iterable[datetime.date], holidays: Iterable[Holiday]) -> int:
    """Number of ledger dates that are neither weekend days nor holidays."""
    free = holiday_dates(holidays)
    return sum(1 for d in set(ledger) if not is_weekend(d) and d not in free)


def remaining(
    total_allotted: int,
    ledger: Iterable[datetime.date],
    holidays: Iterable[Holiday],
) -> int:
    """Remaining PTO balance.  Negative means the user is over-allocated."""
    return total_allotted - days_used(ledger, holidays)


def range_info(
    start: datetime.date,
    end: datetime.date,
    holidays: Iterable[Holiday],
) -> RangeInfo:
    """Break down the closed range ``[start, end]``.

    *start* must not be after *end*; use :func:`normalize_range` first.

    ``pto_days_needed`` is ``total - holidays - weekends``.  A holiday that
    lands on a weekend is subtracted twice, so the value can undershoot the
    real cost and even go negative.  It is returned as is.
    """
    free = holiday_dates(holidays)
    all_dates = date_span(start, end)
    total_days = len(all_dates)
    holiday_days = sum(1 for d in all_dates if d in free)
    weekend_days = sum(1 for d in all_dates if is_weekend(d))
    return RangeInfo(
        total_days=total_days,
        holiday_days=holiday_days,
        weekend_days=weekend_days,
        pto_days_needed=total_days - holiday_days - weekend_days,
        all_dates=all_dates,
    )


def can_commit(pto_days_needed: int, current_remaining: int) -> bool:
    return current_remaining - pto_days_needed >= 0


def commit_time_off(
    ledger: Iterable[datetime.date], all_dates: Iterable[datetime.date]
) -> Ledger:
    """Union *all_dates* into the ledger.  Does not check the balance."""
    return frozenset(ledger) | frozenset(all_dates)


def delete_trip(trip: Trip, ledger: Iterable[datetime.date]) -> Ledger:
    """Ledger after deleting *trip*.

    The trip's days stay marked as time off: its span is unioned back in,
    so dates already present are unaffected.
    """
    return commit_time_off(ledger, trip.span)


def clear_time_off(
    ledger: Iterable[datetime.date], dates: Iterable[datetime.date] = ()
) -> Ledger:
    """Remove time off.

    Clears the whole ledger no matter which *dates* are passed, matching
    what the "remove time off" action has always done.
    """
    return EMPTY_LEDGER
