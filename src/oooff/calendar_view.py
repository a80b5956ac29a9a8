"""Plain-text views: month grids, range breakdowns and the balance card."""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Iterable

from oooff.ledger import Holiday, RangeInfo, Trip

W = 64


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


def _date_range(start: datetime.date, end: datetime.date) -> str:
    if start == end:
        return start.strftime("%a, %b %d")
    return f"{start.strftime('%a, %b %d')} -> {end.strftime('%a, %b %d')}"


def format_month(
    year: int,
    month: int,
    holidays: Iterable[Holiday],
    time_off: Iterable[datetime.date],
    trips: Iterable[Trip] = (),
) -> str:
    """Return a Monday-first grid for one month.

    Days are suffixed H (holiday), T (trip) or O (other time off); a holiday
    wins over a trip, and a trip over plain time off.
    """
    holiday_names = {d: n for d, n in holidays}
    off_set = set(time_off)
    trip_days: set[datetime.date] = set()
    month_trips: list[Trip] = []
    first = datetime.date(year, month, 1)
    last = first.replace(day=calendar.monthrange(year, month)[1])
    for trip in trips:
        if trip.start_date <= last and trip.end_date >= first:
            month_trips.append(trip)
            trip_days.update(trip.span)

    lines: list[str] = [
        f"  {calendar.month_name[month]} {year}",
        "  Mo  Tu  We  Th  Fr  Sa  Su",
    ]

    cal = calendar.Calendar(firstweekday=0)
    row = ""
    for day_num, weekday in cal.itermonthdays2(year, month):
        if day_num == 0:
            row += "    "
        else:
            d = datetime.date(year, month, day_num)
            if d in holiday_names:
                cell = f" {day_num:>2}H"
            elif d in trip_days:
                cell = f" {day_num:>2}T"
            elif d in off_set:
                cell = f" {day_num:>2}O"
            else:
                cell = f"  {day_num:>2}"
            row += cell

        if weekday == 6:
            lines.append(row)
            row = ""

    if row.strip():
        lines.append(row)

    lines.append("")
    lines.append("  Legend: H=Holiday  T=Trip  O=Time off")

    month_holidays = sorted(d for d in holiday_names if d.year == year and d.month == month)
    if month_holidays:
        lines.append("")
        for d in month_holidays:
            lines.append(f"    {d.strftime('%a, %b %d'):>12}  {holiday_names[d]}")
    if month_trips:
        lines.append("")
        for trip in sorted(month_trips, key=lambda t: t.start_date):
            lines.append(f"    {_date_range(trip.start_date, trip.end_date)}  {trip.destination}")

    return "\n".join(lines)


def format_range_info(info: RangeInfo) -> str:
    """Human-readable breakdown of a selected range."""
    lines = [
        f"  {_date_range(info.start_date, info.end_date)}  ({_plural(info.total_days, 'day')})",
        f"    Public holidays: {info.holiday_days}",
        f"    Weekend days:    {info.weekend_days}",
        f"    PTO days needed: {info.pto_days_needed}",
    ]
    return "\n".join(lines)


def format_balance(
    email: str,
    country: str,
    total_pto_days: int,
    days_used: int,
    remaining: int,
) -> str:
    lines = [
        "=" * W,
        f"  {email}",
        "=" * W,
        f"  Country:           {country or '(none)'}",
        f"  PTO allotment:     {_plural(total_pto_days, 'day')}",
        f"  PTO used:          {_plural(days_used, 'day')}",
        f"  Remaining:         {remaining}",
    ]
    if remaining < 0:
        lines.append(f"  Over-allocated by {_plural(-remaining, 'day')}.")
    return "\n".join(lines)


def format_trips(trips: Iterable[Trip]) -> str:
    lines: list[str] = []
    for trip in trips:
        n = (trip.end_date - trip.start_date).days + 1
        lines.append(
            f"  {trip.id}  {trip.destination}  "
            f"{_date_range(trip.start_date, trip.end_date)}  ({_plural(n, 'day')})"
        )
        if trip.notes:
            lines.append(f"      {trip.notes}")
    if not lines:
        return "  No trips planned."
    return "\n".join(lines)
