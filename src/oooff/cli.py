"""Typer CLI for oooff."""

from __future__ import annotations

import datetime
import json
import logging
import sys

import typer

from oooff.calendar_view import (
    format_balance,
    format_month,
    format_range_info,
    format_trips,
)
from oooff.holidays import DEFAULT_YEAR, PRESETS, get_preset, resolve_country
from oooff.ledger import RangeInfo, Trip, can_commit
from oooff.planner import BalanceExceededError, Planner
from oooff.store import DEFAULT_PATH, JSONStore, StoreError, trip_to_dict

app = typer.Typer(
    name="oooff",
    help="oooff: track public holidays, PTO balance, time off and trips.",
    add_completion=False,
)


def _parse_date(value: str) -> datetime.date:
    """Parse a YYYY-MM-DD date string."""
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format {value!r}. Use YYYY-MM-DD.") from None


def _fail(message: object) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def _store(ctx: typer.Context) -> JSONStore:
    return ctx.obj["store"]


def _user(ctx: typer.Context) -> str:
    user = ctx.obj["user"]
    if not user:
        raise _fail("--user is required (or set OOOFF_USER).")
    return user


def _planner(ctx: typer.Context) -> Planner:
    email = _user(ctx)
    try:
        return Planner(_store(ctx), email, year=ctx.obj["year"])
    except KeyError:
        raise _fail(f"No account for {email!r}. Run 'oooff signup' first.") from None
    except StoreError as exc:
        raise _fail(exc) from None


def _range_to_dict(info: RangeInfo) -> dict[str, object]:
    return {
        "start_date": info.start_date.isoformat(),
        "end_date": info.end_date.isoformat(),
        "total_days": info.total_days,
        "holiday_days": info.holiday_days,
        "weekend_days": info.weekend_days,
        "pto_days_needed": info.pto_days_needed,
        "all_dates": [d.isoformat() for d in info.all_dates],
    }


def _print_json(data: object) -> None:
    json.dump(data, sys.stdout, indent=2)
    typer.echo()


def _blocked(exc: BalanceExceededError) -> typer.Exit:
    typer.echo(format_range_info(exc.info))
    return _fail(f"{exc} (short by {exc.shortfall}).")


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


@app.callback()
def main_options(
    ctx: typer.Context,
    data: str = typer.Option(
        str(DEFAULT_PATH),
        "--data",
        envvar="OOOFF_DATA",
        help="Path to the JSON data file.",
    ),
    user: str | None = typer.Option(
        None,
        "--user",
        "-u",
        envvar="OOOFF_USER",
        help="Email of the account to act on.",
    ),
    year: int = typer.Option(
        DEFAULT_YEAR,
        "--year",
        "-y",
        envvar="OOOFF_YEAR",
        help="Holiday year for listings and an empty ledger.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr.",
    ),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = {"store": JSONStore(data), "user": user, "year": year}


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@app.command()
def signup(
    ctx: typer.Context,
    country: str = typer.Option(
        "United States",
        "--country",
        "-c",
        help=f"Holiday calendar ({', '.join(sorted(PRESETS))}).",
    ),
    days: int = typer.Option(
        ...,
        "--days",
        "-d",
        help="Yearly PTO allotment in days.",
        min=0,
    ),
) -> None:
    """Create an account with a country and a PTO allotment."""
    email = _user(ctx)
    resolved = resolve_country(country)
    if resolved is None:
        raise _fail(f"Unknown country {country!r}. Supported: {', '.join(sorted(PRESETS))}")
    try:
        _store(ctx).create(email, resolved, days)
    except StoreError as exc:
        raise _fail(exc) from None
    typer.echo(f"  Welcome, {email}! {days} PTO days, {resolved} holidays.")


@app.command()
def status(
    ctx: typer.Context,
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
) -> None:
    """Show PTO allotment, days used and the remaining balance."""
    planner = _planner(ctx)
    used = planner.days_used
    left = planner.remaining
    if output_json:
        _print_json(
            {
                "email": planner.email,
                "country": planner.country,
                "total_pto_days": planner.total_pto_days,
                "days_used": used,
                "remaining": left,
                "time_off_dates": [d.isoformat() for d in sorted(planner.time_off)],
            }
        )
        return
    typer.echo(format_balance(planner.email, planner.country, planner.total_pto_days, used, left))


@app.command()
def settings(
    ctx: typer.Context,
    days: int | None = typer.Option(
        None,
        "--days",
        "-d",
        help="New yearly PTO allotment.",
        min=0,
    ),
    country: str | None = typer.Option(
        None,
        "--country",
        "-c",
        help="New holiday calendar.",
    ),
) -> None:
    """Update the PTO allotment or country."""
    planner = _planner(ctx)
    if days is None and country is None:
        raise _fail("Nothing to change. Pass --days and/or --country.")
    if country is not None:
        try:
            planner.set_country(country)
        except KeyError as exc:
            raise _fail(exc.args[0]) from None
    if days is not None:
        planner.set_total_pto_days(days)
    typer.echo(
        format_balance(
            planner.email,
            planner.country,
            planner.total_pto_days,
            planner.days_used,
            planner.remaining,
        )
    )


# ---------------------------------------------------------------------------
# Time off
# ---------------------------------------------------------------------------


@app.command()
def preview(
    ctx: typer.Context,
    start: str = typer.Argument(..., help="First day (YYYY-MM-DD)."),
    end: str = typer.Argument(..., help="Last day (YYYY-MM-DD)."),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
) -> None:
    """Show what a range would cost without committing it."""
    planner = _planner(ctx)
    info = planner.preview(_parse_date(start), _parse_date(end))
    left = planner.remaining
    if output_json:
        data = _range_to_dict(info)
        data["remaining"] = left
        data["can_commit"] = can_commit(info.pto_days_needed, left)
        _print_json(data)
        return
    typer.echo(format_range_info(info))
    typer.echo(f"    Remaining after: {left - info.pto_days_needed} (now {left})")


@app.command()
def add(
    ctx: typer.Context,
    start: str = typer.Argument(..., help="First day (YYYY-MM-DD)."),
    end: str = typer.Argument(..., help="Last day (YYYY-MM-DD)."),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
) -> None:
    """Mark a range as time off."""
    planner = _planner(ctx)
    try:
        info = planner.add_time_off(_parse_date(start), _parse_date(end))
    except BalanceExceededError as exc:
        raise _blocked(exc) from None
    if output_json:
        data = _range_to_dict(info)
        data["remaining"] = planner.remaining
        _print_json(data)
        return
    typer.echo(format_range_info(info))
    typer.echo(f"  Time off added. {planner.remaining} PTO days left.")


@app.command()
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Do not ask for confirmation."),
) -> None:
    """Remove all time off.  Trips are kept."""
    planner = _planner(ctx)
    if not yes:
        typer.confirm(f"Remove all {len(planner.time_off)} time-off days?", abort=True)
    planner.clear_time_off(planner.time_off)
    typer.echo(f"  All time off removed. {planner.remaining} PTO days left.")


@app.command(name="calendar")
def calendar_cmd(
    ctx: typer.Context,
    month: str | None = typer.Option(
        None,
        "--month",
        "-m",
        help="Month to show (YYYY-MM). Defaults to the current month.",
    ),
) -> None:
    """Show a month with holidays, trips and time off."""
    planner = _planner(ctx)
    if month is None:
        today = datetime.date.today()
        year, mon = today.year, today.month
    else:
        try:
            first = datetime.date.fromisoformat(f"{month}-01")
        except ValueError:
            raise typer.BadParameter(f"Invalid month {month!r}. Use YYYY-MM.") from None
        year, mon = first.year, first.month
    holidays = planner.holidays_for([year])
    typer.echo(format_month(year, mon, holidays, planner.time_off, planner.trips))
    typer.echo()
    typer.echo(f"  {planner.remaining} vacation days left")


# ---------------------------------------------------------------------------
# Trips
# ---------------------------------------------------------------------------


@app.command()
def trip(
    ctx: typer.Context,
    start: str = typer.Argument(..., help="First day (YYYY-MM-DD)."),
    end: str = typer.Argument(..., help="Last day (YYYY-MM-DD)."),
    destination: str = typer.Option(..., "--destination", "-d", help="Where you are going."),
    notes: str | None = typer.Option(None, "--notes", "-n", help="Free-form notes."),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
) -> None:
    """Take a range off and attach a trip to it."""
    planner = _planner(ctx)
    try:
        new_trip = planner.add_trip(_parse_date(start), _parse_date(end), destination, notes)
    except BalanceExceededError as exc:
        raise _blocked(exc) from None
    except ValueError as exc:
        raise _fail(exc) from None
    if output_json:
        _print_json(trip_to_dict(new_trip))
        return
    typer.echo(format_trips([new_trip]))
    typer.echo(f"  Trip added. {planner.remaining} PTO days left.")


@app.command()
def trips(
    ctx: typer.Context,
    show_all: bool = typer.Option(False, "--all", help="Include past trips."),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON."),
) -> None:
    """List upcoming trips."""
    planner = _planner(ctx)
    listed: list[Trip] = (
        sorted(planner.trips, key=lambda t: (t.start_date, t.end_date))
        if show_all
        else planner.upcoming_trips()
    )
    if output_json:
        _print_json([trip_to_dict(t) for t in listed])
        return
    typer.echo(format_trips(listed))


@app.command(name="delete-trip")
def delete_trip(
    ctx: typer.Context,
    trip_id: str = typer.Argument(..., help="Id of the trip to delete."),
) -> None:
    """Delete a trip.  Its days stay booked as time off."""
    planner = _planner(ctx)
    try:
        removed = planner.delete_trip(trip_id)
    except KeyError as exc:
        raise _fail(exc.args[0]) from None
    typer.echo(f"  Deleted trip to {removed.destination}. Its days remain as time off.")


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@app.command()
def holidays(
    ctx: typer.Context,
    country: str = typer.Option(
        "United States",
        "--country",
        "-c",
        help=f"Country ({', '.join(sorted(PRESETS))}).",
    ),
) -> None:
    """List public holidays for a country."""
    year = ctx.obj["year"]
    try:
        preset = get_preset(country, year)
    except KeyError as exc:
        raise _fail(exc.args[0]) from None

    resolved = resolve_country(country) or country
    typer.echo(f"  {PRESETS[resolved]}, {year}")
    typer.echo()
    for d, name in preset:
        typer.echo(f"    {d.strftime('%a, %b %d'):>12}  {name}")


def main() -> None:
    """Entry point for the CLI."""
    app()
