"""Application shell around the accounting engine.

A :class:`Planner` loads one user's record, keeps the authoritative ledger
and trip list in memory, and writes the record back to the store after
every accepted change.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Iterable

from oooff import ledger as engine
from oooff.holidays import DEFAULT_YEAR, get_holidays, resolve_country
from oooff.ledger import Holiday, Ledger, RangeInfo, Trip
from oooff.store import JSONStore, UserRecord

logger = logging.getLogger(__name__)


class BalanceExceededError(ValueError):
    """A commit would take the remaining PTO balance below zero."""

    def __init__(self, info: RangeInfo, remaining: int):
        self.info = info
        self.remaining = remaining
        super().__init__(
            f"Not enough PTO: {info.pto_days_needed} day(s) needed, "
            f"{remaining} remaining"
        )

    @property
    def shortfall(self) -> int:
        return self.info.pto_days_needed - self.remaining


def _new_trip_id() -> str:
    return uuid.uuid4().hex


class Planner:
    """One user's time off, trips and PTO balance."""

    def __init__(self, store: JSONStore, email: str, *, year: int = DEFAULT_YEAR):
        self.store = store
        self.year = year
        record = store.load(email)
        self.email = record.email
        self.country = record.country
        self.total_pto_days = record.total_pto_days
        self.time_off: Ledger = record.time_off
        self.trips: list[Trip] = list(record.trips)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def holidays_for(self, years: Iterable[int]) -> list[Holiday]:
        """Holidays of every year in *years*, plus the following year.

        The following year is included because an observed New Year's Day
        can land on December 31 of the year before.
        """
        wanted = set(years)
        wanted |= {y + 1 for y in wanted}
        out: list[Holiday] = []
        for y in sorted(wanted):
            out.extend(get_holidays(self.country, y))
        return out

    @property
    def holidays(self) -> list[Holiday]:
        """Holidays for every year the ledger touches, or ``self.year``."""
        return self.holidays_for({d.year for d in self.time_off} or {self.year})

    @property
    def days_used(self) -> int:
        return engine.days_used(self.time_off, self.holidays)

    @property
    def remaining(self) -> int:
        return engine.remaining(self.total_pto_days, self.time_off, self.holidays)

    def preview(self, a: datetime.date, b: datetime.date) -> RangeInfo:
        """Cost of selecting *a* .. *b*, in either order."""
        start, end = engine.normalize_range(a, b)
        holidays = self.holidays_for(range(start.year, end.year + 1))
        return engine.range_info(start, end, holidays)

    def upcoming_trips(self, today: datetime.date | None = None) -> list[Trip]:
        today = today or datetime.date.today()
        return sorted(
            (t for t in self.trips if t.end_date >= today),
            key=lambda t: (t.start_date, t.end_date),
        )

    def find_trip(self, trip_id: str) -> Trip:
        for trip in self.trips:
            if trip.id == trip_id:
                return trip
        raise KeyError(f"No trip with id {trip_id!r}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _save(self) -> None:
        self.store.save(
            UserRecord(
                email=self.email,
                country=self.country,
                total_pto_days=self.total_pto_days,
                time_off=self.time_off,
                trips=tuple(self.trips),
            )
        )

    def _commit(self, a: datetime.date, b: datetime.date) -> RangeInfo:
        info = self.preview(a, b)
        current = self.remaining
        if not engine.can_commit(info.pto_days_needed, current):
            logger.info(
                "Blocked %s..%s for %s: needs %d, %d remaining",
                info.start_date,
                info.end_date,
                self.email,
                info.pto_days_needed,
                current,
            )
            raise BalanceExceededError(info, current)
        self.time_off = engine.commit_time_off(self.time_off, info.all_dates)
        return info

    def add_time_off(self, a: datetime.date, b: datetime.date) -> RangeInfo:
        """Mark *a* .. *b* as time off if the balance allows it.

        Raises :class:`BalanceExceededError` and leaves everything untouched
        when it does not.
        """
        info = self._commit(a, b)
        self._save()
        logger.info(
            "Added time off %s..%s for %s (%d PTO days)",
            info.start_date,
            info.end_date,
            self.email,
            info.pto_days_needed,
        )
        return info

    def add_trip(
        self,
        a: datetime.date,
        b: datetime.date,
        destination: str,
        notes: str | None = None,
    ) -> Trip:
        """Commit *a* .. *b* as time off and label it with a trip."""
        if not destination.strip():
            raise ValueError("A trip needs a destination")
        info = self._commit(a, b)
        trip = Trip(
            id=_new_trip_id(),
            destination=destination.strip(),
            start_date=info.start_date,
            end_date=info.end_date,
            notes=notes or None,
        )
        self.trips.append(trip)
        self._save()
        logger.info("Added trip %s to %s for %s", trip.id, trip.destination, self.email)
        return trip

    def delete_trip(self, trip_id: str) -> Trip:
        """Remove a trip.  Its days stay marked as time off."""
        trip = self.find_trip(trip_id)
        self.time_off = engine.delete_trip(trip, self.time_off)
        self.trips = [t for t in self.trips if t.id != trip_id]
        self._save()
        logger.info("Deleted trip %s for %s", trip_id, self.email)
        return trip

    def clear_time_off(self, dates: Iterable[datetime.date] = ()) -> None:
        """Remove time off.  Always clears the whole ledger."""
        self.time_off = engine.clear_time_off(self.time_off, dates)
        self._save()
        logger.info("Cleared all time off for %s", self.email)

    def set_total_pto_days(self, days: int) -> None:
        if days < 0:
            raise ValueError("Total PTO days must not be negative")
        self.total_pto_days = days
        self._save()

    def set_country(self, country: str) -> None:
        """Switch holiday calendars.  Raises ``KeyError`` for unknown names."""
        resolved = resolve_country(country)
        if resolved is None:
            raise KeyError(f"Unknown country {country!r}")
        self.country = resolved
        self._save()
