"""JSON-file persistence for user records.

All users live in one JSON document keyed by email::

    {
      "users": {
        "me@example.com": {
          "email": "me@example.com",
          "country": "United States",
          "total_pto_days": 20,
          "time_off_dates": ["2026-07-06", ...],
          "trips": [{"id": ..., "destination": ..., "startDate": ..., ...}]
        }
      }
    }

Records are written whole, so the last save wins.  This module is the
boundary where loosely-typed stored data becomes :class:`Trip` and
``datetime.date`` values; anything malformed raises :class:`StoreError`.
"""

from __future__ import annotations

import datetime
import json
import logging
import os
import pathlib
import tempfile
from collections.abc import Iterable
from typing import Any, NamedTuple

from oooff.ledger import EMPTY_LEDGER, Ledger, Trip

logger = logging.getLogger(__name__)

DEFAULT_PATH = pathlib.Path.home() / ".oooff.json"


class StoreError(ValueError):
    """Stored data is missing or does not have the expected shape."""


class UserRecord(NamedTuple):
    """Everything persisted for one user."""

    email: str
    country: str
    total_pto_days: int
    time_off: Ledger = EMPTY_LEDGER
    trips: tuple[Trip, ...] = ()


# ---------------------------------------------------------------------------
# Boundary conversion
# ---------------------------------------------------------------------------


def _parse_date(value: object, field: str) -> datetime.date:
    if not isinstance(value, str):
        raise StoreError(f"{field}: expected an ISO date string, got {value!r}")
    # Older records stored full timestamps; keep only the date part.
    try:
        return datetime.date.fromisoformat(value.split("T")[0])
    except ValueError:
        raise StoreError(f"{field}: invalid date {value!r}") from None


def _first(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def trip_from_dict(raw: object) -> Trip:
    """Validate a stored trip payload.

    Accepts both ``startDate`` and ``start_date`` spellings.  Extra keys
    such as ``budget`` or ``activities`` are ignored.
    """
    if not isinstance(raw, dict):
        raise StoreError(f"trip: expected an object, got {raw!r}")

    trip_id = raw.get("id")
    destination = raw.get("destination")
    if trip_id in (None, ""):
        raise StoreError("trip: missing 'id'")
    if not isinstance(destination, str) or not destination.strip():
        raise StoreError(f"trip {trip_id}: missing 'destination'")

    start = _parse_date(_first(raw, "startDate", "start_date"), f"trip {trip_id} start")
    end = _parse_date(_first(raw, "endDate", "end_date"), f"trip {trip_id} end")
    if start > end:
        raise StoreError(f"trip {trip_id}: start {start} is after end {end}")

    notes = raw.get("notes")
    if notes is not None and not isinstance(notes, str):
        raise StoreError(f"trip {trip_id}: 'notes' must be a string")
    return Trip(
        id=str(trip_id),
        destination=destination,
        start_date=start,
        end_date=end,
        notes=notes if notes else None,
    )


def trip_to_dict(trip: Trip) -> dict[str, object]:
    data: dict[str, object] = {
        "id": trip.id,
        "destination": trip.destination,
        "startDate": trip.start_date.isoformat(),
        "endDate": trip.end_date.isoformat(),
    }
    if trip.notes:
        data["notes"] = trip.notes
    return data


def record_from_dict(email: str, raw: object) -> UserRecord:
    if not isinstance(raw, dict):
        raise StoreError(f"user {email}: expected an object, got {raw!r}")

    country = _first(raw, "country") or ""
    total = _first(raw, "total_pto_days", "totalPTODays")
    if total is None:
        total = 0
    if isinstance(total, bool) or not isinstance(total, int):
        raise StoreError(f"user {email}: total_pto_days must be an integer, got {total!r}")
    if total < 0:
        raise StoreError(f"user {email}: total_pto_days must not be negative")

    raw_dates = _first(raw, "time_off_dates", "timeOffDates") or []
    raw_trips = raw.get("trips") or []
    if not isinstance(raw_dates, list) or not isinstance(raw_trips, list):
        raise StoreError(f"user {email}: time off and trips must be lists")

    return UserRecord(
        email=email,
        country=str(country),
        total_pto_days=total,
        time_off=frozenset(_parse_date(d, f"user {email} time off") for d in raw_dates),
        trips=tuple(trip_from_dict(t) for t in raw_trips),
    )


def record_to_dict(record: UserRecord) -> dict[str, object]:
    return {
        "email": record.email,
        "country": record.country,
        "total_pto_days": record.total_pto_days,
        "time_off_dates": [d.isoformat() for d in sorted(record.time_off)],
        "trips": [trip_to_dict(t) for t in record.trips],
    }


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class JSONStore:
    """A keyed store of :class:`UserRecord` backed by a single JSON file."""

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_PATH):
        self.path = pathlib.Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"users": {}}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            raise StoreError(f"Invalid JSON in {self.path}: {exc}") from None
        if not isinstance(data, dict) or not isinstance(data.get("users", {}), dict):
            raise StoreError(f"{self.path} must contain a 'users' object")
        data.setdefault("users", {})
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            pathlib.Path(tmp).unlink(missing_ok=True)
            raise

    def emails(self) -> list[str]:
        return sorted(self._read()["users"])

    def exists(self, email: str) -> bool:
        return email in self._read()["users"]

    def load(self, email: str) -> UserRecord:
        """Load the record for *email*.  Raises ``KeyError`` if absent."""
        users = self._read()["users"]
        if email not in users:
            raise KeyError(f"No user {email!r} in {self.path}")
        record = record_from_dict(email, users[email])
        logger.debug(
            "Loaded %s: %d time-off dates, %d trips",
            email,
            len(record.time_off),
            len(record.trips),
        )
        return record

    def save(self, record: UserRecord) -> None:
        data = self._read()
        data["users"][record.email] = record_to_dict(record)
        self._write(data)
        logger.debug("Saved %s to %s", record.email, self.path)

    def create(
        self,
        email: str,
        country: str,
        total_pto_days: int,
        time_off: Iterable[datetime.date] = (),
    ) -> UserRecord:
        """Create a new user.  Raises ``StoreError`` if *email* is taken."""
        if total_pto_days < 0:
            raise StoreError("total_pto_days must not be negative")
        if self.exists(email):
            raise StoreError(f"User {email!r} already exists")
        record = UserRecord(
            email=email,
            country=country,
            total_pto_days=total_pto_days,
            time_off=frozenset(time_off),
        )
        self.save(record)
        logger.info("Created user %s (%s, %d PTO days)", email, country, total_pto_days)
        return record
