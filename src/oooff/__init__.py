"""oooff: time-off and trip planner.

Tracks a yearly PTO allotment against public holidays, weekends and the
days you have marked off, and refuses bookings that would overdraw it.
"""

from oooff.holidays import get_holidays, get_preset, resolve_country
from oooff.ledger import (
    RangeInfo,
    Trip,
    can_commit,
    clear_time_off,
    commit_time_off,
    date_span,
    days_used,
    delete_trip,
    normalize_range,
    range_info,
    remaining,
)
from oooff.planner import BalanceExceededError, Planner
from oooff.store import JSONStore, StoreError, UserRecord

__all__ = [
    "BalanceExceededError",
    "JSONStore",
    "Planner",
    "RangeInfo",
    "StoreError",
    "Trip",
    "UserRecord",
    "can_commit",
    "clear_time_off",
    "commit_time_off",
    "date_span",
    "days_used",
    "delete_trip",
    "get_holidays",
    "get_preset",
    "normalize_range",
    "range_info",
    "remaining",
    "resolve_country",
]
