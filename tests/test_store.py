from __future__ import annotations

import datetime
import json
import pathlib

import pytest

from oooff.ledger import Trip
from oooff.store import (
    JSONStore,
    StoreError,
    UserRecord,
    record_from_dict,
    trip_from_dict,
    trip_to_dict,
)

EMAIL = "me@example.com"


def _d(value: str) -> datetime.date:
    return datetime.date.fromisoformat(value)


@pytest.fixture
def store(tmp_path: pathlib.Path) -> JSONStore:
    return JSONStore(tmp_path / "data.json")


class TestJSONStore:
    def test_create_and_load(self, store: JSONStore) -> None:
        store.create(EMAIL, "Canada", 15)
        record = store.load(EMAIL)
        assert record == UserRecord(email=EMAIL, country="Canada", total_pto_days=15)

    def test_missing_file_has_no_users(self, store: JSONStore) -> None:
        assert store.emails() == []
        assert store.exists(EMAIL) is False

    def test_load_unknown_user(self, store: JSONStore) -> None:
        with pytest.raises(KeyError):
            store.load(EMAIL)

    def test_create_duplicate(self, store: JSONStore) -> None:
        store.create(EMAIL, "Canada", 15)
        with pytest.raises(StoreError, match="already exists"):
            store.create(EMAIL, "Canada", 15)

    def test_create_negative_allotment(self, store: JSONStore) -> None:
        with pytest.raises(StoreError):
            store.create(EMAIL, "Canada", -1)

    def test_save_round_trip(self, store: JSONStore) -> None:
        record = UserRecord(
            email=EMAIL,
            country="France",
            total_pto_days=25,
            time_off=frozenset({_d("2026-08-10"), _d("2026-08-11")}),
            trips=(Trip("abc", "Nice", _d("2026-08-10"), _d("2026-08-11"), "beach"),),
        )
        store.save(record)
        assert store.load(EMAIL) == record

    def test_last_write_wins(self, store: JSONStore) -> None:
        store.create(EMAIL, "France", 25)
        store.save(UserRecord(EMAIL, "France", 30))
        assert store.load(EMAIL).total_pto_days == 30

    def test_multiple_users(self, store: JSONStore) -> None:
        store.create("b@example.com", "Belgium", 20)
        store.create("a@example.com", "Germany", 30)
        assert store.emails() == ["a@example.com", "b@example.com"]
        assert store.load("b@example.com").country == "Belgium"

    def test_dates_written_sorted(self, store: JSONStore) -> None:
        store.save(
            UserRecord(EMAIL, "France", 25, frozenset({_d("2026-08-11"), _d("2026-08-10")}))
        )
        data = json.loads(store.path.read_text())
        assert data["users"][EMAIL]["time_off_dates"] == ["2026-08-10", "2026-08-11"]

    def test_no_temp_files_left(self, store: JSONStore) -> None:
        store.create(EMAIL, "France", 25)
        assert [p.name for p in store.path.parent.iterdir()] == ["data.json"]

    def test_invalid_json(self, store: JSONStore) -> None:
        store.path.write_text("{not json")
        with pytest.raises(StoreError, match="Invalid JSON"):
            store.load(EMAIL)

    def test_wrong_shape(self, store: JSONStore) -> None:
        store.path.write_text(json.dumps({"users": []}))
        with pytest.raises(StoreError):
            store.emails()


class TestTripValidation:
    def test_camel_case_payload(self) -> None:
        trip = trip_from_dict(
            {
                "id": "1700000000000",
                "destination": "Kyoto",
                "startDate": "2026-04-01T00:00:00.000Z",
                "endDate": "2026-04-10T00:00:00.000Z",
                "budget": "$3000",
                "activities": "temples",
            }
        )
        assert trip == Trip("1700000000000", "Kyoto", _d("2026-04-01"), _d("2026-04-10"))

    def test_snake_case_payload(self) -> None:
        trip = trip_from_dict(
            {"id": 7, "destination": "Oslo", "start_date": "2026-02-01", "end_date": "2026-02-01"}
        )
        assert trip.id == "7"
        assert trip.start_date == trip.end_date

    def test_start_after_end(self) -> None:
        with pytest.raises(StoreError, match="after end"):
            trip_from_dict(
                {"id": "1", "destination": "Oslo", "startDate": "2026-02-05", "endDate": "2026-02-01"}
            )

    def test_missing_destination(self) -> None:
        with pytest.raises(StoreError, match="destination"):
            trip_from_dict({"id": "1", "startDate": "2026-02-01", "endDate": "2026-02-01"})

    def test_missing_id(self) -> None:
        with pytest.raises(StoreError, match="id"):
            trip_from_dict({"destination": "Oslo", "startDate": "2026-02-01", "endDate": "2026-02-01"})

    def test_bad_date(self) -> None:
        with pytest.raises(StoreError, match="invalid date"):
            trip_from_dict(
                {"id": "1", "destination": "Oslo", "startDate": "2026-02-30", "endDate": "2026-03-01"}
            )

    @pytest.mark.parametrize("notes", [42, ["a"], {"text": "b"}])
    def test_notes_must_be_text(self, notes: object) -> None:
        with pytest.raises(StoreError, match="notes"):
            trip_from_dict(
                {"id": "1", "destination": "Oslo", "startDate": "2026-02-01", "endDate": "2026-02-01", "notes": notes}
            )

    def test_empty_notes_become_none(self) -> None:
        trip = trip_from_dict(
            {"id": "1", "destination": "Oslo", "startDate": "2026-02-01", "endDate": "2026-02-01", "notes": ""}
        )
        assert trip.notes is None

    def test_notes_are_optional_on_output(self) -> None:
        data = trip_to_dict(Trip("1", "Oslo", _d("2026-02-01"), _d("2026-02-02")))
        assert "notes" not in data
        assert data["startDate"] == "2026-02-01"


class TestRecordValidation:
    def test_legacy_keys(self) -> None:
        record = record_from_dict(
            EMAIL,
            {
                "country": "United Kingdom",
                "totalPTODays": 25,
                "timeOffDates": ["2026-05-05T00:00:00.000Z"],
                "trips": [],
            },
        )
        assert record.total_pto_days == 25
        assert record.time_off == {_d("2026-05-05")}

    def test_negative_allotment(self) -> None:
        with pytest.raises(StoreError, match="negative"):
            record_from_dict(EMAIL, {"country": "Canada", "total_pto_days": -3})

    def test_non_integer_allotment(self) -> None:
        with pytest.raises(StoreError, match="integer"):
            record_from_dict(EMAIL, {"country": "Canada", "total_pto_days": "ten"})
