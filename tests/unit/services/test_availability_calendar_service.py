from __future__ import annotations

from datetime import date, datetime
from unittest.mock import patch

import pytest

from booking_admin.core.exceptions import (
    DateAlreadyBlockedException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from booking_admin.models.blocked_date import BlockedDate
from booking_admin.services.availability_calendar_service import (
    AvailabilityCalendarService,
    blocked_date_snapshot,
    coerce_date,
    expand_date_range,
    normalize_reason,
    range_length,
)


@pytest.fixture
def service(db) -> AvailabilityCalendarService:
    return AvailabilityCalendarService(db)


class TestHelpers:
    def test_expand_date_range_is_inclusive(self):
        assert expand_date_range(date(2025, 2, 27), date(2025, 3, 2)) == [
            date(2025, 2, 27),
            date(2025, 2, 28),
            date(2025, 3, 1),
            date(2025, 3, 2),
        ]

    def test_expand_single_day(self):
        assert expand_date_range(date(2025, 1, 1), date(2025, 1, 1)) == [date(2025, 1, 1)]

    def test_expand_inverted_range_is_empty(self):
        assert expand_date_range(date(2025, 1, 5), date(2025, 1, 1)) == []

    def test_expand_stops_at_last_representable_day(self):
        assert expand_date_range(date(9999, 12, 30), date.max) == [date(9999, 12, 30), date.max]

    @pytest.mark.parametrize(
        "start,end,expected",
        [
            (date(2025, 1, 1), date(2025, 1, 1), 1),
            (date(2025, 1, 1), date(2025, 12, 31), 365),
            (date(2025, 1, 5), date(2025, 1, 1), 0),
            (date.min, date.max, (date.max - date.min).days + 1),
        ],
    )
    def test_range_length(self, start, end, expected):
        assert range_length(start, end) == expected

    def test_expand_crosses_leap_day(self):
        days = expand_date_range(date(2024, 2, 28), date(2024, 3, 1))
        assert date(2024, 2, 29) in days
        assert len(days) == 3

    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2025, 5, 1), date(2025, 5, 1)),
            (datetime(2025, 5, 1, 23, 59), date(2025, 5, 1)),
            ("2025-05-01", date(2025, 5, 1)),
            (" 2025-05-01 ", date(2025, 5, 1)),
        ],
    )
    def test_coerce_date(self, value, expected):
        assert coerce_date(value) == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_coerce_date_requires_value(self, value):
        with pytest.raises(ValidationException) as exc_info:
            coerce_date(value)
        assert exc_info.value.code == "DATE_REQUIRED"

    @pytest.mark.parametrize("value", ["2025-13-01", "tomorrow", 20250101])
    def test_coerce_date_rejects_garbage(self, value):
        with pytest.raises(ValidationException) as exc_info:
            coerce_date(value)
        assert exc_info.value.code == "INVALID_DATE"

    @pytest.mark.parametrize(
        "reason,expected",
        [(None, None), ("", None), ("   ", None), ("  Holiday ", "Holiday")],
    )
    def test_normalize_reason(self, reason, expected):
        assert normalize_reason(reason) == expected

    def test_snapshot(self):
        record = BlockedDate(date=date(2025, 1, 1), reason="New Year")
        assert blocked_date_snapshot(record) == {"date": date(2025, 1, 1), "reason": "New Year"}
        assert blocked_date_snapshot(None) == {}


class TestBlockDate:
    def test_block_date_then_is_blocked(self, service):
        record = service.block_date(date(2025, 7, 4), reason="  Holiday  ")

        assert record.id
        assert record.date == date(2025, 7, 4)
        assert record.reason == "Holiday"
        assert service.is_blocked(date(2025, 7, 4)) is True
        assert service.is_blocked(date(2025, 7, 5)) is False

    def test_block_date_accepts_iso_string(self, service):
        record = service.block_date("2025-08-01")
        assert record.date == date(2025, 8, 1)
        assert record.reason is None

    def test_block_date_twice_conflicts_without_insert(self, service, db):
        service.block_date(date(2025, 7, 4))

        with patch.object(service.repository, "create") as create:
            with pytest.raises(DateAlreadyBlockedException) as exc_info:
                service.block_date(date(2025, 7, 4))
            create.assert_not_called()

        assert exc_info.value.message == "Date already blocked"
        assert exc_info.value.details == {"date": "2025-07-04"}
        assert db.query(BlockedDate).count() == 1

    def test_lost_insert_race_is_a_conflict(self, service, other_db):
        # Another admin's request commits the same day after our existence check
        AvailabilityCalendarService(other_db).block_date(date(2025, 9, 1))

        with patch.object(service.repository, "exists_on", return_value=False):
            with pytest.raises(DateAlreadyBlockedException):
                service.block_date(date(2025, 9, 1))

        assert len(service.list_blocked()) == 1

    def test_block_date_requires_date(self, service):
        with pytest.raises(ValidationException):
            service.block_date(None)


class TestBlockRange:
    def test_block_range_inserts_each_day_with_shared_reason(self, service):
        result = service.block_range(date(2025, 12, 24), date(2025, 12, 26), reason="Christmas")

        assert result.status == "blocked"
        assert result.count == 3
        assert result.requested == 3
        assert result.skipped == []
        assert result.inserted_dates == [date(2025, 12, 24), date(2025, 12, 25), date(2025, 12, 26)]
        assert {record.reason for record in result.inserted} == {"Christmas"}

    def test_overlapping_ranges_only_insert_new_days(self, service):
        service.block_range(date(2025, 1, 1), date(2025, 1, 3))

        result = service.block_range(date(2025, 1, 2), date(2025, 1, 4))

        assert result.count == 1
        assert result.inserted_dates == [date(2025, 1, 4)]
        assert result.skipped == [date(2025, 1, 2), date(2025, 1, 3)]
        assert [record.date for record in service.list_blocked()] == [
            date(2025, 1, 1),
            date(2025, 1, 2),
            date(2025, 1, 3),
            date(2025, 1, 4),
        ]

    def test_fully_blocked_range_is_noop_not_error(self, service):
        service.block_range(date(2025, 3, 1), date(2025, 3, 2))

        result = service.block_range(date(2025, 3, 1), date(2025, 3, 2))

        assert result.status == "noop"
        assert result.count == 0
        assert result.skipped == [date(2025, 3, 1), date(2025, 3, 2)]

    def test_inverted_range_blocks_nothing(self, service, caplog):
        result = service.block_range(date(2025, 1, 10), date(2025, 1, 1))

        assert result.count == 0
        assert result.requested == 0
        assert result.status == "noop"
        assert service.list_blocked() == []
        assert "Inverted range" in caplog.text

    def test_end_defaults_to_start(self, service):
        result = service.block_range("2025-06-01")

        assert result.inserted_dates == [date(2025, 6, 1)]

    def test_blank_reason_stored_as_null(self, service):
        result = service.block_range(date(2025, 6, 1), date(2025, 6, 2), reason="   ")
        assert [record.reason for record in result.inserted] == [None, None]

    def test_range_too_long_is_rejected(self, db):
        service = AvailabilityCalendarService(db, max_range_days=7)

        with pytest.raises(ValidationException) as exc_info:
            service.block_range(date(2025, 1, 1), date(2025, 1, 8))

        assert exc_info.value.code == "RANGE_TOO_LONG"
        assert service.list_blocked() == []

    def test_range_ending_on_last_representable_day(self, service):
        result = service.block_range(date.max, date.max, reason="End of calendar")

        assert result.inserted_dates == [date.max]
        assert service.is_blocked(date.max) is True

    def test_range_up_to_last_representable_day(self, service):
        result = service.block_range(date(9999, 12, 29), date.max)

        assert result.inserted_dates == [date(9999, 12, 29), date(9999, 12, 30), date.max]

    def test_huge_range_is_rejected_before_enumerating(self, service):
        with patch(
            "booking_admin.services.availability_calendar_service.expand_date_range"
        ) as expand:
            with pytest.raises(ValidationException) as exc_info:
                service.block_range(date.min, date(9999, 12, 30))

        expand.assert_not_called()
        assert exc_info.value.details["days"] == (date(9999, 12, 30) - date.min).days + 1

    def test_concurrent_insert_mid_range_is_skipped(self, service, other_db):
        # Read of existing days happens before another admin blocks Jan 2
        original = service.repository.dates_between

        def stale_read(start, end):
            existing = original(start, end)
            AvailabilityCalendarService(other_db).block_date(date(2025, 1, 2))
            return existing

        with patch.object(service.repository, "dates_between", side_effect=stale_read):
            result = service.block_range(date(2025, 1, 1), date(2025, 1, 3))

        assert result.inserted_dates == [date(2025, 1, 1), date(2025, 1, 3)]
        assert result.skipped == [date(2025, 1, 2)]

    def test_failure_partway_keeps_earlier_days(self, service, db):
        original_create = service.repository.create
        calls = {"n": 0}

        def flaky_create(day, reason=None):
            calls["n"] += 1
            if calls["n"] == 3:
                raise RepositoryException("Failed to create blocked date: connection reset")
            return original_create(day, reason)

        with patch.object(service.repository, "create", side_effect=flaky_create):
            with pytest.raises(RepositoryException):
                service.block_range(date(2025, 4, 1), date(2025, 4, 5))

        remaining = [record.date for record in service.list_blocked()]
        assert remaining == [date(2025, 4, 1), date(2025, 4, 2)]


class TestUnblockAndQueries:
    def test_unblock_removes_record(self, service):
        record = service.block_date(date(2025, 10, 31), reason="Maintenance")

        removed = service.unblock_date(record.id)

        assert removed.date == date(2025, 10, 31)
        assert removed.reason == "Maintenance"
        assert service.is_blocked(date(2025, 10, 31)) is False

    def test_unblock_unknown_id_raises_not_found(self, service):
        with pytest.raises(NotFoundException) as exc_info:
            service.unblock_date("01JUNKNOWNBLOCKEDDATE00000")
        assert exc_info.value.code == "BLOCKED_DATE_NOT_FOUND"

    def test_unblock_twice_raises_not_found(self, service):
        record = service.block_date(date(2025, 10, 31))
        service.unblock_date(record.id)

        with pytest.raises(NotFoundException):
            service.unblock_date(record.id)

    def test_unblock_requires_id(self, service):
        with pytest.raises(ValidationException):
            service.unblock_date("")

    def test_list_blocked_is_ascending(self, service):
        for day in (date(2025, 5, 3), date(2025, 5, 1), date(2025, 5, 2)):
            service.block_date(day)

        assert [record.date for record in service.list_blocked()] == [
            date(2025, 5, 1),
            date(2025, 5, 2),
            date(2025, 5, 3),
        ]

    def test_list_blocked_window(self, service):
        service.block_range(date(2025, 5, 1), date(2025, 5, 10))

        window = service.list_blocked(start="2025-05-03", end=date(2025, 5, 5))

        assert [record.date for record in window] == [
            date(2025, 5, 3),
            date(2025, 5, 4),
            date(2025, 5, 5),
        ]

    def test_other_sessions_see_changes_immediately(self, service, other_db):
        service.block_date(date(2025, 11, 11))

        assert AvailabilityCalendarService(other_db).is_blocked(date(2025, 11, 11)) is True

    def test_never_blocked_date_is_not_blocked(self, service):
        assert service.is_blocked("2030-01-01") is False
