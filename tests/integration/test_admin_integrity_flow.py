"""End-to-end flows across the calendar, the audit recorder and the store."""

from datetime import date

from booking_admin.models.audit_log import AuditLog
from booking_admin.services.audit_service import AuditService
from booking_admin.services.availability_calendar_service import (
    AvailabilityCalendarService,
    blocked_date_snapshot,
)


def test_christmas_closure(db, other_db):
    calendar = AvailabilityCalendarService(db)

    result = calendar.block_range("2025-12-24", "2025-12-26", reason="Christmas")

    assert result.count == 3
    rows = AvailabilityCalendarService(other_db).list_blocked()
    assert [row.date for row in rows] == [date(2025, 12, 24), date(2025, 12, 25), date(2025, 12, 26)]
    assert {row.reason for row in rows} == {"Christmas"}
    assert AvailabilityCalendarService(other_db).is_blocked(date(2025, 12, 25)) is True


def test_block_audit_unblock_audit(db):
    calendar = AvailabilityCalendarService(db)
    audit = AuditService(db)

    record = calendar.block_date(date(2026, 1, 1), reason="New Year")
    created = audit.record_change(
        "admin-01", "create", "Blocked Dates", record.id, {}, blocked_date_snapshot(record)
    )
    removed = calendar.unblock_date(record.id)
    deleted = audit.record_change(
        "admin-01", "delete", "Blocked Dates", record.id, blocked_date_snapshot(removed), {}
    )

    assert created.ok and deleted.ok
    assert calendar.is_blocked(date(2026, 1, 1)) is False
    rows, total = audit.list_records(entity_id=record.id)
    assert total == 2
    by_action = {row.action: row for row in rows}
    assert by_action["create"].new_values == {"date": "2026-01-01", "reason": "New Year"}
    assert by_action["delete"].old_values == {"date": "2026-01-01", "reason": "New Year"}
    assert by_action["delete"].summary == "Updated Blocked Dates: Date, Reason"


def test_no_change_update_still_leaves_a_trail(db):
    audit = AuditService(db)
    snapshot = {"status": "confirmed", "price": 120}

    result = audit.record_change("admin-01", "update", "Bookings", "bk_7", snapshot, dict(snapshot))

    assert result.ok
    row = db.query(AuditLog).one()
    assert row.old_values == {}
    assert row.new_values == {}
    assert row.action == "update"


def test_audit_failure_leaves_mutation_committed(db, other_db):
    calendar = AvailabilityCalendarService(db)
    record = calendar.block_date(date(2026, 2, 14))

    result = AuditService(db).record_change(
        None, "create", "Blocked Dates", record.id, {}, blocked_date_snapshot(record)
    )

    assert result.reason == "no_actor"
    assert AvailabilityCalendarService(other_db).is_blocked(date(2026, 2, 14)) is True
    assert other_db.query(AuditLog).count() == 0
