from datetime import date

import pytest

from booking_admin.models.audit_log import AuditLog, normalize_table_name
from booking_admin.models.blocked_date import BlockedDate


@pytest.mark.parametrize(
    "entity_type,expected",
    [
        ("Blocked Dates", "blocked_dates"),
        ("Pricing  Extras", "pricing_extras"),
        ("  Vehicles ", "vehicles"),
        ("bookings", "bookings"),
    ],
)
def test_normalize_table_name(entity_type, expected):
    assert normalize_table_name(entity_type) == expected


def test_from_change_populates_derived_columns():
    entry = AuditLog.from_change(
        user_id="admin-01",
        action="update",
        entity_type="Pricing Extras",
        entity_id=12,
        old_values={"price": "10.00"},
        new_values={"price": "12.50"},
        summary="Updated Pricing Extras: Price",
    )

    assert entry.table_name == "pricing_extras"
    assert entry.entity_type == "Pricing Extras"
    assert entry.affected_entity_id == "12"
    assert entry.old_values == {"price": "10.00"}
    assert entry.created_at.tzinfo is not None
    assert "pricing_extras:12" in repr(entry)


def test_from_change_copies_value_maps():
    old_values = {"a": 1}
    entry = AuditLog.from_change(
        user_id="admin-01",
        action="update",
        entity_type="Bookings",
        entity_id=None,
        old_values=old_values,
        new_values={},
    )
    old_values["a"] = 2

    assert entry.old_values == {"a": 1}
    assert entry.affected_entity_id is None


def test_blocked_date_repr():
    assert "2025-12-25" in repr(BlockedDate(date=date(2025, 12, 25)))
