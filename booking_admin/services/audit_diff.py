"""
Field-level diffing for audit snapshots.

Snapshots are mappings from field name to a JSON-style value (str, number,
bool, None, nested mapping or list). Two values are compared structurally
after normalization, so equal nested objects never show up as changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
import math
import re
from typing import Any, Mapping


class _Missing:
    """Marker for a key that is absent from one side of a diff."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

# Stored form of MISSING in the JSON columns, distinct from null
MISSING_KEY = "__missing__"


def missing_marker() -> dict[str, bool]:
    return {MISSING_KEY: True}


def is_missing_marker(value: Any) -> bool:
    return isinstance(value, Mapping) and len(value) == 1 and value.get(MISSING_KEY) is True


@dataclass(frozen=True)
class SnapshotDiff:
    """Changed keys of a before/after pair, with the raw values from each side."""

    old_values: dict[str, Any] = field(default_factory=dict)
    new_values: dict[str, Any] = field(default_factory=dict)

    @property
    def changed_fields(self) -> list[str]:
        return list(self.new_values.keys())

    @property
    def is_empty(self) -> bool:
        return not self.new_values

    def to_payload(self) -> tuple[dict[str, Any], dict[str, Any]]:
        """JSON-ready (old_values, new_values); a missing side is stored as the missing marker."""
        return (
            {key: to_json_value(value) for key, value in self.old_values.items()},
            {key: to_json_value(value) for key, value in self.new_values.items()},
        )


def normalize_value(value: Any) -> Any:
    if value is MISSING:
        return MISSING
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return normalize_value(value.value)
    if isinstance(value, Mapping):
        return {str(k): normalize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((normalize_value(v) for v in value), key=repr)
    return value


def to_json_value(value: Any) -> Any:
    """Normalize for storage in a JSON column."""
    if value is MISSING:
        return missing_marker()
    return normalize_value(value)


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality over normalized snapshot values."""
    if left is MISSING or right is MISSING:
        return left is right
    if left is None or right is None:
        return left is right
    # bool is an int subclass; True and 1 are different values in a snapshot
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, float) and isinstance(right, float):
        if math.isnan(left) and math.isnan(right):
            return True
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if set(left.keys()) != set(right.keys()):
            return False
        return all(values_equal(left[key], right[key]) for key in left)
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    return bool(left == right)


def diff_snapshots(
    before: Mapping[str, Any] | None,
    after: Mapping[str, Any] | None,
) -> SnapshotDiff:
    """
    Compute the minimal field diff between two snapshots.

    Keys are visited in first-seen order (before, then keys only in after). A
    key present on one side only is recorded with MISSING on the other.
    """
    before = before or {}
    after = after or {}

    keys = list(before.keys())
    keys.extend(key for key in after.keys() if key not in before)

    old_values: dict[str, Any] = {}
    new_values: dict[str, Any] = {}
    for key in keys:
        old_value = before.get(key, MISSING)
        new_value = after.get(key, MISSING)
        if not values_equal(normalize_value(old_value), normalize_value(new_value)):
            old_values[key] = old_value
            new_values[key] = new_value

    return SnapshotDiff(old_values=old_values, new_values=new_values)


def apply_changes(snapshot: Mapping[str, Any], new_values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a copy of ``snapshot`` with ``new_values`` applied.

    MISSING, or its stored marker when replaying a persisted row, removes the key.
    """
    result = dict(snapshot)
    for key, value in new_values.items():
        if value is MISSING or is_missing_marker(value):
            result.pop(key, None)
        else:
            result[key] = value
    return result


_WORD_START_RE = re.compile(r"\b\w")


def humanize_field(field_name: str) -> str:
    """``"pickup_location"`` -> ``"Pickup Location"``."""
    return _WORD_START_RE.sub(lambda match: match.group(0).upper(), field_name.replace("_", " "))


def generate_field_summary(entity_type: str, changed_fields: list[str]) -> str:
    """Human-readable summary of an update from its changed field names."""
    if not changed_fields:
        return f"Updated {entity_type}"
    field_names = ", ".join(humanize_field(name) for name in changed_fields)
    return f"Updated {entity_type}: {field_names}"
