from datetime import date
from decimal import Decimal

import pytest
from audit.values import canonical_json, deserialize_value, serialize_value, to_snapshot
from common.choices import SnapshotKind
from common.exceptions import ValidationError


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "Fast turnaround",
        "null",
        True,
        False,
        0,
        -7,
        10**20,
        Decimal("100.00"),
        Decimal("1E+3"),
        Decimal("0.10"),
        0.1,
        1e-7,
        {"pages": 10, "tags": ["essay", "apa"], "rush": None},
        [1, "two", {"three": 3}],
    ],
)
def test_snapshot_round_trip(value):
    snap = to_snapshot(value)
    restored = deserialize_value(snap.text, snap.kind)
    assert restored == value
    assert type(restored) is type(value)


def test_null_is_stored_as_null_not_text():
    snap = to_snapshot(None)
    assert snap.kind == SnapshotKind.NULL
    assert snap.text is None
    assert serialize_value(None) is None
    # The literal string "null" is text, and decodes back to text
    assert to_snapshot("null").kind == SnapshotKind.TEXT
    assert deserialize_value("null", SnapshotKind.TEXT) == "null"


def test_structured_values_are_canonical():
    a = serialize_value({"b": 1, "a": {"y": 2, "x": 1}})
    b = serialize_value({"a": {"x": 1, "y": 2}, "b": 1})
    assert a == b == '{"a":{"x":1,"y":2},"b":1}'
    assert canonical_json([{"b": 1, "a": 2}]) == '[{"a":2,"b":1}]'


@pytest.mark.parametrize(
    "value",
    [
        {"price": Decimal("9.50")},
        [date(2024, 5, 1)],
        {1: "one"},
        {"nested": {"ratio": float("nan")}},
        (1, 2),
        {"tags": {"a", "b"}},
    ],
)
def test_structured_values_must_be_json_native(value):
    with pytest.raises(ValidationError):
        to_snapshot(value)


def test_nested_structures_keep_types():
    value = {"pages": 12, "ratio": 0.25, "rush": True, "big": 10**20, "notes": ["a", None, {"x": -1.5}]}
    snap = to_snapshot(value)
    assert snap.kind == SnapshotKind.STRUCTURED
    restored = deserialize_value(snap.text, snap.kind)
    assert restored == value
    assert type(restored["ratio"]) is float and type(restored["pages"]) is int
    assert restored["rush"] is True


def test_other_types_are_coerced_to_text():
    snap = to_snapshot(date(2024, 5, 1))
    assert snap.kind == SnapshotKind.TEXT
    assert snap.text == "2024-05-01"


def test_unknown_kind_raises():
    with pytest.raises(ValueError):
        deserialize_value("x", "mystery")
