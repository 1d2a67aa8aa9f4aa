"""Snapshot codec for audited field values.

Old and new values are modelled as a closed tagged union. Each variant has one
canonical text form, and the tag is stored next to the text so the value can be
decoded back exactly:

- ``null``: stored as NULL, never as the string ``"null"``
- ``text``: the string verbatim
- ``boolean``: ``"true"`` / ``"false"``
- ``integer``: ``str(int)``
- ``decimal``: ``str(Decimal)``, preserving exponent and trailing zeros
- ``float``: ``repr(float)``
- ``structured``: JSON with sorted keys and compact separators. Only JSON-native
  content is accepted (dicts with string keys, lists, strings, ints, finite
  floats, booleans, None) so that decoding reproduces the value exactly.

Any other scalar type is coerced to its string form under ``text``.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from common.choices import SnapshotKind
from common.exceptions import ValidationError


@dataclass(frozen=True)
class Snapshot:
    kind: str
    text: Optional[str]


def _require_json_native(value: Any) -> None:
    if value is None or isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError("Structured values cannot hold NaN or infinity", field="value")
        return
    if isinstance(value, list):
        for item in value:
            _require_json_native(item)
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValidationError("Structured value keys must be strings", field="value")
            _require_json_native(item)
        return
    raise ValidationError(f"Unsupported type in structured value: {type(value).__name__}", field="value")


def canonical_json(value: Any) -> str:
    """Stable JSON text so that two snapshots of equal structures compare equal."""

    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def to_snapshot(value: Any) -> Snapshot:
    if value is None:
        return Snapshot(SnapshotKind.NULL, None)
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Snapshot(SnapshotKind.BOOLEAN, "true" if value else "false")
    if isinstance(value, int):
        return Snapshot(SnapshotKind.INTEGER, str(value))
    if isinstance(value, Decimal):
        return Snapshot(SnapshotKind.DECIMAL, str(value))
    if isinstance(value, float):
        return Snapshot(SnapshotKind.FLOAT, repr(value))
    if isinstance(value, (dict, list)):
        _require_json_native(value)
        return Snapshot(SnapshotKind.STRUCTURED, canonical_json(value))
    if isinstance(value, (tuple, set, frozenset)):
        raise ValidationError("Structured values must be a mapping or a list", field="value")
    if isinstance(value, str):
        return Snapshot(SnapshotKind.TEXT, value)
    return Snapshot(SnapshotKind.TEXT, str(value))


def serialize_value(value: Any) -> Optional[str]:
    """Return the stored text form of `value` (None for null)."""

    return to_snapshot(value).text


def deserialize_value(text: Optional[str], kind: str) -> Any:
    """Inverse of `to_snapshot`; exact for every variant except coerced text."""

    if kind == SnapshotKind.NULL or text is None:
        return None
    if kind == SnapshotKind.TEXT:
        return text
    if kind == SnapshotKind.BOOLEAN:
        return text == "true"
    if kind == SnapshotKind.INTEGER:
        return int(text)
    if kind == SnapshotKind.DECIMAL:
        return Decimal(text)
    if kind == SnapshotKind.FLOAT:
        return float(text)
    if kind == SnapshotKind.STRUCTURED:
        return json.loads(text)
    raise ValueError(f"Unknown snapshot kind: {kind}")
