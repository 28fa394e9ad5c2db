"""Type-aware ordering of transaction fields.

Ordering rules by field kind:

- numeric (``amount``): compared as floats; non-numeric input is coerced with
  ``float()``.
- temporal (``timestamp``, ``settlement_date``): compared as seconds since the
  epoch parsed from the ISO-8601 string. Naive values are taken as UTC, so a
  bare date means midnight UTC.
- everything else: case-insensitive lexicographic comparison.

Values that cannot be parsed as a number or instant (``NaN``, garbage,
missing) always sort after parseable values, in both directions, and compare
equal to each other. Equal values return ``0`` so that a stable sort keeps
input order.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from types import MappingProxyType
from typing import Any

from .models import SortDirection, SortKey, SortState, Transaction

SORT_ACCESSORS: Mapping[SortKey, Callable[[Transaction], Any]] = MappingProxyType(
    {
        "id": lambda t: t.id,
        "asset": lambda t: t.asset,
        "type": lambda t: t.type,
        "status": lambda t: t.status,
        "amount": lambda t: t.amount,
        "counterparty": lambda t: t.counterparty,
        "timestamp": lambda t: t.timestamp,
        "settlement_date": lambda t: t.settlement_date,
    }
)

NUMERIC_KEYS: frozenset[SortKey] = frozenset({"amount"})
TEMPORAL_KEYS: frozenset[SortKey] = frozenset({"timestamp", "settlement_date"})


def accessor_for(key: SortKey) -> Callable[[Transaction], Any]:
    try:
        return SORT_ACCESSORS[key]
    except KeyError:
        raise ValueError(
            f"Unsupported sort key: {key!r}. Allowed: {sorted(SORT_ACCESSORS)}"
        ) from None


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(n) else n


def _to_epoch(value: Any) -> float | None:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp()


def _cmp(a: float | str, b: float | str) -> int:
    return (a > b) - (a < b)


def _compare_parsed(a: float | None, b: float | None, modifier: int) -> int:
    # Unparsable values sink to the end regardless of direction.
    if a is None or b is None:
        return (a is None) - (b is None)
    return _cmp(a, b) * modifier


def compare_values(a: Any, b: Any, key: SortKey, direction: SortDirection) -> int:
    """Return negative/zero/positive ordering of ``a`` and ``b`` for ``key``."""

    accessor_for(key)
    modifier = 1 if direction == "asc" else -1

    if key in NUMERIC_KEYS:
        return _compare_parsed(_to_number(a), _to_number(b), modifier)

    if key in TEMPORAL_KEYS:
        return _compare_parsed(_to_epoch(a), _to_epoch(b), modifier)

    return _cmp(str(a).casefold(), str(b).casefold()) * modifier


def compare_records(a: Transaction, b: Transaction, sort: SortState) -> int:
    """Compare two records on the field and direction selected by ``sort``."""

    get = accessor_for(sort.key)
    return compare_values(get(a), get(b), sort.key, sort.direction)


__all__ = [
    "NUMERIC_KEYS",
    "SORT_ACCESSORS",
    "TEMPORAL_KEYS",
    "accessor_for",
    "compare_records",
    "compare_values",
]
