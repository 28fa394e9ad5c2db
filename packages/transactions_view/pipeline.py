"""The view pipeline: filter, then stable-sort.

``apply_filters_and_sorting`` is pure. It never mutates its input and returns
a new list, so identical inputs always give identical output order.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import cmp_to_key

from .compare import accessor_for, compare_records
from .filters import matches
from .models import SortState, Transaction, TransactionFilters


def sort_transactions(transactions: Iterable[Transaction], sort: SortState) -> list[Transaction]:
    """Return ``transactions`` ordered by ``sort``; equal keys keep input order."""

    accessor_for(sort.key)
    # sorted() is stable and compare_records() returns 0 for equal keys.
    return sorted(transactions, key=cmp_to_key(lambda a, b: compare_records(a, b, sort)))


def apply_filters_and_sorting(
    transactions: Iterable[Transaction],
    filters: TransactionFilters,
    sort: SortState,
) -> list[Transaction]:
    """Filter ``transactions`` by ``filters`` and order the survivors by ``sort``."""

    return sort_transactions((tx for tx in transactions if matches(tx, filters)), sort)


__all__ = ["apply_filters_and_sorting", "sort_transactions"]
