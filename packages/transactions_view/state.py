"""Canonical view state and the pure reducer that evolves it.

Every action is a small frozen dataclass; :func:`transactions_reducer` maps
``(state, action)`` to a new :class:`TransactionsState`. All transitions that
touch records, filters, sort, page or page size go through
:func:`recompute_state`, which re-derives the filtered/sorted records and the
clamped page together so the two never drift apart.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Literal, TypeAlias

from .compare import NUMERIC_KEYS, TEMPORAL_KEYS, accessor_for
from .models import SortKey, SortState, Transaction, TransactionFilters
from .pagination import PAGE_SIZE_OPTIONS, clamp_page, total_pages
from .pipeline import apply_filters_and_sorting

RequestStatus = Literal["idle", "loading", "success", "error"]

DEFAULT_FILTERS = TransactionFilters()
DEFAULT_SORT = SortState(key="timestamp", direction="desc")
DEFAULT_PAGE_SIZE: int = PAGE_SIZE_OPTIONS[0]

_FILTER_FIELDS: frozenset[str] = frozenset(f.name for f in dataclasses.fields(TransactionFilters))

# Demo padding bounds (records); see expand_for_demo().
DEMO_MIN_ROWS = 120
DEMO_MAX_ROWS = 200


@dataclass(frozen=True, slots=True)
class TransactionsState:
    transactions: tuple[Transaction, ...] = ()
    filtered_transactions: tuple[Transaction, ...] = ()
    status: RequestStatus = "idle"
    error: str | None = None
    sort: SortState = DEFAULT_SORT
    filters: TransactionFilters = DEFAULT_FILTERS
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    last_fetched_at: str | None = None


def initial_state(*, page_size: int = DEFAULT_PAGE_SIZE) -> TransactionsState:
    return TransactionsState(page_size=page_size)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FetchStart:
    pass


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    transactions: Sequence[Transaction]
    # Pads small datasets for demos; see expand_for_demo().
    expand: bool = False
    fetched_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class FetchError:
    message: str


@dataclass(frozen=True, slots=True)
class ToggleSort:
    key: SortKey


@dataclass(frozen=True, slots=True)
class SetFilters:
    updates: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResetFilters:
    pass


@dataclass(frozen=True, slots=True)
class SetPage:
    page: int


@dataclass(frozen=True, slots=True)
class SetPageSize:
    page_size: int


TransactionsAction: TypeAlias = (
    FetchStart
    | FetchSuccess
    | FetchError
    | ToggleSort
    | SetFilters
    | ResetFilters
    | SetPage
    | SetPageSize
)


# ---------------------------------------------------------------------------
# Derivation helpers
# ---------------------------------------------------------------------------


def expand_for_demo(transactions: Sequence[Transaction]) -> list[Transaction]:
    """Pad a small dataset with shifted clones so pagination has something to do.

    Datasets with at least ``DEMO_MIN_ROWS`` records (and empty ones) are
    returned unchanged. Otherwise the result has ``min(200, max(120, 5 * n))``
    records: the originals followed by clones with ids ``<id>-R<i>-<j>`` (both
    1-based) whose timestamps are shifted forward by ``(i - 1) * 7 + j``
    minutes.
    """

    data = list(transactions)
    if len(data) >= DEMO_MIN_ROWS or not data:
        return data

    target = min(DEMO_MAX_ROWS, max(DEMO_MIN_ROWS, len(data) * 5))
    expanded = list(data)
    i = 0
    while len(expanded) < target:
        for index, tx in enumerate(data):
            if len(expanded) >= target:
                break
            offset = timedelta(minutes=i * 7 + index + 1)
            expanded.append(
                tx.model_copy(
                    update={
                        "id": f"{tx.id}-R{i + 1}-{index + 1}",
                        "timestamp": _shift_timestamp(tx.timestamp, offset),
                    }
                )
            )
        i += 1
    return expanded


def _shift_timestamp(value: str, offset: timedelta) -> str:
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    shifted = (dt + offset).astimezone(UTC)
    return shifted.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def recompute_state(state: TransactionsState, **overrides: Any) -> TransactionsState:
    """Apply ``overrides`` and re-derive filtered records and the clamped page."""

    if "filtered_transactions" in overrides:
        raise TypeError("filtered_transactions is derived and cannot be overridden")

    nxt = dataclasses.replace(state, **overrides)
    filtered = tuple(apply_filters_and_sorting(nxt.transactions, nxt.filters, nxt.sort))
    pages = total_pages(len(filtered), nxt.page_size)
    return dataclasses.replace(
        nxt,
        filtered_transactions=filtered,
        page=clamp_page(nxt.page, pages),
    )


def next_sort(current: SortState, key: SortKey) -> SortState:
    """Flip direction on the active key; otherwise select ``key`` with its default."""

    accessor_for(key)
    if current.key == key:
        return SortState(key=key, direction="desc" if current.direction == "asc" else "asc")
    descending_first = key in TEMPORAL_KEYS or key in NUMERIC_KEYS
    return SortState(key=key, direction="desc" if descending_first else "asc")


def merge_filters(current: TransactionFilters, updates: Mapping[str, Any]) -> TransactionFilters:
    unknown = set(updates) - _FILTER_FIELDS
    if unknown:
        raise ValueError(
            f"Unknown filter field(s): {sorted(unknown)}. Allowed: {sorted(_FILTER_FIELDS)}"
        )
    return dataclasses.replace(current, **dict(updates))


def _utc_now_iso(now: datetime | None = None) -> str:
    dt = now or datetime.now(UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def transactions_reducer(state: TransactionsState, action: TransactionsAction) -> TransactionsState:
    match action:
        case FetchStart():
            return dataclasses.replace(state, status="loading", error=None)
        case FetchSuccess(transactions=records, expand=expand, fetched_at=fetched_at):
            data = expand_for_demo(records) if expand else list(records)
            return recompute_state(
                state,
                transactions=tuple(data),
                status="success",
                error=None,
                page=1,
                last_fetched_at=_utc_now_iso(fetched_at),
            )
        case FetchError(message=message):
            return dataclasses.replace(state, status="error", error=message)
        case ToggleSort(key=key):
            return recompute_state(state, sort=next_sort(state.sort, key), page=1)
        case SetFilters(updates=updates):
            return recompute_state(state, filters=merge_filters(state.filters, updates), page=1)
        case ResetFilters():
            return recompute_state(state, filters=DEFAULT_FILTERS, page=1)
        case SetPage(page=page):
            return recompute_state(state, page=page)
        case SetPageSize(page_size=page_size):
            return recompute_state(state, page_size=page_size, page=1)
        case _:
            return state


__all__ = [
    "DEFAULT_FILTERS",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT",
    "FetchError",
    "FetchStart",
    "FetchSuccess",
    "RequestStatus",
    "ResetFilters",
    "SetFilters",
    "SetPage",
    "SetPageSize",
    "ToggleSort",
    "TransactionsAction",
    "TransactionsState",
    "expand_for_demo",
    "initial_state",
    "merge_filters",
    "next_sort",
    "recompute_state",
    "transactions_reducer",
]
