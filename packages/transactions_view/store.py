"""State owner for a transactions view session.

``TransactionsStore`` is the single mutator of :class:`TransactionsState`.
Every mutation runs through :func:`transactions_reducer` and swaps the state
in one assignment, then notifies subscribers. Display code reads
:meth:`TransactionsStore.view` and calls the mutation methods; it keeps no
view logic of its own.

Loading follows "latest request wins": each :meth:`load` gets a sequence
number, starting a new load cancels the previous in-flight fetch, and a load
whose number is no longer current emits neither success nor error.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from .api import fetch_transactions
from .logging_setup import get_logger
from .models import STATUS_OPTIONS, SortKey, SortState, StatusFilter, Transaction, TransactionFilters
from .pagination import paginate, row_range
from .settings import Settings
from .state import (
    DEFAULT_PAGE_SIZE,
    FetchError,
    FetchStart,
    FetchSuccess,
    RequestStatus,
    ResetFilters,
    SetFilters,
    SetPage,
    SetPageSize,
    ToggleSort,
    TransactionsAction,
    TransactionsState,
    initial_state,
    transactions_reducer,
)

Fetcher: TypeAlias = Callable[[], Awaitable[Sequence[Transaction]]]
Listener: TypeAlias = Callable[[TransactionsState], None]

_logger = get_logger("transactions_view.store")


@dataclass(frozen=True, slots=True)
class TransactionsView:
    """Read model consumed by display code."""

    status: RequestStatus
    error: str | None
    sort: SortState
    filters: TransactionFilters
    page: int
    page_size: int
    total: int
    total_pages: int
    transactions: tuple[Transaction, ...]
    asset_options: tuple[str, ...]
    status_options: tuple[StatusFilter, ...]
    first_row: int
    last_row: int
    last_fetched_at: str | None


def build_view(state: TransactionsState) -> TransactionsView:
    """Project ``state`` onto the read model shown to the user."""

    total = len(state.filtered_transactions)
    page = paginate(state.filtered_transactions, state.page, state.page_size)
    first_row, last_row = row_range(state.page, state.page_size, total)
    assets = sorted({tx.asset for tx in state.transactions}, key=lambda a: (a.casefold(), a))
    return TransactionsView(
        status=state.status,
        error=state.error,
        sort=state.sort,
        filters=state.filters,
        page=state.page,
        page_size=state.page_size,
        total=total,
        total_pages=max(1, page.total_pages),
        transactions=tuple(page.rows),
        asset_options=("All", *assets),
        status_options=STATUS_OPTIONS,
        first_row=first_row,
        last_row=last_row,
        last_fetched_at=state.last_fetched_at,
    )


class TransactionsStore:
    """Owns the canonical state and the fetch lifecycle for one session."""

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        demo_expand: bool = False,
    ) -> None:
        self._fetcher = fetcher
        self._demo_expand = demo_expand
        self._state = initial_state(page_size=page_size)
        self._listeners: list[Listener] = []
        self._seq = 0
        self._inflight: asyncio.Future[Sequence[Transaction]] | None = None
        # Strong references to loads scheduled by refetch().
        self._scheduled: set[asyncio.Task[None]] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> TransactionsStore:
        fetcher = functools.partial(
            fetch_transactions, settings.api_url, timeout=settings.http_timeout
        )
        return cls(fetcher, page_size=settings.page_size, demo_expand=settings.demo_expand)

    # ------------------------------------------------------------------
    # State access and observers
    # ------------------------------------------------------------------

    @property
    def state(self) -> TransactionsState:
        return self._state

    def view(self) -> TransactionsView:
        return build_view(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: TransactionsAction) -> TransactionsState:
        nxt = transactions_reducer(self._state, action)
        if nxt is self._state:
            return nxt
        self._state = nxt
        for listener in list(self._listeners):
            listener(nxt)
        return nxt

    # ------------------------------------------------------------------
    # User mutations
    # ------------------------------------------------------------------

    def toggle_sort(self, key: SortKey) -> None:
        self.dispatch(ToggleSort(key))

    def set_filters(self, **updates: Any) -> None:
        self.dispatch(SetFilters(updates))

    def reset_filters(self) -> None:
        self.dispatch(ResetFilters())

    def set_page(self, page: int) -> None:
        self.dispatch(SetPage(page))

    def set_page_size(self, page_size: int) -> None:
        self.dispatch(SetPageSize(page_size))

    # ------------------------------------------------------------------
    # Fetch lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Run one fetch cycle, superseding any load still in flight."""

        self._seq += 1
        seq = self._seq
        if self._inflight is not None and not self._inflight.done():
            _logger.debug("Load #%d supersedes an in-flight fetch", seq)
            self._inflight.cancel()

        self.dispatch(FetchStart())
        _logger.debug("Load #%d started", seq)
        inflight = asyncio.ensure_future(self._fetcher())
        self._inflight = inflight
        try:
            records = await inflight
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            _logger.debug("Load #%d cancelled", seq)
            return
        except Exception as e:  # noqa: BLE001 - surfaced to the user as FetchError
            if seq != self._seq:
                _logger.debug("Discarding failure of superseded load #%d", seq)
                return
            message = str(e) or "Unknown error"
            _logger.warning("Fetching transactions failed: %s", message)
            self.dispatch(FetchError(message))
            return
        finally:
            if self._inflight is inflight:
                self._inflight = None

        if seq != self._seq:
            _logger.debug("Discarding result of superseded load #%d", seq)
            return
        _logger.info("Fetched %d transactions", len(records))
        self.dispatch(FetchSuccess(records, expand=self._demo_expand))

    def refetch(self) -> asyncio.Task[None]:
        """Schedule :meth:`load` on the running loop (the retry action)."""

        task = asyncio.get_running_loop().create_task(self.load())
        self._scheduled.add(task)
        task.add_done_callback(self._scheduled.discard)
        return task

    def close(self) -> None:
        """Abandon any in-flight fetch; its load emits no transition."""

        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        for task in list(self._scheduled):
            task.cancel()


__all__ = ["Fetcher", "TransactionsStore", "TransactionsView", "build_view"]
