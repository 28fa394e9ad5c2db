"""Public interface for the ``transactions_view`` package.

Re-exports the view engine (pipeline, pagination, reducer), the store, the
data source adapter and the public models. There is no runtime logic here.
"""

from .api import TransactionsFetchError, fetch_transactions, parse_transactions_payload
from .compare import compare_records, compare_values
from .filters import matches
from .models import (
    SORT_KEYS,
    STATUS_OPTIONS,
    SortState,
    Transaction,
    TransactionFilters,
    Transactions,
)
from .pagination import PAGE_SIZE_OPTIONS, Page, clamp_page, paginate, total_pages
from .pipeline import apply_filters_and_sorting
from .state import TransactionsState, recompute_state, transactions_reducer
from .store import TransactionsStore, TransactionsView

__all__ = [
    # Engine
    "apply_filters_and_sorting",
    "compare_records",
    "compare_values",
    "matches",
    "paginate",
    "total_pages",
    "clamp_page",
    "recompute_state",
    "transactions_reducer",
    # Store / adapter
    "TransactionsStore",
    "TransactionsView",
    "TransactionsFetchError",
    "fetch_transactions",
    "parse_transactions_payload",
    # Models / types
    "PAGE_SIZE_OPTIONS",
    "SORT_KEYS",
    "STATUS_OPTIONS",
    "Page",
    "SortState",
    "Transaction",
    "TransactionFilters",
    "Transactions",
    "TransactionsState",
]
