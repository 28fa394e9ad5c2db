"""Record matching against the criteria in :class:`TransactionFilters`."""

from __future__ import annotations

from .models import ALL, Transaction, TransactionFilters


def build_haystack(transaction: Transaction) -> str:
    """Return the casefolded text that free-text search is matched against."""

    return " ".join(
        (
            transaction.id,
            transaction.asset,
            transaction.type,
            transaction.counterparty,
            transaction.status,
        )
    ).casefold()


def normalize_search(search: str) -> str:
    return search.strip().casefold()


def matches(transaction: Transaction, filters: TransactionFilters) -> bool:
    """Return ``True`` when ``transaction`` satisfies every active criterion.

    An empty (or whitespace-only) search always matches.
    """

    if filters.status != ALL and transaction.status != filters.status:
        return False
    if filters.asset != ALL and transaction.asset != filters.asset:
        return False

    needle = normalize_search(filters.search)
    if not needle:
        return True
    return needle in build_haystack(transaction)


__all__ = ["build_haystack", "matches", "normalize_search"]
