"""Data models and type aliases for ``transactions_view``.

The transaction record mirrors the JSON served by the transactions endpoint
(camelCase ``settlementDate`` on the wire, snake_case in Python). Filter and
sort settings are small frozen dataclasses so that state snapshots can
be compared by value.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Literal, TypeAlias

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enumerations (closed literal sets)
# ---------------------------------------------------------------------------

TransactionStatus = Literal["Completed", "Pending", "Failed"]
TransactionType = Literal["Trade", "Settlement", "Transfer", "Custody"]
StatusFilter = Literal["All", "Completed", "Pending", "Failed"]
SortKey = Literal[
    "id",
    "asset",
    "type",
    "status",
    "amount",
    "counterparty",
    "timestamp",
    "settlement_date",
]
SortDirection = Literal["asc", "desc"]

ALL: Final = "All"

SORT_KEYS: tuple[SortKey, ...] = (
    "id",
    "asset",
    "type",
    "status",
    "amount",
    "counterparty",
    "timestamp",
    "settlement_date",
)

STATUS_OPTIONS: tuple[StatusFilter, ...] = ("All", "Completed", "Pending", "Failed")


# ---------------------------------------------------------------------------
# Core record
# ---------------------------------------------------------------------------


class Transaction(BaseModel):
    """A single transaction row as served by the transactions endpoint.

    ``timestamp`` and ``settlement_date`` are kept as the ISO-8601 strings
    received on the wire; ordering code parses them on demand.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    asset: str
    type: TransactionType
    status: TransactionStatus
    amount: float = Field(ge=0)
    counterparty: str
    timestamp: str
    settlement_date: str = Field(
        validation_alias=AliasChoices("settlementDate", "settlement_date"),
        serialization_alias="settlementDate",
    )

    @field_validator("id", "asset")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be non-empty")
        return v


Transactions: TypeAlias = Sequence[Transaction]
"""An ordered collection of transaction records."""


# ---------------------------------------------------------------------------
# View criteria
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionFilters:
    """Active filter criteria.

    ``asset`` is either ``"All"`` or one of the asset symbols observed in the
    loaded records; it is not validated against that set.
    """

    status: StatusFilter = "All"
    asset: str = ALL
    search: str = ""


@dataclass(frozen=True, slots=True)
class SortState:
    key: SortKey
    direction: SortDirection


__all__ = [
    "ALL",
    "SORT_KEYS",
    "STATUS_OPTIONS",
    "SortDirection",
    "SortKey",
    "SortState",
    "StatusFilter",
    "Transaction",
    "TransactionFilters",
    "TransactionStatus",
    "TransactionType",
    "Transactions",
]
