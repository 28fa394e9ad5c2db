"""Rich rendering of a :class:`~transactions_view.store.TransactionsView`.

Pure presentation: everything shown comes from the read model. Times are
rendered in UTC.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import SortKey, Transaction
from .store import TransactionsView

TITLE = "Digital Asset Transactions"
SUBTITLE = "Monitor trade lifecycle activity across digital assets."

_STATUS_STYLES = {"Completed": "green", "Pending": "yellow", "Failed": "red"}


def format_currency(amount: float) -> str:
    return f"-${abs(amount):,.2f}" if amount < 0 else f"${amount:,.2f}"


def _parse_instant(value: str) -> datetime | None:
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_date(value: str) -> str:
    """``2024-01-03`` -> ``Jan 3, 2024``; unparsable input is returned as-is."""

    dt = _parse_instant(value)
    if dt is None:
        return value
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_datetime(value: str) -> str:
    """``2024-01-03T14:05:00Z`` -> ``Jan 3, 2024, 2:05 PM``."""

    dt = _parse_instant(value)
    if dt is None:
        return value
    hour = dt.hour % 12 or 12
    return f"{format_date(value)}, {hour}:{dt:%M} {dt:%p}"


@dataclass(frozen=True, slots=True)
class Column:
    key: SortKey
    label: str
    render: Callable[[Transaction], str]
    justify: str = "left"


COLUMNS: tuple[Column, ...] = (
    Column("id", "Transaction ID", lambda t: t.id),
    Column("asset", "Asset", lambda t: t.asset),
    Column("type", "Type", lambda t: t.type),
    Column("status", "Status", lambda t: t.status),
    Column("amount", "Amount", lambda t: format_currency(t.amount), justify="right"),
    Column("counterparty", "Counterparty", lambda t: t.counterparty),
    Column("timestamp", "Trade Time", lambda t: format_datetime(t.timestamp)),
    Column("settlement_date", "Settlement Date", lambda t: format_date(t.settlement_date)),
)


def empty_message(view: TransactionsView) -> str:
    if view.status == "loading":
        return "Loading transactions..."
    if view.status == "error":
        return "Unable to load transactions"
    return "No transactions match your filters"


def build_table(view: TransactionsView) -> Table:
    table = Table(title=TITLE, caption=SUBTITLE, expand=False, show_lines=False)
    for col in COLUMNS:
        header = col.label
        if view.sort.key == col.key:
            header += " ▲" if view.sort.direction == "asc" else " ▼"
        table.add_column(header, justify=col.justify, no_wrap=True)

    for tx in view.transactions:
        cells: list[RenderableType] = []
        for col in COLUMNS:
            text = col.render(tx)
            style = _STATUS_STYLES.get(text, "") if col.key == "status" else ""
            # Record fields are data, never markup.
            cells.append(Text(text, style=style))
        table.add_row(*cells)
    return table


def build_toolbar(view: TransactionsView) -> Text:
    f = view.filters
    search = f.search if f.search else "-"
    return Text(
        f"Status: {f.status}  Asset: {f.asset}  Search: {search}  "
        f"Rows per page: {view.page_size}  {view.total:,} transactions",
        style="dim",
    )


def build_footer(view: TransactionsView) -> Text:
    return Text(
        f"Showing {view.first_row}-{view.last_row} of {view.total:,}  "
        f"Page {view.page} of {view.total_pages}"
    )


def build_error_panel(view: TransactionsView) -> Panel:
    body = Text(view.error or "An unexpected error occurred.")
    body.append("\nType 'retry' to try again.", style="dim")
    return Panel(body, title=TITLE, border_style="red")


def build_renderable(view: TransactionsView) -> RenderableType:
    if view.status == "error":
        return build_error_panel(view)
    if not view.transactions:
        return Group(build_toolbar(view), Text(empty_message(view), style="italic"))
    if view.status == "loading":
        # A refetch is running; the rows shown are from the previous fetch.
        return Group(
            build_toolbar(view),
            Text(empty_message(view), style="italic"),
            build_table(view),
            build_footer(view),
        )
    return Group(build_toolbar(view), build_table(view), build_footer(view))


def render_transactions(view: TransactionsView, console: Console | None = None) -> None:
    (console or Console()).print(build_renderable(view))


__all__ = [
    "COLUMNS",
    "Column",
    "build_error_panel",
    "build_renderable",
    "build_table",
    "empty_message",
    "format_currency",
    "format_date",
    "format_datetime",
    "render_transactions",
]
