"""Interactive terminal browser (prompt_toolkit-based).

A small command prompt on top of :class:`TransactionsStore`. Parsing is kept
separate from the prompt loop (:func:`parse_command` is pure) so commands are
easy to test without a terminal.

Commands
--------
``sort <column>``     toggle sort on a column (same column flips direction)
``status <value>``    filter by status (All/Completed/Pending/Failed)
``asset <symbol>``    filter by asset symbol (``All`` clears)
``search [text]``     free-text search; no text clears it
``reset``             restore default filters
``page <n>``, ``next``, ``prev``
``size <n>``          rows per page
``retry``             fetch again
``help``, ``quit``
"""

from __future__ import annotations

from dataclasses import dataclass

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter
from rich.console import Console

from .logging_setup import get_logger
from .models import SORT_KEYS, STATUS_OPTIONS, SortKey
from .pagination import PAGE_SIZE_OPTIONS
from .store import TransactionsStore, TransactionsView
from .table_view import render_transactions

COMMANDS: tuple[str, ...] = (
    "sort",
    "status",
    "asset",
    "search",
    "reset",
    "page",
    "next",
    "prev",
    "size",
    "retry",
    "help",
    "quit",
)

_NO_ARG = frozenset({"reset", "next", "prev", "retry", "help", "quit"})
_ALIASES = {"exit": "quit", "q": "quit", "n": "next", "p": "prev", "?": "help"}
# Wire-style column names accepted by ``sort``.
_SORT_ALIASES: dict[str, SortKey] = {"settlementdate": "settlement_date", "settlement": "settlement_date"}

HELP_TEXT = (
    "sort <column> | status <value> | asset <symbol> | search [text] | reset | "
    "page <n> | next | prev | size <n> | retry | quit\n"
    f"columns: {', '.join(SORT_KEYS)}"
)

_logger = get_logger("transactions_view.term_ui")


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    arg: str = ""


def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} expects a number, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} expects a positive number")
    return value


def parse_command(text: str) -> Command:
    """Parse one line of input into a :class:`Command`.

    Raises ``ValueError`` with a user-facing message for unknown commands or
    bad arguments.
    """

    stripped = text.strip()
    if not stripped:
        raise ValueError("Empty command. Type 'help' for the command list.")
    head, _, rest = stripped.partition(" ")
    name = _ALIASES.get(head.lower(), head.lower())
    arg = rest.strip()

    if name not in COMMANDS:
        raise ValueError(f"Unknown command {head!r}. Type 'help' for the command list.")
    if name in _NO_ARG:
        return Command(name)

    if name == "sort":
        key = _SORT_ALIASES.get(arg.lower(), arg.lower())
        if key not in SORT_KEYS:
            raise ValueError(f"Unknown column {arg!r}. Columns: {', '.join(SORT_KEYS)}")
        return Command(name, key)
    if name == "status":
        canonical = {s.lower(): s for s in STATUS_OPTIONS}
        if arg.lower() not in canonical:
            raise ValueError(f"Unknown status {arg!r}. Choose from: {', '.join(STATUS_OPTIONS)}")
        return Command(name, canonical[arg.lower()])
    if name == "asset":
        if not arg:
            raise ValueError("asset expects a symbol (or 'All')")
        return Command(name, arg)
    if name in {"page", "size"}:
        return Command(name, str(_parse_positive_int(name, arg)))
    # search: the remainder verbatim, possibly empty
    return Command(name, rest.strip())


def _resolve_asset(view: TransactionsView, raw: str) -> str:
    for option in view.asset_options:
        if option.lower() == raw.lower():
            return option
    raise ValueError(
        f"Unknown asset {raw!r}. Choose from: {', '.join(view.asset_options)}"
    )


def apply_command(store: TransactionsStore, command: Command) -> None:
    """Apply a synchronous command to ``store``.

    ``retry``, ``help`` and ``quit`` are handled by the prompt loop.
    """

    view = store.view()
    match command.name:
        case "sort":
            store.toggle_sort(command.arg)  # type: ignore[arg-type]
        case "status":
            store.set_filters(status=command.arg)
        case "asset":
            store.set_filters(asset=_resolve_asset(view, command.arg))
        case "search":
            store.set_filters(search=command.arg)
        case "reset":
            store.reset_filters()
        case "page":
            store.set_page(int(command.arg))
        case "next":
            store.set_page(view.page + 1)
        case "prev":
            store.set_page(view.page - 1)
        case "size":
            store.set_page_size(int(command.arg))
        case _:
            raise ValueError(f"Command {command.name!r} is not a store mutation")


def _completer(view: TransactionsView) -> NestedCompleter:
    return NestedCompleter.from_nested_dict(
        {
            "sort": {k: None for k in SORT_KEYS},
            "status": {s: None for s in STATUS_OPTIONS},
            "asset": {a: None for a in view.asset_options},
            "size": {str(n): None for n in PAGE_SIZE_OPTIONS},
            **{c: None for c in COMMANDS if c not in {"sort", "status", "asset", "size"}},
        }
    )


async def run_browser(
    store: TransactionsStore,
    *,
    session: PromptSession | None = None,
    console: Console | None = None,
) -> None:
    """Load transactions and run the command prompt until ``quit`` or EOF."""

    out = console or Console()
    if session is None:
        sess: PromptSession = PromptSession()
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
        )

    try:
        await store.load()
        while True:
            view = store.view()
            render_transactions(view, out)
            try:
                text = await sess.prompt_async("transactions> ", completer=_completer(view))
            except (EOFError, KeyboardInterrupt):
                break
            if not text.strip():
                continue
            try:
                command = parse_command(text)
            except ValueError as e:
                out.print(str(e), style="red", markup=False)
                continue

            if command.name == "quit":
                break
            if command.name == "help":
                out.print(HELP_TEXT, markup=False)
                continue
            if command.name == "retry":
                await store.load()
                continue
            try:
                apply_command(store, command)
            except ValueError as e:
                out.print(str(e), style="red", markup=False)
    finally:
        store.close()
        _logger.debug("Browser closed")


__all__ = ["COMMANDS", "Command", "HELP_TEXT", "apply_command", "parse_command", "run_browser"]
