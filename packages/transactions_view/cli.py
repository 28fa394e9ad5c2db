"""CLI for the ``transactions_view`` package.

Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before any command runs (existing variables win). The
commands are thin: they build a :class:`TransactionsStore` from settings,
drive it, and render its read model.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from .logging_setup import configure_logging, resolve_level
from .models import SORT_KEYS, STATUS_OPTIONS, SortKey
from .settings import Settings, load_settings
from .store import TransactionsStore
from .table_view import render_transactions

app = typer.Typer(
    name="transactions-view",
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Browse transaction records from a transactions endpoint: filter, sort "
        "and page through them in the terminal. Loads settings from a local .env."
    ),
)
console = Console()


# ---- Small module-level helpers used by CLI commands -------------------------


def _build_store(url: str | None, demo: bool | None, page_size: int | None) -> TransactionsStore:
    base = load_settings()
    settings = Settings(
        api_url=url or base.api_url,
        page_size=page_size or base.page_size,
        demo_expand=base.demo_expand if demo is None else demo,
        http_timeout=base.http_timeout,
        log_level=base.log_level,
    )
    return TransactionsStore.from_settings(settings)


def _canonical_status(raw: str) -> str:
    canonical = {s.lower(): s for s in STATUS_OPTIONS}
    try:
        return canonical[raw.strip().lower()]
    except KeyError:
        raise typer.BadParameter(
            f"Unknown status {raw!r}. Choose from: {', '.join(STATUS_OPTIONS)}"
        ) from None


def _apply_sort(store: TransactionsStore, key: SortKey, direction: str | None) -> None:
    # Toggling selects the key with its default direction; toggle again to flip.
    if store.state.sort.key != key:
        store.toggle_sort(key)
    if direction is not None and store.state.sort.direction != direction:
        store.toggle_sort(key)


async def _show(
    store: TransactionsStore,
    *,
    status: str,
    asset: str,
    search: str,
    sort: SortKey | None,
    direction: str | None,
    page: int,
) -> None:
    await store.load()
    if store.state.status != "success":
        return
    store.set_filters(status=status, asset=asset, search=search)
    if sort is not None:
        _apply_sort(store, sort, direction)
    store.set_page(page)


# ---- Typer commands -----------------------------------------------------------


@app.command("show")
def show_cmd(
    url: Annotated[str | None, typer.Option(help="Override TXVIEW_API_URL.")] = None,
    status: Annotated[str, typer.Option(help="Status filter (All/Completed/Pending/Failed).")] = "All",
    asset: Annotated[str, typer.Option(help="Asset filter (symbol or All).")] = "All",
    search: Annotated[str, typer.Option(help="Free-text search over id/asset/type/counterparty/status.")] = "",
    sort: Annotated[str | None, typer.Option(help=f"Sort column: {', '.join(SORT_KEYS)}.")] = None,
    direction: Annotated[str | None, typer.Option(help="Sort direction: asc or desc.")] = None,
    page: Annotated[int, typer.Option(min=1, help="Page to show (clamped to the last page).")] = 1,
    page_size: Annotated[int | None, typer.Option(min=1, help="Rows per page.")] = None,
    demo: Annotated[
        bool | None, typer.Option("--demo/--no-demo", help="Pad small datasets with synthetic rows.")
    ] = None,
) -> None:
    """Fetch once and print a single page of transactions."""

    status_value = _canonical_status(status)
    if sort is not None and sort not in SORT_KEYS:
        raise typer.BadParameter(f"Unknown sort column {sort!r}. Choose from: {', '.join(SORT_KEYS)}")
    if direction is not None and direction not in {"asc", "desc"}:
        raise typer.BadParameter("direction must be 'asc' or 'desc'")

    store = _build_store(url, demo, page_size)
    asyncio.run(
        _show(
            store,
            status=status_value,
            asset=asset,
            search=search,
            sort=sort,  # type: ignore[arg-type]
            direction=direction,
            page=page,
        )
    )
    render_transactions(store.view(), console)
    if store.state.status == "error":
        raise typer.Exit(1)


@app.command("browse")
def browse_cmd(
    url: Annotated[str | None, typer.Option(help="Override TXVIEW_API_URL.")] = None,
    page_size: Annotated[int | None, typer.Option(min=1, help="Initial rows per page.")] = None,
    demo: Annotated[
        bool | None, typer.Option("--demo/--no-demo", help="Pad small datasets with synthetic rows.")
    ] = None,
) -> None:
    """Open the interactive browser (type 'help' at the prompt)."""

    from .term_ui import run_browser  # deferred: prompt_toolkit startup cost

    store = _build_store(url, demo, page_size)
    asyncio.run(run_browser(store, console=console))


@app.callback()
def _root(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Log level (overrides TXVIEW_LOG_LEVEL).")
    ] = None,
) -> None:
    """Root command: load ``.env`` and set up logging before any subcommand."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    level = load_settings().log_level
    if log_level is not None:
        try:
            level = resolve_level(log_level)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--log-level") from None
    configure_logging(level)


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
