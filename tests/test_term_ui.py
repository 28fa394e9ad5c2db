import asyncio
import contextlib
import io

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput
from rich.console import Console

from transactions_view.api import TransactionsFetchError
from transactions_view.models import SortState, TransactionFilters
from transactions_view.store import TransactionsStore
from transactions_view.term_ui import Command, apply_command, parse_command, run_browser

from tests.helpers.records import ScriptedFetcher, build_dataset, sample_transactions


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, record=True, color_system=None)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("sort amount", Command("sort", "amount")),
        ("SORT settlementDate", Command("sort", "settlement_date")),
        ("status pending", Command("status", "Pending")),
        ("asset eth", Command("asset", "eth")),
        ("search  Desk 4 ", Command("search", "Desk 4")),
        ("search", Command("search", "")),
        ("page 3", Command("page", "3")),
        ("size 25", Command("size", "25")),
        ("n", Command("next")),
        ("q", Command("quit")),
    ],
)
def test_parse_command(text, expected):
    assert parse_command(text) == expected


@pytest.mark.parametrize("text", ["", "frobnicate", "sort colour", "status Settled", "page zero", "size 0", "asset"])
def test_parse_command_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_command(text)


def test_apply_command_drives_the_store():
    store = TransactionsStore(ScriptedFetcher(build_dataset()))
    asyncio.run(store.load())

    apply_command(store, parse_command("asset sol"))
    assert store.view().filters == TransactionFilters(asset="SOL")

    apply_command(store, parse_command("next"))
    apply_command(store, parse_command("next"))
    apply_command(store, parse_command("prev"))
    assert store.view().page == 2

    apply_command(store, parse_command("sort amount"))
    assert store.view().sort == SortState("amount", "desc")
    assert store.view().page == 1

    apply_command(store, parse_command("reset"))
    assert store.view().filters == TransactionFilters()


def test_apply_command_rejects_unknown_asset():
    store = TransactionsStore(ScriptedFetcher(sample_transactions()))
    asyncio.run(store.load())
    with pytest.raises(ValueError, match="Unknown asset"):
        apply_command(store, parse_command("asset DOGE"))


def test_browser_runs_commands_until_quit():
    store = TransactionsStore(ScriptedFetcher(sample_transactions()))
    console = _console()
    with pipe_session() as (pipe, sess):
        pipe.send_text("sort amount\rbogus\rquit\r")
        asyncio.run(run_browser(store, session=sess, console=console))

    assert store.view().sort == SortState("amount", "desc")
    text = console.export_text()
    assert "Amount ▼" in text
    assert "Unknown command 'bogus'" in text


def test_browser_retry_fetches_again():
    fetcher = ScriptedFetcher(TransactionsFetchError("Failed to fetch transactions: 500"), sample_transactions())
    store = TransactionsStore(fetcher)
    console = _console()
    with pipe_session() as (pipe, sess):
        pipe.send_text("retry\rquit\r")
        asyncio.run(run_browser(store, session=sess, console=console))

    assert fetcher.calls == 2
    assert store.view().status == "success"
    assert "Failed to fetch transactions: 500" in console.export_text()


def test_browser_closes_store_when_startup_load_is_cancelled(monkeypatch: pytest.MonkeyPatch):
    fetcher = ScriptedFetcher(asyncio.Event())
    store = TransactionsStore(fetcher)
    closed: list[bool] = []
    monkeypatch.setattr(store, "close", lambda: closed.append(True))

    async def scenario(sess: PromptSession):
        task = asyncio.create_task(run_browser(store, session=sess, console=_console()))
        for _ in range(3):
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    with pipe_session() as (_pipe, sess):
        asyncio.run(scenario(sess))

    assert closed == [True]
    assert fetcher.cancelled == 1
    assert store.view().status == "loading"
