"""Data source adapter: fetch transaction records from the transactions endpoint.

A thin ``urllib`` GET run on a small dedicated thread pool so callers can
``await`` it and cancel the awaiting task. Cancellation returns control
immediately and the result is dropped. The abandoned worker thread keeps
reading until the socket timeout (``DEFAULT_HTTP_TIMEOUT`` unless overridden)
expires; the pool is not the event loop's default executor, so ``asyncio.run``
does not wait for it on shutdown.

Accepted response bodies:

- a bare JSON array of transaction objects, or
- a JSON object with a ``transactions`` array.

Any other shape raises :class:`TransactionsFetchError`. Individual records
that fail validation are skipped with a warning; the rest are returned.
"""

from __future__ import annotations

import asyncio
import functools
import json
import os
import urllib.error
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from urllib.request import urlopen

from pydantic import ValidationError

from .logging_setup import get_logger
from .models import Transaction

DEFAULT_API_URL = "http://localhost:8000/transactions.json"
API_URL_ENV = "TXVIEW_API_URL"

# Seconds; bounds how long an abandoned request can hold a worker thread.
DEFAULT_HTTP_TIMEOUT: float = 30.0

SHAPE_ERROR_MESSAGE = "Unexpected response shape when fetching transactions"

_FETCH_POOL = ThreadPoolExecutor(max_workers=4, thread_name_prefix="txview-fetch")

_logger = get_logger("transactions_view.api")


class TransactionsFetchError(RuntimeError):
    """A fetch that failed in transport, status, or response format.

    ``status`` carries the HTTP status code when the server answered with a
    non-success response.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def resolve_api_url(url: str | None = None) -> str:
    """Return ``url`` when given, else ``TXVIEW_API_URL``, else the default."""

    if url and url.strip():
        return url.strip()
    env_url = os.getenv(API_URL_ENV)
    if env_url and env_url.strip():
        return env_url.strip()
    return DEFAULT_API_URL


def _describe(index: int, error: ValidationError) -> str:
    first = error.errors()[0]
    loc = ".".join(str(p) for p in (index, *first.get("loc", ())))
    return f"{loc}: {first.get('msg', 'invalid value')}"


def parse_transactions_payload(payload: Any) -> list[Transaction]:
    """Validate a decoded JSON body into transaction records.

    Records that fail validation (unknown status, negative or non-numeric
    amount, missing fields) are logged and skipped so one bad row does not
    hide the rest of the dataset.
    """

    items: Sequence[Any]
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict) and isinstance(payload.get("transactions"), list):
        items = payload["transactions"]
    else:
        raise TransactionsFetchError(SHAPE_ERROR_MESSAGE)

    records: list[Transaction] = []
    for index, item in enumerate(items):
        try:
            records.append(Transaction.model_validate(item))
        except ValidationError as e:
            _logger.warning("Skipping invalid transaction record at %s", _describe(index, e))
    if len(records) < len(items):
        _logger.info("Kept %d of %d transaction records", len(records), len(items))
    return records


def _read_body(url: str, timeout: float) -> bytes:
    try:
        with urlopen(url, timeout=timeout) as resp:
            status = getattr(resp, "status", None)
            if status is not None and not 200 <= status < 300:
                raise TransactionsFetchError(
                    f"Failed to fetch transactions: {status}", status=status
                )
            return resp.read()
    except urllib.error.HTTPError as e:
        raise TransactionsFetchError(
            f"Failed to fetch transactions: {e.code}", status=e.code
        ) from e
    except urllib.error.URLError as e:
        raise TransactionsFetchError(f"Failed to fetch transactions: {e.reason}") from e
    except OSError as e:
        raise TransactionsFetchError(f"Failed to fetch transactions: {e}") from e


def fetch_transactions_sync(
    url: str | None = None, *, timeout: float = DEFAULT_HTTP_TIMEOUT
) -> list[Transaction]:
    """Blocking variant of :func:`fetch_transactions`."""

    resolved = resolve_api_url(url)
    _logger.debug("GET %s (timeout %.1fs)", resolved, timeout)
    body = _read_body(resolved, timeout)

    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TransactionsFetchError("Failed to parse transactions response as JSON") from e

    return parse_transactions_payload(payload)


async def fetch_transactions(
    url: str | None = None, *, timeout: float = DEFAULT_HTTP_TIMEOUT
) -> list[Transaction]:
    """Fetch and validate transaction records.

    Cancelling the awaiting task raises ``asyncio.CancelledError`` right away;
    no result is delivered for an abandoned request.
    """

    loop = asyncio.get_running_loop()
    call = functools.partial(fetch_transactions_sync, url, timeout=timeout)
    return await loop.run_in_executor(_FETCH_POOL, call)


__all__ = [
    "API_URL_ENV",
    "DEFAULT_API_URL",
    "DEFAULT_HTTP_TIMEOUT",
    "SHAPE_ERROR_MESSAGE",
    "TransactionsFetchError",
    "fetch_transactions",
    "fetch_transactions_sync",
    "parse_transactions_payload",
    "resolve_api_url",
]
