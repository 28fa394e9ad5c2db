"""Sample transaction records and a scripted fetcher for store tests."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from transactions_view.models import Transaction


def tx(id: str, **overrides: Any) -> Transaction:
    data: dict[str, Any] = {
        "id": id,
        "asset": "BTC",
        "type": "Trade",
        "status": "Completed",
        "amount": 1.0,
        "counterparty": "Alpha",
        "timestamp": "2024-01-01T10:00:00Z",
        "settlementDate": "2024-01-02",
    }
    data.update(overrides)
    return Transaction.model_validate(data)


def sample_transactions() -> list[Transaction]:
    return [
        tx(
            "TX-1",
            asset="BTC",
            type="Trade",
            status="Completed",
            amount=2,
            counterparty="Alpha",
            timestamp="2024-01-01T10:00:00Z",
            settlementDate="2024-01-02",
        ),
        tx(
            "TX-2",
            asset="ETH",
            type="Settlement",
            status="Pending",
            amount=5,
            counterparty="Beta",
            timestamp="2024-01-02T10:00:00Z",
            settlementDate="2024-01-05",
        ),
        tx(
            "TX-3",
            asset="BTC",
            type="Transfer",
            status="Completed",
            amount=1,
            counterparty="Gamma",
            timestamp="2024-01-03T10:00:00Z",
            settlementDate="2024-01-04",
        ),
    ]


def build_dataset(size: int = 130) -> list[Transaction]:
    """Three distinguishable records followed by uniform filler rows."""

    base = [
        tx("TEST-1", asset="BTC", status="Completed", amount=2500, counterparty="Alpha"),
        tx("TEST-2", asset="ETH", type="Settlement", status="Failed", amount=500, counterparty="Beta"),
        tx("TEST-3", asset="USDC", type="Transfer", status="Pending", amount=1_500_000, counterparty="Gamma"),
    ]
    start = datetime(2024, 1, 10, 12, tzinfo=UTC)
    filler = [
        tx(
            f"FILL-{i}",
            asset="BTC" if i % 2 == 0 else "SOL",
            amount=1000 + i,
            counterparty=f"Desk {i}",
            timestamp=(start + timedelta(minutes=i)).isoformat().replace("+00:00", "Z"),
            settlementDate="2024-01-12",
        )
        for i in range(size - len(base))
    ]
    return base + filler


class ScriptedFetcher:
    """Async fetcher that replays scripted outcomes, one per call.

    Each outcome is a sequence of records (returned), an exception (raised),
    or an ``asyncio.Event`` which the call waits on before returning
    ``gated_result``. ``calls`` counts invocations; ``cancelled`` counts calls
    that observed cancellation.
    """

    def __init__(self, *outcomes: Any, gated_result: Sequence[Transaction] = ()) -> None:
        self._outcomes = list(outcomes)
        self._gated_result = list(gated_result)
        self.calls = 0
        self.cancelled = 0

    async def __call__(self) -> list[Transaction]:
        self.calls += 1
        outcome = self._outcomes.pop(0) if self._outcomes else []
        if isinstance(outcome, asyncio.Event):
            try:
                await outcome.wait()
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
            return list(self._gated_result)
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)
