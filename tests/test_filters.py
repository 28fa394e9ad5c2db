from transactions_view.filters import build_haystack, matches
from transactions_view.models import TransactionFilters

from tests.helpers.records import tx


def test_default_filters_match_everything():
    assert matches(tx("TX-1", status="Failed", asset="SOL"), TransactionFilters())


def test_status_and_asset_must_both_hold():
    record = tx("TX-1", status="Completed", asset="BTC")
    assert matches(record, TransactionFilters(status="Completed", asset="BTC"))
    assert not matches(record, TransactionFilters(status="Pending", asset="BTC"))
    assert not matches(record, TransactionFilters(status="Completed", asset="ETH"))


def test_search_is_case_insensitive_substring_over_haystack():
    record = tx("TX-9", asset="ETH", type="Custody", counterparty="Northwind Desk", status="Pending")
    assert build_haystack(record) == "tx-9 eth custody northwind desk pending"
    assert matches(record, TransactionFilters(search="NORTHWIND"))
    assert matches(record, TransactionFilters(search="custody northwind"))
    assert matches(record, TransactionFilters(search="  tx-9  "))
    assert not matches(record, TransactionFilters(search="settlement"))


def test_search_does_not_look_at_amount_or_dates():
    record = tx("TX-1", amount=12345, timestamp="2024-05-05T00:00:00Z")
    assert not matches(record, TransactionFilters(search="12345"))
    assert not matches(record, TransactionFilters(search="2024-05"))


def test_whitespace_only_search_matches():
    assert matches(tx("TX-1"), TransactionFilters(search="   "))
