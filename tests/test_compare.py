import math

import pytest

from transactions_view.compare import compare_records, compare_values
from transactions_view.models import SortState

from tests.helpers.records import tx


def test_amount_compares_numerically_not_lexically():
    assert compare_values(9, 10, "amount", "asc") < 0
    assert compare_values("9", "10", "amount", "asc") < 0
    assert compare_values(9, 10, "amount", "desc") > 0
    assert compare_values(3.5, 3.5, "amount", "asc") == 0


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_unparsable_amounts_sort_last_in_both_directions(direction):
    assert compare_values("n/a", 1, "amount", direction) > 0
    assert compare_values(1, math.nan, "amount", direction) < 0
    assert compare_values(math.nan, "garbage", "amount", direction) == 0


def test_timestamps_compare_as_instants_across_offsets():
    # 10:00+02:00 is 08:00Z, i.e. earlier than 09:00Z.
    assert compare_values("2024-01-01T10:00:00+02:00", "2024-01-01T09:00:00Z", "timestamp", "asc") < 0
    assert compare_values("2024-01-02", "2024-01-01T23:59:59Z", "settlement_date", "asc") > 0
    assert compare_values("2024-01-02", "2024-01-02T00:00:00Z", "settlement_date", "desc") == 0


def test_unparsable_dates_sort_last():
    assert compare_values("not-a-date", "2024-01-01", "settlement_date", "desc") > 0
    assert compare_values("2024-01-01", "", "timestamp", "asc") < 0


def test_text_fields_are_case_insensitive():
    assert compare_values("alpha", "Beta", "counterparty", "asc") < 0
    assert compare_values("alpha", "Beta", "counterparty", "desc") > 0
    assert compare_values("GAMMA", "gamma", "counterparty", "asc") == 0


def test_unknown_key_is_rejected():
    with pytest.raises(ValueError):
        compare_values("a", "b", "memo", "asc")  # type: ignore[arg-type]


def test_compare_records_uses_the_selected_field():
    a = tx("A", amount=10, counterparty="Zulu")
    b = tx("B", amount=20, counterparty="alpha")
    assert compare_records(a, b, SortState("amount", "asc")) < 0
    assert compare_records(a, b, SortState("counterparty", "asc")) > 0
