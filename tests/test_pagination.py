import pytest

from transactions_view.pagination import clamp_page, paginate, row_range, total_pages


def test_total_pages_rounds_up():
    assert total_pages(0, 10) == 0
    assert total_pages(1, 10) == 1
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2
    assert total_pages(130, 25) == 6


@pytest.mark.parametrize("size", [0, -1])
def test_non_positive_page_size_is_rejected(size):
    with pytest.raises(ValueError):
        total_pages(5, size)


def test_clamp_page():
    assert clamp_page(0, 3) == 1
    assert clamp_page(2, 3) == 2
    assert clamp_page(99, 3) == 3
    assert clamp_page(5, 0) == 1


def test_last_page_is_short():
    page = paginate(list(range(23)), 3, 10)
    assert page.rows == [20, 21, 22]
    assert page.total_pages == 3


@pytest.mark.parametrize("count,size", [(0, 10), (1, 10), (10, 10), (23, 10), (130, 25), (7, 50)])
def test_pages_are_disjoint_and_reconstruct_the_sequence(count, size):
    items = [f"row-{i}" for i in range(count)]
    pages = paginate(items, 1, size).total_pages
    chunks = [paginate(items, p, size).rows for p in range(1, pages + 1)]
    flattened = [row for chunk in chunks for row in chunk]
    assert flattened == items
    assert len(set(flattened)) == len(flattened)


def test_row_range():
    assert row_range(1, 10, 0) == (0, 0)
    assert row_range(1, 10, 23) == (1, 10)
    assert row_range(3, 10, 23) == (21, 23)
