import pytest

from termgrid.layout import GridOptions, GridPlan, page_columns, paginate, plan_grid


def test_plan_uses_explicit_values():
    plan = plan_grid(GridOptions(columns=3, thumb_cells=10, thumb_px=128, padding_px=4, page_size=9), 20, 0.5, None)
    assert plan == GridPlan(columns=3, thumb_cells=10, thumb_px=128, padding_px=4, page_size=9)


def test_plan_clamps_thumb_and_padding():
    plan = plan_grid(GridOptions(thumb_px=10, padding_px=-5, thumb_cells=8, page_size=4), 4, 0.5, None)
    assert plan.thumb_px == 64
    assert plan.padding_px == 0


def test_plan_clamps_columns():
    plan = plan_grid(GridOptions(columns=0, thumb_cells=8, page_size=4), 4, 0.5, None)
    assert plan.columns == 1


def test_plan_auto_thumb_cells_uses_terminal_width():
    plan = plan_grid(GridOptions(columns=4, page_size=8), 8, 0.5, (120, 40))
    assert plan.thumb_cells == 30


def test_plan_auto_thumb_cells_before_column_clamp():
    plan = plan_grid(GridOptions(columns=0, page_size=8), 8, 0.5, (120, 40))
    assert plan.thumb_cells == 12


def test_plan_auto_page_size_from_terminal():
    # 12-cell square thumbs are 6 rows tall; 40 rows fit 6 grid rows
    plan = plan_grid(GridOptions(columns=4, thumb_cells=12), 100, 0.5, (100, 40))
    assert plan.page_size == 24


def test_plan_auto_page_size_without_terminal():
    plan = plan_grid(GridOptions(columns=4), 100, 0.5, None)
    assert plan.thumb_cells == 12
    assert plan.page_size == 32


def test_paginate_partitions_in_order():
    items = list(range(10))
    pages = list(paginate(items, 4))
    assert pages == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]


@pytest.mark.parametrize("page_size", [1, 2, 3, 7, 10, 11, 100])
def test_paginate_is_lossless(page_size):
    items = [f"item-{i}" for i in range(10)]
    pages = list(paginate(items, page_size))
    assert [item for page in pages for item in page] == items
    assert all(1 <= len(page) <= page_size for page in pages)


def test_paginate_empty():
    assert list(paginate([], 5)) == []


def test_paginate_rejects_zero():
    with pytest.raises(ValueError):
        list(paginate([1, 2], 0))


def test_page_columns():
    assert page_columns(4, 9) == 4
    assert page_columns(4, 2) == 2
    assert page_columns(4, 0) == 1
