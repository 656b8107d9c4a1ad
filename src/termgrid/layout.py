from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TypeVar

from termgrid.geometry import auto_page_size, auto_thumb_cells

MIN_THUMB_PX = 64

T = TypeVar("T")


@dataclass(frozen=True)
class GridOptions:
    """Grid settings as given by the user. Zero means auto for thumb_cells and page_size."""

    columns: int = 4
    thumb_cells: int = 0
    thumb_px: int = 256
    padding_px: int = 8
    page_size: int = 0


@dataclass(frozen=True)
class GridPlan:
    columns: int
    thumb_cells: int
    thumb_px: int
    padding_px: int
    page_size: int


def plan_grid(
    options: GridOptions,
    item_count: int,
    cell_aspect: float,
    terminal_size: tuple[int, int] | None,
) -> GridPlan:
    thumb_px = max(MIN_THUMB_PX, options.thumb_px)
    padding_px = max(0, options.padding_px)

    # Auto width uses the configured column count before it is clamped
    thumb_cells = options.thumb_cells
    if thumb_cells <= 0:
        thumb_cells = auto_thumb_cells(options.columns, terminal_size)
    columns = max(1, options.columns)

    page_size = options.page_size
    if page_size <= 0:
        page_size = auto_page_size(columns, thumb_cells, thumb_px, cell_aspect, terminal_size)
    if page_size <= 0:
        page_size = item_count

    return GridPlan(
        columns=columns,
        thumb_cells=thumb_cells,
        thumb_px=thumb_px,
        padding_px=padding_px,
        page_size=page_size,
    )


def paginate(items: Sequence[T], page_size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most page_size items, in order."""
    if page_size < 1:
        raise ValueError(f"page size must be positive, got {page_size}")
    for start in range(0, len(items), page_size):
        yield items[start : start + page_size]


def page_columns(columns: int, count: int) -> int:
    """Columns for a page holding count images, so short pages have no empty cells."""
    return max(1, min(columns, count))
