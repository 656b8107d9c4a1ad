import math
import os
from collections.abc import Mapping

CELL_ASPECT_ENV = "TERMGRID_CELL_ASPECT"
DEFAULT_CELL_ASPECT = 0.5
MIN_CELL_ASPECT = 0.1
MAX_CELL_ASPECT = 2.0

DEFAULT_THUMB_CELLS = 12
MIN_THUMB_CELLS = 6
# Tile rows per page when the terminal height is unknown
FALLBACK_PAGE_ROWS = 8


def cell_aspect_ratio(env: Mapping[str, str] | None = None, default: float = DEFAULT_CELL_ASPECT) -> float:
    """Width/height correction for one character cell, overridable via TERMGRID_CELL_ASPECT."""
    if env is None:
        env = os.environ
    raw = env.get(CELL_ASPECT_ENV, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value) or not MIN_CELL_ASPECT <= value <= MAX_CELL_ASPECT:
        return default
    return value


def estimate_rows(cols_cells: int, width_px: int, height_px: int, cell_aspect: float) -> int:
    """Number of text rows an image needs when drawn cols_cells wide without distortion."""
    if cols_cells <= 0 or width_px <= 0 or height_px <= 0:
        return 0
    rows = cols_cells * (height_px / width_px) * cell_aspect
    if rows < 1:
        return 1
    return round(rows)


def auto_thumb_cells(columns: int, terminal_size: tuple[int, int] | None) -> int:
    if columns <= 0 or terminal_size is None or terminal_size[0] <= 0:
        return DEFAULT_THUMB_CELLS
    return max(MIN_THUMB_CELLS, terminal_size[0] // columns)


def auto_page_size(
    columns: int,
    thumb_cells: int,
    thumb_px: int,
    cell_aspect: float,
    terminal_size: tuple[int, int] | None,
) -> int:
    """Fit as many full grid rows as the terminal height allows, at least one."""
    if columns <= 0:
        return 0
    if terminal_size is None or terminal_size[1] <= 0:
        return columns * FALLBACK_PAGE_ROWS
    thumb_rows = estimate_rows(thumb_cells, thumb_px, thumb_px, cell_aspect)
    if thumb_rows <= 0:
        return columns * FALLBACK_PAGE_ROWS
    return columns * max(1, terminal_size[1] // thumb_rows)
