"""Drive one render pass: fetch, composite, encode and write each page.

Work is strictly sequential. Escape sequences for one page are written and
flushed before the next page is fetched, so diagnostics on stderr never split
a transmission.
"""

import logging
from collections.abc import Callable, Sequence
from typing import TextIO

from PIL import Image

from termgrid.compositor import compose, decode_image, ensure_png
from termgrid.download import Download, DownloadError
from termgrid.geometry import DEFAULT_CELL_ASPECT, estimate_rows
from termgrid.iterm import ItermFile, send_iterm_inline
from termgrid.kitty import ImageIds, send_kitty_png
from termgrid.layout import GridOptions, page_columns, paginate, plan_grid
from termgrid.model import RenderableItem
from termgrid.protocol import Protocol

log = logging.getLogger(__name__)

Fetch = Callable[[str], Download]

GRID_NAME = "termgrid-grid.png"


def print_urls(items: Sequence[RenderableItem], out: TextIO) -> None:
    for item in items:
        out.write(f"{item.url}\n")
    out.flush()


def advance_cursor(out: TextIO, rows: int) -> None:
    """Move the cursor below an image drawn without cursor movement."""
    out.write("\n" * (max(1, rows) + 1))


def _load_page(items: Sequence[RenderableItem], fetch: Fetch) -> list[Image.Image]:
    images = []
    for item in items:
        try:
            download = fetch(item.url)
        except DownloadError as exc:
            log.warning("%s", exc)
            continue
        try:
            images.append(decode_image(download.data))
        except ValueError as exc:
            log.warning("%s: %s", item.url, exc)
    return images


def render_grid(
    items: Sequence[RenderableItem],
    fetch: Fetch,
    out: TextIO,
    protocol: Protocol,
    options: GridOptions = GridOptions(),
    cell_aspect: float = DEFAULT_CELL_ASPECT,
    terminal_size: tuple[int, int] | None = None,
) -> int:
    """Render items as paginated thumbnail grids. Returns the number of pages sent."""
    if protocol is Protocol.NONE:
        print_urls(items, out)
        return 0
    if not items:
        return 0

    plan = plan_grid(options, len(items), cell_aspect, terminal_size)
    log.debug("grid plan %s for %d items via %s", plan, len(items), protocol)

    ids = ImageIds()
    sent = 0
    for number, page in enumerate(paginate(items, plan.page_size), start=1):
        images = _load_page(page, fetch)
        if not images:
            log.info("page %d: no images could be loaded, skipping", number)
            continue

        columns = page_columns(plan.columns, len(images))
        try:
            grid = compose(images, columns, plan.thumb_px, plan.padding_px)
        except ValueError as exc:
            log.warning("page %d: %s", number, exc)
            continue

        cols_cells = columns * plan.thumb_cells
        rows_cells = estimate_rows(cols_cells, grid.width, grid.height, cell_aspect)

        if protocol is Protocol.ITERM:
            send_iterm_inline(
                out,
                ItermFile(
                    name=GRID_NAME,
                    data=grid.data,
                    width_cells=cols_cells,
                    height_cells=rows_cells,
                    stretch=True,
                ),
            )
        else:
            send_kitty_png(out, ids.next(), grid.data, cols_cells, rows_cells)
        advance_cursor(out, rows_cells)
        out.flush()
        sent += 1
    return sent


def render_single(
    items: Sequence[RenderableItem],
    fetch: Fetch,
    out: TextIO,
    protocol: Protocol,
    cols: int = 28,
    rows: int = 0,
    cell_aspect: float = DEFAULT_CELL_ASPECT,
) -> int:
    """Send each item as its own image, cols cells wide. Returns the number of images sent."""
    if protocol is Protocol.NONE:
        print_urls(items, out)
        return 0

    ids = ImageIds()
    sent = 0
    for item in items:
        try:
            download = fetch(item.url)
        except DownloadError as exc:
            log.warning("%s", exc)
            continue

        image_rows = rows
        if image_rows <= 0:
            image_rows = estimate_rows(cols, download.width, download.height, cell_aspect)

        if protocol is Protocol.ITERM:
            send_iterm_inline(
                out,
                ItermFile(
                    name=item.inline_name,
                    data=download.data,
                    width_cells=cols,
                    height_cells=image_rows,
                    stretch=True,
                ),
            )
        else:
            try:
                png = ensure_png(download.data)
            except ValueError as exc:
                log.warning("%s: %s", item.url, exc)
                continue
            send_kitty_png(out, ids.next(), png, cols, image_rows)
        advance_cursor(out, image_rows)
        out.flush()
        sent += 1
    return sent
