import argparse
import logging
import sys
from pathlib import Path

from termgrid.download import DEFAULT_TIMEOUT, ImageFetcher
from termgrid.geometry import cell_aspect_ratio
from termgrid.layout import GridOptions
from termgrid.model import items_from_json, items_from_urls, items_to_json, select_items
from termgrid.protocol import Protocol, detect
from termgrid.render import print_urls, render_grid, render_single
from termgrid.terminal import get_terminal_size, is_terminal

FORMATS = ("auto", "inline", "url", "json")
LAYOUTS = ("grid", "single")

log = logging.getLogger("termgrid")


def configure_logging(verbose: bool = False) -> None:
    if log.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[termgrid] %(message)s"))
    log.addHandler(handler)
    log.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Show images inline in the terminal as a thumbnail grid")
    parser.add_argument("urls", nargs="*", metavar="URL", help="Image URLs (default: read from stdin)")
    parser.add_argument("-i", "--items", default=None, help="JSON file with a list of items, or - for stdin")
    parser.add_argument("-f", "--format", default="auto", choices=FORMATS, help="Output format (default: auto)")
    for fmt in ("inline", "url", "json"):
        parser.add_argument(
            f"--{fmt}", dest="format", action="store_const", const=fmt, help=f"Shorthand for --format {fmt}"
        )
    parser.add_argument("-l", "--layout", default="grid", choices=LAYOUTS, help="Inline layout (default: grid)")
    parser.add_argument("--grid-cols", type=int, default=4, help="Grid columns (default: 4)")
    parser.add_argument("--thumb-cols", type=int, default=0, help="Thumbnail width in cells (default: 0 = auto)")
    parser.add_argument("--thumb-px", type=int, default=256, help="Thumbnail size in pixels (default: 256, min 64)")
    parser.add_argument("--padding-px", type=int, default=8, help="Padding between thumbnails in pixels (default: 8)")
    parser.add_argument("--page-size", type=int, default=0, help="Images per grid page (default: 0 = auto)")
    parser.add_argument("--cols", type=int, default=28, help="Image width in cells for --layout single (default: 28)")
    parser.add_argument(
        "--rows", type=int, default=0, help="Image height in cells for --layout single (default: 0 = auto)"
    )
    parser.add_argument("-n", "--max", type=int, default=0, help="Maximum number of items (default: 0 = all)")
    parser.add_argument("--no-videos", action="store_true", default=False, help="Skip video thumbnails")
    parser.add_argument("--no-avatar", action="store_true", default=False, help="Skip the profile picture item")
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-image timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument("--referer", default=None, help="Referer header sent with image requests")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug output to stderr")
    return parser


def _read_items(parser: argparse.ArgumentParser, args: argparse.Namespace):
    if args.items is not None:
        if args.items == "-":
            text = sys.stdin.read()
        else:
            path = Path(args.items)
            if not path.exists():
                parser.error(f"File not found: {path}")
            text = path.read_text(encoding="utf-8")
        try:
            return items_from_json(text)
        except ValueError as exc:
            parser.error(f"Invalid items file: {exc}")
    if args.urls:
        return items_from_urls(args.urls)
    return items_from_urls(sys.stdin)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    items = select_items(
        _read_items(parser, args),
        args.max,
        include_videos=not args.no_videos,
        include_avatars=not args.no_avatar,
    )
    if not items:
        log.info("no images to render")
        return 0

    out = sys.stdout
    protocol = detect()
    fmt = args.format
    if fmt == "auto":
        fmt = "inline" if is_terminal(out) and protocol is not Protocol.NONE else "url"
    log.debug("format=%s protocol=%s", fmt, protocol)

    if fmt == "json":
        out.write(items_to_json(items) + "\n")
    elif fmt == "url":
        print_urls(items, out)
    elif args.layout == "single":
        render_single(
            items,
            ImageFetcher(timeout=args.timeout, referer=args.referer),
            out,
            protocol,
            cols=args.cols,
            rows=args.rows,
            cell_aspect=cell_aspect_ratio(),
        )
    else:
        options = GridOptions(
            columns=args.grid_cols,
            thumb_cells=args.thumb_cols,
            thumb_px=args.thumb_px,
            padding_px=args.padding_px,
            page_size=args.page_size,
        )
        render_grid(
            items,
            ImageFetcher(timeout=args.timeout, referer=args.referer),
            out,
            protocol,
            options,
            cell_aspect=cell_aspect_ratio(),
            terminal_size=get_terminal_size(out),
        )
    out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
