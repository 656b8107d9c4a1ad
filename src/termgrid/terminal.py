import os
import sys
from typing import TextIO


def is_terminal(stream: TextIO | None = None) -> bool:
    stream = sys.stdout if stream is None else stream
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def get_terminal_size(stream: TextIO | None = None) -> tuple[int, int] | None:
    """Return (columns, rows) of the terminal behind stream, or None if it is not a tty."""
    stream = sys.stdout if stream is None else stream
    if not is_terminal(stream):
        return None
    try:
        size = os.get_terminal_size(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return None
    if size.columns <= 0 or size.lines <= 0:
        return None
    return (size.columns, size.lines)
