"""Kitty graphics protocol (APC ``_G``) transmission.

The base64 payload is split into chunks of CHUNK_SIZE characters. The first
escape sequence carries the full control data; the rest only carry ``m``,
which is 1 while more chunks follow and 0 on the last one.
"""

import base64
import itertools
from collections.abc import Iterator
from typing import TextIO

CHUNK_SIZE = 4096
START = "\x1b_G"
END = "\x1b\\"


class ImageIds:
    """Kitty image ids for one render pass, starting at 1 and never reused."""

    def __init__(self):
        self._counter = itertools.count(1)

    def next(self) -> int:
        return next(self._counter)


def kitty_chunks(data: bytes, image_id: int, cols: int = 0, rows: int = 0, no_cursor: bool = True) -> Iterator[str]:
    encoded = base64.standard_b64encode(data).decode("ascii")
    for start in range(0, len(encoded), CHUNK_SIZE):
        chunk = encoded[start : start + CHUNK_SIZE]
        more = 1 if start + CHUNK_SIZE < len(encoded) else 0
        if start == 0:
            # a=T transmit and display, f=100 PNG, q=2 suppress terminal replies
            params = ["a=T", "f=100", f"i={image_id}", f"m={more}", "q=2"]
            if cols > 0:
                params.append(f"c={cols}")
            if rows > 0:
                params.append(f"r={rows}")
            if no_cursor:
                params.append("C=1")
            yield f"{START}{','.join(params)};{chunk}{END}"
        else:
            yield f"{START}m={more};{chunk}{END}"


def send_kitty_png(out: TextIO, image_id: int, png: bytes, cols: int = 0, rows: int = 0) -> None:
    if not png:
        return
    for sequence in kitty_chunks(png, image_id, cols, rows):
        out.write(sequence)
