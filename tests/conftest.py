import io
import struct
import zlib

import pytest
from PIL import Image

from termgrid.download import Download, DownloadError, image_size

TERMINAL_ENV = (
    "TERMGRID_INLINE",
    "TERMGRID_CELL_ASPECT",
    "KITTY_WINDOW_ID",
    "TERM_PROGRAM",
    "ITERM_SESSION_ID",
    "TERM",
)


def make_image(width=40, height=40, colour=(255, 0, 0)):
    return Image.new("RGB", (width, height), colour)


def image_bytes(width=40, height=40, colour=(255, 0, 0), fmt="PNG"):
    buf = io.BytesIO()
    make_image(width, height, colour).save(buf, format=fmt)
    return buf.getvalue()


def _png_chunk(kind, data):
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


def oversized_png(width=20000, height=20000):
    """A 1-bit greyscale PNG whose header declares more pixels than Pillow will open."""
    header = struct.pack(">IIBBBBB", width, height, 1, 0, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )


class FakeResponse:
    def __init__(self, status_code=200, body=b""):
        self.status_code = status_code
        self.body = body
        self.closed = False

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start : start + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True


class FakeSession:
    """Return one canned response per URL; URLs missing from responses get a 404."""

    def __init__(self, response=None, error=None, responses=None):
        self.response = response
        self.error = error
        self.responses = responses or {}
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return FakeResponse(*self.responses.get(url, (404, b"not found")))


class FakeFetcher:
    """Serve canned bytes by URL. URLs mapped to an exception raise it; unknown URLs fail."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise DownloadError(f"fetch {url}: 404 not found")
        if isinstance(response, Exception):
            raise response
        return Download(response, *image_size(response))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove terminal detection variables from os.environ."""
    for name in TERMINAL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
