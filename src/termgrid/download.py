import io
import logging
from dataclasses import dataclass

import requests
from PIL import Image, UnidentifiedImageError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20.0
MAX_IMAGE_BYTES = 15 << 20
USER_AGENT = "Mozilla/5.0"
ACCEPT = "image/jpeg,image/png,image/*;q=0.8,*/*;q=0.5"
_READ_CHUNK = 64 << 10


class DownloadError(Exception):
    pass


@dataclass(frozen=True)
class Download:
    data: bytes
    width: int
    height: int


def image_size(data: bytes) -> tuple[int, int]:
    """Pixel size from the image header, or (0, 0) if it can't be read."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError):
        return (0, 0)


class ImageFetcher:
    """Fetch image bytes over HTTP with a bounded timeout and response size."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_bytes: int = MAX_IMAGE_BYTES,
        referer: str | None = None,
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.headers = {"User-Agent": USER_AGENT, "Accept": ACCEPT}
        if referer:
            self.headers["Referer"] = referer

    def __call__(self, url: str) -> Download:
        log.debug("fetching %s", url)
        try:
            with self.session.get(url, headers=self.headers, timeout=self.timeout, stream=True) as response:
                if response.status_code != 200:
                    body = next(response.iter_content(1024), b"")
                    detail = body.decode("utf-8", "replace").strip()
                    raise DownloadError(f"fetch {url}: {response.status_code} {detail}".rstrip())
                data = self._read(url, response)
        except requests.RequestException as exc:
            raise DownloadError(f"fetch {url}: {exc}") from exc
        width, height = image_size(data)
        return Download(data, width, height)

    def _read(self, url: str, response: requests.Response) -> bytes:
        buf = bytearray()
        for chunk in response.iter_content(_READ_CHUNK):
            buf.extend(chunk)
            if len(buf) > self.max_bytes:
                raise DownloadError(f"fetch {url}: response larger than {self.max_bytes} bytes")
        return bytes(buf)
