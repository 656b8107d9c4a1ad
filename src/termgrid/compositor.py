import io
import math
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from PIL import Image, UnidentifiedImageError


class Composite(NamedTuple):
    data: bytes  # PNG
    width: int
    height: int


def decode_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise ValueError(f"decode image: {exc}") from exc
    return image


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def ensure_png(data: bytes) -> bytes:
    """Re-encode arbitrary image bytes as PNG."""
    return encode_png(decode_image(data))


def crop_square(image: Image.Image) -> Image.Image:
    """Centered square crop using the shorter side."""
    width, height = image.size
    size = min(width, height)
    x0 = (width - size) // 2
    y0 = (height - size) // 2
    return image.crop((x0, y0, x0 + size, y0 + size))


def resize_square(image: Image.Image, size: int) -> Image.Image:
    # Bicubic keeps downscaled thumbnails free of the aliasing nearest-neighbour gives
    return crop_square(image).convert("RGBA").resize((size, size), Image.BICUBIC)


def grid_size(count: int, columns: int, thumb_px: int, padding_px: int) -> tuple[int, int]:
    """Pixel (width, height) of a grid holding count thumbnails."""
    rows = math.ceil(count / columns)
    width = columns * thumb_px + (columns - 1) * padding_px
    height = rows * thumb_px + (rows - 1) * padding_px
    return width, height


def compose(images: Sequence[Image.Image], columns: int, thumb_px: int, padding_px: int) -> Composite:
    """Tile images left-to-right, top-to-bottom into one PNG.

    Every image is center-cropped to a square and scaled to thumb_px. Padding
    between tiles is left transparent.
    """
    if not images:
        raise ValueError("no images")
    if columns < 1:
        raise ValueError(f"columns must be positive, got {columns}")
    if thumb_px < 1:
        raise ValueError(f"thumbnail size must be positive, got {thumb_px}")
    if padding_px < 0:
        raise ValueError(f"padding must not be negative, got {padding_px}")

    width, height = grid_size(len(images), columns, thumb_px, padding_px)
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    step = thumb_px + padding_px

    for i, image in enumerate(images):
        row, col = divmod(i, columns)
        x = col * step
        y = row * step
        canvas[y : y + thumb_px, x : x + thumb_px] = np.asarray(resize_square(image, thumb_px))

    return Composite(encode_png(Image.fromarray(canvas)), width, height)
