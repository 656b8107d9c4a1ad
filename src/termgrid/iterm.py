import base64
import posixpath
from dataclasses import dataclass
from typing import TextIO

DEFAULT_NAME = "termgrid.bin"


@dataclass(frozen=True)
class ItermFile:
    name: str
    data: bytes
    width_cells: int = 0
    height_cells: int = 0
    stretch: bool = False


def _b64(data: bytes) -> str:
    return base64.standard_b64encode(data).decode("ascii")


def _file_name(name: str) -> str:
    name = posixpath.basename(name.strip().rstrip("/"))
    return name or DEFAULT_NAME


def iterm_sequence(file: ItermFile) -> str:
    """Build the OSC 1337 inline file sequence for one image, or "" when there is no data."""
    if not file.data:
        return ""
    args = [
        f"name={_b64(_file_name(file.name).encode('utf-8'))}",
        f"size={len(file.data)}",
        "inline=1",
        f"preserveAspectRatio={0 if file.stretch else 1}",
    ]
    if file.width_cells > 0:
        args.append(f"width={file.width_cells}")
    if file.height_cells > 0:
        args.append(f"height={file.height_cells}")
    return f"\x1b]1337;File={';'.join(args)}:{_b64(file.data)}\x1b\\"


def send_iterm_inline(out: TextIO, file: ItermFile) -> None:
    sequence = iterm_sequence(file)
    if sequence:
        out.write(sequence)
