import os
from collections.abc import Mapping
from enum import Enum

INLINE_ENV = "TERMGRID_INLINE"


class Protocol(Enum):
    NONE = "none"
    KITTY = "kitty"
    ITERM = "iterm"

    def __str__(self) -> str:
        return self.value


def detect(env: Mapping[str, str] | None = None) -> Protocol:
    """Pick the inline image protocol from environment variables.

    Rules are checked in order and the first match wins:
    explicit override, Kitty window id, TERM_PROGRAM, then TERM.
    """
    if env is None:
        env = os.environ

    override = env.get(INLINE_ENV, "").strip().lower()
    if override == "kitty":
        return Protocol.KITTY
    if override in ("iterm", "iterm2"):
        return Protocol.ITERM
    if override not in ("", "auto"):
        # none/off/false/0 and anything unrecognised
        return Protocol.NONE

    if env.get("KITTY_WINDOW_ID", "").strip():
        return Protocol.KITTY

    term_program = env.get("TERM_PROGRAM", "").lower()
    if "ghostty" in term_program:
        return Protocol.KITTY
    if "iterm" in term_program or env.get("ITERM_SESSION_ID", "").strip():
        return Protocol.ITERM
    if "apple_terminal" in term_program:
        return Protocol.NONE

    term = env.get("TERM", "").lower()
    if "xterm-kitty" in term or "ghostty" in term:
        return Protocol.KITTY

    return Protocol.NONE
