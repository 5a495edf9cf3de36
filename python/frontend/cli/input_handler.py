"""Single-keypress reader for the terminal frontend.

Translates raw terminal input (arrow escape sequences, WASD, digits) into
action strings without requiring Enter.  POSIX terminals use
``termios``/``select``; Windows uses ``msvcrt``.
"""

from __future__ import annotations

import os
import sys
import time

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "r": "restart",
    "\r": "enter",
    "\n": "enter",
    " ": "enter",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}

# How long to wait for the rest of an escape sequence before treating
# ESC as a bare keypress.
_ESC_WAIT = 0.1


def _resolve(ch: str) -> str:
    """Map a raw character to its action string."""
    if ch.lower() in _KEY_MAP:
        return _KEY_MAP[ch.lower()]
    return ch if ch.isprintable() else ""


# -- POSIX ---------------------------------------------------------------------


def _read_posix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)

    def pending(wait: float | None) -> bool:
        ready, _, _ = select.select([fd], [], [], wait)
        return bool(ready)

    def read1() -> str:
        # os.read is unbuffered, so select() keeps seeing the remaining
        # bytes of multi-byte sequences.
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    try:
        tty.setraw(fd)
        if not pending(timeout):
            return None
        ch = read1()
        if ch != "\x1b":
            return _resolve(ch)
        if not pending(_ESC_WAIT):
            return "quit"  # bare Escape
        if read1() != "[":
            return "quit"
        if not pending(_ESC_WAIT):
            return ""
        return _ARROW_MAP.get(read1(), "")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


# -- Windows -------------------------------------------------------------------


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    if timeout is not None:
        end = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= end:
                return None
            time.sleep(0.02)

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        # Extended key: arrows arrive as a second code.
        return {"H": "up", "P": "down", "M": "right", "K": "left"}.get(msvcrt.getwch(), "")
    if ch == "\x1b":
        return "quit"
    return _resolve(ch)


_read = _read_windows if os.name == "nt" else _read_posix


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Block until a key is pressed and return its action string.

    Possible return values:
        "up", "down", "left", "right"  — arrows / WASD
        "quit"                         — q / Ctrl-C / Escape
        "restart"                      — r
        "enter"                        — Enter / Space
        "<char>"                       — any other printable char (digits)
        ""                             — unrecognised key
    """
    key = _read(None)
    assert key is not None
    return key


def get_key_timeout(timeout: float) -> str | None:
    """Like :func:`get_key`, but return ``None`` after *timeout* seconds."""
    return _read(timeout)
