"""Small helpers: timestamps, flags, splitting and key polling."""

from __future__ import annotations

import io
import os
import select
import sys
import time
from typing import TextIO

try:
    import termios
except ImportError:  # non-POSIX platforms
    termios = None


def current_timestamp() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def time_to_start_in_seconds(seconds: int) -> int:
    """Timestamp in milliseconds ``seconds`` from now."""
    return current_timestamp() + seconds * 1000


def time_to_start_in_milliseconds(milliseconds: int) -> int:
    """Timestamp in milliseconds ``milliseconds`` from now."""
    return current_timestamp() + milliseconds


def change_flag(flag: int) -> int:
    """Toggle a flag: any truthy value becomes 0, anything else becomes 1."""
    toggled = not bool(flag)
    return int(toggled)


def str_split(text: str, delim: str) -> list[str]:
    """Split on a single delimiter character, dropping empty tokens."""
    if len(delim) != 1:
        raise ValueError("delimiter must be a single character")
    return [part for part in text.split(delim) if part]


def _peek(stream: TextIO) -> bool:
    if not stream.seekable():
        return False
    position = stream.tell()
    char = stream.read(1)
    stream.seek(position)
    return bool(char)


def key_pressed(stream: TextIO | None = None) -> bool:
    """Whether input is waiting on ``stream`` (default stdin), without consuming it."""
    stream = sys.stdin if stream is None else stream
    try:
        fd = stream.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return _peek(stream)

    if termios is not None and os.isatty(fd):
        saved = termios.tcgetattr(fd)
        raw = termios.tcgetattr(fd)
        raw[3] &= ~(termios.ICANON | termios.ECHO)
        termios.tcsetattr(fd, termios.TCSANOW, raw)
        try:
            ready, _, _ = select.select([fd], [], [], 0)
        finally:
            termios.tcsetattr(fd, termios.TCSANOW, saved)
        return bool(ready)

    ready, _, _ = select.select([fd], [], [], 0)
    return bool(ready)