"""Parsing of the comma separated ``Name:value`` control messages."""

from __future__ import annotations

import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass

SAMPLE_MESSAGES = (
    "Action:identification,ID:1",
    "Action:start,StartTime:1435142177654,ClientPosX:6,ClientPosY:5,Song:-1,SongPosX:11,SongPosY: 0",
    "Action:client,StartTime:0,ClientPosX:7,ClientPosY:5",
    "Action:song,StartTime:0,Song:1,SongPosX:5,SongPosY:0",
    "Action:exit",
)

_FIELDS = {
    "Action": "action",
    "ID": "identification",
    "StartTime": "start_time",
    "ClientPosX": "client_pos_x",
    "ClientPosY": "client_pos_y",
    "Song": "song",
    "SongPosX": "song_pos_x",
    "SongPosY": "song_pos_y",
}

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


@dataclass
class Message:
    """The variables a control message can carry."""

    action: str = ""
    identification: int = 0
    start_time: int = 0
    client_pos_x: int = 0
    client_pos_y: int = 0
    song: int = 0
    song_pos_x: int = 0
    song_pos_y: int = 0


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def split_tokens(text: str, delim: str) -> list[str]:
    """Split on any character of ``delim``, dropping empty tokens."""
    if not delim:
        return [text] if text else []
    pattern = "[" + re.escape(delim) + "]+"
    return [token for token in re.split(pattern, text) if token]


def variable_and_value(field: str) -> tuple[str, str]:
    """Split one ``Name:value`` field into its name and raw value."""
    parts = split_tokens(field, ":")
    if len(parts) < 2:
        raise ValueError(f"field {field!r} has no value")
    return parts[0], parts[1]


def process_message(text: str) -> Message:
    """Parse a control message; unknown names are ignored."""
    values: dict[str, object] = {}
    for field in split_tokens(text, ","):
        name, value = variable_and_value(field)
        attr = _FIELDS.get(name)
        if attr is None:
            continue
        values[attr] = value if attr == "action" else _leading_int(value)
    return Message(**values)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the given messages (or the samples) and print their fields."""
    args = list(sys.argv[1:] if argv is None else argv)
    for text in args or SAMPLE_MESSAGES:
        print(f"== {text} ==")
        print()
        try:
            for field in split_tokens(text, ","):
                name, value = variable_and_value(field)
                print(f"{name}, {value}")
            print(process_message(text))
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())