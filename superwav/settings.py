"""Client and server settings read from a configuration file."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from superwav.configfile import ConfigError, load, lookup

DEFAULT_CONFIG = "./configFolder/default.cfg"


@dataclass
class ClientCard:
    """Sound card parameters; ``buffer`` is a quarter of the PCM buffer size."""

    pcm_name: str
    frame_rate: int
    pcm_buffer_size: int
    pcm_period_size: int
    buffer: int


@dataclass
class ClientSound:
    """Sound folder and the routes of the sound files (empty where unset)."""

    sound_folder: str
    word_length: int
    sounds_number: int
    sounds_list: list[str] = field(default_factory=list)


@dataclass
class ClientSpeakers:
    """Number of speakers and of output channels."""

    speakers_number: int
    channels_number: int


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _group(config: dict[str, Any], path: str, what: str) -> dict[str, Any]:
    group = lookup(config, path)
    if not isinstance(group, dict):
        raise ConfigError(f"Missing config {what}!")
    return group


def _int(group: dict[str, Any], key: str, what: str) -> int:
    value = group.get(key)
    if not _is_int(value):
        raise ConfigError(f"Missing config {what}: '{key}' must be an integer")
    return value


def _str(group: dict[str, Any], key: str, what: str) -> str:
    value = group.get(key)
    if not isinstance(value, str):
        raise ConfigError(f"Missing config {what}: '{key}' must be a string")
    return value


def _quarter(value: int) -> int:
    quotient = abs(value) // 4
    return quotient if value >= 0 else -quotient


def client_card(config: dict[str, Any]) -> ClientCard:
    """Sound card settings from ``client.card``."""
    _group(config, "client", "Client")
    card = _group(config, "client.card", "Client Card")
    what = "Client Card"
    buffer_size = _int(card, "pcm_buffer_size", what)
    return ClientCard(
        pcm_name=_str(card, "pcm_name", what),
        frame_rate=_int(card, "frame_Rate", what),
        pcm_buffer_size=buffer_size,
        pcm_period_size=_int(card, "pcm_period_size", what),
        buffer=_quarter(buffer_size),
    )


def client_sound(config: dict[str, Any]) -> ClientSound:
    """Sound settings from ``client.sound``, with each file joined to the folder."""
    _group(config, "client", "Client")
    sound = _group(config, "client.sound", "Client Sound")
    what = "Client Sound"
    folder = _str(sound, "sound_folder", what)
    word_length = _int(sound, "word_length", what)
    sounds_number = _int(sound, "sounds_number", what)
    if word_length <= 0 or sounds_number < 0:
        raise ConfigError("word_length must be positive and sounds_number not negative")

    entries = sound.get("sounds_list")
    if isinstance(entries, dict):
        entries = list(entries.values())
    if not isinstance(entries, list):
        raise ConfigError("Missing config Client Sound: 'sounds_list' must be a list")
    if len(entries) > sounds_number:
        raise ConfigError(
            f"sounds_list holds {len(entries)} entries but sounds_number is {sounds_number}"
        )

    routes = [""] * sounds_number
    for i, entry in enumerate(entries):
        file_name = entry.get("file_name") if isinstance(entry, dict) else None
        if not isinstance(file_name, str):
            continue
        route = folder + file_name
        if len(route) >= word_length:
            raise ConfigError(f"sound route {route!r} is longer than word_length {word_length}")
        routes[i] = route

    return ClientSound(folder, word_length, sounds_number, routes)


def client_speakers(config: dict[str, Any]) -> ClientSpeakers:
    """Speaker settings from ``client.speekers``."""
    _group(config, "client", "Client")
    speakers = _group(config, "client.speekers", "Speekers")
    what = "Speekers"
    return ClientSpeakers(
        speakers_number=_int(speakers, "speekers_number", what),
        channels_number=_int(speakers, "chanels_number", what),
    )


def server_clients_number(config: dict[str, Any]) -> int:
    """Number of clients the server expects, from ``server.clients_number``."""
    server = _group(config, "server", "Server")
    return _int(server, "clients_number", "Server")


def main(argv: Sequence[str] | None = None) -> int:
    """Read a configuration file and print the client and server settings."""
    args = list(sys.argv[1:] if argv is None else argv)
    path = args[0] if args else DEFAULT_CONFIG
    try:
        config = load(path)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1

    time_to_start = lookup(config, "time_to_start")
    if _is_int(time_to_start):
        print(f"Time to start: {time_to_start}\n")
    else:
        print("No 'time_to_start' setting in configuration file.", file=sys.stderr)

    try:
        card = client_card(config)
        print(
            f"{card.pcm_name:<30}  {card.frame_rate}  {card.pcm_buffer_size}  "
            f"{card.pcm_period_size}  {card.buffer}"
        )
        sound = client_sound(config)
        print(f"{sound.sound_folder:<30}  {sound.sounds_number}  {sound.word_length} ")
        for route in sound.sounds_list:
            print(route)
        speakers = client_speakers(config)
        print(f"{speakers.speakers_number}  {speakers.channels_number}")
        print(server_clients_number(config))
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())