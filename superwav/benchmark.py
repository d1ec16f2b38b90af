"""Timing of wave field synthesis buffer generation for growing speaker arrays."""

from __future__ import annotations

import argparse
import sys
import time
import wave
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from superwav.wfs import (
    DEFAULT_SOURCE,
    DEFAULT_SPEAKERS,
    Speaker,
    WFSResult,
    generate_song_wfs,
    wave_field_synthesis,
)

DEFAULT_SONGS = (
    "../../bin/sound/001_piano.wav",
    "../../bin/sound/voz4408.wav",
    "../../bin/sound/001_bajo.wav",
    "../../bin/sound/001_bateriabuena.wav",
)

FIRST_BUFFER_SIZE = 512
FIRST_CHANNELS = 4
DEFAULT_BLOCKS = 10
DEFAULT_BUFFER_SIZE = 2048
DEFAULT_MAX_SPEAKERS = 100
DEFAULT_STEP = 2


def default_speakers() -> list[Speaker]:
    """The four-speaker layout used as the base array."""
    return list(DEFAULT_SPEAKERS)


def replicate_speakers(count: int) -> list[Speaker]:
    """An array of ``count`` speakers cycling through the base layout."""
    if count < 0:
        raise ValueError(f"speaker count must not be negative, got {count}")
    base = default_speakers()
    return [base[z % len(base)] for z in range(count)]


def read_wav_samples(path: str | Path) -> np.ndarray:
    """Read a PCM WAV file as interleaved samples scaled to 32-bit integers."""
    with wave.open(str(path), "rb") as reader:
        width = reader.getsampwidth()
        frames = reader.readframes(reader.getnframes())

    if width == 1:
        raw = np.frombuffer(frames, dtype=np.uint8).astype(np.int32)
        return (raw - 128) << 24
    if width == 2:
        return np.frombuffer(frames, dtype="<i2").astype(np.int32) << 16
    if width == 3:
        raw = np.frombuffer(frames, dtype=np.uint8).reshape(-1, 3).astype(np.uint32)
        packed = (raw[:, 0] << 8) | (raw[:, 1] << 16) | (raw[:, 2] << 24)
        return packed.view(np.int32)
    if width == 4:
        return np.frombuffer(frames, dtype="<i4").astype(np.int32)
    raise ValueError(f"unsupported sample width: {width} bytes")


def time_blocks(
    songs: Sequence[Sequence[int]],
    result: WFSResult,
    blocks: int,
    buffer_size: int,
    channels: int,
) -> list[float]:
    """Milliseconds spent generating each block for every song."""
    if blocks < 0:
        raise ValueError(f"block count must not be negative, got {blocks}")
    timings = []
    for block in range(blocks):
        start = time.perf_counter()
        for song in songs:
            generate_song_wfs(song, result, block, buffer_size, channels)
        timings.append((time.perf_counter() - start) * 1000.0)
    return timings


def run_benchmark(
    songs: Sequence[Sequence[int]],
    max_speakers: int = DEFAULT_MAX_SPEAKERS,
    step: int = DEFAULT_STEP,
    blocks: int = DEFAULT_BLOCKS,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> dict[int, list[float]]:
    """Block timings for arrays of 2, 2 + step, ... up to ``max_speakers`` speakers."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    timings: dict[int, list[float]] = {}
    for count in range(2, max_speakers + 1, step):
        speakers = replicate_speakers(count)
        result = wave_field_synthesis(speakers, *DEFAULT_SOURCE)
        timings[count] = time_blocks(songs, result, blocks, buffer_size, count)
    return timings


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("songs", nargs="*", default=list(DEFAULT_SONGS))
    parser.add_argument("--blocks", type=int, default=DEFAULT_BLOCKS)
    parser.add_argument("--max-speakers", type=int, default=DEFAULT_MAX_SPEAKERS)
    parser.add_argument("--step", type=int, default=DEFAULT_STEP)
    parser.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Time buffer generation for the base array, then for growing arrays."""
    args = _parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    try:
        songs = [read_wav_samples(path) for path in args.songs]
    except (OSError, EOFError, wave.Error, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        result = wave_field_synthesis(default_speakers(), *DEFAULT_SOURCE)
        for block, elapsed in enumerate(
            time_blocks(songs, result, args.blocks, FIRST_BUFFER_SIZE, FIRST_CHANNELS)
        ):
            print(f"{block}, {elapsed:f} ")

        print(" ============== ")

        timings = run_benchmark(
            songs, args.max_speakers, args.step, args.blocks, args.buffer_size
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for count, values in timings.items():
        print(f"speakers number: {count} ")
        for block, elapsed in enumerate(values):
            print(f"{block}; {elapsed:f} ")
    return 0


if __name__ == "__main__":
    sys.exit(main())