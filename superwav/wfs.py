"""Wave field synthesis: per-speaker gains and delays, and delayed channel buffers."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

SPEED_OF_SOUND = 343
PI = 3.141592
SAMPLE_RATE = 44100
# The virtual source lies outside the speaker array.
LAND = -1

DEFAULT_SOURCE = (0.0, 11.0)


@dataclass(frozen=True)
class Speaker:
    """A speaker at (x, y) facing ``theta`` degrees."""

    x: float
    y: float
    theta: float = 0.0


@dataclass(frozen=True)
class WFSResult:
    """Per-speaker activity, index (-1 when inactive), delay in samples and gain."""

    active: tuple[bool, ...]
    positions: tuple[int, ...]
    delays: tuple[float, ...]
    amplitudes: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.active)


DEFAULT_SPEAKERS = (
    Speaker(2.0, 5.0, 0.0),
    Speaker(2.0, 7.0, 0.0),
    Speaker(4.0, 9.0, -90.0),
    Speaker(6.0, 9.0, -90.0),
)


def wave_field_synthesis(speakers: Sequence[Speaker], pos_x: float, pos_y: float) -> WFSResult:
    """Compute which speakers render a source at (pos_x, pos_y), with delays and gains."""
    active: list[bool] = []
    positions: list[int] = []
    delays: list[float] = []
    amplitudes: list[float] = []

    for i, speaker in enumerate(speakers):
        dx = speaker.x - pos_x
        dy = speaker.y - pos_y
        alpha = math.atan2(dy, dx) * 180 / PI
        is_active = speaker.theta - 90 <= alpha <= speaker.theta + 90
        active.append(is_active)
        positions.append(i if is_active else -1)

        r = math.sqrt(dx * dx + dy * dy)
        if r == 0:
            raise ValueError(f"source coincides with speaker {i}")
        amplitudes.append(1 / math.sqrt(r))
        delays.append(-LAND * (SAMPLE_RATE * (r / SPEED_OF_SOUND)))

    return WFSResult(tuple(active), tuple(positions), tuple(delays), tuple(amplitudes))


def generate_song_wfs(
    samples: Sequence[int],
    result: WFSResult,
    index: int,
    buffer_size: int,
    channels: int | None = None,
) -> np.ndarray:
    """Fill block ``index`` of every channel with the delayed, scaled song samples.

    Returns an integer array of shape (channels, buffer_size); inactive channels
    and positions outside the delayed song are silent.
    """
    if channels is None:
        channels = len(result)
    if buffer_size <= 0:
        raise ValueError(f"buffer size must be positive, got {buffer_size}")
    if not 0 <= channels <= len(result):
        raise ValueError(f"channels must be between 0 and {len(result)}, got {channels}")

    data = np.asarray(samples)
    out = np.zeros((channels, buffer_size), dtype=np.int64)
    start = index * buffer_size
    absolute = np.arange(start, start + buffer_size)

    for j in range(channels):
        if not result.active[j]:
            continue
        source = absolute - math.ceil(result.delays[j])
        inside = (source >= 0) & (source < data.size)
        values = np.zeros(buffer_size, dtype=float)
        values[inside] = data[source[inside]]
        out[j] = np.trunc(result.amplitudes[j] * values).astype(np.int64)
    return out


def _format_row(name: str, values: Sequence, fmt: str) -> str:
    return f"    {name}\t\t\t[" + " ".join(format(v, fmt) for v in values) + "]"


def main(argv: Sequence[str] | None = None) -> int:
    """Print the synthesis parameters for a source position (default 0, 11)."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        pos_x = float(args[0]) if len(args) >= 1 else DEFAULT_SOURCE[0]
        pos_y = float(args[1]) if len(args) >= 2 else DEFAULT_SOURCE[1]
        result = wave_field_synthesis(DEFAULT_SPEAKERS, pos_x, pos_y)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print("    parray\t\t[" + " ".join(str(int(a)) for a in result.active) + "]")
    print(_format_row("an", result.amplitudes, "f"))
    print(_format_row("tn", result.delays, "f"))
    return 0


if __name__ == "__main__":
    sys.exit(main())