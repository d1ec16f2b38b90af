"""Discrete convolution: direct, block-based (overlap-add/save) and FFT methods."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Sequence

import numpy as np

DEFAULT_SEED = 50085


def _check_nonempty(signal: Sequence, kernel: Sequence) -> None:
    if len(signal) == 0 or len(kernel) == 0:
        raise ValueError("signal and kernel must not be empty")


def input_side_conv(x: Sequence, h: Sequence) -> list:
    """Convolve by spreading each input sample over the output."""
    _check_nonempty(x, h)
    y = [0] * (len(x) + len(h) - 1)
    for i, xi in enumerate(x):
        for j, hj in enumerate(h):
            y[i + j] += xi * hj
    return y


def output_side_conv(x: Sequence, h: Sequence) -> list:
    """Convolve by gathering the contributions to each output sample."""
    _check_nonempty(x, h)
    n_x, n_h = len(x), len(h)
    return [
        sum(h[j] * x[n - j] for j in range(max(0, n - n_x + 1), min(n_h, n + 1)))
        for n in range(n_x + n_h - 1)
    ]


def convolve(signal: Sequence[float], kernel: Sequence[float]) -> list[float]:
    """Full linear convolution, visiting only the overlapping index range."""
    _check_nonempty(signal, kernel)
    n_s, n_k = len(signal), len(kernel)
    result = []
    for n in range(n_s + n_k - 1):
        kmin = max(0, n - (n_k - 1))
        kmax = min(n, n_s - 1)
        result.append(float(sum(signal[k] * kernel[n - k] for k in range(kmin, kmax + 1))))
    return result


def format_signal(name: str, signal: Sequence[float]) -> str:
    """Render a signal as one text bar per sample."""
    lines = []
    for i, value in enumerate(signal):
        stars = max(0, int(np.ceil(value)))
        lines.append(f"{name}[{i}] = {value:.0f}   |" + " * " * stars + "\n")
    return "".join(lines) + "\n"


def next_pow2(value: int) -> int:
    """Smallest power of two that is not less than ``value``."""
    if value < 1:
        raise ValueError(f"value must be positive, got {value}")
    return 1 << (int(value) - 1).bit_length()


def fft_convolve(x: Sequence[float], h: Sequence[float]) -> np.ndarray:
    """Full linear convolution computed through zero-padded FFTs."""
    _check_nonempty(x, h)
    xs = np.asarray(x, dtype=float)
    hs = np.asarray(h, dtype=float)
    length = xs.size + hs.size - 1
    size = next_pow2(length)
    spectrum = np.fft.rfft(xs, size) * np.fft.rfft(hs, size)
    return np.fft.irfft(spectrum, size)[:length]


def error_check(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of the element-wise differences ``a - b``."""
    first = np.asarray(a, dtype=float)
    second = np.asarray(b, dtype=float)
    if first.shape != second.shape:
        raise ValueError(f"length mismatch: {first.size} != {second.size}")
    return float(np.sum(first - second))


class _BlockConvolver:
    def __init__(self, kernel: Sequence[float], block_size: int) -> None:
        self.kernel = np.asarray(kernel, dtype=float)
        if self.kernel.ndim != 1 or self.kernel.size == 0:
            raise ValueError("kernel must be a non-empty one-dimensional sequence")
        if block_size < self.kernel.size:
            raise ValueError(
                f"kernel size ({self.kernel.size}) must not exceed block size ({block_size})"
            )
        self.block_size = block_size

    def _pad(self, block: Sequence[float]) -> np.ndarray:
        data = np.asarray(block, dtype=float)
        if data.size > self.block_size:
            raise ValueError(f"block of {data.size} samples exceeds block size {self.block_size}")
        padded = np.zeros(self.block_size)
        padded[: data.size] = data
        return padded


class OverlapAddConvolver(_BlockConvolver):
    """Streaming convolution that carries each block's tail into the next."""

    def __init__(self, kernel: Sequence[float], block_size: int) -> None:
        super().__init__(kernel, block_size)
        self._tail = np.zeros(self.kernel.size - 1)

    def process(self, block: Sequence[float]) -> np.ndarray:
        """Convolve one block; short blocks are padded with zeros."""
        full = np.convolve(self._pad(block), self.kernel)
        full[: self._tail.size] += self._tail
        self._tail = full[self.block_size :].copy()
        return full[: self.block_size]


class OverlapSaveConvolver(_BlockConvolver):
    """Streaming FFT convolution that keeps the previous block as history."""

    def __init__(self, kernel: Sequence[float], block_size: int) -> None:
        super().__init__(kernel, block_size)
        self._size = next_pow2(2 * block_size)
        self._kernel_spectrum = np.fft.rfft(self.kernel, self._size)
        self._previous = np.zeros(block_size)

    def process(self, block: Sequence[float]) -> np.ndarray:
        """Convolve one block; short blocks are padded with zeros."""
        current = self._pad(block)
        frame = np.zeros(self._size)
        frame[: self.block_size] = self._previous
        frame[self.block_size : 2 * self.block_size] = current
        out = np.fft.irfft(np.fft.rfft(frame) * self._kernel_spectrum, self._size)
        self._previous = current
        return out[self.block_size : 2 * self.block_size]


def _stream(convolver: _BlockConvolver, signal: np.ndarray, length: int) -> np.ndarray:
    bs = convolver.block_size
    blocks = (signal[k * bs : (k + 1) * bs] for k in range(signal.size // bs + 2))
    return np.concatenate([convolver.process(b) for b in blocks])[:length]


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def _timed(func: Callable[[], Sequence[float]]) -> tuple[float, Sequence[float]]:
    start = time.perf_counter()
    result = func()
    return (time.perf_counter() - start) * 1000.0, result


def main(argv: Sequence[str] | None = None) -> int:
    """Compare the convolution methods on a random signal and print timings."""
    args = list(sys.argv[1:] if argv is None else argv)
    lx = max(8, _to_int(args[0])) if len(args) >= 1 else 8
    lh = max(4, _to_int(args[1])) if len(args) >= 2 else 8
    bs = max(8, _to_int(args[2])) if len(args) >= 3 else lh

    if bs < lh:
        print(f"H size ({lh}) must be smaller than X size ({bs})", file=sys.stderr)
        return 1

    rng = np.random.default_rng(DEFAULT_SEED)
    h = rng.random(lh)
    a = rng.random(lx)
    length = lx + lh - 1

    elapsed, reference = _timed(lambda: input_side_conv(a.tolist(), h.tolist()))
    timings = [elapsed]
    methods = [
        lambda: convolve(a.tolist(), h.tolist()),
        lambda: _stream(OverlapAddConvolver(h, bs), a, length),
        lambda: fft_convolve(a, h),
        lambda: _stream(OverlapSaveConvolver(h, bs), a, length),
    ]
    errors = []
    for method in methods:
        elapsed, result = _timed(method)
        timings.append(elapsed)
        error = error_check(reference, result)
        if abs(error) > 1e-6:
            errors.append(error)

    print(f"{lx};{lh};{bs};" + "".join(f"{t:.20f};" for t in timings))
    for error in errors:
        print(f"error: {error:.20f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())