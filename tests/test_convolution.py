import numpy as np
import pytest

from superwav.convolution import (
    OverlapAddConvolver,
    OverlapSaveConvolver,
    convolve,
    error_check,
    fft_convolve,
    format_signal,
    input_side_conv,
    main,
    next_pow2,
    output_side_conv,
)

X = [0, -1, -1, 2, 1, 1]
H = [1, 0, -1, 1]
EXPECTED = [0, -1, -1, 3, 1, -2, 1, 0, 1]

SIZES = [(8, 8, 8), (64, 8, 16), (100, 16, 32), (30, 4, 8), (256, 64, 64)]


def _random(lx, lh):
    rng = np.random.default_rng(50085)
    return rng.random(lx), rng.random(lh)


def _stream(convolver, signal, bs):
    blocks = [signal[k * bs : (k + 1) * bs] for k in range(len(signal) // bs + 2)]
    return np.concatenate([convolver.process(b) for b in blocks])


def test_input_side_example():
    assert input_side_conv(X, H) == EXPECTED


def test_output_side_example():
    assert output_side_conv(X, H) == EXPECTED


def test_convolve_box_signal():
    assert convolve([1, 1, 1, 1, 1], [1, 1, 1]) == [1.0, 2.0, 3.0, 3.0, 3.0, 2.0, 1.0]


def test_empty_input_rejected():
    with pytest.raises(ValueError):
        convolve([], [1.0])
    with pytest.raises(ValueError):
        input_side_conv([1], [])


def test_format_signal():
    text = format_signal("kernel", [1, 2])
    assert text == "kernel[0] = 1   | * \nkernel[1] = 2   | *  * \n\n"


def test_format_signal_negative_has_no_bars():
    assert format_signal("s", [-2]) == "s[0] = -2   |\n\n"


@pytest.mark.parametrize(
    "value, expected", [(1, 1), (2, 2), (8, 8), (9, 16), (15, 16), (16, 16), (17, 32)]
)
def test_next_pow2(value, expected):
    assert next_pow2(value) == expected


def test_next_pow2_rejects_zero():
    with pytest.raises(ValueError):
        next_pow2(0)


@pytest.mark.parametrize("lx, lh, bs", SIZES)
def test_direct_methods_agree(lx, lh, bs):
    a, h = _random(lx, lh)
    reference = input_side_conv(a.tolist(), h.tolist())
    assert np.allclose(convolve(a.tolist(), h.tolist()), reference)
    assert np.allclose(output_side_conv(a.tolist(), h.tolist()), reference)
    assert abs(error_check(reference, convolve(a.tolist(), h.tolist()))) < 1e-9


@pytest.mark.parametrize("lx, lh, bs", SIZES)
def test_overlap_add_matches_direct(lx, lh, bs):
    a, h = _random(lx, lh)
    reference = input_side_conv(a.tolist(), h.tolist())
    result = _stream(OverlapAddConvolver(h, bs), a, bs)[: lx + lh - 1]
    assert np.allclose(result, reference)
    assert abs(error_check(reference, result)) < 1e-9


@pytest.mark.parametrize("lx, lh, bs", SIZES)
def test_fft_matches_direct(lx, lh, bs):
    a, h = _random(lx, lh)
    reference = input_side_conv(a.tolist(), h.tolist())
    result = fft_convolve(a, h)
    assert result.shape == (lx + lh - 1,)
    assert np.allclose(result, reference)


@pytest.mark.parametrize("lx, lh, bs", SIZES)
def test_overlap_save_matches_direct(lx, lh, bs):
    a, h = _random(lx, lh)
    reference = input_side_conv(a.tolist(), h.tolist())
    result = _stream(OverlapSaveConvolver(h, bs), a, bs)[: lx + lh - 1]
    assert np.allclose(result, reference)


def test_fft_matches_example():
    assert np.allclose(fft_convolve(X, H), EXPECTED)


@pytest.mark.parametrize("cls", [OverlapAddConvolver, OverlapSaveConvolver])
def test_kernel_longer_than_block_rejected(cls):
    with pytest.raises(ValueError):
        cls([1.0] * 9, 8)


@pytest.mark.parametrize("cls", [OverlapAddConvolver, OverlapSaveConvolver])
def test_oversized_block_rejected(cls):
    convolver = cls([1.0, 1.0], 4)
    with pytest.raises(ValueError):
        convolver.process([1.0] * 5)


@pytest.mark.parametrize("cls", [OverlapAddConvolver, OverlapSaveConvolver])
def test_block_output_length(cls):
    convolver = cls([1.0, 0.5], 8)
    assert convolver.process([1.0, 2.0]).shape == (8,)


def test_error_check_sums_differences():
    assert error_check([1, 2, 3], [0, 1, 3]) == 2.0


def test_error_check_length_mismatch():
    with pytest.raises(ValueError):
        error_check([1, 2], [1])


def test_main_prints_timings(capsys):
    assert main(["8", "8", "8"]) == 0
    out = capsys.readouterr().out
    line = out.splitlines()[0]
    assert line.startswith("8;8;8;")
    assert len(line.split(";")) == 9
    assert "error" not in out


def test_main_clamps_small_arguments(capsys):
    assert main(["2", "1"]) == 0
    assert capsys.readouterr().out.startswith("8;4;4;")


def test_main_rejects_block_smaller_than_kernel(capsys):
    assert main(["16", "16", "8"]) == 1
    assert "must be smaller" in capsys.readouterr().err