from __future__ import annotations

import dataclasses

import numpy as np
import pytest
from scipy.signal import windows as scipy_windows

from dsp.windows import (
    WindowGenerator,
    WindowKind,
    apply_window,
    available_windows,
    coherent_gain,
    generate,
    get_window,
    window_correction_factor,
)

SIZES = [1, 2, 3, 4, 5, 16, 63, 64, 1024]
SYMMETRIC_KINDS = [
    WindowKind.HANN,
    WindowKind.HAMMING,
    WindowKind.BLACKMAN,
    WindowKind.BLACKMAN_HARRIS,
    WindowKind.BARTLETT,
]


@pytest.mark.parametrize("kind", list(WindowKind))
@pytest.mark.parametrize("size", SIZES)
def test_length_and_dtype(kind, size):
    w = generate(kind, size)
    assert w.shape == (size,)
    assert w.dtype == np.float32
    assert np.all(np.isfinite(w))


@pytest.mark.parametrize("size", SIZES)
def test_rectangular_is_all_ones(size):
    assert np.array_equal(generate(WindowKind.RECTANGULAR, size), np.ones(size))


@pytest.mark.parametrize("kind", list(WindowKind))
def test_size_one_is_unity(kind):
    w = generate(kind, 1)
    assert w.tolist() == [1.0]


@pytest.mark.parametrize("kind", SYMMETRIC_KINDS)
@pytest.mark.parametrize("size", [2, 3, 4, 5, 64, 255])
def test_symmetric(kind, size):
    w = generate(kind, size)
    assert np.allclose(w, w[::-1], atol=1e-6)


def test_hann_four():
    assert np.allclose(generate(WindowKind.HANN, 4), [0.0, 0.75, 0.75, 0.0], atol=1e-7)


def test_bartlett_four():
    assert np.allclose(generate(WindowKind.BARTLETT, 4), [0.0, 2 / 3, 2 / 3, 0.0], atol=1e-7)


def test_rectangular_five():
    assert generate(WindowKind.RECTANGULAR, 5).tolist() == [1.0] * 5


def test_triangular_even():
    w = generate(WindowKind.TRIANGULAR, 4)
    assert w.tolist() == [0.0, 0.25, 0.75, 0.75]


def test_triangular_odd():
    w = generate(WindowKind.TRIANGULAR, 5)
    assert w[0] == 0.0
    assert np.allclose(w, [0.0, 1 / 3, 2 / 3, 1.0, 2 / 3], atol=1e-7)


@pytest.mark.parametrize("size", [2, 3, 4, 7, 8, 101, 256])
def test_triangular_first_sample_is_zero_and_rest_is_shifted_triang(size):
    w = generate(WindowKind.TRIANGULAR, size)
    assert w[0] == 0.0
    assert np.allclose(w[1:], scipy_windows.triang(size)[:-1], atol=1e-6)


@pytest.mark.parametrize("size", [2, 3, 4, 17, 128, 1000])
def test_matches_scipy_symmetric_windows(size):
    reference = {
        WindowKind.HANN: scipy_windows.hann(size),
        WindowKind.HAMMING: scipy_windows.general_hamming(size, 0.53836),
        WindowKind.BLACKMAN: scipy_windows.blackman(size),
        WindowKind.BLACKMAN_HARRIS: scipy_windows.blackmanharris(size),
        WindowKind.BARTLETT: scipy_windows.bartlett(size),
        WindowKind.RECTANGULAR: scipy_windows.boxcar(size),
    }
    for kind, expected in reference.items():
        assert np.allclose(generate(kind, size), expected, atol=1e-6), kind


def test_hamming_endpoints():
    w = generate(WindowKind.HAMMING, 9)
    assert np.isclose(w[0], 0.53836 - 0.46164, atol=1e-7)
    assert np.isclose(w[4], 1.0, atol=1e-7)


@pytest.mark.parametrize("kind", list(WindowKind))
def test_repeated_calls_are_identical(kind):
    first = generate(kind, 513)
    second = generate(kind, 513)
    assert first is not second
    assert np.array_equal(first, second)
    second[0] = 42.0
    assert not np.array_equal(first, second)


@pytest.mark.parametrize("kind", list(WindowKind))
@pytest.mark.parametrize("size", [0, -1, -1024])
def test_non_positive_size_raises(kind, size):
    with pytest.raises(ValueError, match="must be positive"):
        generate(kind, size)


def test_non_integral_size_raises():
    with pytest.raises(TypeError):
        generate(WindowKind.HANN, 2.5)


def test_numpy_integer_size_accepted():
    assert generate(WindowKind.HANN, np.int64(8)).shape == (8,)


@pytest.mark.parametrize("kind", ["no-such-window", None, 7, ["hann"]])
def test_unknown_kind_falls_back_to_rectangular(kind):
    assert np.array_equal(generate(kind, 6), np.ones(6, dtype=np.float32))


def test_string_value_dispatches_to_kind():
    assert np.array_equal(generate("blackman-harris", 32), generate(WindowKind.BLACKMAN_HARRIS, 32))


class TestWindowKindLookup:

    @pytest.mark.parametrize("name,expected", [
        ("hann", WindowKind.HANN),
        ("Hanning", WindowKind.HANN),
        ("BLACKMAN_HARRIS", WindowKind.BLACKMAN_HARRIS),
        ("blackman harris", WindowKind.BLACKMAN_HARRIS),
        (" Bartlett ", WindowKind.BARTLETT),
        ("rect", WindowKind.RECTANGULAR),
        (WindowKind.TRIANGULAR, WindowKind.TRIANGULAR),
    ])
    def test_from_name(self, name, expected):
        assert WindowKind.from_name(name) is expected

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown window"):
            WindowKind.from_name("kaiser")

    @pytest.mark.parametrize("name", [None, 3, b"hann"])
    def test_non_string_name_raises(self, name):
        with pytest.raises(ValueError, match="Unknown window"):
            WindowKind.from_name(name)

    def test_get_window_by_name(self):
        assert np.array_equal(get_window("hamming", 10), generate(WindowKind.HAMMING, 10))

    def test_get_window_unknown_name_raises(self):
        with pytest.raises(ValueError):
            get_window("flat-top", 10)

    def test_available_windows(self):
        assert available_windows() == [
            "rectangular",
            "triangular",
            "hann",
            "hamming",
            "blackman",
            "blackman-harris",
            "bartlett",
        ]


class TestWindowGenerator:

    def test_generate_uses_fixed_kind(self):
        gen = WindowGenerator(WindowKind.BLACKMAN)
        assert np.array_equal(gen.generate(64), generate(WindowKind.BLACKMAN, 64))

    def test_kind_is_immutable(self):
        gen = WindowGenerator(WindowKind.HANN)
        with pytest.raises(dataclasses.FrozenInstanceError):
            gen.kind = WindowKind.HAMMING

    def test_window_type_and_str(self):
        gen = WindowGenerator(WindowKind.BLACKMAN_HARRIS)
        assert gen.window_type is WindowKind.BLACKMAN_HARRIS
        assert str(gen) == "BLACKMAN_HARRIS"

    def test_equal_generators(self):
        assert WindowGenerator(WindowKind.HANN) == WindowGenerator(WindowKind.HANN)
        assert hash(WindowGenerator(WindowKind.HANN)) == hash(WindowGenerator(WindowKind.HANN))


class TestApplyWindow:

    def test_ones_frame_returns_window(self):
        frame = np.ones(16, dtype=np.float32)
        assert np.array_equal(apply_window(frame, WindowKind.HANN), generate(WindowKind.HANN, 16))

    def test_accepts_name(self):
        frame = np.full(8, 2.0)
        assert np.allclose(apply_window(frame, "bartlett"), 2.0 * generate(WindowKind.BARTLETT, 8))

    @pytest.mark.parametrize("frame", [np.zeros((2, 4)), np.array([])])
    def test_rejects_bad_frames(self, frame):
        with pytest.raises(ValueError):
            apply_window(frame, WindowKind.HANN)


def test_window_correction_factor_rectangular():
    assert window_correction_factor(generate(WindowKind.RECTANGULAR, 8)) == 64.0


def test_coherent_gain_hann():
    # sum of cos over the symmetric window is exactly 1, so mean = 0.5 * (N - 1) / N
    assert np.isclose(coherent_gain(generate(WindowKind.HANN, 8)), 0.4375, atol=1e-6)
