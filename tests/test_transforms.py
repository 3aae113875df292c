# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Tests for the Fast Wavelet Transform.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from fast_wavelet.exceptions import DomainError
from fast_wavelet.transforms import FastWaveletTransform, build_transform
from fast_wavelet.wavelets import (
    Wavelet, OrthogonalWavelet, Haar1, Daubechies, Symlet, Coiflet
)


KERNELS = [Haar1(), Daubechies(2), Daubechies(4), Symlet(4), Coiflet(2)]
LENGTHS = [1, 2, 4, 8, 64, 1024]


class RecordingHaar(Haar1):
    """Haar kernel that remembers the windows it was called with."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def forward(self, buffer, length):
        self.calls.append(("forward", length))
        return super().forward(buffer, length)

    def reverse(self, buffer, length):
        self.calls.append(("reverse", length))
        return super().reverse(buffer, length)


class WideHaar(OrthogonalWavelet):
    """Haar filters that refuse windows smaller than four samples."""

    def __init__(self):
        s = 1.0 / np.sqrt(2.0)
        super().__init__("Wide Haar", [s, s], transform_wavelength=4)


class IdentityKernel(Wavelet):
    """Kernel with a configurable wavelength that leaves blocks unchanged."""

    def forward(self, buffer, length):
        return np.array(buffer[:length])

    def reverse(self, buffer, length):
        return np.array(buffer[:length])


def haar_reference(signal):
    """Plain recursive Haar transform used as an independent reference."""
    coefficients = np.array(signal, dtype=np.float64)
    h = len(coefficients)
    while h >= 2:
        block = coefficients[:h]
        approximation = (block[0::2] + block[1::2]) / np.sqrt(2.0)
        detail = (block[0::2] - block[1::2]) / np.sqrt(2.0)
        coefficients[:h] = np.concatenate([approximation, detail])
        h //= 2
    return coefficients


@pytest.fixture
def haar_fwt():
    return FastWaveletTransform(Haar1())


class TestForwardReverse:
    """Tests for the collapsed forward and reverse transforms."""

    def test_constant_signal_haar(self, haar_fwt):
        """All energy of a constant signal ends up in the first coefficient."""
        signal = np.ones(8)
        coefficients = haar_fwt.forward(signal)

        assert coefficients.shape == (8,)
        assert coefficients[0] == pytest.approx(2.0 * np.sqrt(2.0))
        np.testing.assert_allclose(coefficients[1:], 0.0, atol=1e-12)

        np.testing.assert_allclose(haar_fwt.reverse(coefficients), signal, atol=1e-12)

    def test_matches_reference_haar(self, haar_fwt, rng):
        signal = rng.standard_normal(32)
        np.testing.assert_allclose(haar_fwt.forward(signal), haar_reference(signal), atol=1e-12)

    @pytest.mark.parametrize("kernel", KERNELS, ids=lambda k: k.name)
    @pytest.mark.parametrize("length", LENGTHS)
    def test_round_trip(self, kernel, length, rng):
        fwt = FastWaveletTransform(kernel)
        signal = rng.standard_normal(length)

        coefficients = fwt.forward(signal)
        np.testing.assert_allclose(fwt.reverse(coefficients), signal, atol=1e-10)
        np.testing.assert_allclose(fwt.forward(fwt.reverse(coefficients)), coefficients, atol=1e-10)

    @pytest.mark.parametrize("kernel", KERNELS, ids=lambda k: k.name)
    def test_rounding_error_bounded_at_every_level(self, kernel, rng):
        """Error stays small after each of the log2(N) sequential kernel steps."""
        fwt = FastWaveletTransform(kernel)
        signal = rng.standard_normal(2**14)

        for level in range(fwt.max_level(len(signal)) + 1):
            coefficients = fwt.forward(signal, level)
            assert np.sum(coefficients**2) == pytest.approx(np.sum(signal**2), rel=1e-12)
            restored = fwt.reverse(coefficients, level)
            assert np.max(np.abs(restored - signal)) < 1e-10

    def test_kernel_windows(self):
        kernel = RecordingHaar()
        fwt = FastWaveletTransform(kernel)

        coefficients = fwt.forward(np.arange(8.0))
        assert kernel.calls == [("forward", 8), ("forward", 4), ("forward", 2)]

        kernel.calls.clear()
        fwt.reverse(coefficients)
        assert kernel.calls == [("reverse", 2), ("reverse", 4), ("reverse", 8)]

    def test_input_not_modified(self, haar_fwt, rng):
        signal = rng.standard_normal(16)
        original = signal.copy()

        coefficients = haar_fwt.forward(signal)
        restored = haar_fwt.reverse(coefficients)

        np.testing.assert_array_equal(signal, original)
        assert not np.shares_memory(coefficients, signal)
        assert not np.shares_memory(restored, coefficients)

    def test_accepts_lists(self, haar_fwt):
        coefficients = haar_fwt.forward([1, 2, 3, 4])
        assert coefficients.dtype == np.float64
        np.testing.assert_allclose(coefficients, haar_reference([1.0, 2.0, 3.0, 4.0]))

    def test_single_sample_is_identity(self, haar_fwt):
        np.testing.assert_array_equal(haar_fwt.forward([3.5]), [3.5])
        np.testing.assert_array_equal(haar_fwt.reverse([3.5]), [3.5])

    @pytest.mark.parametrize("length", [0, 3, 5, 6, 12, 1000])
    def test_invalid_lengths(self, haar_fwt, length):
        signal = np.ones(length)
        with pytest.raises(DomainError):
            haar_fwt.forward(signal)
        with pytest.raises(DomainError):
            haar_fwt.reverse(signal)

    def test_domain_error_is_value_error(self, haar_fwt):
        with pytest.raises(ValueError):
            haar_fwt.forward(np.ones(3))

    def test_multidimensional_input_rejected(self, haar_fwt):
        with pytest.raises(DomainError):
            haar_fwt.forward(np.ones((4, 4)))
        with pytest.raises(DomainError):
            haar_fwt.reverse(5.0)


class TestLevels:
    """Tests for partial transforms."""

    def test_max_level(self, haar_fwt):
        assert haar_fwt.max_level(1) == 0
        assert haar_fwt.max_level(2) == 1
        assert haar_fwt.max_level(1024) == 10
        assert FastWaveletTransform(WideHaar()).max_level(8) == 2
        assert FastWaveletTransform(WideHaar()).max_level(2) == 0

    def test_level_zero_is_identity(self, haar_fwt, rng):
        signal = rng.standard_normal(16)
        np.testing.assert_array_equal(haar_fwt.forward(signal, 0), signal)
        np.testing.assert_array_equal(haar_fwt.reverse(signal, 0), signal)

    def test_single_level(self, haar_fwt):
        coefficients = haar_fwt.forward([1.0, 3.0, 5.0, 7.0, 2.0, 2.0, 4.0, 0.0], level=1)
        s = 1.0 / np.sqrt(2.0)
        expected = np.array([4.0, 12.0, 4.0, 4.0, -2.0, -2.0, 0.0, 4.0]) * s
        np.testing.assert_allclose(coefficients, expected, atol=1e-12)

    def test_full_level_matches_default(self, haar_fwt, rng):
        signal = rng.standard_normal(64)
        np.testing.assert_array_equal(haar_fwt.forward(signal, 6), haar_fwt.forward(signal))

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_partial_round_trip(self, level, rng):
        fwt = FastWaveletTransform(Daubechies(2))
        signal = rng.standard_normal(16)
        np.testing.assert_allclose(fwt.reverse(fwt.forward(signal, level), level), signal, atol=1e-10)

    @pytest.mark.parametrize("level", [-1, 5, 2.0, True])
    def test_invalid_levels(self, haar_fwt, level):
        with pytest.raises(DomainError):
            haar_fwt.forward(np.ones(16), level)
        with pytest.raises(DomainError):
            haar_fwt.reverse(np.ones(16), level)


class TestDecomposeRecompose:
    """Tests for the per-level decomposition matrix."""

    def test_matrix_shape(self, haar_fwt, rng):
        for length in LENGTHS:
            matrix = haar_fwt.decompose(rng.standard_normal(length))
            assert matrix.shape == (int(np.log2(length)) + 1, length)

    def test_first_row_is_signal(self, haar_fwt, rng):
        signal = rng.standard_normal(32)
        matrix = haar_fwt.decompose(signal)
        np.testing.assert_array_equal(matrix[0], signal)

    def test_rows_follow_forward_levels(self, rng):
        fwt = FastWaveletTransform(Daubechies(2))
        signal = rng.standard_normal(32)
        matrix = fwt.decompose(signal)

        for level in range(1, matrix.shape[0]):
            h = 32 >> (level - 1)
            np.testing.assert_allclose(matrix[level, :h], fwt.forward(signal, level)[:h], atol=1e-12)
            np.testing.assert_array_equal(matrix[level, h:], 0.0)

    def test_last_row_holds_coarsest_coefficients(self, haar_fwt, rng):
        signal = rng.standard_normal(16)
        matrix = haar_fwt.decompose(signal)
        np.testing.assert_allclose(matrix[-1, :2], haar_fwt.forward(signal)[:2], atol=1e-12)

    def test_single_sample(self, haar_fwt):
        matrix = haar_fwt.decompose([2.5])
        np.testing.assert_array_equal(matrix, [[2.5]])
        np.testing.assert_array_equal(haar_fwt.recompose(matrix), [2.5])

    @pytest.mark.parametrize("kernel", KERNELS, ids=lambda k: k.name)
    def test_round_trip_four_samples(self, kernel):
        fwt = FastWaveletTransform(kernel)
        signal = np.array([4.0, -1.0, 2.5, 7.0])
        np.testing.assert_allclose(fwt.recompose(fwt.decompose(signal)), signal, atol=1e-10)

    @pytest.mark.parametrize("kernel", KERNELS, ids=lambda k: k.name)
    @pytest.mark.parametrize("length", LENGTHS)
    def test_round_trip(self, kernel, length, rng):
        fwt = FastWaveletTransform(kernel)
        signal = rng.standard_normal(length)
        np.testing.assert_allclose(fwt.recompose(fwt.decompose(signal)), signal, atol=1e-10)

    def test_input_not_modified(self, haar_fwt, rng):
        signal = rng.standard_normal(8)
        original = signal.copy()
        matrix = haar_fwt.decompose(signal)
        matrix_copy = matrix.copy()

        haar_fwt.recompose(matrix)

        np.testing.assert_array_equal(signal, original)
        np.testing.assert_array_equal(matrix, matrix_copy)

    def test_unreachable_levels_stay_zero(self, rng):
        fwt = FastWaveletTransform(WideHaar())
        signal = rng.standard_normal(8)
        matrix = fwt.decompose(signal)

        assert matrix.shape == (4, 8)
        np.testing.assert_array_equal(matrix[3], 0.0)
        np.testing.assert_allclose(fwt.recompose(matrix), signal, atol=1e-12)
        np.testing.assert_allclose(fwt.reverse(fwt.forward(signal)), signal, atol=1e-12)

    def test_invalid_signal(self, haar_fwt):
        with pytest.raises(DomainError):
            haar_fwt.decompose(np.ones(6))

    @pytest.mark.parametrize("matrix", [
        np.ones(8),
        np.ones((3, 6)),
        np.ones((3, 8)),
        np.ones((0, 4)),
        np.ones((2, 2, 2)),
    ])
    def test_invalid_matrix(self, haar_fwt, matrix):
        with pytest.raises(DomainError):
            haar_fwt.recompose(matrix)


class TestConstruction:
    """Tests for engine construction and configuration."""

    @pytest.mark.parametrize("wavelength", [0, 1, 3, 6])
    def test_invalid_wavelength(self, wavelength):
        with pytest.raises(DomainError):
            FastWaveletTransform(IdentityKernel("broken", transform_wavelength=wavelength))

    def test_requires_wavelet(self):
        with pytest.raises(TypeError):
            FastWaveletTransform("haar")

    def test_build_transform(self):
        fwt = build_transform("db2")
        assert isinstance(fwt, FastWaveletTransform)
        assert isinstance(fwt.wavelet, Daubechies)
        assert fwt.wavelet.order == 2

        coif = build_transform(Coiflet(3), transform="Fast Wavelet Transform")
        assert isinstance(coif.wavelet, Coiflet)

        assert isinstance(build_transform().wavelet, Haar1)

    def test_build_transform_invalid(self):
        with pytest.raises(DomainError):
            build_transform("haar", transform="dft")
        with pytest.raises(DomainError):
            build_transform("wood")

    def test_shared_kernel_across_threads(self, rng):
        kernel = Symlet(4)
        signals = [rng.standard_normal(256) for _ in range(16)]

        def round_trip(signal):
            fwt = FastWaveletTransform(kernel)
            return fwt.reverse(fwt.forward(signal))

        with ThreadPoolExecutor(max_workers=4) as executor:
            results = list(executor.map(round_trip, signals))

        for signal, restored in zip(signals, results):
            np.testing.assert_allclose(restored, signal, atol=1e-10)


class TestLogging:
    """Tests for the transform's log output."""

    def test_levels_logged_at_debug(self, haar_fwt, caplog):
        caplog.set_level(logging.DEBUG, logger="FastWaveletTransform")
        haar_fwt.forward(np.ones(4))

        messages = [record.getMessage() for record in caplog.records]
        assert "forward level 1: window 4" in messages
        assert "forward level 2: window 2" in messages

    def test_rejection_logged_as_warning(self, haar_fwt, caplog):
        caplog.set_level(logging.WARNING, logger="FastWaveletTransform")
        with pytest.raises(DomainError):
            haar_fwt.forward(np.ones(5))

        assert any(record.levelno == logging.WARNING for record in caplog.records)

    def test_custom_logger(self, caplog):
        logger = logging.getLogger("custom_fwt")
        caplog.set_level(logging.DEBUG, logger="custom_fwt")

        fwt = FastWaveletTransform(Haar1(), logger=logger)
        fwt.reverse(np.ones(2))

        assert fwt.logger is logger
        assert any(record.name == "custom_fwt" for record in caplog.records)
