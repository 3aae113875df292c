# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Fast Wavelet Transform Module

This module provides the 1-D Fast Wavelet Transform (FWT). The transform
repeatedly applies a wavelet kernel to a halving window of the signal
(forward) or a doubling window of the coefficients (reverse), and can also
record every intermediate level as a decomposition matrix.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

import numpy as np

from .exceptions import DomainError
from .math_utils import get_exponent, is_binary
from .wavelets import Wavelet, WaveletFamily, build_wavelet


class BasicTransform(ABC):
    """Common interface of all 1-D transforms

    Parameters
    ----------
    name : str
        Human readable name of the transform
    logger : logging.Logger, optional
        Logger to report to, by default ``logging.getLogger(<class name>)``
    """

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(type(self).__name__)

    @abstractmethod
    def forward(self, signal: np.ndarray, level: Optional[int] = None) -> np.ndarray:
        """Transform a signal from time domain to Hilbert domain"""

    @abstractmethod
    def reverse(self, coefficients: np.ndarray, level: Optional[int] = None) -> np.ndarray:
        """Transform coefficients from Hilbert domain back to time domain"""

    @abstractmethod
    def decompose(self, signal: np.ndarray) -> np.ndarray:
        """Record every level of the forward transform as a matrix"""

    @abstractmethod
    def recompose(self, matrix: np.ndarray) -> np.ndarray:
        """Rebuild the signal from a decomposition matrix"""

    def _as_signal(self, signal, operation: str) -> np.ndarray:
        # np.array always copies, so the caller's data is never touched
        arr = np.array(signal, dtype=np.float64)
        if arr.ndim != 1:
            self.logger.warning(f"{operation}: rejected input with shape {arr.shape}")
            raise DomainError(f"{operation} expects a 1-D signal, got shape {arr.shape}")
        if not is_binary(len(arr)):
            self.logger.warning(f"{operation}: rejected input of length {len(arr)}")
            raise DomainError(
                f"given array length {len(arr)} is not 2^p = 1, 2, 4, 8, 16, 32, ..")
        return arr


class FastWaveletTransform(BasicTransform):
    """Fast Wavelet Transform (FWT) in 1-D

    The transform holds a single wavelet kernel for its whole lifetime and
    keeps no other state; every call works on its own copy of the input.

    Parameters
    ----------
    wavelet : Wavelet
        Kernel performing one transform level, e.g. ``Haar1()`` or
        ``Daubechies(2)``
    logger : logging.Logger, optional
        Logger to report to, by default ``logging.getLogger("FastWaveletTransform")``

    Examples
    --------
    >>> fwt = FastWaveletTransform(Haar1())
    >>> coeffs = fwt.forward(np.ones(8))
    >>> np.allclose(fwt.reverse(coeffs), np.ones(8))
    True
    """

    def __init__(self, wavelet: Wavelet, logger: Optional[logging.Logger] = None):
        super().__init__("Fast Wavelet Transform", logger)

        if not isinstance(wavelet, Wavelet):
            raise TypeError(f"expected a Wavelet kernel, got {type(wavelet).__name__}")

        transform_wavelength = wavelet.transform_wavelength
        if not is_binary(transform_wavelength) or transform_wavelength < 2:
            raise DomainError(
                f"{wavelet.name}: transform wavelength {transform_wavelength!r} "
                f"must be a power of two >= 2")

        self._wavelet = wavelet
        self.logger.debug(f"Initialized {self.name} with {wavelet.name} wavelet")

    @property
    def wavelet(self) -> Wavelet:
        return self._wavelet

    def max_level(self, length: int) -> int:
        """Number of kernel steps a full transform of ``length`` samples performs

        Parameters
        ----------
        length : int
            Signal length, a power of two

        Returns
        -------
        int
            ``log2(length) - log2(wavelength) + 1``, or 0 if the signal is
            shorter than the transform wavelength
        """
        transform_wavelength = self._wavelet.transform_wavelength
        if length < transform_wavelength:
            return 0
        return get_exponent(length) - get_exponent(transform_wavelength) + 1

    def _check_level(self, length: int, level: Optional[int], operation: str) -> int:
        max_level = self.max_level(length)
        if level is None:
            return max_level
        if isinstance(level, bool) or not isinstance(level, (int, np.integer)) \
                or not 0 <= level <= max_level:
            self.logger.warning(f"{operation}: rejected level {level!r}")
            raise DomainError(
                f"level {level!r} out of range 0..{max_level} for length {length}")
        return int(level)

    def _apply_forward(self, arr_hilb: np.ndarray, steps: int,
                       trace: Optional[np.ndarray] = None) -> np.ndarray:
        transform_wavelength = self._wavelet.transform_wavelength
        h = len(arr_hilb)
        level = 0
        while h >= transform_wavelength and level < steps:
            arr_hilb[:h] = self._wavelet.forward(arr_hilb, h)
            level += 1
            if trace is not None:
                # Entries from h onwards were zero-filled at allocation
                trace[level, :h] = arr_hilb[:h]
            self.logger.debug(f"forward level {level}: window {h}")
            h >>= 1
        return arr_hilb

    def _apply_reverse(self, arr_time: np.ndarray, h: int) -> np.ndarray:
        transform_wavelength = self._wavelet.transform_wavelength
        while transform_wavelength <= h <= len(arr_time):
            arr_time[:h] = self._wavelet.reverse(arr_time, h)
            self.logger.debug(f"reverse window {h}")
            h <<= 1
        return arr_time

    def forward(self, signal: np.ndarray, level: Optional[int] = None) -> np.ndarray:
        """Forward transform from time domain to Hilbert domain

        Parameters
        ----------
        signal : array_like
            1-D signal whose length is a power of two
        level : int, optional
            Number of levels to perform, by default all of them

        Returns
        -------
        np.ndarray
            Coefficients of the same length, coarsest scaling coefficients
            first, followed by the detail coefficients of each level

        Raises
        ------
        DomainError
            If the length is not a power of two or ``level`` is out of range
        """
        arr_hilb = self._as_signal(signal, "forward")
        steps = self._check_level(len(arr_hilb), level, "forward")
        return self._apply_forward(arr_hilb, steps)

    def reverse(self, coefficients: np.ndarray, level: Optional[int] = None) -> np.ndarray:
        """Reverse transform from Hilbert domain to time domain

        Parameters
        ----------
        coefficients : array_like
            Output of :meth:`forward`, length a power of two
        level : int, optional
            Number of levels the coefficients were transformed with, by
            default all of them

        Returns
        -------
        np.ndarray
            Reconstructed signal

        Raises
        ------
        DomainError
            If the length is not a power of two or ``level`` is out of range
        """
        arr_time = self._as_signal(coefficients, "reverse")
        steps = self._check_level(len(arr_time), level, "reverse")
        if steps == 0:
            return arr_time
        # Smallest window used by the forward pass; equals the wavelength for a full transform
        return self._apply_reverse(arr_time, len(arr_time) >> (steps - 1))

    def decompose(self, signal: np.ndarray) -> np.ndarray:
        """Forward transform keeping every level

        Parameters
        ----------
        signal : array_like
            1-D signal whose length N is a power of two

        Returns
        -------
        np.ndarray
            Matrix of shape ``(log2(N) + 1, N)``. Row 0 is the signal, row
            ``l`` is the buffer right after the level ``l`` step inside its
            active window ``N >> (l - 1)`` and zero beyond it. Rows of levels
            the wavelet cannot reach stay zero.
        """
        arr_time = self._as_signal(signal, "decompose")
        length = len(arr_time)
        levels = get_exponent(length)

        mat_decomp = np.zeros((levels + 1, length))
        mat_decomp[0] = arr_time

        self._apply_forward(arr_time, self.max_level(length), trace=mat_decomp)
        return mat_decomp

    def recompose(self, matrix: np.ndarray) -> np.ndarray:
        """Rebuild a signal from the output of :meth:`decompose`

        Each level's row contributes its active window, deeper levels
        overwriting the indices they cover, which restores the coefficient
        layout of :meth:`forward`; the reverse transform is then applied.
        Only matrices produced by :meth:`decompose` are guaranteed to
        round-trip.

        Parameters
        ----------
        matrix : array_like
            Matrix of shape ``(log2(N) + 1, N)``

        Returns
        -------
        np.ndarray
            Reconstructed signal of length N
        """
        mat_decomp = np.array(matrix, dtype=np.float64)
        if mat_decomp.ndim != 2 or mat_decomp.shape[0] == 0:
            self.logger.warning(f"recompose: rejected matrix with shape {mat_decomp.shape}")
            raise DomainError(f"recompose expects a 2-D matrix, got shape {mat_decomp.shape}")

        length = mat_decomp.shape[1]
        if not is_binary(length):
            self.logger.warning(f"recompose: rejected matrix width {length}")
            raise DomainError(f"matrix width {length} is not 2^p = 1, 2, 4, 8, 16, 32, ..")

        levels = get_exponent(length)
        if mat_decomp.shape[0] != levels + 1:
            self.logger.warning(f"recompose: rejected matrix with {mat_decomp.shape[0]} rows")
            raise DomainError(
                f"matrix of width {length} needs {levels + 1} rows, got {mat_decomp.shape[0]}")

        # Without any transform level the signal is row 0 itself
        arr_time = mat_decomp[0].copy()
        h = length
        for level in range(1, self.max_level(length) + 1):
            arr_time[:h] = mat_decomp[level, :h]
            h >>= 1

        return self._apply_reverse(arr_time, self._wavelet.transform_wavelength)

    def __repr__(self):
        return f"{type(self).__name__}({self._wavelet!r})"


_TRANSFORMS = {
    "fwt": FastWaveletTransform,
    "fast wavelet transform": FastWaveletTransform,
}


def build_transform(
    wavelet: Union[Wavelet, WaveletFamily, str] = WaveletFamily.HAAR,
    transform: str = "fwt",
    order: Optional[int] = None,
    logger: Optional[logging.Logger] = None
) -> BasicTransform:
    """Create a transform for a wavelet

    Parameters
    ----------
    wavelet : Wavelet, WaveletFamily or str, optional
        Kernel instance, family or short name (``"haar"``, ``"db4"``, ...),
        by default Haar
    transform : str, optional
        Transform name, ``"fwt"`` or ``"fast wavelet transform"``
    order : int, optional
        Order passed to :func:`build_wavelet` for a family
    logger : logging.Logger, optional
        Logger for the transform

    Returns
    -------
    BasicTransform
        The configured transform

    Raises
    ------
    DomainError
        For unknown transform or wavelet names
    """
    transform_class = _TRANSFORMS.get(transform.strip().lower())
    if transform_class is None:
        raise DomainError(f"Unknown transform {transform!r}; expected one of {sorted(_TRANSFORMS)}")
    return transform_class(build_wavelet(wavelet, order), logger=logger)
