# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Wavelet kernels for the Fast Wavelet Transform.

A kernel knows how to perform exactly one level of a wavelet transform on
the first ``length`` entries of a buffer: the forward step splits the block
into scaling (approximation) and wavelet (detail) coefficients, the reverse
step merges them back. Kernels know nothing about levels or recursion; that
is the job of the transforms in :mod:`fast_wavelet.transforms`.

Filter coefficients for the orthogonal families are taken from PyWavelets.
"""

import logging
import numbers
import re
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np
import pywt

from .exceptions import DomainError

logger = logging.getLogger("WaveletBuilder")


class WaveletFamily(Enum):
    """Enum defining available wavelet families."""
    HAAR = 0
    DAUBECHIES = 1
    SYMLET = 2
    COIFLET = 3


# PyWavelets short-name prefix, supported orders and default order per family
_FAMILY_PREFIX = {
    WaveletFamily.HAAR: "haar",
    WaveletFamily.DAUBECHIES: "db",
    WaveletFamily.SYMLET: "sym",
    WaveletFamily.COIFLET: "coif",
}
_FAMILY_ORDERS = {
    WaveletFamily.DAUBECHIES: range(1, 21),
    WaveletFamily.SYMLET: range(2, 21),
    WaveletFamily.COIFLET: range(1, 18),
}
_DEFAULT_ORDER = {
    WaveletFamily.DAUBECHIES: 4,
    WaveletFamily.SYMLET: 4,
    WaveletFamily.COIFLET: 2,
}
_NAME_PATTERN = re.compile(r"^(db|sym|coif)(\d+)$")


class Wavelet(ABC):
    """
    Base class of all wavelet kernels.

    Subclasses must be free of mutable state after construction so that a
    single kernel can be shared between transforms and threads.

    Args:
        name (str): Human readable name of the wavelet
        transform_wavelength (int): Smallest block the kernel transforms in
            one step; must be a power of two, at least 2
    """

    def __init__(self, name, transform_wavelength=2):
        self._name = name
        self._transform_wavelength = transform_wavelength

    @property
    def name(self):
        return self._name

    @property
    def transform_wavelength(self):
        """Minimum block size the kernel can transform in one application."""
        return self._transform_wavelength

    @abstractmethod
    def forward(self, buffer, length):
        """
        Perform one forward level on ``buffer[:length]``.

        Args:
            buffer (numpy.ndarray): Working buffer, at least ``length`` long
            length (int): Active window

        Returns:
            numpy.ndarray: ``length`` coefficients, scaling coefficients in
            the first half, wavelet coefficients in the second half
        """

    @abstractmethod
    def reverse(self, buffer, length):
        """
        Undo one forward level on ``buffer[:length]``.

        Args:
            buffer (numpy.ndarray): Working buffer, at least ``length`` long
            length (int): Active window

        Returns:
            numpy.ndarray: ``length`` reconstructed samples
        """

    def _check_window(self, buffer, length):
        if length < self._transform_wavelength:
            raise DomainError(
                f"{self._name}: window {length} is smaller than the transform "
                f"wavelength {self._transform_wavelength}")
        if length % 2:
            raise DomainError(f"{self._name}: window {length} is not even")
        if length > len(buffer):
            raise DomainError(
                f"{self._name}: window {length} exceeds buffer length {len(buffer)}")

    def __repr__(self):
        return f"{type(self).__name__}(name={self._name!r})"


class OrthogonalWavelet(Wavelet):
    """
    Orthonormal wavelet kernel using periodic convolution.

    The wavelet (high pass) filter is derived from the scaling (low pass)
    filter by the quadrature mirror relation
    ``wavelet[j] = (-1)**j * scaling[M-1-j]``. The signal is treated as
    periodic within the active window, so any even window is transformed
    without boundary extension and the reverse step is the exact transpose
    of the forward step.

    Args:
        name (str): Human readable name of the wavelet
        scaling (array_like): Scaling filter coefficients, even length
        transform_wavelength (int): Smallest transformable block
    """

    def __init__(self, name, scaling, transform_wavelength=2):
        super().__init__(name, transform_wavelength)

        scaling = np.array(scaling, dtype=np.float64)
        if scaling.ndim != 1 or len(scaling) < 2 or len(scaling) % 2:
            raise DomainError(f"{name}: scaling filter must be 1-D with an even number of taps")

        # Generate high pass filter using quadrature mirror relationship
        wavelet = np.zeros_like(scaling)
        M = len(scaling)
        for j in range(M):
            wavelet[j] = (-1)**j * scaling[M-1-j]

        self._scaling_decom = scaling
        self._wavelet_decom = wavelet
        # Orthonormal: reconstruction filters equal the decomposition filters
        self._scaling_recon = scaling.copy()
        self._wavelet_recon = wavelet.copy()
        for coefficients in (self._scaling_decom, self._wavelet_decom,
                             self._scaling_recon, self._wavelet_recon):
            coefficients.flags.writeable = False

    @property
    def mother_wavelength(self):
        """Number of filter taps."""
        return len(self._scaling_decom)

    @property
    def scaling_coefficients(self):
        return self._scaling_decom

    @property
    def wavelet_coefficients(self):
        return self._wavelet_decom

    def _periodic_indices(self, length):
        # Row i holds the buffer positions feeding output i, wrapped into the window
        half = length >> 1
        i = np.arange(half)[:, np.newaxis]
        j = np.arange(self.mother_wavelength)[np.newaxis, :]
        return (2 * i + j) % length

    def forward(self, buffer, length):
        buffer = np.asarray(buffer, dtype=np.float64)
        self._check_window(buffer, length)

        taps = buffer[:length][self._periodic_indices(length)]
        approximation = taps @ self._scaling_decom
        detail = taps @ self._wavelet_decom

        return np.concatenate([approximation, detail])

    def reverse(self, buffer, length):
        buffer = np.asarray(buffer, dtype=np.float64)
        self._check_window(buffer, length)

        half = length >> 1
        contributions = (np.outer(buffer[:half], self._scaling_recon)
                         + np.outer(buffer[half:length], self._wavelet_recon))

        # Several taps can land on the same index once the filter wraps around
        return np.bincount(self._periodic_indices(length).ravel(),
                           weights=contributions.ravel(), minlength=length)


def _scaling_filter(short_name):
    return pywt.Wavelet(short_name).rec_lo


def _check_order(family, order):
    if not isinstance(order, numbers.Integral) or order not in _FAMILY_ORDERS[family]:
        orders = _FAMILY_ORDERS[family]
        raise DomainError(
            f"{family.name.title()} wavelet of order {order} not available "
            f"(supported: {orders.start}..{orders.stop - 1})")


class Haar1(OrthogonalWavelet):
    """Haar wavelet: pairwise sum and difference scaled by 1/sqrt(2)."""

    def __init__(self):
        super().__init__("Haar", _scaling_filter("haar"))


class Daubechies(OrthogonalWavelet):
    """
    Daubechies wavelet with ``order`` vanishing moments (``2 * order`` taps).

    ``Daubechies(1)`` has the same filters as :class:`Haar1`.
    """

    def __init__(self, order=4):
        _check_order(WaveletFamily.DAUBECHIES, order)
        super().__init__(f"Daubechies {order}", _scaling_filter(f"db{order}"))
        self.order = order


class Symlet(OrthogonalWavelet):
    """Least asymmetric Daubechies wavelet with ``order`` vanishing moments."""

    def __init__(self, order=4):
        _check_order(WaveletFamily.SYMLET, order)
        super().__init__(f"Symlet {order}", _scaling_filter(f"sym{order}"))
        self.order = order


class Coiflet(OrthogonalWavelet):
    """Coiflet wavelet of the given order (``6 * order`` taps)."""

    def __init__(self, order=2):
        _check_order(WaveletFamily.COIFLET, order)
        super().__init__(f"Coiflet {order}", _scaling_filter(f"coif{order}"))
        self.order = order


_FAMILY_CLASSES = {
    WaveletFamily.DAUBECHIES: Daubechies,
    WaveletFamily.SYMLET: Symlet,
    WaveletFamily.COIFLET: Coiflet,
}


def _parse_name(name):
    key = name.strip().lower()
    if key == "haar":
        return WaveletFamily.HAAR, None

    match = _NAME_PATTERN.match(key)
    if match is None:
        raise DomainError(
            f"Unknown wavelet name {name!r}; expected 'haar', 'db<N>', 'sym<N>' or 'coif<N>'")

    prefix, order = match.groups()
    for family, family_prefix in _FAMILY_PREFIX.items():
        if family_prefix == prefix:
            return family, int(order)


def build_wavelet(family=WaveletFamily.HAAR, order=None):
    """
    Create a wavelet kernel.

    Args:
        family (WaveletFamily, str or Wavelet): Wavelet family, a short name
            such as ``"haar"``, ``"db4"``, ``"sym8"`` or ``"coif2"``, or an
            existing kernel which is returned unchanged
        order (int, optional): Order within the family; ignored for Haar.
            Defaults to 4 for Daubechies and Symlet, 2 for Coiflet

    Returns:
        Wavelet: The kernel

    Raises:
        DomainError: For unknown names or unsupported orders
    """
    if isinstance(family, Wavelet):
        return family

    if isinstance(family, str):
        family, name_order = _parse_name(family)
        if name_order is not None:
            if order is not None and order != name_order:
                raise DomainError(f"Conflicting orders {name_order} and {order}")
            order = name_order

    if not isinstance(family, WaveletFamily):
        raise DomainError(f"Cannot build a wavelet from {family!r}")

    if family == WaveletFamily.HAAR:
        wavelet = Haar1()
    else:
        if order is None:
            order = _DEFAULT_ORDER[family]
        wavelet = _FAMILY_CLASSES[family](order)

    logger.debug(f"Built {wavelet.name} wavelet with {wavelet.mother_wavelength} taps")
    return wavelet
