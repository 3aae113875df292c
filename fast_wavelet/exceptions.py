# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Exception types raised by the fast_wavelet package.
"""


class WaveletError(Exception):
    """Base class for all errors raised by fast_wavelet."""


class DomainError(WaveletError, ValueError):
    """
    Raised when an input lies outside the domain a transform can handle.

    Typical causes are signal lengths that are not a power of two, arrays
    that are not one-dimensional, out-of-range decomposition levels and
    wavelet kernels with an unusable transform wavelength. The error is
    always raised before any working buffer is touched, so no partial
    result ever escapes.
    """
