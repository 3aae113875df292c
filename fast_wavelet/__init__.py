"""
Fast Wavelet Transform Module

This package provides the 1-D Fast Wavelet Transform (FWT) with pluggable
wavelet kernels.

Key components:
- Forward and reverse transform between time and Hilbert domain
- Full multi-level decomposition and recomposition
- Orthogonal wavelet kernels (Haar, Daubechies, Symlet, Coiflet)
- Plotting helpers for decompositions

SPDX-License-Identifier: Apache-2.0
Copyright 2025 Scott Friedman and Project Contributors
"""

from .exceptions import WaveletError, DomainError

from .math_utils import is_binary, get_exponent

from .wavelets import (
    WaveletFamily,
    Wavelet,
    OrthogonalWavelet,
    Haar1,
    Daubechies,
    Symlet,
    Coiflet,
    build_wavelet
)

from .transforms import (
    BasicTransform,
    FastWaveletTransform,
    build_transform
)

__version__ = "0.1.0"

__all__ = [
    "WaveletError",
    "DomainError",
    "is_binary",
    "get_exponent",
    "WaveletFamily",
    "Wavelet",
    "OrthogonalWavelet",
    "Haar1",
    "Daubechies",
    "Symlet",
    "Coiflet",
    "build_wavelet",
    "BasicTransform",
    "FastWaveletTransform",
    "build_transform"
]
