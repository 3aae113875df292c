# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Plotting helpers for wavelet decompositions.
"""

import numpy as np
import matplotlib.pyplot as plt

from .exceptions import DomainError
from .math_utils import get_exponent, is_binary


def plot_decomposition(matrix, title=None):
    """
    Plot a decomposition matrix, one subplot per level.

    The dashed line in each level marks the end of the window the level
    was computed on; everything to its right is zero fill.

    Args:
        matrix (numpy.ndarray): Output of ``FastWaveletTransform.decompose``
        title (str, optional): Figure title

    Returns:
        matplotlib.figure.Figure: The figure
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        raise DomainError(f"Expected a 2-D decomposition matrix, got shape {matrix.shape}")

    rows, length = matrix.shape
    fig, axes = plt.subplots(rows, 1, figsize=(12, 2 * rows + 1), sharex=True, squeeze=False)

    for level in range(rows):
        ax = axes[level, 0]
        ax.plot(matrix[level])
        if level == 0:
            ax.set_title('Original Signal')
        else:
            ax.set_title(f'Level {level}')
            ax.axvline((length >> (level - 1)) - 0.5, color='gray', linestyle='--')
        ax.grid(True)

    if title:
        fig.suptitle(title)
    fig.tight_layout()

    return fig


def plot_coefficients(coefficients, levels=None, title=None, ax=None):
    """
    Plot the output of a forward transform with its level boundaries.

    Args:
        coefficients (numpy.ndarray): Output of ``FastWaveletTransform.forward``
        levels (int, optional): Number of levels to mark, by default
            ``log2(len(coefficients))``
        title (str, optional): Axes title
        ax (matplotlib.axes.Axes, optional): Axes to draw into

    Returns:
        matplotlib.figure.Figure: The figure holding the axes
    """
    coefficients = np.asarray(coefficients, dtype=np.float64)
    if coefficients.ndim != 1 or not is_binary(len(coefficients)):
        raise DomainError("Coefficients must be 1-D with a power of two length")

    if levels is None:
        levels = get_exponent(len(coefficients))

    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 4))
    else:
        fig = ax.figure

    ax.stem(np.arange(len(coefficients)), coefficients)

    # Detail coefficients of level l start at N >> l
    for level in range(1, levels + 1):
        ax.axvline((len(coefficients) >> level) - 0.5, color='gray', linestyle='--')

    ax.set_title(title or 'Wavelet Coefficients')
    ax.set_xlabel('Index')
    ax.grid(True)

    return fig
