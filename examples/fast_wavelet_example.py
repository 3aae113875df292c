#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Scott Friedman and Project Contributors

"""
Fast Wavelet Transform Example Script

This script demonstrates the Fast Wavelet Transform of the fast_wavelet
package.

It shows:
1. Forward and reverse transform of a test signal
2. Full decomposition and recomposition with every level kept
3. Coefficient thresholding compression with different wavelets
"""

import argparse
import logging
import os
import sys
import time

import numpy as np
import matplotlib
import matplotlib.pyplot as plt

# Add parent directory to path to import fast_wavelet module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from fast_wavelet import WaveletFamily, build_transform, build_wavelet
from fast_wavelet.visualization import plot_coefficients, plot_decomposition

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("fast_wavelet_example")


def generate_test_signal(length=1024, freq=5.0, sample_rate=100.0):
    """Sine with a step half way through."""
    t = np.arange(length) / sample_rate
    signal = np.sin(2 * np.pi * freq * t)
    signal[length // 2:] += 1.0
    return signal


def generate_chirp_signal(length=1024, f0=1.0, f1=20.0, sample_rate=100.0):
    """Chirp signal (frequency changing with time)."""
    t = np.arange(length) / sample_rate
    duration = length / sample_rate
    k = (f1 - f0) / duration
    return np.sin(2 * np.pi * (f0 * t + 0.5 * k * t * t))


def example_forward_reverse(signal, wavelet):
    """Forward and reverse transform."""
    fwt = build_transform(wavelet)

    start = time.time()
    coefficients = fwt.forward(signal)
    reconstructed = fwt.reverse(coefficients)
    elapsed = time.time() - start

    error = np.max(np.abs(signal - reconstructed))
    logger.info(f"{fwt.wavelet.name}: round trip of {len(signal)} samples "
                f"in {elapsed:.4f}s, max error {error:.2e}")

    return coefficients


def example_decomposition(signal, wavelet):
    """Decompose keeping every level, then recompose."""
    fwt = build_transform(wavelet)

    matrix = fwt.decompose(signal)
    reconstructed = fwt.recompose(matrix)

    error = np.max(np.abs(signal - reconstructed))
    logger.info(f"{fwt.wavelet.name}: decomposition matrix {matrix.shape}, "
                f"recompose max error {error:.2e}")

    return matrix


def example_compression(signal, keep_ratio=0.05):
    """Keep the largest coefficients only and compare wavelets."""
    wavelets = [
        build_wavelet(WaveletFamily.HAAR),
        build_wavelet(WaveletFamily.DAUBECHIES, 2),
        build_wavelet(WaveletFamily.DAUBECHIES, 4),
        build_wavelet(WaveletFamily.SYMLET, 8),
        build_wavelet(WaveletFamily.COIFLET, 2),
    ]

    keep = max(1, int(len(signal) * keep_ratio))
    results = {}
    for wavelet in wavelets:
        fwt = build_transform(wavelet)
        coefficients = fwt.forward(signal)

        # Zero all but the largest coefficients
        threshold = np.sort(np.abs(coefficients))[-keep]
        compressed = np.where(np.abs(coefficients) >= threshold, coefficients, 0.0)

        reconstructed = fwt.reverse(compressed)
        snr = 10 * np.log10(np.sum(signal**2) / np.sum((signal - reconstructed)**2))
        results[wavelet.name] = snr
        logger.info(f"{wavelet.name}: keeping {keep} coefficients gives SNR {snr:.2f} dB")

    return results


def main():
    parser = argparse.ArgumentParser(description="Fast Wavelet Transform examples")
    parser.add_argument("--length", type=int, default=1024,
                        help="Signal length (power of two)")
    parser.add_argument("--wavelet", default="db4",
                        help="Wavelet name, e.g. haar, db4, sym8, coif2")
    parser.add_argument("--keep-ratio", type=float, default=0.05,
                        help="Fraction of coefficients kept for compression")
    parser.add_argument("--save-dir", default=None,
                        help="Directory to save plots to")
    parser.add_argument("--debug", action="store_true",
                        help="Log every transform level")
    args = parser.parse_args()

    if args.debug:
        logging.getLogger("FastWaveletTransform").setLevel(logging.DEBUG)

    if args.save_dir:
        matplotlib.use("Agg")
        os.makedirs(args.save_dir, exist_ok=True)

    signal = generate_test_signal(args.length)
    chirp = generate_chirp_signal(args.length)

    coefficients = example_forward_reverse(signal, args.wavelet)
    matrix = example_decomposition(chirp, args.wavelet)
    example_compression(chirp, args.keep_ratio)

    fig_coefficients = plot_coefficients(coefficients, title=f"{args.wavelet} coefficients")
    fig_decomposition = plot_decomposition(matrix[:6], title=f"{args.wavelet} decomposition of a chirp")

    if args.save_dir:
        fig_coefficients.savefig(os.path.join(args.save_dir, "coefficients.png"))
        fig_decomposition.savefig(os.path.join(args.save_dir, "decomposition.png"))
        logger.info(f"Plots saved to {args.save_dir}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
