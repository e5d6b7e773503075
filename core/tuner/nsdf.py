"""
core/tuner/nsdf.py — Normalised Square Difference Function (McLeod Pitch Method).

For a buffer x of length N and each lag τ in [0, N):

    r(τ) = Σ_{j=0}^{N−τ−1} x[j]·x[j+τ]                      autocorrelation
    m(τ) = Σ_{j=0}^{N−τ−1} x[j]² + Σ_{j=τ}^{N−1} x[j]²        overlap energy
    nsdf(τ) = 2·r(τ) / m(τ)        (0 where m(τ) == 0)

m(0) is twice the buffer energy, and each step τ−1 → τ removes the two
samples that leave the overlapping windows, x[τ−1]² and x[N−τ]². Here the
recurrence is evaluated in one pass from a prefix sum of squares. By
Cauchy–Schwarz every value lies in [−1, 1], and nsdf(0) == 1 for any buffer
with energy.

Peaks of the NSDF sit at multiples of the signal period.
"""

from __future__ import annotations

import numpy as np


def autocorrelation(buffer: np.ndarray) -> np.ndarray:
    """Raw autocorrelation r(τ) for τ in [0, N), computed in the time domain."""
    n = buffer.size
    return np.correlate(buffer, buffer, mode="full")[n - 1 :]


def overlap_energy(buffer: np.ndarray) -> np.ndarray:
    """Denominator m(τ) for τ in [0, N).

    prefix[k] = Σ_{j<k} x[j]², so
    m(τ) = prefix[N−τ] + (prefix[N] − prefix[τ]).
    """
    n = buffer.size
    prefix = np.concatenate(([0.0], np.cumsum(np.square(buffer))))
    lags = np.arange(n)
    return prefix[n - lags] + (prefix[n] - prefix[lags])


def compute_nsdf(buffer: np.ndarray) -> np.ndarray:
    """Compute the NSDF of a 1-D buffer.

    Args:
        buffer: Float samples in [−1, 1] (any length, including 0).

    Returns:
        float64 array of the same length. All zeros for a silent buffer.
    """
    buffer = np.asarray(buffer, dtype=np.float64)
    if buffer.size == 0:
        return np.zeros(0, dtype=np.float64)

    r = autocorrelation(buffer)
    m = overlap_energy(buffer)

    nsdf = np.zeros(buffer.size, dtype=np.float64)
    np.divide(2.0 * r, m, out=nsdf, where=m != 0.0)
    return nsdf
