"""
core/tuner/peaks.py — Key-maximum selection and parabolic lag refinement.

Peak picking on the NSDF, in the McLeod Pitch Method style:

    1. Skip the high-correlation lobe around τ = 0 by starting the search at
       the first positive → negative crossing.
    2. Walk forward collecting local maxima. The first one above the strong
       threshold wins outright (earliest-strongest); otherwise the tallest
       one wins, first occurrence on exact ties.
    3. Refine the chosen integer lag with a parabola through its neighbours.

Stopping at the first strong peak keeps the detector on the fundamental
when a harmonic happens to produce a slightly taller raw peak later on.
"""

from __future__ import annotations

import numpy as np

from core.tuner.types import PeakCandidate

STRONG_PEAK_THRESHOLD: float = 0.8
"""A local maximum above this value ends the search immediately."""


def find_first_negative_crossing(nsdf: np.ndarray, min_lag: int) -> int:
    """Return the first lag τ ≥ 1 where nsdf[τ−1] ≥ 0 and nsdf[τ] < 0.

    Falls back to `min_lag` when the NSDF never crosses zero (e.g. a very
    low or DC-heavy signal).
    """
    for tau in range(1, nsdf.size - 1):
        if nsdf[tau - 1] >= 0 and nsdf[tau] < 0:
            return tau
    return min_lag


def find_key_maximum(
    nsdf: np.ndarray,
    start_lag: int,
    max_lag: int,
    strong_threshold: float = STRONG_PEAK_THRESHOLD,
) -> PeakCandidate | None:
    """Select the period candidate among local maxima in [start_lag, max_lag).

    A local maximum is strictly greater than its left neighbour and greater
    than or equal to its right neighbour. The scan never reaches the last
    NSDF index, so both neighbours always exist.

    Args:
        nsdf: NSDF array.
        start_lag: First lag inspected (normally the first negative crossing).
        max_lag: Exclusive upper bound (lowest supported pitch).
        strong_threshold: First maximum above this is returned immediately.

    Returns:
        The chosen PeakCandidate, or None if no local maximum exists.
    """
    best: PeakCandidate | None = None
    stop = min(max_lag, nsdf.size - 1)
    for tau in range(max(start_lag, 1), stop):
        value = nsdf[tau]
        if value > nsdf[tau - 1] and value >= nsdf[tau + 1]:
            if best is None or value > best.value:
                best = PeakCandidate(lag=tau, value=float(value))
            if value > strong_threshold:
                break
    return best


def refine_lag(nsdf: np.ndarray, lag: int) -> float:
    """Sub-sample lag via parabolic interpolation around `lag`.

    With α = nsdf[τ−1], β = nsdf[τ], γ = nsdf[τ+1]:

        refined = τ − 0.5·(α − γ) / (α − 2β + γ)

    Collinear neighbours (zero curvature) leave the lag unchanged, as does a
    lag at either edge of the array.
    """
    if lag <= 0 or lag >= nsdf.size - 1:
        return float(lag)
    alpha = float(nsdf[lag - 1])
    beta = float(nsdf[lag])
    gamma = float(nsdf[lag + 1])
    denominator = alpha - 2.0 * beta + gamma
    if denominator == 0.0:
        return float(lag)
    return lag - 0.5 * (alpha - gamma) / denominator
