"""
core/tuner/signal.py — Buffer coercion and the RMS energy gate.

The gate keeps silence and the noise floor away from the NSDF: a buffer
whose RMS is below `min_rms` is reported as "no estimate" without computing
any autocorrelation.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def as_buffer(samples: np.ndarray | Sequence[float]) -> np.ndarray:
    """Return samples as a contiguous 1-D float64 array.

    Raises:
        ValueError: If the input is not one-dimensional.
    """
    buffer = np.ascontiguousarray(samples, dtype=np.float64)
    if buffer.ndim != 1:
        raise ValueError(f"Sample buffer must be 1-D, got shape {buffer.shape}")
    return buffer


def compute_rms(buffer: np.ndarray) -> float:
    """Root-mean-square amplitude: sqrt(mean(x²)). 0.0 for an empty buffer."""
    if buffer.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(buffer))))


def passes_gate(rms: float, min_rms: float) -> bool:
    """True when an RMS level is loud enough to attempt detection.

    Zero never passes, even with a zero threshold.
    """
    return rms > 0.0 and rms >= min_rms


def is_audible(buffer: np.ndarray, min_rms: float) -> bool:
    """True when the buffer carries enough energy to attempt detection."""
    return passes_gate(compute_rms(buffer), min_rms)
