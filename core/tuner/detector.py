"""
core/tuner/detector.py — Detection façade: buffer in, frequency or None out.

Pipeline:
    1. as_buffer()                     → 1-D float64 samples
    2. passes_gate(rms, min_rms)       → None if too quiet
    3. compute_nsdf()                  → NSDF over all lags
    4. find_first_negative_crossing()  → search start
    5. find_key_maximum()              → period candidate, None if absent
    6. clarity < min_clarity           → None
    7. refine_lag()                    → sub-sample period
    8. sample_rate / refined_lag       → frequency in Hz

Every call is independent: no state survives between calls, so the same
functions are safe to run on separate buffers from multiple threads. The
driver that captures audio and calls `tune()` every `interval_ms` lives
outside this package.

Usage:
    from core.tuner import detect_pitch, tune
    hz = detect_pitch(buffer, 44100)          # float | None
    reading = tune(buffer, 44100)             # TunerResult | None
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

import numpy as np

from core.config import DEFAULT_CONFIG, TunerConfig
from core.tuner.nsdf import compute_nsdf
from core.tuner.peaks import find_first_negative_crossing, find_key_maximum, refine_lag
from core.tuner.pitch import analyse_frequency
from core.tuner.signal import as_buffer, compute_rms, passes_gate
from core.tuner.types import BufferAnalysis, TunerResult


def _check_sample_rate(sample_rate: float) -> None:
    if not sample_rate > 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")


def analyze_buffer(
    samples: np.ndarray | Sequence[float],
    sample_rate: float,
    *,
    config: TunerConfig = DEFAULT_CONFIG,
) -> BufferAnalysis:
    """Run the full pipeline on one buffer and keep the intermediate figures.

    Args:
        samples: Time-domain samples in [−1, 1].
        sample_rate: Sample rate in Hz.
        config: Detection tunables (gate, frequency range, thresholds).

    Returns:
        BufferAnalysis. Its `status` tells a quiet buffer ("silent") from a
        buffer without clear periodicity ("unpitched").

    Raises:
        ValueError: If sample_rate ≤ 0 or samples is not 1-D.
    """
    _check_sample_rate(sample_rate)
    buffer = as_buffer(samples)

    rms = compute_rms(buffer)
    if not passes_gate(rms, config.min_rms):
        return BufferAnalysis(rms=rms, gated=True)

    nsdf = compute_nsdf(buffer)
    start_lag = find_first_negative_crossing(nsdf, config.min_lag(sample_rate))
    peak = find_key_maximum(
        nsdf,
        start_lag,
        config.max_lag(sample_rate),
        strong_threshold=config.strong_peak_threshold,
    )
    if peak is None or peak.value < config.min_clarity:
        return BufferAnalysis(rms=rms)

    refined_lag = refine_lag(nsdf, peak.lag)
    if refined_lag <= 0.0:
        return BufferAnalysis(rms=rms)

    frequency = sample_rate / refined_lag
    result = TunerResult.from_analysis(
        frequency,
        analyse_frequency(frequency),
        in_tune_cents=config.in_tune_cents,
    )
    return BufferAnalysis(rms=rms, frequency=frequency, clarity=peak.value, result=result)


def detect_pitch(
    samples: np.ndarray | Sequence[float],
    sample_rate: float,
    min_rms: float | None = None,
    *,
    config: TunerConfig = DEFAULT_CONFIG,
) -> float | None:
    """Estimate the fundamental frequency of a buffer.

    Args:
        samples: Time-domain samples in [−1, 1].
        sample_rate: Sample rate in Hz (e.g. 44100).
        min_rms: Energy gate. Overrides config.min_rms when given
            (default 0.01 via DEFAULT_CONFIG).
        config: Detection tunables.

    Returns:
        Frequency in Hz, or None when the buffer is too quiet or has no
        reliable periodicity.
    """
    if min_rms is not None and min_rms != config.min_rms:
        config = replace(config, min_rms=min_rms)
    return analyze_buffer(samples, sample_rate, config=config).frequency


def tune(
    samples: np.ndarray | Sequence[float],
    sample_rate: float,
    *,
    config: TunerConfig = DEFAULT_CONFIG,
) -> TunerResult | None:
    """One tuner tick: detect the pitch and map it to the nearest note.

    Returns:
        TunerResult, or None when no pitch estimate exists.
    """
    return analyze_buffer(samples, sample_rate, config=config).result
