"""
FastAPI dependency providers.

Builds the TunerConfig used by the HTTP layer once, from the environment,
and hands out a shared TunerEngine for file requests.

Environment:
    TUNER_PRESET   Preset name (default, low_latency, bass). Default: default.
    TUNER_MIN_RMS  Overrides the preset's energy gate, e.g. "0.005".
"""

import logging
import os
from dataclasses import replace

from core.config import TunerConfig, get_preset
from ingestion.tuner_engine import TunerEngine

logger = logging.getLogger(__name__)


def load_tuner_config() -> TunerConfig:
    """Read TUNER_PRESET / TUNER_MIN_RMS and build a validated config.

    Raises:
        ValueError: Unknown preset or a malformed / out-of-range min RMS.
    """
    config = get_preset(os.environ.get("TUNER_PRESET", "default"))
    raw_min_rms = os.environ.get("TUNER_MIN_RMS")
    if raw_min_rms:
        try:
            min_rms = float(raw_min_rms)
        except ValueError as exc:
            raise ValueError(f"TUNER_MIN_RMS must be a number, got {raw_min_rms!r}") from exc
        config = replace(config, min_rms=min_rms)
    return config


_tuner_config: TunerConfig | None = None


def get_tuner_config() -> TunerConfig:
    """
    Return the cached TunerConfig singleton.

    Created on first call so the environment is read once per process.
    """
    global _tuner_config  # noqa: PLW0603
    if _tuner_config is None:
        _tuner_config = load_tuner_config()
        logger.info(
            "Tuner config: buffer=%d min_rms=%.4f range=%.0f-%.0f Hz",
            _tuner_config.buffer_size,
            _tuner_config.min_rms,
            _tuner_config.min_frequency,
            _tuner_config.max_frequency,
        )
    return _tuner_config


_engine: TunerEngine | None = None


def get_tuner_engine() -> TunerEngine:
    """Return a cached TunerEngine built from the default config."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = TunerEngine(config=get_tuner_config())
    return _engine
