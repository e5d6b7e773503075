"""
Shared fixtures for the test suite.

Centralizes signal synthesis and API client setup so individual test files
don't need to repeat buffer-building or dependency-override boilerplate.
"""

from collections.abc import Iterator

import numpy as np
import pytest
from fastapi.testclient import TestClient

from api.deps import get_tuner_config
from api.main import app
from core.config import DEFAULT_CONFIG

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SAMPLE_RATE: int = 44100
"""Sample rate used for synthetic buffers unless a test says otherwise."""

BUFFER_SIZE: int = 2048
"""Default analysis window."""


# ---------------------------------------------------------------------------
# Signal helpers
# ---------------------------------------------------------------------------


def sine_wave(
    frequency: float,
    sample_rate: int = SAMPLE_RATE,
    length: int = BUFFER_SIZE,
    amplitude: float = 1.0,
) -> np.ndarray:
    """Pure sine: x[i] = amplitude · sin(2π f i / sr)."""
    i = np.arange(length)
    return amplitude * np.sin(2.0 * np.pi * frequency * i / sample_rate)


def silent_buffer(length: int = BUFFER_SIZE) -> np.ndarray:
    """All-zero buffer."""
    return np.zeros(length)


def white_noise(length: int = BUFFER_SIZE, amplitude: float = 0.5, seed: int = 7) -> np.ndarray:
    """Deterministic uniform noise in [−amplitude, amplitude]."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-amplitude, amplitude, size=length)


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@pytest.fixture()
def client() -> Iterator[TestClient]:
    """TestClient with the tuner config pinned to DEFAULT_CONFIG (env ignored)."""
    app.dependency_overrides[get_tuner_config] = lambda: DEFAULT_CONFIG
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
