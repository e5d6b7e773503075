"""
Configuration dataclasses for the tuner.

These immutable config objects decouple the detection tunables from function
signatures, making it easy to define standard presets and reuse them across
the live driver, the offline file tuner and the API.
"""

from dataclasses import dataclass

# Allowlist of preset names accepted by outer layers (CLI, tools).
VALID_PRESETS: frozenset[str] = frozenset({"default", "low_latency", "bass"})


@dataclass(frozen=True)
class TunerConfig:
    """
    Configuration for pitch detection.

    Immutable configuration object that can be reused across multiple
    detect_pitch() / tune() calls. None of the fields are mutated by the core.

    Attributes:
        interval_ms: Polling interval of the driver in milliseconds. Defaults
            to 80. The offline file tuner converts it into a hop length.
        min_rms: Minimum RMS energy a buffer must reach before detection is
            attempted. Defaults to 0.01.
        buffer_size: Number of samples per analysis window. Defaults to 2048.
        min_frequency: Lowest detectable pitch in Hz. Sets the maximum lag
            searched. Defaults to 50.0.
        max_frequency: Highest detectable pitch in Hz. Sets the minimum lag
            used when the NSDF never crosses zero. Defaults to 1200.0.
        strong_peak_threshold: A local NSDF maximum above this value ends
            the peak search immediately. Defaults to 0.8.
        min_clarity: Best peak value below this is rejected as no pitch.
            Defaults to 0.2.
        in_tune_cents: Absolute cents deviation still reported as in tune.
            Defaults to 5.

    Example:
        >>> config = TunerConfig(buffer_size=4096, min_frequency=30.0)
        >>> hz = detect_pitch(buffer, 44100, config=config)
    """

    interval_ms: int = 80
    min_rms: float = 0.01
    buffer_size: int = 2048
    min_frequency: float = 50.0
    max_frequency: float = 1200.0
    strong_peak_threshold: float = 0.8
    min_clarity: float = 0.2
    in_tune_cents: int = 5

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {self.interval_ms}")
        if self.min_rms < 0:
            raise ValueError(f"min_rms must be non-negative, got {self.min_rms}")
        if self.buffer_size < 4:
            raise ValueError(f"buffer_size must be at least 4, got {self.buffer_size}")
        if self.min_frequency <= 0:
            raise ValueError(f"min_frequency must be positive, got {self.min_frequency}")
        if self.max_frequency <= self.min_frequency:
            raise ValueError(
                f"max_frequency ({self.max_frequency}) must be greater than "
                f"min_frequency ({self.min_frequency})"
            )
        if not 0.0 < self.strong_peak_threshold <= 1.0:
            raise ValueError(
                f"strong_peak_threshold must be in (0, 1], got {self.strong_peak_threshold}"
            )
        if not 0.0 <= self.min_clarity <= 1.0:
            raise ValueError(f"min_clarity must be in [0, 1], got {self.min_clarity}")
        if not 0 <= self.in_tune_cents <= 50:
            raise ValueError(f"in_tune_cents must be in [0, 50], got {self.in_tune_cents}")

    def min_lag(self, sample_rate: float) -> int:
        """Smallest lag searched, derived from max_frequency."""
        return int(sample_rate // self.max_frequency)

    def max_lag(self, sample_rate: float) -> int:
        """Largest lag searched (exclusive), derived from min_frequency."""
        return int(sample_rate // self.min_frequency)

    def hop_length(self, sample_rate: float) -> int:
        """Samples between two polling ticks at this sample rate (at least 1)."""
        return max(1, int(round(sample_rate * self.interval_ms / 1000.0)))


# Pre-defined configurations for common use cases

DEFAULT_CONFIG = TunerConfig()
"""Default configuration: 80 ms polling, 0.01 RMS gate, 2048 samples, 50–1200 Hz."""

LOW_LATENCY_CONFIG = TunerConfig(interval_ms=40, buffer_size=1024, min_frequency=80.0)
"""Half-size window and faster polling. The 80 Hz floor keeps a full period inside 1024 samples."""

BASS_CONFIG = TunerConfig(buffer_size=4096, min_frequency=30.0, max_frequency=500.0)
"""Larger window for bass instruments down to B0 territory."""

PRESETS: dict[str, TunerConfig] = {
    "default": DEFAULT_CONFIG,
    "low_latency": LOW_LATENCY_CONFIG,
    "bass": BASS_CONFIG,
}


def get_preset(name: str) -> TunerConfig:
    """Return a named preset.

    Raises:
        ValueError: If the name is not one of VALID_PRESETS.
    """
    key = name.strip().lower()
    if key not in VALID_PRESETS:
        raise ValueError(f"Unknown preset {name!r}, valid options: {sorted(VALID_PRESETS)}")
    return PRESETS[key]
