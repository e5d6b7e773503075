"""
ingestion/tuner_engine.py — Offline tuner: replays a recording through the detector.

TunerEngine plays the role of the live driver against a file instead of a
microphone. It cuts the signal into `buffer_size` windows spaced one polling
interval apart and runs one tuner tick per window:

    audio file
        │
        ├─ load_audio()        [ingestion/audio_loader.py — I/O boundary]
        │       ↓
        ├─ iter_frames()       [buffer_size windows every hop_length samples]
        │       ↓
        ├─ analyze_buffer()    [core/tuner/detector.py — pure MPM pipeline]
        │       ↓
        └─ TuningTrack         [per-frame readings + summary]

This module is in `ingestion/` because it reads files and records metrics.
The detection itself is pure and lives in `core/tuner/`.

Usage:
    engine = TunerEngine()
    track = engine.tune_file("/path/to/a440.wav", duration=5.0)
    print(track.dominant_note(), track.median_cents())
"""

from __future__ import annotations

import logging
import statistics
import time
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from core.config import DEFAULT_CONFIG, TunerConfig
from core.tuner.detector import analyze_buffer
from core.tuner.types import TunerResult
from infrastructure.metrics import record_detection, record_file_frames
from ingestion.audio_loader import DEFAULT_DURATION, load_audio

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Output types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TunerFrame:
    """One polling tick replayed from a recording.

    Attributes:
        time_sec: Start of the analysis window in seconds.
        rms:      RMS energy of the window.
        status:   "silent", "unpitched" or "pitched".
        clarity:  NSDF peak value, None unless pitched.
        result:   Tuner reading, None unless pitched.
    """

    time_sec: float
    rms: float
    status: str
    clarity: float | None = None
    result: TunerResult | None = None


@dataclass
class TuningTrack:
    """Output of TunerEngine.track() / tune_file().

    Attributes:
        frames:             Readings in time order.
        sample_rate:        Sample rate of the analysed signal.
        duration_sec:       Length of the analysed signal in seconds.
        config:             Tunables used for every frame.
        processing_time_ms: Wall-clock time for the whole track.
    """

    frames: list[TunerFrame]
    sample_rate: int
    duration_sec: float
    config: TunerConfig = DEFAULT_CONFIG
    processing_time_ms: float = 0.0
    source: str | None = field(default=None)

    @property
    def pitched_frames(self) -> list[TunerFrame]:
        """Frames that produced a reading."""
        return [f for f in self.frames if f.result is not None]

    @property
    def voiced_ratio(self) -> float:
        """Share of frames with a reading, in [0, 1]. 0.0 for an empty track."""
        if not self.frames:
            return 0.0
        return len(self.pitched_frames) / len(self.frames)

    def dominant_note(self) -> str | None:
        """Most frequent pitch name across pitched frames (ties → earliest seen)."""
        counts = Counter(f.result.pitch_name for f in self.pitched_frames)
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    def median_cents(self) -> float | None:
        """Median cents deviation over frames on the dominant note."""
        dominant = self.dominant_note()
        if dominant is None:
            return None
        cents = [f.result.cents for f in self.pitched_frames if f.result.pitch_name == dominant]
        return float(statistics.median(cents))

    def median_frequency(self) -> float | None:
        """Median detected frequency over frames on the dominant note."""
        dominant = self.dominant_note()
        if dominant is None:
            return None
        hz = [f.result.frequency for f in self.pitched_frames if f.result.pitch_name == dominant]
        return float(statistics.median(hz))

    def summary(self) -> dict[str, object]:
        """JSON-ready summary of the whole track."""
        median_hz = self.median_frequency()
        return {
            "frame_count": len(self.frames),
            "pitched_count": len(self.pitched_frames),
            "voiced_ratio": round(self.voiced_ratio, 3),
            "dominant_note": self.dominant_note(),
            "median_cents": self.median_cents(),
            "median_frequency": None if median_hz is None else round(median_hz, 3),
            "duration_sec": round(self.duration_sec, 3),
            "sample_rate": self.sample_rate,
        }


# ---------------------------------------------------------------------------
# Framing
# ---------------------------------------------------------------------------


def iter_frames(
    y: np.ndarray,
    buffer_size: int,
    hop_length: int,
) -> Iterator[tuple[int, np.ndarray]]:
    """Yield (start_sample, window) for every full window in y.

    Trailing samples that do not fill a whole window are dropped, as a live
    driver would never hand over a partially filled buffer.
    """
    if hop_length <= 0:
        raise ValueError(f"hop_length must be positive, got {hop_length}")
    for start in range(0, len(y) - buffer_size + 1, hop_length):
        yield start, y[start : start + buffer_size]


# ---------------------------------------------------------------------------
# TunerEngine
# ---------------------------------------------------------------------------


class TunerEngine:
    """Runs the tuner over recorded audio.

    Example:
        engine = TunerEngine(config=BASS_CONFIG)
        track = engine.tune_file("/path/to/bass_e1.wav")
        for frame in track.pitched_frames:
            print(frame.time_sec, frame.result.pitch_name, frame.result.cents_label)
    """

    def __init__(
        self,
        config: TunerConfig = DEFAULT_CONFIG,
        loader: Callable[..., tuple[np.ndarray, int]] | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Detection tunables and polling interval.
            loader: Injected audio loader with load_audio()'s signature.
                    Pass a stub in tests to avoid the audio stack.
                    None = ingestion.audio_loader.load_audio.
        """
        self.config = config
        self._loader = loader or load_audio

    def track(self, y: np.ndarray, sr: int) -> TuningTrack:
        """Run one tuner tick per polling interval across a signal.

        Args:
            y:  Mono samples in [−1, 1].
            sr: Sample rate in Hz.

        Returns:
            TuningTrack with one TunerFrame per full window.
        """
        t_start = time.monotonic()
        hop = self.config.hop_length(sr)
        frames: list[TunerFrame] = []

        for start, window in iter_frames(y, self.config.buffer_size, hop):
            tick_start = time.perf_counter()
            analysis = analyze_buffer(window, sr, config=self.config)
            record_detection(
                status=analysis.status,
                latency_seconds=time.perf_counter() - tick_start,
            )
            frames.append(
                TunerFrame(
                    time_sec=start / sr,
                    rms=analysis.rms,
                    status=analysis.status,
                    clarity=analysis.clarity,
                    result=analysis.result,
                )
            )

        processing_ms = (time.monotonic() - t_start) * 1000.0
        record_file_frames(len(frames))
        logger.info(
            "Tuned %d frames (hop=%d, window=%d) in %.1f ms",
            len(frames),
            hop,
            self.config.buffer_size,
            processing_ms,
        )
        return TuningTrack(
            frames=frames,
            sample_rate=int(sr),
            duration_sec=len(y) / sr if sr else 0.0,
            config=self.config,
            processing_time_ms=processing_ms,
        )

    def tune_file(
        self,
        path: str | Path,
        *,
        duration: float | None = DEFAULT_DURATION,
    ) -> TuningTrack:
        """Load an audio file and run the tuner over it.

        Raises:
            FileNotFoundError, ValueError, RuntimeError: from load_audio.
        """
        y, sr = self._loader(path, duration=duration)
        track = self.track(y, sr)
        track.source = str(path)
        if not track.frames:
            logger.warning(
                "%s is shorter than one %d-sample window; no frames analysed",
                Path(path).name,
                self.config.buffer_size,
            )
        return track
