"""
ingestion/audio_loader.py — File I/O boundary for recorded tuner input.

This is the ONLY module in the tuner that reads audio from disk. Everything
downstream (core/tuner/*, ingestion/tuner_engine.py) takes pre-loaded
(y, sr) arrays — never file paths.

Usage:
    from ingestion.audio_loader import load_audio
    y, sr = load_audio("/path/to/open_strings.wav", duration=10.0)
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)

# Supported audio file extensions (must be loadable by librosa / soundfile)
AUDIO_EXTENSIONS: frozenset[str] = frozenset(
    {".mp3", ".wav", ".flac", ".aiff", ".aif", ".ogg", ".m4a", ".opus"}
)

# Default: tune only the first N seconds of a recording
DEFAULT_DURATION: float = 30.0


def load_audio(
    path: str | Path,
    *,
    duration: float | None = DEFAULT_DURATION,
    offset: float = 0.0,
    sr: int | None = None,
    mono: bool = True,
) -> tuple[np.ndarray, int]:
    """Load an audio file and return (y, sr).

    Args:
        path: Absolute or relative path to an audio file.
              Supported formats: mp3, wav, flac, aiff, ogg, m4a, opus.
        duration: Maximum seconds to load. None loads the whole file.
        offset: Seconds to skip at the start of the file.
        sr: Target sample rate in Hz. None preserves the native rate, which
            is what the tuner wants — resampling only blurs the period.
        mono: Mix down to mono when True (default). The tuner is monophonic.

    Returns:
        (y, sr) — float32 numpy array of samples in [−1, 1] and sample rate.

    Raises:
        FileNotFoundError: File does not exist at the given path.
        ValueError: Unsupported extension, or a non-positive duration /
                    negative offset.
        RuntimeError: librosa/soundfile could not decode the file
                      (corrupted, truncated, DRM-protected, etc.).
    """
    import librosa  # deferred to allow testing without audio backend

    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"Audio file not found: {file_path}")

    if file_path.suffix.lower() not in AUDIO_EXTENSIONS:
        raise ValueError(
            f"Unsupported audio format {file_path.suffix!r}. "
            f"Supported: {sorted(AUDIO_EXTENSIONS)}"
        )

    if duration is not None and duration <= 0:
        raise ValueError(f"duration must be positive, got {duration}")
    if offset < 0:
        raise ValueError(f"offset must be non-negative, got {offset}")

    try:
        y, loaded_sr = librosa.load(
            file_path,
            sr=sr,
            mono=mono,
            duration=duration,
            offset=offset,
        )
    except Exception as exc:
        raise RuntimeError(
            f"Failed to decode audio file {file_path.name!r}: {exc}"
        ) from exc

    logger.debug("Loaded %s: %d samples at %d Hz", file_path.name, len(y), int(loaded_sr))
    return np.asarray(y, dtype=np.float32), int(loaded_sr)
