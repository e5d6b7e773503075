"""
core/tuner/pitch.py — Frequency ↔ musical pitch conversion (pure math).

Maps a frequency onto 12-tone equal temperament with A4 = MIDI 69 = 440 Hz:

    midi_exact = 12 × log₂(hz / 440) + 69
    midi       = round(midi_exact)
    cents      = round((midi_exact − midi) × 100)

Rounding is half away from zero for both steps, so a pitch exactly 50 cents
above A4 is reported as A♯4 at −50 cents. Python's built-in round() is
banker's rounding and would flip that boundary on even/odd MIDI numbers,
which is why `_round_half_away` exists.
"""

from __future__ import annotations

import math

from core.tuner.types import NOTE_NAMES, PitchAnalysis

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

A4_FREQUENCY: float = 440.0
"""Concert pitch reference in Hz."""

A4_MIDI: int = 69
"""MIDI number of A4."""

SEMITONES_PER_OCTAVE: int = 12

CENTS_PER_SEMITONE: int = 100


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 → 3, −2.5 → −3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _check_frequency(hz: float) -> None:
    if not math.isfinite(hz) or hz <= 0.0:
        raise ValueError(f"Frequency must be a positive finite number, got {hz}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def frequency_to_midi_exact(hz: float) -> float:
    """Convert a frequency to a fractional MIDI note number.

    Examples:
        440.0    → 69.0
        261.6256 → 60.0 (approximately)
        466.1638 → 70.0 (approximately)

    Args:
        hz: Frequency in Hz. Must be > 0.

    Returns:
        Floating-point MIDI position.

    Raises:
        ValueError: If hz ≤ 0 or is not finite.
    """
    _check_frequency(hz)
    return SEMITONES_PER_OCTAVE * math.log2(hz / A4_FREQUENCY) + A4_MIDI


def midi_to_frequency(midi: float) -> float:
    """Return the equal-temperament frequency for a MIDI note number.

    Accepts fractional values so it inverts frequency_to_midi_exact().
    """
    return A4_FREQUENCY * 2.0 ** ((midi - A4_MIDI) / SEMITONES_PER_OCTAVE)


def midi_to_pitch_name(midi: int) -> str:
    """Convert a MIDI note number to scientific pitch notation.

    Examples:
        69 → 'A4'
        60 → 'C4'
        70 → 'A♯4'
    """
    octave = midi // SEMITONES_PER_OCTAVE - 1
    return f"{NOTE_NAMES[midi % SEMITONES_PER_OCTAVE]}{octave}"


def analyse_frequency(hz: float) -> PitchAnalysis:
    """Decompose a frequency into note name, octave, cents and target frequency.

    Args:
        hz: Detected frequency in Hz. Must be > 0.

    Returns:
        PitchAnalysis for the nearest equal-temperament note.

    Raises:
        ValueError: If hz ≤ 0 or is not finite.
    """
    midi_exact = frequency_to_midi_exact(hz)
    midi = _round_half_away(midi_exact)
    cents = _round_half_away((midi_exact - midi) * CENTS_PER_SEMITONE)
    return PitchAnalysis(
        note=NOTE_NAMES[midi % SEMITONES_PER_OCTAVE],
        octave=midi // SEMITONES_PER_OCTAVE - 1,
        cents=cents,
        target_frequency=midi_to_frequency(midi),
        midi=midi,
    )
