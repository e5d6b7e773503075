"""
core/tuner/types.py — Frozen data types for tuner results.

All types are frozen dataclasses — immutable value objects that can be
safely passed between layers (core → ingestion → api) and cached.

Design principles:
    - No I/O, no state, no side effects.
    - A TunerResult exists only when a pitch estimate exists. "No estimate"
      is represented by None at the call site, never by a half-filled record.
    - Display helpers (`pitch_name`, `cents_label`, `meter_position`) are
      computed properties to avoid duplicate storage.
"""

from __future__ import annotations

from dataclasses import dataclass

NOTE_NAMES: tuple[str, ...] = (
    "C",
    "C♯",
    "D",
    "D♯",
    "E",
    "F",
    "F♯",
    "G",
    "G♯",
    "A",
    "A♯",
    "B",
)
"""Chromatic note names starting at C, indexed by `midi % 12`."""

IN_TUNE_CENTS: int = 5
"""Default |cents| tolerance for `TunerResult.in_tune`."""


@dataclass(frozen=True)
class PitchAnalysis:
    """A frequency decomposed against 12-tone equal temperament.

    Invariants:
        note is one of the 12 chromatic names (C, C♯, ..., B)
        -50 <= cents <= 50
        target_frequency > 0
    """

    note: str
    """Chromatic note name with Unicode sharps, e.g. 'A', 'C♯'."""

    octave: int
    """Scientific pitch octave. Middle C (MIDI 60) is octave 4."""

    cents: int
    """Deviation from the nearest equal-temperament note, in whole cents."""

    target_frequency: float
    """Exact equal-temperament frequency of the nearest note, in Hz."""

    midi: int
    """Nearest MIDI note number (A4 = 69)."""


@dataclass(frozen=True)
class TunerResult:
    """One tuner reading: the detected frequency and its nearest note.

    Invariants:
        frequency > 0
        -50 <= cents <= 50
    """

    note: str
    octave: int
    cents: int
    frequency: float
    """Detected fundamental in Hz."""

    target_frequency: float
    """Nearest equal-temperament frequency in Hz."""

    in_tune_cents: int = IN_TUNE_CENTS
    """|cents| tolerance behind `in_tune`, taken from TunerConfig.in_tune_cents."""

    @classmethod
    def from_analysis(
        cls,
        frequency: float,
        analysis: PitchAnalysis,
        in_tune_cents: int = IN_TUNE_CENTS,
    ) -> TunerResult:
        """Combine a detected frequency with its pitch analysis."""
        return cls(
            note=analysis.note,
            octave=analysis.octave,
            cents=analysis.cents,
            frequency=frequency,
            target_frequency=analysis.target_frequency,
            in_tune_cents=in_tune_cents,
        )

    @property
    def midi(self) -> int:
        """MIDI number of the nearest note, rebuilt from note and octave."""
        return (self.octave + 1) * 12 + NOTE_NAMES.index(self.note)

    @property
    def pitch_name(self) -> str:
        """Scientific pitch notation, e.g. 'A4', 'C♯5'."""
        return f"{self.note}{self.octave}"

    @property
    def in_tune(self) -> bool:
        """True when the deviation is within `in_tune_cents`."""
        return self.is_in_tune(self.in_tune_cents)

    def is_in_tune(self, tolerance_cents: int) -> bool:
        """True when |cents| <= tolerance_cents."""
        return abs(self.cents) <= tolerance_cents

    @property
    def cents_label(self) -> str:
        """Human-readable deviation: 'In tune', '+12 ¢' or '-7 ¢'."""
        if self.cents == 0:
            return "In tune"
        sign = "+" if self.cents > 0 else ""
        return f"{sign}{self.cents} ¢"

    @property
    def meter_position(self) -> float:
        """Needle position in [0, 1]; 0.5 is centred, 0 is -50 ¢, 1 is +50 ¢."""
        return max(0.0, min(1.0, (self.cents + 50) / 100))

    def to_dict(self) -> dict[str, object]:
        """JSON-ready view with the derived display fields included."""
        return {
            "note": self.note,
            "octave": self.octave,
            "pitch_name": self.pitch_name,
            "midi": self.midi,
            "cents": self.cents,
            "frequency": round(self.frequency, 3),
            "target_frequency": round(self.target_frequency, 3),
            "in_tune": self.in_tune,
            "cents_label": self.cents_label,
            "meter_position": round(self.meter_position, 3),
        }


@dataclass(frozen=True)
class PeakCandidate:
    """A local NSDF maximum chosen as the period estimate."""

    lag: int
    """Integer lag in samples."""

    value: float
    """NSDF value at `lag` — the clarity of the periodicity, in [-1, 1]."""


@dataclass(frozen=True)
class BufferAnalysis:
    """Diagnostic record of one detection call.

    `frequency`, `clarity` and `result` are all None unless a pitch was
    found. `rms` is always populated.
    """

    rms: float
    frequency: float | None = None
    clarity: float | None = None
    result: TunerResult | None = None
    gated: bool = False
    """True when the buffer never reached the NSDF because it was too quiet."""

    @property
    def status(self) -> str:
        """'silent' (failed the energy gate), 'unpitched' or 'pitched'."""
        if self.gated:
            return "silent"
        if self.result is None:
            return "unpitched"
        return "pitched"
