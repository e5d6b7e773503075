"""
core/tuner — Pure pitch detection for the instrument tuner.

Estimates the fundamental frequency of a monophonic audio buffer with the
McLeod Pitch Method (NSDF + key-maximum peak picking + parabolic refinement)
and maps it onto 12-tone equal temperament.

Architecture note:
    Everything here is a pure function of (buffer, sample_rate, config).
    No I/O, no logging, no module-level caches. File loading lives in
    ingestion/, metrics and logging in the outer layers.

Public API:
    Types:      PitchAnalysis, TunerResult, BufferAnalysis, PeakCandidate
    Detection:  detect_pitch, tune, analyze_buffer
    Mapping:    analyse_frequency, frequency_to_midi_exact, midi_to_frequency,
                midi_to_pitch_name
    Stages:     compute_rms, passes_gate, compute_nsdf, find_first_negative_crossing,
                find_key_maximum, refine_lag
"""

from core.tuner.detector import analyze_buffer, detect_pitch, tune
from core.tuner.nsdf import compute_nsdf
from core.tuner.peaks import find_first_negative_crossing, find_key_maximum, refine_lag
from core.tuner.pitch import (
    analyse_frequency,
    frequency_to_midi_exact,
    midi_to_frequency,
    midi_to_pitch_name,
)
from core.tuner.signal import compute_rms, is_audible, passes_gate
from core.tuner.types import NOTE_NAMES, BufferAnalysis, PeakCandidate, PitchAnalysis, TunerResult

__all__ = [
    "NOTE_NAMES",
    "PitchAnalysis",
    "TunerResult",
    "BufferAnalysis",
    "PeakCandidate",
    "detect_pitch",
    "tune",
    "analyze_buffer",
    "analyse_frequency",
    "frequency_to_midi_exact",
    "midi_to_frequency",
    "midi_to_pitch_name",
    "compute_rms",
    "is_audible",
    "passes_gate",
    "compute_nsdf",
    "find_first_negative_crossing",
    "find_key_maximum",
    "refine_lag",
]
