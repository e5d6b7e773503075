"""
analyze_frequency tool — map a frequency onto the nearest equal-tempered note.

Pure lookup, no audio: useful for checking a reading from another device,
or for finding the target frequency of a string before tuning it.
"""

from typing import Any

from core.config import DEFAULT_CONFIG
from core.tuner.pitch import analyse_frequency, frequency_to_midi_exact
from core.tuner.types import TunerResult
from tools.base import MusicalTool, ToolParameter, ToolResult


class AnalyzeFrequency(MusicalTool):
    """Convert a frequency in Hz to note name, octave, cents and target Hz.

    Example:
        tool = AnalyzeFrequency()
        result = tool(frequency=446.0)
        # Returns: note="A", octave=4, cents=23, target_frequency=440.0
    """

    @property
    def name(self) -> str:
        return "analyze_frequency"

    @property
    def description(self) -> str:
        return (
            "Convert a frequency in Hz to the nearest note in 12-tone equal temperament "
            "(A4 = 440 Hz). Returns note name, octave (scientific pitch notation, "
            "middle C = C4), deviation in cents (-50..+50), the target frequency of the "
            "nearest note, the exact fractional MIDI number, and whether it is in tune."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="frequency",
                type=float,
                description="Frequency in Hz (must be > 0).",
                required=True,
            ),
            ToolParameter(
                name="tolerance_cents",
                type=int,
                description=(
                    f"|cents| still reported as in tune (default {DEFAULT_CONFIG.in_tune_cents})."
                ),
                required=False,
                default=DEFAULT_CONFIG.in_tune_cents,
            ),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        """Analyse one frequency.

        Returns:
            ToolResult.data with keys:
                note, octave, pitch_name, cents, midi, midi_exact,
                target_frequency, in_tune
        """
        frequency = float(kwargs["frequency"])
        tolerance = kwargs.get("tolerance_cents")
        tolerance = DEFAULT_CONFIG.in_tune_cents if tolerance is None else int(tolerance)

        if frequency <= 0:
            return ToolResult(success=False, error=f"frequency must be > 0, got {frequency}")

        analysis = analyse_frequency(frequency)
        reading = TunerResult.from_analysis(frequency, analysis, in_tune_cents=tolerance)
        return ToolResult(
            success=True,
            data={
                "note": analysis.note,
                "octave": analysis.octave,
                "pitch_name": reading.pitch_name,
                "cents": analysis.cents,
                "midi": analysis.midi,
                "midi_exact": round(frequency_to_midi_exact(frequency), 4),
                "target_frequency": round(analysis.target_frequency, 3),
                "in_tune": reading.in_tune,
            },
            metadata={"tolerance_cents": tolerance},
        )
