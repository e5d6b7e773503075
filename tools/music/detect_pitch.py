"""
detect_pitch tool — run the tuner over a recorded audio file.

Replays the recording through the MPM pitch detector one polling interval at
a time and reports which note was played and how far from equal temperament
it was. Intended for monophonic recordings: a plucked string, a sung note,
a single wind instrument.

Requires the audio stack (librosa + soundfile) to be installed.
"""

from typing import Any

from core.config import get_preset
from tools.base import MusicalTool, ToolParameter, ToolResult


class DetectPitch(MusicalTool):
    """Track the pitch of a monophonic recording and summarise the tuning.

    Example:
        tool = DetectPitch()
        result = tool(file_path="/path/to/low_e.wav", preset="bass")
        # Returns: dominant_note="E1", median_cents=-8.0, frames=[...]
    """

    @property
    def name(self) -> str:
        return "detect_pitch"

    @property
    def description(self) -> str:
        return (
            "Detect the pitch of a monophonic audio recording with the tuner "
            "(McLeod Pitch Method). Returns the dominant note, its median deviation "
            "in cents, the share of frames with a clear pitch, and optionally every "
            "pitched frame with time, note, frequency and cents. "
            "Presets: 'default' (50-1200 Hz), 'low_latency', 'bass' (30-500 Hz). "
            "Supports .mp3 .wav .flac .aiff .ogg .m4a files."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="file_path",
                type=str,
                description="Absolute path to audio file on local filesystem.",
                required=True,
            ),
            ToolParameter(
                name="duration",
                type=float,
                description="Max seconds to analyse (default 30.0).",
                required=False,
                default=30.0,
            ),
            ToolParameter(
                name="preset",
                type=str,
                description="Tuner preset: default, low_latency or bass.",
                required=False,
                default="default",
            ),
            ToolParameter(
                name="include_frames",
                type=bool,
                description="If True, include every pitched frame in the output.",
                required=False,
                default=False,
            ),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the offline tuner.

        Returns:
            ToolResult.data with keys:
                frame_count, pitched_count, voiced_ratio, dominant_note,
                median_cents, median_frequency, duration_sec, sample_rate,
                frames (list[dict] — only if include_frames=True)
        """
        file_path: str = (kwargs.get("file_path") or "").strip()
        duration: float = float(kwargs.get("duration") or 30.0)
        preset: str = kwargs.get("preset") or "default"
        include_frames: bool = bool(kwargs.get("include_frames") or False)

        if not file_path:
            return ToolResult(success=False, error="file_path cannot be empty")

        try:
            config = get_preset(preset)
        except ValueError as exc:
            return ToolResult(success=False, error=str(exc))

        try:
            from ingestion.tuner_engine import TunerEngine

            track = TunerEngine(config=config).tune_file(file_path, duration=duration)
        except FileNotFoundError as exc:
            return ToolResult(success=False, error=f"File not found: {exc}")
        except ValueError as exc:
            return ToolResult(success=False, error=str(exc))
        except RuntimeError as exc:
            return ToolResult(success=False, error=f"Pitch detection failed: {exc}")

        data: dict[str, Any] = track.summary()
        if include_frames:
            data["frames"] = [
                {"time_sec": round(f.time_sec, 3), **f.result.to_dict()}
                for f in track.pitched_frames
            ]

        return ToolResult(
            success=True,
            data=data,
            metadata={
                "file": file_path,
                "preset": preset,
                "processing_time_ms": round(track.processing_time_ms, 1),
            },
        )
