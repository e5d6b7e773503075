"""
api/schemas/tuner.py — Pydantic request/response schemas for tuner endpoints.

Covers:
    /tuner/detect            — DetectRequest / DetectResponse
    /tuner/frequency/{hz}    — PitchAnalysisOut
    /tuner/midi/{midi}       — MidiOut
    /tuner/file              — FileTuneRequest / FileTuneResponse
"""

from pydantic import BaseModel, Field, field_validator

# Largest buffer accepted over HTTP (16 × the default window)
MAX_SAMPLES: int = 32768

# ---------------------------------------------------------------------------
# Shared sub-schemas
# ---------------------------------------------------------------------------


class TunerResultOut(BaseModel):
    """A single tuner reading."""

    note: str
    octave: int
    pitch_name: str
    midi: int
    cents: int = Field(..., ge=-50, le=50)
    frequency: float = Field(..., gt=0.0)
    target_frequency: float = Field(..., gt=0.0)
    in_tune: bool
    cents_label: str
    meter_position: float = Field(..., ge=0.0, le=1.0)


class PitchAnalysisOut(BaseModel):
    """A frequency mapped onto equal temperament."""

    frequency: float
    note: str
    octave: int
    cents: int = Field(..., ge=-50, le=50)
    midi: int
    midi_exact: float
    target_frequency: float


class MidiOut(BaseModel):
    """Equal-temperament frequency of a MIDI note."""

    midi: int
    pitch_name: str
    frequency: float


# ---------------------------------------------------------------------------
# /tuner/detect
# ---------------------------------------------------------------------------


class DetectRequest(BaseModel):
    """Request body for POST /tuner/detect."""

    samples: list[float] = Field(
        ...,
        min_length=4,
        max_length=MAX_SAMPLES,
        description="Time-domain samples in [-1, 1], e.g. one 2048-sample analyser buffer.",
    )
    sample_rate: float = Field(
        default=44100.0,
        gt=0.0,
        le=384000.0,
        description="Sample rate of the capture device in Hz.",
    )
    min_rms: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Energy gate. Omit to use the server default (0.01).",
    )

    @field_validator("samples")
    @classmethod
    def samples_in_range(cls, v: list[float]) -> list[float]:
        for s in v:
            if not -1.0 <= s <= 1.0:
                raise ValueError(f"samples must lie in [-1, 1], got {s}")
        return v


class DetectResponse(BaseModel):
    """Response body for POST /tuner/detect.

    `result` is null when there is no estimate; `status` says why.
    """

    status: str
    rms: float
    frequency: float | None = None
    clarity: float | None = None
    result: TunerResultOut | None = None


# ---------------------------------------------------------------------------
# /tuner/file
# ---------------------------------------------------------------------------


class FileTuneRequest(BaseModel):
    """Request body for POST /tuner/file."""

    file_path: str = Field(
        ...,
        description="Absolute path to audio file on the server filesystem.",
    )
    duration: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Max seconds of audio to analyse.",
    )
    preset: str = Field(
        default="default",
        description="Tuner preset: default, low_latency or bass.",
    )
    include_frames: bool = Field(
        default=False,
        description="Include every pitched frame in the response.",
    )


class FrameOut(BaseModel):
    """One pitched frame of a file."""

    time_sec: float = Field(..., ge=0.0)
    clarity: float
    result: TunerResultOut


class FileTuneResponse(BaseModel):
    """Response body for POST /tuner/file."""

    frame_count: int
    pitched_count: int
    voiced_ratio: float = Field(..., ge=0.0, le=1.0)
    dominant_note: str | None = None
    median_cents: float | None = None
    median_frequency: float | None = None
    duration_sec: float
    sample_rate: int
    frames: list[FrameOut] = Field(default_factory=list)
