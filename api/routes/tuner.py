"""
api/routes/tuner.py — Tuner endpoints.

Endpoints:
    POST /tuner/detect           — Pitch of one sample buffer (the per-tick call)
    GET  /tuner/frequency/{hz}   — Nearest note / cents for a frequency
    GET  /tuner/midi/{midi}      — Equal-temperament frequency of a MIDI note
    POST /tuner/file             — Offline tuner over a server-side audio file

/tuner/detect never errors on "no pitch": silence and noise come back as
200 with `result: null` and a `status` of "silent" or "unpitched".
"""

from __future__ import annotations

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Path

from api.deps import get_tuner_config, get_tuner_engine
from api.schemas.tuner import (
    DetectRequest,
    DetectResponse,
    FileTuneRequest,
    FileTuneResponse,
    FrameOut,
    MidiOut,
    PitchAnalysisOut,
    TunerResultOut,
)
from core.config import TunerConfig, get_preset
from core.tuner.detector import analyze_buffer
from core.tuner.pitch import (
    analyse_frequency,
    frequency_to_midi_exact,
    midi_to_frequency,
    midi_to_pitch_name,
)
from core.tuner.types import TunerResult
from infrastructure.metrics import LatencyTimer, record_detection, record_request
from ingestion.tuner_engine import TunerEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tuner", tags=["tuner"])


def _get_engine(preset: str) -> TunerEngine:
    """Engine for a named preset.

    The shared engine is reused only when the preset resolves to exactly the
    server's config, so "default" always means DEFAULT_CONFIG whatever
    TUNER_PRESET says.
    """
    config = get_preset(preset)
    if config == get_tuner_config():
        return get_tuner_engine()
    return TunerEngine(config=config)


def _result_out(result: TunerResult) -> TunerResultOut:
    return TunerResultOut(**result.to_dict())


# ---------------------------------------------------------------------------
# POST /tuner/detect
# ---------------------------------------------------------------------------


@router.post("/detect", response_model=DetectResponse)
def detect(
    request: DetectRequest,
    config: TunerConfig = Depends(get_tuner_config),
) -> DetectResponse:
    """Detect the pitch of one buffer of samples.

    Args:
        request: Samples, sample rate and optional energy gate.

    Returns:
        DetectResponse. `result` is null when no pitch estimate exists.
    """
    if request.min_rms is not None:
        config = replace(config, min_rms=request.min_rms)

    with LatencyTimer() as timer:
        analysis = analyze_buffer(request.samples, request.sample_rate, config=config)
    record_detection(status=analysis.status, latency_seconds=timer.elapsed)
    record_request("detect", "success")

    return DetectResponse(
        status=analysis.status,
        rms=analysis.rms,
        frequency=analysis.frequency,
        clarity=analysis.clarity,
        result=None if analysis.result is None else _result_out(analysis.result),
    )


# ---------------------------------------------------------------------------
# GET /tuner/frequency/{hz}
# ---------------------------------------------------------------------------


@router.get("/frequency/{hz}", response_model=PitchAnalysisOut)
def frequency(hz: float = Path(..., description="Frequency in Hz")) -> PitchAnalysisOut:
    """Map a frequency onto the nearest equal-tempered note.

    Raises:
        422: hz is not a positive finite number.
    """
    try:
        analysis = analyse_frequency(hz)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return PitchAnalysisOut(
        frequency=hz,
        note=analysis.note,
        octave=analysis.octave,
        cents=analysis.cents,
        midi=analysis.midi,
        midi_exact=frequency_to_midi_exact(hz),
        target_frequency=analysis.target_frequency,
    )


# ---------------------------------------------------------------------------
# GET /tuner/midi/{midi}
# ---------------------------------------------------------------------------


@router.get("/midi/{midi}", response_model=MidiOut)
def midi(midi: int = Path(..., ge=0, le=127, description="MIDI note number")) -> MidiOut:
    """Return the equal-temperament frequency of a MIDI note (A4 = 69 = 440 Hz)."""
    return MidiOut(
        midi=midi,
        pitch_name=midi_to_pitch_name(midi),
        frequency=midi_to_frequency(midi),
    )


# ---------------------------------------------------------------------------
# POST /tuner/file
# ---------------------------------------------------------------------------


@router.post("/file", response_model=FileTuneResponse)
def tune_file(request: FileTuneRequest) -> FileTuneResponse:
    """Run the tuner over an audio file on the server filesystem.

    Raises:
        422: File not found, unsupported format or unknown preset.
        500: Audio decoding failure.
    """
    try:
        engine = _get_engine(request.preset)
        track = engine.tune_file(request.file_path, duration=request.duration)
    except FileNotFoundError as exc:
        record_request("file", "error")
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        record_request("file", "error")
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        record_request("file", "error")
        logger.error("File tuning failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"File tuning failed: {exc}") from exc

    record_request("file", "success")

    frames_out: list[FrameOut] = []
    if request.include_frames:
        frames_out = [
            FrameOut(
                time_sec=f.time_sec,
                clarity=f.clarity if f.clarity is not None else 0.0,
                result=_result_out(f.result),
            )
            for f in track.pitched_frames
        ]

    return FileTuneResponse(**track.summary(), frames=frames_out)
