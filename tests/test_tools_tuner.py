"""
Tests for tools/music/detect_pitch.py and tools/music/analyze_frequency.py.

detect_pitch is exercised against real WAV files written with soundfile, so
the whole chain (loader → engine → summary) runs. Error paths use missing
or unsupported files.
"""

import pytest
import soundfile as sf

from conftest import SAMPLE_RATE, sine_wave
from core.config import DEFAULT_CONFIG
from tools.music.analyze_frequency import AnalyzeFrequency
from tools.music.detect_pitch import DetectPitch

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def a3_wav(tmp_path):
    """Half a second of 220 Hz at 44.1 kHz."""
    path = tmp_path / "a3.wav"
    sf.write(path, sine_wave(220.0, length=SAMPLE_RATE // 2, amplitude=0.5), SAMPLE_RATE)
    return path


# ---------------------------------------------------------------------------
# analyze_frequency
# ---------------------------------------------------------------------------


class TestAnalyzeFrequency:
    def test_a4(self):
        result = AnalyzeFrequency()(frequency=440.0)

        assert result.success
        assert result.data == {
            "note": "A",
            "octave": 4,
            "pitch_name": "A4",
            "cents": 0,
            "midi": 69,
            "midi_exact": 69.0,
            "target_frequency": 440.0,
            "in_tune": True,
        }
        assert result.metadata == {"tolerance_cents": 5}

    def test_sharp_reading_not_in_tune(self):
        result = AnalyzeFrequency()(frequency=446.0)

        assert result.data["cents"] == 23
        assert result.data["in_tune"] is False

    def test_custom_tolerance(self):
        result = AnalyzeFrequency()(frequency=446.0, tolerance_cents=25)
        assert result.data["in_tune"] is True

    def test_zero_tolerance_only_accepts_exact_pitch(self):
        slightly_sharp = AnalyzeFrequency()(frequency=441.0)
        strict = AnalyzeFrequency()(frequency=441.0, tolerance_cents=0)

        assert slightly_sharp.data["cents"] == 4
        assert slightly_sharp.data["in_tune"] is True
        assert strict.data["in_tune"] is False
        assert strict.metadata == {"tolerance_cents": 0}
        assert AnalyzeFrequency()(frequency=440.0, tolerance_cents=0).data["in_tune"] is True

    def test_default_tolerance_follows_default_config(self):
        param = AnalyzeFrequency().parameters[1]
        assert param.default == DEFAULT_CONFIG.in_tune_cents

    def test_integer_frequency_accepted(self):
        assert AnalyzeFrequency()(frequency=220).data["pitch_name"] == "A3"

    def test_non_positive_frequency_is_error(self):
        result = AnalyzeFrequency()(frequency=0.0)
        assert not result.success
        assert "> 0" in result.error

    def test_missing_frequency(self):
        result = AnalyzeFrequency()()
        assert not result.success
        assert "frequency" in result.error


# ---------------------------------------------------------------------------
# detect_pitch
# ---------------------------------------------------------------------------


class TestDetectPitch:
    def test_summary_for_sine_file(self, a3_wav):
        result = DetectPitch()(file_path=str(a3_wav))

        assert result.success, result.error
        assert result.data["dominant_note"] == "A3"
        assert result.data["voiced_ratio"] == 1.0
        assert result.data["sample_rate"] == SAMPLE_RATE
        assert "frames" not in result.data
        assert result.metadata["preset"] == "default"
        assert result.metadata["file"] == str(a3_wav)

    def test_include_frames(self, a3_wav):
        result = DetectPitch()(file_path=str(a3_wav), include_frames=True)

        frames = result.data["frames"]
        assert len(frames) == result.data["pitched_count"]
        assert frames[0]["time_sec"] == 0.0
        assert frames[0]["pitch_name"] == "A3"
        assert {"cents", "frequency", "target_frequency", "cents_label"} <= set(frames[0])

    def test_bass_preset(self, tmp_path):
        path = tmp_path / "low_e.wav"
        sf.write(path, sine_wave(41.2, length=SAMPLE_RATE, amplitude=0.5), SAMPLE_RATE)

        result = DetectPitch()(file_path=str(path), preset="bass")

        assert result.success, result.error
        assert result.data["dominant_note"] == "E1"

    def test_empty_path(self):
        result = DetectPitch()(file_path="   ")
        assert not result.success
        assert "empty" in result.error

    def test_missing_file(self, tmp_path):
        result = DetectPitch()(file_path=str(tmp_path / "missing.wav"))
        assert not result.success
        assert result.error.startswith("File not found")

    def test_unsupported_format(self, tmp_path):
        doc = tmp_path / "chart.pdf"
        doc.write_bytes(b"%PDF")

        result = DetectPitch()(file_path=str(doc))
        assert not result.success
        assert "Unsupported audio format" in result.error

    def test_unknown_preset(self, a3_wav):
        result = DetectPitch()(file_path=str(a3_wav), preset="banjo")
        assert not result.success
        assert "Unknown preset" in result.error

    def test_corrupt_file(self, tmp_path):
        bad = tmp_path / "broken.wav"
        bad.write_bytes(b"RIFF\x00\x00not really a wav")

        result = DetectPitch()(file_path=str(bad))
        assert not result.success
        assert result.error.startswith("Pitch detection failed")
