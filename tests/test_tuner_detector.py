"""
Tests for core/tuner/detector.py — the detection façade.

End-to-end on synthetic buffers: pure sines must land within a few Hz of
their frequency, silence and noise must give no estimate.
"""

import numpy as np
import pytest

from conftest import SAMPLE_RATE, silent_buffer, sine_wave, white_noise
from core.config import BASS_CONFIG, DEFAULT_CONFIG, TunerConfig
from core.tuner import analyze_buffer, compute_rms, detect_pitch, is_audible, passes_gate, tune
from core.tuner.signal import as_buffer
from core.tuner.types import BufferAnalysis, TunerResult

# ---------------------------------------------------------------------------
# detect_pitch
# ---------------------------------------------------------------------------


class TestDetectPitch:
    @pytest.mark.parametrize("frequency", [82.41, 110.0, 220.0, 329.6276, 392.0, 440.0])
    def test_sine_within_5_hz(self, frequency):
        hz = detect_pitch(sine_wave(frequency), SAMPLE_RATE)
        assert hz is not None
        assert abs(hz - frequency) <= 5.0

    def test_sine_at_48k(self):
        hz = detect_pitch(sine_wave(440.0, sample_rate=48000), 48000)
        assert hz == pytest.approx(440.0, abs=5.0)

    def test_harmonic_rich_signal_reports_fundamental(self):
        buf = 0.6 * sine_wave(196.0) + 0.3 * sine_wave(392.0) + 0.1 * sine_wave(588.0)
        hz = detect_pitch(buf, SAMPLE_RATE)
        assert hz == pytest.approx(196.0, abs=5.0)

    def test_silence_returns_none(self):
        assert detect_pitch(silent_buffer(), SAMPLE_RATE) is None

    def test_quiet_sine_is_gated(self):
        """RMS ≈ 0.0007 is below the 0.01 default gate."""
        assert detect_pitch(sine_wave(440.0) * 0.001, SAMPLE_RATE) is None

    def test_min_rms_override_lets_quiet_sine_through(self):
        hz = detect_pitch(sine_wave(440.0) * 0.001, SAMPLE_RATE, min_rms=0.0001)
        assert hz == pytest.approx(440.0, abs=5.0)

    def test_min_rms_override_can_gate_loud_sine(self):
        assert detect_pitch(sine_wave(440.0, amplitude=0.5), SAMPLE_RATE, min_rms=0.9) is None

    def test_white_noise_returns_none(self):
        assert detect_pitch(white_noise(), SAMPLE_RATE) is None

    def test_accepts_python_list(self):
        hz = detect_pitch(sine_wave(440.0).tolist(), SAMPLE_RATE)
        assert hz == pytest.approx(440.0, abs=5.0)

    def test_accepts_float32(self):
        hz = detect_pitch(sine_wave(440.0).astype(np.float32), SAMPLE_RATE)
        assert hz == pytest.approx(440.0, abs=5.0)

    def test_does_not_mutate_input(self):
        buf = sine_wave(440.0)
        before = buf.copy()
        detect_pitch(buf, SAMPLE_RATE)
        np.testing.assert_array_equal(buf, before)

    def test_repeatable(self):
        buf = sine_wave(330.0)
        assert detect_pitch(buf, SAMPLE_RATE) == detect_pitch(buf, SAMPLE_RATE)

    @pytest.mark.parametrize("sample_rate", [0, -44100])
    def test_rejects_bad_sample_rate(self, sample_rate):
        with pytest.raises(ValueError, match="sample_rate"):
            detect_pitch(sine_wave(440.0), sample_rate)

    def test_rejects_2d_buffer(self):
        with pytest.raises(ValueError, match="1-D"):
            detect_pitch(np.zeros((2, 1024)), SAMPLE_RATE)

    def test_tiny_buffer_has_no_estimate(self):
        assert detect_pitch([0.9], SAMPLE_RATE) is None

    def test_below_min_frequency_range_is_not_reported_low(self):
        """A 30 Hz tone has its period beyond max_lag with the default config."""
        hz = detect_pitch(sine_wave(30.0, length=4096), SAMPLE_RATE)
        assert hz is None or hz > DEFAULT_CONFIG.min_frequency

    def test_bass_config_reaches_low_b(self):
        hz = detect_pitch(sine_wave(30.87, length=4096), SAMPLE_RATE, config=BASS_CONFIG)
        assert hz == pytest.approx(30.87, abs=1.0)


# ---------------------------------------------------------------------------
# analyze_buffer
# ---------------------------------------------------------------------------


class TestAnalyzeBuffer:
    def test_pitched_status(self):
        analysis = analyze_buffer(sine_wave(440.0), SAMPLE_RATE)
        assert analysis.status == "pitched"
        assert analysis.clarity > 0.8
        assert analysis.rms == pytest.approx(1 / np.sqrt(2), abs=0.01)
        assert isinstance(analysis.result, TunerResult)
        assert analysis.result.frequency == analysis.frequency

    def test_silent_status(self):
        analysis = analyze_buffer(silent_buffer(), SAMPLE_RATE)
        assert analysis == BufferAnalysis(rms=0.0, gated=True)
        assert analysis.status == "silent"

    def test_zero_gate_still_rejects_silence(self):
        config = TunerConfig(min_rms=0.0)
        assert analyze_buffer(silent_buffer(), SAMPLE_RATE, config=config).status == "silent"

    def test_unpitched_status_for_noise(self):
        analysis = analyze_buffer(white_noise(), SAMPLE_RATE)
        assert analysis.status == "unpitched"
        assert analysis.frequency is None
        assert analysis.rms > DEFAULT_CONFIG.min_rms

    def test_gate_decision_matches_is_audible(self):
        for buf in (sine_wave(440.0), sine_wave(440.0) * 0.001, silent_buffer()):
            gated = analyze_buffer(buf, SAMPLE_RATE).gated
            assert gated is not is_audible(buf, DEFAULT_CONFIG.min_rms)

    def test_gate_goes_through_shared_helper(self, monkeypatch):
        calls = []

        def closed_gate(rms, min_rms):
            calls.append((rms, min_rms))
            return False

        monkeypatch.setattr("core.tuner.detector.passes_gate", closed_gate)
        analysis = analyze_buffer(sine_wave(440.0), SAMPLE_RATE)
        assert analysis.status == "silent"
        assert calls == [(analysis.rms, DEFAULT_CONFIG.min_rms)]

    def test_strict_clarity_rejects_noise_like_signal(self):
        buf = sine_wave(440.0) + white_noise(amplitude=2.0)
        config = TunerConfig(min_clarity=0.99)
        assert analyze_buffer(buf, SAMPLE_RATE, config=config).status == "unpitched"


# ---------------------------------------------------------------------------
# tune
# ---------------------------------------------------------------------------


class TestTune:
    def test_440_is_a4(self):
        result = tune(sine_wave(440.0), SAMPLE_RATE)
        assert result.note == "A"
        assert result.octave == 4
        assert abs(result.cents) <= 20
        assert result.target_frequency == pytest.approx(440.0)

    def test_e2_low_string(self):
        result = tune(sine_wave(82.41), SAMPLE_RATE)
        assert result.pitch_name == "E2"

    def test_silence_is_none(self):
        assert tune(silent_buffer(), SAMPLE_RATE) is None

    def test_zero_tolerance_config_only_accepts_exact_cents(self):
        """A few cents sharp of A4 is out of tune once in_tune_cents is 0."""
        buf = sine_wave(440.0 * 2 ** (3 / 1200))
        result = tune(buf, SAMPLE_RATE, config=TunerConfig(in_tune_cents=0))
        assert result.pitch_name == "A4"
        assert result.cents != 0
        assert result.in_tune is False
        assert result.to_dict()["in_tune"] is False

    def test_default_config_tolerance_reaches_result(self):
        result = tune(sine_wave(440.0 * 2 ** (3 / 1200)), SAMPLE_RATE)
        assert result.in_tune_cents == DEFAULT_CONFIG.in_tune_cents
        assert result.in_tune is (abs(result.cents) <= DEFAULT_CONFIG.in_tune_cents)

    def test_wide_tolerance_config(self):
        result = tune(sine_wave(446.0), SAMPLE_RATE, config=TunerConfig(in_tune_cents=50))
        assert result.in_tune is True

    def test_cents_bounded(self):
        for f in (100.0, 150.0, 233.0, 311.0, 466.0, 700.0):
            result = tune(sine_wave(f), SAMPLE_RATE)
            assert -50 <= result.cents <= 50


# ---------------------------------------------------------------------------
# Signal gate
# ---------------------------------------------------------------------------


class TestSignalGate:
    def test_rms_of_constant(self):
        assert compute_rms(np.full(8, 0.5)) == pytest.approx(0.5)

    def test_rms_of_empty_is_zero(self):
        assert compute_rms(np.array([])) == 0.0

    def test_audible_sine(self):
        assert is_audible(sine_wave(440.0), 0.01)

    def test_quiet_sine_not_audible(self):
        assert not is_audible(sine_wave(440.0) * 0.001, 0.01)

    def test_silence_never_audible(self):
        assert not is_audible(silent_buffer(), 0.0)

    @pytest.mark.parametrize(
        "rms, min_rms, expected",
        [(0.01, 0.01, True), (0.0099, 0.01, False), (0.0, 0.0, False), (1e-9, 0.0, True)],
    )
    def test_passes_gate_threshold_is_inclusive(self, rms, min_rms, expected):
        assert passes_gate(rms, min_rms) is expected

    def test_as_buffer_coerces_list(self):
        buffer = as_buffer([0, 1, -1])
        assert buffer.dtype == np.float64
        assert buffer.flags["C_CONTIGUOUS"]
