"""
Tests for scripts/tune_file.py — offline tuner CLI.

The script is loaded from its path (scripts/ is not a package) and main()
is called with an argv list; output is captured with capsys.
"""

import importlib.util
import json
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from conftest import SAMPLE_RATE, sine_wave

_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "tune_file.py"
_spec = importlib.util.spec_from_file_location("tune_file", _SCRIPT)
tune_file = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(tune_file)


@pytest.fixture()
def e4_wav(tmp_path):
    path = tmp_path / "e4.wav"
    sf.write(path, sine_wave(329.6276, length=SAMPLE_RATE // 2, amplitude=0.5), SAMPLE_RATE)
    return path


class TestMain:
    def test_text_output(self, e4_wav, capsys):
        assert tune_file.main([str(e4_wav)]) == 0

        out = capsys.readouterr().out
        assert "E4" in out
        assert "Dominant note: E4" in out
        assert "voiced: 100%" in out

    def test_json_output(self, e4_wav, capsys):
        assert tune_file.main([str(e4_wav), "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["dominant_note"] == "E4"
        assert payload["frames"][0]["note"] == "E"
        assert payload["frames"][0]["clarity"] > 0.8

    def test_silent_file_exits_1(self, tmp_path, capsys):
        path = tmp_path / "silence.wav"
        sf.write(path, np.zeros(SAMPLE_RATE // 2), SAMPLE_RATE)

        assert tune_file.main([str(path)]) == 1
        assert "Dominant note: —" in capsys.readouterr().out

    def test_missing_file_exits_2(self, tmp_path):
        assert tune_file.main([str(tmp_path / "missing.wav")]) == 2

    def test_unknown_preset_rejected_by_argparse(self, e4_wav):
        with pytest.raises(SystemExit):
            tune_file.main([str(e4_wav), "--preset", "banjo"])

    def test_duration_forwarded(self, e4_wav, capsys):
        assert tune_file.main([str(e4_wav), "--duration", "0.1", "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["duration_sec"] == pytest.approx(0.1, abs=0.001)
