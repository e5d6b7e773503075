#!/usr/bin/env python
"""Offline tuner — run pitch detection over a recorded audio file.

Usage
-----
    # Tune the first 30 seconds of a recording
    python scripts/tune_file.py recordings/a_string.wav

    # Bass preset, first 10 seconds
    python scripts/tune_file.py recordings/low_e.wav --preset bass --duration 10

    # Machine-readable output
    python scripts/tune_file.py recordings/a_string.wav --json

Exit codes
----------
    0  — at least one frame had a clear pitch
    1  — no pitch found anywhere in the file
    2  — the file could not be loaded
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import VALID_PRESETS, get_preset  # noqa: E402
from ingestion.tuner_engine import TunerEngine, TuningTrack  # noqa: E402

logger = logging.getLogger("tune_file")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Detect the pitch of a recorded note")
    p.add_argument("path", help="Audio file (.wav .flac .mp3 .ogg .aiff .m4a)")
    p.add_argument(
        "--duration",
        type=float,
        default=30.0,
        help="Max seconds of audio to analyse (default 30)",
    )
    p.add_argument(
        "--preset",
        choices=sorted(VALID_PRESETS),
        default="default",
        help="Tuner preset (default: default)",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Print the summary and frames as JSON",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Debug logging",
    )
    return p.parse_args(argv)


def render_text(track: TuningTrack) -> str:
    lines = []
    for frame in track.pitched_frames:
        r = frame.result
        lines.append(
            f"{frame.time_sec:7.3f}s  {r.pitch_name:<4} {r.frequency:8.2f} Hz  "
            f"{r.cents_label:>8}  (target {r.target_frequency:.2f} Hz)"
        )
    summary = track.summary()
    lines.append("")
    lines.append(
        f"Dominant note: {summary['dominant_note'] or '—'}  "
        f"median cents: {summary['median_cents'] if summary['median_cents'] is not None else '—'}  "
        f"voiced: {summary['voiced_ratio']:.0%} of {summary['frame_count']} frames"
    )
    return "\n".join(lines)


def render_json(track: TuningTrack) -> str:
    payload = track.summary()
    payload["frames"] = [
        {"time_sec": round(f.time_sec, 3), "clarity": f.clarity, **f.result.to_dict()}
        for f in track.pitched_frames
    ]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    engine = TunerEngine(config=get_preset(args.preset))
    try:
        track = engine.tune_file(args.path, duration=args.duration)
    except (FileNotFoundError, ValueError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 2

    print(render_json(track) if args.json else render_text(track))
    return 0 if track.pitched_frames else 1


if __name__ == "__main__":
    sys.exit(main())
