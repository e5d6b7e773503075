"""Prometheus metrics for the tuner.

Exposes detection outcomes in metrics so dashboards show how often the tuner
hears a clear pitch versus silence or noise, not just generic HTTP stats.

Metrics:
    tuner_detections_total             Counter by status (pitched/unpitched/silent)
    tuner_detection_latency_seconds    Histogram of per-buffer detection time
    tuner_file_frames_total            Frames analysed by the offline file tuner
    tuner_requests_total               API requests by endpoint and outcome

Usage::

    from infrastructure.metrics import LatencyTimer, record_detection

    with LatencyTimer() as t:
        analysis = analyze_buffer(buffer, sr)
    record_detection(status=analysis.status, latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

DETECTION_STATUSES: frozenset[str] = frozenset({"pitched", "unpitched", "silent"})

_REGISTRY = CollectorRegistry()

tuner_detections_total = Counter(
    "tuner_detections_total",
    "Buffers analysed by the pitch detector, by outcome",
    ["status"],
    registry=_REGISTRY,
)

tuner_detection_latency_seconds = Histogram(
    "tuner_detection_latency_seconds",
    "Time spent detecting the pitch of one buffer",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.08, 0.25],
    registry=_REGISTRY,
)

tuner_file_frames_total = Counter(
    "tuner_file_frames_total",
    "Frames analysed by the offline file tuner",
    registry=_REGISTRY,
)

tuner_requests_total = Counter(
    "tuner_requests_total",
    "Tuner API requests by endpoint and outcome",
    ["endpoint", "outcome"],
    registry=_REGISTRY,
)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_detection(*, status: str, latency_seconds: float) -> None:
    """Record one completed detection call.

    Args:
        status: One of "pitched", "unpitched", "silent".
        latency_seconds: Wall-clock time of the detection in seconds.
    """
    if status not in DETECTION_STATUSES:
        logger.warning("Unknown detection status %r — not recorded", status)
        return
    tuner_detections_total.labels(status=status).inc()
    tuner_detection_latency_seconds.observe(latency_seconds)


def record_file_frames(count: int) -> None:
    """Add analysed frames from one file to the frame counter."""
    if count > 0:
        tuner_file_frames_total.inc(count)


def record_request(endpoint: str, outcome: str) -> None:
    """Increment the API request counter.

    Args:
        endpoint: Route name, e.g. "detect", "file".
        outcome: "success" or "error".
    """
    tuner_requests_total.labels(endpoint=endpoint, outcome=outcome).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = tune(buffer, sr)
        record_detection(status="pitched", latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
