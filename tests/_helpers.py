"""Shared test doubles for reporter tests."""
from __future__ import annotations

from framework_metrics.interface import Reporter


class RecordingReporter(Reporter):
    """Reporter that records every call as (op, metric, labels, value)."""

    def __init__(self):
        self.calls: list[tuple[str, str, dict, float]] = []

    def _record(self, op, metric, labels, value):
        self.calls.append((op, metric, dict(labels or {}), value))

    def report_count(self, metric, labels, value):
        self._record("count", metric, labels, value)

    def report_gauge(self, metric, labels, value):
        self._record("gauge", metric, labels, value)

    def report_summary(self, metric, labels, value):
        self._record("summary", metric, labels, value)

    def report_histogram(self, metric, labels, value):
        self._record("histogram", metric, labels, value)


class FailingReporter(Reporter):
    def __init__(self, exc: Exception):
        self.exc = exc
        self.attempts = 0

    def _fail(self, *a):
        self.attempts += 1
        raise self.exc

    report_count = report_gauge = report_summary = report_histogram = _fail


class FakeStatsdClient:
    """Stands in for DogStatsd; records sends, optionally raising."""

    def __init__(self, error: Exception | None = None):
        self.sent: list[tuple[str, str, float, list, float]] = []
        self.error = error

    def _send(self, kind, metric, value, tags=None, sample_rate=None):
        if self.error is not None:
            raise self.error
        self.sent.append((kind, metric, value, list(tags or []), sample_rate))

    def increment(self, metric, value=1, tags=None, sample_rate=None):
        self._send("increment", metric, value, tags, sample_rate)

    def gauge(self, metric, value, tags=None, sample_rate=None):
        self._send("gauge", metric, value, tags, sample_rate)

    def timing(self, metric, value, tags=None, sample_rate=None):
        self._send("timing", metric, value, tags, sample_rate)
