"""Pytest configuration for the metrics facade tests.

1. Ensure project root on sys.path.
2. Reset the process-wide Prometheus reporter after every test so the
   default registry never carries collectors between tests.
"""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from framework_metrics.testing import reset_prometheus_reporter  # noqa: E402
from tests._helpers import FakeStatsdClient, RecordingReporter  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_reporter_singleton():
    reset_prometheus_reporter()
    yield
    reset_prometheus_reporter()


@pytest.fixture()
def recorder():
    return RecordingReporter()


@pytest.fixture()
def fake_statsd():
    return FakeStatsdClient()
