import logging
import time

from framework_metrics import boot
from framework_metrics import prometheus as prom
from framework_metrics.boot import bootstrap, build_reporters
from framework_metrics.config import MetricsConfig
from framework_metrics.prometheus import PrometheusReporter
from framework_metrics.statsd import StatsdReporter
from framework_metrics.utils.logging_utils import setup_logging
from tests._helpers import FakeStatsdClient


def test_build_reporters_respects_enable_flags(monkeypatch):
    monkeypatch.setattr(prom, "start_pull_endpoint", lambda port, host, registry: True)
    monkeypatch.setattr(boot, "StatsdReporter",
                        lambda config, server_type: StatsdReporter(config, server_type, FakeStatsdClient()))
    cfg = MetricsConfig(statsd_enabled=True)
    reporters = build_reporters("connector", cfg)
    assert [type(r) for r in reporters] == [PrometheusReporter, StatsdReporter]
    assert build_reporters("connector", MetricsConfig(prometheus_enabled=False)) == []


def test_bootstrap_starts_and_stops_sys_metrics(monkeypatch):
    started = []
    monkeypatch.setattr(prom, "start_pull_endpoint", lambda port, host, registry: started.append(port) or True)
    ctx = bootstrap("connector", {"prometheus": {"port": 9200}}, log_level=None, sys_metrics_period=0.01)
    labels = {"serverType": "connector", "game": ""}
    try:
        assert started == [9200]
        assert len(ctx.reporters) == 1
        assert ctx.config.prometheus_port == 9200
        reporter = ctx.reporters[0]
        for _ in range(200):
            if reporter.registry.get_sample_value("framework_sys_goroutines", labels) is not None:
                break
            time.sleep(0.01)
        assert reporter.registry.get_sample_value("framework_sys_goroutines", labels) >= 1
    finally:
        ctx.stop()


def test_setup_logging_replaces_root_handlers(monkeypatch):
    monkeypatch.setenv("FRAMEWORK_METRICS_VERBOSE_CONSOLE", "1")
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert "%(threadName)s" in root.handlers[0].formatter._fmt
    finally:
        for h in root.handlers[:]:
            root.removeHandler(h)
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
