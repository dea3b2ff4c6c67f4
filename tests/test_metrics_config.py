import json
import os
import tempfile

import pytest

from framework_metrics.config import MetricsConfig, load_metrics_config
from framework_metrics.errors import ConfigError

FULL = {
    "prefix": "mygame",
    "game": "mygame",
    "const_tags": {"region": "us"},
    "additional_labels": {"shard": "none"},
    "prometheus": {"enabled": True, "port": 9100},
    "statsd": {"enabled": True, "host": "stats:8125", "prefix": "mygame.", "rate": 0.25},
    "custom": {
        "summaries": [{"name": "db_latency", "subsystem": "storage", "help": "h", "labels": ["op"],
                       "objectives": {"0.5": 0.05, "0.9": 0.01}}],
        "histograms": [{"name": "payload", "subsystem": "net", "buckets": [1, 10, 100]}],
        "gauges": [{"name": "rooms"}],
        "counters": [{"name": "logins", "labels": ["method"]}],
    },
}


def _write_tmp(content: dict) -> str:
    fd, path = tempfile.mkstemp(suffix='.json', text=True)
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
        json.dump(content, f)
    return path


def test_defaults_when_no_source():
    cfg, spec = load_metrics_config()
    assert cfg == MetricsConfig()
    assert spec.definitions() == []


def test_full_document_from_file():
    cfg, spec = load_metrics_config(_write_tmp(FULL))
    assert cfg.prefix == "mygame"
    assert cfg.const_tags == {"region": "us"}
    assert cfg.additional_labels == {"shard": "none"}
    assert cfg.prometheus_port == 9100
    assert cfg.statsd_enabled is True
    assert cfg.statsd_host == "stats:8125"
    assert cfg.statsd_rate == 0.25
    assert spec.summaries[0].objectives == {0.5: 0.05, 0.9: 0.01}
    assert spec.summaries[0].labels == ("op",)
    assert spec.histograms[0].buckets == (1.0, 10.0, 100.0)
    assert [d.key for d in spec.definitions()] == ["db_latency", "payload", "rooms", "logins"]


def test_statsd_prefix_follows_prefix_by_default():
    cfg, _ = load_metrics_config({"prefix": "arena"})
    assert cfg.statsd_prefix == "arena."


def test_schema_violation_raises_config_error():
    with pytest.raises(ConfigError) as ei:
        load_metrics_config({"prometheus": {"port": "not-a-port"}})
    assert "prometheus/port" in str(ei.value)
    with pytest.raises(ConfigError):
        load_metrics_config({"unknown_section": {}})
    with pytest.raises(ConfigError):
        load_metrics_config({"custom": {"gauges": [{"help": "missing name"}]}})


def test_missing_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_metrics_config(tmp_path / "absent.json")


def test_non_numeric_objective_rejected():
    doc = {"custom": {"summaries": [{"name": "s", "objectives": {"p50": 0.05}}]}}
    with pytest.raises(ConfigError):
        load_metrics_config(doc)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FRAMEWORK_METRICS_PROMETHEUS_PORT", "9300")
    monkeypatch.setenv("FRAMEWORK_METRICS_STATSD_ENABLED", "yes")
    monkeypatch.setenv("FRAMEWORK_METRICS_STATSD_HOST", "agent:9125")
    monkeypatch.setenv("FRAMEWORK_METRICS_STATSD_RATE", "0.1")
    monkeypatch.setenv("FRAMEWORK_METRICS_PROMETHEUS_ENABLED", "off")
    cfg, _ = load_metrics_config(FULL)
    assert cfg.prometheus_port == 9300
    assert cfg.prometheus_enabled is False
    assert cfg.statsd_enabled is True
    assert cfg.statsd_host == "agent:9125"
    assert cfg.statsd_rate == 0.1


def test_invalid_environment_override(monkeypatch):
    monkeypatch.setenv("FRAMEWORK_METRICS_PROMETHEUS_PORT", "ninety")
    with pytest.raises(ConfigError):
        load_metrics_config({})
    monkeypatch.setenv("FRAMEWORK_METRICS_PROMETHEUS_PORT", "9090")
    monkeypatch.setenv("FRAMEWORK_METRICS_STATSD_RATE", "2")
    with pytest.raises(ConfigError):
        load_metrics_config({})
