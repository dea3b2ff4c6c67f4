"""Metrics configuration loading & normalization.

Responsibilities:
  * Accept a JSON file path or an already-parsed mapping.
  * Validate structure with jsonschema (draft-07).
  * Apply environment overrides.
  * Return typed ``MetricsConfig`` and ``CustomMetricsSpec`` values.

Document shape::

  {
    "prefix": "framework",
    "game": "my-game",
    "const_tags": {"region": "us"},
    "additional_labels": {"shard": "none"},
    "prometheus": {"enabled": true, "port": 9090},
    "statsd": {"enabled": false, "host": "localhost:8125", "prefix": "framework.", "rate": 1},
    "custom": {"summaries": [...], "histograms": [...], "gauges": [...], "counters": [...]}
  }

Environment Flags:
  FRAMEWORK_METRICS_PROMETHEUS_ENABLED / FRAMEWORK_METRICS_PROMETHEUS_PORT
  FRAMEWORK_METRICS_STATSD_ENABLED / FRAMEWORK_METRICS_STATSD_HOST / FRAMEWORK_METRICS_STATSD_RATE

Public API:
  load_metrics_config(source) -> (MetricsConfig, CustomMetricsSpec)
"""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from . import constants as c
from .catalog import (
    DEFAULT_BUCKETS,
    DEFAULT_OBJECTIVES,
    KIND_COUNTER,
    KIND_GAUGE,
    KIND_HISTOGRAM,
    KIND_SUMMARY,
    MetricDef,
)
from .errors import ConfigError
from .utils.env_flags import env_bool, env_float, env_int, env_str

logger = logging.getLogger(__name__)

_STR_MAP = {"type": "object", "additionalProperties": {"type": "string"}}

_BASE_METRIC = {
    "name": {"type": "string", "minLength": 1},
    "subsystem": {"type": "string"},
    "help": {"type": "string"},
    "labels": {"type": "array", "items": {"type": "string"}},
}


def _metric_schema(**extra: Any) -> dict[str, Any]:
    return {
        "type": "object",
        "required": ["name"],
        "properties": {**_BASE_METRIC, **extra},
        "additionalProperties": False,
    }


CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "prefix": {"type": "string", "minLength": 1},
        "game": {"type": "string"},
        "const_tags": _STR_MAP,
        "additional_labels": _STR_MAP,
        "prometheus": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "port": {"type": "integer", "minimum": 0, "maximum": 65535},
            },
            "additionalProperties": False,
        },
        "statsd": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "host": {"type": "string", "minLength": 1},
                "prefix": {"type": "string"},
                "rate": {"type": "number", "exclusiveMinimum": 0, "maximum": 1},
            },
            "additionalProperties": False,
        },
        "custom": {
            "type": "object",
            "properties": {
                "summaries": {"type": "array", "items": _metric_schema(
                    objectives={"type": "object", "additionalProperties": {"type": "number"}})},
                "histograms": {"type": "array", "items": _metric_schema(
                    buckets={"type": "array", "items": {"type": "number"}, "minItems": 1})},
                "gauges": {"type": "array", "items": _metric_schema()},
                "counters": {"type": "array", "items": _metric_schema()},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class MetricsConfig:
    prefix: str = c.PREFIX
    game: str = ""
    const_tags: Mapping[str, str] = field(default_factory=dict)
    additional_labels: Mapping[str, str] = field(default_factory=dict)
    prometheus_enabled: bool = True
    prometheus_port: int = c.DEFAULT_PROMETHEUS_PORT
    statsd_enabled: bool = False
    statsd_host: str = c.DEFAULT_STATSD_HOST
    statsd_prefix: str = f"{c.PREFIX}."
    statsd_rate: float = c.DEFAULT_STATSD_RATE


@dataclass(frozen=True)
class SummarySpec:
    name: str
    subsystem: str = ""
    help: str = ""
    labels: tuple[str, ...] = ()
    objectives: Mapping[float, float] = field(default_factory=lambda: dict(DEFAULT_OBJECTIVES))


@dataclass(frozen=True)
class HistogramSpec:
    name: str
    subsystem: str = ""
    help: str = ""
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] = DEFAULT_BUCKETS


@dataclass(frozen=True)
class GaugeSpec:
    name: str
    subsystem: str = ""
    help: str = ""
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class CounterSpec:
    name: str
    subsystem: str = ""
    help: str = ""
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class CustomMetricsSpec:
    summaries: tuple[SummarySpec, ...] = ()
    histograms: tuple[HistogramSpec, ...] = ()
    gauges: tuple[GaugeSpec, ...] = ()
    counters: tuple[CounterSpec, ...] = ()

    def definitions(self) -> list[MetricDef]:
        """Custom entries as catalog records, in registration order."""
        defs: list[MetricDef] = []
        for s in self.summaries:
            defs.append(MetricDef(s.name, KIND_SUMMARY, s.subsystem, s.help or s.name,
                                  labels=tuple(s.labels), objectives=dict(s.objectives)))
        for h in self.histograms:
            defs.append(MetricDef(h.name, KIND_HISTOGRAM, h.subsystem, h.help or h.name,
                                  labels=tuple(h.labels), buckets=tuple(h.buckets)))
        for g in self.gauges:
            defs.append(MetricDef(g.name, KIND_GAUGE, g.subsystem, g.help or g.name,
                                  labels=tuple(g.labels)))
        for k in self.counters:
            defs.append(MetricDef(k.name, KIND_COUNTER, k.subsystem, k.help or k.name,
                                  labels=tuple(k.labels)))
        return defs


def _read_source(source: str | os.PathLike[str] | Mapping[str, Any] | None) -> dict[str, Any]:
    if source is None:
        return {}
    if isinstance(source, Mapping):
        return dict(source)
    p = Path(source)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read config file {p}: {e}") from e


def validate_metrics_config(raw: Mapping[str, Any]) -> None:
    try:
        jsonschema.validate(instance=raw, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        path = '/'.join(str(p) for p in e.path)
        raise ConfigError(f"Metrics config validation error: {e.message} (path: {path})") from e


def _parse_custom(raw: Mapping[str, Any]) -> CustomMetricsSpec:
    def common(entry: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": entry["name"],
            "subsystem": entry.get("subsystem", ""),
            "help": entry.get("help", ""),
            "labels": tuple(entry.get("labels", ())),
        }

    summaries = []
    for e in raw.get("summaries", ()):
        kwargs = common(e)
        if "objectives" in e:
            try:
                kwargs["objectives"] = {float(q): float(err) for q, err in e["objectives"].items()}
            except ValueError as exc:
                raise ConfigError(f"summary {e['name']!r} has a non-numeric objective quantile") from exc
        summaries.append(SummarySpec(**kwargs))
    histograms = []
    for e in raw.get("histograms", ()):
        kwargs = common(e)
        if "buckets" in e:
            kwargs["buckets"] = tuple(float(b) for b in e["buckets"])
        histograms.append(HistogramSpec(**kwargs))
    return CustomMetricsSpec(
        summaries=tuple(summaries),
        histograms=tuple(histograms),
        gauges=tuple(GaugeSpec(**common(e)) for e in raw.get("gauges", ())),
        counters=tuple(CounterSpec(**common(e)) for e in raw.get("counters", ())),
    )


def _env_overrides(values: dict[str, Any]) -> None:
    overrides = {
        "prometheus_enabled": env_bool("FRAMEWORK_METRICS_PROMETHEUS_ENABLED"),
        "statsd_enabled": env_bool("FRAMEWORK_METRICS_STATSD_ENABLED"),
        "statsd_host": env_str("FRAMEWORK_METRICS_STATSD_HOST"),
    }
    try:
        overrides["prometheus_port"] = env_int("FRAMEWORK_METRICS_PROMETHEUS_PORT")
        overrides["statsd_rate"] = env_float("FRAMEWORK_METRICS_STATSD_RATE")
    except ValueError as e:
        raise ConfigError(f"Invalid numeric metrics environment override: {e}") from e
    for key, value in overrides.items():
        if value is not None:
            logger.info("metrics config override from environment: %s=%s", key, value)
            values[key] = value


def load_metrics_config(
    source: str | os.PathLike[str] | Mapping[str, Any] | None = None,
) -> tuple[MetricsConfig, CustomMetricsSpec]:
    raw = _read_source(source)
    validate_metrics_config(raw)

    prom = raw.get("prometheus", {})
    statsd = raw.get("statsd", {})
    prefix = raw.get("prefix", c.PREFIX)
    values: dict[str, Any] = {
        "prefix": prefix,
        "game": raw.get("game", ""),
        "const_tags": dict(raw.get("const_tags", {})),
        "additional_labels": dict(raw.get("additional_labels", {})),
        "prometheus_enabled": prom.get("enabled", True),
        "prometheus_port": prom.get("port", c.DEFAULT_PROMETHEUS_PORT),
        "statsd_enabled": statsd.get("enabled", False),
        "statsd_host": statsd.get("host", c.DEFAULT_STATSD_HOST),
        "statsd_prefix": statsd.get("prefix", f"{prefix}."),
        "statsd_rate": float(statsd.get("rate", c.DEFAULT_STATSD_RATE)),
    }
    _env_overrides(values)
    if not 0 < values["statsd_rate"] <= 1:
        raise ConfigError(f"statsd rate must be in (0, 1]: {values['statsd_rate']}")
    return MetricsConfig(**values), _parse_custom(raw.get("custom", {}))


__all__ = [
    "CONFIG_SCHEMA",
    "MetricsConfig",
    "SummarySpec",
    "HistogramSpec",
    "GaugeSpec",
    "CounterSpec",
    "CustomMetricsSpec",
    "validate_metrics_config",
    "load_metrics_config",
]
