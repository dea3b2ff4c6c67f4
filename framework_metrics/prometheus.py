"""Pull-model reporter backed by ``prometheus_client``.

Lifecycle (uninitialized -> registering -> serving):

1. Constant labels (``serverType``, ``game`` and the configured constant
   tags) and the sorted additional-label keys are computed once.
2. The custom catalog and then the built-in catalog are turned into
   collectors and registered with the collector registry. A name clash is
   a startup error (``RegistrationCollisionError``).
3. ``get_prometheus_reporter`` additionally starts the HTTP pull endpoint.
   It runs the whole sequence at most once per process; later calls
   return the same instance.

Per observation the caller's labels receive additional-label defaults
(caller values win), are projected onto the series schema and the value
is applied to the child selected by the resolved label set. Collector
children are thread-safe, so no extra locking is added here.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, Summary

from . import _singleton
from . import constants as c
from .catalog import (
    BUILTIN_METRICS,
    KIND_COUNTER,
    KIND_GAUGE,
    KIND_HISTOGRAM,
    KIND_SUMMARY,
    MetricDef,
)
from .config import CustomMetricsSpec, MetricsConfig
from .errors import ConfigError, MetricNotKnownError, NegativeCountError, RegistrationCollisionError
from .interface import Reporter
from .labels import resolve_label_set
from .server import start_pull_endpoint

logger = logging.getLogger(__name__)

_CTORS: dict[str, Any] = {
    KIND_COUNTER: Counter,
    KIND_GAUGE: Gauge,
    KIND_SUMMARY: Summary,
    KIND_HISTOGRAM: Histogram,
}

STATE_UNINITIALIZED = "uninitialized"
STATE_REGISTERING = "registering"
STATE_SERVING = "serving"


class _Series:
    __slots__ = ("definition", "collector", "schema")

    def __init__(self, definition: MetricDef, collector: Any, schema: tuple[str, ...]):
        self.definition = definition
        self.collector = collector
        self.schema = schema

    def child(self, labels: dict[str, str]) -> Any:
        if not self.schema:
            return self.collector
        return self.collector.labels(**labels)


def _dedupe(keys: Sequence[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for k in keys:
        seen.setdefault(k, None)
    return tuple(seen)


class PrometheusReporter(Reporter):
    """Registry-backed reporter.

    Construct directly with a private ``CollectorRegistry`` for isolation
    (tests, embedded use); production code goes through
    ``get_prometheus_reporter`` so the global registry is populated once.
    """

    def __init__(self, server_type: str, config: MetricsConfig | None = None,
                 spec: CustomMetricsSpec | None = None, *,
                 registry: CollectorRegistry | None = None):
        self.state = STATE_UNINITIALIZED
        config = config or MetricsConfig()
        self.server_type = server_type
        self.game = config.game
        self.prefix = config.prefix
        self.registry = registry if registry is not None else REGISTRY
        self.const_labels: dict[str, str] = dict(config.const_tags)
        self.const_labels[c.LABEL_GAME] = self.game
        self.const_labels[c.LABEL_SERVER_TYPE] = server_type
        self.additional_labels: dict[str, str] = dict(config.additional_labels)
        self.additional_label_keys: tuple[str, ...] = tuple(sorted(self.additional_labels))

        self._tables: dict[str, dict[str, _Series]] = {kind: {} for kind in _CTORS}
        self.state = STATE_REGISTERING
        self._register_metrics(spec or CustomMetricsSpec())
        self.state = STATE_SERVING

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def _schema_for(self, definition: MetricDef) -> tuple[str, ...]:
        return _dedupe((*self.const_labels, *self.additional_label_keys, *definition.labels))

    def _build(self, definition: MetricDef) -> _Series:
        shadowed = sorted(set(self.const_labels) & {*definition.labels, *self.additional_label_keys})
        if shadowed:
            raise ConfigError(
                f"constant labels {shadowed} clash with labels of {definition.kind} {definition.key!r}"
            )
        schema = self._schema_for(definition)
        kwargs: dict[str, Any] = {
            "namespace": self.prefix,
            "subsystem": definition.subsystem,
            "registry": None,
        }
        if definition.kind == KIND_HISTOGRAM and definition.buckets:
            kwargs["buckets"] = tuple(definition.buckets)
        try:
            collector = _CTORS[definition.kind](definition.exposed_name, definition.doc, schema, **kwargs)
        except ValueError as e:
            raise ConfigError(f"invalid {definition.kind} definition {definition.key!r}: {e}") from e
        return _Series(definition, collector, schema)

    def _add(self, definition: MetricDef) -> None:
        table = self._tables[definition.kind]
        if definition.key in table:
            raise RegistrationCollisionError(
                f"{definition.kind} {definition.key!r} is declared more than once"
            )
        table[definition.key] = self._build(definition)

    def _register_metrics(self, spec: CustomMetricsSpec) -> None:
        for definition in spec.definitions():
            self._add(definition)
        for definition in BUILTIN_METRICS:
            self._add(definition)

        registered: list[Any] = []
        for kind, table in self._tables.items():
            for key, series in table.items():
                try:
                    self.registry.register(series.collector)
                except ValueError as e:
                    for collector in registered:
                        self.registry.unregister(collector)
                    raise RegistrationCollisionError(
                        f"cannot register {kind} {key!r}: {e}"
                    ) from e
                registered.append(series.collector)
        logger.info(
            "prometheus reporter registered %d series (serverType=%s, additional labels=%s)",
            sum(len(t) for t in self._tables.values()), self.server_type,
            list(self.additional_label_keys),
        )

    def unregister(self) -> None:
        """Remove every collector from the registry (test teardown)."""
        for table in self._tables.values():
            for series in table.values():
                try:
                    self.registry.unregister(series.collector)
                except KeyError:
                    logger.debug("collector %s was not registered", series.definition.key)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def _lookup(self, kind: str, metric: str) -> _Series:
        series = self._tables[kind].get(metric)
        if series is None:
            raise MetricNotKnownError(metric, kind)
        return series

    def _resolve(self, series: _Series, labels: Mapping[str, str] | None) -> dict[str, str]:
        return resolve_label_set(labels, series.schema, self.additional_labels, self.const_labels)

    def has_metric(self, kind: str, metric: str) -> bool:
        return metric in self._tables.get(kind, {})

    def report_summary(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        series = self._lookup(KIND_SUMMARY, metric)
        series.child(self._resolve(series, labels)).observe(value)

    def report_histogram(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        series = self._lookup(KIND_HISTOGRAM, metric)
        series.child(self._resolve(series, labels)).observe(value)

    def report_count(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        series = self._lookup(KIND_COUNTER, metric)
        if value < 0:
            raise NegativeCountError(metric, value)
        series.child(self._resolve(series, labels)).inc(value)

    def report_gauge(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        series = self._lookup(KIND_GAUGE, metric)
        series.child(self._resolve(series, labels)).set(value)


def get_prometheus_reporter(server_type: str, config: MetricsConfig | None = None,
                            spec: CustomMetricsSpec | None = None, *,
                            start_server: bool = True, host: str = "0.0.0.0") -> PrometheusReporter:
    """Return the process-wide reporter, building it and its endpoint on first call.

    Idempotent and safe under concurrent first calls: registration and the
    listener start happen exactly once.
    """
    config = config or MetricsConfig()

    def _build() -> PrometheusReporter:
        reporter = PrometheusReporter(server_type, config, spec)
        if start_server:
            start_pull_endpoint(config.prometheus_port, host=host, registry=reporter.registry)
        return reporter

    reporter = _singleton.create_if_absent(_build)
    if reporter.server_type != server_type:
        logger.warning(
            "get_prometheus_reporter called again with serverType=%s; reusing existing reporter for %s",
            server_type, reporter.server_type,
        )
    return reporter


__all__ = [
    "PrometheusReporter",
    "get_prometheus_reporter",
    "STATE_UNINITIALIZED",
    "STATE_REGISTERING",
    "STATE_SERVING",
]
