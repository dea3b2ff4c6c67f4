"""Declarative built-in metric catalog.

Each ``MetricDef`` describes one pull-model series: its lookup key, kind,
subsystem, help text, extra label keys and kind-specific parameters. The
Prometheus reporter turns these into collectors at startup; operator
supplied custom metrics are converted into the same records.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from . import constants as c

KIND_COUNTER = "counter"
KIND_GAUGE = "gauge"
KIND_SUMMARY = "summary"
KIND_HISTOGRAM = "histogram"
KINDS = (KIND_COUNTER, KIND_GAUGE, KIND_SUMMARY, KIND_HISTOGRAM)

DEFAULT_OBJECTIVES: Mapping[float, float] = {0.7: 0.02, 0.95: 0.005, 0.99: 0.001}
DEFAULT_BUCKETS: tuple[float, ...] = (1, 5, 10, 50, 100, 300, 500, 1000, 5000, 10000)

_HANDLER_LABELS = (c.TAG_ROUTE, c.TAG_STATUS, c.TAG_TYPE, c.TAG_CODE)


@dataclass(frozen=True)
class MetricDef:
    key: str                          # Lookup key used by report_* calls
    kind: str                         # One of KINDS
    subsystem: str
    doc: str
    labels: Sequence[str] = ()        # Extra label keys beyond const/additional
    objectives: Mapping[float, float] | None = None  # summaries only
    buckets: Sequence[float] | None = None           # histograms only
    name: str | None = field(default=None)           # Exposition name when it differs from key

    @property
    def exposed_name(self) -> str:
        return self.name or self.key


BUILTIN_METRICS: tuple[MetricDef, ...] = (
    MetricDef(c.RESPONSE_TIME, KIND_SUMMARY, "handler",
              "the time to process a msg in nanoseconds",
              labels=_HANDLER_LABELS, objectives=DEFAULT_OBJECTIVES),
    # summary and histogram cannot share one exposition name
    MetricDef(c.RESPONSE_TIME, KIND_HISTOGRAM, "handler",
              "the time to process a msg in nanoseconds",
              labels=_HANDLER_LABELS, buckets=DEFAULT_BUCKETS,
              name=f"{c.RESPONSE_TIME}_histogram"),
    MetricDef(c.PROCESS_DELAY, KIND_SUMMARY, "handler",
              "the delay to start processing a msg in nanoseconds",
              labels=(c.TAG_ROUTE, c.TAG_TYPE), objectives=DEFAULT_OBJECTIVES),
    MetricDef(c.CONNECTED_CLIENTS, KIND_GAUGE, "acceptor",
              "the number of clients connected right now"),
    MetricDef(c.COUNT_SERVERS, KIND_GAUGE, "service_discovery",
              "the number of discovered servers by service discovery",
              labels=("type",)),
    MetricDef(c.CHANNEL_CAPACITY, KIND_GAUGE, "channel",
              "the available capacity of the channel",
              labels=("channel",)),
    MetricDef(c.DROPPED_MESSAGES, KIND_GAUGE, "rpc_server",
              "the number of rpc server dropped messages (messages that are not handled)"),
    MetricDef(c.GOROUTINES, KIND_GAUGE, "sys",
              "the current number of threads"),
    MetricDef(c.HEAP_SIZE, KIND_GAUGE, "sys",
              "the current heap size"),
    MetricDef(c.HEAP_OBJECTS, KIND_GAUGE, "sys",
              "the current number of allocated heap objects"),
    MetricDef(c.WORKER_JOBS_RETRY, KIND_GAUGE, "worker",
              "the current number of job retries"),
    MetricDef(c.WORKER_QUEUE_SIZE, KIND_GAUGE, "worker",
              "the current queue size",
              labels=("queue",)),
    MetricDef(c.WORKER_JOBS_TOTAL, KIND_GAUGE, "worker",
              "the total executed jobs",
              labels=("status",)),
    MetricDef(c.EXCEEDED_RATE_LIMITING, KIND_COUNTER, "acceptor",
              "the number of blocked requests by exceeded rate limiting"),
)


def builtin_keys(kind: str) -> set[str]:
    return {d.key for d in BUILTIN_METRICS if d.kind == kind}


__all__ = [
    "KIND_COUNTER",
    "KIND_GAUGE",
    "KIND_SUMMARY",
    "KIND_HISTOGRAM",
    "KINDS",
    "DEFAULT_OBJECTIVES",
    "DEFAULT_BUCKETS",
    "MetricDef",
    "BUILTIN_METRICS",
    "builtin_keys",
]
