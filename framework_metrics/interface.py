"""Reporter capability shared by every backend and every call site.

Call sites depend only on ``Reporter``; concrete backends live in
``prometheus`` (pull) and ``statsd`` (push). Each operation returns
``None`` on success and raises a ``MetricsError`` subclass otherwise:

  * ``MetricNotKnownError``         - unknown metric name (non-fatal)
  * ``NotImplementedReporterError`` - operation unsupported by the backend
  * ``ReporterTransportError``      - push send failure
"""
from __future__ import annotations

import abc
from collections.abc import Mapping, Sequence
from typing import Protocol


class Reporter(abc.ABC):
    """Uniform interface for recording counts, gauges, summaries and histograms."""

    @abc.abstractmethod
    def report_count(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        """Monotonic increment by ``value``."""

    @abc.abstractmethod
    def report_gauge(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        """Set the absolute value (overwrite semantics)."""

    @abc.abstractmethod
    def report_summary(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        """Feed one observation into a summary estimator."""

    @abc.abstractmethod
    def report_histogram(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        """Feed one observation into backend-defined buckets."""


class StatsdClient(Protocol):
    """Subset of ``datadog.DogStatsd`` used by the push reporter."""

    def increment(self, metric: str, value: int = 1, tags: Sequence[str] | None = None,
                  sample_rate: float | None = None) -> None: ...

    def gauge(self, metric: str, value: float, tags: Sequence[str] | None = None,
              sample_rate: float | None = None) -> None: ...

    def timing(self, metric: str, value: float, tags: Sequence[str] | None = None,
               sample_rate: float | None = None) -> None: ...


__all__ = ["Reporter", "StatsdClient"]
