"""Testing helpers for reporter isolation.

``isolated_prometheus_reporter`` builds a reporter on a private
``CollectorRegistry`` (no HTTP listener, no global state).
``reset_prometheus_reporter`` drops the process singleton and removes its
collectors from the default registry so the next bootstrap registers
again. Use both from pytest fixtures.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import CollectorRegistry

from . import _singleton
from .config import CustomMetricsSpec, MetricsConfig
from .prometheus import PrometheusReporter

logger = logging.getLogger(__name__)


@contextmanager
def isolated_prometheus_reporter(server_type: str = "test",
                                 config: MetricsConfig | None = None,
                                 spec: CustomMetricsSpec | None = None) -> Iterator[PrometheusReporter]:
    reporter = PrometheusReporter(server_type, config, spec, registry=CollectorRegistry())
    try:
        yield reporter
    finally:
        reporter.unregister()


def reset_prometheus_reporter() -> None:
    existing = _singleton.get_singleton()
    if existing is not None:
        existing.unregister()
        logger.debug("prometheus reporter singleton reset")
    _singleton.clear_singleton()


__all__ = ["isolated_prometheus_reporter", "reset_prometheus_reporter"]
