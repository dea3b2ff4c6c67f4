"""Startup wiring for services that report metrics.

Centralizes the outermost bootstrap so entrypoints remain thin:
- logging initialization
- configuration load (JSON + environment overrides)
- reporter construction (Prometheus singleton, StatsD)
- optional sys metrics thread

The returned BootContext holds the reporter list that request handlers
pass to the reporting helpers, and a ``stop`` callable for shutdown.
"""
from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .config import CustomMetricsSpec, MetricsConfig, load_metrics_config
from .interface import Reporter
from .prometheus import get_prometheus_reporter
from .statsd import StatsdReporter
from .sys_stats import start_sys_metrics_reporter
from .utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class BootContext:
    server_type: str
    config: MetricsConfig
    spec: CustomMetricsSpec
    reporters: list[Reporter]
    stop: Callable[[], None] = field(default=lambda: None)


def build_reporters(server_type: str, config: MetricsConfig, spec: CustomMetricsSpec | None = None,
                    *, start_server: bool = True) -> list[Reporter]:
    reporters: list[Reporter] = []
    if config.prometheus_enabled:
        reporters.append(get_prometheus_reporter(server_type, config, spec, start_server=start_server))
    if config.statsd_enabled:
        reporters.append(StatsdReporter(config, server_type))
    if not reporters:
        logger.warning("no metrics reporter enabled for serverType=%s", server_type)
    return reporters


def bootstrap(server_type: str,
              config_source: str | os.PathLike[str] | dict[str, Any] | None = None,
              *,
              log_level: str | None = "INFO",
              sys_metrics_period: float | None = None,
              start_server: bool = True) -> BootContext:
    """Perform the startup sequence and return a BootContext.

    Parameters
    ----------
    server_type: identifier attached to every series as ``serverType``
    config_source: JSON file path or parsed mapping; None uses defaults
    log_level: root logging level; None leaves logging untouched
    sys_metrics_period: seconds between resource samples; None disables
    start_server: start the Prometheus pull endpoint
    """
    if log_level is not None:
        setup_logging(log_level)

    config, spec = load_metrics_config(config_source)
    reporters = build_reporters(server_type, config, spec, start_server=start_server)

    ctx = BootContext(server_type=server_type, config=config, spec=spec, reporters=reporters)
    if sys_metrics_period and reporters:
        thread, stop_event = start_sys_metrics_reporter(reporters, sys_metrics_period)

        def _stop(t: threading.Thread = thread, ev: threading.Event = stop_event) -> None:
            ev.set()
            t.join(timeout=max(sys_metrics_period or 0.0, 1.0))

        ctx.stop = _stop
    return ctx


__all__ = ["BootContext", "build_reporters", "bootstrap"]
