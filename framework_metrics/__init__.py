"""Metrics reporting facade.

Uniform ``Reporter`` interface for counts, gauges, summaries and histograms
with two backends:

- ``PrometheusReporter``: pull model, series exposed over HTTP.
- ``StatsdReporter``: push model, DogStatsD datagrams.

Request handlers bind a ``RequestContext`` (start time, route, tags) and
call ``report_timing_from_ctx`` / ``report_message_process_delay_from_ctx``
with the active reporter list; ``start_sys_metrics_reporter`` feeds process
resource gauges. ``bootstrap`` wires everything from a JSON config.
"""
from __future__ import annotations

from .boot import BootContext, bootstrap, build_reporters
from .config import CustomMetricsSpec, MetricsConfig, load_metrics_config
from .context import (
    RequestContext,
    current_request_context,
    new_request_context,
    push_request_context,
)
from .errors import (
    UNKNOWN_CODE,
    CodedError,
    ConfigError,
    MetricNotKnownError,
    MetricsError,
    NegativeCountError,
    NotImplementedReporterError,
    RegistrationCollisionError,
    ReporterTransportError,
    get_error_code,
)
from .interface import Reporter
from .labels import ensure_labels
from .prometheus import PrometheusReporter, get_prometheus_reporter
from .report import (
    report_exceeded_rate_limiting,
    report_message_process_delay_from_ctx,
    report_number_of_connected_clients,
    report_timing_from_ctx,
)
from .statsd import StatsdReporter
from .sys_stats import report_sys_metrics, start_sys_metrics_reporter

__version__ = "0.1.0"

__all__ = [
    "BootContext",
    "bootstrap",
    "build_reporters",
    "CustomMetricsSpec",
    "MetricsConfig",
    "load_metrics_config",
    "RequestContext",
    "current_request_context",
    "new_request_context",
    "push_request_context",
    "UNKNOWN_CODE",
    "CodedError",
    "ConfigError",
    "MetricNotKnownError",
    "MetricsError",
    "NegativeCountError",
    "NotImplementedReporterError",
    "RegistrationCollisionError",
    "ReporterTransportError",
    "get_error_code",
    "Reporter",
    "ensure_labels",
    "PrometheusReporter",
    "get_prometheus_reporter",
    "report_exceeded_rate_limiting",
    "report_message_process_delay_from_ctx",
    "report_number_of_connected_clients",
    "report_timing_from_ctx",
    "StatsdReporter",
    "report_sys_metrics",
    "start_sys_metrics_reporter",
]
