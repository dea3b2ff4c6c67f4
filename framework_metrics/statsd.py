"""Push-model reporter speaking the DogStatsD line protocol.

Each reporting call becomes one fire-and-forget datagram:

  <namespace>.<metric>:<value>|<type>|@<rate>|#serverType:<t>,k:v,...

The default tag list (``serverType`` plus configured constant tags) is built
once at construction. Send failures are logged and raised as
``ReporterTransportError``; nothing is retried or buffered.

``DogStatsd`` drops a datagram it cannot write and only logs a warning, so
the client built here records dropped datagrams per thread and the reporter
turns them into errors. Client-side telemetry and buffering are disabled so
one reporting call produces exactly one datagram.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping

from datadog.dogstatsd import DogStatsd

from . import constants as c
from .config import MetricsConfig
from .errors import ConfigError, NotImplementedReporterError, ReporterTransportError
from .interface import Reporter, StatsdClient

logger = logging.getLogger(__name__)


def parse_host(address: str) -> tuple[str, int]:
    """Split ``host:port``; the port defaults to 8125."""
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, c.DEFAULT_STATSD_PORT
    try:
        return host or "localhost", int(port)
    except ValueError as e:
        raise ConfigError(f"invalid statsd address {address!r}: port must be an integer") from e


def _format_tags(tags: Mapping[str, str]) -> list[str]:
    return [f"{k}:{v}" for k, v in tags.items()]


class CheckedDogStatsd(DogStatsd):
    """DogStatsd that remembers, per thread, whether a datagram was dropped."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._dropped = threading.local()

    def _xmit_packet(self, packet, is_telemetry):
        sent = super()._xmit_packet(packet, is_telemetry)
        if not sent and not is_telemetry:
            self._dropped.value = True
        return sent

    def pop_dropped(self) -> bool:
        dropped = getattr(self._dropped, "value", False)
        self._dropped.value = False
        return dropped


def _never_dropped() -> bool:
    return False


class StatsdReporter(Reporter):
    def __init__(self, config: MetricsConfig | None = None, server_type: str = "",
                 client: StatsdClient | None = None):
        config = config or MetricsConfig()
        self.rate = config.statsd_rate
        self.server_type = server_type
        self.default_tags: tuple[str, ...] = (
            f"{c.LABEL_SERVER_TYPE}:{server_type}",
            *_format_tags(config.const_tags),
        )
        if client is None:
            host, port = parse_host(config.statsd_host)
            namespace = config.statsd_prefix.rstrip(".") or None
            client = CheckedDogStatsd(
                host=host,
                port=port,
                namespace=namespace,
                disable_telemetry=True,
                disable_buffering=True,
            )
            logger.info("statsd reporter sending to %s:%s (namespace=%s)", host, port, namespace)
        self.client = client
        self._pop_dropped: Callable[[], bool] = getattr(client, "pop_dropped", _never_dropped)

    def _full_tags(self, tags: Mapping[str, str] | None) -> list[str]:
        full = list(self.default_tags)
        if tags:
            full.extend(_format_tags(tags))
        return full

    def _send(self, op: str, send: Callable[..., None], metric: str, value: float,
              tags: Mapping[str, str] | None) -> None:
        self._pop_dropped()
        try:
            send(metric, value, tags=self._full_tags(tags), sample_rate=self.rate)
        except Exception as e:
            logger.error("failed to report %s: %r", op, e)
            raise ReporterTransportError(f"failed to report {op} {metric}: {e}") from e
        if self._pop_dropped():
            logger.error("failed to report %s: datagram for %s was dropped", op, metric)
            raise ReporterTransportError(f"failed to report {op} {metric}: datagram dropped")

    def report_count(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        self._send("count", self.client.increment, metric, int(value), labels)

    def report_gauge(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        self._send("gauge", self.client.gauge, metric, value, labels)

    def report_summary(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        self._send("summary", self.client.timing, metric, value, labels)

    def report_histogram(self, metric: str, labels: Mapping[str, str] | None, value: float) -> None:
        raise NotImplementedReporterError("report_histogram", type(self).__name__)


__all__ = ["CheckedDogStatsd", "StatsdReporter", "parse_host"]
