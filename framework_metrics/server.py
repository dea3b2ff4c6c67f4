"""Pull endpoint bootstrap.

Serves the text exposition of a ``CollectorRegistry`` over HTTP on a
background daemon thread (``prometheus_client.start_http_server``). Every
GET path returns the exposition; scrapers conventionally use ``/metrics``.
"""
from __future__ import annotations

import logging

from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

logger = logging.getLogger(__name__)


def start_pull_endpoint(port: int, host: str = "0.0.0.0",
                        registry: CollectorRegistry = REGISTRY) -> bool:
    """Start the listener; returns False (after logging) when the bind fails.

    A failed listener does not invalidate the reporter: series keep being
    updated and remain available to any other exporter of the registry.
    """
    try:
        start_http_server(port, addr=host, registry=registry)
    except OSError as e:
        logger.error("prometheus reporter serve start failed on %s:%s: %s", host, port, e)
        return False
    logger.info("Metrics server started on %s:%s", host, port)
    logger.info("Metrics available at http://%s:%s/metrics", host, port)
    return True


__all__ = ["start_pull_endpoint"]
