"""Process-wide anchor for the pull-model reporter.

The Prometheus registry is a process-global side effect, so the reporter
wrapping it is built at most once per process. ``create_if_absent`` is the
one-shot guard used by the bootstrap layer; everything below it receives
the instance explicitly.
"""
from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .prometheus import PrometheusReporter

REPORTER_SINGLETON: PrometheusReporter | None = None
_REPORTER_LOCK = threading.Lock()


def get_singleton() -> PrometheusReporter | None:
    return REPORTER_SINGLETON


def create_if_absent(factory: Callable[[], PrometheusReporter]) -> PrometheusReporter:
    """Atomically create and publish the singleton using factory() if absent.

    The factory runs inside the lock and only when no instance exists, so
    concurrent first calls observe exactly one construction. If the factory
    raises, nothing is published and the next call retries.
    """
    global REPORTER_SINGLETON  # noqa: PLW0603
    existing = REPORTER_SINGLETON
    if existing is not None:
        return existing
    with _REPORTER_LOCK:
        if REPORTER_SINGLETON is None:
            REPORTER_SINGLETON = factory()
        return REPORTER_SINGLETON


def clear_singleton() -> None:
    """Forget the published instance. Test reset paths only."""
    global REPORTER_SINGLETON  # noqa: PLW0603
    with _REPORTER_LOCK:
        REPORTER_SINGLETON = None


__all__ = ["get_singleton", "create_if_absent", "clear_singleton"]
