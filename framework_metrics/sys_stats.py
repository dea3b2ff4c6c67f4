"""Periodic process resource reporting.

Every ``period`` seconds the loop samples the live thread count, the
process resident memory and the number of objects tracked by the garbage
collector, and sends them as gauges to every reporter. The loop exits as
soon as its stop event is set.
"""
from __future__ import annotations

import gc
import logging
import threading
from collections.abc import Sequence
from typing import NamedTuple

import psutil

from . import constants as c
from .interface import Reporter
from .report import report_gauge_to_all

logger = logging.getLogger(__name__)


class RuntimeStats(NamedTuple):
    threads: int
    heap_size: int
    heap_objects: int


def sample_runtime_stats(process: psutil.Process | None = None) -> RuntimeStats:
    process = process or psutil.Process()
    return RuntimeStats(
        threads=threading.active_count(),
        heap_size=process.memory_info().rss,
        heap_objects=len(gc.get_objects()),
    )


def report_runtime_stats(reporters: Sequence[Reporter], stats: RuntimeStats) -> None:
    report_gauge_to_all(reporters, c.GOROUTINES, stats.threads)
    report_gauge_to_all(reporters, c.HEAP_SIZE, stats.heap_size)
    report_gauge_to_all(reporters, c.HEAP_OBJECTS, stats.heap_objects)


def report_sys_metrics(reporters: Sequence[Reporter], period: float,
                       stop_event: threading.Event | None = None) -> None:
    """Run the sampling loop until ``stop_event`` is set (forever when None)."""
    stop_event = stop_event or threading.Event()
    process = psutil.Process()
    while not stop_event.is_set():
        try:
            stats = sample_runtime_stats(process)
        except psutil.Error as e:
            logger.warning("runtime stats sampling failed: %s", e)
        else:
            report_runtime_stats(reporters, stats)
        stop_event.wait(period)
    logger.debug("sys metrics loop stopped")


def start_sys_metrics_reporter(reporters: Sequence[Reporter],
                               period: float) -> tuple[threading.Thread, threading.Event]:
    """Run ``report_sys_metrics`` on a daemon thread; set the event to stop it."""
    stop_event = threading.Event()
    t = threading.Thread(
        target=report_sys_metrics,
        args=(list(reporters), period, stop_event),
        name="framework-sys-metrics",
        daemon=True,
    )
    t.start()
    logger.info("Sys metrics reporter thread started (interval=%ss)", period)
    return t, stop_event


__all__ = [
    "RuntimeStats",
    "sample_runtime_stats",
    "report_runtime_stats",
    "report_sys_metrics",
    "start_sys_metrics_reporter",
]
