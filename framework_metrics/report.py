"""Context-derived reporting helpers used at server call sites.

These functions fan one semantic event out to every configured reporter.
A failing reporter is logged at debug level and skipped; metrics delivery
never raises into the request path.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence

from . import constants as c
from .context import RequestContext, merge_tags, route_from_ctx, start_time_from_ctx
from .errors import get_error_code
from .interface import Reporter

logger = logging.getLogger(__name__)


def _fan_out(reporters: Sequence[Reporter], op: Callable[[Reporter], None], metric: str) -> None:
    for r in reporters:
        try:
            op(r)
        except Exception as e:  # noqa: BLE001 one backend must not block the others
            logger.debug("reporter %s failed for %s: %s", type(r).__name__, metric, e)


def _elapsed_ns(ctx: RequestContext) -> int:
    return time.time_ns() - start_time_from_ctx(ctx)


def report_timing_from_ctx(ctx: RequestContext | None, reporters: Sequence[Reporter], typ: str,
                           err: BaseException | None = None) -> None:
    """Report ``response_time`` for the request described by ``ctx``.

    A ``None`` context or an empty reporter list is a no-op. Pass
    ``current_request_context()`` to use the context bound by
    ``push_request_context``.
    """
    if ctx is None or not reporters:
        return
    elapsed = _elapsed_ns(ctx)
    tags = merge_tags({
        c.TAG_ROUTE: route_from_ctx(ctx),
        c.TAG_STATUS: c.STATUS_OK if err is None else c.STATUS_FAILED,
        c.TAG_TYPE: typ,
        c.TAG_CODE: get_error_code(err),
    }, ctx)
    _fan_out(reporters, lambda r: r.report_summary(c.RESPONSE_TIME, dict(tags), float(elapsed)), c.RESPONSE_TIME)


def report_message_process_delay_from_ctx(ctx: RequestContext | None, reporters: Sequence[Reporter],
                                          typ: str) -> None:
    """Report ``process_delay``: time between request start and processing start."""
    if ctx is None or not reporters:
        return
    elapsed = _elapsed_ns(ctx)
    tags = merge_tags({c.TAG_ROUTE: route_from_ctx(ctx), c.TAG_TYPE: typ}, ctx)
    _fan_out(reporters, lambda r: r.report_summary(c.PROCESS_DELAY, dict(tags), float(elapsed)), c.PROCESS_DELAY)


def report_number_of_connected_clients(reporters: Sequence[Reporter], number: int) -> None:
    _fan_out(reporters, lambda r: r.report_gauge(c.CONNECTED_CLIENTS, {}, float(number)), c.CONNECTED_CLIENTS)


def report_exceeded_rate_limiting(reporters: Sequence[Reporter]) -> None:
    _fan_out(reporters, lambda r: r.report_count(c.EXCEEDED_RATE_LIMITING, {}, 1), c.EXCEEDED_RATE_LIMITING)


def report_gauge_to_all(reporters: Sequence[Reporter], metric: str, value: float,
                        labels: Mapping[str, str] | None = None) -> None:
    _fan_out(reporters, lambda r: r.report_gauge(metric, dict(labels or {}), float(value)), metric)


__all__ = [
    "report_timing_from_ctx",
    "report_message_process_delay_from_ctx",
    "report_number_of_connected_clients",
    "report_exceeded_rate_limiting",
    "report_gauge_to_all",
]
