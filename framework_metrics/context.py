"""Request-scoped metrics context.

A ``RequestContext`` is created at request entry and carries the values the
timing reporters need: the start timestamp (nanosecond epoch), the route,
and an optional map of ad-hoc tags. It is immutable; ``with_tags`` returns
a copy.

The context can be passed explicitly or bound for the duration of a block
via contextvars:

  with push_request_context("room.join"):
      handle()
      report_timing_from_ctx(None, reporters, "handler", None)  # picks up the bound ctx
"""
from __future__ import annotations

import contextvars
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field, replace

_CTX: contextvars.ContextVar[RequestContext | None] = contextvars.ContextVar(
    "framework_metrics_request_ctx", default=None
)


@dataclass(frozen=True)
class RequestContext:
    start_time_ns: int
    route: str
    tags: Mapping[str, str] | None = field(default=None)

    def with_tags(self, **tags: str) -> RequestContext:
        merged = dict(tags_from_ctx(self))
        merged.update(tags)
        return replace(self, tags=merged)


def new_request_context(route: str, tags: Mapping[str, str] | None = None,
                        start_time_ns: int | None = None) -> RequestContext:
    if start_time_ns is None:
        start_time_ns = time.time_ns()
    return RequestContext(start_time_ns=start_time_ns, route=route,
                          tags=dict(tags) if tags is not None else None)


def current_request_context() -> RequestContext | None:
    return _CTX.get()


@contextmanager
def push_request_context(route: str, tags: Mapping[str, str] | None = None,
                         start_time_ns: int | None = None) -> Iterator[RequestContext]:
    """Bind a fresh ``RequestContext`` for the enclosed block."""
    ctx = new_request_context(route, tags=tags, start_time_ns=start_time_ns)
    token = _CTX.set(ctx)
    try:
        yield ctx
    finally:
        _CTX.reset(token)


def start_time_from_ctx(ctx: RequestContext) -> int:
    return ctx.start_time_ns


def route_from_ctx(ctx: RequestContext) -> str:
    return ctx.route


def tags_from_ctx(ctx: RequestContext | None) -> dict[str, str]:
    """Ad-hoc tags of ``ctx``; anything other than a str->str mapping degrades to empty."""
    if ctx is None:
        return {}
    tags = ctx.tags
    if not isinstance(tags, Mapping):
        return {}
    return {k: v for k, v in tags.items() if isinstance(k, str) and isinstance(v, str)}


def merge_tags(reserved: Mapping[str, str], ctx: RequestContext | None) -> dict[str, str]:
    """Ambient context tags overlaid with ``reserved``; reserved keys always win."""
    tags = tags_from_ctx(ctx)
    tags.update(reserved)
    return tags


__all__ = [
    "RequestContext",
    "new_request_context",
    "current_request_context",
    "push_request_context",
    "start_time_from_ctx",
    "route_from_ctx",
    "tags_from_ctx",
    "merge_tags",
]
