"""Stable names shared by every reporter backend.

Metric names act as lookup keys into each backend's series tables, so
call sites should always use these constants rather than literals.
"""
from __future__ import annotations

# Namespace prepended to every Prometheus series and default StatsD prefix.
PREFIX = "framework"

# Built-in catalog
RESPONSE_TIME = "response_time"
PROCESS_DELAY = "process_delay"
CONNECTED_CLIENTS = "connected_clients"
COUNT_SERVERS = "count_servers"
CHANNEL_CAPACITY = "channel_capacity"
DROPPED_MESSAGES = "dropped_messages"
GOROUTINES = "goroutines"
HEAP_SIZE = "heap_size"
HEAP_OBJECTS = "heap_objects"
WORKER_JOBS_RETRY = "worker_jobs_retry"
WORKER_QUEUE_SIZE = "worker_queue_size"
WORKER_JOBS_TOTAL = "worker_jobs_total"
EXCEEDED_RATE_LIMITING = "exceeded_rate_limiting"

# Tag keys owned by the timing reporters; ambient tags never override them.
TAG_ROUTE = "route"
TAG_STATUS = "status"
TAG_TYPE = "type"
TAG_CODE = "code"
RESERVED_TAGS = frozenset({TAG_ROUTE, TAG_STATUS, TAG_TYPE, TAG_CODE})

STATUS_OK = "ok"
STATUS_FAILED = "failed"

# Constant label names attached to every pull-model series.
LABEL_SERVER_TYPE = "serverType"
LABEL_GAME = "game"

DEFAULT_PROMETHEUS_PORT = 9090
DEFAULT_STATSD_HOST = "localhost:8125"
DEFAULT_STATSD_PORT = 8125
DEFAULT_STATSD_RATE = 1.0

__all__ = [
    "PREFIX",
    "RESPONSE_TIME",
    "PROCESS_DELAY",
    "CONNECTED_CLIENTS",
    "COUNT_SERVERS",
    "CHANNEL_CAPACITY",
    "DROPPED_MESSAGES",
    "GOROUTINES",
    "HEAP_SIZE",
    "HEAP_OBJECTS",
    "WORKER_JOBS_RETRY",
    "WORKER_QUEUE_SIZE",
    "WORKER_JOBS_TOTAL",
    "EXCEEDED_RATE_LIMITING",
    "TAG_ROUTE",
    "TAG_STATUS",
    "TAG_TYPE",
    "TAG_CODE",
    "RESERVED_TAGS",
    "STATUS_OK",
    "STATUS_FAILED",
    "LABEL_SERVER_TYPE",
    "LABEL_GAME",
    "DEFAULT_PROMETHEUS_PORT",
    "DEFAULT_STATSD_HOST",
    "DEFAULT_STATSD_PORT",
    "DEFAULT_STATSD_RATE",
]
