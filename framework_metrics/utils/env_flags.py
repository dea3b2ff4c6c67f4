"""Environment flag helpers.

Interprets environment variables as boolean feature flags using the
canonical truthy set {"1","true","yes","on"} (case-insensitive), plus typed
lookups used by the configuration overrides.

Usage examples:
    from framework_metrics.utils.env_flags import is_truthy_env
    if is_truthy_env('FRAMEWORK_METRICS_STATSD_ENABLED'):
        ...
"""
from __future__ import annotations

import os

TRUTHY_SET: set[str] = {"1", "true", "yes", "on"}
FALSY_SET: set[str] = {"0", "false", "no", "off"}


def is_truthy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in TRUTHY_SET


def is_truthy_env(name: str, default: str | None = None) -> bool:
    return is_truthy(os.getenv(name, default or ''))


def env_bool(name: str) -> bool | None:
    """Tri-state flag: True/False when set to a recognized token, else None."""
    raw = os.getenv(name)
    if raw is None:
        return None
    token = raw.strip().lower()
    if token in TRUTHY_SET:
        return True
    if token in FALSY_SET:
        return False
    return None


def env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw.strip())


def env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw.strip())


def env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


__all__ = [
    'TRUTHY_SET',
    'FALSY_SET',
    'is_truthy',
    'is_truthy_env',
    'env_bool',
    'env_int',
    'env_float',
    'env_str',
]
