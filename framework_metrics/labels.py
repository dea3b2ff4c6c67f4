"""Label-set resolution for pull-model series.

Two steps run on every observation:

1. ``ensure_labels`` fills operator-declared additional labels with their
   defaults. Caller-supplied values always win.
2. ``resolve_label_set`` projects the result onto the series' fixed label
   schema so every call for a metric carries identical label keys.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


def ensure_labels(labels: Mapping[str, str] | None, defaults: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``labels`` with every missing key of ``defaults`` set.

    Idempotent: ``ensure_labels(ensure_labels(l, d), d) == ensure_labels(l, d)``.
    """
    out = dict(labels or {})
    for key, default in defaults.items():
        if key not in out:
            out[key] = default
    return out


def resolve_label_set(labels: Mapping[str, str] | None, schema: Sequence[str],
                      defaults: Mapping[str, str],
                      const_labels: Mapping[str, str] | None = None) -> dict[str, str]:
    """Map caller labels onto ``schema``.

    Constant labels are applied last and cannot be overridden. Keys outside
    the schema are dropped; schema keys nobody supplied resolve to ``""``.
    """
    merged = ensure_labels(labels, defaults)
    if const_labels:
        merged.update(const_labels)
    dropped = [k for k in merged if k not in schema]
    if dropped:
        logger.debug("dropping labels outside series schema: %s", sorted(dropped))
    return {key: str(merged.get(key, "")) for key in schema}


__all__ = ["ensure_labels", "resolve_label_set"]
