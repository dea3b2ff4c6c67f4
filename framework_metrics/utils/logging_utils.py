"""Root logging setup for services embedding the metrics facade."""
from __future__ import annotations

import logging
import sys

from .env_flags import is_truthy_env

DEFAULT_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'
MINIMAL_CONSOLE_FORMAT = '%(levelname)s %(name)s: %(message)s'


def setup_logging(level: str = 'INFO', fmt: str | None = None) -> logging.Logger:
    """Configure the root logger with a single stdout handler.

    Existing root handlers are removed so repeated calls do not duplicate
    output. ``FRAMEWORK_METRICS_VERBOSE_CONSOLE=1`` selects DEFAULT_FORMAT
    when no explicit ``fmt`` is passed.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(log_level)
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()

    if fmt is None:
        fmt = DEFAULT_FORMAT if is_truthy_env('FRAMEWORK_METRICS_VERBOSE_CONSOLE') else MINIMAL_CONSOLE_FORMAT

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter(fmt))
    root.addHandler(console)
    return root


__all__ = ['DEFAULT_FORMAT', 'MINIMAL_CONSOLE_FORMAT', 'setup_logging']
