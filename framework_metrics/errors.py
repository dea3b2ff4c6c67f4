"""Metrics exception hierarchy and error-code extraction.

Reporting failures are ordinary exceptions surfaced to the immediate
caller. Only ``RegistrationCollisionError`` is meant to abort startup;
everything else is recoverable and the fan-out helpers skip past it.

Error codes:
  ``get_error_code(err)`` returns the structured code carried by a
  ``CodedError`` (or any exception exposing a string ``code`` attribute),
  ``UNKNOWN_CODE`` for other exceptions, and ``""`` for ``None``.
"""
from __future__ import annotations

UNKNOWN_CODE = "GAME-000"


class MetricsError(Exception):
    """Base class for all metrics reporting errors."""


class MetricNotKnownError(MetricsError):
    """The requested series is absent from the backend's table."""

    def __init__(self, metric: str, kind: str | None = None):
        self.metric = metric
        self.kind = kind
        where = f" {kind}" if kind else ""
        super().__init__(f"the provided{where} metric does not exist: {metric}")


class NotImplementedReporterError(MetricsError, NotImplementedError):
    """The backend cannot support this reporting operation."""

    def __init__(self, operation: str, backend: str):
        self.operation = operation
        self.backend = backend
        super().__init__(f"{operation} is not implemented by {backend}")


class NegativeCountError(MetricsError, ValueError):
    """A monotonic counter was asked to move backwards."""

    def __init__(self, metric: str, value: float):
        self.metric = metric
        self.value = value
        super().__init__(f"counter {metric} can only be incremented by non-negative amounts, got {value}")


class ReporterTransportError(MetricsError):
    """A push-model send failed (not retried, not buffered)."""


class RegistrationCollisionError(MetricsError):
    """Two series collided on name during startup registration."""


class ConfigError(MetricsError):
    """Metrics configuration is missing or invalid."""


class CodedError(Exception):
    """Exception carrying a structured error code (e.g. ``GAME-404``)."""

    def __init__(self, message: str | BaseException, code: str = UNKNOWN_CODE,
                 metadata: dict[str, str] | None = None):
        self.code = code
        self.metadata = dict(metadata or {})
        super().__init__(str(message))
        if isinstance(message, BaseException):
            self.__cause__ = message


def get_error_code(err: BaseException | None) -> str:
    if err is None:
        return ""
    code = getattr(err, "code", None)
    if isinstance(code, str) and code:
        return code
    return UNKNOWN_CODE


__all__ = [
    "UNKNOWN_CODE",
    "MetricsError",
    "MetricNotKnownError",
    "NotImplementedReporterError",
    "NegativeCountError",
    "ReporterTransportError",
    "RegistrationCollisionError",
    "ConfigError",
    "CodedError",
    "get_error_code",
]
