"""Telemetry port for selection and ranking metrics."""

from collections.abc import Mapping
from typing import Any, Protocol

Tags = Mapping[str, Any]


class TelemetryPort(Protocol):
    """Metrics sink used by the use cases.

    Names follow ``contextrank.<operation>.<metric>``; tags stay low-cardinality
    (a status string, never item content).
    """

    def incr(self, name: str, tags: Tags | None = None) -> None:
        """Add one to a counter, e.g. ``contextrank.rank.requests``."""
        ...

    def observe(self, name: str, value: float, tags: Tags | None = None) -> None:
        """Record one sample on a histogram, e.g. ``contextrank.mmr.latency_ms``."""
        ...
