"""OpenTelemetry adapter for metrics.

Why: request counts, latency and result sizes of selection and ranking
calls are exported without the use cases knowing about the backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import import_module
from typing import Any

from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import Resource

from contextrank.application.ports.telemetry_port import Tags, TelemetryPort


@dataclass
class OtelConfig:
    """Configuration for OpenTelemetry."""

    service_name: str = "contextrank"
    otlp_endpoint: str | None = None  # e.g., "http://localhost:4317"
    environment: str = "production"
    enable_console: bool = False  # Debug: print metrics to console
    readers: list[MetricReader] = field(default_factory=list)  # extra readers (tests, Prometheus)


class OpenTelemetryAdapter(TelemetryPort):
    """OpenTelemetry adapter for metrics.

    Metrics:
    - Counters: incr() for events (requests by status)
    - Histograms: observe() for distributions (latency, result counts)

    Instruments are created lazily on first use and cached by name.
    """

    def __init__(self, cfg: OtelConfig) -> None:
        self._cfg = cfg
        self._counters: dict[str, Any] = {}
        self._histograms: dict[str, Any] = {}
        self._provider = self._build_provider()
        self._meter = self._provider.get_meter(__name__)

    def _build_provider(self) -> MeterProvider:
        """Set up a MeterProvider with OTLP and/or console readers."""
        resource = Resource.create(
            {
                "service.name": self._cfg.service_name,
                "deployment.environment": self._cfg.environment,
            }
        )

        readers: list[MetricReader] = list(self._cfg.readers)
        if self._cfg.otlp_endpoint:
            # Lazy import: the gRPC exporter is an optional extra
            otel_otlp = import_module("opentelemetry.exporter.otlp.proto.grpc.metric_exporter")
            exporter = otel_otlp.OTLPMetricExporter(endpoint=self._cfg.otlp_endpoint)
            readers.append(PeriodicExportingMetricReader(exporter))
        if self._cfg.enable_console:
            readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))

        return MeterProvider(resource=resource, metric_readers=readers)

    def incr(self, name: str, tags: Tags | None = None) -> None:
        """Increment a counter metric.

        Examples:
            - incr("contextrank.rank.requests", {"status": "success"})
            - incr("contextrank.mmr.requests", {"status": "ValidationError"})
        """
        if name not in self._counters:
            self._counters[name] = self._meter.create_counter(
                name=name, description=f"Counter for {name}"
            )
        self._counters[name].add(1, attributes=dict(tags or {}))

    def observe(self, name: str, value: float, tags: Tags | None = None) -> None:
        """Record a value on a histogram.

        Examples:
            - observe("contextrank.rank.latency_ms", 1.8, {})
            - observe("contextrank.mmr.results", 5, {})
        """
        if name not in self._histograms:
            self._histograms[name] = self._meter.create_histogram(
                name=name, description=f"Histogram for {name}"
            )
        self._histograms[name].record(value, attributes=dict(tags or {}))

    def shutdown(self) -> None:
        """Flush readers and release the provider."""
        self._provider.shutdown()

