"""Tests for the OpenTelemetry metrics adapter (in-memory reader, no exporter)."""

from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from contextrank.infrastructure.telemetry.noop_telemetry import NoopTelemetry
from contextrank.infrastructure.telemetry.otel_adapter import OpenTelemetryAdapter, OtelConfig


def _metrics(reader: InMemoryMetricReader) -> dict:
    data = reader.get_metrics_data()
    out = {}
    for rm in data.resource_metrics:
        for sm in rm.scope_metrics:
            for metric in sm.metrics:
                out[metric.name] = metric
    return out


def _resource_attrs(reader: InMemoryMetricReader) -> dict:
    data = reader.get_metrics_data()
    return dict(data.resource_metrics[0].resource.attributes)


def test_counter_accumulates_per_status() -> None:
    reader = InMemoryMetricReader()
    adapter = OpenTelemetryAdapter(OtelConfig(readers=[reader]))

    adapter.incr("contextrank.rank.requests", {"status": "success"})
    adapter.incr("contextrank.rank.requests", {"status": "success"})
    adapter.incr("contextrank.rank.requests", {"status": "ValidationError"})

    metric = _metrics(reader)["contextrank.rank.requests"]
    by_status = {dp.attributes["status"]: dp.value for dp in metric.data.data_points}
    assert by_status == {"success": 2, "ValidationError": 1}


def test_histogram_records_values() -> None:
    reader = InMemoryMetricReader()
    adapter = OpenTelemetryAdapter(OtelConfig(readers=[reader]))

    adapter.observe("contextrank.mmr.latency_ms", 1.5)
    adapter.observe("contextrank.mmr.latency_ms", 2.5, {})

    point = list(_metrics(reader)["contextrank.mmr.latency_ms"].data.data_points)[0]
    assert point.count == 2
    assert point.sum == 4.0


def test_resource_carries_service_and_environment() -> None:
    reader = InMemoryMetricReader()
    adapter = OpenTelemetryAdapter(
        OtelConfig(service_name="ranker-test", environment="staging", readers=[reader])
    )
    adapter.incr("contextrank.mmr.requests", {"status": "success"})

    attrs = _resource_attrs(reader)
    assert attrs["service.name"] == "ranker-test"
    assert attrs["deployment.environment"] == "staging"


def test_shutdown_is_clean() -> None:
    adapter = OpenTelemetryAdapter(OtelConfig(readers=[InMemoryMetricReader()]))
    adapter.incr("contextrank.rank.requests")
    adapter.shutdown()


def test_noop_telemetry_accepts_everything() -> None:
    noop = NoopTelemetry()
    noop.incr("anything", {"k": "v"})
    noop.observe("anything", 1.0)
