from contextrank.application.ports.telemetry_port import Tags, TelemetryPort


class NoopTelemetry(TelemetryPort):
    """Telemetry adapter used when TELEMETRY_ENABLED is false."""

    def incr(self, name: str, tags: Tags | None = None) -> None:
        pass

    def observe(self, name: str, value: float, tags: Tags | None = None) -> None:
        pass
