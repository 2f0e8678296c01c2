"""Application ports package.

Re-exports the ports use cases depend on; adapters live in infrastructure.
"""

from contextrank.application.ports.embedding_port import EmbeddingPort
from contextrank.application.ports.telemetry_port import TelemetryPort

__all__ = [
    "EmbeddingPort",
    "TelemetryPort",
]
