from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from contextrank.application.ports.embedding_port import EmbeddingPort
from contextrank.domain.errors import EmbeddingError


@dataclass
class SentenceTransformersEmbeddingAdapter(EmbeddingPort):
    """Sentence-Transformers adapter producing L2-normalized embeddings."""

    model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "cpu"  # "cuda" / "mps" when available
    local_files_only: bool = False  # offline deployments
    batch_size: int = 64
    model: Any | None = None  # injected model skips loading

    def _ensure_model(self) -> Any:
        if self.model is not None:
            return self.model
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as ex:
            raise EmbeddingError("sentence-transformers not installed") from ex
        try:
            self.model = SentenceTransformer(
                self.model_name,
                device=self.device,
                local_files_only=self.local_files_only,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(
                f"Failed to load embedding model '{self.model_name}': {ex}"
            ) from ex
        return self.model

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        model = self._ensure_model()
        try:
            raw_vectors = model.encode(
                list(texts),
                batch_size=self.batch_size,
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(f"Embedding texts failed: {ex}") from ex
        return [[float(x) for x in vec] for vec in raw_vectors]

    def embed_query(self, text: str) -> list[float]:
        model = self._ensure_model()
        try:
            raw_vector = model.encode(
                text,
                normalize_embeddings=True,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as ex:  # noqa: BLE001
            raise EmbeddingError(f"Embedding query failed: {ex}") from ex
        return [float(x) for x in raw_vector]
