from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingPort(Protocol):
    """Turns passages and queries into vectors of one shared dimension."""

    def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """One vector per text, in input order."""
        ...

    def embed_query(self, text: str) -> list[float]: ...
