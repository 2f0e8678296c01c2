# contextrank/application/dto/selection_dto.py
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SelectionRequest:
    """
    DTO for picking a diverse, relevant subset of passages.

    - query:       text the passages should answer (non-empty)
    - passages:    candidate texts, in retrieval order
    - lambda_mult: relevance/diversity trade-off in [0, 1]
    - top_k:       how many passages to keep (None keeps all)
    """

    query: str
    passages: list[str] = field(default_factory=list)
    lambda_mult: float = 0.5
    top_k: int | None = None
