"""Pure similarity primitives over embeddings.

Why: relevance (query similarity) and diversity (inter-candidate similarity)
are both derived from cosine distance; keeping them here keeps the selector
free of vector arithmetic.
"""

from math import sqrt

from .errors import ValidationError
from .types import Score, Vector


def cosine(u: Vector, v: Vector) -> Score:
    """Compute cosine similarity between two vectors.

    Args:
        u: First vector
        v: Second vector (same length as u)

    Returns:
        Cosine similarity score between -1 and 1. A zero vector has no
        direction; its norm is taken as 1.0, which yields 0.0 similarity.

    Raises:
        ValidationError: If the vectors differ in length
    """
    if len(u) != len(v):
        raise ValidationError(f"vectors must have the same dimension ({len(u)} != {len(v)})")
    dot = sum(a * b for a, b in zip(u, v))
    nu = sqrt(sum(a * a for a in u)) or 1.0
    nv = sqrt(sum(b * b for b in v)) or 1.0
    return dot / (nu * nv)


def cosine_distance(u: Vector, v: Vector) -> Score:
    """Cosine distance, ``1 - cosine(u, v)``, in [0, 2]."""
    return 1.0 - cosine(u, v)


def relevance(candidate: Vector, query: Vector) -> Score:
    """Similarity of a candidate to the query, derived from cosine distance."""
    return 1.0 - cosine_distance(candidate, query)

