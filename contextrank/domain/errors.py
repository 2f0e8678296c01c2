"""Domain errors (typed).

Every error the package raises derives from DomainError, so callers can catch
one family. Usage errors are ValidationError; everything numeric has a defined
fallback and never raises.
"""

from dataclasses import dataclass


class DomainError(Exception):
    """Base class for domain-specific errors."""


class ValidationError(DomainError):
    """Invalid parameter or missing required argument."""


@dataclass(frozen=True)
class DimensionMismatchError(ValidationError):
    """A candidate embedding does not match the query's length."""

    index: int
    actual: int
    expected: int

    def __str__(self) -> str:
        return (
            f"Vector at index {self.index} has {self.actual} dimensions, but query vector "
            f"has {self.expected} dimensions. All vectors must have the same dimensionality."
        )


# Adapter/use-case mapped errors
class EmbeddingError(DomainError):
    """Embedding backend failed or is misconfigured."""


@dataclass(frozen=True)
class ScoringError(DomainError):
    """A caller-supplied scoring function failed while ranking."""

    function_name: str
    detail: str = ""

    def __str__(self) -> str:
        return f"scoring function '{self.function_name}' failed: {self.detail}"
