"""
Generic result container for all PyAssociation computations.

The Result class provides a standardized envelope that every domain
result uses. Domains define their own parameter payloads; the envelope
carries timing, backend identity and non-fatal warnings.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (iterations, seed, n_jobs)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True): permutation testing builds a new result
      instead of attaching p-values to an existing one
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for association computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific payload (local values, p-values, ...)
        info: Structured metadata (measure, n, iterations, ...)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=AssociationParams(...),
        ...     info={'measure': 'Z', 'n': 100},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_association'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
