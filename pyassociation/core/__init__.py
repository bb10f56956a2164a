"""
Core infrastructure for PyAssociation.

This module provides shared abstractions and utilities used by all
domain-specific submodules (contingency, association, permutation,
subgroup).

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Device selection, timing, numeric constants
"""

from pyassociation.core.protocols import Backend
from pyassociation.core.result import Result
from pyassociation.core.exceptions import (
    PyAssociationError,
    ValidationError,
    DataError,
    CardinalityError,
    ConfigError,
    NumericalError,
    PermutationCancelled,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyAssociationError",
    "ValidationError",
    "DataError",
    "CardinalityError",
    "ConfigError",
    "NumericalError",
    "PermutationCancelled",
]
