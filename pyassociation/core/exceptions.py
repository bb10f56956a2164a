"""
Exception hierarchy for PyAssociation.

All exceptions inherit from PyAssociationError to allow catching any
library-specific error. Input problems split into two families:
DataError (the observations themselves are unusable) and ConfigError
(a parameter supplied by the caller is invalid).

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name the offending column or parameter
    - Never catch and re-raise with less information
"""


class PyAssociationError(Exception):
    """Base exception for all PyAssociation errors."""
    pass


class ValidationError(PyAssociationError):
    """
    Input validation failed.

    Raised before any measure is computed; no partial result exists
    when this is raised.
    """
    pass


class DataError(ValidationError):
    """
    Observations are malformed or insufficient.

    Raised for missing values, degenerate (single-level) variables,
    zero-probability levels, unknown columns and empty data.

    Attributes:
        variable: Name of the offending column, if known
    """

    def __init__(self, message: str, variable: object | None = None):
        super().__init__(message)
        self.variable = variable


class CardinalityError(DataError):
    """
    The contingency table would exceed the configured cell ceiling.

    Attributes:
        n_cells: Number of cells the table would need
        max_cells: Configured ceiling
    """

    def __init__(
        self,
        message: str,
        n_cells: int,
        max_cells: int,
        variable: object | None = None,
    ):
        super().__init__(message, variable=variable)
        self.n_cells = n_cells
        self.max_cells = max_cells


class ConfigError(ValidationError):
    """
    A caller-supplied parameter is invalid.

    Raised for bad iteration counts, unknown measures or adjustment
    methods, bad permutation groups, thresholds and alpha levels.

    Attributes:
        parameter: Name of the offending parameter, if known
    """

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter


class NumericalError(PyAssociationError):
    """
    Numerical computation produced an inconsistent state.

    Raised when a permutation accumulator is corrupted (wrong replicate
    count, negative tallies). Fatal: the whole test is aborted rather
    than silently dropping iterations.

    Attributes:
        expected: Expected replicate count, if applicable
        actual: Observed replicate count, if applicable
    """

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class PermutationCancelled(PyAssociationError):
    """
    A permutation test was cancelled by its progress observer.

    Partial accumulators are discarded; no result is returned.

    Attributes:
        completed: Iterations finished before cancellation was observed
        requested: Iterations that were requested
    """

    def __init__(self, message: str, completed: int, requested: int):
        super().__init__(message)
        self.completed = completed
        self.requested = requested
