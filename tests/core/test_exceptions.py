"""
Tests for the PyAssociation exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyAssociationError)
    - DataError / ConfigError split under ValidationError
    - Diagnostic attributes and their defaults
"""

import pytest

from pyassociation.core.exceptions import (
    CardinalityError,
    ConfigError,
    DataError,
    NumericalError,
    PermutationCancelled,
    PyAssociationError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyAssociationError."""

    @pytest.mark.parametrize("exc", [
        ValidationError("x"),
        DataError("x"),
        CardinalityError("x", n_cells=10, max_cells=5),
        ConfigError("x"),
        NumericalError("x"),
        PermutationCancelled("x", completed=1, requested=2),
    ])
    def test_all_are_pyassociation_errors(self, exc):
        with pytest.raises(PyAssociationError):
            raise exc

    def test_data_and_config_are_validation_errors(self):
        assert issubclass(DataError, ValidationError)
        assert issubclass(ConfigError, ValidationError)

    def test_cardinality_error_is_data_error(self):
        with pytest.raises(DataError):
            raise CardinalityError("too big", n_cells=10, max_cells=5)

    def test_runtime_failures_are_not_validation_errors(self):
        assert not issubclass(NumericalError, ValidationError)
        assert not issubclass(PermutationCancelled, ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestAttributes:

    def test_data_error_variable(self):
        err = DataError("missing values", variable="drug")
        assert err.variable == "drug"
        assert str(err) == "missing values"

    def test_data_error_variable_default(self):
        assert DataError("x").variable is None

    def test_config_error_parameter(self):
        err = ConfigError("bad", parameter="iterations")
        assert err.parameter == "iterations"
        assert ConfigError("bad").parameter is None

    def test_cardinality_error(self):
        err = CardinalityError("too big", n_cells=2_000_000, max_cells=1_000_000)
        assert err.n_cells == 2_000_000
        assert err.max_cells == 1_000_000
        assert err.variable is None

    def test_numerical_error(self):
        err = NumericalError("corrupt", expected=100, actual=99)
        assert err.expected == 100
        assert err.actual == 99

    def test_permutation_cancelled(self):
        err = PermutationCancelled("stop", completed=64, requested=1000)
        assert err.completed == 64
        assert err.requested == 1000
