"""
PyAssociation: local and global association for categorical data.

Contingency tables over discretized variables, local association
measures (Z, pmi, npmi, chi-residual), grouped permutation tests with
multiple testing correction, and subgroup variables built from local
association. Permutation replicates optionally run on a GPU.

Submodules:
    contingency: build_table, discretize
    association: compute_association, Measure
    permutation: permutation_test, p_adjust
    subgroup: build_subgroups
"""

__version__ = "0.1.0"

from pyassociation.contingency import ContingencyTable, build_table, discretize
from pyassociation.association import (
    AssociationSolution,
    Measure,
    association,
    compute_association,
    format_local,
    format_pvalue,
)
from pyassociation.permutation import (
    PermutationProgress,
    TestedAssociationSolution,
    p_adjust,
    permutation_test,
    test_association,
)
from pyassociation.subgroup import SUBGROUP_LEVELS, build_subgroups, classify_cells
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
    "__version__",
    # contingency
    "build_table",
    "discretize",
    "ContingencyTable",
    # association
    "compute_association",
    "association",
    "Measure",
    "AssociationSolution",
    "format_local",
    "format_pvalue",
    # permutation
    "permutation_test",
    "test_association",
    "p_adjust",
    "PermutationProgress",
    "TestedAssociationSolution",
    # subgroup
    "build_subgroups",
    "classify_cells",
    "SUBGROUP_LEVELS",
    # exceptions
    "PyAssociationError",
    "ValidationError",
    "DataError",
    "CardinalityError",
    "ConfigError",
    "NumericalError",
    "PermutationCancelled",
]
