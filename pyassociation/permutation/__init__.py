"""
Permutation testing module.

Public API:
    permutation_test(data, variables, ...)  - grouped permutation test
    test_association(table, ...)            - same, on a built table
    p_adjust(p, method)                     - multiple testing correction
    PermutationProgress                     - progress observer / cancellation
"""

from pyassociation.permutation._common import PermutationParams
from pyassociation.permutation._p_adjust import p_adjust
from pyassociation.permutation.design import PermutationDesign
from pyassociation.permutation.progress import PermutationProgress
from pyassociation.permutation.solution import TestedAssociationSolution
from pyassociation.permutation.solvers import permutation_test, test_association

__all__ = [
    "permutation_test",
    "test_association",
    "p_adjust",
    "PermutationDesign",
    "PermutationParams",
    "PermutationProgress",
    "TestedAssociationSolution",
]
