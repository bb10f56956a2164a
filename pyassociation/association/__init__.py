"""
Association measures module.

Public API:
    compute_association(table, measure)  - local and global association
    association(data, variables)         - build_table + compute_association
    Measure                              - Z, pmi, npmi, chi_residual
"""

from pyassociation.association._common import AssociationParams, Measure
from pyassociation.association.design import AssociationDesign
from pyassociation.association.solution import (
    AssociationSolution,
    format_local,
    format_pvalue,
)
from pyassociation.association.solvers import association, compute_association

__all__ = [
    "compute_association",
    "association",
    "Measure",
    "AssociationDesign",
    "AssociationParams",
    "AssociationSolution",
    "format_local",
    "format_pvalue",
]
