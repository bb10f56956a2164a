"""
Subgroup construction module.

Public API:
    build_subgroups(result, thresholds, use_significance, alpha)
    classify_cells(result, thresholds, use_significance, alpha)
    SUBGROUP_LEVELS
"""

from pyassociation.subgroup.design import SubgroupDesign
from pyassociation.subgroup.solvers import (
    SUBGROUP_LEVELS,
    build_subgroups,
    classify_cells,
)

__all__ = [
    "build_subgroups",
    "classify_cells",
    "SUBGROUP_LEVELS",
    "SubgroupDesign",
]
