"""
Solver dispatch for association measures.

Provides compute_association() and the one-step association()
convenience that builds the table first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pyassociation.association._common import Measure
from pyassociation.association.backends.cpu import CPUAssociationBackend
from pyassociation.association.design import AssociationDesign
from pyassociation.association.solution import AssociationSolution
from pyassociation.contingency.solvers import build_table
from pyassociation.contingency.table import ContingencyTable
from pyassociation.core.compute.precision import DEFAULT_MAX_CELLS


def compute_association(
    table: ContingencyTable | AssociationDesign,
    measure: Measure | str = Measure.Z,
) -> AssociationSolution:
    """
    Local and global association of a contingency table.

    Pure and deterministic: calling it twice on the same table gives
    identical arrays.

    Parameters
    ----------
    table : ContingencyTable or AssociationDesign
        Table from build_table(), with at least 2 variables.
    measure : Measure or str
        "Z" (default), "pmi", "npmi" or "chi_residual".

    Returns
    -------
    AssociationSolution
        local (per-cell array), global_value and, for chi_residual,
        chisq_df and chisq_p_value.
    """
    if isinstance(table, AssociationDesign):
        design = table
    else:
        design = AssociationDesign.for_table(table, measure)

    result = CPUAssociationBackend().solve(design)
    return AssociationSolution(_result=result, _table=design.table)


def association(
    data: Any,
    variables: Sequence[Any],
    measure: Measure | str = Measure.Z,
    *,
    level_order: Mapping[Any, Sequence[Any]] | None = None,
    max_cells: int = DEFAULT_MAX_CELLS,
) -> AssociationSolution:
    """build_table() followed by compute_association()."""
    measure = Measure.parse(measure)
    table = build_table(data, variables, level_order, max_cells=max_cells)
    return compute_association(table, measure)
