"""
Subgroup construction from local association.

Every cell of the table gets exactly one label; each row then inherits
the label of the cell it was tallied into.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pyassociation.association.solution import AssociationSolution
from pyassociation.core.compute.precision import DEFAULT_ALPHA
from pyassociation.subgroup.design import SubgroupDesign

SUBGROUP_LEVELS = ("negative", "independent", "positive")

NEGATIVE, INDEPENDENT, POSITIVE = range(3)


def _cell_codes(design: SubgroupDesign) -> NDArray[np.intp]:
    local = design.result.local
    codes = np.full(local.shape, INDEPENDENT, dtype=np.intp)
    codes[local < design.low] = NEGATIVE
    codes[local > design.high] = POSITIVE
    if design.use_significance:
        codes[design.result.p_local > design.alpha] = INDEPENDENT
    return codes


def classify_cells(
    result: AssociationSolution,
    thresholds: tuple[float, float] | None = None,
    use_significance: bool = False,
    alpha: float = DEFAULT_ALPHA,
) -> NDArray[np.object_]:
    """
    Label of every cell, same shape as the table.

    -inf (pmi of an empty cell) is below any finite threshold and is
    labelled "negative"; no row falls in such a cell.
    """
    design = SubgroupDesign.for_result(result, thresholds, use_significance, alpha)
    return np.asarray(SUBGROUP_LEVELS, dtype=object)[_cell_codes(design)]


def build_subgroups(
    result: AssociationSolution,
    thresholds: tuple[float, float] | None = None,
    use_significance: bool = False,
    alpha: float = DEFAULT_ALPHA,
    *,
    name: Any = None,
) -> pd.Series:
    """
    Per-row subgroup variable from a local association result.

    Parameters
    ----------
    result : AssociationSolution or TestedAssociationSolution
        Output of compute_association() or permutation_test().
    thresholds : (low, high) or None
        Local values below low are "negative", above high "positive",
        otherwise "independent". Default (0, 0).
    use_significance : bool
        Also require the cell's adjusted p-value to be <= alpha;
        needs a TestedAssociationSolution.
    alpha : float
        Significance level in (0, 1).
    name : hashable or None
        Series name; default "subgroup(<variables>)".

    Returns
    -------
    pandas.Series
        Ordered categorical with categories negative < independent <
        positive, indexed like the rows that built the table.
    """
    design = SubgroupDesign.for_result(
        result, thresholds, use_significance, alpha, name=name,
    )
    table = result.table
    row_codes = _cell_codes(design).ravel()[table.cells]
    labels = pd.Categorical.from_codes(
        row_codes, categories=list(SUBGROUP_LEVELS), ordered=True,
    )
    return pd.Series(labels, index=table.row_index, name=design.name)
