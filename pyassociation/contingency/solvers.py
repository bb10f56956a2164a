"""
Public entry point for contingency table construction.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pyassociation.core.compute.precision import DEFAULT_MAX_CELLS
from pyassociation.contingency.table import ContingencyTable


def build_table(
    data: Any,
    variables: Sequence[Any],
    level_order: Mapping[Any, Sequence[Any]] | None = None,
    *,
    max_cells: int = DEFAULT_MAX_CELLS,
) -> ContingencyTable:
    """
    Build the k-dimensional frequency table of the selected variables.

    Parameters
    ----------
    data : DataFrame, mapping of columns, or 2D array
        Rows are observations. Every selected column must be fully
        observed and categorical (discretize continuous columns first).
    variables : sequence
        Column names (or integer positions for array input), in the
        order the table's dimensions should take.
    level_order : mapping, optional
        Explicit level order per variable. Every observed value must be
        listed and every listed level must be observed. Variables not
        mentioned use the categories of a pandas Categorical column, or
        sorted distinct values.
    max_cells : int
        Ceiling on the product of level counts.

    Returns
    -------
    ContingencyTable

    Raises
    ------
    DataError
        Missing values, unknown columns, single-level variables,
        zero-probability levels or empty data.
    CardinalityError
        The table would exceed max_cells.
    ConfigError
        Duplicate or empty variable selection.
    """
    return ContingencyTable.from_data(
        data, variables, level_order, max_cells=max_cells,
    )
