"""
ContingencyTable: n-dimensional frequency table over categorical variables.

The table is an arena of cells addressed by integer index tuples, one
axis per selected variable, with levels in a canonical order. It keeps
the row-aligned integer codes it was tallied from, so permutation and
subgroup construction never go back to name-based lookups.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import reduce
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pyassociation.core.compute.precision import DEFAULT_MAX_CELLS
from pyassociation.core.exceptions import DataError
from pyassociation.core.validation import check_cardinality
from pyassociation.contingency._columns import extract_columns, resolve_levels


def tally(codes: NDArray[np.intp], shape: tuple[int, ...]) -> NDArray[np.int64]:
    """
    Count rows per cell.

    Args:
        codes: (n, k) matrix of per-variable level codes
        shape: number of levels per variable

    Returns:
        int64 array of the given shape
    """
    flat = np.ravel_multi_index(tuple(codes.T), shape)
    n_cells = int(np.prod(shape))
    return np.bincount(flat, minlength=n_cells).astype(np.int64).reshape(shape)


def expected_probabilities(marginals: Sequence[NDArray[np.floating]]) -> NDArray[np.floating]:
    """Outer product of the marginals (mutual independence model)."""
    return reduce(np.multiply.outer, marginals)


@dataclass(frozen=True, eq=False)
class ContingencyTable:
    """
    Immutable k-dimensional contingency table.

    Do not construct directly; use build_table() or
    ContingencyTable.from_data().

    Attributes exposed as properties:
        variables: column keys in selection order
        levels: canonical level order per variable
        counts: observed joint frequencies, shape = level counts
        probabilities: counts / n
        marginals: per-variable marginal probability vectors
        codes: (n, k) per-row level codes
        cells: (n,) flat cell index of every row
        row_index: labels of the observations
    """
    _variables: tuple[Any, ...]
    _levels: tuple[tuple[Any, ...], ...]
    _counts: NDArray[np.int64]
    _codes: NDArray[np.intp]
    _row_index: pd.Index

    # --- Construction ---

    @classmethod
    def from_data(
        cls,
        data: Any,
        variables: Sequence[Any],
        level_order: Mapping[Any, Sequence[Any]] | None = None,
        *,
        max_cells: int = DEFAULT_MAX_CELLS,
    ) -> ContingencyTable:
        """
        Build a table from raw categorical observations.

        Raises:
            DataError: missing values, unknown columns, single-level
                variables, zero-probability levels, empty data
            CardinalityError: product of level counts above max_cells
        """
        columns, row_index = extract_columns(data, variables)
        level_order = dict(level_order or {})
        unknown = [v for v in level_order if v not in variables]
        if unknown:
            raise DataError(
                f"level_order refers to unselected variables {unknown!r}",
                variable=unknown[0],
            )

        levels: list[tuple[Any, ...]] = []
        code_columns: list[NDArray[np.intp]] = []
        for var, column in zip(variables, columns):
            lv, codes = resolve_levels(column, var, level_order.get(var))
            levels.append(lv)
            code_columns.append(codes)

        shape = tuple(len(lv) for lv in levels)
        check_cardinality(shape, max_cells, variables)

        codes = np.column_stack(code_columns).astype(np.intp, copy=False)
        return cls(
            _variables=tuple(variables),
            _levels=tuple(levels),
            _counts=tally(codes, shape),
            _codes=codes,
            _row_index=row_index,
        )

    def with_codes(self, codes: NDArray[np.intp]) -> ContingencyTable:
        """
        Re-tally the same variables and levels from a new code matrix.

        Used to rebuild the table from permuted observations; the shape
        cannot change, so the cardinality check is not repeated.
        """
        return ContingencyTable(
            _variables=self._variables,
            _levels=self._levels,
            _counts=tally(codes, self.shape),
            _codes=codes,
            _row_index=self._row_index,
        )

    # --- Properties ---

    @property
    def variables(self) -> tuple[Any, ...]:
        return self._variables

    @property
    def levels(self) -> tuple[tuple[Any, ...], ...]:
        return self._levels

    @property
    def counts(self) -> NDArray[np.int64]:
        return self._counts

    @property
    def codes(self) -> NDArray[np.intp]:
        return self._codes

    @property
    def row_index(self) -> pd.Index:
        return self._row_index

    @property
    def shape(self) -> tuple[int, ...]:
        return self._counts.shape

    @property
    def ndim(self) -> int:
        return self._counts.ndim

    @property
    def n_cells(self) -> int:
        return int(self._counts.size)

    @property
    def n(self) -> int:
        """Sample size N."""
        return int(self._codes.shape[0])

    @property
    def probabilities(self) -> NDArray[np.float64]:
        """Observed joint probabilities; sum to 1."""
        return self._counts / float(self.n)

    @property
    def marginals(self) -> tuple[NDArray[np.float64], ...]:
        """Marginal probability vector of each variable."""
        p = self.probabilities
        axes = range(self.ndim)
        return tuple(
            p.sum(axis=tuple(a for a in axes if a != i)) for i in axes
        )

    @property
    def expected(self) -> NDArray[np.float64]:
        """Joint probabilities expected under mutual independence."""
        return expected_probabilities(self.marginals)

    @property
    def cells(self) -> NDArray[np.intp]:
        """Flat cell index of every row."""
        return np.ravel_multi_index(tuple(self._codes.T), self.shape)

    # --- Lookup ---

    def index_of(self, variable: Any, value: Any) -> int:
        """Position of `value` along the axis of `variable`."""
        axis = self._axis(variable)
        try:
            return self._levels[axis].index(value)
        except ValueError:
            raise DataError(
                f"{variable!r}: unknown level {value!r}. "
                f"Levels: {list(self._levels[axis])}",
                variable=variable,
            ) from None

    def joint(self, index: Sequence[int]) -> float:
        """Joint probability of the cell at an integer index tuple."""
        return float(self._counts[tuple(index)]) / self.n

    def count(self, index: Sequence[int]) -> int:
        """Joint frequency of the cell at an integer index tuple."""
        return int(self._counts[tuple(index)])

    def cell_index(self, levels: Mapping[Any, Any]) -> tuple[int, ...]:
        """Integer index tuple for a {variable: level} mapping."""
        missing = [v for v in self._variables if v not in levels]
        if missing:
            raise DataError(
                f"cell lookup needs a level for every variable; missing {missing!r}",
                variable=missing[0],
            )
        return tuple(self.index_of(v, levels[v]) for v in self._variables)

    def joint_at(self, levels: Mapping[Any, Any]) -> float:
        """Joint probability of the cell named by {variable: level}."""
        return self.joint(self.cell_index(levels))

    def marginal(self, variable: Any, value: Any) -> float:
        """Marginal probability of `variable == value`."""
        axis = self._axis(variable)
        return float(self.marginals[axis][self.index_of(variable, value)])

    def _axis(self, variable: Any) -> int:
        try:
            return self._variables.index(variable)
        except ValueError:
            raise DataError(
                f"{variable!r}: not a variable of this table. "
                f"Variables: {list(self._variables)}",
                variable=variable,
            ) from None

    # --- Export ---

    def to_frame(self) -> pd.DataFrame:
        """One row per cell: count, observed and expected joint probability."""
        index = pd.MultiIndex.from_product(
            [list(lv) for lv in self._levels],
            names=[str(v) for v in self._variables],
        )
        return pd.DataFrame(
            {
                'count': self._counts.ravel(),
                'p_joint': self.probabilities.ravel(),
                'p_expected': self.expected.ravel(),
            },
            index=index,
        )

    def __repr__(self) -> str:
        dims = " x ".join(str(s) for s in self.shape)
        return (
            f"ContingencyTable(variables={list(self._variables)!r}, "
            f"shape={dims}, n={self.n})"
        )
