"""
Association solution types.

AssociationSolution wraps Result[AssociationParams] together with the
table that produced it, and provides tabular and text rendering.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pyassociation.association._common import AssociationParams, Measure
from pyassociation.contingency.table import ContingencyTable
from pyassociation.core.result import Result


@dataclass
class AssociationSolution:
    """
    User-facing association result.

    Immutable in practice: permutation testing returns a new
    TestedAssociationSolution instead of modifying this one.
    """
    _result: Result[AssociationParams]
    _table: ContingencyTable

    # --- Association fields ---

    @property
    def measure(self) -> Measure:
        return self._result.params.measure

    @property
    def variables(self) -> tuple[Any, ...]:
        return self._result.params.variables

    @property
    def levels(self) -> tuple[tuple[Any, ...], ...]:
        return self._result.params.levels

    @property
    def local(self) -> NDArray[np.floating[Any]]:
        """Local association per cell, same shape as the table."""
        return self._result.params.local

    @property
    def global_value(self) -> float:
        """Global association (chi-squared statistic for chi_residual)."""
        return self._result.params.global_value

    @property
    def extras(self) -> dict[str, Any]:
        return self._result.params.extras

    @property
    def chisq_df(self) -> int | None:
        """For chi_residual: degrees of freedom of mutual independence."""
        return self.extras.get('chisq_df')

    @property
    def chisq_p_value(self) -> float | None:
        """For chi_residual: asymptotic p-value of the global statistic."""
        return self.extras.get('chisq_p_value')

    @property
    def table(self) -> ContingencyTable:
        return self._table

    # --- Special values ---

    @property
    def special_cells(self) -> NDArray[np.bool_]:
        """
        Cells whose local value is -inf (pmi of an empty cell).

        These are documented values, not computation failures.
        """
        return np.isneginf(self.local)

    def local_filled(self, fill: float) -> NDArray[np.floating[Any]]:
        """Copy of `local` with -inf cells replaced by `fill`."""
        out = self.local.copy()
        out[self.special_cells] = fill
        return out

    def local_at(self, levels: Mapping[Any, Any]) -> float:
        """Local value of the cell named by {variable: level}."""
        return float(self.local[self._table.cell_index(levels)])

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Formatting ---

    def to_frame(self) -> pd.DataFrame:
        """One row per cell with count, probabilities and local value."""
        frame = self._table.to_frame()
        frame['local'] = self.local.ravel()
        return frame

    def _global_line(self) -> str:
        g = self.global_value
        line = f"{self.measure.global_name} = {format_local(g)}"
        if self.chisq_df is not None:
            line += (
                f", df = {self.chisq_df}, "
                f"asymptotic p-value = {format_pvalue(self.chisq_p_value)}"
            )
        return line

    def _local_table(self) -> pd.DataFrame:
        frame = self.to_frame()[['count', 'local']]
        frame = frame.copy()
        frame['local'] = [format_local(v) for v in frame['local']]
        return frame

    def summary(self) -> str:
        """
        Text report.

        Produces output like:
            Local and global association (Z)

        data:  drug, recovered (N = 100)
        gZ = 0.36
        local Z:
                         count  local
        drug recovered
        no   no             40    0.6
        ...
        """
        lines = [
            f"\tLocal and global association ({self.measure.value})",
            "",
            f"data:  {', '.join(str(v) for v in self.variables)} "
            f"(N = {self._table.n})",
            self._global_line(),
            f"local {self.measure.value}:",
            self._local_table().to_string(),
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AssociationSolution(measure={self.measure.value!r}, "
            f"variables={list(self.variables)!r}, "
            f"global={self.global_value:.4g})"
        )


def format_local(x: float) -> str:
    """Format a local or global value, rendering infinities."""
    if np.isinf(x):
        return "-Inf" if x < 0 else "Inf"
    return f"{x:.4g}"


def format_pvalue(p: float | None, iterations: int | None = None) -> str:
    """
    Format a p-value.

    A permutation p-value of exactly 0 only says no replicate exceeded
    the observed value; it is rendered as "< 1/iterations".
    """
    if p is None or np.isnan(p):
        return "NA"
    if iterations is not None:
        resolution = 1.0 / iterations
        if p < resolution:
            return f"< {resolution:.4g}"
        return f"{p:.4g}"
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"
