"""
Permutation test solution.

TestedAssociationSolution is an AssociationSolution that also carries
permutation p-values, so code that only reads association values
accepts both.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pyassociation.association.solution import (
    AssociationSolution,
    format_local,
    format_pvalue,
)
from pyassociation.core.result import Result
from pyassociation.permutation._common import PermutationParams


@dataclass
class TestedAssociationSolution(AssociationSolution):
    """
    User-facing permutation test results.

    p_local holds adjusted p-values; p_local_raw the unadjusted ones.
    A p-value of 0 means no replicate exceeded the observed value, i.e.
    p < 1 / iterations.
    """
    __test__ = False

    _result: Result[PermutationParams]

    @property
    def p_local(self) -> NDArray[np.floating[Any]]:
        """Adjusted local p-values, same shape as `local`."""
        return self._result.params.p_local

    @property
    def p_local_raw(self) -> NDArray[np.floating[Any]]:
        return self._result.params.p_local_raw

    @property
    def p_global(self) -> float:
        return self._result.params.p_global

    @property
    def p_global_se(self) -> float:
        """Monte Carlo standard error of p_global."""
        return self._result.info['p_global_se']

    @property
    def iterations(self) -> int:
        return self._result.params.iterations

    @property
    def adjustment(self) -> str:
        return self._result.params.adjustment

    @property
    def groups(self) -> tuple[tuple[Any, ...], ...]:
        """Permutation blocks as variable names."""
        return self._result.params.groups

    @property
    def seed(self) -> int | None:
        return self._result.params.seed

    def p_at(self, levels: Mapping[Any, Any]) -> float:
        """Adjusted p-value of the cell named by {variable: level}."""
        return float(self.p_local[self._table.cell_index(levels)])

    def significant(self, alpha: float = 0.05) -> NDArray[np.bool_]:
        """Cells whose adjusted p-value is at most alpha."""
        return self.p_local <= alpha

    def to_frame(self) -> pd.DataFrame:
        frame = super().to_frame()
        frame['p_raw'] = self.p_local_raw.ravel()
        frame['p_adjusted'] = self.p_local.ravel()
        return frame

    def _global_line(self) -> str:
        line = super()._global_line()
        return (
            f"{line}\npermutation p-value = "
            f"{format_pvalue(self.p_global, self.iterations)} "
            f"(iterations = {self.iterations}, MC se = {self.p_global_se:.2g})"
        )

    def _local_table(self) -> pd.DataFrame:
        frame = self.to_frame()[['count', 'local', 'p_adjusted']].copy()
        frame['local'] = [format_local(v) for v in frame['local']]
        frame['p_adjusted'] = [
            format_pvalue(p, self.iterations) for p in frame['p_adjusted']
        ]
        return frame

    def summary(self) -> str:
        """
        Text report.

        Produces output like:
            Permutation test of local and global association (Z)

        data:  drug, recovered (N = 100)
        blocks: (drug) | (recovered)
        gZ = 0.36
        permutation p-value = < 0.001 (iterations = 1000, MC se = 0)
        local Z, p-values adjusted by BH:
        ...
        """
        blocks = " | ".join(
            "(" + ", ".join(str(v) for v in block) + ")" for block in self.groups
        )
        lines = [
            f"\tPermutation test of local and global association "
            f"({self.measure.value})",
            "",
            f"data:  {', '.join(str(v) for v in self.variables)} "
            f"(N = {self._table.n})",
            f"blocks: {blocks}",
            self._global_line(),
            f"local {self.measure.value}, p-values adjusted by {self.adjustment}:",
            self._local_table().to_string(),
            "",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"TestedAssociationSolution(measure={self.measure.value!r}, "
            f"variables={list(self.variables)!r}, "
            f"global={self.global_value:.4g}, "
            f"p_global={format_pvalue(self.p_global, self.iterations)}, "
            f"iterations={self.iterations})"
        )
