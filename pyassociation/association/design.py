"""
AssociationDesign: validated input for measure computation.

Immutable after construction. All checks run here, before the first
measure value is computed.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from pyassociation.association._common import Measure
from pyassociation.contingency.table import ContingencyTable
from pyassociation.core.exceptions import ConfigError, DataError


@dataclass(frozen=True)
class AssociationDesign:
    """
    Design for compute_association().

    Do not construct directly; use AssociationDesign.for_table().
    """
    table: ContingencyTable
    measure: Measure

    @classmethod
    def for_table(
        cls,
        table: ContingencyTable,
        measure: Measure | str = Measure.Z,
    ) -> AssociationDesign:
        """Build design for compute_association()."""
        if not isinstance(table, ContingencyTable):
            raise ConfigError(
                f"table must be a ContingencyTable (see build_table()), "
                f"got {type(table).__name__}",
                parameter="table",
            )
        measure = Measure.parse(measure)

        if table.ndim < 2:
            raise ConfigError(
                f"association needs at least 2 variables, got {table.ndim} "
                f"({list(table.variables)!r})",
                parameter="variables",
            )
        if table.n < 1:
            raise DataError("table has no observations")
        for var, m in zip(table.variables, table.marginals):
            if np.any(m <= 0):
                raise DataError(
                    f"{var!r}: has a zero-probability level",
                    variable=var,
                )

        return cls(table=table, measure=measure)

    def __repr__(self) -> str:
        return (
            f"AssociationDesign(measure={self.measure.value!r}, "
            f"variables={list(self.table.variables)!r}, shape={self.table.shape})"
        )
