"""
CPU reference backend for association measures.

Dispatches to the measure strategy registered for design.measure.
"""

from __future__ import annotations

import math

import numpy as np
from scipy import stats as sp_stats

from pyassociation.association._common import AssociationParams, Measure
from pyassociation.association._measures import IndependenceModel, evaluate
from pyassociation.association.design import AssociationDesign
from pyassociation.core.compute.timing import Timer
from pyassociation.core.result import Result


def chisq_degrees_of_freedom(shape: tuple[int, ...]) -> int:
    """Degrees of freedom of the mutual-independence chi-squared test."""
    return math.prod(shape) - sum(s - 1 for s in shape) - 1


class CPUAssociationBackend:
    """CPU reference backend for association measures."""

    @property
    def name(self) -> str:
        return 'cpu_association'

    def solve(self, design: AssociationDesign) -> Result[AssociationParams]:
        """Compute local values and the global aggregate of design.measure."""
        timer = Timer()
        timer.start()

        table = design.table
        measure = design.measure
        warnings_list: list[str] = []

        with timer.section('model'):
            model = IndependenceModel.from_marginals(table.marginals, table.n)

        with timer.section(measure.value):
            local, global_value = evaluate(measure, table.probabilities, model)

        n_empty = int(np.sum(table.counts == 0))
        if n_empty and measure is Measure.PMI:
            warnings_list.append(
                f"{n_empty} cell(s) with zero observations have pmi = -inf"
            )

        extras: dict = {}
        if measure is Measure.CHI_RESIDUAL:
            df = chisq_degrees_of_freedom(table.shape)
            extras['chisq_df'] = df
            extras['chisq_p_value'] = float(sp_stats.chi2.sf(float(global_value), df))
            if np.any(model.p_prod * table.n < 5):
                warnings_list.append(
                    "Chi-squared approximation may be incorrect"
                )

        timer.stop()

        params = AssociationParams(
            measure=measure,
            variables=table.variables,
            levels=table.levels,
            local=local,
            global_value=float(global_value),
            extras=extras,
        )
        return Result(
            params=params,
            info={
                'measure': measure.value,
                'n': table.n,
                'shape': table.shape,
                'n_empty_cells': n_empty,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
