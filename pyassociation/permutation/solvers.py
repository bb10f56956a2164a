"""
Solver dispatch for permutation testing.

Provides permutation_test() and test_association(), the latter for a
table that is already built.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pyassociation.association._common import Measure
from pyassociation.contingency.table import ContingencyTable
from pyassociation.core.compute.device import select_device
from pyassociation.core.compute.precision import DEFAULT_ITERATIONS, DEFAULT_MAX_CELLS
from pyassociation.core.exceptions import ConfigError
from pyassociation.permutation.backends.cpu import CPUPermutationBackend
from pyassociation.permutation.design import PermutationDesign
from pyassociation.permutation.progress import PermutationProgress
from pyassociation.permutation.solution import TestedAssociationSolution

_BACKENDS = ('cpu', 'gpu', 'auto')


def _check_backend(backend: str) -> str:
    if backend not in _BACKENDS:
        raise ConfigError(
            f"Unknown backend: {backend!r}. Use 'cpu', 'gpu' or 'auto'.",
            parameter="backend",
        )
    return backend


def _get_backend(backend: str, progress: PermutationProgress | None):
    """
    Select backend for permutation testing.

    'auto' uses a GPU when one is present. 'gpu' without a GPU raises
    RuntimeError.
    """
    device = select_device(_check_backend(backend))
    if device.is_gpu:
        from pyassociation.permutation.backends.gpu import GPUPermutationBackend
        return GPUPermutationBackend(device=device.torch_device, progress=progress)
    return CPUPermutationBackend(progress=progress)


def _solve(design: PermutationDesign, backend: str, progress) -> TestedAssociationSolution:
    be = _get_backend(backend, progress)
    result = be.solve(design)
    return TestedAssociationSolution(_result=result, _table=design.table)


def permutation_test(
    data: Any,
    variables: Sequence[Any],
    measure: Measure | str = Measure.Z,
    iterations: int = DEFAULT_ITERATIONS,
    groups: Sequence[Sequence[Any]] | None = None,
    adjustment: str = "BH",
    *,
    level_order: Mapping[Any, Sequence[Any]] | None = None,
    seed: int | None = None,
    n_jobs: int = 1,
    backend: str = 'cpu',
    progress: PermutationProgress | None = None,
    max_cells: int = DEFAULT_MAX_CELLS,
) -> TestedAssociationSolution:
    """
    Grouped permutation test of local and global association.

    Each iteration permutes rows independently per block, re-tallies
    the table and recomputes the measure. Two-sided p-values are the
    fraction of replicates whose absolute value strictly exceeds the
    observed absolute value. Local p-values are then adjusted for
    multiple comparisons; the global p-value is not.

    Parameters
    ----------
    data : DataFrame, mapping or 2-D array-like
        Fully observed categorical data.
    variables : sequence
        At least 2 distinct column keys.
    measure : Measure or str
        "Z" (default), "pmi", "npmi" or "chi_residual".
    iterations : int
        Number of permuted replicates (>= 1). p-values below
        1 / iterations are reported as 0.
    groups : sequence of sequences or None
        Variables permuted together. None permutes every variable on
        its own. Variables left out of every group form one extra block.
    adjustment : str
        "BH" (default; "fdr" alias), "BY", "holm", "bonferroni", "none".
    level_order : mapping or None
        Explicit level order per variable.
    seed : int or None
        Seed for numpy.random.SeedSequence. Results are reproducible for
        a fixed seed and n_jobs.
    n_jobs : int
        Worker threads for the CPU backend; -1 uses every CPU.
    backend : str
        'cpu' (default), 'gpu' or 'auto'.
    progress : PermutationProgress or None
        Observer exposing completed iterations and cancel().
    max_cells : int
        Ceiling on the number of table cells.

    Returns
    -------
    TestedAssociationSolution

    Raises
    ------
    ConfigError
        Invalid iterations, measure, adjustment, groups, n_jobs or backend.
        Also raised when groups leave a single permutation block, for
        example one group holding every variable; nothing would then
        break the association.
    DataError
        The data cannot form a valid contingency table.
    PermutationCancelled
        progress.cancel() was called during the run.
    NumericalError
        The replicate accumulators are inconsistent.
    """
    _check_backend(backend)
    design = PermutationDesign.for_data(
        data, variables, measure, iterations, groups, adjustment,
        level_order=level_order, seed=seed, n_jobs=n_jobs, max_cells=max_cells,
    )
    return _solve(design, backend, progress)


def test_association(
    table: ContingencyTable | PermutationDesign,
    measure: Measure | str = Measure.Z,
    iterations: int = DEFAULT_ITERATIONS,
    groups: Sequence[Sequence[Any]] | None = None,
    adjustment: str = "BH",
    *,
    seed: int | None = None,
    n_jobs: int = 1,
    backend: str = 'cpu',
    progress: PermutationProgress | None = None,
) -> TestedAssociationSolution:
    """permutation_test() over a table from build_table()."""
    _check_backend(backend)
    if isinstance(table, PermutationDesign):
        design = table
    else:
        design = PermutationDesign.for_table(
            table, measure, iterations, groups, adjustment,
            seed=seed, n_jobs=n_jobs,
        )
    return _solve(design, backend, progress)


test_association.__test__ = False
