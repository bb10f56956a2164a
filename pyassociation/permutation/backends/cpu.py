"""
CPU backend for permutation testing.

Replicates are split into chunks, one independent random stream per
chunk, evaluated inline (n_jobs=1) or on a thread pool. numpy releases
the GIL inside bincount and the measure arithmetic, so threads overlap.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from pyassociation.association._measures import IndependenceModel
from pyassociation.association.backends.cpu import CPUAssociationBackend
from pyassociation.core.compute.precision import batch_size_for
from pyassociation.core.compute.timing import Timer
from pyassociation.core.exceptions import PermutationCancelled
from pyassociation.core.result import Result
from pyassociation.permutation._common import PermutationParams
from pyassociation.permutation._engine import (
    Accumulator,
    block_offsets,
    evaluate_counts,
    finalize,
    split_iterations,
)
from pyassociation.permutation.design import PermutationDesign
from pyassociation.permutation.progress import PermutationProgress

logger = logging.getLogger(__name__)


class CPUPermutationBackend:
    """
    CPU backend for grouped permutation testing.

    Each replicate draws one row permutation per block, re-tallies the
    table and recomputes the measure. Exceedances are counted against
    the observed absolute values; p = count / iterations.
    """

    def __init__(self, progress: PermutationProgress | None = None):
        self._progress = progress

    @property
    def name(self) -> str:
        return 'cpu_permutation'

    def solve(self, design: PermutationDesign) -> Result[PermutationParams]:
        """Run the permutation test and return Result[PermutationParams]."""
        timer = Timer()
        timer.start()

        with timer.section('observed'):
            observed = CPUAssociationBackend().solve(design.association)
            table = design.table
            model = IndependenceModel.from_marginals(table.marginals, table.n)
            offsets = block_offsets(table.codes, table.shape, design.blocks)

        sizes = split_iterations(design.iterations, design.n_jobs)
        streams = np.random.SeedSequence(design.seed).spawn(len(sizes))
        if self._progress is not None:
            self._progress.start(design.iterations)

        logger.debug(
            "permutation test: %d replicates in %d chunk(s), blocks=%s",
            design.iterations, len(sizes), design.block_variables,
        )

        with timer.section('permutation_replicates'):
            if len(sizes) == 1:
                chunks = [self._run_chunk(design, model, offsets, observed.params, sizes[0], streams[0])]
            else:
                with ThreadPoolExecutor(max_workers=len(sizes)) as pool:
                    futures = [
                        pool.submit(self._run_chunk, design, model, offsets,
                                    observed.params, size, stream)
                        for size, stream in zip(sizes, streams)
                    ]
                    # result() re-raises PermutationCancelled from any worker
                    chunks = [f.result() for f in futures]

        acc = chunks[0]
        for other in chunks[1:]:
            acc.merge(other)

        with timer.section('adjustment'):
            params, diagnostics = finalize(design, observed.params, acc)

        timer.stop()

        return Result(
            params=params,
            info={
                **observed.info,
                **diagnostics,
                'iterations': design.iterations,
                'n_jobs': len(sizes),
                'adjustment': design.adjustment,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=observed.warnings,
        )

    def _run_chunk(self, design, model, offsets, observed, size, stream) -> Accumulator:
        rng = np.random.default_rng(stream)
        table = design.table
        n_rows, n_cells = table.n, table.n_cells
        batch = batch_size_for(n_cells)
        acc = Accumulator(observed.local, observed.global_value)
        progress = self._progress

        done = 0
        while done < size:
            b = min(batch, size - done)
            counts = np.empty((b, n_cells), dtype=np.int64)
            for j in range(b):
                if progress is not None and progress.cancelled:
                    raise PermutationCancelled(
                        f"permutation test cancelled after {progress.completed} "
                        f"of {design.iterations} iterations",
                        completed=progress.completed,
                        requested=design.iterations,
                    )
                flat = np.zeros(n_rows, dtype=np.int64)
                for term in offsets:
                    flat += term[rng.permutation(n_rows)]
                counts[j] = np.bincount(flat, minlength=n_cells)
            evaluate_counts(design, model, counts, acc)
            done += b
            if progress is not None:
                progress.advance(b)
        return acc
