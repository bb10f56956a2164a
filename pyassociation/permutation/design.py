"""
PermutationDesign: validated input for permutation testing.

Immutable, validated at construction. Every parameter check and the
table build happen here, so no replicate is drawn for an invalid test.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pyassociation.association._common import Measure
from pyassociation.association.design import AssociationDesign
from pyassociation.contingency.table import ContingencyTable
from pyassociation.core.compute.precision import DEFAULT_ITERATIONS, DEFAULT_MAX_CELLS
from pyassociation.core.exceptions import ConfigError
from pyassociation.core.validation import check_distinct, check_positive_int
from pyassociation.permutation._p_adjust import normalize_method


def resolve_blocks(
    variables: Sequence[Any],
    groups: Sequence[Sequence[Any]] | None,
) -> tuple[tuple[int, ...], ...]:
    """
    Translate permutation groups into blocks of table axes.

    With groups=None every variable is its own block. Otherwise each
    group is a block and the variables left out of every group form one
    extra block, permuted jointly.

    Raises:
        ConfigError: empty group, unknown variable, variable in two
            groups, or fewer than two blocks
    """
    variables = list(variables)
    if groups is None:
        return tuple((axis,) for axis in range(len(variables)))

    if isinstance(groups, (str, bytes)) or not isinstance(groups, Sequence):
        raise ConfigError(
            f"groups must be a sequence of variable sequences, got {groups!r}",
            parameter="groups",
        )

    axis_of = {var: axis for axis, var in enumerate(variables)}
    owner: dict[Any, int] = {}
    blocks: list[tuple[int, ...]] = []
    for g, group in enumerate(groups):
        if isinstance(group, (str, bytes)) or not isinstance(group, Sequence):
            raise ConfigError(
                f"groups[{g}] must be a sequence of variables, got {group!r}",
                parameter="groups",
            )
        if len(group) == 0:
            raise ConfigError(f"groups[{g}] is empty", parameter="groups")
        axes = []
        for var in group:
            if var not in axis_of:
                raise ConfigError(
                    f"groups[{g}]: {var!r} is not a selected variable",
                    parameter="groups",
                )
            if var in owner:
                raise ConfigError(
                    f"groups[{g}]: {var!r} already belongs to groups[{owner[var]}]",
                    parameter="groups",
                )
            owner[var] = g
            axes.append(axis_of[var])
        blocks.append(tuple(axes))

    rest = tuple(axis for var, axis in axis_of.items() if var not in owner)
    if rest:
        blocks.append(rest)

    if len(blocks) < 2:
        raise ConfigError(
            "groups leave a single permutation block; at least two blocks "
            "are needed to break any association",
            parameter="groups",
        )
    return tuple(blocks)


def resolve_n_jobs(n_jobs: Any) -> int:
    """n_jobs >= 1, or -1 for one worker per CPU."""
    if n_jobs == -1 and not isinstance(n_jobs, bool):
        return os.cpu_count() or 1
    return check_positive_int(n_jobs, "n_jobs")


@dataclass(frozen=True)
class PermutationDesign:
    """
    Frozen design for permutation testing.

    Attributes:
        association: validated observed-data design (table + measure)
        iterations: number of permuted replicates
        blocks: permutation blocks as tuples of table axes
        adjustment: canonical multiple-comparison method
        seed: seed for numpy.random.SeedSequence, or None
        n_jobs: worker threads
    """
    association: AssociationDesign
    iterations: int
    blocks: tuple[tuple[int, ...], ...]
    adjustment: str
    seed: int | None
    n_jobs: int

    @classmethod
    def for_data(
        cls,
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
        max_cells: int = DEFAULT_MAX_CELLS,
    ) -> PermutationDesign:
        """
        Create a permutation design with validation.

        Parameter checks run first (ConfigError), then the table is
        built (DataError).
        """
        measure = Measure.parse(measure)
        iterations = check_positive_int(iterations, "iterations")
        adjustment = normalize_method(adjustment)
        n_jobs = resolve_n_jobs(n_jobs)
        if seed is not None:
            seed = check_positive_int(seed, "seed", minimum=0)

        if isinstance(variables, (str, bytes)) or not isinstance(variables, Sequence):
            raise ConfigError(
                f"variables must be a sequence of column keys, got {variables!r}",
                parameter="variables",
            )
        variables = list(variables)
        check_distinct(variables, "variables")
        blocks = resolve_blocks(variables, groups)

        table = ContingencyTable.from_data(
            data, variables, level_order, max_cells=max_cells,
        )
        return cls.for_table(
            table, measure, iterations, groups,
            adjustment, seed=seed, n_jobs=n_jobs, _blocks=blocks,
        )

    @classmethod
    def for_table(
        cls,
        table: ContingencyTable,
        measure: Measure | str = Measure.Z,
        iterations: int = DEFAULT_ITERATIONS,
        groups: Sequence[Sequence[Any]] | None = None,
        adjustment: str = "BH",
        *,
        seed: int | None = None,
        n_jobs: int = 1,
        _blocks: tuple[tuple[int, ...], ...] | None = None,
    ) -> PermutationDesign:
        """Create a permutation design over an already built table."""
        association = AssociationDesign.for_table(table, measure)
        blocks = _blocks if _blocks is not None else resolve_blocks(table.variables, groups)
        if seed is not None:
            seed = check_positive_int(seed, "seed", minimum=0)
        return cls(
            association=association,
            iterations=check_positive_int(iterations, "iterations"),
            blocks=blocks,
            adjustment=normalize_method(adjustment),
            seed=seed,
            n_jobs=resolve_n_jobs(n_jobs),
        )

    @property
    def table(self) -> ContingencyTable:
        return self.association.table

    @property
    def measure(self) -> Measure:
        return self.association.measure

    @property
    def block_variables(self) -> tuple[tuple[Any, ...], ...]:
        """Blocks expressed as variable names."""
        variables = self.table.variables
        return tuple(tuple(variables[a] for a in block) for block in self.blocks)

    def __repr__(self) -> str:
        return (
            f"PermutationDesign(measure={self.measure.value!r}, "
            f"iterations={self.iterations}, blocks={self.block_variables!r}, "
            f"adjustment={self.adjustment!r}, seed={self.seed})"
        )
