"""
SubgroupDesign: validated input for subgroup construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any

from pyassociation.association.solution import AssociationSolution
from pyassociation.core.compute.precision import DEFAULT_ALPHA
from pyassociation.core.exceptions import ConfigError
from pyassociation.core.validation import check_open_unit_interval
from pyassociation.permutation.solution import TestedAssociationSolution


def _check_thresholds(thresholds: Any) -> tuple[float, float]:
    if thresholds is None:
        return 0.0, 0.0
    try:
        low, high = thresholds
    except (TypeError, ValueError):
        raise ConfigError(
            f"thresholds must be a (low, high) pair, got {thresholds!r}",
            parameter="thresholds",
        ) from None
    for bound in (low, high):
        if isinstance(bound, bool) or not isinstance(bound, Real):
            raise ConfigError(
                f"thresholds must be numbers, got {thresholds!r}",
                parameter="thresholds",
            )
    if low > high:
        raise ConfigError(
            f"thresholds: low ({low}) must be <= high ({high})",
            parameter="thresholds",
        )
    return float(low), float(high)


@dataclass(frozen=True)
class SubgroupDesign:
    """
    Frozen design for build_subgroups().

    Attributes:
        result: association result the labels are read from
        low: local values below low are "negative"
        high: local values above high are "positive"
        use_significance: require adjusted p <= alpha for a non-independent label
        alpha: significance level
        name: name of the output Series
    """
    result: AssociationSolution
    low: float
    high: float
    use_significance: bool
    alpha: float
    name: Any

    @classmethod
    def for_result(
        cls,
        result: AssociationSolution,
        thresholds: tuple[float, float] | None = None,
        use_significance: bool = False,
        alpha: float = DEFAULT_ALPHA,
        *,
        name: Any = None,
    ) -> SubgroupDesign:
        """
        Create a subgroup design with validation.

        Raises:
            ConfigError: bad thresholds or alpha, non-result input, or
                use_significance on a result without p-values
        """
        if not isinstance(result, AssociationSolution):
            raise ConfigError(
                f"result must be an AssociationSolution, got {type(result).__name__}",
                parameter="result",
            )
        low, high = _check_thresholds(thresholds)
        alpha = check_open_unit_interval(alpha, "alpha")
        if use_significance and not isinstance(result, TestedAssociationSolution):
            raise ConfigError(
                "use_significance=True needs a permutation-tested result "
                "(see permutation_test())",
                parameter="use_significance",
            )
        if name is None:
            name = "subgroup(" + ", ".join(str(v) for v in result.variables) + ")"
        return cls(
            result=result,
            low=low,
            high=high,
            use_significance=bool(use_significance),
            alpha=alpha,
            name=name,
        )
