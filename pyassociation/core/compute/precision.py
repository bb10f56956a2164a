"""
Numerical constants and engine defaults.

Single place for the tolerances and ceilings every domain shares.
"""

# Absolute tolerance for "probabilities sum to one" checks
PROBABILITY_ATOL: float = 1e-9

# Largest contingency table (in cells) built without complaint.
# Guards against combinatorial blow-up when many variables are selected.
DEFAULT_MAX_CELLS: int = 1_000_000

DEFAULT_ITERATIONS: int = 1000

DEFAULT_ALPHA: float = 0.05

# Permutation replicates evaluated per vectorized batch
DEFAULT_BATCH_SIZE: int = 64


def batch_size_for(n_cells: int, budget_cells: int = 4_000_000) -> int:
    """
    Number of permuted tables to hold in memory at once.

    Keeps a (batch, *table_shape) float64 stack under `budget_cells`
    elements (32 MB at the default budget).
    """
    if n_cells <= 0:
        return DEFAULT_BATCH_SIZE
    return int(max(1, min(DEFAULT_BATCH_SIZE, budget_cells // n_cells)))
