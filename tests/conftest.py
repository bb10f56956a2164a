"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np
import pandas as pd


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


def make_drug_data():
    """
    100 patients: 40 of 50 drug-takers recovered, 10 of 50 others did.

    Table (drug x recovered):
                  no   yes
        no        40    10
        yes       10    40
    """
    drug = ["yes"] * 50 + ["no"] * 50
    recovered = ["yes"] * 40 + ["no"] * 10 + ["yes"] * 10 + ["no"] * 40
    return pd.DataFrame({"drug": drug, "recovered": recovered})


@pytest.fixture
def drug_data():
    return make_drug_data()


@pytest.fixture
def independent_data(rng):
    """Three independent categorical variables, 600 rows."""
    n = 600
    return pd.DataFrame({
        "a": rng.choice(["x", "y"], size=n),
        "b": rng.choice(["p", "q", "r"], size=n),
        "c": rng.choice([0, 1, 2, 3], size=n),
    })


@pytest.fixture
def linked_data(rng):
    """
    a and b strongly linked, c independent of both. 400 rows.
    """
    n = 400
    a = rng.integers(0, 3, size=n)
    flip = rng.random(n) < 0.2
    b = np.where(flip, rng.integers(0, 3, size=n), a)
    c = rng.integers(0, 2, size=n)
    return pd.DataFrame({"a": a, "b": b, "c": c})
