"""
Tests for input validation utilities.

Validates every function in core/validation.py.
"""

import numpy as np
import pandas as pd
import pytest

from pyassociation.core.exceptions import CardinalityError, ConfigError, DataError
from pyassociation.core.validation import (
    check_cardinality,
    check_distinct,
    check_min_levels,
    check_min_rows,
    check_no_missing,
    check_open_unit_interval,
    check_positive_int,
)


class TestCheckNoMissing:

    def test_complete_column_passes(self):
        check_no_missing(pd.Series(["a", "b"]), "x")

    @pytest.mark.parametrize("missing", [None, np.nan, pd.NA, pd.NaT])
    def test_missing_values_rejected(self, missing):
        with pytest.raises(DataError, match="'x'") as exc_info:
            check_no_missing(pd.Series(["a", missing, "b"], dtype=object), "x")
        assert exc_info.value.variable == "x"

    def test_message_reports_count_and_first_row(self):
        with pytest.raises(DataError, match=r"2 missing value\(s\) \(first at row 1\)"):
            check_no_missing(np.array([1.0, np.nan, 2.0, np.nan]), "x")


class TestCheckMinRows:

    def test_enough_rows(self):
        check_min_rows(5)

    def test_zero_rows(self):
        with pytest.raises(DataError, match="at least 1"):
            check_min_rows(0)


class TestCheckMinLevels:

    def test_two_levels_pass(self):
        check_min_levels(2, "drug")

    def test_single_level_rejected(self):
        with pytest.raises(DataError, match="'drug'") as exc_info:
            check_min_levels(1, "drug")
        assert exc_info.value.variable == "drug"


class TestCheckCardinality:

    def test_returns_cell_count(self):
        assert check_cardinality((2, 3, 4), 1000, ["a", "b", "c"]) == 24

    def test_exceeding_ceiling(self):
        with pytest.raises(CardinalityError) as exc_info:
            check_cardinality((100, 100, 100), 1000, ["a", "b", "c"])
        assert exc_info.value.n_cells == 1_000_000
        assert exc_info.value.max_cells == 1000
        assert "'a'=100" in str(exc_info.value)

    def test_no_overflow(self):
        with pytest.raises(CardinalityError) as exc_info:
            check_cardinality((10**6,) * 4, 10, list("abcd"))
        assert exc_info.value.n_cells == 10**24


class TestCheckDistinct:

    def test_distinct(self):
        check_distinct(["a", "b"], "variables")

    def test_duplicate(self):
        with pytest.raises(ConfigError, match="'a' is listed more than once"):
            check_distinct(["a", "b", "a"], "variables")


class TestCheckPositiveInt:

    def test_valid(self):
        assert check_positive_int(np.int64(5), "iterations") == 5

    @pytest.mark.parametrize("value", [0, -3])
    def test_too_small(self, value):
        with pytest.raises(ConfigError, match="iterations must be >= 1"):
            check_positive_int(value, "iterations")

    @pytest.mark.parametrize("value", [1.5, "10", True, None])
    def test_not_an_integer(self, value):
        with pytest.raises(ConfigError) as exc_info:
            check_positive_int(value, "iterations")
        assert exc_info.value.parameter == "iterations"

    def test_custom_minimum(self):
        assert check_positive_int(0, "seed", minimum=0) == 0


class TestCheckOpenUnitInterval:

    def test_valid(self):
        assert check_open_unit_interval(0.05, "alpha") == 0.05

    @pytest.mark.parametrize("value", [0, 1, -0.1, 1.5, "0.05", True])
    def test_invalid(self, value):
        with pytest.raises(ConfigError, match="alpha"):
            check_open_unit_interval(value, "alpha")
