"""
Tests for p_adjust() matching R p.adjust().
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pyassociation import p_adjust
from pyassociation.core.exceptions import ConfigError


# --- R reference values ---

PV1 = np.array([0.001, 0.01, 0.05, 0.1, 0.5, 0.9])

R_HOLM_1 = np.array([0.006, 0.05, 0.2, 0.3, 1.0, 1.0])
R_BH_1 = np.array([0.006, 0.03, 0.1, 0.15, 0.6, 0.9])
R_BY_1 = np.array([0.0147, 0.0735, 0.245, 0.3675, 1.0, 1.0])
R_BONFERRONI_1 = np.array([0.006, 0.06, 0.3, 0.6, 1.0, 1.0])

PV2 = np.array([0.01, 0.04, 0.03, 0.005])

R_HOLM_2 = np.array([0.03, 0.06, 0.06, 0.02])
R_BH_2 = np.array([0.02, 0.04, 0.04, 0.02])


class TestPAdjustMethods:

    def test_bh(self):
        assert_allclose(p_adjust(PV1, method="BH"), R_BH_1, rtol=1e-10)

    def test_bh_is_default(self):
        assert_allclose(p_adjust(PV1), R_BH_1, rtol=1e-10)

    def test_fdr_alias(self):
        assert_allclose(p_adjust(PV1, method="fdr"), R_BH_1, rtol=1e-10)

    def test_case_insensitive(self):
        assert_allclose(p_adjust(PV1, method="Bonferroni"), R_BONFERRONI_1, rtol=1e-10)

    def test_by(self):
        assert_allclose(p_adjust(PV1, method="BY"), R_BY_1, rtol=1e-3)

    def test_holm(self):
        assert_allclose(p_adjust(PV1, method="holm"), R_HOLM_1, rtol=1e-10)

    def test_none(self):
        assert_allclose(p_adjust(PV1, method="none"), PV1, rtol=1e-15)

    def test_unsorted_input(self):
        assert_allclose(p_adjust(PV2, method="BH"), R_BH_2, rtol=1e-10)
        assert_allclose(p_adjust(PV2, method="holm"), R_HOLM_2, rtol=1e-10)


class TestBHProperties:

    def test_monotone_in_sorted_order(self, rng):
        p = rng.random(200) ** 3
        adjusted = p_adjust(p, "BH")
        order = np.argsort(p)
        assert np.all(np.diff(adjusted[order]) >= 0)

    def test_dominates_raw(self, rng):
        p = rng.random(200)
        assert np.all(p_adjust(p, "BH") >= p)

    def test_zeros_stay_zero(self):
        assert_allclose(p_adjust([0.0, 0.0, 0.2], "BH"), [0.0, 0.0, 0.2])


class TestPAdjustEdgeCases:

    def test_nan_preserved(self):
        result = p_adjust([0.01, np.nan, 0.04], "bonferroni")
        assert np.isnan(result[1])
        assert_allclose(result[[0, 2]], [0.02, 0.08])

    def test_empty(self):
        assert p_adjust([], "BH").size == 0

    def test_n_larger(self):
        assert_allclose(p_adjust([0.01, 0.05], "bonferroni", n=10), [0.1, 0.5])

    def test_n_too_small(self):
        with pytest.raises(ConfigError, match="n"):
            p_adjust([0.01, 0.02, 0.03], "BH", n=2)

    @pytest.mark.parametrize("method", ["hommel", "", None])
    def test_unknown_method(self, method):
        with pytest.raises(ConfigError, match="adjustment must be one of"):
            p_adjust([0.01], method)
