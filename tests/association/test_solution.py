"""
Tests for AssociationSolution rendering.
"""

import numpy as np
import pytest

from pyassociation import build_table, compute_association
from pyassociation.association import format_local, format_pvalue


@pytest.fixture
def drug_result(drug_data):
    return compute_association(build_table(drug_data, ["drug", "recovered"]), "Z")


class TestAssociationSolution:

    def test_to_frame(self, drug_result):
        frame = drug_result.to_frame()
        assert list(frame.columns) == ["count", "p_joint", "p_expected", "local"]
        assert frame.loc[("yes", "yes"), "local"] == pytest.approx(0.6)

    def test_summary(self, drug_result):
        text = drug_result.summary()
        assert "Local and global association (Z)" in text
        assert "drug, recovered (N = 100)" in text
        assert "gZ = 0.36" in text

    def test_summary_chi_residual(self, drug_data):
        res = compute_association(build_table(drug_data, ["drug", "recovered"]), "chi_residual")
        assert "X-squared = 36, df = 1" in res.summary()

    def test_repr(self, drug_result):
        assert repr(drug_result) == (
            "AssociationSolution(measure='Z', variables=['drug', 'recovered'], global=0.36)"
        )

    def test_metadata(self, drug_result):
        assert drug_result.backend_name == "cpu_association"
        assert drug_result.info["n"] == 100
        assert "total_seconds" in drug_result.timing
        assert drug_result.chisq_df is None


class TestFormatting:

    def test_format_local(self):
        assert format_local(-np.inf) == "-Inf"
        assert format_local(np.inf) == "Inf"
        assert format_local(0.123456) == "0.1235"

    def test_zero_permutation_pvalue(self):
        assert format_pvalue(0.0, iterations=1000) == "< 0.001"

    def test_permutation_pvalue(self):
        assert format_pvalue(0.042, iterations=1000) == "0.042"

    def test_asymptotic_pvalue(self):
        assert format_pvalue(1e-20) == "< 2.2e-16"
        assert format_pvalue(0.5) == "0.5"
        assert format_pvalue(None) == "NA"
