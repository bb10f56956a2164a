"""
Tests for build_subgroups() and classify_cells().
"""

import numpy as np
import pandas as pd
import pytest

from pyassociation import (
    SUBGROUP_LEVELS,
    build_subgroups,
    build_table,
    classify_cells,
    compute_association,
    permutation_test,
)
from pyassociation.core.exceptions import ConfigError


@pytest.fixture
def drug_result(drug_data):
    return compute_association(build_table(drug_data, ["drug", "recovered"]), "Z")


class TestBuildSubgroups:

    def test_labels_follow_cells(self, drug_data, drug_result):
        groups = build_subgroups(drug_result)
        # rows 0-39: drug yes, recovered yes (Z = 0.6)
        assert groups.iloc[0] == "positive"
        # rows 40-49: drug yes, recovered no (Z = -0.6)
        assert groups.iloc[45] == "negative"
        assert groups.iloc[99] == "positive"
        assert groups.value_counts()["positive"] == 80
        assert groups.value_counts()["negative"] == 20

    def test_ordered_categorical(self, drug_result):
        groups = build_subgroups(drug_result)
        assert isinstance(groups.dtype, pd.CategoricalDtype)
        assert groups.cat.ordered
        assert tuple(groups.cat.categories) == SUBGROUP_LEVELS

    def test_index_and_name(self, drug_data):
        data = drug_data.set_index(pd.Index(range(1000, 1100)))
        res = compute_association(build_table(data, ["drug", "recovered"]))
        groups = build_subgroups(res)
        assert groups.index.equals(data.index)
        assert groups.name == "subgroup(drug, recovered)"
        assert build_subgroups(res, name="g").name == "g"

    def test_wide_thresholds_make_everything_independent(self, drug_result):
        groups = build_subgroups(drug_result, thresholds=(-0.7, 0.7))
        assert (groups == "independent").all()

    def test_thresholds_are_strict(self, drug_result):
        low, high = drug_result.local.min(), drug_result.local.max()
        groups = build_subgroups(drug_result, thresholds=(low, high))
        assert (groups == "independent").all()
        cells = classify_cells(drug_result, thresholds=(-0.5, 0.5))
        assert cells[1, 1] == "positive"
        assert cells[1, 0] == "negative"

    def test_classification_is_total(self, linked_data):
        res = compute_association(build_table(linked_data, ["a", "b", "c"]), "npmi")
        groups = build_subgroups(res, thresholds=(-0.1, 0.1))
        assert groups.notna().all()
        assert len(groups) == len(linked_data)
        cells = classify_cells(res, thresholds=(-0.1, 0.1))
        assert cells.shape == res.local.shape
        assert set(cells.ravel()) <= set(SUBGROUP_LEVELS)

    def test_rows_in_same_cell_share_label(self, linked_data):
        table = build_table(linked_data, ["a", "b"])
        res = compute_association(table)
        groups = build_subgroups(res)
        frame = pd.DataFrame({"cell": table.cells, "label": groups.to_numpy()})
        assert (frame.groupby("cell")["label"].nunique() == 1).all()


class TestSignificance:

    def test_significant_cells_keep_labels(self, drug_data):
        tested = permutation_test(drug_data, ["drug", "recovered"],
                                  iterations=500, seed=42)
        groups = build_subgroups(tested, use_significance=True, alpha=0.05)
        assert groups.value_counts()["positive"] == 80

    def test_non_significant_cells_become_independent(self, independent_data):
        tested = permutation_test(independent_data, ["a", "b"], iterations=200,
                                  seed=1, adjustment="bonferroni")
        plain = build_subgroups(tested)
        filtered = build_subgroups(tested, use_significance=True, alpha=0.001)
        assert (plain != "independent").any()
        assert (filtered == "independent").mean() >= (plain == "independent").mean()
        not_sig = tested.p_local > 0.001
        cells = classify_cells(tested, use_significance=True, alpha=0.001)
        assert np.all(cells[not_sig] == "independent")


class TestErrors:

    def test_low_above_high(self, drug_result):
        with pytest.raises(ConfigError, match="low"):
            build_subgroups(drug_result, thresholds=(0.2, -0.2))

    @pytest.mark.parametrize("thresholds", [(0.1,), "ab", (None, 0.1)])
    def test_malformed_thresholds(self, drug_result, thresholds):
        with pytest.raises(ConfigError, match="thresholds"):
            build_subgroups(drug_result, thresholds=thresholds)

    @pytest.mark.parametrize("alpha", [0, 1, 1.5, -0.1])
    def test_alpha_out_of_range(self, drug_result, alpha):
        with pytest.raises(ConfigError, match="alpha"):
            build_subgroups(drug_result, alpha=alpha)

    def test_significance_needs_tested_result(self, drug_result):
        with pytest.raises(ConfigError, match="use_significance"):
            build_subgroups(drug_result, use_significance=True)

    def test_not_a_result(self, drug_data):
        with pytest.raises(ConfigError, match="AssociationSolution"):
            build_subgroups(build_table(drug_data, ["drug", "recovered"]))
