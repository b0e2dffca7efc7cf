import numpy as np
import pandas as pd
import pytest
import scipy.sparse as sp

from py_heatmap_selection import (
    AnnotationPanel,
    Composite,
    DataPanel,
    check_partition,
    split_orders,
)


@pytest.mark.parametrize("seed", range(20))
def test_random_split_assignments_form_a_partition(seed):
    rng = np.random.default_rng(seed)
    n_rows, n_cols = rng.integers(1, 30, size=2)
    row_split = rng.integers(0, 4, size=n_rows)
    column_split = rng.integers(0, 3, size=n_cols)
    panel = DataPanel.from_splits(
        "m",
        rng.normal(size=(n_rows, n_cols)),
        row_split=row_split,
        column_split=column_split,
        row_permutation=rng.permutation(n_rows) + 1,
        column_permutation=rng.permutation(n_cols) + 1,
    )

    for orders, n in ((panel.row_order, n_rows), (panel.column_order, n_cols)):
        flat = [i for order in orders for i in order]
        assert sorted(flat) == list(range(1, n + 1))
        check_partition(orders, n)


def test_check_partition_rejects_duplicates_and_gaps():
    with pytest.raises(ValueError, match="not a partition"):
        check_partition([[1, 2], [2]], 3)
    with pytest.raises(ValueError, match="hold 2 indices"):
        check_partition([[1], [3]], 3)


def test_panel_rejects_bad_orders():
    with pytest.raises(ValueError):
        DataPanel("m", np.zeros((3, 2)), row_order=[[1, 2], [2, 3]])


def test_split_orders_follow_permutation_within_sorted_levels():
    orders = split_orders(["b", "a", "b", "a", "c", "c"], [6, 5, 4, 3, 2, 1], 6)
    assert orders == ((4, 2), (3, 1), (6, 5))


def test_split_orders_use_categorical_order():
    split = pd.Categorical(["x", "y", "x"], categories=["y", "x", "z"])
    assert split_orders(split, None, 3) == ((2,), (1, 3))


def test_split_orders_default_to_one_split():
    assert split_orders(None, None, 4) == ((1, 2, 3, 4),)


def test_from_frame_takes_labels_from_index_and_columns():
    df = pd.DataFrame([[1, 2], [3, 4]], index=["g1", "g2"], columns=["s1", "s2"])
    panel = DataPanel.from_frame("expr", df)
    assert panel.row_labels == ("g1", "g2")
    assert panel.column_labels == ("s1", "s2")
    assert panel.row_order == ((1, 2),)


def test_from_anndata_uses_obs_and_var_names():
    import anndata
    adata = anndata.AnnData(
        X=np.arange(6, dtype=float).reshape(2, 3),
        obs=pd.DataFrame(index=["cell1", "cell2"]),
        var=pd.DataFrame(index=["g1", "g2", "g3"]),
    )
    panel = DataPanel.from_anndata("cells", adata)
    assert (panel.n_rows, panel.n_cols) == (2, 3)
    assert panel.row_labels == ("cell1", "cell2")
    assert panel.column_labels_of([3, 1]) == ("g3", "g1")


def test_sparse_block_is_dense():
    panel = DataPanel("s", sp.csr_matrix(np.eye(3)))
    block = panel.block([3, 1], [3])
    assert isinstance(block, np.ndarray)
    np.testing.assert_array_equal(block, [[1.0], [0.0]])


def test_labels_are_none_when_missing():
    panel = DataPanel("m", np.zeros((2, 2)))
    assert panel.row_labels_of([2, 1]) == (None, None)
    assert panel.match_rows("anything").size == 0


def test_match_rows_exact_and_pattern():
    panel = DataPanel("m", np.zeros((3, 1)), row_labels=["TP53", "TP63", "MYC"])
    assert panel.match_rows("TP53").tolist() == [1]
    assert panel.match_rows("^TP", pattern=True).tolist() == [1, 2]


def test_composite_rejects_duplicate_names_and_bad_direction():
    a = DataPanel("a", np.zeros((1, 1)))
    with pytest.raises(ValueError, match="duplicated"):
        Composite([a, AnnotationPanel("a")])
    with pytest.raises(ValueError, match="direction"):
        Composite([a], direction="diagonal")


def test_slices_are_ordered_by_panel_then_splits(linked_composite):
    keys = list(linked_composite.slices())
    assert [(k.panel, k.row_split, k.column_split) for k in keys] == [
        ("A", 1, 1), ("A", 2, 1), ("B", 1, 1), ("B", 2, 1),
    ]
    keys = list(linked_composite.slices(include_annotations=True))
    assert keys[-1].slice_id == "heatmap_anno"
    assert keys[-1].is_annotation


def test_empty_panels_have_no_slices():
    composite = Composite([DataPanel("e", np.zeros((0, 3))), DataPanel("m", np.zeros((1, 1)))])
    assert [k.panel for k in composite.slices()] == ["m"]


def test_linked_axis_follows_direction(linked_composite, vertical_composite):
    assert linked_composite.linked_axis == "row"
    assert vertical_composite.linked_axis == "column"


def test_from_anndata_rejects_other_objects():
    df = pd.DataFrame([[1.0]], index=["c"], columns=["g"])
    with pytest.raises(TypeError, match="AnnData"):
        DataPanel.from_anndata("cells", df)


def test_composite_splits_panels_by_kind(linked_composite):
    assert [p.name for p in linked_composite.data_panels] == ["A", "B"]
    assert [p.name for p in linked_composite.annotation_panels] == ["anno"]
