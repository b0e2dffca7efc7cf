import numpy as np
import pytest
import scipy.sparse as sp

from py_heatmap_selection import (
    Composite,
    DataPanel,
    SelectionRecord,
    SelectionRow,
    normalize,
    trim_empty,
    trim_n,
)


def _row(composite, name, s, t, rows, cols):
    return SelectionRow.for_slice(composite.panel(name), s, t, rows, cols)


def _summary(record):
    return [(r.heatmap, r.row_slice, r.column_slice, r.row_index, r.column_index) for r in record]


@pytest.fixture
def full_linked(linked_composite):
    c = linked_composite
    return SelectionRecord([
        _row(c, "A", 1, 1, [1, 2], [1, 2, 3]),
        _row(c, "A", 2, 1, [3, 4], [1, 2, 3]),
        _row(c, "B", 1, 1, [1, 2], [1, 2]),
        _row(c, "B", 2, 1, [3, 4], [1, 2]),
    ])


def test_normalize_merges_sorts_and_drops_stale_indices(linked_composite):
    c = linked_composite
    record = SelectionRecord([
        _row(c, "B", 1, 1, [2], [2]),
        _row(c, "A", 1, 1, [2], [1]),
        _row(c, "A", 1, 1, [1], [3]),
        _row(c, "A", 1, 1, [3], [2]),
        SelectionRow.marker("anno"),
        SelectionRow.marker("anno"),
    ])
    out = normalize(record, c)
    assert _summary(out) == [
        ("A", 1, 1, (1, 2), (1, 2, 3)),
        ("B", 1, 1, (2,), (2,)),
        ("anno", None, None, (), ()),
    ]
    assert out[0].row_label == ("r1", "r2")


def test_normalize_is_idempotent(linked_composite):
    c = linked_composite
    record = SelectionRecord([
        _row(c, "B", 2, 1, [4, 3], [2, 1]),
        _row(c, "A", 1, 1, [2], [3]),
        _row(c, "A", 1, 1, [1, 2], [1]),
    ])
    once = normalize(record, c)
    assert normalize(once, c) == once


def test_normalize_drops_unknown_slices(linked_composite):
    c = linked_composite
    bogus = SelectionRow("B", "B_heatmap_body_3_1", 3, 1, (1,), (1,), (None,), (None,))
    ghost = SelectionRow("Z", "Z_heatmap_body_1_1", 1, 1, (1,), (1,), (None,), (None,))
    assert normalize(SelectionRecord([bogus, ghost]), c).empty


def test_trim_top_and_bottom_are_global_in_horizontal(linked_composite, full_linked):
    top = trim_n(full_linked, linked_composite, 1, "top")
    assert _summary(top) == [
        ("A", 1, 1, (2,), (1, 2, 3)),
        ("A", 2, 1, (3, 4), (1, 2, 3)),
        ("B", 1, 1, (2,), (1, 2)),
        ("B", 2, 1, (3, 4), (1, 2)),
    ]
    assert top[0].row_label == ("r2",)

    bottom = trim_n(full_linked, linked_composite, 1, "bottom")
    assert [r.row_index for r in bottom] == [(1, 2), (3,), (1, 2), (3,)]


def test_trim_left_and_right_are_local_in_horizontal(linked_composite, full_linked):
    left = trim_n(full_linked, linked_composite, 1, "left")
    assert [r.column_index for r in left] == [(2, 3), (2, 3), (1, 2), (1, 2)]

    right = trim_n(full_linked, linked_composite, 1, "right")
    assert [r.column_index for r in right] == [(1, 2, 3), (1, 2, 3), (1,), (1,)]


def test_trim_drops_rows_that_become_empty(linked_composite, full_linked):
    out = trim_n(full_linked, linked_composite, 2, "top")
    assert [(r.heatmap, r.row_slice) for r in out] == [("A", 2), ("B", 2)]


def test_trim_drops_annotation_markers(linked_composite, full_linked):
    record = SelectionRecord(list(full_linked) + [SelectionRow.marker("anno")])
    out = trim_n(record, linked_composite, 0, "top")
    assert out.panels() == ["A", "B"]


def test_trim_in_vertical_composite(vertical_composite):
    c = vertical_composite
    record = SelectionRecord([
        _row(c, "P", 1, 1, [1, 2], [1, 2]),
        _row(c, "P", 1, 2, [1, 2], [3, 4]),
        _row(c, "Q", 2, 1, [2, 3], [1, 2]),
        _row(c, "Q", 2, 2, [2, 3], [3, 4]),
    ])
    top = trim_n(record, c, 1, "top")
    # rows are not linked here: only P's first row split is trimmed
    assert [r.row_index for r in top] == [(2,), (2,), (2, 3), (2, 3)]

    bottom = trim_n(record, c, 1, "bottom")
    assert [r.row_index for r in bottom] == [(1, 2), (1, 2), (2,), (2,)]

    left = trim_n(record, c, 1, "left")
    assert [r.column_index for r in left] == [(2,), (3, 4), (2,), (3, 4)]

    right = trim_n(record, c, 1, "right")
    assert [r.column_index for r in right] == [(1, 2), (3,), (1, 2), (3,)]


def test_trim_rejects_unknown_edge(linked_composite, full_linked):
    with pytest.raises(ValueError):
        trim_n(full_linked, linked_composite, 1, "middle")


def test_trim_empty_removes_missing_row_and_converges():
    values = np.array([[1.0, 2.0, 3.0], [np.nan, np.nan, np.nan], [4.0, 5.0, 6.0]])
    c = Composite([DataPanel("M", values, row_order=[[1, 2, 3]])])
    record = SelectionRecord([_row(c, "M", 1, 1, [1, 2, 3], [1, 2, 3])])

    once = trim_empty(record, c, from_rows=True, from_columns=False)
    assert _summary(once) == [("M", 1, 1, (1, 3), (1, 2, 3))]
    assert trim_empty(once, c, from_rows=True, from_columns=False) == once


def test_trim_empty_columns_are_per_panel():
    values = np.array([[1.0, np.nan], [2.0, np.nan]])
    c = Composite([DataPanel("M", values)])
    record = SelectionRecord([_row(c, "M", 1, 1, [1, 2], [1, 2])])
    assert _summary(trim_empty(record, c)) == [("M", 1, 1, (1, 2), (1,))]


def test_trim_empty_keeps_row_with_values_in_any_linked_panel():
    a = DataPanel("A", np.array([[1.0], [np.nan], [np.nan]]))
    b = DataPanel("B", np.array([[1.0], [2.0], [np.nan]]))
    c = Composite([a, b])
    record = SelectionRecord([
        _row(c, "A", 1, 1, [1, 2, 3], [1]),
        _row(c, "B", 1, 1, [1, 2, 3], [1]),
    ])
    out = trim_empty(record, c, from_columns=False)
    assert [r.row_index for r in out] == [(1, 2), (1, 2)]


def test_trim_empty_in_vertical_composite_links_columns():
    p = DataPanel("P", np.array([[1.0, np.nan, np.nan]]))
    q = DataPanel("Q", np.array([[np.nan, 2.0, np.nan], [np.nan, np.nan, np.nan]]))
    c = Composite([p, q], direction="vertical")
    record = SelectionRecord([
        _row(c, "P", 1, 1, [1], [1, 2, 3]),
        _row(c, "Q", 1, 1, [1, 2], [1, 2, 3]),
    ])
    out = trim_empty(record, c)
    assert _summary(out) == [
        ("P", 1, 1, (1,), (1, 2)),
        ("Q", 1, 1, (1,), (1, 2)),
    ]


def test_trim_empty_treats_blank_text_as_missing():
    values = np.array([["a", "  "], [None, ""]], dtype=object)
    c = Composite([DataPanel("T", values)])
    record = SelectionRecord([_row(c, "T", 1, 1, [1, 2], [1, 2])])
    assert _summary(trim_empty(record, c)) == [("T", 1, 1, (1,), (1,))]


def test_trim_empty_on_sparse_grid():
    grid = sp.csr_matrix(np.array([[1.0, 0.0], [np.nan, np.nan]]))
    c = Composite([DataPanel("S", grid)])
    record = SelectionRecord([_row(c, "S", 1, 1, [1, 2], [1, 2])])
    assert _summary(trim_empty(record, c)) == [("S", 1, 1, (1,), (1, 2))]


def test_trim_empty_keeps_markers(linked_composite, full_linked):
    record = SelectionRecord(list(full_linked) + [SelectionRow.marker("anno")])
    out = trim_empty(record, linked_composite)
    assert out.panels() == ["A", "B", "anno"]
    assert len(out) == 5
