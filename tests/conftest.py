import numpy as np
import pytest

from py_heatmap_selection import (
    AnnotationPanel,
    Composite,
    DataPanel,
    StaticRenderer,
)


@pytest.fixture
def single_panel():
    """3 x 4 panel, one split per axis, shuffled display order."""
    values = np.arange(12, dtype=float).reshape(3, 4)
    return DataPanel(
        "mat",
        values,
        row_order=[[3, 1, 2]],
        column_order=[[2, 4, 1, 3]],
        row_labels=["r1", "r2", "r3"],
        column_labels=["c1", "c2", "c3", "c4"],
    )


@pytest.fixture
def single_composite(single_panel):
    return Composite([single_panel])


@pytest.fixture
def single_renderer():
    return StaticRenderer(
        {"mat_heatmap_body_1_1": (0.0, 10.0, 0.0, 6.0)},
        size=(20.0, 10.0),
    )


@pytest.fixture
def linked_composite():
    """Two panels sharing 4 rows in two row splits, plus a row annotation."""
    a = DataPanel(
        "A",
        np.arange(12, dtype=float).reshape(4, 3),
        row_order=[[1, 2], [3, 4]],
        column_order=[[1, 2, 3]],
        row_labels=["r1", "r2", "r3", "r4"],
        column_labels=["a1", "a2", "a3"],
    )
    b = DataPanel(
        "B",
        np.arange(8, dtype=float).reshape(4, 2),
        row_order=[[1, 2], [3, 4]],
        column_order=[[1, 2]],
        row_labels=["r1", "r2", "r3", "r4"],
        column_labels=["b1", "b2"],
    )
    return Composite([a, b, AnnotationPanel("anno")], direction="horizontal")


@pytest.fixture
def linked_boxes():
    return {
        "A_heatmap_body_1_1": (0.0, 30.0, 25.0, 50.0),
        "A_heatmap_body_2_1": (0.0, 30.0, 0.0, 20.0),
        "B_heatmap_body_1_1": (35.0, 55.0, 25.0, 50.0),
        "B_heatmap_body_2_1": (35.0, 55.0, 0.0, 20.0),
        "heatmap_anno": (60.0, 65.0, None, None),
    }


@pytest.fixture
def linked_renderer(linked_boxes):
    return StaticRenderer(linked_boxes, size=(70.0, 55.0))


@pytest.fixture
def vertical_composite():
    """Two panels stacked vertically, sharing 4 columns in two column splits."""
    p = DataPanel(
        "P",
        np.arange(8, dtype=float).reshape(2, 4),
        row_order=[[1, 2]],
        column_order=[[1, 2], [3, 4]],
        row_labels=["p1", "p2"],
        column_labels=["k1", "k2", "k3", "k4"],
    )
    q = DataPanel(
        "Q",
        np.arange(12, dtype=float).reshape(3, 4),
        row_order=[[1], [2, 3]],
        column_order=[[1, 2], [3, 4]],
        row_labels=["q1", "q2", "q3"],
        column_labels=["k1", "k2", "k3", "k4"],
    )
    return Composite([p, q, AnnotationPanel("col_anno")], direction="vertical")
