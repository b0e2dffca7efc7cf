import pytest

from py_heatmap_selection import (
    GeometryCache,
    InvalidGeometryInput,
    Point,
    resolve_area,
)


@pytest.fixture
def geometry(linked_composite, linked_renderer):
    return GeometryCache(linked_renderer).get_geometry(linked_composite, include_annotations=True)


def _summary(record):
    return [(r.heatmap, r.row_slice, r.column_slice, r.row_index, r.column_index) for r in record]


def test_rectangle_across_two_panels(linked_composite, geometry):
    record = resolve_area(linked_composite, Point(10, 30), Point(45, 45), geometry)
    assert _summary(record) == [
        ("A", 1, 1, (1, 2), (1, 2, 3)),
        ("B", 1, 1, (1, 2), (1,)),
    ]
    assert record[0].slice == "A_heatmap_body_1_1"
    assert record[1].column_label == ("b1",)


def test_corner_order_does_not_matter(linked_composite, geometry):
    a = resolve_area(linked_composite, Point(10, 30), Point(45, 45), geometry)
    b = resolve_area(linked_composite, Point(45, 30), Point(10, 45), geometry)
    c = resolve_area(linked_composite, Point(45, 45), Point(10, 30), geometry)
    assert a == b == c


def test_columns_without_rows_select_nothing(single_composite, single_renderer):
    geometry = GeometryCache(single_renderer).get_geometry(single_composite)
    # x spans the slice, y is entirely above it
    record = resolve_area(single_composite, Point(1, 7), Point(9, 9), geometry)
    assert record.empty
    assert not record.overlap


def test_partial_overlap_is_clamped(single_composite, single_renderer):
    geometry = GeometryCache(single_renderer).get_geometry(single_composite)
    record = resolve_area(single_composite, Point(-5, -5), Point(3, 2.5), geometry)
    # columns: ranks 1..2 -> order (2, 4); rows: ranks 2..3 -> order (1, 2)
    assert _summary(record) == [("mat", 1, 1, (1, 2), (2, 4))]


def test_whole_panel(single_composite, single_renderer):
    geometry = GeometryCache(single_renderer).get_geometry(single_composite)
    record = resolve_area(single_composite, Point(-1, -1), Point(11, 7), geometry)
    assert _summary(record) == [("mat", 1, 1, (3, 1, 2), (2, 4, 1, 3))]


def test_touched_annotation_is_reported_as_marker(linked_composite, geometry):
    record = resolve_area(
        linked_composite, Point(50, 10), Point(62, 15), geometry, include_annotations=True,
    )
    assert _summary(record) == [
        ("B", 2, 1, (3, 4), (2,)),
        ("anno", None, None, (), ()),
    ]
    assert record[1].slice is None
    assert record.overlap


def test_annotations_are_ignored_unless_requested(linked_composite, geometry):
    record = resolve_area(linked_composite, Point(50, 10), Point(62, 15), geometry)
    assert record.panels() == ["B"]


def test_annotation_alone_is_no_overlap(linked_composite, geometry, capsys):
    record = resolve_area(
        linked_composite, Point(60, 10), Point(64, 15), geometry,
        include_annotations=True, verbose=True,
    )
    assert record.empty
    assert "does not overlap" in capsys.readouterr().out


def test_corners_in_different_units_are_rejected(linked_composite, geometry):
    with pytest.raises(InvalidGeometryInput):
        resolve_area(linked_composite, Point(1, 1, "mm"), Point(2, 2, "inch"), geometry)


def test_rectangle_in_inches(linked_composite, geometry):
    record = resolve_area(
        linked_composite, Point(10 / 25.4, 30 / 25.4, "inch"), Point(45 / 25.4, 45 / 25.4, "inch"),
        geometry,
    )
    assert record.panels() == ["A", "B"]


def test_record_as_frame(linked_composite, geometry):
    record = resolve_area(
        linked_composite, Point(50, 10), Point(62, 15), geometry, include_annotations=True,
    )
    df = record.to_frame()
    assert list(df.columns) == [
        "heatmap", "slice", "row_slice", "column_slice",
        "row_index", "column_index", "row_label", "column_label",
    ]
    assert df.loc[0, "row_index"] == [3, 4]
    assert df.loc[0, "column_label"] == ["b2"]
    assert df.loc[1, "slice"] is None
    assert df["row_slice"].isna().tolist() == [False, True]
