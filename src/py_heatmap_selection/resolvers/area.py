"""
Resolve a dragged rectangle to the rows and columns it covers.
"""

from typing import List, Optional, Sequence, Tuple

from ..geometry.cache import GeometryRecord, SliceBox
from ..geometry.units import Point, normalize_corners
from ..model.panels import HORIZONTAL, Composite, DataPanel
from ..model.selection import SelectionRecord, SelectionRow
from .point import column_rank, row_rank
from .reconciler import normalize


def _covered(order: Sequence[int], rank1: int, rank2: int) -> Tuple[int, ...]:
    """Entries of ``order`` between two 1-based ranks, clamped to the slice."""
    n = len(order)
    lo, hi = sorted((rank1, rank2))
    if hi < 1 or lo > n:
        return ()
    lo, hi = max(lo, 1), min(hi, n)
    return tuple(order[lo - 1:hi])


def _slice_overlap(
    panel: DataPanel,
    box: SliceBox,
    pos1: Point,
    pos2: Point,
) -> Optional[SelectionRow]:
    rows = panel.rows_in_split(box.row_slice)
    columns = panel.columns_in_split(box.column_slice)
    if box.x_max <= box.x_min or box.y_max <= box.y_min or not rows or not columns:
        return None

    nc, nr = len(columns), len(rows)
    column_index = _covered(
        columns,
        column_rank(pos1.x, box.x_min, box.x_max, nc),
        column_rank(pos2.x, box.x_min, box.x_max, nc),
    )
    row_index = _covered(
        rows,
        row_rank(pos1.y, box.y_min, box.y_max, nr),
        row_rank(pos2.y, box.y_min, box.y_max, nr),
    )
    # both axes have to overlap
    if not column_index or not row_index:
        return None
    return SelectionRow.for_slice(panel, box.row_slice, box.column_slice, row_index, column_index)


def _annotation_touched(box: SliceBox, pos1: Point, pos2: Point, direction: str) -> bool:
    if direction == HORIZONTAL:
        lo, hi, a, b = box.x_min, box.x_max, pos1.x, pos2.x
    else:
        lo, hi, a, b = box.y_min, box.y_max, pos1.y, pos2.y
    if lo is None or hi is None:
        return False
    return a <= hi and b >= lo


def resolve_area(
    composite: Composite,
    pos1: Point,
    pos2: Point,
    geometry: GeometryRecord,
    include_annotations: bool = False,
    verbose: bool = False,
) -> SelectionRecord:
    """Find every slice covered by the rectangle spanned by ``pos1`` and ``pos2``.

    The corners may come in any order but must share a unit. Each data slice
    covered on both axes contributes one row; with ``include_annotations``
    every annotation panel overlapping the rectangle along the concatenation
    axis contributes an empty marker row. If no data slice is covered the
    result is an empty record.
    """
    pos1, pos2 = normalize_corners(pos1, pos2)
    geometry = geometry.converted(pos1.unit)
    if verbose:
        print(f"[Area] Point 1: x = {pos1.x:.1f} {pos1.unit}, y = {pos1.y:.1f} {pos1.unit}")
        print(f"[Area] Point 2: x = {pos2.x:.1f} {pos2.unit}, y = {pos2.y:.1f} {pos2.unit}")

    rows: List[SelectionRow] = []
    overlap_to_heatmap = False
    for box in geometry:
        panel = composite.panel(box.heatmap)

        if box.is_annotation or not isinstance(panel, DataPanel):
            if include_annotations and _annotation_touched(box, pos1, pos2, composite.direction):
                if verbose:
                    print(f"[Area] Annotation '{box.heatmap}' touched")
                rows.append(SelectionRow.marker(box.heatmap))
            continue

        row = _slice_overlap(panel, box, pos1, pos2)
        if verbose:
            print(f"[Area] {box.heatmap}: row slice {box.row_slice}, column slice "
                  f"{box.column_slice} [{box.slice}]... {'overlap' if row else 'no overlap'}")
        if row is not None:
            overlap_to_heatmap = True
            rows.append(row)

    if not overlap_to_heatmap:
        if verbose:
            print("[Area] The selected area does not overlap to any heatmap.")
        return SelectionRecord()
    return normalize(SelectionRecord(rows), composite)
