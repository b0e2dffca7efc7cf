"""
Resolve a single pointer position to one heatmap cell.
"""

import math
from typing import Optional

from ..geometry.cache import GeometryRecord
from ..geometry.units import Point
from ..model.panels import Composite, DataPanel
from ..model.selection import SelectionRow


def column_rank(x: float, x_min: float, x_max: float, n: int) -> int:
    """1-based position (left to right) of ``x`` among ``n`` columns."""
    return math.ceil((x - x_min) / (x_max - x_min) * n)


def row_rank(y: float, y_min: float, y_max: float, n: int) -> int:
    """1-based position (top to bottom) of ``y`` among ``n`` rows."""
    return 1 + n - math.ceil((y - y_min) / (y_max - y_min) * n)


def resolve_point(
    composite: Composite,
    point: Point,
    geometry: GeometryRecord,
    verbose: bool = False,
) -> Optional[SelectionRow]:
    """Find the cell under ``point``.

    Slices are visited in panel order, then row split, then column split, and
    the first slice containing the point wins. Returns None when the point
    sits outside every heatmap body.
    """
    geometry = geometry.converted(point.unit)
    if verbose:
        print(f"[Position] x = {point.x:.1f} {point.unit}, y = {point.y:.1f} {point.unit}")

    for box in geometry:
        if box.is_annotation:
            continue
        panel = composite.panel(box.heatmap)
        if not isinstance(panel, DataPanel):
            continue

        rows = panel.rows_in_split(box.row_slice)
        columns = panel.columns_in_split(box.column_slice)
        if verbose:
            print(f"[Position] {box.heatmap}: row slice {box.row_slice}, "
                  f"column slice {box.column_slice} [{box.slice}]... ", end="")

        if box.x_max <= box.x_min or box.y_max <= box.y_min or not rows or not columns:
            if verbose:
                print("degenerate")
            continue
        if not (box.x_min <= point.x <= box.x_max and box.y_min <= point.y <= box.y_max):
            if verbose:
                print("no overlap")
            continue

        nc, nr = len(columns), len(rows)
        j = min(max(column_rank(point.x, box.x_min, box.x_max, nc), 1), nc)
        i = min(max(row_rank(point.y, box.y_min, box.y_max, nr), 1), nr)

        if verbose:
            print("overlap")
        return SelectionRow.for_slice(
            panel, box.row_slice, box.column_slice, [rows[i - 1]], [columns[j - 1]]
        )

    if verbose:
        print("[Position] The selected position does not sit in any heatmap.")
    return None
