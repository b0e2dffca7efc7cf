"""
Post-processing of selection records.

All operations are pure: they take a record and the composite it refers to
and return a new record. Indices that do not belong to the slice they are
filed under are dropped silently, never reported.
"""

from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..model.panels import HORIZONTAL, Composite, DataPanel
from ..model.selection import SelectionRecord, SelectionRow

EDGES = ("top", "bottom", "left", "right")


def _sort_key(composite: Composite, row: SelectionRow) -> Tuple[int, int, int]:
    return (
        composite.position(row.heatmap),
        row.row_slice if row.row_slice is not None else 0,
        row.column_slice if row.column_slice is not None else 0,
    )


def _data_panel(composite: Composite, name: str) -> Optional[DataPanel]:
    if name not in composite:
        return None
    panel = composite.panel(name)
    return panel if isinstance(panel, DataPanel) else None


def _rebuild(composite: Composite, row: SelectionRow, row_index, column_index) -> SelectionRow:
    panel = composite.panel(row.heatmap)
    return SelectionRow.for_slice(panel, row.row_slice, row.column_slice, row_index, column_index)


def normalize(record: SelectionRecord, composite: Composite) -> SelectionRecord:
    """Merge rows of the same slice and restore display order.

    Rows sharing ``(heatmap, row_slice, column_slice)`` are merged by union,
    the union is intersected with the slice's own order, and rows are sorted
    by panel declaration order, then split numbers. Rows naming a panel or
    split that does not exist are dropped.
    """
    groups: Dict[Tuple, Tuple[set, set]] = {}
    markers: Dict[str, SelectionRow] = {}
    for row in record:
        if row.is_marker:
            markers.setdefault(row.heatmap, row)
            continue
        panel = _data_panel(composite, row.heatmap)
        if panel is None:
            continue
        if not panel.rows_in_split(row.row_slice) or not panel.columns_in_split(row.column_slice):
            continue
        ri, ci = groups.setdefault(row.key, (set(), set()))
        ri.update(row.row_index)
        ci.update(row.column_index)

    rows = list(markers.values())
    for (name, s, t), (ri, ci) in groups.items():
        panel = composite.panel(name)
        rows.append(SelectionRow.for_slice(
            panel, s, t,
            [i for i in panel.rows_in_split(s) if i in ri],
            [j for j in panel.columns_in_split(t) if j in ci],
        ))
    rows.sort(key=lambda r: _sort_key(composite, r))
    return SelectionRecord(rows)


def trim_n(
    record: SelectionRecord,
    composite: Composite,
    n_remove: int = 1,
    where: str = "top",
) -> SelectionRecord:
    """Remove ``n_remove`` indices from one edge of the selection.

    On the linked axis (top/bottom in a horizontal composite, left/right in a
    vertical one) every row at the extreme split is trimmed, across panels.
    On the other axis only the extreme panel's extreme split is trimmed.
    Rows left without rows or columns are dropped, and so are annotation
    markers.
    """
    if where not in EDGES:
        raise ValueError(f"where must be one of {EDGES}, got '{where}'")
    if n_remove < 0:
        raise ValueError(f"n_remove must be >= 0, got {n_remove}")

    data = record.data_rows()
    if not data:
        return SelectionRecord()

    horizontal = composite.direction == HORIZONTAL
    from_start = where in ("top", "left")
    on_rows = where in ("top", "bottom")
    split_of = (lambda r: r.row_slice) if on_rows else (lambda r: r.column_slice)

    if horizontal == on_rows:
        splits = [split_of(r) for r in data]
        target = min(splits) if from_start else max(splits)
        hit = [split_of(r) == target for r in data]
    else:
        ref = data[0] if from_start else data[-1]
        hit = [r.heatmap == ref.heatmap and split_of(r) == split_of(ref) for r in data]

    out = []
    for row, h in zip(data, hit):
        ri, ci = list(row.row_index), list(row.column_index)
        if h:
            idx = ri if on_rows else ci
            if len(idx) > n_remove:
                idx = idx[n_remove:] if from_start else idx[:len(idx) - n_remove]
            else:
                idx = []
            if on_rows:
                ri = idx
            else:
                ci = idx
        if ri and ci:
            out.append(_rebuild(composite, row, ri, ci))
    return SelectionRecord(out)


def _missing(block: np.ndarray) -> np.ndarray:
    """NA cells, plus blank strings for text grids."""
    miss = np.asarray(pd.isna(block), dtype=bool)
    if block.dtype.kind in "OUS":
        text = np.char.strip(block.astype(str))
        miss = miss | (text == "")
    return miss


def _trim_linked(entries: List[list], composite: Composite, axis: int) -> List[list]:
    """Keep an index if any panel in its split group has a value there."""
    groups: Dict[int, List[list]] = {}
    for e in entries:
        split = e[0].row_slice if axis == 0 else e[0].column_slice
        groups.setdefault(split, []).append(e)

    for members in groups.values():
        kept = set()
        for row, ri, ci in members:
            block = composite.panel(row.heatmap).block(ri, ci)
            has_value = ~_missing(block).all(axis=1 - axis)
            idx = ri if axis == 0 else ci
            kept.update(i for i, ok in zip(idx, has_value) if ok)
        for e in members:
            e[1 + axis] = [i for i in e[1 + axis] if i in kept]

    return [e for e in entries if e[1 + axis]]


def _trim_local(entries: List[list], composite: Composite, axis: int) -> List[list]:
    """Keep an index if its own panel has a value there in any selected cell."""
    groups: Dict[Tuple, List[list]] = {}
    for e in entries:
        split = e[0].row_slice if axis == 0 else e[0].column_slice
        groups.setdefault((e[0].heatmap, split), []).append(e)

    for (name, _), members in groups.items():
        panel = composite.panel(name)
        idx = list(dict.fromkeys(i for e in members for i in e[1 + axis]))
        other = list(dict.fromkeys(i for e in members for i in e[2 - axis]))
        block = panel.block(idx, other) if axis == 0 else panel.block(other, idx)
        has_value = ~_missing(block).all(axis=1 - axis)
        kept = {i for i, ok in zip(idx, has_value) if ok}
        for e in members:
            e[1 + axis] = [i for i in e[1 + axis] if i in kept]

    return [e for e in entries if e[1 + axis]]


def trim_empty(
    record: SelectionRecord,
    composite: Composite,
    from_rows: bool = True,
    from_columns: bool = True,
    rows_first: Optional[bool] = None,
) -> SelectionRecord:
    """Drop selected rows and columns that hold no value.

    A value is anything that is not NA (and, for text grids, not blank).
    The linked axis is checked across all panels sharing a split, the other
    axis panel by panel. ``rows_first`` defaults to handling the linked axis
    first. Annotation markers are kept as they are.
    """
    horizontal = composite.direction == HORIZONTAL
    if rows_first is None:
        rows_first = horizontal

    entries = [
        [r, list(r.row_index), list(r.column_index)]
        for r in record.data_rows()
        if _data_panel(composite, r.heatmap) is not None
    ]
    steps = [(0, from_rows), (1, from_columns)]
    if not rows_first:
        steps.reverse()

    for axis, enabled in steps:
        if not enabled:
            continue
        linked = (axis == 0) == horizontal
        if linked:
            entries = _trim_linked(entries, composite, axis)
        else:
            entries = _trim_local(entries, composite, axis)

    rows = record.markers() + [_rebuild(composite, r, ri, ci) for r, ri, ci in entries]
    rows.sort(key=lambda r: _sort_key(composite, r))
    return SelectionRecord(rows)
