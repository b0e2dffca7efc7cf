"""
Select rows and columns by their labels instead of by pointer position.

The result has exactly the same shape as a pointer selection, so code
downstream cannot tell the two apart.
"""

from typing import List, Optional, Sequence, Set, Union

from ..exceptions import AmbiguousPanel
from ..model.panels import HORIZONTAL, Composite, DataPanel
from ..model.selection import SelectionRecord, SelectionRow
from .reconciler import normalize

Keywords = Optional[Union[str, Sequence[str]]]


def _as_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _matches(match_fn, keywords: List[str], pattern_mode: bool) -> Set[int]:
    hits: Set[int] = set()
    for k in keywords:
        hits.update(int(i) for i in match_fn(k, pattern_mode))
    return hits


def _filtered_columns(panel: DataPanel, column_filter: Optional[str]) -> Optional[Set[int]]:
    """Columns allowed by ``column_filter`` (a pattern on column labels); None means all."""
    if not column_filter or panel.column_labels is None:
        return None
    return {int(j) for j in panel.match_columns(f"({column_filter})", pattern=True)}


def _restrict(order, allowed: Optional[Set[int]]):
    if allowed is None:
        return list(order)
    return [i for i in order if i in allowed]


def _target_panel(composite: Composite, panel: Keywords) -> DataPanel:
    names = _as_list(panel)
    if len(names) > 1:
        raise AmbiguousPanel(
            "If row and column keywords are both set, only one panel can be targeted, "
            f"got {names}."
        )
    if not names:
        data = [p for p in composite.data_panels if not p.is_empty]
        if len(data) != 1:
            raise AmbiguousPanel(
                "If row and column keywords are both set and no panel is given, "
                f"the composite should contain exactly one data panel (it has {len(data)})."
            )
        return data[0]
    if names[0] not in composite or not isinstance(composite.panel(names[0]), DataPanel):
        raise AmbiguousPanel(f"'{names[0]}' is not a data panel of the composite.")
    return composite.panel(names[0])


def _joint(composite, panel, row_keywords, column_keywords, pattern_mode, column_filter):
    target = _target_panel(composite, panel)
    ri = _matches(target.match_rows, row_keywords, pattern_mode)
    ci = _matches(target.match_columns, column_keywords, pattern_mode)
    allowed = _filtered_columns(target, column_filter)
    if allowed is not None:
        ci &= allowed

    rows = []
    for s, row_order in enumerate(target.row_order, start=1):
        row_index = [i for i in row_order if i in ri]
        if not row_index:
            continue
        for t, column_order in enumerate(target.column_order, start=1):
            column_index = [j for j in column_order if j in ci]
            if column_index:
                rows.append(SelectionRow.for_slice(target, s, t, row_index, column_index))
    return rows


def _single_axis(composite, panel, row_keywords, column_keywords, pattern_mode, column_filter):
    names = set(_as_list(panel))
    rows = []
    for p in composite.data_panels:
        if names and p.name not in names:
            continue
        allowed = _filtered_columns(p, column_filter)

        if row_keywords:
            ri = _matches(p.match_rows, row_keywords, pattern_mode)
            for s, row_order in enumerate(p.row_order, start=1):
                row_index = [i for i in row_order if i in ri]
                if not row_index:
                    continue
                for t, column_order in enumerate(p.column_order, start=1):
                    column_index = _restrict(column_order, allowed)
                    if column_index:
                        rows.append(SelectionRow.for_slice(p, s, t, row_index, column_index))
        else:
            ci = _matches(p.match_columns, column_keywords, pattern_mode)
            if allowed is not None:
                ci &= allowed
            for t, column_order in enumerate(p.column_order, start=1):
                column_index = [j for j in column_order if j in ci]
                if not column_index:
                    continue
                for s, row_order in enumerate(p.row_order, start=1):
                    rows.append(SelectionRow.for_slice(p, s, t, row_order, column_index))
    return rows


def _propagate(composite, rows, by_rows, include_annotation):
    """Extend a selection to the panels linked along the keyed axis."""
    horizontal = composite.direction == HORIZONTAL
    extra = []
    if include_annotation:
        extra.extend(SelectionRow.marker(p.name) for p in composite.annotation_panels)
    for p in composite.data_panels:
        if p.is_empty:
            continue
        # panels with their own matches still receive the others' matches
        for base in rows:
            if base.heatmap == p.name:
                continue
            if horizontal and by_rows:
                if not p.rows_in_split(base.row_slice):
                    continue
                for t, column_order in enumerate(p.column_order, start=1):
                    extra.append(SelectionRow.for_slice(
                        p, base.row_slice, t, base.row_index, column_order))
            elif not horizontal and not by_rows:
                if not p.columns_in_split(base.column_slice):
                    continue
                for s, row_order in enumerate(p.row_order, start=1):
                    extra.append(SelectionRow.for_slice(
                        p, s, base.column_slice, row_order, base.column_index))
    return rows + extra


def resolve_by_labels(
    composite: Composite,
    row_keywords: Keywords = None,
    column_keywords: Keywords = None,
    pattern_mode: bool = False,
    panel: Keywords = None,
    include_annotation: bool = False,
    propagate_all: bool = True,
    column_filter: Optional[str] = None,
    verbose: bool = False,
) -> SelectionRecord:
    """Select by row and/or column labels.

    Args:
        composite: The composite to search.
        row_keywords: Row labels (or patterns) to look for.
        column_keywords: Column labels (or patterns) to look for.
        pattern_mode: Treat keywords as regular expressions searched in the
            labels instead of exact labels.
        panel: Panel name(s) to search. With both row and column keywords
            exactly one panel is searched; it defaults to the only data panel.
        include_annotation: Add marker rows for annotation panels when
            propagating.
        propagate_all: For single-axis queries, also select the matched rows
            (horizontal) or columns (vertical) in every other linked panel.
        column_filter: Pattern on column labels restricting which columns may
            be selected.
        verbose: Print progress.

    Returns:
        A normalized SelectionRecord; empty when nothing matched.

    Raises:
        AmbiguousPanel: Row and column keywords are both set but no single
            target panel can be determined.
    """
    row_keywords = _as_list(row_keywords)
    column_keywords = _as_list(column_keywords)
    if not row_keywords and not column_keywords:
        return SelectionRecord()

    if row_keywords and column_keywords:
        rows = _joint(composite, panel, row_keywords, column_keywords, pattern_mode, column_filter)
    else:
        rows = _single_axis(composite, panel, row_keywords, column_keywords, pattern_mode, column_filter)
        if rows and propagate_all:
            rows = _propagate(composite, rows, bool(row_keywords), include_annotation)

    if not rows:
        if verbose:
            print(f"[Labels] No label matches rows {row_keywords} / columns {column_keywords}")
        return SelectionRecord()

    record = normalize(SelectionRecord(rows), composite)
    if verbose:
        print(f"[Labels] Selected {len(record.data_rows())} slices in panels {record.panels()}")
    return record
