"""
Resolvers module for py_heatmap_selection.

Turns pointer positions, rectangles and label queries into selection
records, and post-processes those records.
"""

from .point import (
    resolve_point,
    column_rank,
    row_rank,
)

from .area import resolve_area

from .labels import resolve_by_labels

from .reconciler import (
    normalize,
    trim_n,
    trim_empty,
)

__all__ = [
    "resolve_point",
    "column_rank",
    "row_rank",
    "resolve_area",
    "resolve_by_labels",
    "normalize",
    "trim_n",
    "trim_empty",
]
