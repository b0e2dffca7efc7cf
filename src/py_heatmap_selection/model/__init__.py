"""
Model module for py_heatmap_selection.

Panels, composites and the selection record format.
"""

from .panels import (
    HORIZONTAL,
    VERTICAL,
    DataPanel,
    AnnotationPanel,
    Composite,
    SliceKey,
    check_partition,
    split_orders,
    slice_name,
    annotation_slice_name,
)

from .selection import (
    FIELDS,
    SelectionRow,
    SelectionRecord,
)

__all__ = [
    "HORIZONTAL",
    "VERTICAL",
    "DataPanel",
    "AnnotationPanel",
    "Composite",
    "SliceKey",
    "check_partition",
    "split_orders",
    "slice_name",
    "annotation_slice_name",
    "FIELDS",
    "SelectionRow",
    "SelectionRecord",
]
