"""
Tools module for py_heatmap_selection.

Contains serialization helpers and callback handlers for a UI bridge.
"""

from .utils import _serialize_result

from .callback_functions import (
    # Pointer functions
    select_position,
    select_area,

    # Search functions
    select_labels,

    # Geometry functions
    get_positions,
)

__all__ = [
    "_serialize_result",
    "select_position",
    "select_area",
    "select_labels",
    "get_positions",
]
