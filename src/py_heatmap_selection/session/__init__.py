"""
Session module for py_heatmap_selection.

Provides the per-visualization entry point that owns the geometry cache.
"""

from .selection_session import SelectionSession, create_selection_session

__all__ = [
    "SelectionSession",
    "create_selection_session",
]
