"""
py_heatmap_selection - Map clicks and drags on composite heatmaps back to data.

Given how a composite heatmap is laid out into panels and slices, and where
each slice sits on the rendering surface, resolve a pointer position, a
dragged rectangle or a label search to the original rows and columns of
every panel involved.

Features:
- Point and rectangle selection across split, multi-panel composites
- Selection by row/column labels (exact or pattern), linked across panels
- Slice position cache keyed by composite structure and surface size
- Merging, edge trimming and removal of empty rows/columns
- Records as pandas DataFrames or JSON-ready dicts

Basic Usage:
    >>> import numpy as np
    >>> from py_heatmap_selection import Composite, DataPanel, render_static
    >>> from py_heatmap_selection import create_selection_session
    >>> panel = DataPanel.from_splits("mat", np.random.rand(10, 8), row_split=[1] * 5 + [2] * 5)
    >>> composite = Composite([panel])
    >>> session = create_selection_session(composite, render_static(composite, 100, 80))
    >>> session.select_area((10, 10), (40, 60)).to_frame()
"""

__version__ = "0.1.0"

# Errors
from .exceptions import (
    SelectionError,
    NoRenderedSurface,
    AmbiguousPanel,
    InvalidGeometryInput,
    EmptyComposite,
    InvalidQuery,
)

# Panels and records
from .model import (
    HORIZONTAL,
    VERTICAL,
    DataPanel,
    AnnotationPanel,
    Composite,
    SliceKey,
    SelectionRow,
    SelectionRecord,
    check_partition,
    split_orders,
)

# Geometry
from .geometry import (
    Point,
    convert_length,
    Renderer,
    StaticRenderer,
    compute_layout,
    render_static,
    GeometryRecord,
    GeometryCache,
)

# Resolvers
from .resolvers import (
    resolve_point,
    resolve_area,
    resolve_by_labels,
    normalize,
    trim_n,
    trim_empty,
)

# Main entry point
from .session import SelectionSession, create_selection_session

# Callback functions (for wiring into a UI bridge)
from .tools import (
    select_position,
    select_area,
    select_labels,
    get_positions,
)

__all__ = [
    # Version
    "__version__",

    # Errors
    "SelectionError",
    "NoRenderedSurface",
    "AmbiguousPanel",
    "InvalidGeometryInput",
    "EmptyComposite",
    "InvalidQuery",

    # Panels and records
    "HORIZONTAL",
    "VERTICAL",
    "DataPanel",
    "AnnotationPanel",
    "Composite",
    "SliceKey",
    "SelectionRow",
    "SelectionRecord",
    "check_partition",
    "split_orders",

    # Geometry
    "Point",
    "convert_length",
    "Renderer",
    "StaticRenderer",
    "compute_layout",
    "render_static",
    "GeometryRecord",
    "GeometryCache",

    # Resolvers
    "resolve_point",
    "resolve_area",
    "resolve_by_labels",
    "normalize",
    "trim_n",
    "trim_empty",

    # Main API
    "SelectionSession",
    "create_selection_session",

    # Callbacks
    "select_position",
    "select_area",
    "select_labels",
    "get_positions",
]
