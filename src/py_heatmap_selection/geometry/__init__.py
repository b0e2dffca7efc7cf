"""
Geometry module for py_heatmap_selection.

Length units, the rendering interface, grid layouts and the slice position cache.
"""

from .units import (
    DEFAULT_UNIT,
    LENGTH_UNITS,
    Point,
    as_point,
    convert_length,
    normalize_corners,
)

from .renderer import (
    Renderer,
    StaticRenderer,
)

from .layout import (
    compute_layout,
    render_static,
)

from .cache import (
    SliceBox,
    GeometryRecord,
    GeometryCache,
    content_fingerprint,
    query_geometry,
)

__all__ = [
    "DEFAULT_UNIT",
    "LENGTH_UNITS",
    "Point",
    "as_point",
    "convert_length",
    "normalize_corners",
    "Renderer",
    "StaticRenderer",
    "compute_layout",
    "render_static",
    "SliceBox",
    "GeometryRecord",
    "GeometryCache",
    "content_fingerprint",
    "query_geometry",
]
