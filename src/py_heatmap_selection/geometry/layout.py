"""
Grid layout of a composite on a rectangular surface.

Gives every slice a box proportional to the number of rows and columns it
shows, with gaps between splits and between panels. The origin is the
bottom-left corner and y grows upward, so row split 1 sits on top.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..model.panels import HORIZONTAL, AnnotationPanel, Composite, DataPanel
from ..model.panels import annotation_slice_name, slice_name
from .renderer import BBox, StaticRenderer
from .units import DEFAULT_UNIT

SPLIT_GAP = 1.0
PANEL_GAP = 2.0
ANNOTATION_SIZE = 5.0


def _segments(start: float, length: float, sizes: Sequence[float], gap: float) -> List[Tuple[float, float]]:
    """Cut ``length`` into pieces proportional to ``sizes`` separated by ``gap``."""
    sizes = np.asarray(sizes, dtype=float)
    usable = length - gap * (len(sizes) - 1)
    if usable <= 0 or sizes.sum() <= 0:
        raise ValueError(f"Extent {length} is too small for {len(sizes)} pieces with gap {gap}")

    out = []
    pos = start
    for w in usable * sizes / sizes.sum():
        out.append((float(pos), float(pos + w)))
        pos += w + gap
    return out


def _top_down(extent: float, segments: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
    # segments measured from the top edge -> (y_min, y_max) from the bottom
    return [(extent - hi, extent - lo) for lo, hi in segments]


def compute_layout(
    composite: Composite,
    width: float,
    height: float,
    split_gap: float = SPLIT_GAP,
    panel_gap: float = PANEL_GAP,
    annotation_size: float = ANNOTATION_SIZE,
) -> Dict[str, BBox]:
    """Compute ``slice_id -> (x_min, x_max, y_min, y_max)`` for a composite.

    Data panels share the concatenation axis in proportion to their number of
    columns (horizontal) or rows (vertical); annotation panels take a fixed
    ``annotation_size``. Annotation boxes only carry the extent along the
    concatenation axis.
    """
    horizontal = composite.direction == HORIZONTAL
    panels = [
        p for p in composite.panels
        if isinstance(p, AnnotationPanel) or not p.is_empty
    ]
    if not any(isinstance(p, DataPanel) for p in panels):
        raise ValueError("The composite has no data panel to lay out")

    extent = width if horizontal else height
    n_anno = sum(isinstance(p, AnnotationPanel) for p in panels)
    data_extent = extent - annotation_size * n_anno - panel_gap * (len(panels) - 1)
    data_sizes = [
        (p.n_cols if horizontal else p.n_rows)
        for p in panels if isinstance(p, DataPanel)
    ]
    if data_extent <= 0:
        raise ValueError(f"Extent {extent} is too small for {len(panels)} panels")
    scale = data_extent / float(sum(data_sizes))

    boxes: Dict[str, BBox] = {}
    pos = 0.0
    for p in panels:
        if isinstance(p, AnnotationPanel):
            size = annotation_size
        else:
            size = (p.n_cols if horizontal else p.n_rows) * scale

        if horizontal:
            lo, hi = pos, pos + size
        else:
            # first panel on top
            lo, hi = height - pos - size, height - pos

        if isinstance(p, AnnotationPanel):
            name = annotation_slice_name(p.name)
            boxes[name] = (lo, hi, None, None) if horizontal else (None, None, lo, hi)
        else:
            if horizontal:
                xs = _segments(lo, hi - lo, [len(o) for o in p.column_order], split_gap)
                ys = _top_down(height, _segments(0.0, height, [len(o) for o in p.row_order], split_gap))
            else:
                xs = _segments(0.0, width, [len(o) for o in p.column_order], split_gap)
                ys = _top_down(hi, _segments(0.0, hi - lo, [len(o) for o in p.row_order], split_gap))
            for s, (y_min, y_max) in enumerate(ys, start=1):
                for t, (x_min, x_max) in enumerate(xs, start=1):
                    boxes[slice_name(p.name, s, t)] = (x_min, x_max, y_min, y_max)
        pos += size + panel_gap

    return boxes


def render_static(
    composite: Composite,
    width: float,
    height: float,
    unit: str = DEFAULT_UNIT,
    dpi: Optional[float] = None,
    **kwargs,
) -> StaticRenderer:
    """Lay out ``composite`` and wrap the boxes in a StaticRenderer."""
    boxes = compute_layout(composite, width, height, **kwargs)
    return StaticRenderer(boxes, size=(width, height), unit=unit, dpi=dpi)
