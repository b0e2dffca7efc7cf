"""
Interface to the engine that draws the composite.

The resolvers only need two things from it: the size of the active surface
and the bounding box of every slice on that surface.
"""

import abc
from typing import Dict, Optional, Tuple

from ..exceptions import NoRenderedSurface
from .units import DEFAULT_UNIT

BBox = Tuple[float, float, float, float]


def _as_boxes(boxes: Dict[str, BBox]) -> Dict[str, BBox]:
    return {
        k: tuple(float(v) if v is not None else None for v in box)
        for k, box in boxes.items()
    }


class Renderer(abc.ABC):
    """Rendering collaborator queried for slice positions.

    ``unit`` is the unit boxes are reported in; ``dpi`` is needed only when
    boxes or pointer positions are in pixels.
    """

    unit: str = DEFAULT_UNIT
    dpi: Optional[float] = None

    @abc.abstractmethod
    def surface_size(self) -> Optional[Tuple[float, float]]:
        """Size of the active surface, or None when nothing is rendered."""

    @abc.abstractmethod
    def query_slice_bbox(self, slice_id: str) -> BBox:
        """Return ``(x_min, x_max, y_min, y_max)`` of one slice.

        Raises NoRenderedSurface if the slice is not on the active surface.
        """


class StaticRenderer(Renderer):
    """Replays a fixed table of slice boxes.

    Useful when the hosting application computes its own layout (see
    ``compute_layout``) or draws offline.
    """

    def __init__(
        self,
        boxes: Dict[str, BBox],
        size: Tuple[float, float],
        unit: str = DEFAULT_UNIT,
        dpi: Optional[float] = None,
    ):
        self._boxes = _as_boxes(boxes)
        self._size = tuple(size)
        self.unit = unit
        self.dpi = dpi
        self.n_queries = 0

    def surface_size(self) -> Optional[Tuple[float, float]]:
        return self._size

    def query_slice_bbox(self, slice_id: str) -> BBox:
        if self._size is None:
            raise NoRenderedSurface("No heatmap is on the rendering surface.")
        if slice_id not in self._boxes:
            raise NoRenderedSurface(f"Slice '{slice_id}' is not on the rendering surface.")
        self.n_queries += 1
        return self._boxes[slice_id]

    def resize(self, size: Tuple[float, float], boxes: Optional[Dict[str, BBox]] = None) -> None:
        """Change the surface size, optionally with new boxes."""
        self._size = tuple(size)
        if boxes is not None:
            self._boxes = _as_boxes(boxes)

    def clear(self) -> None:
        """Drop the surface; later queries raise NoRenderedSurface."""
        self._size = None
        self._boxes = {}
