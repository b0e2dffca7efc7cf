"""
Slice positions on the rendering surface and the cache that keeps them.

Querying the renderer for every slice is the only expensive step of a
selection, so the last table is reused for as long as the composite and the
surface size stay the same. Keep one GeometryCache per visualization
session.
"""

import hashlib
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..exceptions import EmptyComposite, NoRenderedSurface
from ..model.panels import Composite, DataPanel
from .renderer import Renderer
from .units import convert_length

GEOMETRY_COLUMNS = [
    "heatmap", "slice", "row_slice", "column_slice",
    "x_min", "x_max", "y_min", "y_max",
]


@dataclass(frozen=True)
class SliceBox:
    """Bounding box of one slice. Annotation boxes leave one axis as None."""

    heatmap: str
    slice: str
    row_slice: Optional[int]
    column_slice: Optional[int]
    x_min: Optional[float]
    x_max: Optional[float]
    y_min: Optional[float]
    y_max: Optional[float]

    @property
    def is_annotation(self) -> bool:
        return self.row_slice is None


class GeometryRecord:
    """Boxes of every slice of one composite, in one length unit."""

    def __init__(self, boxes: Sequence[SliceBox], unit: str, dpi: Optional[float] = None):
        self._boxes = tuple(boxes)
        self.unit = unit
        self.dpi = dpi

    @property
    def boxes(self) -> Tuple[SliceBox, ...]:
        return self._boxes

    def box(self, slice_id: str) -> SliceBox:
        for b in self._boxes:
            if b.slice == slice_id:
                return b
        raise KeyError(slice_id)

    def converted(self, unit: str) -> "GeometryRecord":
        """The same boxes expressed in ``unit``."""
        if unit == self.unit:
            return self

        def conv(v):
            return None if v is None else convert_length(v, self.unit, unit, self.dpi)

        boxes = [
            replace(b, x_min=conv(b.x_min), x_max=conv(b.x_max),
                    y_min=conv(b.y_min), y_max=conv(b.y_max))
            for b in self._boxes
        ]
        return GeometryRecord(boxes, unit, self.dpi)

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame(
            [[getattr(b, c) for c in GEOMETRY_COLUMNS] for b in self._boxes],
            columns=GEOMETRY_COLUMNS,
        )
        df["row_slice"] = df["row_slice"].astype("Int64")
        df["column_slice"] = df["column_slice"].astype("Int64")
        for c in GEOMETRY_COLUMNS[4:]:
            df[c] = df[c].astype(float)
        return df

    def __iter__(self) -> Iterator[SliceBox]:
        return iter(self._boxes)

    def __len__(self) -> int:
        return len(self._boxes)

    def __repr__(self) -> str:
        return f"GeometryRecord({len(self._boxes)} slices, unit={self.unit!r})"


def content_fingerprint(composite: Composite, include_annotations: bool = False) -> str:
    """Stable hash of the panel structure the geometry depends on."""
    h = hashlib.sha1()
    h.update(composite.direction.encode("utf-8"))
    h.update(b"annotations=1" if include_annotations else b"annotations=0")
    for p in composite.panels:
        h.update(b"\0" + type(p).__name__.encode("utf-8") + b":" + p.name.encode("utf-8"))
        if isinstance(p, DataPanel):
            h.update(np.asarray(p.values.shape, dtype=np.int64).tobytes())
            for orders in (p.row_order, p.column_order):
                h.update(np.int64(len(orders)).tobytes())
                for order in orders:
                    h.update(np.asarray(order, dtype=np.int64).tobytes() + b"|")
    return h.hexdigest()


def query_geometry(
    composite: Composite,
    renderer: Renderer,
    include_annotations: bool = False,
) -> GeometryRecord:
    """Ask the renderer for the box of every slice of ``composite``."""
    if not any(not p.is_empty for p in composite.data_panels):
        raise EmptyComposite(
            "There should be one data panel (nrow > 0 and ncol > 0) in the composite."
        )

    boxes: List[SliceBox] = []
    for key in composite.slices(include_annotations):
        x_min, x_max, y_min, y_max = renderer.query_slice_bbox(key.slice_id)
        boxes.append(SliceBox(
            heatmap=key.panel,
            slice=key.slice_id,
            row_slice=key.row_split,
            column_slice=key.column_split,
            x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max,
        ))
    return GeometryRecord(boxes, unit=renderer.unit, dpi=renderer.dpi)


class GeometryCache:
    """Last geometry table, keyed by composite structure and surface size."""

    def __init__(self, renderer: Renderer):
        self.renderer = renderer
        self._record: Optional[GeometryRecord] = None
        self._content_key: Optional[str] = None
        self._size_key: Optional[Tuple[float, ...]] = None

    @property
    def record(self) -> Optional[GeometryRecord]:
        return self._record

    def get_geometry(
        self,
        composite: Composite,
        include_annotations: bool = False,
        verbose: bool = False,
    ) -> GeometryRecord:
        """Return slice boxes, querying the renderer only when something changed."""
        size = self.renderer.surface_size()
        if size is None:
            raise NoRenderedSurface("No heatmap is on the rendering surface.")

        size_key = tuple(float(v) for v in size)
        content_key = content_fingerprint(composite, include_annotations)

        if self._record is not None:
            if size_key != self._size_key:
                reason = "The surface size has been changed."
            elif content_key != self._content_key:
                reason = "The heatmaps have been changed."
            else:
                if verbose:
                    print("[Geometry] Heatmap positions are already calculated, use the cached one.")
                return self._record
            if verbose:
                print(f"[Geometry] {reason} Calculate new heatmap positions.")

        record = query_geometry(composite, self.renderer, include_annotations)
        self._record = record
        self._content_key = content_key
        self._size_key = size_key
        if verbose:
            print(f"[Geometry] Stored positions of {len(record)} slices ({record.unit})")
        return record

    def invalidate(self) -> None:
        self._record = None
        self._content_key = None
        self._size_key = None
