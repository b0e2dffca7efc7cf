"""
Session-scoped entry point for interactive selection.

A session binds one composite to the renderer that shows it and owns the
geometry cache for that pairing. Create one session per visualization and
close it when the visualization goes away.
"""

from typing import Optional, Sequence, Tuple, Union

import pandas as pd

from ..exceptions import NoRenderedSurface
from ..geometry.cache import GeometryCache, GeometryRecord
from ..geometry.renderer import Renderer
from ..geometry.units import DEFAULT_UNIT, Point, as_point
from ..model.panels import Composite
from ..model.selection import SelectionRecord, SelectionRow
from ..resolvers.area import resolve_area
from ..resolvers.labels import resolve_by_labels
from ..resolvers.point import resolve_point
from ..resolvers.reconciler import trim_empty, trim_n

PointLike = Union[Point, Tuple[float, float], dict]


class SelectionSession:
    """Resolve pointer and label selections on one rendered composite."""

    def __init__(self, composite: Composite, renderer: Renderer, verbose: bool = False):
        self.composite = composite
        self.renderer = renderer
        self.verbose = verbose
        self._cache: Optional[GeometryCache] = GeometryCache(renderer)

    @property
    def cache(self) -> GeometryCache:
        if self._cache is None:
            raise NoRenderedSurface("The selection session has been closed.")
        return self._cache

    @property
    def closed(self) -> bool:
        return self._cache is None

    def geometry(self, include_annotations: bool = False) -> GeometryRecord:
        return self.cache.get_geometry(self.composite, include_annotations, verbose=self.verbose)

    def positions(self, include_annotations: bool = False, unit: Optional[str] = None) -> pd.DataFrame:
        """Slice positions on the surface as a DataFrame."""
        record = self.geometry(include_annotations)
        if unit is not None:
            record = record.converted(unit)
        return record.to_frame()

    def select_position(self, pos: PointLike, unit: str = DEFAULT_UNIT) -> Optional[SelectionRow]:
        """Return the cell under ``pos``, or None."""
        point = as_point(pos, unit)
        return resolve_point(self.composite, point, self.geometry(), verbose=self.verbose)

    def select_area(
        self,
        pos1: PointLike,
        pos2: PointLike,
        unit: str = DEFAULT_UNIT,
        include_annotations: bool = False,
        remove_empty: bool = False,
        trim: Optional[Tuple[str, int]] = None,
    ) -> SelectionRecord:
        """Return everything covered by the rectangle between ``pos1`` and ``pos2``.

        Args:
            pos1, pos2: Opposite corners, in any order.
            unit: Unit of corners given as plain pairs.
            include_annotations: Report touched annotation panels as markers.
            remove_empty: Drop selected rows and columns without values.
            trim: ``(edge, n)`` to remove ``n`` indices from one edge.
        """
        point1, point2 = as_point(pos1, unit), as_point(pos2, unit)
        geometry = self.geometry(include_annotations)
        record = resolve_area(
            self.composite, point1, point2, geometry,
            include_annotations=include_annotations, verbose=self.verbose,
        )
        return self._postprocess(record, remove_empty, trim)

    def select_by_labels(
        self,
        row_keywords: Optional[Sequence[str]] = None,
        column_keywords: Optional[Sequence[str]] = None,
        pattern_mode: bool = False,
        panel=None,
        include_annotation: bool = False,
        propagate_all: bool = True,
        column_filter: Optional[str] = None,
        remove_empty: bool = False,
    ) -> SelectionRecord:
        """Select by labels; needs no rendered surface."""
        record = resolve_by_labels(
            self.composite,
            row_keywords=row_keywords,
            column_keywords=column_keywords,
            pattern_mode=pattern_mode,
            panel=panel,
            include_annotation=include_annotation,
            propagate_all=propagate_all,
            column_filter=column_filter,
            verbose=self.verbose,
        )
        return self._postprocess(record, remove_empty, None)

    def _postprocess(self, record, remove_empty, trim) -> SelectionRecord:
        if record.empty:
            return record
        if trim is not None:
            where, n_remove = trim
            record = trim_n(record, self.composite, n_remove=n_remove, where=where)
        if remove_empty:
            record = trim_empty(record, self.composite)
        return record

    def close(self) -> None:
        if self._cache is not None:
            self._cache.invalidate()
        self._cache = None

    def __enter__(self) -> "SelectionSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def create_selection_session(
    composite: Composite,
    renderer: Renderer,
    verbose: bool = False,
) -> SelectionSession:
    """
    Create a selection session for a rendered composite.

    Args:
        composite: Panels and layout direction of the visualization.
        renderer: The engine that draws ``composite`` and reports slice boxes.
        verbose: Print what the resolvers are doing.

    Returns:
        SelectionSession bound to ``composite`` and ``renderer``.

    Example:
        >>> from py_heatmap_selection import Composite, DataPanel, render_static
        >>> composite = Composite([DataPanel("mat", values)])
        >>> session = create_selection_session(composite, render_static(composite, 100, 80))
        >>> session.select_area((10, 10), (40, 60))
    """
    return SelectionSession(composite, renderer, verbose=verbose)
