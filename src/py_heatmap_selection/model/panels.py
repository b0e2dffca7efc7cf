"""
Panel index model for composite heatmaps.

A composite is an ordered list of panels concatenated horizontally (panels
share rows) or vertically (panels share columns). Data panels carry a value
grid plus the row/column order of every split as produced by the clustering
step; annotation panels only occupy space along the concatenation axis.

Original row and column indices are 1-based everywhere in this module.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import anndata as ad
import numpy as np
import pandas as pd
import scipy.sparse as sp

from ..exceptions import InvalidQuery

HORIZONTAL = "horizontal"
VERTICAL = "vertical"
DIRECTIONS = (HORIZONTAL, VERTICAL)

Order = Tuple[int, ...]


def slice_name(panel: str, row_split: int, column_split: int) -> str:
    """Identifier of one data slice, e.g. ``"mat_heatmap_body_1_2"``."""
    return f"{panel}_heatmap_body_{row_split}_{column_split}"


def annotation_slice_name(panel: str) -> str:
    return f"heatmap_{panel}"


def check_partition(orders: Sequence[Sequence[int]], n: int, axis: str = "row") -> None:
    """Raise ValueError unless ``orders`` covers 1..n exactly once."""
    flat = [int(i) for order in orders for i in order]
    if len(flat) != n:
        raise ValueError(
            f"{axis} splits hold {len(flat)} indices but the panel has {n} {axis}s"
        )
    if sorted(flat) != list(range(1, n + 1)):
        seen = pd.Series(flat)
        dup = sorted(seen[seen.duplicated()].unique().tolist())
        missing = sorted(set(range(1, n + 1)) - set(flat))
        raise ValueError(
            f"{axis} splits are not a partition of 1..{n} "
            f"(duplicated: {dup[:10]}, missing: {missing[:10]})"
        )


def split_orders(split=None, permutation=None, n: int = 0) -> Tuple[Order, ...]:
    """Build per-split display orders from a split assignment.

    Args:
        split: One split label per row (or column), in original order. Levels
            follow the categorical order for categorical input, otherwise the
            sorted unique values. None means a single split.
        permutation: 1-based display order of all rows (e.g. from clustering).
            Defaults to the natural order.
        n: Number of rows (or columns).

    Returns:
        Tuple of display orders, one per non-empty split.
    """
    if permutation is None:
        permutation = np.arange(1, n + 1)
    else:
        permutation = np.asarray(permutation, dtype=int)
        if len(permutation) != n:
            raise ValueError(f"Permutation has length {len(permutation)}, expected {n}")

    if split is None:
        return (tuple(int(i) for i in permutation),)

    split = pd.Series(split).reset_index(drop=True)
    if len(split) != n:
        raise ValueError(f"Split assignment has length {len(split)}, expected {n}")

    if isinstance(split.dtype, pd.CategoricalDtype):
        levels = [c for c in split.cat.categories if (split == c).any()]
    else:
        levels = sorted(pd.unique(split.dropna()))

    labels = split.to_numpy()[permutation - 1]
    return tuple(
        tuple(int(i) for i in permutation[labels == level])
        for level in levels
    )


def _as_orders(orders, n: int) -> Tuple[Order, ...]:
    if orders is None:
        return (tuple(range(1, n + 1)),)
    return tuple(tuple(int(i) for i in order) for order in orders)


def _as_labels(labels, n: int, axis: str) -> Optional[Tuple[str, ...]]:
    if labels is None:
        return None
    labels = tuple(str(x) for x in labels)
    if len(labels) != n:
        raise ValueError(f"Got {len(labels)} {axis} labels for {n} {axis}s")
    return labels


def _match(labels: Optional[Tuple[str, ...]], keyword: str, pattern: bool) -> np.ndarray:
    if labels is None:
        return np.array([], dtype=int)
    ser = pd.Series(labels, dtype=object)
    if pattern:
        try:
            hit = ser.str.contains(keyword, regex=True, na=False)
        except re.error as e:
            raise InvalidQuery(f"Invalid pattern '{keyword}': {e}") from None
    else:
        hit = ser == keyword
    return np.flatnonzero(hit.to_numpy()) + 1


class DataPanel:
    """A heatmap body: value grid, labels and split orders."""

    def __init__(
        self,
        name: str,
        values,
        row_order: Optional[Sequence[Sequence[int]]] = None,
        column_order: Optional[Sequence[Sequence[int]]] = None,
        row_labels: Optional[Sequence] = None,
        column_labels: Optional[Sequence] = None,
    ):
        if isinstance(values, pd.DataFrame):
            if row_labels is None:
                row_labels = values.index
            if column_labels is None:
                column_labels = values.columns
            values = values.to_numpy()
        elif sp.issparse(values):
            values = sp.csr_matrix(values)
        else:
            values = np.asarray(values)

        if len(values.shape) != 2:
            raise ValueError(f"Panel '{name}' needs a 2-D value grid, got shape {values.shape}")

        self.name = str(name)
        self._values = values
        n_rows, n_cols = values.shape

        self.row_order = _as_orders(row_order, n_rows)
        self.column_order = _as_orders(column_order, n_cols)
        check_partition(self.row_order, n_rows, axis="row")
        check_partition(self.column_order, n_cols, axis="column")

        self.row_labels = _as_labels(row_labels, n_rows, "row")
        self.column_labels = _as_labels(column_labels, n_cols, "column")

    @classmethod
    def from_splits(
        cls,
        name: str,
        values,
        row_split=None,
        column_split=None,
        row_permutation=None,
        column_permutation=None,
        row_labels=None,
        column_labels=None,
    ) -> "DataPanel":
        """Create a panel from split assignments and display permutations."""
        n_rows, n_cols = values.shape if hasattr(values, "shape") else np.shape(values)
        return cls(
            name,
            values,
            row_order=split_orders(row_split, row_permutation, n_rows),
            column_order=split_orders(column_split, column_permutation, n_cols),
            row_labels=row_labels,
            column_labels=column_labels,
        )

    @classmethod
    def from_frame(cls, name: str, df: pd.DataFrame, **kwargs) -> "DataPanel":
        """Create a panel from a DataFrame; labels come from its index and columns."""
        return cls(name, df, **kwargs)

    @classmethod
    def from_anndata(cls, name: str, adata, layer: Optional[str] = None, **kwargs) -> "DataPanel":
        """Create a cells x genes panel from an AnnData object."""
        if not isinstance(adata, ad.AnnData):
            raise TypeError(f"Expected an AnnData object, got {type(adata).__name__}")
        X = adata.X if layer is None else adata.layers[layer]
        kwargs.setdefault("row_labels", list(adata.obs_names))
        kwargs.setdefault("column_labels", list(adata.var_names))
        return cls(name, X, **kwargs)

    @property
    def values(self):
        return self._values

    @property
    def n_rows(self) -> int:
        return self._values.shape[0]

    @property
    def n_cols(self) -> int:
        return self._values.shape[1]

    @property
    def is_empty(self) -> bool:
        return self.n_rows == 0 or self.n_cols == 0

    @property
    def n_row_splits(self) -> int:
        return len(self.row_order)

    @property
    def n_column_splits(self) -> int:
        return len(self.column_order)

    def rows_in_split(self, s: int) -> Order:
        """Display order of row split ``s`` (1-based); empty if unknown."""
        if s is None or not 1 <= s <= len(self.row_order):
            return ()
        return self.row_order[s - 1]

    def columns_in_split(self, t: int) -> Order:
        if t is None or not 1 <= t <= len(self.column_order):
            return ()
        return self.column_order[t - 1]

    def row_labels_of(self, indices: Sequence[int]) -> Tuple[Optional[str], ...]:
        if self.row_labels is None:
            return tuple(None for _ in indices)
        return tuple(self.row_labels[i - 1] for i in indices)

    def column_labels_of(self, indices: Sequence[int]) -> Tuple[Optional[str], ...]:
        if self.column_labels is None:
            return tuple(None for _ in indices)
        return tuple(self.column_labels[i - 1] for i in indices)

    def match_rows(self, keyword: str, pattern: bool = False) -> np.ndarray:
        """1-based indices of rows whose label equals (or matches) ``keyword``."""
        return _match(self.row_labels, keyword, pattern)

    def match_columns(self, keyword: str, pattern: bool = False) -> np.ndarray:
        return _match(self.column_labels, keyword, pattern)

    def block(self, row_index: Sequence[int], column_index: Sequence[int]) -> np.ndarray:
        """Dense sub-grid for 1-based row and column indices."""
        r = np.asarray(row_index, dtype=int) - 1
        c = np.asarray(column_index, dtype=int) - 1
        if sp.issparse(self._values):
            return self._values[r][:, c].toarray()
        return self._values[np.ix_(r, c)]

    def __repr__(self) -> str:
        return (
            f"DataPanel({self.name!r}, {self.n_rows}x{self.n_cols}, "
            f"splits={self.n_row_splits}x{self.n_column_splits})"
        )


class AnnotationPanel:
    """A row or column annotation strip; has no value grid."""

    def __init__(self, name: str):
        self.name = str(name)

    def __repr__(self) -> str:
        return f"AnnotationPanel({self.name!r})"


Panel = Union[DataPanel, AnnotationPanel]


@dataclass(frozen=True)
class SliceKey:
    """One rectangular region of the composite that owns a bounding box."""

    panel: str
    slice_id: str
    row_split: Optional[int] = None
    column_split: Optional[int] = None

    @property
    def is_annotation(self) -> bool:
        return self.row_split is None


class Composite:
    """Ordered panels plus the direction they are concatenated in.

    Horizontal composites link the row axis across panels; vertical
    composites link the column axis.
    """

    def __init__(self, panels: Sequence[Panel], direction: str = HORIZONTAL):
        if direction not in DIRECTIONS:
            raise ValueError(
                f"direction must be 'horizontal' or 'vertical', got '{direction}'"
            )
        names = [p.name for p in panels]
        dup = sorted({n for n in names if names.count(n) > 1})
        if dup:
            raise ValueError(f"Panel names should not be duplicated: {dup}")

        self._direction = direction
        self._panels: List[Panel] = list(panels)
        self._position: Dict[str, int] = {n: i for i, n in enumerate(names)}

    @property
    def direction(self) -> str:
        return self._direction

    @property
    def linked_axis(self) -> str:
        return "row" if self._direction == HORIZONTAL else "column"

    @property
    def panels(self) -> List[Panel]:
        return list(self._panels)

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._panels]

    @property
    def data_panels(self) -> List[DataPanel]:
        return [p for p in self._panels if isinstance(p, DataPanel)]

    @property
    def annotation_panels(self) -> List[AnnotationPanel]:
        return [p for p in self._panels if isinstance(p, AnnotationPanel)]

    def panel(self, name: str) -> Panel:
        return self._panels[self._position[name]]

    def position(self, name: str) -> int:
        """Declaration order of a panel; unknown names sort last."""
        return self._position.get(name, len(self._panels))

    def __contains__(self, name: str) -> bool:
        return name in self._position

    def __len__(self) -> int:
        return len(self._panels)

    def slices(self, include_annotations: bool = False) -> Iterator[SliceKey]:
        """Slices in declaration order, then row split, then column split.

        Data panels with an empty grid have no body and are skipped.
        """
        for p in self._panels:
            if isinstance(p, DataPanel):
                if p.is_empty:
                    continue
                for s in range(1, p.n_row_splits + 1):
                    for t in range(1, p.n_column_splits + 1):
                        yield SliceKey(p.name, slice_name(p.name, s, t), s, t)
            elif include_annotations:
                yield SliceKey(p.name, annotation_slice_name(p.name))

    def __repr__(self) -> str:
        return f"Composite({self.names}, direction={self._direction!r})"
