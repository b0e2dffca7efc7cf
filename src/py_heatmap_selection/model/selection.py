"""
Selection records: which rows and columns of which slices were selected.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from .panels import DataPanel, slice_name

FIELDS = (
    "heatmap",
    "slice",
    "row_slice",
    "column_slice",
    "row_index",
    "column_index",
    "row_label",
    "column_label",
)


def _unique(indices: Iterable[int]) -> Tuple[int, ...]:
    return tuple(dict.fromkeys(int(i) for i in indices))


@dataclass(frozen=True)
class SelectionRow:
    """One selected slice. ``slice is None`` marks a touched annotation panel."""

    heatmap: str
    slice: Optional[str]
    row_slice: Optional[int]
    column_slice: Optional[int]
    row_index: Tuple[int, ...] = ()
    column_index: Tuple[int, ...] = ()
    row_label: Tuple[Optional[str], ...] = ()
    column_label: Tuple[Optional[str], ...] = ()

    @classmethod
    def for_slice(
        cls,
        panel: DataPanel,
        row_slice: int,
        column_slice: int,
        row_index: Iterable[int],
        column_index: Iterable[int],
    ) -> "SelectionRow":
        """Build a row for a data slice, deriving labels from the panel."""
        row_index = _unique(row_index)
        column_index = _unique(column_index)
        return cls(
            heatmap=panel.name,
            slice=slice_name(panel.name, row_slice, column_slice),
            row_slice=int(row_slice),
            column_slice=int(column_slice),
            row_index=row_index,
            column_index=column_index,
            row_label=panel.row_labels_of(row_index),
            column_label=panel.column_labels_of(column_index),
        )

    @classmethod
    def marker(cls, heatmap: str) -> "SelectionRow":
        return cls(heatmap=heatmap, slice=None, row_slice=None, column_slice=None)

    @property
    def is_marker(self) -> bool:
        return self.slice is None

    @property
    def key(self) -> Tuple[str, Optional[int], Optional[int]]:
        return (self.heatmap, self.row_slice, self.column_slice)

    def to_dict(self) -> Dict:
        d = asdict(self)
        for f in FIELDS[4:]:
            d[f] = list(d[f])
        return d


class SelectionRecord:
    """Ordered selection rows, one per (panel, row split, column split)."""

    def __init__(self, rows: Iterable[SelectionRow] = ()):
        self._rows = tuple(rows)

    @property
    def rows(self) -> Tuple[SelectionRow, ...]:
        return self._rows

    @property
    def empty(self) -> bool:
        return len(self._rows) == 0

    @property
    def overlap(self) -> bool:
        """True when at least one data slice is selected."""
        return any(not r.is_marker for r in self._rows)

    def data_rows(self) -> List[SelectionRow]:
        return [r for r in self._rows if not r.is_marker]

    def markers(self) -> List[SelectionRow]:
        return [r for r in self._rows if r.is_marker]

    def panels(self) -> List[str]:
        return list(dict.fromkeys(r.heatmap for r in self._rows))

    def row_indices(self, heatmap: str) -> Tuple[int, ...]:
        """All selected row indices of one panel, in record order."""
        return _unique(i for r in self._rows if r.heatmap == heatmap for i in r.row_index)

    def column_indices(self, heatmap: str) -> Tuple[int, ...]:
        return _unique(i for r in self._rows if r.heatmap == heatmap for i in r.column_index)

    def to_records(self) -> List[Dict]:
        return [r.to_dict() for r in self._rows]

    def to_frame(self) -> pd.DataFrame:
        """Record as a DataFrame with one row per selected slice."""
        df = pd.DataFrame([r.to_dict() for r in self._rows], columns=list(FIELDS))
        df["row_slice"] = df["row_slice"].astype("Int64")
        df["column_slice"] = df["column_slice"].astype("Int64")
        return df

    def __iter__(self) -> Iterator[SelectionRow]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, i) -> SelectionRow:
        return self._rows[i]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SelectionRecord):
            return NotImplemented
        return self._rows == other._rows

    def __repr__(self) -> str:
        return f"SelectionRecord({len(self._rows)} rows, panels={self.panels()})"
