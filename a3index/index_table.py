"""The mutable in-memory index table: interleaved coordinates plus row ids."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from a3index.geometry import MAX_DIMENSION_ID, MAX_ROW_ID, DimensionId, IndexPos, RowId


class IndexTable:
    """Point coordinates (one row per position) and the row id each carries.

    Positions are permuted in place by the access paths; every swap moves a
    point together with its row id.
    """

    def __init__(self, points, row_ids, dimensions: int) -> None:
        if dimensions <= 0:
            raise ValueError("IndexTable: dimensions must be > 0")
        flat = np.asarray(points, dtype=np.float64).ravel()
        if flat.size % dimensions != 0:
            raise ValueError("IndexTable: points size not divisible by dimensions")
        ids = np.asarray(row_ids, dtype=np.int64).ravel()
        if flat.size // dimensions != ids.size:
            raise ValueError("IndexTable: row_ids count disagrees with points/dimensions")
        self._points = flat.reshape(-1, dimensions).copy()
        self._row_ids = ids.copy()
        self._dimensions = dimensions

    @classmethod
    def from_columns(cls, columns: Sequence[Sequence[float]]) -> "IndexTable":
        """Build a table from per-dimension columns; row ids are 0..n-1."""
        if len(columns) == 0:
            raise ValueError("IndexTable.from_columns: no dimension columns provided")
        if len(columns) > MAX_DIMENSION_ID:
            raise ValueError(
                "IndexTable.from_columns: dimension count exceeds DimensionId range"
            )
        arrays = [np.asarray(col, dtype=np.float64).ravel() for col in columns]
        n = arrays[0].size
        if any(a.size != n for a in arrays):
            raise ValueError(
                "IndexTable.from_columns: dimension columns have mismatched lengths"
            )
        if n > MAX_ROW_ID:
            raise ValueError("IndexTable.from_columns: row count exceeds RowId range")
        points = np.column_stack(arrays) if n else np.empty((0, len(arrays)))
        return cls(points, np.arange(n, dtype=np.int64), len(arrays))

    def __len__(self) -> int:
        return self._row_ids.size

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def points(self) -> np.ndarray:
        """Read-only ``(n, d)`` view of the coordinates in position order."""
        view = self._points.view()
        view.flags.writeable = False
        return view

    @property
    def row_ids(self) -> np.ndarray:
        """Read-only view of the row ids in position order."""
        view = self._row_ids.view()
        view.flags.writeable = False
        return view

    def dim(self, pos: IndexPos, axis: DimensionId) -> float:
        return float(self._points[pos, axis])

    def point(self, pos: IndexPos) -> tuple[float, ...]:
        return tuple(self._points[pos].tolist())

    def row_id(self, pos: IndexPos) -> RowId:
        return int(self._row_ids[pos])

    def swap_positions(self, a: IndexPos, b: IndexPos) -> None:
        """Exchange two positions, carrying coordinates and row id together."""
        if a == b:
            return
        self._points[[a, b]] = self._points[[b, a]]
        self._row_ids[[a, b]] = self._row_ids[[b, a]]