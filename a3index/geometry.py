"""Geometric primitives and partition views shared by the index and query layers.

The half-open convention ``[low, high)`` is global: a point ``x`` satisfies a
range iff ``low <= x < high``. Every predicate below follows it, so a
rectangle that ends exactly where another begins does not overlap it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

# Identifier types. Widths follow what each id counts.
RowId = int  # stable base-table row ordinal (32-bit)
IndexPos = int  # position within the mutable index table (32-bit)
PartitionId = int  # dense partition id (32-bit)
MeasureId = int  # index into the schema's measure columns (16-bit)
DimensionId = int  # index into the schema's dimension columns (16-bit)
StratumTag = int  # per-round stratum index (32-bit)

MAX_ROW_ID = 2**32 - 1
MAX_PARTITION_ID = 2**32 - 1
MAX_DIMENSION_ID = 2**16 - 1
MAX_MEASURE_ID = 2**16 - 1


@dataclass
class Range:
    """One axis of a rectangle, half-open: ``[low, high)``."""

    low: float = 0.0
    high: float = 0.0


RangeLike = Union[Range, Sequence[float]]


@dataclass
class HyperRect:
    """An axis-aligned rectangle: one half-open range per dimension."""

    dims: list[Range] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.dims = [_to_range(d) for d in self.dims]

    def __len__(self) -> int:
        return len(self.dims)

    def copy(self) -> "HyperRect":
        """An independent copy whose ranges can be edited freely."""
        return HyperRect([Range(r.low, r.high) for r in self.dims])

    def contains_point(self, p: Sequence[float]) -> bool:
        """True iff ``low <= p[i] < high`` on every axis; wrong arity is False."""
        if len(p) != len(self.dims):
            return False
        return all(r.low <= x < r.high for r, x in zip(self.dims, p))

    def contains_rect(self, other: "HyperRect") -> bool:
        """True iff every point of ``other`` is also a point of this rectangle."""
        if len(other.dims) != len(self.dims):
            return False
        return all(
            o.low >= s.low and o.high <= s.high for s, o in zip(self.dims, other.dims)
        )

    def intersects(self, other: "HyperRect") -> bool:
        """True iff the rectangles share a point; abutting ones do not."""
        if len(other.dims) != len(self.dims):
            return False
        return all(
            s.low < o.high and o.low < s.high for s, o in zip(self.dims, other.dims)
        )


def _to_range(value: RangeLike) -> Range:
    if isinstance(value, Range):
        return value
    low, high = value
    return Range(float(low), float(high))


def rect(bounds: Iterable[RangeLike]) -> HyperRect:
    """Build a rectangle from ``(low, high)`` pairs or ranges."""
    return HyperRect(list(bounds))


class Containment(enum.Enum):
    """How a partition's bounds relate to a query rectangle."""

    DISJOINT = "disjoint"
    CONTAINED = "contained"
    PARTIAL = "partial"


@dataclass(frozen=True)
class PartitionView:
    """Read-only snapshot of one partition of the index table."""

    id: PartitionId
    bounds: HyperRect
    begin: IndexPos = 0
    end: IndexPos = 0
    active: bool = True

    @property
    def population(self) -> int:
        return self.end - self.begin