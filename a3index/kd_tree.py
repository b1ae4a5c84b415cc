"""Binary KD partitioning over an index table's positions.

A node owns a contiguous ``[begin, end)`` slice of the table and a bounding
rectangle. An internal node splits one axis at a pivot value: the left child
owns the points whose coordinate is ``< pivot`` and the right child those
``>= pivot``. Their bounds tile the parent's exactly under the half-open
convention. Leaves are the live partitions, and retired parents are kept
for ancestry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from a3index.geometry import (
    Containment,
    DimensionId,
    HyperRect,
    IndexPos,
    PartitionId,
    PartitionView,
)
from a3index.index_table import IndexTable


@dataclass
class KdNode:
    """One node of the tree; split metadata is set when it becomes internal."""

    id: PartitionId = 0
    bounds: HyperRect = field(default_factory=HyperRect)
    begin: IndexPos = 0
    end: IndexPos = 0
    leaf: bool = True
    active: bool = True
    axis: DimensionId = 0
    pivot: float = 0.0
    left: Optional[PartitionId] = None
    right: Optional[PartitionId] = None
    parent: Optional[PartitionId] = None


class KdTree:
    """Dense, append-only KD node store with in-place value partitioning."""

    def __init__(self) -> None:
        self._nodes: list[KdNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def empty(self) -> bool:
        return not self._nodes

    def reset(self, root_bounds: HyperRect, n: int) -> None:
        """Discard the structure and install one root leaf owning ``[0, n)``."""
        self._nodes = [
            KdNode(id=0, bounds=root_bounds.copy(), begin=0, end=int(n))
        ]

    def _get(self, pid: PartitionId, caller: str) -> KdNode:
        if not 0 <= pid < len(self._nodes):
            raise IndexError(f"KdTree.{caller}: unknown id {pid}")
        return self._nodes[pid]

    def roots(self) -> list[PartitionId]:
        """The single root id when the tree is non-empty."""
        return [0] if self._nodes else []

    def children(self, pid: PartitionId) -> list[PartitionId]:
        """Children left then right; empty for a leaf."""
        node = self._get(pid, "children")
        if node.leaf:
            return []
        return [c for c in (node.left, node.right) if c is not None]

    def is_leaf(self, pid: PartitionId) -> bool:
        return self._get(pid, "is_leaf").leaf

    def classify(self, pid: PartitionId, q: HyperRect) -> Containment:
        """Disjoint, contained or partial, by the node's bounds against ``q``."""
        node = self._get(pid, "classify")
        if not node.bounds.intersects(q):
            return Containment.DISJOINT
        if q.contains_rect(node.bounds):
            return Containment.CONTAINED
        return Containment.PARTIAL

    def partition(self, pid: PartitionId) -> PartitionView:
        """Snapshot of a node, valid for retired ids too."""
        node = self._get(pid, "partition")
        return PartitionView(
            id=node.id,
            bounds=node.bounds.copy(),
            begin=node.begin,
            end=node.end,
            active=node.active,
        )

    def active_partitions(self) -> list[PartitionId]:
        """Ids of the live leaves; cost grows with the total node count."""
        return [node.id for node in self._nodes if node.active and node.leaf]

    def parent(self, pid: PartitionId) -> Optional[PartitionId]:
        return self._get(pid, "parent").parent

    def node(self, pid: PartitionId) -> KdNode:
        return self._get(pid, "node")

    def population(self, pid: PartitionId) -> int:
        node = self._get(pid, "population")
        return node.end - node.begin

    @staticmethod
    def _partition_range(
        table: IndexTable, start: int, end: int, axis: DimensionId, pivot: float
    ) -> int:
        """Move points ``< pivot`` before the rest; return the first ``>=`` slot."""
        i = start
        j = end - 1
        while i <= j:
            if table.dim(i, axis) < pivot:
                i += 1
            else:
                while j >= i and table.dim(j, axis) >= pivot:
                    j -= 1
                if i < j:
                    table.swap_positions(i, j)
                    i += 1
                    j -= 1
        return i

    def split_node(
        self, table: IndexTable, pid: PartitionId, axis: DimensionId, pivot: float
    ) -> Optional[tuple[PartitionId, PartitionId]]:
        """Split leaf ``pid`` about ``(axis, pivot)``, retiring it.

        Returns the ``(left, right)`` child ids, or ``None`` when every point
        falls on one side; the node is then left an unchanged leaf.
        """
        node = self._get(pid, "split_node")
        split = self._partition_range(table, node.begin, node.end, axis, pivot)
        if split == node.begin or split == node.end:
            return None

        left_id = len(self._nodes)
        right_id = left_id + 1

        left_bounds = node.bounds.copy()
        left_bounds.dims[axis].high = pivot
        right_bounds = node.bounds.copy()
        right_bounds.dims[axis].low = pivot

        self._nodes.append(
            KdNode(id=left_id, bounds=left_bounds, begin=node.begin, end=split, parent=pid)
        )
        self._nodes.append(
            KdNode(id=right_id, bounds=right_bounds, begin=split, end=node.end, parent=pid)
        )

        node.leaf = False
        node.active = False
        node.axis = axis
        node.pivot = pivot
        node.left = left_id
        node.right = right_id
        return left_id, right_id