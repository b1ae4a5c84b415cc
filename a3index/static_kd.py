"""Fully built, non-adaptive KD-tree substrate: the full-index baseline.

``ensure_built`` performs the complete top-down build in one shot: each node
is split at the median value of a round-robin axis until its population
drops to ``leaf_min_size`` or the axis is degenerate and cannot be split.
``refine`` is a genuine no-op; the structure never adapts.
"""

from __future__ import annotations

import dataclasses
from typing import Optional

import numpy as np

from a3index.access_path import AdaptiveAccessPath, SubstrateConfig
from a3index.geometry import (
    Containment,
    DimensionId,
    HyperRect,
    PartitionId,
    PartitionView,
)
from a3index.index_table import IndexTable
from a3index.kd_tree import KdTree


class StaticKdAccessPath(AdaptiveAccessPath):
    """A KD-tree split on medians once, before the first query returns."""

    def __init__(self, config: SubstrateConfig) -> None:
        self._config = dataclasses.replace(
            config, domain_bounds=config.domain_bounds.copy()
        )
        self._table: Optional[IndexTable] = None
        self._built = False
        self._tree = KdTree()

    @property
    def config(self) -> SubstrateConfig:
        return self._config

    def prepare(self, table: IndexTable) -> None:
        self._table = table
        self._built = False

    def _median_value(self, pid: PartitionId, axis: DimensionId) -> float:
        node = self._tree.node(pid)
        coords = np.array(self._table.points[node.begin:node.end, axis])
        mid = coords.size // 2
        return float(np.partition(coords, mid)[mid])

    def _build(self) -> None:
        # Depth-first, left before right, so node ids follow a pre-order walk.
        dimensions = self._table.dimensions
        leaf_min = self._config.leaf_min_size
        pending: list[tuple[PartitionId, DimensionId]] = [(0, 0)]
        while pending:
            pid, axis = pending.pop()
            if self._tree.population(pid) <= leaf_min:
                continue
            pivot = self._median_value(pid, axis)
            split = self._tree.split_node(self._table, pid, axis, pivot)
            if split is None:
                # Every coordinate on this axis is >= the median: keep a leaf.
                continue
            next_axis = (axis + 1) % dimensions
            left, right = split
            pending.append((right, next_axis))
            pending.append((left, next_axis))

    def ensure_built(self) -> None:
        if self._built:
            return
        if self._table is None:
            raise RuntimeError("StaticKdAccessPath.ensure_built before prepare")
        self._tree.reset(self._config.domain_bounds, len(self._table))
        if len(self._table) > 0 and self._table.dimensions > 0:
            self._build()
        self._built = True

    def roots(self) -> list[PartitionId]:
        return self._tree.roots()

    def children(self, pid: PartitionId) -> list[PartitionId]:
        return self._tree.children(pid)

    def is_leaf(self, pid: PartitionId) -> bool:
        return self._tree.is_leaf(pid)

    def classify(self, pid: PartitionId, q: HyperRect) -> Containment:
        return self._tree.classify(pid, q)

    def refine(
        self, pid: PartitionId, q: HyperRect, table: IndexTable
    ) -> list[PartitionId]:
        self.ensure_built()
        if table is not self._table:
            raise ValueError(
                "StaticKdAccessPath.refine table differs from prepared table"
            )
        # The structure is fixed: nothing is cracked and no parent retires.
        return []

    def partition(self, pid: PartitionId) -> PartitionView:
        return self._tree.partition(pid)

    def active_partitions(self) -> list[PartitionId]:
        return self._tree.active_partitions()

    def parent(self, pid: PartitionId) -> Optional[PartitionId]:
        return self._tree.parent(pid)

    @property
    def ranges_are_row_id_ordered(self) -> bool:
        return False

    @property
    def supports_refine(self) -> bool:
        return False

    @property
    def is_fully_built(self) -> bool:
        return True