"""Single-root adaptive KD-tree substrate.

``ensure_built`` creates one root partition over the whole table; from there
the structure grows by query-bound cracking. Each ``refine`` splits a boundary
partition that exceeds the refinement threshold, isolating the query
rectangle so that later queries over the same region reuse fully contained
children.

Cracking permutes positions with an unstable in-place partition, so the
ranges are not in row-id order.
"""

from __future__ import annotations

import dataclasses
from typing import Optional

from a3index.access_path import AdaptiveAccessPath, SubstrateConfig
from a3index.geometry import Containment, HyperRect, PartitionId, PartitionView
from a3index.index_table import IndexTable
from a3index.kd_tree import KdTree


class AdaptiveKdAccessPath(AdaptiveAccessPath):
    """A KD-tree that starts as one leaf and is cracked by the queries it serves."""

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

    def ensure_built(self) -> None:
        if self._built:
            return
        if self._table is None:
            raise RuntimeError("AdaptiveKdAccessPath.ensure_built before prepare")
        # One root partition owning the whole table; its bounds are the domain.
        self._tree.reset(self._config.domain_bounds, len(self._table))
        self._built = True

    def roots(self) -> list[PartitionId]:
        return self._tree.roots()

    def children(self, pid: PartitionId) -> list[PartitionId]:
        return self._tree.children(pid)

    def is_leaf(self, pid: PartitionId) -> bool:
        return self._tree.is_leaf(pid)

    def classify(self, pid: PartitionId, q: HyperRect) -> Containment:
        return self._tree.classify(pid, q)

    def _crack_to_query(self, pid: PartitionId, q: HyperRect) -> list[PartitionId]:
        """Isolate ``q`` from one boundary leaf and return the retired parents.

        Cracks at each axis lower bound (keeping the ``>=`` child) and then at
        each upper bound (keeping the ``<`` child), stopping as soon as the
        surviving child is no larger than the refinement threshold. Every
        discarded child lies wholly outside ``q``.
        """
        threshold = self._config.refinement_threshold
        retired: list[PartitionId] = []
        current = pid
        for keep_upper, bound_of in ((True, lambda r: r.low), (False, lambda r: r.high)):
            for axis, bounds in enumerate(q.dims):
                if self._tree.population(current) <= threshold:
                    return retired
                split = self._tree.split_node(
                    self._table, current, axis, bound_of(bounds)
                )
                if split is not None:
                    retired.append(current)
                    current = split[1] if keep_upper else split[0]
        return retired

    def refine(
        self, pid: PartitionId, q: HyperRect, table: IndexTable
    ) -> list[PartitionId]:
        self.ensure_built()
        if table is not self._table:
            raise ValueError(
                "AdaptiveKdAccessPath.refine table differs from prepared table"
            )
        if self._tree.population(pid) <= self._config.refinement_threshold:
            # Too small to crack: the caller treats it as a boundary leaf.
            return []
        return self._crack_to_query(pid, q)

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
        return True

    @property
    def is_fully_built(self) -> bool:
        return False