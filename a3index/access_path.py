"""The adaptive access-path abstraction the query layer descends.

An access path organises the index table's points into disjoint, contiguous
partitions and exposes navigation primitives: entry roots, one-level
children, classification against a query rectangle, and refinement
(cracking) of a partial partition. It is geometry and partitioning only; it
never reads measures.

Construction is split in two so that a substrate's build cost is charged to
the first query: ``prepare`` records the table at load time without
partitioning, and ``ensure_built`` performs the one-time build on its first
call and returns immediately afterwards.

Invariants every substrate keeps: ids are dense and never reused; each
partition owns a contiguous ``[begin, end)``; active partitions are pairwise
disjoint and cover the whole table. Retired partitions remain reachable
through ``partition`` and ``parent`` but are inactive.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Optional

from a3index.geometry import Containment, HyperRect, PartitionId, PartitionView
from a3index.index_table import IndexTable


@dataclass
class SubstrateConfig:
    """Construction parameters; a substrate uses only the fields it needs."""

    domain_bounds: HyperRect = field(default_factory=HyperRect)
    refinement_threshold: int = 1024
    stochastic_cracking: bool = False
    leaf_min_size: int = 1024


class AdaptiveAccessPath(abc.ABC):
    """Navigation and refinement interface shared by all substrates."""

    @abc.abstractmethod
    def prepare(self, table: IndexTable) -> None:
        """Record the (non-owned) table; no partitioning, no measure reads."""

    @abc.abstractmethod
    def ensure_built(self) -> None:
        """One-time internal construction on the first call; idempotent."""

    @abc.abstractmethod
    def roots(self) -> list[PartitionId]:
        """Entry points of the descent."""

    @abc.abstractmethod
    def children(self, pid: PartitionId) -> list[PartitionId]:
        """Children one level down, left to right; empty for a leaf."""

    @abc.abstractmethod
    def is_leaf(self, pid: PartitionId) -> bool:
        """True iff ``pid`` has no children."""

    @abc.abstractmethod
    def classify(self, pid: PartitionId, q: HyperRect) -> Containment:
        """Classify one partition's bounds against ``q``."""

    @abc.abstractmethod
    def refine(
        self, pid: PartitionId, q: HyperRect, table: IndexTable
    ) -> list[PartitionId]:
        """Crack partition ``pid`` toward ``q``; return the retired parent ids."""

    @abc.abstractmethod
    def partition(self, pid: PartitionId) -> PartitionView:
        """Snapshot of a partition, valid for retired ids too."""

    @abc.abstractmethod
    def active_partitions(self) -> list[PartitionId]:
        """Ids of the currently active leaf partitions."""

    @abc.abstractmethod
    def parent(self, pid: PartitionId) -> Optional[PartitionId]:
        """The refinement parent, or ``None`` for a root."""

    @property
    @abc.abstractmethod
    def ranges_are_row_id_ordered(self) -> bool:
        """True iff active partitions' positions are in ascending row-id order."""

    @property
    @abc.abstractmethod
    def supports_refine(self) -> bool:
        """True iff ``refine`` can grow the structure under queries."""

    @property
    @abc.abstractmethod
    def is_fully_built(self) -> bool:
        """True iff ``ensure_built`` materialises a stable, query-independent tree."""