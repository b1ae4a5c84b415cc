"""Query request, result and dataset schema types.

Exact and approximate answers share one result type: an exact estimate is an
approximate one with a zero-width interval.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from a3index.geometry import HyperRect, MeasureId


class AggregateOp(enum.Enum):
    SUM = "sum"
    COUNT_MEASURE = "count_measure"
    AVG = "avg"
    COUNT_STAR = "count_star"


@dataclass
class AccuracyTarget:
    """Requested accuracy; ``relative_error <= 0`` asks for an exact answer."""

    relative_error: float = 0.0
    confidence: float = 0.95


@dataclass
class RangeQuery:
    """A predicate rectangle plus the accuracy wanted for this query."""

    predicate: HyperRect
    target: AccuracyTarget = field(default_factory=AccuracyTarget)


@dataclass
class AggregateEstimate:
    """One aggregate's answer with its confidence interval."""

    op: AggregateOp
    measure_id: MeasureId = 0
    estimate: float = 0.0
    ci_low: float = 0.0
    ci_high: float = 0.0
    relative_half_width: float = 0.0
    effective_df: float = 0.0
    exact: bool = False

    @classmethod
    def exact_value(
        cls, op: AggregateOp, measure_id: MeasureId, value: float
    ) -> "AggregateEstimate":
        """An exact answer: the interval collapses onto ``value``."""
        return cls(
            op=op,
            measure_id=measure_id,
            estimate=value,
            ci_low=value,
            ci_high=value,
            relative_half_width=0.0,
            effective_df=0.0,
            exact=True,
        )


@dataclass
class QueryMetrics:
    """Per-query timings, work counters and outcome taxonomy."""

    query_ordinal: int = 0
    method: str = ""
    substrate: str = ""
    status: str = ""
    stop_reason: str = ""
    exactify_cause: str = "none"
    latency_ms: float = 0.0
    t_locate_ms: float = 0.0
    t_decompose_ms: float = 0.0
    t_sample_ms: float = 0.0
    t_measure_read_ms: float = 0.0
    t_estimate_ms: float = 0.0
    t_exactify_ms: float = 0.0
    rows_examined: int = 0
    measure_reads: int = 0
    sampled_rows: int = 0
    exactified_rows: int = 0
    partitions_touched: int = 0
    partitions_split: int = 0
    exact_contributors: int = 0
    reusable_strata: int = 0
    query_local_strata: int = 0
    query_local_exact_contributors: int = 0
    summary_reuse_hits: int = 0
    adaptive_rounds: int = 0
    target_satisfied: bool = False
    pre_exactification_error_bound: float = 0.0
    sampling_seed: int = 0


@dataclass
class QueryResult:
    aggregates: list[AggregateEstimate] = field(default_factory=list)
    metrics: QueryMetrics = field(default_factory=QueryMetrics)

    def find(self, op: AggregateOp, measure_id: MeasureId = 0) -> AggregateEstimate:
        """First aggregate for ``op`` and ``measure_id`` (COUNT(*) ignores the id)."""
        for estimate in self.aggregates:
            if estimate.op is op and (
                op is AggregateOp.COUNT_STAR or estimate.measure_id == measure_id
            ):
                return estimate
        raise KeyError(f"no aggregate {op.value} for measure {measure_id}")


@dataclass
class DatasetSchema:
    """What one index instance knows about its data; fixed for its lifetime."""

    dimension_names: list[str] = field(default_factory=list)
    measure_names: list[str] = field(default_factory=list)
    domain_bounds: HyperRect = field(default_factory=HyperRect)
    object_count: int = 0
    binary_manifest_path: str = ""