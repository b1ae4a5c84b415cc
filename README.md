# a3index

Spatial access paths for range-aggregate queries.

`a3index` splits the points of a dataset's dimension columns into
contiguous partitions. It answers the geometric questions a range-query
layer asks: which partitions lie inside, outside or across a query
rectangle, and how a partition can be split further. It provides:

- **Geometry** (`a3index.geometry`). Every range is half-open: a point `x`
  lies in a range when `low <= x < high`, so two rectangles that abut do not
  overlap. The module has `Range`, `HyperRect`, `Containment` and
  `PartitionView`.
- **An index table** (`a3index.index_table.IndexTable`). It holds the point
  coordinates by position, together with the row id each point carries.
  Positions can be swapped in place, and a point's row id moves with it.
- **A KD node store** (`a3index.kd_tree.KdTree`). It splits a leaf in place
  about an axis and a pivot value. Retired parents are kept so that the
  ancestry of a partition can still be looked up.
- **Access paths** that share the `AdaptiveAccessPath` interface
  (`a3index.access_path`):
  - `AdaptiveKdAccessPath` (`a3index.adaptive_kd`) starts as a single root
    and cracks partitions toward the bounds of each query.
  - `StaticKdAccessPath` (`a3index.static_kd`) builds a complete KD-tree on
    first use, splitting at the median on each axis in turn.
  - Both can be created by id through `SubstrateFactory`
    (`a3index.substrate_factory`).
- **Query types** (`a3index.query`): `RangeQuery`, `AccuracyTarget`,
  `AggregateOp`, `AggregateEstimate`, `QueryMetrics`, `QueryResult` and
  `DatasetSchema`.
- **Seed derivation** (`a3index.rng`). `mix_seed` folds the query, round,
  stratum and target of a sampling draw into one reproducible 64-bit seed.
  It is built on `seed_seq_generate`, which uses the standard seed-sequence
  mixing algorithm.

## Installation

Python 3.10 or newer is required. The only dependency is `numpy`.

## Geometry

```python
from a3index.geometry import HyperRect, Range, rect

r = HyperRect([Range(0.0, 1.0), Range(0.0, 1.0)])
r.contains_point([0.0, 0.0])                      # True: the low edge is inside
r.contains_point([1.0, 0.5])                      # False: the high edge is outside
r.intersects(rect([(1.0, 2.0), (0.0, 1.0)]))      # False: the rectangles abut
r.contains_rect(rect([(0.2, 0.8), (0.0, 1.0)]))   # True
```

The predicates return `False` when the two sides have different numbers of
dimensions.

## The index table

```python
from a3index.index_table import IndexTable

table = IndexTable.from_columns([
    [1, 2, 3, 4, 5, 6, 7, 8, 9],   # x
    [9, 8, 7, 6, 5, 4, 3, 2, 1],   # y
])
len(table)            # 9
table.point(0)        # (1.0, 9.0)
table.row_id(0)       # 0
table.swap_positions(0, 8)
table.row_id(0)       # 8
```

`table.points` and `table.row_ids` are read-only numpy views in position
order.

## An adaptive KD access path

```python
from a3index.access_path import SubstrateConfig
from a3index.adaptive_kd import AdaptiveKdAccessPath
from a3index.geometry import Containment, HyperRect, Range
from a3index.index_table import IndexTable

table = IndexTable.from_columns([
    [1, 2, 3, 4, 5, 6, 7, 8, 9],
    [9, 8, 7, 6, 5, 4, 3, 2, 1],
])
config = SubstrateConfig(
    domain_bounds=HyperRect([Range(0.0, 10.0), Range(0.0, 10.0)]),
    refinement_threshold=2,
)

path = AdaptiveKdAccessPath(config)
path.prepare(table)
path.ensure_built()

q = HyperRect([Range(2.0, 6.0), Range(2.0, 6.0)])
if path.classify(0, q) is Containment.PARTIAL:
    retired = path.refine(0, q, table)   # ids of the parents that were split

for pid in path.active_partitions():
    view = path.partition(pid)
    print(pid, view.begin, view.end, view.population, path.classify(pid, q))
```

Each active partition owns a contiguous `[begin, end)` slice of the index
table, and together the active partitions cover every position exactly
once. Retired parents can still be looked up through `partition()` and
`parent()`; `children()` and `roots()` walk the tree from the top.

Calling `ensure_built()` before `prepare()` raises `RuntimeError`. Passing
`refine()` a table other than the prepared one raises `ValueError`. Looking
up an unknown partition id raises `IndexError`.

A partition whose population is at or below `refinement_threshold` is not
cracked. `StaticKdAccessPath` stops splitting a node once its population is
at or below `leaf_min_size`, and its `refine()` never changes anything. The
properties `supports_refine`, `is_fully_built` and
`ranges_are_row_id_ordered` tell the two substrates apart.

To create a substrate by id, use the factory:

```python
from a3index.substrate_factory import SubstrateFactory

factory = SubstrateFactory.instance()
factory.registered_ids()                 # ['adaptive_kd', 'static_kd']
path = factory.create("static_kd", config)
```

`register_substrate` adds a builder under a new id. An id that is already
registered, or one that is unknown to `create`, raises `ValueError`.

## Query and result types

```python
from a3index.query import AggregateEstimate, AggregateOp, QueryResult

result = QueryResult(aggregates=[
    AggregateEstimate.exact_value(AggregateOp.SUM, 0, 42.0),
    AggregateEstimate.exact_value(AggregateOp.COUNT_STAR, 0, 7.0),
])
result.find(AggregateOp.SUM, 0).estimate        # 42.0
result.find(AggregateOp.COUNT_STAR).ci_high     # 7.0
```

`exact_value` produces a zero-width interval with `exact=True`. `find`
raises `KeyError` when no aggregate matches.

## Seeds

```python
from a3index.rng import mix_seed

seed = mix_seed(query_ordinal=1, round_=0, stratum_ordinal=3, target=64)
```

The same inputs always give the same seed.

## What the package does not do

The package is the geometric and partitioning layer only. It has:

- no storage layer: it does not read or write dataset manifests or column
  files, so an `IndexTable` must be built from columns already in memory;
- no query engine and no exact full-scan aggregator: the query types
  describe requests and answers, but nothing in the package computes a
  `QueryResult` from data;
- no workload generator;
- no command-line tools.