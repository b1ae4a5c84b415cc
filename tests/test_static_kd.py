import numpy as np
import pytest

from a3index.access_path import SubstrateConfig
from a3index.geometry import Containment, HyperRect
from a3index.index_table import IndexTable
from a3index.static_kd import StaticKdAccessPath

BOUNDS = HyperRect([(0.0, 1.0), (0.0, 1.0)])


def random_table(n=500, seed=7):
    rng = np.random.default_rng(seed)
    return IndexTable.from_columns([rng.random(n), rng.random(n)])


def built_path(table, leaf_min_size, bounds=BOUNDS):
    path = StaticKdAccessPath(
        SubstrateConfig(domain_bounds=bounds, leaf_min_size=leaf_min_size)
    )
    path.prepare(table)
    path.ensure_built()
    return path


def check_partition_invariants(path, n):
    covered = [False] * n
    for pid in path.active_partitions():
        pv = path.partition(pid)
        assert pv.active
        for p in range(pv.begin, pv.end):
            assert not covered[p]
            covered[p] = True
    assert all(covered)


def test_build_splits_until_leaf_min_size():
    table = random_table()
    path = built_path(table, leaf_min_size=16)
    active = path.active_partitions()
    assert len(active) > 1
    for pid in active:
        assert path.partition(pid).population <= 16
    check_partition_invariants(path, len(table))


def test_points_lie_within_their_leaf_bounds():
    table = random_table()
    path = built_path(table, leaf_min_size=16)
    for pid in path.active_partitions():
        pv = path.partition(pid)
        for pos in range(pv.begin, pv.end):
            assert pv.bounds.contains_point(table.point(pos))


def test_one_dimensional_distinct_values_split_to_singletons():
    xs = [7.0, 3.0, 5.0, 1.0, 6.0, 0.0, 2.0, 4.0]
    table = IndexTable.from_columns([xs])
    path = built_path(table, leaf_min_size=1, bounds=HyperRect([(0.0, 8.0)]))
    active = path.active_partitions()
    assert len(active) == len(xs)
    assert all(path.partition(pid).population == 1 for pid in active)


def test_degenerate_axis_stays_a_leaf():
    table = IndexTable.from_columns([[0.5] * 40, [0.5] * 40])
    path = built_path(table, leaf_min_size=4)
    assert path.active_partitions() == [0]
    assert path.is_leaf(0)


def test_small_table_is_single_root():
    table = random_table(n=10)
    path = built_path(table, leaf_min_size=1024)
    assert path.active_partitions() == [0]
    assert path.partition(0).end == len(table)


def test_refine_is_noop():
    table = random_table()
    path = built_path(table, leaf_min_size=16)
    before_active = path.active_partitions()
    before_rows = [table.row_id(p) for p in range(len(table))]
    q = HyperRect([(0.2, 0.6), (0.1, 0.4)])
    assert path.refine(0, q, table) == []
    assert path.active_partitions() == before_active
    assert [table.row_id(p) for p in range(len(table))] == before_rows


def test_refine_with_other_table_raises():
    table = random_table()
    path = built_path(table, leaf_min_size=16)
    with pytest.raises(ValueError):
        path.refine(0, BOUNDS, random_table())


def test_ensure_built_before_prepare_raises():
    path = StaticKdAccessPath(SubstrateConfig(domain_bounds=BOUNDS))
    with pytest.raises(RuntimeError):
        path.ensure_built()


def test_ensure_built_is_idempotent():
    table = random_table()
    path = built_path(table, leaf_min_size=16)
    before = path.active_partitions()
    path.ensure_built()
    assert path.active_partitions() == before


def test_capabilities():
    path = StaticKdAccessPath(SubstrateConfig(domain_bounds=BOUNDS))
    assert path.supports_refine is False
    assert path.is_fully_built is True
    assert path.ranges_are_row_id_ordered is False


def test_children_parent_inverse_and_classification():
    table = random_table()
    path = built_path(table, leaf_min_size=16)
    assert path.roots() == [0]
    assert path.parent(0) is None
    q = HyperRect([(0.25, 0.75), (0.25, 0.75)])
    for leaf in path.active_partitions():
        node = leaf
        while path.parent(node) is not None:
            up = path.parent(node)
            assert node in path.children(up)
            assert not path.partition(up).active
            node = up
        assert node == 0
        if path.classify(leaf, q) is Containment.DISJOINT:
            pv = path.partition(leaf)
            for pos in range(pv.begin, pv.end):
                assert not q.contains_point(table.point(pos))


def test_unknown_partition_raises():
    path = built_path(random_table(), leaf_min_size=16)
    with pytest.raises(IndexError):
        path.partition(10**6)