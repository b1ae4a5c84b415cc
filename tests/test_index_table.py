import pytest

from a3index.geometry import rect
from a3index.index_table import IndexTable


def _table():
    return IndexTable.from_columns([[1.0, 2.0, 3.0], [9.0, 8.0, 7.0]])


def test_from_columns_interleaves_and_numbers_rows():
    t = _table()
    assert len(t) == 3
    assert t.dimensions == 2
    assert t.point(0) == (1.0, 9.0)
    assert t.point(2) == (3.0, 7.0)
    assert [t.row_id(p) for p in range(len(t))] == [0, 1, 2]
    assert t.dim(1, 1) == 8.0


def test_from_columns_rejects_empty_and_mismatched():
    with pytest.raises(ValueError):
        IndexTable.from_columns([])
    with pytest.raises(ValueError):
        IndexTable.from_columns([[1.0, 2.0], [1.0]])


def test_from_columns_with_no_rows():
    t = IndexTable.from_columns([[], []])
    assert len(t) == 0
    assert t.dimensions == 2


def test_constructor_validation():
    with pytest.raises(ValueError):
        IndexTable([1.0, 2.0], [0, 1], 0)
    with pytest.raises(ValueError):
        IndexTable([1.0, 2.0, 3.0], [0], 2)
    with pytest.raises(ValueError):
        IndexTable([1.0, 2.0, 3.0, 4.0], [0], 2)


def test_swap_moves_point_with_row_id():
    t = _table()
    t.swap_positions(0, 2)
    assert t.point(0) == (3.0, 7.0)
    assert t.point(2) == (1.0, 9.0)
    assert t.row_id(0) == 2
    assert t.row_id(2) == 0
    assert t.point(1) == (2.0, 8.0) and t.row_id(1) == 1


def test_swap_same_position_is_noop():
    t = _table()
    t.swap_positions(1, 1)
    assert t.point(1) == (2.0, 8.0)
    assert t.row_id(1) == 1


def test_swaps_preserve_row_to_point_mapping():
    xs = [float(i) for i in range(10)]
    ys = [float(10 - i) for i in range(10)]
    t = IndexTable.from_columns([xs, ys])
    for a, b in [(0, 9), (3, 4), (9, 1), (5, 5), (2, 7)]:
        t.swap_positions(a, b)
    assert sorted(t.row_ids.tolist()) == list(range(10))
    for p in range(len(t)):
        r = t.row_id(p)
        assert t.point(p) == (xs[r], ys[r])


def test_points_view_is_read_only():
    t = _table()
    with pytest.raises(ValueError):
        t.points[0, 0] = 5.0
    assert t.points.shape == (3, 2)


def test_points_usable_with_rect_predicate():
    t = _table()
    q = rect([(0.0, 2.5), (0.0, 10.0)])
    inside = [t.row_id(p) for p in range(len(t)) if q.contains_point(t.point(p))]
    assert inside == [0, 1]