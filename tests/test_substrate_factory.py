import pytest

from a3index.access_path import SubstrateConfig
from a3index.adaptive_kd import AdaptiveKdAccessPath
from a3index.geometry import HyperRect
from a3index.index_table import IndexTable
from a3index.static_kd import StaticKdAccessPath
from a3index.substrate_factory import SubstrateFactory


def config():
    return SubstrateConfig(domain_bounds=HyperRect([(0.0, 10.0), (0.0, 10.0)]))


def _table():
    return IndexTable.from_columns(
        [[float(i % 10) for i in range(50)], [float(i // 5) for i in range(50)]]
    )


def test_instance_is_shared():
    first = SubstrateFactory.instance()
    second = SubstrateFactory.instance()
    assert first is second
    assert second.registered_ids() == first.registered_ids()
    assert second.is_registered("adaptive_kd") is True


def test_builtin_substrates_registered_sorted():
    ids = SubstrateFactory.instance().registered_ids()
    assert "adaptive_kd" in ids
    assert "static_kd" in ids
    assert ids == sorted(ids)


def test_create_returns_requested_substrate():
    factory = SubstrateFactory.instance()

    adaptive = factory.create("adaptive_kd", config())
    assert isinstance(adaptive, AdaptiveKdAccessPath)
    table = _table()
    adaptive.prepare(table)
    adaptive.ensure_built()
    assert adaptive.active_partitions() == [0]
    assert adaptive.partition(0).end == len(table)

    static_cfg = SubstrateConfig(
        domain_bounds=HyperRect([(0.0, 10.0), (0.0, 10.0)]), leaf_min_size=4
    )
    static = factory.create("static_kd", static_cfg)
    assert isinstance(static, StaticKdAccessPath)
    static_table = _table()
    static.prepare(static_table)
    static.ensure_built()
    assert len(static.active_partitions()) > 1


def test_unknown_id_raises():
    factory = SubstrateFactory.instance()
    assert not factory.is_registered("no_such_substrate")
    with pytest.raises(ValueError):
        factory.create("no_such_substrate", config())


def test_duplicate_registration_raises():
    factory = SubstrateFactory.instance()
    with pytest.raises(ValueError):
        factory.register_substrate("adaptive_kd", AdaptiveKdAccessPath)


def test_fresh_factory_registers_custom_builder():
    factory = SubstrateFactory()
    assert factory.registered_ids() == []
    seen = []

    def builder(cfg):
        seen.append(cfg)
        return StaticKdAccessPath(cfg)

    factory.register_substrate("custom", builder)
    assert factory.is_registered("custom")
    cfg = config()
    path = factory.create("custom", cfg)
    assert seen == [cfg]
    assert path.is_fully_built is True


def test_every_registered_substrate_covers_table():
    factory = SubstrateFactory.instance()
    for substrate_id in factory.registered_ids():
        table = _table()
        path = factory.create(substrate_id, config())
        path.prepare(table)
        path.ensure_built()
        covered = sorted(
            pos
            for pid in path.active_partitions()
            for pos in range(path.partition(pid).begin, path.partition(pid).end)
        )
        assert covered == list(range(len(table)))