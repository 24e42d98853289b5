from infrastructure.realtime.connection_registry import ConnectionRegistry


def test_register_is_idempotent(make_conn):
    registry = ConnectionRegistry()
    a = make_conn("a")
    registry.register(a)
    registry.register(a)
    assert registry.size() == 1
    assert a in registry


def test_unregister_absent_is_noop(make_conn):
    registry = ConnectionRegistry()
    registry.unregister(make_conn("ghost"))
    assert registry.size() == 0


def test_size_tracks_distinct_members(make_conn):
    registry = ConnectionRegistry()
    a, b, c = make_conn("a"), make_conn("b"), make_conn("c")
    for conn in (a, b, a, c, b):
        registry.register(conn)
    assert registry.size() == 3

    registry.unregister(b)
    registry.unregister(b)
    assert registry.size() == 2
    assert len(registry) == 2
    assert set(registry.snapshot()) == {a, c}


def test_snapshot_is_a_copy(make_conn):
    registry = ConnectionRegistry()
    a = make_conn("a")
    registry.register(a)
    snap = registry.snapshot()
    registry.unregister(a)
    assert snap == [a]
    assert registry.snapshot() == []
