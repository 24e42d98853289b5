import json

import infrastructure.realtime.dispatcher as dispatcher_module
from infrastructure.realtime.connection_registry import ConnectionRegistry
from infrastructure.realtime.dispatcher import BroadcastDispatcher


def _setup(*conns):
    registry = ConnectionRegistry()
    for conn in conns:
        registry.register(conn)
    return registry, BroadcastDispatcher(registry)


def test_broadcast_with_no_connections_is_noop():
    registry, dispatcher = _setup()
    dispatcher.broadcast("event_created", {"id": "e1"})
    assert registry.size() == 0


def test_message_format_is_exact(make_conn):
    a, b = make_conn("a"), make_conn("b")
    _, dispatcher = _setup(a, b)

    dispatcher.broadcast("event_created", {"id": "e1"})

    expected = '{"event":"event_created","data":{"id":"e1"}}'
    assert a.received == [expected]
    assert b.received == [expected]


def test_failing_connections_are_pruned_without_raising(make_conn):
    good = [make_conn(f"ok{i}") for i in range(4)]
    bad = [make_conn(f"bad{i}", fail=True) for i in range(3)]
    registry, dispatcher = _setup(*good, *bad)

    dispatcher.broadcast("event_updated", {"id": 1})

    assert registry.size() == len(good)
    assert all(len(c.received) == 1 for c in good)
    assert all(c not in registry for c in bad)


def test_serializes_once_per_broadcast(make_conn, monkeypatch):
    calls = []
    original = dispatcher_module.encode_message

    def spy(event_name, payload):
        calls.append(event_name)
        return original(event_name, payload)

    monkeypatch.setattr(dispatcher_module, "encode_message", spy)
    conns = [make_conn(str(i)) for i in range(10)]
    _, dispatcher = _setup(*conns)

    dispatcher.broadcast("rsvp_updated", {"id": 7, "status": "GOING"})

    assert calls == ["rsvp_updated"]
    assert all(len(c.received) == 1 for c in conns)


def test_closed_connection_is_pruned_and_others_receive(make_conn):
    a, b, c = make_conn("A"), make_conn("B"), make_conn("C")
    registry, dispatcher = _setup(a, b, c)
    b.is_open = False  # closed out-of-band, never unregistered

    dispatcher.broadcast("event_deleted", {"eventId": "e1"})

    message = {"event": "event_deleted", "data": {"eventId": "e1"}}
    assert [json.loads(m) for m in a.received] == [message]
    assert [json.loads(m) for m in c.received] == [message]
    assert b.received == []
    assert b not in registry
    assert registry.size() == 2


def test_sequential_broadcasts_arrive_in_call_order(make_conn):
    a = make_conn("a")
    _, dispatcher = _setup(a)

    dispatcher.broadcast("event_created", {"id": 1})
    dispatcher.broadcast("event_updated", {"id": 1, "title": "changed"})

    assert [json.loads(m)["event"] for m in a.received] == ["event_created", "event_updated"]


def test_wrappers_use_fixed_event_names(make_conn):
    a = make_conn("a")
    _, dispatcher = _setup(a)

    dispatcher.broadcast_event_created({"id": 1})
    dispatcher.broadcast_event_updated({"id": 1})
    dispatcher.broadcast_rsvp_updated({"id": 9})
    dispatcher.broadcast_event_deleted(1)

    received = [json.loads(m) for m in a.received]
    assert [m["event"] for m in received] == [
        "event_created",
        "event_updated",
        "rsvp_updated",
        "event_deleted",
    ]
    assert received[-1]["data"] == {"eventId": 1}


def test_invalid_message_never_raises(make_conn):
    a = make_conn("a")
    registry, dispatcher = _setup(a)

    dispatcher.broadcast("not_an_event", {"id": 1})
    dispatcher.broadcast("event_created", object())

    assert a.received == []
    assert registry.size() == 1


def test_serializes_once_with_no_connections(monkeypatch):
    calls = []
    original = dispatcher_module.encode_message

    def spy(event_name, payload):
        calls.append(event_name)
        return original(event_name, payload)

    monkeypatch.setattr(dispatcher_module, "encode_message", spy)
    _, dispatcher = _setup()

    dispatcher.broadcast("event_created", {"id": 1})

    assert calls == ["event_created"]


def test_encoder_failure_is_logged_not_raised(make_conn, monkeypatch, caplog):
    def broken(event_name, payload):
        raise RuntimeError("encoder exploded")

    monkeypatch.setattr(dispatcher_module, "encode_message", broken)
    a = make_conn("a")
    registry, dispatcher = _setup(a)

    dispatcher.broadcast("event_created", {"id": 1})
    dispatcher.broadcast_event_deleted(1)

    assert a.received == []
    assert registry.size() == 1
    failures = [
        r.msg for r in caplog.records
        if isinstance(r.msg, dict) and r.msg.get("event") == "broadcast_failed"
    ]
    assert [f["event_name"] for f in failures] == ["event_created", "event_deleted"]
