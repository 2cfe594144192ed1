"""Tests for contextual data and flush hooks."""

import threading

import pytest

from assertkit.registry import (
    AssertData,
    CallableData,
    DataRegistry,
    FlushHooks,
    StaticData,
    as_flush_hook,
)


def test_static_data_dumps_str():
    assert StaticData(42).dump() == "42"
    assert isinstance(StaticData(1), AssertData)


def test_callable_data_is_reevaluated():
    state = {"n": 0}

    def read():
        state["n"] += 1
        return state["n"]

    data = CallableData(read)
    assert data.dump() == "1"
    assert data.dump() == "2"


def test_custom_assert_data():
    class Session:
        def dump(self):
            return "session-9"

    registry = DataRegistry()
    registry.add("session", Session())
    assert registry.snapshot() == {"session": "session-9"}


def test_registry_add_remove():
    registry = DataRegistry()
    registry.add("a", StaticData(1))
    registry.add("b", StaticData(2))
    assert "a" in registry
    assert len(registry) == 2
    registry.remove("a")
    assert registry.keys() == ["b"]
    registry.remove("missing")


def test_registry_rejects_non_dumpable():
    with pytest.raises(TypeError, match="dump"):
        DataRegistry().add("x", 5)


def test_registry_snapshot_while_mutating():
    registry = DataRegistry()
    stop = threading.Event()

    def mutate():
        i = 0
        while not stop.is_set():
            registry.add(f"k{i % 50}", StaticData(i))
            registry.remove(f"k{(i + 25) % 50}")
            i += 1

    t = threading.Thread(target=mutate)
    t.start()
    try:
        for _ in range(200):
            registry.snapshot()
    finally:
        stop.set()
        t.join()


def test_as_flush_hook_accepts_callables_and_flushers(mocker):
    fn = mocker.Mock(spec=lambda: None)
    assert as_flush_hook(fn) is fn

    flusher = mocker.Mock()
    assert as_flush_hook(flusher) is flusher.flush


def test_as_flush_hook_rejects_other_objects():
    with pytest.raises(TypeError):
        as_flush_hook(42)


def test_flush_hooks_run_in_order():
    calls = []
    hooks = FlushHooks()
    hooks.add(lambda: calls.append(1))
    hooks.add(lambda: calls.append(2))
    hooks.run()
    assert calls == [1, 2]
    assert len(hooks) == 2
