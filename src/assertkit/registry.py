"""Contextual data attached to every failure report, and flush hooks."""

from __future__ import annotations

import threading
from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class AssertData(Protocol):
    """Anything that can describe itself for a failure report."""

    def dump(self) -> str:
        ...


class StaticData:
    """Wraps a fixed value; dumps its ``str()``."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def dump(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"StaticData({self.value!r})"


class CallableData:
    """Calls ``fn`` on every dump, so reports see the current state."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        self.fn = fn

    def dump(self) -> str:
        return str(self.fn())

    def __repr__(self) -> str:
        return f"CallableData({self.fn!r})"


class DataRegistry:
    """Keyed AssertData entries shared by a handler and its façade views.

    Entries stay until removed. Mutation and snapshots take the
    registry's own lock, so adding data while another thread reports a
    failure is safe.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, AssertData] = {}

    def add(self, key: str, value: AssertData) -> None:
        if not isinstance(value, AssertData):
            raise TypeError(
                f"assert data for {key!r} must provide dump(), got {type(value).__name__}"
            )
        with self._lock:
            self._entries[key] = value

    def remove(self, key: str) -> None:
        """Drop ``key``; unknown keys are ignored."""
        with self._lock:
            self._entries.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Dump every entry now. Nothing is cached between calls."""
        with self._lock:
            entries = list(self._entries.items())
        return {key: value.dump() for key, value in entries}

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


FlushHook = Callable[[], None]


def as_flush_hook(flusher: Any) -> FlushHook:
    """Accept a zero-argument callable or any object with ``flush()``."""
    flush = getattr(flusher, "flush", None)
    if callable(flush):
        return flush
    if callable(flusher):
        return flusher
    raise TypeError(f"flush hook must be callable or have flush(), got {flusher!r}")


class FlushHooks:
    """Ordered list of hooks run before each failure report."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hooks: list[FlushHook] = []

    def add(self, flusher: Any) -> None:
        hook = as_flush_hook(flusher)
        with self._lock:
            self._hooks.append(hook)

    def run(self) -> None:
        with self._lock:
            hooks = list(self._hooks)
        for hook in hooks:
            hook()

    def __len__(self) -> int:
        with self._lock:
            return len(self._hooks)
