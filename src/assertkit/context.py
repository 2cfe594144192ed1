"""Cancellable, deadline-bearing execution contexts.

A Context is handed to every evaluation call. The handler checks it once,
after taking its lock, and writes a cancellation notice instead of a
failure report when the context is already done.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from assertkit.errors import Cancelled, ContextError, DeadlineExceeded

CancelFunc = Callable[[], None]


class Context:
    """A node in a tree of cancellation scopes.

    Cancelling a context does not touch its parent, but a child reports
    its parent's error once the parent is done.
    """

    def __init__(
        self, parent: Context | None = None, deadline: float | None = None
    ) -> None:
        self._parent = parent
        self._deadline = deadline
        self._lock = threading.Lock()
        self._err: ContextError | None = None

    @property
    def deadline(self) -> float | None:
        """Earliest ``time.monotonic()`` deadline along the parent chain."""
        deadlines = []
        ctx: Context | None = self
        while ctx is not None:
            if ctx._deadline is not None:
                deadlines.append(ctx._deadline)
            ctx = ctx._parent
        return min(deadlines) if deadlines else None

    def cancel(self, reason: str | None = None) -> None:
        with self._lock:
            if self._err is None:
                self._err = Cancelled(reason)

    def err(self) -> ContextError | None:
        """Return why this context is done, or None while it is live."""
        with self._lock:
            if self._err is not None:
                return self._err
            if self._deadline is not None and time.monotonic() >= self._deadline:
                self._err = DeadlineExceeded()
                return self._err
        if self._parent is not None:
            return self._parent.err()
        return None

    def done(self) -> bool:
        return self.err() is not None

    def __repr__(self) -> str:
        state = "live" if self._err is None else str(self._err)
        return f"Context(deadline={self._deadline!r}, state={state!r})"


class _Background(Context):
    def cancel(self, reason: str | None = None) -> None:
        pass


_BACKGROUND = _Background()


def background() -> Context:
    """The root context. It is never cancelled and has no deadline."""
    return _BACKGROUND


def with_cancel(parent: Context | None) -> tuple[Context, CancelFunc]:
    ctx = Context(parent or background())
    return ctx, ctx.cancel


def with_timeout(parent: Context | None, seconds: float) -> tuple[Context, CancelFunc]:
    """Derive a child that expires ``seconds`` from now.

    The returned cancel function releases the child early; calling it
    after the deadline passed is harmless.
    """
    ctx = Context(parent or background(), deadline=time.monotonic() + seconds)
    return ctx, ctx.cancel
