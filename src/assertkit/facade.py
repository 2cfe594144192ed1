"""Package-level assertion functions.

Every call here resolves a base handler, folds the call's options over a
snapshot of that handler's configuration, and runs the assertion on a
transient view of the handler. The view shares the base's contextual data,
flush hooks and lock, but not its deferred queue: deferring through these
functions does not accumulate across calls. Use an explicit AssertHandler
when failures need batching.
"""

from __future__ import annotations

import threading
from typing import Any

from assertkit.context import Context
from assertkit.handler import AssertHandler
from assertkit.options import Option, apply_options, no_exit

_default_lock = threading.Lock()
_default_handler: AssertHandler | None = None


def default_handler() -> AssertHandler:
    """The process-wide handler, built on first use.

    It writes to stderr and never terminates the process.
    """
    global _default_handler
    if _default_handler is None:
        with _default_lock:
            if _default_handler is None:
                _default_handler = AssertHandler(exit_func=no_exit)
    return _default_handler


def set_default_handler(handler: AssertHandler) -> None:
    global _default_handler
    with _default_lock:
        _default_handler = handler


def reset_default_handler() -> None:
    """Forget the default handler; the next call builds a fresh one."""
    global _default_handler
    with _default_lock:
        _default_handler = None


def _split_args(args: tuple[Any, ...]) -> tuple[list[Any], list[Option]]:
    data: list[Any] = []
    options: list[Option] = []
    for arg in args:
        if isinstance(arg, Option):
            options.append(arg)
        else:
            data.append(arg)
    return data, options


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


def _contains(haystack: Any, needle: Any) -> bool:
    try:
        return needle in haystack
    except TypeError:
        return False


class Asserter:
    """Stateless assertion entry points over a base handler.

    Trailing arguments mix key/value data with Option modifiers; options
    are picked out by type and applied in order.

    Args:
        base: Handler whose configuration and shared state each call
            starts from. ``None`` means the process default, resolved on
            every call so a later ``set_default_handler`` takes effect.
    """

    def __init__(self, base: AssertHandler | None = None) -> None:
        self._base = base

    @property
    def base(self) -> AssertHandler:
        return self._base if self._base is not None else default_handler()

    def _view(self, options: list[Option], share_deferred: bool = False) -> AssertHandler:
        base = self.base
        config = apply_options(base.config(), options)
        return base.view(config, share_deferred=share_deferred)

    def assert_(self, ctx: Context | None, truth: bool, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).assert_(ctx, truth, msg, *data)

    def assert_with_timeout(
        self, ctx: Context | None, timeout: float, truth: bool, msg: str, *args: Any
    ) -> None:
        data, options = _split_args(args)
        self._view(options).assert_with_timeout(ctx, timeout, truth, msg, *data)

    def nil(self, ctx: Context | None, item: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).nil(ctx, item, msg, *data)

    def not_nil(self, ctx: Context | None, item: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).not_nil(ctx, item, msg, *data)

    def never(self, ctx: Context | None, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).never(ctx, msg, *data)

    def no_error(self, ctx: Context | None, err: BaseException | None, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).no_error(ctx, err, msg, *data)

    def not_empty(self, ctx: Context | None, value: Any, msg: str, *args: Any) -> None:
        """Fail if ``value`` is None or has length zero."""
        data, options = _split_args(args)
        self._view(options).assert_(ctx, not _is_empty(value), msg, "value", value, *data)

    def equal(self, ctx: Context | None, expected: Any, actual: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).assert_(
            ctx, expected == actual, msg, "expected", expected, "actual", actual, *data
        )

    def not_equal(self, ctx: Context | None, expected: Any, actual: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).assert_(
            ctx, expected != actual, msg, "expected", expected, "actual", actual, *data
        )

    def contains(self, ctx: Context | None, haystack: Any, needle: Any, msg: str, *args: Any) -> None:
        """Fail unless ``needle in haystack``. Unsupported types count as absent."""
        data, options = _split_args(args)
        self._view(options).assert_(
            ctx, _contains(haystack, needle), msg, "haystack", haystack, "needle", needle, *data
        )

    def not_contains(self, ctx: Context | None, haystack: Any, needle: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).assert_(
            ctx, not _contains(haystack, needle), msg, "haystack", haystack, "needle", needle, *data
        )

    def true(self, ctx: Context | None, value: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).assert_(ctx, bool(value), msg, "value", value, *data)

    def false(self, ctx: Context | None, value: Any, msg: str, *args: Any) -> None:
        data, options = _split_args(args)
        self._view(options).assert_(ctx, not value, msg, "value", value, *data)

    def process_deferred_assertions(self, ctx: Context | None = None, *options: Option) -> None:
        """Drain the base handler's own deferred queue."""
        self._view(list(options), share_deferred=True).process_deferred_assertions(ctx)


_default_asserter = Asserter()

assert_ = _default_asserter.assert_
assert_with_timeout = _default_asserter.assert_with_timeout
nil = _default_asserter.nil
not_nil = _default_asserter.not_nil
never = _default_asserter.never
no_error = _default_asserter.no_error
not_empty = _default_asserter.not_empty
equal = _default_asserter.equal
not_equal = _default_asserter.not_equal
contains = _default_asserter.contains
not_contains = _default_asserter.not_contains
true = _default_asserter.true
false = _default_asserter.false
process_deferred_assertions = _default_asserter.process_deferred_assertions
