"""The stateful assertion handler and its failure pipeline."""

from __future__ import annotations

import logging
import threading
import traceback
from pathlib import Path
from typing import Any, TextIO

from assertkit.context import Context, background, with_timeout
from assertkit.formatters import BaseFormatter, TextFormatter
from assertkit.options import (
    AssertConfig,
    ExitFunc,
    FileWriter,
    Option,
    StderrWriter,
    apply_options,
    crash_exit,
)
from assertkit.registry import AssertData, DataRegistry, FlushHooks

logger = logging.getLogger(__name__)

DEFERRED_SEPARATOR = "\n---\n"
STACK_HEADER = "Stack (most recent call last):"

_PACKAGE_DIR = Path(__file__).resolve().parent


def build_record(msg: str, data: tuple[Any, ...] | list[Any], extra: dict[str, str]) -> dict[str, Any]:
    """Assemble a failure record.

    ``data`` is read as key/value pairs; an unpaired trailing item is
    dropped. ``extra`` (the dumped contextual data) is laid over last.
    """
    record: dict[str, Any] = {"msg": msg, "area": "Assert"}
    for i in range(0, len(data) - 1, 2):
        record[str(data[i])] = data[i + 1]
    record.update(extra)
    return record


def capture_stack() -> str:
    """Current call stack, without assertkit's own frames."""
    frames = [
        frame
        for frame in traceback.extract_stack()
        if not Path(frame.filename).resolve().is_relative_to(_PACKAGE_DIR)
    ]
    body = "".join(traceback.StackSummary.from_list(frames).format())
    return f"{STACK_HEADER}\n{body.rstrip()}"


class AssertHandler:
    """Evaluates assertions and reports failures.

    A handler owns its configuration, a registry of contextual data merged
    into every report, flush hooks run before each report, and a queue of
    deferred failures. Failing evaluations and deferred drains hold the
    handler's lock from record assembly through the termination action,
    so concurrent failures never interleave their output. Passing
    evaluations never take the lock.

    A handler writing to a FileWriter owns that file; ``close()`` or a
    ``with`` block releases it.
    """

    def __init__(
        self,
        formatter: BaseFormatter | None = None,
        writer: TextIO | None = None,
        exit_func: ExitFunc = crash_exit,
        defer: bool = False,
        debug: bool = False,
        verbose: bool = False,
        registry: DataRegistry | None = None,
        flushes: FlushHooks | None = None,
        name: str | None = None,
    ) -> None:
        self.formatter = formatter if formatter is not None else TextFormatter()
        self.writer = writer if writer is not None else StderrWriter()
        self.exit_func = exit_func
        self.defer = defer
        self.debug = debug
        self.verbose = verbose
        self.name = name or f"handler-{id(self):x}"
        self._registry = registry if registry is not None else DataRegistry()
        self._flushes = flushes if flushes is not None else FlushHooks()
        self._deferred: list[str] = []
        self._lock = threading.Lock()

    # -- configuration ---------------------------------------------------

    def set_formatter(self, formatter: BaseFormatter) -> None:
        with self._lock:
            self.formatter = formatter

    def to_writer(self, writer: TextIO) -> None:
        with self._lock:
            self.writer = writer

    def set_exit_func(self, exit_func: ExitFunc) -> None:
        with self._lock:
            self.exit_func = exit_func

    def set_defer_assertions(self, defer: bool) -> None:
        with self._lock:
            self.defer = defer

    def set_debug_mode(self, debug: bool = True) -> None:
        with self._lock:
            self.debug = debug

    def set_verbose_mode(self, verbose: bool = True) -> None:
        with self._lock:
            self.verbose = verbose

    def add_assert_data(self, key: str, value: AssertData) -> None:
        self._registry.add(key, value)

    def remove_assert_data(self, key: str) -> None:
        self._registry.remove(key)

    def add_assert_flush(self, flusher: Any) -> None:
        self._flushes.add(flusher)

    @property
    def registry(self) -> DataRegistry:
        return self._registry

    @property
    def deferred(self) -> list[str]:
        """Copy of the formatted failures waiting to be processed."""
        with self._lock:
            return list(self._deferred)

    def config(self) -> AssertConfig:
        """Snapshot of the active configuration."""
        return AssertConfig(
            formatter=self.formatter,
            writer=self.writer,
            exit_func=self.exit_func,
            defer=self.defer,
            debug=self.debug,
            verbose=self.verbose,
        )

    def view(self, config: AssertConfig, share_deferred: bool = False) -> AssertHandler:
        """A transient handler with ``config`` over this handler's shared state.

        The view shares the data registry, the flush hooks, the lock and
        the name. Its deferred queue starts empty unless ``share_deferred``
        is set, in which case it is this handler's queue.
        """
        view = AssertHandler(
            formatter=config.formatter,
            writer=config.writer,
            exit_func=config.exit_func,
            defer=config.defer,
            debug=config.debug,
            verbose=config.verbose,
            registry=self._registry,
            flushes=self._flushes,
            name=self.name,
        )
        view._lock = self._lock
        if share_deferred:
            view._deferred = self._deferred
        return view

    def close(self) -> None:
        """Close the output file this handler owns, if any."""
        with self._lock:
            if isinstance(self.writer, FileWriter):
                self.writer.close()

    def __enter__(self) -> AssertHandler:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- pipeline --------------------------------------------------------

    def _log_extra(self) -> dict[str, str]:
        return {"handler": self.name, "area": "Assert"}

    def _write(self, text: str) -> None:
        try:
            self.writer.write(text)
        except OSError:
            logger.error(
                "Failed to write assertion output to %r",
                self.writer,
                exc_info=True,
                extra=self._log_extra(),
            )

    def _terminate(self) -> None:
        flush = getattr(self.writer, "flush", None)
        if callable(flush):
            try:
                flush()
            except OSError:
                logger.error("Failed to flush %r", self.writer, exc_info=True, extra=self._log_extra())
        self.exit_func(1)

    def _run_assert(
        self,
        ctx: Context | None,
        msg: str,
        data: tuple[Any, ...],
        pinned: dict[str, Any] | None = None,
    ) -> None:
        """Report a failure. ``pinned`` entries win over data and assert data."""
        ctx = ctx if ctx is not None else background()
        with self._lock:
            err = ctx.err()
            if err is not None:
                logger.warning("Assertion %r skipped: %s", msg, err, extra=self._log_extra())
                self._write(f"Context canceled: {err}\n")
                return

            self._flushes.run()

            record = build_record(msg, data, self._registry.snapshot())
            if pinned:
                record.update(pinned)

            if self.verbose:
                args = list(data)
                for key, value in (pinned or {}).items():
                    args.extend((key, value))
                self._write(f"ARGS: {args!r}\n")

            stack = capture_stack() if self.debug or self.verbose else ""

            rendered = self.formatter.format(record, stack)
            self._write(f"ASSERT\n{rendered}\n")

            if self.defer:
                self._deferred.append(rendered)
                return

            self._terminate()

    def process_deferred_assertions(self, ctx: Context | None = None) -> None:
        """Write all deferred failures as one report, then terminate once.

        Does nothing when no failure has been deferred.
        """
        with self._lock:
            if not self._deferred:
                return
            logger.debug(
                "Processing %d deferred assertion(s)",
                len(self._deferred),
                extra=self._log_extra(),
            )
            combined = DEFERRED_SEPARATOR.join(self._deferred)
            self._write(f"{combined}\n")
            self._deferred.clear()
            self._terminate()

    # -- evaluations -----------------------------------------------------

    def assert_(self, ctx: Context | None, truth: bool, msg: str, *data: Any) -> None:
        if not truth:
            self._run_assert(ctx, msg, data)

    def assert_with_timeout(
        self, ctx: Context | None, timeout: float, truth: bool, msg: str, *data: Any
    ) -> None:
        ctx, cancel = with_timeout(ctx, timeout)
        try:
            if not truth:
                self._run_assert(ctx, msg, data)
        finally:
            cancel()

    def nil(self, ctx: Context | None, item: Any, msg: str, *data: Any) -> None:
        """Fail unless ``item`` is None."""
        logger.info("Nil check item=%r", item, extra={"handler": self.name, "area": "Nil"})
        if item is not None:
            logger.error("Nil: non-nil value encountered", extra={"handler": self.name, "area": "Nil"})
            self._run_assert(ctx, msg, data)

    def not_nil(self, ctx: Context | None, item: Any, msg: str, *data: Any) -> None:
        """Fail if ``item`` is None."""
        if item is None:
            logger.error("NotNil: nil value encountered", extra={"handler": self.name, "area": "NotNil"})
            self._run_assert(ctx, msg, data)

    def never(self, ctx: Context | None, msg: str, *data: Any) -> None:
        """Mark a code path that must not be reached. Always fails."""
        self._run_assert(ctx, msg, data)

    def no_error(self, ctx: Context | None, err: BaseException | None, msg: str, *data: Any) -> None:
        """Fail if ``err`` is set. The report's ``error`` entry is always ``err``."""
        if err is not None:
            self._run_assert(ctx, msg, data, pinned={"error": err})

    def __repr__(self) -> str:
        return (
            f"AssertHandler(name={self.name!r}, formatter={self.formatter!r}, "
            f"defer={self.defer}, debug={self.debug}, verbose={self.verbose})"
        )


def new_handler(*options: Option) -> AssertHandler:
    """Build a handler with the library defaults, then apply ``options``."""
    handler = AssertHandler()
    config = apply_options(handler.config(), options)
    handler.formatter = config.formatter
    handler.writer = config.writer
    handler.exit_func = config.exit_func
    handler.defer = config.defer
    handler.debug = config.debug
    handler.verbose = config.verbose
    return handler
