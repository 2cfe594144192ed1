"""Per-call assertion configuration and the modifiers that build it."""

from __future__ import annotations

import os
import sys
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable, TextIO

from assertkit.errors import AssertionPanic
from assertkit.formatters import BaseFormatter, JSONFormatter, TextFormatter

ExitFunc = Callable[[int], None]


def no_exit(code: int) -> None:
    """Termination action that does nothing."""


def crash_exit(code: int) -> None:
    """Termination action that ends the process.

    On the main thread this raises SystemExit so cleanup handlers run.
    SystemExit on any other thread only ends that thread, so there the
    standard streams are flushed and the interpreter exits immediately.
    """
    if threading.current_thread() is threading.main_thread():
        sys.exit(code)
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass
    os._exit(code)


def panic_exit(code: int) -> None:
    """Termination action that raises instead of exiting."""
    raise AssertionPanic(code)


class NullWriter:
    """Write sink that discards everything."""

    def write(self, text: str) -> int:
        return len(text)

    def flush(self) -> None:
        pass


class StderrWriter:
    """Writes to whatever ``sys.stderr`` is at write time."""

    def write(self, text: str) -> int:
        return sys.stderr.write(text)

    def flush(self) -> None:
        sys.stderr.flush()

    def __repr__(self) -> str:
        return "StderrWriter()"


class FileWriter:
    """Appends to a file, opened on first write.

    The handler that holds it closes it; see ``AssertHandler.close``.
    Writes are serialized by the handler lock.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file: TextIO | None = None

    def write(self, text: str) -> int:
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "a", encoding="utf-8")
        return self._file.write(text)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    @property
    def closed(self) -> bool:
        return self._file is None

    def __repr__(self) -> str:
        return f"FileWriter({str(self.path)!r})"


@dataclass(frozen=True)
class AssertConfig:
    """Behaviour of one evaluation call.

    Attributes:
        formatter: Renders the failure record.
        writer: Text sink the report is written to.
        exit_func: Termination action, called with status code 1.
        defer: Queue formatted failures instead of terminating.
        debug: Capture a stack trace.
        verbose: Capture a stack trace and print the raw data arguments.
    """

    formatter: BaseFormatter
    writer: TextIO
    exit_func: ExitFunc
    defer: bool = False
    debug: bool = False
    verbose: bool = False


class Option:
    """A named, total transformation of an AssertConfig."""

    def __init__(self, name: str, apply: Callable[[AssertConfig], AssertConfig]) -> None:
        self.name = name
        self._apply = apply

    def __call__(self, config: AssertConfig) -> AssertConfig:
        return self._apply(config)

    def __repr__(self) -> str:
        return f"Option({self.name})"


def apply_options(config: AssertConfig, options: Iterable[Option]) -> AssertConfig:
    """Fold options over ``config`` in order. Later options win."""
    for option in options:
        config = option(config)
    return config


def with_formatter(formatter: BaseFormatter) -> Option:
    return Option("formatter", lambda c: replace(c, formatter=formatter))


def with_writer(writer: TextIO) -> Option:
    return Option("writer", lambda c: replace(c, writer=writer))


def with_exit_func(exit_func: ExitFunc) -> Option:
    return Option("exit_func", lambda c: replace(c, exit_func=exit_func))


def with_defer_mode(defer: bool) -> Option:
    return Option("defer_mode", lambda c: replace(c, defer=defer))


def with_debug_mode() -> Option:
    return Option("debug_mode", lambda c: replace(c, debug=True))


def with_verbose_mode() -> Option:
    return Option("verbose_mode", lambda c: replace(c, verbose=True))


def with_quiet_mode() -> Option:
    return Option("quiet_mode", lambda c: replace(c, debug=False, verbose=False))


def with_crash_on_failure() -> Option:
    return Option("crash_on_failure", lambda c: replace(c, exit_func=crash_exit))


def with_panic_on_failure() -> Option:
    return Option("panic_on_failure", lambda c: replace(c, exit_func=panic_exit))


def with_silent_mode() -> Option:
    return Option("silent_mode", lambda c: replace(c, writer=NullWriter()))


def with_testing_defaults() -> Option:
    """No exit, text output, stack traces on."""
    return Option(
        "testing_defaults",
        lambda c: replace(c, exit_func=no_exit, formatter=TextFormatter(), debug=True),
    )


def with_production_defaults() -> Option:
    """No exit, JSON output, no stack traces or argument dumps."""
    return Option(
        "production_defaults",
        lambda c: replace(
            c, exit_func=no_exit, formatter=JSONFormatter(), debug=False, verbose=False
        ),
    )
