"""Exception types raised by assertkit."""

from __future__ import annotations


class AssertKitError(Exception):
    """Base class for every error assertkit raises on purpose."""


class AssertionPanic(AssertKitError):
    """Raised by the panic termination action after a failed assertion.

    Attributes:
        code: Status code handed to the termination action (always 1 for
            failures produced by the handler).
    """

    def __init__(self, code: int) -> None:
        super().__init__(f"assertion failed (exit code {code})")
        self.code = code


class ContextError(AssertKitError):
    """Reason a Context is done."""


class Cancelled(ContextError):
    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "context canceled")


class DeadlineExceeded(ContextError):
    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


class ConfigError(AssertKitError):
    """A settings file could not be loaded or validated."""
