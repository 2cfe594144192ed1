"""Runtime assertions with structured failure reports."""

from assertkit.context import Context, background, with_cancel, with_timeout
from assertkit.errors import (
    AssertionPanic,
    AssertKitError,
    Cancelled,
    ConfigError,
    ContextError,
    DeadlineExceeded,
)
from assertkit.facade import (
    Asserter,
    assert_,
    assert_with_timeout,
    contains,
    default_handler,
    equal,
    false,
    nil,
    never,
    no_error,
    not_contains,
    not_empty,
    not_equal,
    not_nil,
    process_deferred_assertions,
    reset_default_handler,
    set_default_handler,
    true,
)
from assertkit.formatters import (
    BaseFormatter,
    JSONFormatter,
    TextFormatter,
    YAMLFormatter,
    get_formatter,
)
from assertkit.handler import AssertHandler, new_handler
from assertkit.options import (
    AssertConfig,
    Option,
    with_crash_on_failure,
    with_debug_mode,
    with_defer_mode,
    with_exit_func,
    with_formatter,
    with_panic_on_failure,
    with_production_defaults,
    with_quiet_mode,
    with_silent_mode,
    with_testing_defaults,
    with_verbose_mode,
    with_writer,
)
from assertkit.registry import AssertData, CallableData, StaticData

__all__ = [
    "AssertConfig",
    "AssertData",
    "AssertHandler",
    "AssertKitError",
    "Asserter",
    "AssertionPanic",
    "BaseFormatter",
    "CallableData",
    "Cancelled",
    "ConfigError",
    "Context",
    "ContextError",
    "DeadlineExceeded",
    "JSONFormatter",
    "Option",
    "StaticData",
    "TextFormatter",
    "YAMLFormatter",
    "assert_",
    "assert_with_timeout",
    "background",
    "contains",
    "default_handler",
    "equal",
    "false",
    "get_formatter",
    "new_handler",
    "nil",
    "never",
    "no_error",
    "not_contains",
    "not_empty",
    "not_equal",
    "not_nil",
    "process_deferred_assertions",
    "reset_default_handler",
    "set_default_handler",
    "true",
    "with_cancel",
    "with_crash_on_failure",
    "with_debug_mode",
    "with_defer_mode",
    "with_exit_func",
    "with_formatter",
    "with_panic_on_failure",
    "with_production_defaults",
    "with_quiet_mode",
    "with_silent_mode",
    "with_testing_defaults",
    "with_timeout",
    "with_verbose_mode",
    "with_writer",
]
