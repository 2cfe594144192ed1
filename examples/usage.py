"""Walkthrough of assertkit's package-level and handler APIs."""

import io
import sys

import assertkit
from assertkit import StaticData

ctx = assertkit.background()

# Package-level calls report to stderr and never exit by default.
assertkit.assert_(ctx, 1 == 1, "basic assertion passes")
assertkit.equal(ctx, 42, 24, "numbers should match", "request", "r-17")
assertkit.assert_(ctx, False, "JSON report", assertkit.with_formatter(assertkit.JSONFormatter()))
assertkit.assert_(ctx, False, "with stack and args", assertkit.with_verbose_mode())
assertkit.assert_(ctx, False, "silent", assertkit.with_silent_mode())

# An explicit handler batches deferred failures and terminates once.
handler = assertkit.AssertHandler(writer=sys.stdout, exit_func=lambda code: print(f"exit({code})"))
handler.add_assert_data("build", StaticData("1.4.2"))
handler.add_assert_flush(sys.stderr.flush)
handler.set_defer_assertions(True)
handler.nil(ctx, "unexpected", "cache entry should be gone")
handler.never(ctx, "unreachable branch")
handler.process_deferred_assertions(ctx)

# A context cancelled before the failure produces a notice instead.
cancelled, cancel = assertkit.with_cancel(ctx)
cancel()
handler.assert_(cancelled, False, "not reported")

buf = io.StringIO()
assertkit.assert_with_timeout(ctx, 0.5, False, "bounded", assertkit.with_writer(buf))
print(buf.getvalue())
