"""Tests for the package-level assertion functions."""

import io
import json
import threading

import pytest

import assertkit
from assertkit import (
    AssertHandler,
    Asserter,
    AssertionPanic,
    JSONFormatter,
    StaticData,
    TextFormatter,
    YAMLFormatter,
)
from assertkit.handler import STACK_HEADER


def _json_body(buffer):
    return json.loads(buffer.getvalue().split("\n", 1)[1])


# --- defaults ---


def test_default_failure_goes_to_stderr_and_continues(capsys):
    assertkit.assert_(None, False, "boom")
    captured = capsys.readouterr()
    assert "boom" in captured.err
    assert captured.out == ""


def test_default_pass_is_silent(capsys):
    assertkit.assert_(None, True, "fine")
    assert capsys.readouterr().err == ""


def test_default_handler_is_built_once():
    seen = []
    threads = [
        threading.Thread(target=lambda: seen.append(assertkit.default_handler()))
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert all(h is seen[0] for h in seen)
    assert assertkit.default_handler() is seen[0]


def test_default_handler_never_exits():
    handler = assertkit.default_handler()
    handler.exit_func(1)


def test_reset_default_handler_builds_fresh_one():
    first = assertkit.default_handler()
    assertkit.reset_default_handler()
    assert assertkit.default_handler() is not first


# --- options ---


def test_with_writer(buffer, capsys):
    assertkit.assert_(None, False, "redirected", assertkit.with_writer(buffer))
    assert "redirected" in buffer.getvalue()
    assert capsys.readouterr().err == ""


def test_options_and_data_mix(buffer):
    assertkit.equal(
        None, 1, 2, "mismatch",
        "key", "value",
        assertkit.with_writer(buffer),
        assertkit.with_formatter(JSONFormatter()),
    )
    data = _json_body(buffer)["assertData"]
    assert data == {
        "msg": "mismatch",
        "area": "Assert",
        "expected": 1,
        "actual": 2,
        "key": "value",
    }


def test_options_do_not_touch_default_handler(buffer):
    assertkit.assert_(
        None, False, "m",
        assertkit.with_writer(buffer),
        assertkit.with_formatter(YAMLFormatter()),
        assertkit.with_debug_mode(),
    )
    handler = assertkit.default_handler()
    assert isinstance(handler.formatter, TextFormatter)
    assert handler.debug is False


def test_silent_mode(capsys):
    assertkit.assert_(None, False, "hidden", assertkit.with_silent_mode())
    assert capsys.readouterr().err == ""


def test_panic_on_failure():
    with pytest.raises(AssertionPanic):
        assertkit.assert_(None, False, "m", assertkit.with_silent_mode(), assertkit.with_panic_on_failure())


def test_crash_on_failure():
    with pytest.raises(SystemExit):
        assertkit.never(None, "m", assertkit.with_silent_mode(), assertkit.with_crash_on_failure())


def test_testing_defaults_include_stack(buffer):
    assertkit.assert_(None, False, "m", assertkit.with_writer(buffer), assertkit.with_testing_defaults())
    assert STACK_HEADER in buffer.getvalue()


def test_production_defaults_are_clean_json(buffer):
    assertkit.assert_(
        None, False, "m",
        assertkit.with_writer(buffer),
        assertkit.with_verbose_mode(),
        assertkit.with_production_defaults(),
    )
    body = _json_body(buffer)
    assert body["assertData"]["msg"] == "m"
    assert "stack" not in body


def test_quiet_mode_after_verbose(buffer):
    assertkit.assert_(
        None, False, "m",
        assertkit.with_writer(buffer),
        assertkit.with_verbose_mode(),
        assertkit.with_quiet_mode(),
    )
    assert "ARGS:" not in buffer.getvalue()
    assert STACK_HEADER not in buffer.getvalue()


def test_custom_exit_func(exits):
    assertkit.assert_(None, False, "m", assertkit.with_silent_mode(), assertkit.with_exit_func(exits))
    assert exits.codes == [1]


# --- predicates ---


def test_equal(buffer):
    assertkit.equal(None, 42, 42, "numbers match", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.equal(None, 42, 24, "numbers match", assertkit.with_writer(buffer))
    out = buffer.getvalue()
    assert "42" in out
    assert "24" in out
    assert "numbers match" in out


def test_not_equal(buffer):
    assertkit.not_equal(None, "foo", "bar", "differ", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.not_equal(None, "foo", "foo", "differ", assertkit.with_writer(buffer))
    assert "expected=foo" in buffer.getvalue()


def test_contains(buffer):
    assertkit.contains(None, "hello world", "world", "has world", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.contains(None, "hello", "xyz", "has xyz", assertkit.with_writer(buffer))
    out = buffer.getvalue()
    assert "haystack=hello" in out
    assert "needle=xyz" in out


def test_contains_unsupported_type_fails(buffer):
    assertkit.contains(None, 5, "x", "not a container", assertkit.with_writer(buffer))
    assert "not a container" in buffer.getvalue()


def test_not_contains(buffer):
    assertkit.not_contains(None, ["a", "b"], "c", "no c", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.not_contains(None, ["a", "b"], "a", "no a", assertkit.with_writer(buffer))
    assert "no a" in buffer.getvalue()


def test_true_and_false(buffer):
    assertkit.true(None, True, "t", assertkit.with_writer(buffer))
    assertkit.false(None, False, "f", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.true(None, False, "expected true", assertkit.with_writer(buffer))
    assertkit.false(None, True, "expected false", assertkit.with_writer(buffer))
    out = buffer.getvalue()
    assert "expected true" in out
    assert "expected false" in out


@pytest.mark.parametrize("value", ["", [], {}, None])
def test_not_empty_fails(buffer, value):
    assertkit.not_empty(None, value, "empty", assertkit.with_writer(buffer))
    assert "msg=empty" in buffer.getvalue()


@pytest.mark.parametrize("value", ["hello", [0], 0])
def test_not_empty_passes(buffer, value):
    assertkit.not_empty(None, value, "empty", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""


def test_nil_and_not_nil(buffer):
    assertkit.nil(None, None, "nil ok", assertkit.with_writer(buffer))
    assertkit.not_nil(None, "x", "present", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.nil(None, "x", "should be nil", assertkit.with_writer(buffer))
    assertkit.not_nil(None, None, "should not be nil", assertkit.with_writer(buffer))
    out = buffer.getvalue()
    assert "should be nil" in out
    assert "should not be nil" in out


def test_no_error(buffer):
    assertkit.no_error(None, None, "ok", assertkit.with_writer(buffer))
    assert buffer.getvalue() == ""
    assertkit.no_error(None, KeyError("k"), "lookup", assertkit.with_writer(buffer))
    assert "error=" in buffer.getvalue()


def test_assert_with_timeout(buffer):
    assertkit.assert_with_timeout(None, 0, False, "late", assertkit.with_writer(buffer))
    assert "deadline exceeded" in buffer.getvalue()


def test_cancelled_context(buffer):
    ctx, cancel = assertkit.with_cancel(None)
    cancel()
    assertkit.never(ctx, "boom", assertkit.with_writer(buffer), assertkit.with_defer_mode(True))
    assert "Context canceled" in buffer.getvalue()
    assert "boom" not in buffer.getvalue()


# --- shared state ---


def test_default_assert_data_is_shared(buffer):
    assertkit.default_handler().add_assert_data("request", StaticData("r-1"))
    assertkit.assert_(None, False, "m", assertkit.with_writer(buffer))
    assert "request=r-1" in buffer.getvalue()


def test_default_flush_hooks_are_shared(mocker):
    hook = mocker.Mock()
    assertkit.default_handler().add_assert_flush(hook)
    assertkit.assert_(None, False, "m", assertkit.with_silent_mode())
    hook.flush.assert_called_once_with()


# --- deferred mode ---


def test_facade_defer_does_not_accumulate(buffer, exits):
    assertkit.assert_(None, False, "A", assertkit.with_writer(buffer), assertkit.with_defer_mode(True))
    assertkit.assert_(None, False, "B", assertkit.with_writer(buffer), assertkit.with_defer_mode(True))
    assert assertkit.default_handler().deferred == []

    buffer.seek(0)
    buffer.truncate()
    assertkit.process_deferred_assertions(None, assertkit.with_writer(buffer), assertkit.with_exit_func(exits))
    assert buffer.getvalue() == ""
    assert exits.codes == []


def test_process_deferred_drains_default_queue(buffer, exits):
    handler = AssertHandler(writer=buffer, exit_func=exits, defer=True)
    assertkit.set_default_handler(handler)
    handler.assert_(None, False, "A")
    handler.assert_(None, False, "B")

    buffer.seek(0)
    buffer.truncate()
    assertkit.process_deferred_assertions()
    out = buffer.getvalue()
    assert "msg=A" in out
    assert "msg=B" in out
    assert exits.codes == [1]
    assert handler.deferred == []


# --- explicit base handler ---


def test_asserter_with_explicit_base(exits):
    out = io.StringIO()
    base = AssertHandler(writer=out, exit_func=exits)
    asserter = Asserter(base)
    asserter.equal(None, 1, 2, "mismatch")
    assert "mismatch" in out.getvalue()
    assert exits.codes == [1]
    assert assertkit.default_handler() is not base


def test_set_default_handler_is_used(exits):
    out = io.StringIO()
    assertkit.set_default_handler(AssertHandler(writer=out, exit_func=exits))
    assertkit.never(None, "injected")
    assert "injected" in out.getvalue()
    assert exits.codes == [1]
