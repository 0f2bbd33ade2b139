"""Step definitions for fnstub behavioural tests."""
# pyright: reportMissingImports=false, reportUnknownMemberType=false

from __future__ import annotations

import ast
import typing as t

from behave import given, then, when  # type: ignore[attr-defined]

from fnstub import Stub, StubError, stub


class BehaveContext(t.Protocol):
    """Behave step context with attributes used in tests."""

    fn: Stub
    result: t.Any
    error: BaseException | None


def _args(text: str) -> tuple[t.Any, ...]:
    return ast.literal_eval(f"({text},)")


def _record(context: BehaveContext, action: t.Callable[[], t.Any]) -> None:
    context.result = None
    context.error = None
    try:
        context.result = action()
    except (StubError, RuntimeError) as err:
        context.error = err


@given("a stub")
def step_create_stub(context: BehaveContext) -> None:
    """Create an unnamed :class:`Stub` for the scenario."""
    context.fn = stub()
    context.error = None


@given('a stub named "{name}"')
def step_create_named_stub(context: BehaveContext, name: str) -> None:
    """Create a stub labelled *name*."""
    context.fn = stub(name)
    context.error = None


@given("the stub returns {value} by default")
def step_default(context: BehaveContext, value: str) -> None:
    """Configure the default return value."""
    context.fn.returns(ast.literal_eval(value))


@given("the stub returns {value} when called with {args}")
def step_lookup(context: BehaveContext, value: str, args: str) -> None:
    """Add a lookup entry."""
    context.fn.when(_args(args), ast.literal_eval(value))


@given("the stub expects {args}")
def step_expects(context: BehaveContext, args: str) -> None:
    """Enable strict mode."""
    context.fn.expects(*_args(args))


@given('the stub throws "{message}"')
def step_throws(context: BehaveContext, message: str) -> None:
    """Make every call raise ``RuntimeError(message)``."""
    context.fn.throws(RuntimeError(message))


@when("the stub is called with {args}")
def step_call(context: BehaveContext, args: str) -> None:
    """Call the stub, capturing its result or error."""
    _record(context, lambda: context.fn(*_args(args)))


@when("I try to add a lookup entry for {args}")
def step_try_lookup(context: BehaveContext, args: str) -> None:
    """Attempt to add a lookup entry."""
    _record(context, lambda: context.fn.when(_args(args), "unused"))


@when("I try to expect {args}")
def step_try_expect(context: BehaveContext, args: str) -> None:
    """Attempt to enable strict mode."""
    _record(context, lambda: context.fn.expects(*_args(args)))


@when("the call history is cleared")
def step_clear(context: BehaveContext) -> None:
    """Clear recorded calls."""
    context.fn.clear_calls()


@when("the stub is reset")
def step_reset(context: BehaveContext) -> None:
    """Reset the stub."""
    context.fn.reset()


@then("the result should be {value}")
def step_check_result(context: BehaveContext, value: str) -> None:
    """Verify the captured result."""
    assert context.error is None  # noqa: S101
    assert context.result == ast.literal_eval(value)  # noqa: S101


@then("the call should succeed")
def step_check_success(context: BehaveContext) -> None:
    """Verify nothing was raised."""
    assert context.error is None  # noqa: S101


@then("the call should fail with {text}")
def step_check_failure(context: BehaveContext, text: str) -> None:
    """Verify the captured error mentions *text*."""
    assert context.error is not None  # noqa: S101
    assert ast.literal_eval(text) in str(context.error)  # noqa: S101


@then("the stub should have recorded {count:d} calls")
def step_check_count(context: BehaveContext, count: int) -> None:
    """Verify the ledger length."""
    assert context.fn.get_num_calls() == count  # noqa: S101


@then("the recorded calls should be {calls}")
def step_check_calls(context: BehaveContext, calls: str) -> None:
    """Verify the full call history."""
    assert context.fn.get_calls() == ast.literal_eval(calls)  # noqa: S101
