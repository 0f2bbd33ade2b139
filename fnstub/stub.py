"""Programmable function stubs with a call ledger.

A :class:`Stub` replaces a real function inside a test. Every call is
recorded before the stub decides what to do, and the result is resolved in a
fixed order:

1. a configured error (:meth:`Stub.throws`) is raised;
2. in strict mode (:meth:`Stub.expects`) mismatching arguments raise
   :class:`~fnstub.errors.UnexpectedArgumentsError`;
3. in lookup mode (:meth:`Stub.when`) the first entry whose arguments match
   supplies the return value;
4. otherwise the default (:meth:`Stub.returns`) or ``None`` is returned.

Strict and lookup mode are mutually exclusive until :meth:`Stub.reset`.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import threading
import typing as t

from .equality import args_equal
from .errors import (
    ConfigurationConflictError,
    UnexpectedArgumentsError,
    UnexpectedKeywordArgumentsError,
)
from .formatting import (
    DEFAULT_REPR_LIMIT,
    describe_stub,
    render_args,
    unexpected_arguments_message,
)

logger = logging.getLogger(__name__)

CallRecord: t.TypeAlias = tuple[t.Any, ...]


# ----------------------------------------------------------------------
# Configuration variants
# ----------------------------------------------------------------------
@dc.dataclass(frozen=True, slots=True)
class Unset:
    """Neither strict nor lookup mode is configured."""


@dc.dataclass(frozen=True, slots=True)
class Strict:
    """Only ``expected`` is an acceptable argument list."""

    expected: CallRecord


@dc.dataclass(frozen=True, slots=True)
class LookupEntry:
    """Return ``result`` when called with ``match_args``."""

    match_args: CallRecord
    result: t.Any


@dc.dataclass(frozen=True, slots=True)
class Lookup:
    """Argument-keyed return table, searched in insertion order."""

    entries: tuple[LookupEntry, ...]

    def append(self, entry: LookupEntry) -> Lookup:
        """Return a table with *entry* added after the existing ones."""
        return Lookup((*self.entries, entry))

    def find(self, args: CallRecord) -> tuple[int, LookupEntry] | None:
        """Return the first entry matching *args* with its index."""
        for index, entry in enumerate(self.entries):
            if args_equal(entry.match_args, args):
                return index, entry
        return None


Mode: t.TypeAlias = Unset | Strict | Lookup

UNSET: t.Final[Unset] = Unset()


@dc.dataclass(frozen=True, slots=True)
class Value:
    """Default result that is returned."""

    value: t.Any


@dc.dataclass(frozen=True, slots=True)
class Raise:
    """Default result that is raised."""

    error: BaseException | type[BaseException]


Result: t.TypeAlias = Value | Raise


def _validate_error(error: object) -> None:
    """Ensure *error* can be used with ``raise``."""
    if isinstance(error, BaseException):
        return
    if isinstance(error, type) and issubclass(error, BaseException):
        return
    msg = (
        "throws() expects an exception instance or class, "
        f"got {type(error).__name__}"
    )
    raise TypeError(msg)


class Stub:
    """Callable test double recording every call made to it."""

    def __init__(
        self, name: str | None = None, *, repr_limit: int = DEFAULT_REPR_LIMIT
    ) -> None:
        """Create an unconfigured stub.

        Parameters
        ----------
        name:
            Optional label included in diagnostic messages.
        repr_limit:
            Maximum length of each value rendered in diagnostics. ``0``
            disables truncation.
        """
        if repr_limit < 0:
            msg = "repr_limit must be >= 0"
            raise ValueError(msg)
        self._name = name
        self._repr_limit = repr_limit
        self._lock = threading.RLock()
        self._calls: list[CallRecord] = []
        self._mode: Mode = UNSET
        self._result: Result | None = None
        logger.debug("Created %s", self._label)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def name(self) -> str | None:
        """Return the diagnostic label given at creation."""
        return self._name

    @property
    def mode(self) -> Mode:
        """Return the current argument configuration."""
        return self._mode

    @property
    def called(self) -> bool:
        """Return ``True`` once the stub has recorded a call."""
        return bool(self._calls)

    @property
    def _label(self) -> str:
        return describe_stub(self._name)

    def __repr__(self) -> str:
        """Return a debug representation."""
        return (
            f"Stub(name={self._name!r}, mode={type(self._mode).__name__}, "
            f"calls={len(self._calls)})"
        )

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------
    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Record *args* and resolve the configured result.

        Keyword arguments are rejected with
        :class:`~fnstub.errors.UnexpectedKeywordArgumentsError` after the
        positional arguments have been recorded.
        """
        with self._lock:
            self._calls.append(args)
            if kwargs:
                self._reject_keywords(tuple(kwargs))
            return self._resolve(args)

    def _reject_keywords(self, keywords: tuple[str, ...]) -> t.NoReturn:
        msg = (
            f"{self._label} does not accept keyword arguments, "
            f"got {', '.join(keywords)}"
        )
        logger.debug("%s rejected keyword arguments %s", self._label, keywords)
        raise UnexpectedKeywordArgumentsError(msg, keywords=keywords)

    def _resolve(self, args: CallRecord) -> t.Any:
        result = self._result
        if isinstance(result, Raise):
            logger.debug("%s raising configured error %r", self._label, result.error)
            raise result.error

        mode = self._mode
        if isinstance(mode, Strict):
            self._check_expected(mode.expected, args)
        elif isinstance(mode, Lookup):
            found = mode.find(args)
            if found is not None:
                index, entry = found
                logger.debug("%s matched when() entry %d", self._label, index)
                return entry.result

        if isinstance(result, Value):
            logger.debug("%s returning default value", self._label)
            return result.value
        return None

    def _check_expected(self, expected: CallRecord, args: CallRecord) -> None:
        """Raise :class:`UnexpectedArgumentsError` if *args* differ."""
        if args_equal(expected, args):
            return
        msg = unexpected_arguments_message(
            self._name, expected, args, limit=self._repr_limit
        )
        raise UnexpectedArgumentsError(
            msg, expected=expected, received=args, stub_name=self._name
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def expects(self, *expected: t.Any) -> Stub:
        """Accept only calls whose arguments equal *expected*."""
        with self._lock:
            if isinstance(self._mode, Lookup):
                self._conflict("expects", "when")
            self._mode = Strict(expected)
        logger.debug("%s expects %s", self._label, self._render(expected))
        return self

    def returns(self, value: t.Any) -> Stub:
        """Return *value* when no other rule applies."""
        with self._lock:
            self._result = Value(value)
        logger.debug("%s returns %r by default", self._label, value)
        return self

    def throws(self, error: BaseException | type[BaseException]) -> Stub:
        """Raise *error* on every call, regardless of arguments."""
        _validate_error(error)
        with self._lock:
            self._result = Raise(error)
        logger.debug("%s throws %r", self._label, error)
        return self

    def when(self, match_args: t.Iterable[t.Any], result: t.Any) -> Stub:
        """Return *result* when called with exactly *match_args*.

        Entries are searched in the order they were added, so a later entry
        with the same arguments as an earlier one is never used.
        """
        if isinstance(match_args, (str, bytes, bytearray)):
            msg = (
                "when() expects a sequence of arguments, "
                f"got {type(match_args).__name__}"
            )
            raise TypeError(msg)
        entry = LookupEntry(tuple(match_args), result)
        with self._lock:
            mode = self._mode
            if isinstance(mode, Strict):
                self._conflict("when", "expects")
            table = mode if isinstance(mode, Lookup) else Lookup(())
            self._mode = table.append(entry)
        logger.debug(
            "%s when %s returns %r",
            self._label,
            self._render(entry.match_args),
            result,
        )
        return self

    def clear_calls(self) -> Stub:
        """Forget recorded calls while keeping the configuration."""
        with self._lock:
            self._calls = []
        logger.debug("%s cleared call history", self._label)
        return self

    def reset(self) -> Stub:
        """Return the stub to the state it had when created."""
        with self._lock:
            self._calls = []
            self._mode = UNSET
            self._result = None
        logger.debug("%s reset", self._label)
        return self

    def _conflict(self, method: str, conflicting: str) -> t.NoReturn:
        logger.warning(
            "%s: %s() rejected because %s() is configured",
            self._label,
            method,
            conflicting,
        )
        raise ConfigurationConflictError(method, conflicting)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def get_calls(self) -> list[CallRecord]:
        """Return a copy of the recorded argument tuples in call order."""
        with self._lock:
            return list(self._calls)

    def get_num_calls(self) -> int:
        """Return how many calls have been recorded."""
        return len(self._calls)

    # ------------------------------------------------------------------
    # Assertion helpers
    # ------------------------------------------------------------------
    def assert_called(self) -> None:
        """Assert that the stub was called at least once."""
        self._get_last_call()

    def assert_not_called(self) -> None:
        """Assert that the stub has not been called."""
        calls = self.get_calls()
        if calls:
            msg = (
                f"Expected {self._subject} to be uncalled but it was called "
                f"{len(calls)} time(s); last args={self._render(calls[-1])}"
            )
            raise AssertionError(msg)

    def assert_called_with(self, *args: t.Any) -> None:
        """Assert that the most recent call received exactly *args*."""
        last = self._get_last_call()
        if not args_equal(args, last):
            msg = (
                f"{self._subject} called with args {self._render(last)}, "
                f"expected {self._render(args)}"
            )
            raise AssertionError(msg)

    def assert_called_times(self, count: int) -> None:
        """Assert that the stub was called exactly *count* times."""
        actual = self.get_num_calls()
        if actual != count:
            msg = (
                f"Expected {self._subject} to be called {count} time(s) "
                f"but it was called {actual} time(s)"
            )
            raise AssertionError(msg)

    def _get_last_call(self) -> CallRecord:
        calls = self.get_calls()
        if not calls:
            msg = f"Expected {self._subject} to be called but it was never called"
            raise AssertionError(msg)
        return calls[-1]

    @property
    def _subject(self) -> str:
        return repr(self._name) if self._name else "stub"

    def _render(self, args: t.Sequence[t.Any]) -> str:
        return render_args(args, limit=self._repr_limit)


def stub(name: str | None = None, *, repr_limit: int = DEFAULT_REPR_LIMIT) -> Stub:
    """Create a new :class:`Stub`, optionally labelled *name*."""
    return Stub(name, repr_limit=repr_limit)


__all__ = [
    "UNSET",
    "CallRecord",
    "Lookup",
    "LookupEntry",
    "Mode",
    "Raise",
    "Result",
    "Strict",
    "Stub",
    "Unset",
    "Value",
    "stub",
]
