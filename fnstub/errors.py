"""Custom exceptions for fnstub."""

from __future__ import annotations

import typing as t


class StubError(Exception):
    """Base exception for fnstub errors."""


class ConfigurationConflictError(StubError):
    """Raised when strict and lookup configuration are mixed on one stub."""

    def __init__(self, method: str, conflicting: str) -> None:
        self.method = method
        self.conflicting = conflicting
        super().__init__(f"Cannot use {method}() after {conflicting}()")


class UnexpectedKeywordArgumentsError(StubError, TypeError):
    """Raised when a stub is called with keyword arguments.

    Call records are positional argument tuples, so keywords cannot be
    matched. The call is still recorded with its positional arguments.
    """

    def __init__(self, message: str, *, keywords: tuple[str, ...]) -> None:
        super().__init__(message)
        self.keywords = keywords


class UnexpectedArgumentsError(StubError, AssertionError):
    """Raised when a strict stub is called with the wrong arguments.

    Inherits from :class:`AssertionError` so pytest reports the mismatch as a
    test failure rather than an error in the code under test.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: tuple[t.Any, ...],
        received: tuple[t.Any, ...],
        stub_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received
        self.stub_name = stub_name


__all__ = [
    "ConfigurationConflictError",
    "StubError",
    "UnexpectedArgumentsError",
    "UnexpectedKeywordArgumentsError",
]
