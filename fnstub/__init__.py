"""Programmable, observable function stubs for unit tests.

Create a stub with :func:`stub`, configure it with ``expects``, ``when``,
``returns`` or ``throws``, and inspect what it was called with via
``get_calls``.
"""

from __future__ import annotations

from .equality import deep_equal
from .errors import (
    ConfigurationConflictError,
    StubError,
    UnexpectedArgumentsError,
    UnexpectedKeywordArgumentsError,
)
from .formatting import DEFAULT_REPR_LIMIT, render_value
from .pytest_plugin import StubFactory
from .stub import CallRecord, Stub, stub

create = stub

__all__ = [
    "DEFAULT_REPR_LIMIT",
    "CallRecord",
    "ConfigurationConflictError",
    "Stub",
    "StubError",
    "StubFactory",
    "UnexpectedArgumentsError",
    "UnexpectedKeywordArgumentsError",
    "create",
    "deep_equal",
    "render_value",
    "stub",
]
