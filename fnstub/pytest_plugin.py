"""Pytest plugin providing the ``stub_factory`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .formatting import DEFAULT_REPR_LIMIT
from .stub import Stub

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("fnstub")
    group.addoption(
        "--fnstub-reset-on-teardown",
        action="store_true",
        dest="fnstub_reset_on_teardown",
        default=None,
        help=(
            "Reset every stub created by the stub_factory fixture during "
            "teardown. Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-fnstub-reset-on-teardown",
        action="store_false",
        dest="fnstub_reset_on_teardown",
        default=None,
        help=(
            "Leave stubs created by the stub_factory fixture untouched during "
            "teardown. Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "fnstub_reset_on_teardown",
        "Reset stubs created by the stub_factory fixture during teardown.",
        type="bool",
        default=True,
    )
    parser.addini(
        "fnstub_repr_limit",
        (
            "Maximum length of each value rendered in stub diagnostics "
            "(0 disables truncation)."
        ),
        default=str(DEFAULT_REPR_LIMIT),
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "fnstub(reset_on_teardown: bool = True): override stub reset "
            "behaviour of the stub_factory fixture for a single test."
        ),
    )


class StubFactory:
    """Create stubs and keep track of them for teardown."""

    def __init__(self, *, repr_limit: int = DEFAULT_REPR_LIMIT) -> None:
        self._repr_limit = repr_limit
        self._stubs: list[Stub] = []

    def __call__(self, name: str | None = None) -> Stub:
        """Create a tracked :class:`Stub` labelled *name*."""
        created = Stub(name, repr_limit=self._repr_limit)
        self._stubs.append(created)
        return created

    @property
    def stubs(self) -> tuple[Stub, ...]:
        """Return the stubs created so far, oldest first."""
        return tuple(self._stubs)

    def reset_all(self) -> None:
        """Reset every tracked stub."""
        for tracked in self._stubs:
            tracked.reset()


def _reset_on_teardown_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether tracked stubs should be reset after the test."""
    # Priority order: marker > CLI option > INI setting
    marker = request.node.get_closest_marker("fnstub")
    if marker is not None and "reset_on_teardown" in marker.kwargs:
        return bool(marker.kwargs["reset_on_teardown"])

    config = request.config
    cli_value = config.getoption("fnstub_reset_on_teardown")
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("fnstub_reset_on_teardown"))


def _repr_limit(config: pytest.Config) -> int:
    """Parse the ``fnstub_repr_limit`` ini value."""
    raw = config.getini("fnstub_repr_limit")
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        msg = f"fnstub_repr_limit must be an integer, got {raw!r}"
        raise ValueError(msg) from None
    if limit < 0:
        msg = f"fnstub_repr_limit must be >= 0, got {limit}"
        raise ValueError(msg)
    return limit


@pytest.fixture
def stub_factory(
    request: pytest.FixtureRequest,
) -> t.Generator[StubFactory, None, None]:
    """Provide a :class:`StubFactory` whose stubs are reset after the test."""
    factory = StubFactory(repr_limit=_repr_limit(request.config))
    reset_on_teardown = _reset_on_teardown_enabled(request)
    yield factory
    if not reset_on_teardown:
        return
    logger.debug("Resetting %d stub(s) after test", len(factory.stubs))
    try:
        factory.reset_all()
    except Exception:
        logger.exception("Error during stub_factory teardown")
        raise


__all__ = ["StubFactory", "stub_factory"]
