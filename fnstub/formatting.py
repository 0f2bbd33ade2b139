"""Rendering helpers for stub diagnostics."""

from __future__ import annotations

import pprint
import typing as t
from textwrap import indent

DEFAULT_REPR_LIMIT: t.Final[int] = 2000
_ELLIPSIS: t.Final[str] = "…"


def shorten(text: str, limit: int = DEFAULT_REPR_LIMIT) -> str:
    """Truncate *text* to *limit* characters; ``0`` disables truncation."""
    if limit <= 0 or len(text) <= limit:
        return text
    return f"{text[: limit - 1]}{_ELLIPSIS}"


def render_value(value: object, *, limit: int = DEFAULT_REPR_LIMIT) -> str:
    """Return a readable, bounded representation of *value*.

    :func:`pprint.pformat` marks self-references instead of recursing, so
    cyclic arguments render safely.
    """
    return shorten(pprint.pformat(value, sort_dicts=False), limit)


def render_args(args: t.Sequence[object], *, limit: int = DEFAULT_REPR_LIMIT) -> str:
    """Render a positional argument list as it would appear in a call."""
    if not args:
        return "()"
    return "(" + ", ".join(render_value(arg, limit=limit) for arg in args) + ")"


def describe_stub(name: str | None) -> str:
    """Return the label used for a stub in messages."""
    return f'Stub "{name}"' if name else "Stub"


def format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    """Join *title* and labelled, indented bodies into one message."""
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)


def unexpected_arguments_message(
    name: str | None,
    expected: t.Sequence[object],
    received: t.Sequence[object],
    *,
    limit: int = DEFAULT_REPR_LIMIT,
) -> str:
    """Build the message raised when a strict stub sees other arguments."""
    return format_sections(
        f"{describe_stub(name)} called with unexpected arguments.",
        [
            ("Expected", render_args(expected, limit=limit)),
            ("Received", render_args(received, limit=limit)),
        ],
    )


__all__ = [
    "DEFAULT_REPR_LIMIT",
    "describe_stub",
    "format_sections",
    "render_args",
    "render_value",
    "shorten",
    "unexpected_arguments_message",
]
