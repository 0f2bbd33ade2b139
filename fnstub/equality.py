"""Strict structural equality used to match stub arguments.

``deep_equal`` compares values by content rather than identity and never
coerces between types: ``1``, ``1.0``, ``True`` and ``"1"`` are all distinct.
Containers that refer back to themselves are handled by remembering which
pairs of containers are already being compared; a revisited pair is treated
as equal so the traversal terminates.
"""

from __future__ import annotations

import dataclasses as dc
import math
import types
import typing as t
from collections.abc import Mapping, Sequence, Set

_SCALAR_TYPES: t.Final[tuple[type, ...]] = (
    type(None),
    bool,
    int,
    complex,
    str,
    bytes,
    bytearray,
    range,
    type,
)

_IDENTITY_TYPES: t.Final[tuple[type, ...]] = (
    types.FunctionType,
    types.ModuleType,
)

_Visited = set[tuple[int, int]]


def deep_equal(left: object, right: object) -> bool:
    """Return ``True`` when *left* and *right* are structurally identical."""
    return _compare(left, right, set())


def args_equal(expected: t.Sequence[t.Any], received: t.Sequence[t.Any]) -> bool:
    """Return ``True`` when two positional argument lists match exactly."""
    return _compare(tuple(expected), tuple(received), set())


def _compare(left: object, right: object, visited: _Visited) -> bool:
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    if isinstance(left, float):
        return _floats_equal(left, t.cast("float", right))
    if isinstance(left, _SCALAR_TYPES):
        return left == right
    if isinstance(left, _IDENTITY_TYPES):
        return False

    pair = (id(left), id(right))
    if pair in visited:
        return True
    visited.add(pair)
    return _compare_composite(left, right, visited)


def _floats_equal(left: float, right: float) -> bool:
    """Compare floats by value, treating two NaNs as equal."""
    if math.isnan(left) and math.isnan(right):
        return True
    return left == right


def _compare_composite(left: object, right: object, visited: _Visited) -> bool:
    """Dispatch on the container protocol shared by *left* and *right*."""
    if isinstance(left, Mapping):
        return _compare_mappings(left, t.cast("Mapping[t.Any, t.Any]", right), visited)
    if isinstance(left, Set):
        right_set = t.cast("Set[t.Any]", right)
        return len(left) == len(right_set) and (
            _pair_members(left, right_set, visited) is not None
        )
    if isinstance(left, Sequence):
        return _compare_sequences(
            left, t.cast("Sequence[t.Any]", right), visited
        )
    if dc.is_dataclass(left):
        return all(
            _compare(getattr(left, f.name), getattr(right, f.name), visited)
            for f in dc.fields(left)
        )
    if isinstance(left, BaseException):
        return _compare(left.args, t.cast("BaseException", right).args, visited) and (
            _compare_attributes(left, right, visited)
        )
    if type(left).__eq__ is not object.__eq__:
        return bool(left == right)
    return _compare_attributes(left, right, visited)


def _compare_sequences(
    left: Sequence[t.Any], right: Sequence[t.Any], visited: _Visited
) -> bool:
    if len(left) != len(right):
        return False
    return all(
        _compare(a, b, visited) for a, b in zip(left, right, strict=True)
    )


def _pair_members(
    left: t.Iterable[t.Any], right: t.Iterable[t.Any], visited: _Visited
) -> list[tuple[t.Any, t.Any]] | None:
    """Pair each member of *left* with a distinct, strictly equal one of *right*.

    Hash lookups would let ``1``, ``1.0`` and ``True`` stand in for each
    other, so members are matched with :func:`_compare` instead. A failed
    trial must not leave its pairs in *visited*, hence the copy.
    """
    remaining = list(right)
    pairs: list[tuple[t.Any, t.Any]] = []
    for item in left:
        for index, candidate in enumerate(remaining):
            trial = set(visited)
            if _compare(item, candidate, trial):
                visited.update(trial)
                pairs.append((item, remaining.pop(index)))
                break
        else:
            return None
    return pairs


def _compare_mappings(
    left: Mapping[t.Any, t.Any], right: Mapping[t.Any, t.Any], visited: _Visited
) -> bool:
    if len(left) != len(right):
        return False
    pairs = _pair_members(left.keys(), right.keys(), visited)
    if pairs is None:
        return False
    return all(
        _compare(left[key], right[other], visited) for key, other in pairs
    )


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(
            name
            for name in slots
            if name not in {"__dict__", "__weakref__"} and name not in names
        )
    return names


def _instance_state(obj: object) -> dict[str, t.Any] | None:
    """Return the attributes held in ``__slots__`` and ``__dict__``.

    ``None`` means the object stores no per-instance state at all, in which
    case only its own ``__eq__`` can decide.
    """
    slots = _slot_names(type(obj))
    attrs = getattr(obj, "__dict__", None)
    if attrs is None and not slots:
        return None
    state = {name: getattr(obj, name) for name in slots if hasattr(obj, name)}
    if attrs is not None:
        state.update(attrs)
    return state


def _compare_attributes(left: object, right: object, visited: _Visited) -> bool:
    """Compare instance attributes of plain objects, ignoring identity."""
    left_attrs = _instance_state(left)
    right_attrs = _instance_state(right)
    if left_attrs is None or right_attrs is None:
        return left == right
    return _compare_mappings(left_attrs, right_attrs, visited)


__all__ = ["args_equal", "deep_equal"]
