"""Structural helpers over configuration trees: predicates, clone, equality, diff.

All recursive helpers are bounded by a depth budget (:data:`MAX_DEPTH`). On
overflow they truncate instead of raising so that pathological input
degrades to a partial result.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

from .enums import ValueKind
from .values import MISSING, ConfigList, ConfigNode, value_kind

MAX_DEPTH: Final[int] = 20
"""Default recursion budget for clone, merge, equality, diff and freezing."""


def is_object(value: object) -> bool:
    """Return True for mappings, the only kind the merge engine recurses into.

    Example:
        >>> is_object({"a": 1})
        True
        >>> is_object([1, 2])
        False
        >>> is_object(None)
        False
    """
    return isinstance(value, Mapping)


def raw_entries(node: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """Return ``(key, entry)`` pairs without evaluating accessors."""
    if isinstance(node, ConfigNode):
        return node.raw_items()
    return list(node.items())


def raw_entry(node: Mapping[str, Any], key: str) -> Any:
    """Return the stored entry for *key*, or :data:`MISSING`."""
    if isinstance(node, ConfigNode):
        return node.raw(key)
    if key in node:
        return node[key]
    return MISSING


def clone_deep(value: Any, depth: int = MAX_DEPTH, preserve_cycles: bool = True) -> Any:
    """Deep-copy *value* into engine-owned containers.

    Mappings become :class:`ConfigNode` (subclasses keep their type) and
    sequences become :class:`ConfigList`. Shared and cyclic references are
    reproduced in the copy unless *preserve_cycles* is False. Scalars,
    deferred values, raw values and accessors are returned as-is.

    Args:
        value: Tree (or leaf) to copy.
        depth: Remaining recursion budget; at zero the value itself is returned.
        preserve_cycles: Track visited containers by identity.

    Example:
        >>> shared = {"x": 1}
        >>> copy = clone_deep({"a": shared, "b": shared})
        >>> copy["a"] is copy["b"]
        True
        >>> copy["a"] is shared
        False
        >>> loop = {"name": "loop"}
        >>> loop["self"] = loop
        >>> cloned = clone_deep(loop)
        >>> cloned["self"] is cloned
        True
    """
    memo: dict[int, Any] | None = {} if preserve_cycles else None
    return _clone(value, depth, memo)


def _clone(value: Any, depth: int, memo: dict[int, Any] | None) -> Any:
    if depth == 0:
        return value
    kind = value_kind(value)
    if kind is ValueKind.DATE:
        return value.replace()
    if kind is ValueKind.REGEX:
        return re.compile(value.pattern, value.flags)
    if kind is ValueKind.BINARY:
        return bytearray(value) if isinstance(value, bytearray) else value
    if kind not in (ValueKind.NODE, ValueKind.SEQUENCE):
        return value

    if memo is not None and id(value) in memo:
        return memo[id(value)]

    if kind is ValueKind.NODE:
        node = type(value)() if isinstance(value, ConfigNode) else ConfigNode()
        if memo is not None:
            memo[id(value)] = node
        for key, entry in raw_entries(value):
            node.define(key, _clone(entry, depth - 1, memo))
        return node

    items = ConfigList()
    if memo is not None:
        memo[id(value)] = items
    for item in value:
        items.append(_clone(item, depth - 1, memo))
    return items


def equals_deep(first: Any, second: Any, depth: int = MAX_DEPTH) -> bool:
    """Structural equality over nested mappings and sequences.

    Booleans never equal numbers. Returns False once the depth budget is
    exhausted.

    Example:
        >>> equals_deep({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]})
        True
        >>> equals_deep({"a": 1}, {"a": 1, "b": 2})
        False
        >>> equals_deep(1, True), equals_deep(1, 1.0)
        (False, True)
    """
    if first is second:
        return True
    if depth < 0:
        return False
    if isinstance(first, bool) is not isinstance(second, bool):
        return False
    if isinstance(first, Mapping) and isinstance(second, Mapping):
        if set(first) != set(second):
            return False
        return all(equals_deep(first[key], second[key], depth - 1) for key in first)
    if _is_sequence(first) and _is_sequence(second):
        if len(first) != len(second):
            return False
        return all(equals_deep(a, b, depth - 1) for a, b in zip(first, second))
    if _is_sequence(first) or _is_sequence(second):
        return False
    return bool(first == second)


def diff_deep(base: Mapping[str, Any], changed: Mapping[str, Any], depth: int = MAX_DEPTH) -> ConfigNode:
    """Return the additive delta that turns *base* into *changed*.

    Only keys of *changed* that are new or differ are reported; deletions are
    not represented. Extending a clone of *base* with the result reproduces
    *changed* whenever no key of *base* was removed.

    Example:
        >>> delta = diff_deep({"db": {"host": "a", "port": 1}}, {"db": {"host": "a", "port": 2}, "debug": True})
        >>> delta == {"db": {"port": 2}, "debug": True}
        True
    """
    delta = ConfigNode()
    if depth < 0:
        return delta
    for key in changed:
        new = changed[key]
        old = base[key] if key in base else MISSING
        if is_object(new) and is_object(old):
            if not equals_deep(old, new, depth - 1):
                delta[key] = diff_deep(old, new, depth - 1)
        elif is_object(new):
            delta[key] = clone_deep(new, depth - 1)
        elif old is MISSING or not equals_deep(old, new, depth - 1):
            delta[key] = new
    return delta


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple))


__all__ = [
    "MAX_DEPTH",
    "clone_deep",
    "diff_deep",
    "equals_deep",
    "is_object",
    "raw_entries",
    "raw_entry",
]
