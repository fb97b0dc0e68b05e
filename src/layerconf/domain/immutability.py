"""Retroactive, in-place freezing of configuration trees.

Freezing never replaces an engine-owned container, so every
:class:`ConfigNode` or :class:`ConfigList` reference a caller obtained before
the freeze observes the frozen state afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .enums import ValueKind
from .structural import MAX_DEPTH, clone_deep
from .values import MISSING, ConfigList, ConfigNode, value_kind


def make_immutable(
    node: Mapping[str, Any],
    keys: str | Sequence[str] | None = None,
    value: Any = MISSING,
    *,
    depth: int = MAX_DEPTH,
) -> ConfigNode:
    """Freeze *node* and, in the default mode, everything reachable from it.

    Default mode (``keys`` is None): every entry becomes non-writable and
    non-deletable, the node is sealed and the enforcer recurses into child
    nodes and lists. Plain ``dict``/``list`` children are adopted as engine
    containers first, accessors are flattened to their current value and
    entries still holding a deferred or raw value are left writable. A raw
    value is never looked into.

    Legacy mode: *keys* names one key (with an optional *value*) or a list of
    keys (with an optional parallel list of values). Each value is assigned,
    then the key is frozen. There is no recursion and no sealing.

    Plain mappings cannot be frozen in place; a frozen :class:`ConfigNode`
    copy is returned for them. Re-freezing is a no-op.

    Raises:
        ImmutableConfigError: If legacy mode assigns to an already frozen key.

    Example:
        >>> node = ConfigNode({"db": {"port": 5432}, "hosts": ["a"]})
        >>> db = node["db"]
        >>> _ = make_immutable(node)
        >>> db.is_frozen("port"), node["hosts"].frozen
        (True, True)
        >>> _ = make_immutable(node)
    """
    target = node if isinstance(node, ConfigNode) else clone_deep(node)

    if isinstance(keys, str):
        _freeze_entry(target, keys, value)
        return target
    if keys is not None:
        values = None if value is MISSING else list(value)
        for index, key in enumerate(keys):
            item = values[index] if values is not None and index < len(values) else MISSING
            _freeze_entry(target, key, item)
        return target

    _freeze_node(target, depth)
    return target


def _freeze_entry(node: ConfigNode, key: str, value: Any) -> None:
    if value is not MISSING:
        node.define(key, value)
    node.freeze_key(key)


def _adopt(entry: Any, kind: ValueKind) -> Any:
    if kind is ValueKind.NODE and not isinstance(entry, ConfigNode):
        return clone_deep(entry)
    if kind is ValueKind.SEQUENCE and not isinstance(entry, ConfigList):
        return clone_deep(entry)
    return entry


def _freeze_node(node: ConfigNode, depth: int) -> None:
    if depth < 0:
        return
    for key, raw in node.raw_items():
        entry = raw
        kind = value_kind(entry)
        if kind in (ValueKind.DEFERRED, ValueKind.RAW):
            continue
        if kind is ValueKind.ACCESSOR:
            entry = entry.get()
            kind = value_kind(entry)
        entry = _adopt(entry, kind)
        if entry is not raw and not node.is_frozen(key):
            node.define(key, entry)
        node.freeze_key(key)
        if kind is ValueKind.NODE and isinstance(entry, ConfigNode):
            _freeze_node(entry, depth - 1)
        elif kind is ValueKind.SEQUENCE and isinstance(entry, ConfigList):
            _freeze_list(entry, depth - 1)
    node.seal()


def _freeze_list(items: ConfigList, depth: int) -> None:
    if depth < 0:
        return
    holds_deferred = False
    for index, raw in enumerate(items):
        item = raw
        kind = value_kind(item)
        if kind is ValueKind.DEFERRED:
            holds_deferred = True
            continue
        if kind is ValueKind.ACCESSOR:
            item = item.get()
            kind = value_kind(item)
        item = _adopt(item, kind)
        if item is not raw and not items.frozen:
            items[index] = item
        if kind is ValueKind.NODE and isinstance(item, ConfigNode):
            _freeze_node(item, depth - 1)
        elif kind is ValueKind.SEQUENCE and isinstance(item, ConfigList):
            _freeze_list(item, depth - 1)
    if not holds_deferred:
        items.freeze()


__all__ = [
    "make_immutable",
]
