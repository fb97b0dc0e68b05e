"""Layered merge engine and the deferred-value resolution pass.

``extend_deep`` applies sources onto a destination left to right; later
sources win on conflicting leaves while nested mappings are merged key by
key. ``resolve_deferred_configs`` then replaces every remaining
:class:`~layerconf.domain.values.DeferredValue` exactly once.
"""

from __future__ import annotations

import dataclasses
import math
import numbers
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

from .enums import ValueKind
from .structural import MAX_DEPTH, clone_deep, is_object, raw_entries, raw_entry
from .values import MISSING, ConfigNode, DeferredValue, value_kind

_COPIED_KINDS = (ValueKind.NODE, ValueKind.SEQUENCE)


def extend_deep(destination: MutableMapping[str, Any], *sources: Any, depth: int | None = None) -> MutableMapping[str, Any]:
    """Merge *sources* into *destination* and return *destination*.

    A trailing positional number (not a ``bool``) is taken as the depth
    budget, so ``extend_deep(dest, a, b, 5)`` equals
    ``extend_deep(dest, a, b, depth=5)``. Sources that are not mappings,
    ``None`` included, are skipped. Containers and deferred values are copied
    on the way in, so a source is never modified by the merge and mutating
    it later never leaks into the destination.

    Raises:
        ImmutableConfigError: When a merge writes into a frozen entry.

    Example:
        >>> merged = extend_deep({}, {"db": {"port": 5432, "host": "a"}}, {"db": {"port": 5433}})
        >>> merged == {"db": {"port": 5433, "host": "a"}}
        True
        >>> extend_deep({"a": 1}, {"a": 2}, 1)
        {'a': 2}
    """
    layers = list(sources)
    if depth is None:
        depth = _coerce_depth(layers.pop()) if layers and _is_depth(layers[-1]) else MAX_DEPTH
    if depth < 0:
        return destination

    for source in layers:
        if not isinstance(source, Mapping):
            continue
        for key, incoming in raw_entries(source):
            _merge_entry(destination, key, incoming, depth)
    return destination


def _is_depth(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _coerce_depth(value: numbers.Real) -> int:
    number = float(value)
    if math.isnan(number):
        return MAX_DEPTH
    if math.isinf(number):
        return MAX_DEPTH if number > 0 else -1
    return int(number)


def _merge_entry(destination: MutableMapping[str, Any], key: str, incoming: Any, depth: int) -> None:
    existing = raw_entry(destination, key)
    existing_deferred = isinstance(existing, DeferredValue)
    kind = value_kind(incoming)

    if kind is ValueKind.DEFERRED:
        original = incoming.original
        if existing is not MISSING:
            original = existing.original if existing_deferred else existing
        incoming = dataclasses.replace(incoming, original=original)

    if kind in (ValueKind.DATE, ValueKind.REGEX):
        _define(destination, key, incoming)
    elif is_object(existing) and kind is ValueKind.NODE and not existing_deferred:
        extend_deep(existing, incoming, depth=depth - 1)
    elif kind in _COPIED_KINDS or isinstance(incoming, bytearray):
        _define(destination, key, clone_deep(incoming, depth - 1))
    else:
        _define(destination, key, incoming)


def _define(node: MutableMapping[str, Any], key: str, entry: Any) -> None:
    if isinstance(node, ConfigNode):
        node.define(key, entry)
    else:
        node[key] = entry


def set_path(node: MutableMapping[str, Any], path: str | Sequence[str], value: Any) -> None:
    """Set *value* at *path*, creating intermediate nodes as needed.

    ``None`` values and empty paths are ignored.

    Example:
        >>> target = {}
        >>> set_path(target, "db.replica.host", "r1")
        >>> target == {"db": {"replica": {"host": "r1"}}}
        True
    """
    keys = split_path(path)
    if value is None or not keys:
        return
    current = node
    for key in keys[:-1]:
        if key not in current:
            current[key] = ConfigNode()
        current = current[key]
    current[keys[-1]] = value


def split_path(path: str | Sequence[str]) -> list[str]:
    """Normalise a dotted string or key sequence into a list of keys.

    Example:
        >>> split_path("db.port")
        ['db', 'port']
        >>> split_path(["db", "port"])
        ['db', 'port']
        >>> split_path("")
        []
    """
    if isinstance(path, str):
        return [part for part in path.split(".") if part]
    return [str(part) for part in path]


def resolve_deferred_configs(root: MutableMapping[str, Any]) -> int:
    """Replace every deferred value reachable from *root* with its resolution.

    Keys are visited in sorted order and sequences in index order. The sweep
    runs once: a resolver that reads a sibling which is still deferred sees
    the placeholder, not its value.

    Returns:
        Number of deferred values resolved.

    Example:
        >>> from layerconf.domain.values import defer_config
        >>> cfg = {"name": "svc", "banner": defer_config(lambda root, original: f"hello {root['name']}")}
        >>> resolve_deferred_configs(cfg)
        1
        >>> cfg["banner"]
        'hello svc'
    """
    return _resolve_node(root, root)


def _resolve_node(node: MutableMapping[str, Any], root: Any) -> int:
    resolved = 0
    keys = sorted(key for key, entry in raw_entries(node) if entry is not None)
    for key in keys:
        entry = raw_entry(node, key)
        kind = value_kind(entry)
        if kind is ValueKind.NODE:
            resolved += _resolve_node(entry, root)
        elif kind is ValueKind.SEQUENCE:
            resolved += _resolve_sequence(entry, root)
        elif kind is ValueKind.DEFERRED:
            _define(node, key, entry.resolve(root))
            resolved += 1
    return resolved


def _resolve_sequence(items: Any, root: Any) -> int:
    resolved = 0
    for index, item in enumerate(items):
        kind = value_kind(item)
        if kind is ValueKind.DEFERRED:
            if not isinstance(items, list):
                continue
            items[index] = item.resolve(root)
            resolved += 1
        elif kind is ValueKind.NODE:
            resolved += _resolve_node(item, root)
        elif kind is ValueKind.SEQUENCE:
            resolved += _resolve_sequence(item, root)
    return resolved


def merge_layers(layers: Sequence[Mapping[str, Any]]) -> ConfigNode:
    """Merge *layers* in order into a fresh :class:`ConfigNode` and resolve deferred values.

    Example:
        >>> root = merge_layers([{"db": {"port": 5432}}, {"db": {"port": 5433, "host": "x"}}])
        >>> root["db"]["port"], root["db"]["host"]
        (5433, 'x')
    """
    root = ConfigNode()
    extend_deep(root, *layers, depth=MAX_DEPTH)
    resolve_deferred_configs(root)
    return root


__all__ = [
    "extend_deep",
    "merge_layers",
    "resolve_deferred_configs",
    "set_path",
    "split_path",
]
