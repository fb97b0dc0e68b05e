"""Value model for layered configuration trees.

Configuration trees are built from a small set of value kinds. Containers
that the engine owns are :class:`ConfigNode` (mapping) and :class:`ConfigList`
(sequence); both support freezing in place so references handed out before
the first read stay valid after the tree becomes immutable. Three wrapper
kinds carry their tag explicitly:

* :class:`DeferredValue` - placeholder resolved once against the fully
  merged root.
* :class:`Accessor` - computed entry whose getter runs on every read.
* :class:`RawValue` - live object (a client or a stream) the engine must
  not copy or freeze; :meth:`Config.get` hands out the wrapped object.

Contents:
    * :data:`MISSING` - sentinel for "no value" distinct from ``None``.
    * :func:`value_kind` - classify any value into a :class:`ValueKind`.
    * :func:`defer_config` - convenience constructor for deferred values.
    * :func:`raw` - convenience constructor for raw values.
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Final, Literal, SupportsIndex

from .enums import ValueKind
from .errors import ImmutableConfigError


class _MissingType(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _MissingType.MISSING
"""Sentinel marking an absent value; ``None`` is a legitimate configuration value."""

Missing = Literal[_MissingType.MISSING]

DeferredResolver = Callable[[Any, Any], Any]
"""Callable invoked as ``resolver(root, original)`` during resolution."""


@dataclass(eq=False, slots=True)
class DeferredValue:
    """Placeholder whose final value depends on the fully merged configuration.

    Attributes:
        resolver: Called once as ``resolver(root, original)``.
        original: Value this placeholder overrides. The merge engine keeps it
            current so layered deferred values compose.

    Example:
        >>> deferred = DeferredValue(lambda root, original: f"{root['host']}:{original}", original=80)
        >>> deferred.resolve({"host": "db"})
        'db:80'
        >>> deferred.kind
        <ValueKind.DEFERRED: 'deferred'>
    """

    resolver: DeferredResolver
    original: Any = None

    kind: ClassVar[ValueKind] = ValueKind.DEFERRED

    def resolve(self, root: Any) -> Any:
        """Evaluate the resolver against *root*."""
        return self.resolver(root, self.original)


def defer_config(resolver: DeferredResolver) -> DeferredValue:
    """Wrap *resolver* so its value is computed after all layers are merged.

    Intended for Python configuration modules::

        config = {
            "site": {"title": "Demo"},
            "header": defer_config(lambda cfg, original: f"Welcome to {cfg['site']['title']}"),
        }

    Example:
        >>> value = defer_config(lambda cfg, original: cfg["a"] * 2)
        >>> value.resolve({"a": 21})
        42
    """
    return DeferredValue(resolver)


@dataclass(frozen=True, slots=True)
class Accessor:
    """Computed configuration entry.

    Reading the owning key calls ``getter()``; writing calls ``setter(value)``
    when one is provided. Merging and cloning copy the accessor itself, so a
    computed entry stays computed in the merged tree.

    Example:
        >>> node = ConfigNode()
        >>> node.define("answer", Accessor(lambda: 42))
        >>> node["answer"]
        42
    """

    getter: Callable[[], Any]
    setter: Callable[[Any], None] | None = None

    kind: ClassVar[ValueKind] = ValueKind.ACCESSOR

    def get(self) -> Any:
        """Return the current computed value."""
        return self.getter()


@dataclass(frozen=True, eq=False, slots=True)
class RawValue:
    """Wrapper that keeps a live object out of cloning, merging and freezing.

    The wrapper is stored by reference and replaced as a whole when a later
    layer sets the same key. Freezing leaves the entry writable and never
    touches the wrapped object.

    Example:
        >>> import threading
        >>> lock = threading.Lock()
        >>> raw(lock).value is lock
        True
        >>> raw(lock).kind
        <ValueKind.RAW: 'raw'>
    """

    value: Any

    kind: ClassVar[ValueKind] = ValueKind.RAW


def raw(value: Any) -> RawValue:
    """Mark *value* to be passed through the engine untouched.

    Intended for Python configuration modules that need to expose a live
    object::

        config = {"db": {"pool": raw(create_pool())}}
    """
    return RawValue(value)


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One contributing layer of the merged configuration.

    Attributes:
        name: File path or pseudo-source label such as ``"Module Defaults"``.
        parsed: Mapping the source contributed.
        original_text: Raw file content, when the source came from a file.
    """

    name: str
    parsed: Mapping[str, Any]
    original_text: str | None = None


class ConfigNode(MutableMapping[str, Any]):
    """Mutable mapping that can be frozen key by key.

    Frozen keys can be neither reassigned nor deleted. A sealed node also
    rejects new keys through the mapping API. Both states are permanent.

    Example:
        >>> node = ConfigNode({"port": 5432})
        >>> node.freeze_key("port")
        >>> node.seal()
        >>> node["port"] = 1
        Traceback (most recent call last):
        ...
        layerconf.domain.errors.ImmutableConfigError: Cannot modify immutable configuration property 'port'
        >>> node == {"port": 5432}
        True
    """

    __slots__ = ("_entries", "_frozen_keys", "_sealed")

    def __init__(self, data: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None, /, **kwargs: Any) -> None:
        self._entries: dict[str, Any] = {}
        self._frozen_keys: set[str] = set()
        self._sealed = False
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    def __getitem__(self, key: str) -> Any:
        entry = self._entries[key]
        if isinstance(entry, Accessor):
            return entry.get()
        return entry

    def __setitem__(self, key: str, value: Any) -> None:
        self._ensure_writable(key)
        entry = self._entries.get(key, MISSING)
        if isinstance(entry, Accessor) and entry.setter is not None:
            entry.setter(value)
            return
        self._entries[key] = value

    def __delitem__(self, key: str) -> None:
        if key in self._frozen_keys:
            raise ImmutableConfigError(key)
        if self._sealed:
            raise ImmutableConfigError(key, f"Cannot delete property {key!r} from a frozen configuration node")
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"ConfigNode({self._entries!r})"

    def raw(self, key: str, default: Any = MISSING) -> Any:
        """Return the stored entry for *key* without evaluating accessors."""
        return self._entries.get(key, default)

    def raw_items(self) -> list[tuple[str, Any]]:
        """Snapshot of ``(key, entry)`` pairs with accessors left unevaluated."""
        return list(self._entries.items())

    def define(self, key: str, entry: Any) -> None:
        """Store *entry* verbatim, bypassing accessor setters.

        Raises:
            ImmutableConfigError: If *key* is frozen, or new on a sealed node.
        """
        self._ensure_writable(key)
        self._entries[key] = entry

    def attach(self, key: str, value: Any) -> None:
        """Add a key that does not exist yet, even on a sealed node.

        Used to graft late module defaults onto an already frozen tree.
        Existing keys are never replaced.

        Raises:
            ImmutableConfigError: If *key* already exists.
        """
        if key in self._entries:
            raise ImmutableConfigError(key, f"Cannot attach {key!r}: property already defined")
        self._entries[key] = value

    def freeze_key(self, key: str) -> None:
        """Make *key* permanently non-writable and non-deletable."""
        if key in self._entries:
            self._frozen_keys.add(key)

    def is_frozen(self, key: str | None = None) -> bool:
        """Return whether *key* is frozen, or whether the node is sealed when no key is given."""
        if key is None:
            return self._sealed
        return key in self._frozen_keys

    def seal(self) -> None:
        """Reject key additions and deletions from now on."""
        self._sealed = True

    def _ensure_writable(self, key: str) -> None:
        if key in self._frozen_keys:
            raise ImmutableConfigError(key)
        if self._sealed and key not in self._entries:
            raise ImmutableConfigError(key, f"Cannot add property {key!r} to a frozen configuration node")


class ConfigList(list[Any]):
    """List that rejects every mutation once frozen.

    Example:
        >>> items = ConfigList([1, 2])
        >>> items.freeze()
        >>> items.append(3)
        Traceback (most recent call last):
        ...
        layerconf.domain.errors.ImmutableConfigError: Cannot modify a frozen configuration list
        >>> items == [1, 2]
        True
    """

    __slots__ = ("_frozen",)

    def __init__(self, items: Iterable[Any] = (), /) -> None:
        super().__init__(items)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise ImmutableConfigError(None, "Cannot modify a frozen configuration list")

    def __setitem__(self, index: Any, value: Any) -> None:
        self._ensure_mutable()
        super().__setitem__(index, value)

    def __delitem__(self, index: Any) -> None:
        self._ensure_mutable()
        super().__delitem__(index)

    def __iadd__(self, other: Iterable[Any]) -> ConfigList:  # type: ignore[override]
        self._ensure_mutable()
        return super().__iadd__(other)

    def __imul__(self, count: SupportsIndex) -> ConfigList:  # type: ignore[override]
        self._ensure_mutable()
        return super().__imul__(count)

    def append(self, value: Any) -> None:
        self._ensure_mutable()
        super().append(value)

    def extend(self, values: Iterable[Any]) -> None:
        self._ensure_mutable()
        super().extend(values)

    def insert(self, index: SupportsIndex, value: Any) -> None:
        self._ensure_mutable()
        super().insert(index, value)

    def pop(self, index: SupportsIndex = -1) -> Any:
        self._ensure_mutable()
        return super().pop(index)

    def remove(self, value: Any) -> None:
        self._ensure_mutable()
        super().remove(value)

    def clear(self) -> None:
        self._ensure_mutable()
        super().clear()

    def sort(self, *args: Any, **kwargs: Any) -> None:
        self._ensure_mutable()
        super().sort(*args, **kwargs)

    def reverse(self) -> None:
        self._ensure_mutable()
        super().reverse()


def value_kind(value: object) -> ValueKind:
    """Classify *value* into the tag the engine dispatches on.

    Example:
        >>> value_kind({"a": 1})
        <ValueKind.NODE: 'node'>
        >>> value_kind([1, 2])
        <ValueKind.SEQUENCE: 'sequence'>
        >>> value_kind("text")
        <ValueKind.SCALAR: 'scalar'>
        >>> value_kind(defer_config(lambda cfg, original: None))
        <ValueKind.DEFERRED: 'deferred'>
    """
    if isinstance(value, (DeferredValue, Accessor, RawValue)):
        return value.kind
    if value is None or isinstance(value, (str, bool, int, float)):
        return ValueKind.SCALAR
    if isinstance(value, Mapping):
        return ValueKind.NODE
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, (dt.date, dt.time)):
        return ValueKind.DATE
    if isinstance(value, re.Pattern):
        return ValueKind.REGEX
    if isinstance(value, (bytes, bytearray)):
        return ValueKind.BINARY
    return ValueKind.SCALAR


__all__ = [
    "MISSING",
    "Accessor",
    "ConfigList",
    "ConfigNode",
    "ConfigSource",
    "DeferredResolver",
    "DeferredValue",
    "Missing",
    "RawValue",
    "defer_config",
    "raw",
    "value_kind",
]
