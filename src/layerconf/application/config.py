"""Public facade over one layered configuration tree.

A :class:`Config` owns its root node, the ordered log of contributing
sources, a snapshot of the discovered parameters and an observer registry.
Nothing is shared between instances, so tests can build as many
independent configurations as they need.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import orjson

from ..domain.enums import ValueKind
from ..domain.errors import ConfigError, NotDefinedError, RecursionLimitExceededError
from ..domain.immutability import make_immutable
from ..domain.merge import extend_deep, resolve_deferred_configs, set_path, split_path
from ..domain.structural import MAX_DEPTH, clone_deep, is_object, raw_entries
from ..domain.values import MISSING, ConfigNode, ConfigSource, RawValue, value_kind
from ..domain.watch import WatchHandler, WatchRegistry
from .context import LoadContext
from .loading import load_file_configs
from .ports import ParseSource
from .strictness import run_strictness_checks, warn_if_empty

logger = logging.getLogger(__name__)

MODULE_DEFAULTS_SOURCE = "Module Defaults"

ConfigPath = str | Sequence[str]


class Config:
    """Read-mostly view of a merged configuration.

    The first successful :meth:`get` freezes the whole tree unless the
    context allows mutations. Registering module defaults re-arms that
    freeze so late registrations are frozen on the next read.

    Example:
        >>> config = Config.from_layers([{"db": {"port": 5432}}, {"db": {"port": 5433, "host": "x"}}])
        >>> config.get("db.port")
        5433
        >>> config.has("db.missing")
        False
        >>> config.get("db.missing")
        Traceback (most recent call last):
        ...
        layerconf.domain.errors.NotDefinedError: Configuration property "db.missing" is not defined
    """

    def __init__(
        self,
        root: ConfigNode | None = None,
        *,
        sources: Iterable[ConfigSource] = (),
        context: LoadContext | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> None:
        self._root = root if root is not None else ConfigNode()
        self._sources = list(sources)
        self._context = context if context is not None else LoadContext()
        self._parameters: dict[str, Any] = {**self._context.parameters, **(parameters or {})}
        self._watchers = WatchRegistry()
        self._check_mutability = True

    @classmethod
    def load(cls, context: LoadContext, parse_source: ParseSource) -> Config:
        """Load files and overrides for *context*, then run the post-load checks.

        Raises:
            MalformedSourceError: A file exists but cannot be parsed.
            SourceReadError: A file exists but cannot be read.
            StrictnessViolationError: Strict mode is on and a check failed.
        """
        result = load_file_configs(context, parse_source)
        config = cls(result.root, sources=result.sources, context=context, parameters=result.parameters)
        run_strictness_checks(context, config.get_config_sources())
        warn_if_empty(context, config.root)
        return config

    @classmethod
    def from_layers(cls, layers: Iterable[Mapping[str, Any] | None], *, context: LoadContext | None = None) -> Config:
        """Build a configuration from in-memory layers, lowest precedence first."""
        root = ConfigNode()
        sources: list[ConfigSource] = []
        for index, layer in enumerate(layers):
            if layer is None:
                continue
            extend_deep(root, layer)
            sources.append(ConfigSource(f"layer[{index}]", layer))
        resolve_deferred_configs(root)
        return cls(root, sources=sources, context=context)

    @property
    def root(self) -> ConfigNode:
        return self._root

    @property
    def context(self) -> LoadContext:
        return self._context

    def get(self, path: ConfigPath | None) -> Any:
        """Return the value at *path*, freezing the tree on the first successful read.

        A :class:`~layerconf.domain.values.RawValue` is unwrapped, so the
        caller receives the live object itself.

        Args:
            path: Dotted string (``"db.port"``) or sequence of keys. Digit
                segments index into lists.

        Raises:
            ValueError: If *path* is None.
            NotDefinedError: If nothing is stored at *path*.
        """
        if path is None:
            raise ValueError("Calling config.get with null or undefined argument")
        value = self._lookup(path)
        if value is MISSING:
            raise NotDefinedError(_display_path(path))

        if self._check_mutability:
            self._check_mutability = False
            if not self._context.allow_mutations:
                make_immutable(self._root)
                value = self._lookup(path)
        if isinstance(value, RawValue):
            return value.value
        return value

    def has(self, path: ConfigPath | None) -> bool:
        """Return True when a value (possibly None) is stored at *path*; never raises."""
        if path is None:
            return False
        return self._lookup(path) is not MISSING

    def __getitem__(self, path: ConfigPath) -> Any:
        return self.get(path)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, list, tuple)):
            return False
        return self.has(path)

    def set(self, path: ConfigPath, value: Any) -> RecursionLimitExceededError | None:
        """Assign *value* at *path* before the tree is frozen and notify watchers.

        Returns:
            None, or the error reported by the observer registry when
            handlers kept re-triggering the change.

        Raises:
            ImmutableConfigError: If the target is already frozen.
        """
        keys = split_path(path)
        old = self._lookup(keys)
        set_path(self._root, keys, value)
        return self._watchers.notify(".".join(keys), None if old is MISSING else old, value)

    def watch(self, path: ConfigPath, handler: WatchHandler) -> Callable[[], None]:
        """Register ``handler(path, old, new)`` for changes made through :meth:`set`.

        Returns:
            A callable that removes the handler again.
        """
        return self._watchers.watch(".".join(split_path(path)), handler)

    def set_module_defaults(self, name: str, defaults: Mapping[str, Any]) -> ConfigNode:
        """Register library defaults under *name*; values already configured win.

        The defaults are recorded in the ``"Module Defaults"`` source at the
        front of the source log. On a frozen tree only missing keys are
        grafted in, and the next read freezes them.

        Returns:
            The module's configuration node.

        Raises:
            ConfigError: If *name* already holds a non-mapping value.
        """
        module_config = clone_deep(defaults)

        if not self._sources or self._sources[0].name != MODULE_DEFAULTS_SOURCE:
            self._sources.insert(0, ConfigSource(MODULE_DEFAULTS_SOURCE, ConfigNode()))
        recorded = self._sources[0].parsed
        if isinstance(recorded, ConfigNode):
            recorded[name] = extend_deep(ConfigNode(), defaults)

        current = self._root.raw(name)
        if current is MISSING or current is None:
            current = ConfigNode()
            if self._root.is_frozen() and name not in self._root:
                self._root.attach(name, current)
            else:
                self._root.define(name, current)
        elif not is_object(current):
            raise ConfigError(f"Cannot set module defaults for {name!r}: existing value is not a mapping")

        extend_deep(module_config, current)
        if isinstance(current, ConfigNode) and current.is_frozen():
            _graft(current, module_config)
        else:
            extend_deep(current, module_config)

        if not self._context.allow_mutations:
            self._check_mutability = True
        logger.debug("Registered module defaults", extra={"module": name})
        return current

    def get_config_sources(self) -> list[ConfigSource]:
        """Return a shallow copy of the ordered source log."""
        return list(self._sources)

    def get_env(self, name: str) -> Any:
        """Return the recorded value of a loader parameter, or None."""
        return self._parameters.get(name)

    def to_object(self, node: Any = None) -> Any:
        """Return a plain JSON-compatible deep copy of the tree (or *node*).

        Values that cannot survive a JSON round trip (callables, binary data,
        opaque objects) are dropped from mappings and become None in lists.
        Dates become ISO 8601 strings.

        Example:
            >>> import datetime as dt
            >>> Config.from_layers([{"when": dt.date(2024, 1, 2), "fn": print}]).to_object()
            {'when': '2024-01-02'}
        """
        target = self._root if node is None else node
        plain = _jsonable(target, MAX_DEPTH)
        return orjson.loads(orjson.dumps(None if plain is MISSING else plain))

    def make_immutable(self, node: Mapping[str, Any] | None = None) -> ConfigNode:
        """Freeze the whole tree now (or only *node*)."""
        if node is None:
            self._check_mutability = False
            return make_immutable(self._root)
        return make_immutable(node)

    def with_overrides(self, overrides: Mapping[str, Any], *, source_name: str = "--set overrides") -> Config:
        """Return a new configuration with *overrides* merged on top.

        The receiver is left untouched, even when it is already frozen.
        """
        root = clone_deep(self._root)
        extend_deep(root, overrides)
        sources = [*self._sources, ConfigSource(source_name, overrides)]
        return Config(root, sources=sources, context=self._context, parameters=self._parameters)

    def _lookup(self, path: ConfigPath) -> Any:
        keys = split_path(path)
        if not keys:
            return MISSING
        current: Any = self._root
        for key in keys:
            if isinstance(current, RawValue):
                current = current.value
            if isinstance(current, Mapping):
                if key not in current:
                    return MISSING
                current = current[key]
            elif isinstance(current, (list, tuple)) and key.isdigit():
                index = int(key)
                if index >= len(current):
                    return MISSING
                current = current[index]
            else:
                return MISSING
        return current


def _display_path(path: ConfigPath) -> str:
    if isinstance(path, str):
        return path
    return ".".join(str(part) for part in path)


def _graft(node: ConfigNode, defaults: Mapping[str, Any]) -> None:
    for key, entry in raw_entries(defaults):
        existing = node.raw(key)
        if existing is MISSING:
            node.attach(key, entry)
        elif isinstance(existing, ConfigNode) and is_object(entry):
            if existing.is_frozen():
                _graft(existing, entry)
            else:
                extend_deep(existing, {k: v for k, v in raw_entries(entry) if k not in existing})


def _jsonable(value: Any, depth: int) -> Any:
    if depth < 0:
        return MISSING
    if isinstance(value, RawValue):
        value = value.value
    kind = value_kind(value)
    if kind is ValueKind.NODE:
        plain: dict[str, Any] = {}
        for key in value:
            item = _jsonable(value[key], depth - 1)
            if item is not MISSING:
                plain[str(key)] = item
        return plain
    if kind is ValueKind.SEQUENCE:
        items = [_jsonable(item, depth - 1) for item in value]
        return [None if item is MISSING else item for item in items]
    if kind is ValueKind.DATE:
        return value.isoformat()
    if kind is ValueKind.REGEX:
        return {}
    if kind is ValueKind.SCALAR and (value is None or isinstance(value, (str, bool, int, float))):
        return value
    return MISSING


__all__ = [
    "MODULE_DEFAULTS_SOURCE",
    "Config",
]
