"""Command-line ``--set SECTION.KEY=VALUE`` overrides.

Each override becomes one leaf of a nested mapping that is layered on top
of the loaded configuration as the ``--set overrides`` source.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import orjson

from ...application.config import Config
from ...domain.merge import set_path
from ...domain.values import ConfigNode


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """One parsed ``--set`` assignment."""

    path: tuple[str, ...]
    value: Any

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


def coerce_value(raw: str) -> Any:
    """Interpret *raw* as JSON when possible, otherwise keep the text.

    Examples:
        >>> coerce_value("5433"), coerce_value("false"), coerce_value("null")
        (5433, False, None)
        >>> coerce_value('{"size": 8}')
        {'size': 8}
        >>> coerce_value("replica-1")
        'replica-1'
        >>> coerce_value("")
        ''
    """
    if not raw:
        return raw
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return raw


def parse_override(raw: str) -> ConfigOverride:
    """Split ``SECTION.KEY[.SUBKEY...]=VALUE`` at the first ``=``.

    Raises:
        ValueError: Without ``=``, without a dot in the path, or with an
            empty path segment.

    Examples:
        >>> parse_override("db.pool.size=8")
        ConfigOverride(path=('db', 'pool', 'size'), value=8)
        >>> parse_override("db=1")
        Traceback (most recent call last):
        ...
        ValueError: Invalid override 'db=1': key must contain at least one dot (SECTION.KEY)
    """
    target, separator, text = raw.partition("=")
    if not separator:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")
    segments = tuple(target.split("."))
    if len(segments) < 2:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")
    if not all(segments):
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")
    return ConfigOverride(path=segments, value=coerce_value(text))


def build_override_layer(raw_overrides: Iterable[str]) -> ConfigNode:
    """Fold several ``--set`` strings into one nested layer; later strings win.

    A ``null`` value is kept as an explicit None leaf.

    Example:
        >>> layer = build_override_layer(["db.port=5433", "db.host=replica"])
        >>> layer == {"db": {"port": 5433, "host": "replica"}}
        True
    """
    layer = ConfigNode()
    for raw in raw_overrides:
        override = parse_override(raw)
        if override.value is None:
            parent = layer
            for segment in override.path[:-1]:
                parent = parent.setdefault(segment, ConfigNode())
            parent[override.path[-1]] = None
        else:
            set_path(layer, override.path, override.value)
    return layer


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Return *config* with the ``--set`` overrides layered on top.

    The original instance is returned unchanged when there is nothing to apply.

    Raises:
        ValueError: If any override string is malformed.

    Examples:
        >>> base = Config.from_layers([{"db": {"port": 5432}}])
        >>> apply_overrides(base, ("db.port=5433",)).get("db.port")
        5433
        >>> apply_overrides(base, ()) is base
        True
    """
    if not raw_overrides:
        return config
    return config.with_overrides(build_override_layer(raw_overrides))


__all__ = [
    "ConfigOverride",
    "apply_overrides",
    "build_override_layer",
    "coerce_value",
    "parse_override",
]
