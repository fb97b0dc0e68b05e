"""Domain layer - pure configuration-tree logic with no I/O or framework dependencies.

Contents:
    * :mod:`.values` - Value model (ConfigNode, ConfigList, DeferredValue, Accessor, RawValue)
    * :mod:`.structural` - clone, equality and diff helpers
    * :mod:`.merge` - Layered merge engine and deferred resolution
    * :mod:`.immutability` - In-place freezing of configuration trees
    * :mod:`.watch` - Observer registry for pre-freeze changes
    * :mod:`.enums` - Domain enumerations (ValueKind, OutputFormat)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .enums import OutputFormat, ValueKind
from .errors import (
    ConfigError,
    ImmutableConfigError,
    MalformedSourceError,
    NotDefinedError,
    RecursionLimitExceededError,
    SourceReadError,
    StrictnessViolationError,
)
from .immutability import make_immutable
from .merge import extend_deep, merge_layers, resolve_deferred_configs, set_path, split_path
from .structural import MAX_DEPTH, clone_deep, diff_deep, equals_deep, is_object
from .values import (
    MISSING,
    Accessor,
    ConfigList,
    ConfigNode,
    ConfigSource,
    DeferredValue,
    RawValue,
    defer_config,
    raw,
    value_kind,
)
from .watch import WatchRegistry

__all__ = [
    # Values
    "MISSING",
    "Accessor",
    "ConfigList",
    "ConfigNode",
    "ConfigSource",
    "DeferredValue",
    "RawValue",
    "defer_config",
    "raw",
    "value_kind",
    # Structural
    "MAX_DEPTH",
    "clone_deep",
    "diff_deep",
    "equals_deep",
    "is_object",
    # Merge
    "extend_deep",
    "merge_layers",
    "resolve_deferred_configs",
    "set_path",
    "split_path",
    # Immutability
    "make_immutable",
    # Watch
    "WatchRegistry",
    # Enums
    "OutputFormat",
    "ValueKind",
    # Errors
    "ConfigError",
    "ImmutableConfigError",
    "MalformedSourceError",
    "NotDefinedError",
    "RecursionLimitExceededError",
    "SourceReadError",
    "StrictnessViolationError",
]
