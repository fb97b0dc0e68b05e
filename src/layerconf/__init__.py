"""Layered configuration engine.

Builds one immutable configuration from ordered sources: module defaults,
per-environment, per-host and per-instance files, then environment and
command-line overrides. Values may be deferred until the whole tree is
merged, and the tree freezes on the first read.

Public surface:
    * :func:`get_config` - load the configuration of the running process
    * :class:`Config` - facade with ``get``/``has``/``set_module_defaults``
    * :func:`defer_config`, :func:`raw` and :class:`Accessor` - helpers for Python config files
    * :func:`extend_deep`, :func:`clone_deep`, :func:`equals_deep`,
      :func:`diff_deep`, :func:`make_immutable` - structural utilities
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Composition exports (wired adapters)
from .composition import get_config

# Application exports
from .application.config import Config
from .application.context import LoadContext

# Domain exports
from .domain.errors import (
    ConfigError,
    ImmutableConfigError,
    MalformedSourceError,
    NotDefinedError,
    RecursionLimitExceededError,
    SourceReadError,
    StrictnessViolationError,
)
from .domain.immutability import make_immutable
from .domain.merge import extend_deep, resolve_deferred_configs
from .domain.structural import clone_deep, diff_deep, equals_deep, is_object
from .domain.values import Accessor, ConfigList, ConfigNode, ConfigSource, DeferredValue, RawValue, defer_config, raw

__all__ = [
    "Accessor",
    "Config",
    "ConfigError",
    "ConfigList",
    "ConfigNode",
    "ConfigSource",
    "DeferredValue",
    "ImmutableConfigError",
    "LoadContext",
    "MalformedSourceError",
    "NotDefinedError",
    "RawValue",
    "RecursionLimitExceededError",
    "SourceReadError",
    "StrictnessViolationError",
    "clone_deep",
    "defer_config",
    "diff_deep",
    "equals_deep",
    "extend_deep",
    "get_config",
    "is_object",
    "make_immutable",
    "print_info",
    "raw",
    "resolve_deferred_configs",
]
