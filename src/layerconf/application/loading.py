"""Orchestrates file discovery, parsing and layering into one root node."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..domain.merge import extend_deep, resolve_deferred_configs
from ..domain.values import ConfigNode, ConfigSource
from .context import LoadContext
from .ports import ParseSource
from .precedence import candidate_files

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadResult:
    """Merged root plus the ordered log of sources that built it."""

    root: ConfigNode
    sources: list[ConfigSource] = field(default_factory=list)
    parameters: dict[str, Any] = field(default_factory=dict)


def load_file_configs(context: LoadContext, parse_source: ParseSource, config_dir: str | Path | None = None) -> LoadResult:
    """Load every configuration file for *context* and merge them in precedence order.

    When *config_dir* is given it replaces the context directory and the
    environment and command-line overrides are not applied; they belong to
    the process configuration only.

    Args:
        context: Discriminators and flags of the running process.
        parse_source: Adapter that reads and parses a single file.
        config_dir: Optional directory to load instead of ``context.config_dir``.

    Returns:
        LoadResult with deferred values already resolved.

    Raises:
        MalformedSourceError: A file exists but cannot be parsed.
        SourceReadError: A file exists but cannot be read.
    """
    directory = Path(config_dir) if config_dir is not None else context.config_dir
    result = LoadResult(root=ConfigNode())

    for path in candidate_files(directory, context.environment, instance=context.instance, hostname=context.hostname):
        source = parse_source(path, skip_gitcrypt=context.skip_gitcrypt)
        if source is None:
            continue
        extend_deep(result.root, source.parsed)
        result.sources.append(source)
        logger.debug("Merged configuration file", extra={"source": source.name})

    if config_dir is None:
        _apply_overrides(context, result)

    resolved = resolve_deferred_configs(result.root)
    if resolved:
        logger.debug("Resolved deferred configuration values", extra={"count": resolved})
    return result


def _apply_overrides(context: LoadContext, result: LoadResult) -> None:
    overrides = (
        (context.env_source_name, context.env_override),
        (context.argv_source_name, context.argv_override),
    )
    combined = ConfigNode()
    for name, override in overrides:
        if override is None:
            continue
        extend_deep(result.root, override)
        result.sources.append(ConfigSource(name, override))
        extend_deep(combined, override)
        logger.debug("Applied configuration override", extra={"source": name})
    result.parameters[context.override_name] = combined


__all__ = [
    "LoadResult",
    "load_file_configs",
]
