"""Post-load sanity checks on the environment and instance discriminators."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import PurePath
from typing import Any

from ..domain.errors import StrictnessViolationError
from ..domain.values import ConfigSource
from .context import DEFAULT_ENVIRONMENT, LoadContext

logger = logging.getLogger(__name__)

AMBIGUOUS_ENVIRONMENTS = frozenset({"default", "local"})


def find_violations(context: LoadContext, sources: Sequence[ConfigSource]) -> list[str]:
    """Return a message for every strictness rule the loaded sources break.

    Example:
        >>> ctx = LoadContext(environment="qa")
        >>> find_violations(ctx, [ConfigSource("config/default.json", {})])
        ["environment value of 'qa' did not match any deployment config file names"]
        >>> find_violations(LoadContext(environment="default"), [ConfigSource("config/default.json", {})])
        ["environment value of 'default' is ambiguous"]
    """
    filenames = [PurePath(source.name).name for source in sources]
    violations: list[str] = []

    environment = context.environment
    if environment and environment != DEFAULT_ENVIRONMENT and not any(environment in name for name in filenames):
        violations.append(f"environment value of {environment!r} did not match any deployment config file names")

    instance = context.instance
    if instance and not any(instance in name for name in filenames):
        violations.append(f"instance value of {instance!r} did not match any instance config file names")

    if environment in AMBIGUOUS_ENVIRONMENTS:
        violations.append(f"environment value of {environment!r} is ambiguous")
    return violations


def run_strictness_checks(context: LoadContext, sources: Sequence[ConfigSource]) -> list[str]:
    """Log every strictness violation, or raise on the first one in strict mode.

    Returns:
        The violation messages that were logged.

    Raises:
        StrictnessViolationError: In strict mode, when any rule is broken.
    """
    violations = find_violations(context, sources)
    for message in violations:
        if context.strict_mode:
            logger.error(message, extra={"strict_mode": True})
            raise StrictnessViolationError(message)
        logger.warning(message, extra={"strict_mode": False})
    return violations


def warn_if_empty(context: LoadContext, root: Mapping[str, Any]) -> bool:
    """Warn when no configuration was found at all.

    Returns:
        True when the warning was emitted.
    """
    if root or context.suppress_no_config_warning:
        return False
    logger.warning(
        "No configurations found in configuration directory: %s",
        context.config_dir,
        extra={"config_dir": str(context.config_dir), "suppress_with": "LAYERCONF_SUPPRESS_NO_CONFIG_WARNING"},
    )
    return True


__all__ = [
    "AMBIGUOUS_ENVIRONMENTS",
    "find_violations",
    "run_strictness_checks",
    "warn_if_empty",
]
