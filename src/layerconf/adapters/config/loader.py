"""Production wiring of the configuration loader.

Builds a fresh :class:`~layerconf.application.config.Config` on every call:
parameters are discovered from the given arguments and environment, files
are parsed by :func:`~layerconf.adapters.config.parsers.parse_file`, and the
post-load strictness checks run before the instance is returned.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from ...application.config import Config
from ...application.loading import LoadResult, load_file_configs
from .parsers import parse_file
from .settings import LoaderSettings


def load_settings(
    *,
    config_dir: str | Path | None = None,
    environment: str | None = None,
    instance: str | None = None,
    strict: bool | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> LoaderSettings:
    """Discover loader settings and apply explicit keyword overrides on top.

    Example:
        >>> settings = load_settings(environment="qa", argv=[], environ={})
        >>> settings.environment
        'qa'
    """
    settings = LoaderSettings.from_process(argv=argv, environ=environ)
    updates: dict[str, object] = {}
    if config_dir is not None:
        updates["config_dir"] = Path(config_dir).resolve()
    if environment is not None:
        updates["environment"] = environment
    if instance is not None:
        updates["instance"] = instance
    if strict is not None:
        updates["strict_mode"] = strict
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def get_config(
    *,
    config_dir: str | Path | None = None,
    environment: str | None = None,
    instance: str | None = None,
    strict: bool | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load the layered configuration for the running process.

    Explicit keyword arguments win over discovered parameters. Each call
    returns an independent instance; nothing is cached between calls.

    Args:
        config_dir: Directory holding the configuration files.
        environment: Deployment discriminator.
        instance: Instance discriminator.
        strict: Force strict mode on or off.
        argv: Arguments scanned for ``--NAME=value`` parameters.
            Defaults to ``sys.argv[1:]``.
        environ: Environment mapping. Defaults to ``os.environ``.

    Raises:
        MalformedSourceError: A file exists but cannot be parsed.
        SourceReadError: A file exists but cannot be read.
        StrictnessViolationError: Strict mode is on and a check failed.

    Example:
        >>> config = get_config(config_dir="does-not-exist", argv=[], environ={"LAYERCONF_SUPPRESS_NO_CONFIG_WARNING": "1"})
        >>> config.to_object()
        {}
    """
    settings = load_settings(
        config_dir=config_dir,
        environment=environment,
        instance=instance,
        strict=strict,
        argv=argv,
        environ=environ,
    )
    return Config.load(settings.to_context(), parse_file)


def load_directory(config: Config, config_dir: str | Path) -> LoadResult:
    """Load *config_dir* with the discriminators of *config*, without overrides."""
    return load_file_configs(config.context, parse_file, config_dir=config_dir)


__all__ = [
    "get_config",
    "load_directory",
    "load_settings",
]
