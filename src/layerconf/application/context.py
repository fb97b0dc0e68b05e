"""Construction context captured once per configuration instance."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_ENVIRONMENT = "development"


@dataclass(frozen=True, slots=True)
class LoadContext:
    """Everything the loader needs to know about the running process.

    Adapters build the context from command-line arguments and the
    environment; the application layer never reads process state itself,
    so two contexts produce two fully independent configurations.

    Attributes:
        config_dir: Directory scanned for configuration files.
        environment: Deployment discriminator (``development`` by default).
        instance: Optional instance discriminator.
        hostname: Host discriminator; empty when unknown.
        skip_gitcrypt: Skip git-crypt encrypted files instead of failing.
        strict_mode: Strictness violations raise instead of warning.
        allow_mutations: Never freeze the configuration on first read.
        suppress_no_config_warning: Silence the empty-configuration warning.
        env_override: Parsed environment-variable override, None when unset.
        argv_override: Parsed command-line override, None when unset.
        override_name: Name of the override variable and argument.
        parameters: Snapshot of every discovered parameter by name.

    Example:
        >>> ctx = LoadContext(config_dir=Path("config"), environment="production")
        >>> ctx.environment, ctx.instance
        ('production', None)
    """

    config_dir: Path = field(default_factory=lambda: Path("config"))
    environment: str = DEFAULT_ENVIRONMENT
    instance: str | None = None
    hostname: str = ""
    skip_gitcrypt: bool = False
    strict_mode: bool = False
    allow_mutations: bool = False
    suppress_no_config_warning: bool = False
    env_override: Mapping[str, Any] | None = None
    argv_override: Mapping[str, Any] | None = None
    override_name: str = "LAYERCONF"
    parameters: Mapping[str, Any] = field(default_factory=dict)

    @property
    def env_source_name(self) -> str:
        return f"${self.override_name}"

    @property
    def argv_source_name(self) -> str:
        return f"--{self.override_name} argument"


__all__ = [
    "DEFAULT_ENVIRONMENT",
    "LoadContext",
]
