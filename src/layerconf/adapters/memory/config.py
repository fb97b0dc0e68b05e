"""In-memory configuration adapters for testing.

Satisfy the same Protocols as the production adapters without touching the
filesystem, the process environment or the console.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ...application.config import Config
from ...application.context import LoadContext
from ...domain.enums import OutputFormat
from ...domain.values import ConfigSource


class InMemorySources:
    """Dictionary of parsed sources keyed by file name, usable as a ParseSource.

    Example:
        >>> sources = InMemorySources({"default.json": {"db": {"port": 5432}}})
        >>> sources(Path("config/default.json")).parsed
        {'db': {'port': 5432}}
        >>> sources(Path("config/local.json")) is None
        True
    """

    def __init__(self, files: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self.files: dict[str, Mapping[str, Any]] = dict(files or {})
        self.requested: list[Path] = []

    def __call__(self, path: Path, *, skip_gitcrypt: bool = False) -> ConfigSource | None:
        self.requested.append(path)
        parsed = self.files.get(path.name)
        if parsed is None:
            return None
        return ConfigSource(name=str(path), parsed=parsed)


def get_config_in_memory(
    *,
    config_dir: str | Path | None = None,
    environment: str | None = None,
    instance: str | None = None,
    strict: bool | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Return an empty configuration carrying the requested discriminators."""
    context = LoadContext(
        config_dir=Path(config_dir) if config_dir is not None else Path("config"),
        environment=environment or "development",
        instance=instance,
        strict_mode=bool(strict),
    )
    return Config(context=context)


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
) -> None:
    """No-op display -- satisfies the DisplayConfig protocol."""


__all__ = [
    "InMemorySources",
    "display_config_in_memory",
    "get_config_in_memory",
]
