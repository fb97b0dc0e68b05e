"""Application ports - callable Protocol definitions for adapter functions.

Each Protocol class defines a ``__call__`` method whose signature matches the
corresponding adapter function. Module-level adapter functions satisfy these
protocols through structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. The facade type ``Config`` is imported
    under ``TYPE_CHECKING`` only so the layering stays acyclic at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..domain.enums import OutputFormat
from ..domain.values import ConfigSource

if TYPE_CHECKING:
    from .config import Config


class ParseSource(Protocol):
    """Read and parse one configuration file; None when it should be skipped."""

    def __call__(self, path: Path, *, skip_gitcrypt: bool = ...) -> ConfigSource | None: ...


class GetConfig(Protocol):
    """Load the layered configuration for the running process."""

    def __call__(
        self,
        *,
        config_dir: str | Path | None = ...,
        environment: str | None = ...,
        instance: str | None = ...,
        strict: bool | None = ...,
        argv: Sequence[str] | None = ...,
        environ: Mapping[str, str] | None = ...,
    ) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ...) -> None: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "DisplayConfig",
    "GetConfig",
    "InitLogging",
    "ParseSource",
]
