"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config
from ..adapters.config.parsers import parse_file

# Logging services
from ..adapters.logging.setup import init_logging

# Static conformance assertions - pyright verifies that each adapter function
# structurally satisfies its corresponding Protocol at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory import InMemorySources
    from ..application.ports import DisplayConfig, GetConfig, InitLogging, ParseSource

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_parse_source: ParseSource = parse_file
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    parse_source: ParseSource
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        parse_source=parse_file,
        init_logging=init_logging,
    )


def build_testing(*, sources: InMemorySources | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        sources: Optional in-memory file table used as the ParseSource port.
            When None, an empty table is created.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        InMemorySources,
        display_config_in_memory,
        get_config_in_memory,
        init_logging_in_memory,
    )

    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        parse_source=sources if sources is not None else InMemorySources(),
        init_logging=init_logging_in_memory,
    )


__all__ = [
    # Configuration
    "get_config",
    "display_config",
    "parse_file",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]
