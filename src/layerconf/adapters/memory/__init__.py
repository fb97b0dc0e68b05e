"""In-memory adapter implementations for testing.

Lightweight implementations of the application ports that operate entirely
in memory -- no filesystem, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.logging` - In-memory logging adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import InMemorySources, display_config_in_memory, get_config_in_memory
from .logging import init_logging_in_memory

# Static conformance assertions
if TYPE_CHECKING:
    from layerconf.application.ports import DisplayConfig, GetConfig, InitLogging, ParseSource

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_parse_source: ParseSource = InMemorySources()

__all__ = [
    "InMemorySources",
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
]
